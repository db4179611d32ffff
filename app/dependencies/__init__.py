from app.dependencies.auth import get_current_user, get_current_user_optional
from app.dependencies.playlists import get_owned_playlist

__all__ = [
    "get_current_user",
    "get_current_user_optional",
    "get_owned_playlist",
]
