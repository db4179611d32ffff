"""
Storage models for the Playlister API.

Relational (SQLAlchemy) tables are exported here; the Beanie documents for the
document-store backend live in ``app.models.documents``.
"""

from app.models.playlist import Playlist
from app.models.user import User

__all__ = [
    "User",
    "Playlist",
]
