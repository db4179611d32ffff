from fastapi import Depends, HTTPException, Path, status

from app.db import get_db_manager
from app.db_handlers import DatabaseManager
from app.dependencies.auth import get_current_user
from app.schemas import PlaylistRecord, UserRecord
from app.services.authorization import AccessDecision, authorize_playlist_access


async def get_owned_playlist(
    playlist_id: str = Path(..., description="The ID of the playlist"),
    db: DatabaseManager = Depends(get_db_manager),
    current_user: UserRecord = Depends(get_current_user),
) -> PlaylistRecord:
    """
    Dependency to get a playlist, ensuring the current user is its owner.

    Raises HTTPException 401 if the user is not authenticated.
    Raises HTTPException 404 if the playlist is not found.
    Raises HTTPException 403 if the user does not own the playlist.
    """
    playlist = await db.find_playlist_by_id(playlist_id)
    if playlist is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Playlist not found"
        )

    decision = await authorize_playlist_access(
        db, playlist.owner_email, current_user.id
    )
    if decision is AccessDecision.DENY:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to access this playlist",
        )

    return playlist
