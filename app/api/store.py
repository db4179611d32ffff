"""
Playlist API Routes - CRUD over the current user's playlists.

Every route requires authentication. Routes addressing a single playlist go
through ``get_owned_playlist``, which answers 404 for unknown ids and 403
when the caller does not own the playlist.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from app.db import get_db_manager
from app.db_handlers import DatabaseManager, RecordNotFoundError
from app.dependencies.auth import get_current_user
from app.dependencies.playlists import get_owned_playlist
from app.schemas import (
    PlaylistCreatedResponse,
    PlaylistCreateRequest,
    PlaylistListResponse,
    PlaylistPairsResponse,
    PlaylistRecord,
    PlaylistResponse,
    PlaylistUpdatedResponse,
    PlaylistUpdateRequest,
    UserRecord,
)
from app.services.authorization import AccessDecision, authorize_playlist_access
from app.utils.logger import setup_logger

logger = setup_logger("api.store")

router = APIRouter(prefix="/store", tags=["Playlists"])


@router.post(
    "/playlist",
    response_model=PlaylistCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_playlist(
    playlist_data: PlaylistCreateRequest,
    current_user: UserRecord = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db_manager),
):
    """Create a playlist owned by the current user."""
    decision = await authorize_playlist_access(
        db, playlist_data.owner_email, current_user.id
    )
    if decision is AccessDecision.DENY:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Playlists can only be created for your own account",
        )

    playlist = await db.create_playlist(playlist_data)
    logger.info(f"Created playlist {playlist.id} for {current_user.email}")
    return PlaylistCreatedResponse(playlist=playlist)


@router.get("/playlist/{playlist_id}", response_model=PlaylistResponse)
async def get_playlist_by_id(
    playlist: PlaylistRecord = Depends(get_owned_playlist),
):
    return PlaylistResponse(playlist=playlist)


@router.put("/playlist/{playlist_id}", response_model=PlaylistUpdatedResponse)
async def update_playlist(
    body: PlaylistUpdateRequest,
    playlist: PlaylistRecord = Depends(get_owned_playlist),
    db: DatabaseManager = Depends(get_db_manager),
):
    """Replace the playlist's name and songs with the ones in the request."""
    try:
        updated = await db.update_playlist(playlist.id, body.playlist)
    except RecordNotFoundError as e:
        # Deleted between the ownership check and the update
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Playlist not found"
        ) from e

    logger.info(f"Updated playlist {updated.id}")
    return PlaylistUpdatedResponse(id=updated.id)


@router.delete("/playlist/{playlist_id}")
async def delete_playlist(
    playlist: PlaylistRecord = Depends(get_owned_playlist),
    db: DatabaseManager = Depends(get_db_manager),
):
    await db.delete_playlist(playlist.id)
    logger.info(f"Deleted playlist {playlist.id}")
    return {}


@router.get("/playlistpairs", response_model=PlaylistPairsResponse)
async def get_playlist_pairs(
    current_user: UserRecord = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db_manager),
):
    """Id/name pairs of the current user's playlists, oldest first."""
    pairs = await db.get_playlist_pairs_by_owner(current_user.email)
    return PlaylistPairsResponse(id_name_pairs=pairs)


@router.get("/playlists", response_model=PlaylistListResponse)
async def get_playlists(
    current_user: UserRecord = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db_manager),
):
    pairs = await db.get_playlist_pairs_by_owner(current_user.email)
    return PlaylistListResponse(data=pairs)
