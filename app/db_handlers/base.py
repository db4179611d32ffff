"""
Persistence interface shared by every storage backend.

``DatabaseManager`` is the capability set the rest of the application talks
to. Backends translate these operations into native calls against one engine
and always hand back the normalized records from ``app.schemas``, so callers
never branch on which engine is active.

Absent records are reported as ``None``; failures raise a
``PersistenceError`` subclass.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from app.schemas import (
    PlaylistCreate,
    PlaylistPair,
    PlaylistRecord,
    PlaylistUpdate,
    UserCreateData,
    UserRecord,
    UserUpdateData,
)


class PersistenceError(Exception):
    """Base class for errors raised by a DatabaseManager."""


class DatabaseConnectionError(PersistenceError):
    """The storage engine could not be reached."""


class DuplicateEmailError(PersistenceError):
    def __init__(self, email: str):
        super().__init__(f"A user with email '{email}' already exists")
        self.email = email


class RecordNotFoundError(PersistenceError):
    def __init__(self, kind: str, record_id: str):
        super().__init__(f"{kind} with id '{record_id}' does not exist")
        self.kind = kind
        self.record_id = record_id


class DatabaseManager(ABC):
    """
    Abstract Base Class for storage backends.

    Exactly one instance is constructed per process (see
    ``app.db.create_database_manager``) and passed to whoever needs it.
    """

    backend_name: str = "abstract"

    @abstractmethod
    async def connect(self) -> None:
        """Open the engine connection. Raises DatabaseConnectionError."""

    @abstractmethod
    async def disconnect(self) -> None:
        """Release the engine connection."""

    # ==================== USER OPERATIONS ====================

    @abstractmethod
    async def create_user(self, data: UserCreateData) -> UserRecord:
        """Create a user. Raises DuplicateEmailError if the email is taken."""

    @abstractmethod
    async def find_user_by_email(self, email: str) -> UserRecord | None:
        ...

    @abstractmethod
    async def find_user_by_id(self, user_id: str) -> UserRecord | None:
        ...

    @abstractmethod
    async def update_user(self, user_id: str, data: UserUpdateData) -> UserRecord:
        """
        Apply the explicitly set fields of ``data`` to a user.

        Raises RecordNotFoundError for unknown ids and DuplicateEmailError when
        a changed email collides with another user.
        """

    # ==================== PLAYLIST OPERATIONS ====================

    @abstractmethod
    async def create_playlist(self, data: PlaylistCreate) -> PlaylistRecord:
        ...

    @abstractmethod
    async def find_playlist_by_id(self, playlist_id: str) -> PlaylistRecord | None:
        ...

    @abstractmethod
    async def get_playlist_pairs_by_owner(self, owner_email: str) -> list[PlaylistPair]:
        """Id/name pairs of the owner's playlists, oldest first."""

    @abstractmethod
    async def update_playlist(
        self, playlist_id: str, data: PlaylistUpdate
    ) -> PlaylistRecord:
        """
        Replace a playlist's name and songs wholesale.

        Raises RecordNotFoundError for unknown ids.
        """

    @abstractmethod
    async def delete_playlist(self, playlist_id: str) -> PlaylistRecord | None:
        """Delete a playlist, returning the removed record or None if absent."""

    # ==================== MAINTENANCE ====================

    @abstractmethod
    async def clear_all(self) -> None:
        """Remove every playlist and user."""

    async def __aenter__(self) -> DatabaseManager:
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.disconnect()
