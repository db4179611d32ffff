from __future__ import annotations

import uuid
from functools import wraps

from sqlalchemy import delete, select
from sqlalchemy.engine import make_url
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.db_handlers.base import (
    DatabaseConnectionError,
    DatabaseManager,
    DuplicateEmailError,
    PersistenceError,
    RecordNotFoundError,
)
from app.models import Playlist, User
from app.models.base import Base
from app.schemas import (
    PlaylistCreate,
    PlaylistPair,
    PlaylistRecord,
    PlaylistUpdate,
    UserCreateData,
    UserRecord,
    UserUpdateData,
)
from app.utils.logger import setup_logger

logger = setup_logger("db_handlers.relational")


def with_session(func):
    """Run the operation in its own session, committing on success and rolling back on error."""

    @wraps(func)
    async def wrapper(self: RelationalDatabaseManager, *args, **kwargs):
        # A caller-provided session owns the transaction
        if kwargs.get("db") is not None:
            return await func(self, *args, **kwargs)

        if self.session_factory is None:
            raise DatabaseConnectionError(
                "Relational database is not connected; call connect() first"
            )

        async with self.session_factory() as db:
            kwargs["db"] = db
            try:
                result = await func(self, *args, **kwargs)
                await db.commit()
                return result
            except PersistenceError:
                await db.rollback()
                raise
            except SQLAlchemyError as e:
                await db.rollback()
                logger.error(
                    f"Transaction failed in {func.__name__}: {e}", exc_info=True
                )
                raise

    return wrapper


def _parse_uuid(value: str) -> uuid.UUID | None:
    try:
        return uuid.UUID(str(value))
    except (ValueError, TypeError):
        return None


def _to_user_record(user: User) -> UserRecord:
    return UserRecord.model_validate(user.to_dict())


def _to_playlist_record(playlist: Playlist) -> PlaylistRecord:
    record = playlist.to_dict()
    record["songs"] = record["songs"] or []
    return PlaylistRecord.model_validate(record)


def _dump_songs(data: PlaylistCreate | PlaylistUpdate) -> list[dict]:
    return [song.model_dump(mode="json") for song in data.songs]


class RelationalDatabaseManager(DatabaseManager):
    """
    DatabaseManager backed by an async SQLAlchemy engine.

    Works against PostgreSQL (asyncpg) in production and SQLite (aiosqlite)
    locally. Tables are created on connect() if they don't exist; existing
    tables are never altered or dropped.
    """

    backend_name = "relational"

    def __init__(self, database_url: str, *, echo: bool = False):
        self.database_url = database_url
        self.echo = echo
        self.engine = None
        self.session_factory: async_sessionmaker[AsyncSession] | None = None

    async def connect(self) -> None:
        safe_url = make_url(self.database_url).render_as_string(hide_password=True)
        logger.info(f"Connecting to relational database at {safe_url}")

        self.engine = create_async_engine(
            self.database_url, pool_pre_ping=True, echo=self.echo
        )
        self.session_factory = async_sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Relational database connection error: {e}")
            await self.engine.dispose()
            self.engine = None
            self.session_factory = None
            raise DatabaseConnectionError(
                f"Could not connect to relational database at {safe_url}: {e}"
            ) from e

        logger.info(
            f"Relational database connected, tables: {list(Base.metadata.tables.keys())}"
        )

    async def disconnect(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()
        self.engine = None
        self.session_factory = None
        logger.info("Relational database disconnected")

    # ==================== USER OPERATIONS ====================

    @with_session
    async def create_user(
        self, data: UserCreateData, *, db: AsyncSession = None
    ) -> UserRecord:
        user = User(**data.model_dump())
        db.add(user)
        try:
            await db.flush()
        except IntegrityError as e:
            logger.warning(f"IntegrityError creating user {data.email}: {e}")
            raise DuplicateEmailError(data.email) from e
        logger.debug(f"Created user {user.id}")
        return _to_user_record(user)

    @with_session
    async def find_user_by_email(
        self, email: str, *, db: AsyncSession = None
    ) -> UserRecord | None:
        result = await db.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()
        return _to_user_record(user) if user else None

    @with_session
    async def find_user_by_id(
        self, user_id: str, *, db: AsyncSession = None
    ) -> UserRecord | None:
        key = _parse_uuid(user_id)
        if key is None:
            return None
        user = await db.get(User, key)
        return _to_user_record(user) if user else None

    @with_session
    async def update_user(
        self, user_id: str, data: UserUpdateData, *, db: AsyncSession = None
    ) -> UserRecord:
        key = _parse_uuid(user_id)
        user = await db.get(User, key) if key else None
        if user is None:
            raise RecordNotFoundError("User", user_id)

        for field, value in data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(user, field, value)

        try:
            await db.flush()
        except IntegrityError as e:
            logger.warning(f"IntegrityError updating user {user_id}: {e}")
            raise DuplicateEmailError(data.email) from e
        return _to_user_record(user)

    # ==================== PLAYLIST OPERATIONS ====================

    @with_session
    async def create_playlist(
        self, data: PlaylistCreate, *, db: AsyncSession = None
    ) -> PlaylistRecord:
        playlist = Playlist(
            id=uuid.uuid4(),
            name=data.name,
            owner_email=data.owner_email,
            songs=_dump_songs(data),
        )
        db.add(playlist)
        await db.flush()
        logger.debug(f"Created playlist {playlist.id} for {data.owner_email}")
        return _to_playlist_record(playlist)

    @with_session
    async def find_playlist_by_id(
        self, playlist_id: str, *, db: AsyncSession = None
    ) -> PlaylistRecord | None:
        key = _parse_uuid(playlist_id)
        if key is None:
            return None
        playlist = await db.get(Playlist, key)
        return _to_playlist_record(playlist) if playlist else None

    @with_session
    async def get_playlist_pairs_by_owner(
        self, owner_email: str, *, db: AsyncSession = None
    ) -> list[PlaylistPair]:
        stmt = (
            select(Playlist.id, Playlist.name)
            .where(Playlist.owner_email == owner_email)
            .order_by(Playlist.created_at, Playlist.id)
        )
        result = await db.execute(stmt)
        return [PlaylistPair(id=str(row.id), name=row.name) for row in result]

    @with_session
    async def update_playlist(
        self, playlist_id: str, data: PlaylistUpdate, *, db: AsyncSession = None
    ) -> PlaylistRecord:
        key = _parse_uuid(playlist_id)
        playlist = await db.get(Playlist, key) if key else None
        if playlist is None:
            raise RecordNotFoundError("Playlist", playlist_id)

        playlist.name = data.name
        playlist.songs = _dump_songs(data)
        await db.flush()
        logger.debug(f"Replaced playlist {playlist_id}")
        return _to_playlist_record(playlist)

    @with_session
    async def delete_playlist(
        self, playlist_id: str, *, db: AsyncSession = None
    ) -> PlaylistRecord | None:
        key = _parse_uuid(playlist_id)
        playlist = await db.get(Playlist, key) if key else None
        if playlist is None:
            return None

        record = _to_playlist_record(playlist)
        await db.delete(playlist)
        await db.flush()
        logger.debug(f"Deleted playlist {playlist_id}")
        return record

    # ==================== MAINTENANCE ====================

    @with_session
    async def clear_all(self, *, db: AsyncSession = None) -> None:
        await db.execute(delete(Playlist))
        await db.execute(delete(User))
        logger.warning("Cleared all playlists and users")
