from __future__ import annotations

from functools import wraps

from beanie import PydanticObjectId, SortDirection, init_beanie
from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import ConnectionFailure, DuplicateKeyError, PyMongoError

from app.db_handlers.base import (
    DatabaseConnectionError,
    DatabaseManager,
    DuplicateEmailError,
    RecordNotFoundError,
)
from app.models.documents import DOCUMENT_MODELS, PlaylistDocument, UserDocument
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

logger = setup_logger("db_handlers.document")


def check_connected(func):
    """Reject calls made before connect(); lost connections surface as DatabaseConnectionError."""

    @wraps(func)
    async def wrapper(self: DocumentDatabaseManager, *args, **kwargs):
        if not self.connected:
            raise DatabaseConnectionError(
                "Document store is not connected; call connect() first"
            )
        try:
            return await func(self, *args, **kwargs)
        except DuplicateKeyError:
            raise
        except ConnectionFailure as e:
            logger.error(f"MongoDB unreachable in {func.__name__}: {e}")
            raise DatabaseConnectionError(
                f"Lost connection to MongoDB database '{self.database_name}': {e}"
            ) from e
        except PyMongoError as e:
            logger.error(f"MongoDB error in {func.__name__}: {e}", exc_info=True)
            raise

    return wrapper


def _parse_object_id(value: str) -> PydanticObjectId | None:
    if not ObjectId.is_valid(value):
        return None
    return PydanticObjectId(value)


def _to_user_record(doc: UserDocument) -> UserRecord:
    return UserRecord(
        id=str(doc.id),
        first_name=doc.first_name,
        last_name=doc.last_name,
        email=doc.email,
        password_hash=doc.password_hash,
    )


def _to_playlist_record(doc: PlaylistDocument) -> PlaylistRecord:
    return PlaylistRecord(
        id=str(doc.id),
        name=doc.name,
        owner_email=doc.owner_email,
        songs=list(doc.songs),
    )


class DocumentDatabaseManager(DatabaseManager):
    """
    DatabaseManager backed by MongoDB through the Beanie ODM.

    An existing Motor client may be passed in; otherwise connect() creates one
    and verifies the server answers a ping before initializing Beanie.

    Beanie binds the document classes to a single database per process, so at
    most one manager can be connected at a time. Connecting a second one
    raises DatabaseConnectionError until the first is disconnected.
    """

    backend_name = "document-store"

    # Manager the document classes are currently bound to
    _bound_manager: DocumentDatabaseManager | None = None

    def __init__(
        self,
        url: str,
        database_name: str,
        *,
        server_selection_timeout_ms: int = 5000,
        client: AsyncIOMotorClient | None = None,
    ):
        self.url = url
        self.database_name = database_name
        self.server_selection_timeout_ms = server_selection_timeout_ms
        self.client = client
        self._owns_client = client is None
        self.connected = False

    async def connect(self) -> None:
        bound = DocumentDatabaseManager._bound_manager
        if bound is not None and bound is not self:
            raise DatabaseConnectionError(
                f"Document models are already bound to MongoDB database "
                f"'{bound.database_name}'; disconnect that manager first"
            )

        logger.info(f"Connecting to MongoDB database '{self.database_name}'")
        try:
            if self.client is None:
                self.client = AsyncIOMotorClient(
                    self.url,
                    serverSelectionTimeoutMS=self.server_selection_timeout_ms,
                )
                self._owns_client = True
                await self.client.admin.command("ping")

            await init_beanie(
                database=self.client[self.database_name],
                document_models=DOCUMENT_MODELS,
            )
        except PyMongoError as e:
            logger.error(f"MongoDB connection error: {e}")
            if self._owns_client and self.client is not None:
                self.client.close()
                self.client = None
            raise DatabaseConnectionError(
                f"Could not connect to MongoDB database '{self.database_name}': {e}"
            ) from e

        DocumentDatabaseManager._bound_manager = self
        self.connected = True
        logger.info("MongoDB connected successfully")

    async def disconnect(self) -> None:
        if self._owns_client and self.client is not None:
            self.client.close()
            self.client = None
        if DocumentDatabaseManager._bound_manager is self:
            DocumentDatabaseManager._bound_manager = None
        self.connected = False
        logger.info("MongoDB disconnected")

    # ==================== USER OPERATIONS ====================

    @check_connected
    async def create_user(self, data: UserCreateData) -> UserRecord:
        if await UserDocument.find_one(UserDocument.email == data.email):
            raise DuplicateEmailError(data.email)

        doc = UserDocument(**data.model_dump())
        try:
            await doc.insert()
        except DuplicateKeyError as e:
            logger.warning(f"Duplicate key creating user {data.email}: {e}")
            raise DuplicateEmailError(data.email) from e
        logger.debug(f"Created user {doc.id}")
        return _to_user_record(doc)

    @check_connected
    async def find_user_by_email(self, email: str) -> UserRecord | None:
        doc = await UserDocument.find_one(UserDocument.email == email)
        return _to_user_record(doc) if doc else None

    @check_connected
    async def find_user_by_id(self, user_id: str) -> UserRecord | None:
        key = _parse_object_id(user_id)
        if key is None:
            return None
        doc = await UserDocument.get(key)
        return _to_user_record(doc) if doc else None

    @check_connected
    async def update_user(self, user_id: str, data: UserUpdateData) -> UserRecord:
        key = _parse_object_id(user_id)
        doc = await UserDocument.get(key) if key else None
        if doc is None:
            raise RecordNotFoundError("User", user_id)

        changes = {
            field: value
            for field, value in data.model_dump(exclude_unset=True).items()
            if value is not None
        }
        new_email = changes.get("email")
        if new_email and new_email != doc.email:
            if await UserDocument.find_one(UserDocument.email == new_email):
                raise DuplicateEmailError(new_email)

        for field, value in changes.items():
            setattr(doc, field, value)

        try:
            await doc.save()
        except DuplicateKeyError as e:
            logger.warning(f"Duplicate key updating user {user_id}: {e}")
            raise DuplicateEmailError(new_email or doc.email) from e
        return _to_user_record(doc)

    # ==================== PLAYLIST OPERATIONS ====================

    @check_connected
    async def create_playlist(self, data: PlaylistCreate) -> PlaylistRecord:
        doc = PlaylistDocument(
            name=data.name,
            owner_email=data.owner_email,
            songs=list(data.songs),
        )
        await doc.insert()
        logger.debug(f"Created playlist {doc.id} for {data.owner_email}")
        return _to_playlist_record(doc)

    @check_connected
    async def find_playlist_by_id(self, playlist_id: str) -> PlaylistRecord | None:
        key = _parse_object_id(playlist_id)
        if key is None:
            return None
        doc = await PlaylistDocument.get(key)
        return _to_playlist_record(doc) if doc else None

    @check_connected
    async def get_playlist_pairs_by_owner(self, owner_email: str) -> list[PlaylistPair]:
        docs = (
            await PlaylistDocument.find(PlaylistDocument.owner_email == owner_email)
            .sort(
                ("created_at", SortDirection.ASCENDING),
                ("_id", SortDirection.ASCENDING),
            )
            .to_list()
        )
        return [PlaylistPair(id=str(doc.id), name=doc.name) for doc in docs]

    @check_connected
    async def update_playlist(
        self, playlist_id: str, data: PlaylistUpdate
    ) -> PlaylistRecord:
        key = _parse_object_id(playlist_id)
        doc = await PlaylistDocument.get(key) if key else None
        if doc is None:
            raise RecordNotFoundError("Playlist", playlist_id)

        doc.name = data.name
        doc.songs = list(data.songs)
        await doc.save()
        logger.debug(f"Replaced playlist {playlist_id}")
        return _to_playlist_record(doc)

    @check_connected
    async def delete_playlist(self, playlist_id: str) -> PlaylistRecord | None:
        key = _parse_object_id(playlist_id)
        doc = await PlaylistDocument.get(key) if key else None
        if doc is None:
            return None

        record = _to_playlist_record(doc)
        await doc.delete()
        logger.debug(f"Deleted playlist {playlist_id}")
        return record

    # ==================== MAINTENANCE ====================

    @check_connected
    async def clear_all(self) -> None:
        await PlaylistDocument.find_all().delete()
        await UserDocument.find_all().delete()
        logger.warning("Cleared all playlists and users")
