"""
Pydantic schemas shared by the persistence layer and the HTTP API.

Records (``UserRecord``, ``PlaylistRecord``, ``PlaylistPair``) are the
normalized shapes every DatabaseManager backend returns. Identifiers are
plain strings and serialize as ``_id``; all other fields serialize in
camelCase to match what the browser client sends and expects.

Email addresses are validated and normalized once, where they enter the
system (``EmailStr`` request fields and ``normalize_email`` for seed data).
Persistence inputs take them as plain strings and backends match them exactly.
"""

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, validate_email
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def normalize_email(email: str) -> str:
    """Normalize an address the way ``EmailStr`` request fields do (lowercased domain)."""
    _, normalized = validate_email(email)
    return normalized


# --- Records ---


class Song(CamelModel):
    title: str
    artist: str
    year: int | None = None
    external_media_id: str = Field(
        default="",
        validation_alias=AliasChoices(
            "youTubeId", "externalMediaId", "external_media_id"
        ),
        serialization_alias="youTubeId",
    )


class UserRecord(CamelModel):
    id: str = Field(alias="_id")
    first_name: str
    last_name: str
    email: str
    password_hash: str = Field(repr=False, exclude=True)


class PlaylistRecord(CamelModel):
    id: str = Field(alias="_id")
    name: str
    owner_email: str
    songs: list[Song] = Field(default_factory=list)


class PlaylistPair(CamelModel):
    id: str = Field(alias="_id")
    name: str


# --- Persistence inputs ---


class UserCreateData(CamelModel):
    first_name: str
    last_name: str
    email: str
    password_hash: str


class UserUpdateData(CamelModel):
    """Partial user update; only fields that were explicitly set are applied."""

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    password_hash: str | None = None


class PlaylistCreate(CamelModel):
    name: str = Field(min_length=1)
    owner_email: str
    songs: list[Song] = Field(default_factory=list)


class PlaylistUpdate(CamelModel):
    """Full replacement of a playlist's name and songs."""

    name: str = Field(min_length=1)
    songs: list[Song] = Field(default_factory=list)


# --- HTTP requests ---


class PlaylistCreateRequest(PlaylistCreate):
    owner_email: EmailStr


class PlaylistUpdateRequest(CamelModel):
    playlist: PlaylistUpdate


class UserRegister(CamelModel):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: EmailStr
    password: str
    password_verify: str


class UserLogin(CamelModel):
    email: EmailStr
    password: str


class UserProfileUpdate(CamelModel):
    first_name: str | None = Field(default=None, min_length=1)
    last_name: str | None = Field(default=None, min_length=1)
    password: str | None = None
    password_verify: str | None = None


# --- HTTP responses ---


class UserInfo(CamelModel):
    first_name: str
    last_name: str
    email: str

    @classmethod
    def from_record(cls, user: UserRecord) -> "UserInfo":
        return cls(
            first_name=user.first_name, last_name=user.last_name, email=user.email
        )


class AuthResponse(CamelModel):
    success: bool = True
    user: UserInfo


class LoggedInResponse(CamelModel):
    logged_in: bool
    user: UserInfo | None = None


class MessageResponse(CamelModel):
    success: bool = True
    message: str


class PlaylistCreatedResponse(CamelModel):
    playlist: PlaylistRecord


class PlaylistResponse(CamelModel):
    success: bool = True
    playlist: PlaylistRecord


class PlaylistUpdatedResponse(CamelModel):
    success: bool = True
    id: str
    message: str = "Playlist updated!"


class PlaylistPairsResponse(CamelModel):
    success: bool = True
    id_name_pairs: list[PlaylistPair]


class PlaylistListResponse(CamelModel):
    success: bool = True
    data: list[PlaylistPair]
