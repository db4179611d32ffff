"""
Beanie documents for the document-store backend.

Field names mirror the relational columns so both backends describe the same
data; identifiers are MongoDB ObjectIds.
"""

from datetime import UTC, datetime

from beanie import Document, Indexed
from pydantic import Field

from app.schemas import Song


class UserDocument(Document):
    first_name: str
    last_name: str
    email: Indexed(str, unique=True)
    password_hash: str = Field(repr=False)

    class Settings:
        name = "users"


class PlaylistDocument(Document):
    name: str
    owner_email: Indexed(str)
    songs: list[Song] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    class Settings:
        name = "playlists"


DOCUMENT_MODELS = [UserDocument, PlaylistDocument]
