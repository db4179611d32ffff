"""
Base configurations and mixins for the relational models.

Provides the declarative base plus mixins shared by the ``users`` and
``playlists`` tables. Column types are the portable SQLAlchemy ones so the
same models run on PostgreSQL and SQLite.
"""

import uuid
from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, Uuid, inspect
from sqlalchemy.orm import declarative_base


def utc_now() -> datetime:
    return datetime.now(UTC)


class CustomBase:
    """
    Custom base class for SQLAlchemy models with enhanced serialization.

    ``to_dict`` converts model instances to dictionaries, rendering UUID and
    datetime values as strings.
    """

    def to_dict(self) -> dict:
        d = {}
        if not self:
            return d
        for column in inspect(self).mapper.column_attrs:
            value = getattr(self, column.key)
            if isinstance(value, uuid.UUID):
                d[column.key] = str(value)
            elif isinstance(value, datetime):
                d[column.key] = value.isoformat()
            else:
                d[column.key] = value
        return d


Base = declarative_base(cls=CustomBase)


class TimestampMixin:
    """
    Adds a ``created_at`` column set on insert.

    The value is produced in Python rather than by the server so it keeps
    sub-second precision on every engine; playlist listings order by it.
    """

    created_at = Column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
        comment="Timestamp when the record was created",
    )


class UUIDMixin:
    """
    Adds a UUID primary key generated by the application with uuid4().
    """

    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        comment="Primary key using UUID4 format",
    )


__all__ = ["Base", "TimestampMixin", "UUIDMixin", "utc_now"]
