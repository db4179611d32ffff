"""
User table for the relational backend.

Users own playlists through their email address rather than their primary
key, so ``email`` carries a unique index.
"""

from sqlalchemy import Column, Index, String

from app.models.base import Base, TimestampMixin, UUIDMixin


class User(Base, UUIDMixin, TimestampMixin):
    """Registered account. Passwords are stored as bcrypt hashes only."""

    __tablename__ = "users"
    __table_args__ = (Index("ix_users_email", "email", unique=True),)

    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(
        String(255),
        nullable=False,
        comment="Unique email, referenced by playlists.owner_email",
    )
    password_hash = Column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password",
    )

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}')>"
