from sqlalchemy import JSON, Column, Index, String

from app.models.base import Base, TimestampMixin, UUIDMixin


class Playlist(Base, UUIDMixin, TimestampMixin):
    """
    Named, ordered list of songs owned by the user whose email matches
    ``owner_email``. There is deliberately no foreign key on the owner so
    the relational backend accepts the same data the document store does.
    """

    __tablename__ = "playlists"
    __table_args__ = (Index("ix_playlists_owner_email", "owner_email"),)

    name = Column(String(255), nullable=False)
    owner_email = Column(String(255), nullable=False)
    songs = Column(
        JSON,
        nullable=False,
        default=list,
        comment="Ordered list of {title, artist, year, external_media_id}",
    )

    def __repr__(self):
        return f"<Playlist(id={self.id}, name='{self.name}')>"
