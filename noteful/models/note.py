"""
Noteful Backend — Note SQLAlchemy Model
=========================================

What:  ORM model for the `notes` table plus the `note_tags` association table.
Who:   NoteRepository for CRUD; the reference coordinator for cleanup.

Table Design Rationale:
    - folder_id: nullable reference to a folder owned by the same user.
      Folder deletion sets it back to NULL; notes are never cascade-deleted.
    - tags: many-to-many through note_tags. Order is irrelevant; a tag id
      appears at most once per note (composite primary key).
    - Index on updated_at: GET /api/notes lists newest-updated first.

Why lazy="selectin" on tags:
    Async sessions cannot lazy-load on attribute access. selectin loads the
    tags of every note in a result with one extra IN query.
"""

from typing import List, Optional

from sqlalchemy import Column, ForeignKey, Index, String, Table, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from noteful.database import Base
from noteful.models.common import IDENTIFIER_LENGTH, TimestampMixin, new_identifier
from noteful.models.tag import Tag

note_tags = Table(
    "note_tags",
    Base.metadata,
    Column(
        "note_id",
        String(IDENTIFIER_LENGTH),
        ForeignKey("notes.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "tag_id",
        String(IDENTIFIER_LENGTH),
        ForeignKey("tags.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Note(TimestampMixin, Base):
    """
    A user's note.

    Lifecycle:
        1. Created with a title, optional content, folder and tags
        2. Updated in place; updated_at bumps on every successful update
        3. Deleted explicitly; its note_tags rows go with it
    """

    __tablename__ = "notes"

    id: Mapped[str] = mapped_column(
        String(IDENTIFIER_LENGTH),
        primary_key=True,
        default=new_identifier,
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    folder_id: Mapped[Optional[str]] = mapped_column(
        String(IDENTIFIER_LENGTH),
        ForeignKey("folders.id"),
        nullable=True,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(
        String(IDENTIFIER_LENGTH),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    tags: Mapped[List[Tag]] = relationship(
        Tag,
        secondary=note_tags,
        lazy="selectin",
        order_by=Tag.name,
    )

    __table_args__ = (
        Index("idx_notes_updated_at", "updated_at"),
    )

    @property
    def tag_ids(self) -> List[str]:
        return [tag.id for tag in self.tags]

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title='{self.title}', user_id={self.user_id})>"
