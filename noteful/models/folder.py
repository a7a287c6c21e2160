"""
Noteful Backend — Folder SQLAlchemy Model
===========================================

What:  ORM model for the `folders` table.

Invariants:
    - Owned by exactly one user (user_id).
    - (user_id, name) is unique: one user cannot have two folders with the
      same name, two users can.
    - Deleting a folder never deletes notes; the reference coordinator clears
      notes.folder_id first.
"""

from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from noteful.database import Base
from noteful.models.common import IDENTIFIER_LENGTH, TimestampMixin, new_identifier


class Folder(TimestampMixin, Base):
    __tablename__ = "folders"

    id: Mapped[str] = mapped_column(
        String(IDENTIFIER_LENGTH),
        primary_key=True,
        default=new_identifier,
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    user_id: Mapped[str] = mapped_column(
        String(IDENTIFIER_LENGTH),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_folders_user_id_name"),
    )

    def __repr__(self) -> str:
        return f"<Folder(id={self.id}, name='{self.name}', user_id={self.user_id})>"
