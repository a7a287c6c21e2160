"""
Noteful Backend — User SQLAlchemy Model
=========================================

What:  ORM model for the `users` table.
Who:   UserRepository (registration, login lookups) and the foreign keys of
       every other table.

Lifecycle:
    Created once through POST /api/users; never deleted by the API.
    `password` holds the bcrypt hash and is never part of a response schema.
"""

from typing import Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from noteful.database import Base
from noteful.models.common import IDENTIFIER_LENGTH, new_identifier


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(IDENTIFIER_LENGTH),
        primary_key=True,
        default=new_identifier,
    )

    fullname: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Unique across the whole system, not per anything
    username: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        unique=True,
    )

    # bcrypt hash (60 chars); the column name mirrors the public field it replaces
    password: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
