"""
Noteful Backend — Shared Column Types & Mixins
================================================

What:  Identifier generation, UTC timestamp column type, timestamp mixin.
Why:   Every entity shares the same id format and createdAt/updatedAt rules.

Identifier format:
    32 lowercase hex characters (uuid4().hex). Generated in Python so the id
    exists before the INSERT and can go straight into the Location header.

Timestamp rules:
    - Stored as UTC. SQLite hands back naive datetimes, so UTCDateTime
      re-attaches the UTC tzinfo on load; PostgreSQL keeps it natively.
    - created_at never changes after the INSERT.
    - updated_at strictly increases on every mutation (see touch()).
"""

import uuid
from datetime import datetime, timedelta, timezone

from sqlalchemy import DateTime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

IDENTIFIER_LENGTH = 32


def new_identifier() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """Timezone-aware DateTime that always round-trips as UTC."""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class TimestampMixin:
    """createdAt / updatedAt columns, both set to the same instant on creation."""

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=utcnow,
    )

    def stamp_created(self) -> None:
        now = utcnow()
        self.created_at = now
        self.updated_at = now

    def touch(self) -> None:
        """
        Bump updated_at. Two mutations inside the clock resolution would
        otherwise share a timestamp, so the new value is at least 1µs later.
        """
        now = utcnow()
        previous = self.updated_at
        if previous is not None and now <= previous:
            now = previous + timedelta(microseconds=1)
        self.updated_at = now
