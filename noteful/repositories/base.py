"""
Noteful Backend — Scoped Repository Base
==========================================

What:  Shared plumbing for per-user repositories, and the full CRUD contract
       for the two "named" entities (Folder, Tag).
Why:   Folders and tags differ only in their model, the error wording and
       the reference cleanup that runs on delete.

Scoping rule:
    Every query carries `WHERE user_id = :user_id`. A row owned by someone
    else is simply not found, and is reported exactly like a missing row.

Duplicate handling:
    Names are looked up before the write, which reports the usual duplicate
    without disturbing the session. The unique constraint still has the last
    word: an IntegrityError at flush time (concurrent insert) is translated
    into ConflictError after rolling the session back, so callers never see
    driver errors.
"""

import logging
from typing import Generic, List, Optional, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from noteful.exceptions import ConflictError, DatabaseError, NotefulError, NotFoundError
from noteful.validation import require_field

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


class RepositoryBase(Generic[ModelT]):
    """Flush helper shared by every repository."""

    model: Type[ModelT]
    resource: str = "resource"
    conflict_message: str = "The resource already exists"

    async def _flush(self, db: AsyncSession) -> None:
        """
        Flush pending writes, translating storage errors.

        IntegrityError → _integrity_error() (ConflictError unless overridden)
        other SQLAlchemyError → DatabaseError (500, details logged)
        """
        try:
            await db.flush()
        except IntegrityError as e:
            await db.rollback()
            error = self._integrity_error(e)
            logger.info("%s integrity error: %s", self.resource, error.message)
            raise error from e
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Database error writing %s: %s", self.resource, str(e))
            raise DatabaseError(
                context={"resource": self.resource, "original_error": type(e).__name__},
            ) from e

    def _integrity_error(self, e: IntegrityError) -> NotefulError:
        """A unique key lost a race with a concurrent insert."""
        return ConflictError(
            message=self.conflict_message,
            context={"resource": self.resource, "original_error": type(e).__name__},
        )


class ScopedRepository(RepositoryBase[ModelT]):
    """Owner-filtered lookups for Folder, Tag and Note."""

    async def _find_owned(
        self, db: AsyncSession, user_id: str, entity_id: str
    ) -> Optional[ModelT]:
        result = await db.execute(
            select(self.model).where(
                self.model.id == entity_id,
                self.model.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def get(self, db: AsyncSession, user_id: str, entity_id: str) -> ModelT:
        """Return the owned entity or raise NotFoundError."""
        entity = await self._find_owned(db, user_id, entity_id)
        if entity is None:
            logger.debug("%s %s not found for user %s", self.resource, entity_id, user_id)
            raise NotFoundError(resource=self.resource, resource_id=entity_id)
        return entity


class NamedEntityRepository(ScopedRepository[ModelT]):
    """
    CRUD for entities that are just a unique-per-user name (Folder, Tag).

    Subclasses set `model`, `resource`, `conflict_message` and implement
    `_release_references()` for the delete cleanup.
    """

    async def list(
        self,
        db: AsyncSession,
        user_id: str,
        search_term: Optional[str] = None,
    ) -> List[ModelT]:
        """Owned entities, optionally filtered by case-insensitive name substring, by name."""
        query = select(self.model).where(self.model.user_id == user_id)
        if search_term:
            query = query.where(self.model.name.icontains(search_term, autoescape=True))
        query = query.order_by(self.model.name.asc())

        result = await db.execute(query)
        return list(result.scalars().all())

    async def _ensure_name_free(
        self,
        db: AsyncSession,
        user_id: str,
        name: str,
        exclude_id: Optional[str] = None,
    ) -> None:
        # Checked up front so the common case does not poison the session;
        # the unique constraint still catches concurrent inserts in _flush()
        query = select(self.model.id).where(
            self.model.user_id == user_id,
            self.model.name == name,
        )
        if exclude_id is not None:
            query = query.where(self.model.id != exclude_id)
        if await db.scalar(query) is not None:
            raise ConflictError(
                message=self.conflict_message,
                context={"resource": self.resource, "name": name},
            )

    async def create(self, db: AsyncSession, user_id: str, name: Optional[str]) -> ModelT:
        require_field({"name": name}, "name")
        await self._ensure_name_free(db, user_id, name)

        entity = self.model(name=name, user_id=user_id)
        entity.stamp_created()
        db.add(entity)
        await self._flush(db)
        logger.info("%s %s created for user %s", self.resource.capitalize(), entity.id, user_id)
        return entity

    async def update(
        self,
        db: AsyncSession,
        user_id: str,
        entity_id: str,
        name: Optional[str],
    ) -> ModelT:
        require_field({"name": name}, "name")

        entity = await self.get(db, user_id, entity_id)
        await self._ensure_name_free(db, user_id, name, exclude_id=entity_id)
        entity.name = name
        entity.touch()
        await self._flush(db)
        logger.info("%s %s renamed for user %s", self.resource.capitalize(), entity_id, user_id)
        return entity

    async def delete(self, db: AsyncSession, user_id: str, entity_id: str) -> None:
        """
        Remove the owned entity after clearing every note reference to it.

        Raises NotFoundError when nothing owned by user_id has that id, so
        the caller can answer 404 rather than a silent 204.
        """
        entity = await self.get(db, user_id, entity_id)
        await self._release_references(db, user_id, entity_id)
        await db.delete(entity)
        await self._flush(db)
        logger.info("%s %s deleted for user %s", self.resource.capitalize(), entity_id, user_id)

    async def _release_references(
        self, db: AsyncSession, user_id: str, entity_id: str
    ) -> None:
        raise NotImplementedError
