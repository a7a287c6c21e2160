"""
Noteful Backend — Note Repository
===================================

What:  Per-user note CRUD with folder/tag reference validation.
Who:   Called by the /api/notes route handlers.

Write flow (POST/PUT /api/notes):
    ┌──────────┐    ┌──────────────┐    ┌─────────────────┐    ┌─────────┐
    │ title    │───▶│ folderId     │───▶│ tags            │───▶│ flush   │
    │ required │    │ owned folder?│    │ all owned tags? │    │         │
    └──────────┘    └──────────────┘    └─────────────────┘    └─────────┘
                     InvalidReferenceError("folderId" | "tags") on failure

Partial updates:
    PUT still requires `title`. `content`, `folderId` and `tags` are only
    touched when the client sent them (NoteInput.model_fields_set), and an
    explicit null / "" folderId moves the note out of its folder.
"""

import logging
from typing import List, Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from noteful.exceptions import InvalidReferenceError
from noteful.models.note import Note
from noteful.models.tag import Tag
from noteful.repositories.base import ScopedRepository
from noteful.schemas.note import NoteInput
from noteful.services.references import reference_coordinator
from noteful.validation import require_field

logger = logging.getLogger(__name__)


class NoteRepository(ScopedRepository[Note]):
    model = Note
    resource = "note"

    def _integrity_error(self, e: IntegrityError) -> InvalidReferenceError:
        # Notes have no unique keys; only a folder or tag deleted between
        # resolve and flush can violate a constraint here
        field = "tags" if "note_tags" in str(e.orig) else "folderId"
        return InvalidReferenceError(
            field, context={"resource": self.resource, "original_error": type(e).__name__}
        )

    async def list(
        self,
        db: AsyncSession,
        user_id: str,
        search_term: Optional[str] = None,
        folder_id: Optional[str] = None,
        tag_id: Optional[str] = None,
    ) -> List[Note]:
        """
        Owned notes, most recently updated first.

        Filters (all optional, combined with AND):
            search_term: case-insensitive substring of title or content
            folder_id:   exact folder
            tag_id:      notes carrying that tag
        """
        query = select(Note).where(Note.user_id == user_id)

        if search_term:
            query = query.where(
                or_(
                    Note.title.icontains(search_term, autoescape=True),
                    Note.content.icontains(search_term, autoescape=True),
                )
            )
        if folder_id:
            query = query.where(Note.folder_id == folder_id)
        if tag_id:
            query = query.where(Note.tags.any(Tag.id == tag_id))

        query = query.order_by(Note.updated_at.desc())

        result = await db.execute(query)
        return list(result.scalars().all())

    async def create(self, db: AsyncSession, user_id: str, data: NoteInput) -> Note:
        require_field(data, "title")

        folder_id = None
        if data.folder_id:
            folder_id = await reference_coordinator.resolve_folder(db, user_id, data.folder_id)
        tags = await reference_coordinator.resolve_tags(db, user_id, data.tags or [])

        note = Note(
            title=data.title,
            content=data.content,
            folder_id=folder_id,
            user_id=user_id,
            tags=tags,
        )
        note.stamp_created()
        db.add(note)
        await self._flush(db)
        logger.info("Note %s created for user %s", note.id, user_id)
        return note

    async def update(
        self,
        db: AsyncSession,
        user_id: str,
        note_id: str,
        data: NoteInput,
    ) -> Note:
        require_field(data, "title")

        note = await self.get(db, user_id, note_id)
        supplied = data.model_fields_set

        # Resolve references before mutating so a bad id leaves the note untouched
        if "folder_id" in supplied:
            folder_id = None
            if data.folder_id:
                folder_id = await reference_coordinator.resolve_folder(
                    db, user_id, data.folder_id
                )
        if "tags" in supplied:
            tags = await reference_coordinator.resolve_tags(db, user_id, data.tags or [])

        note.title = data.title
        if "content" in supplied:
            note.content = data.content
        if "folder_id" in supplied:
            note.folder_id = folder_id
        if "tags" in supplied:
            note.tags = tags
        note.touch()

        await self._flush(db)
        logger.info("Note %s updated for user %s", note_id, user_id)
        return note

    async def delete(self, db: AsyncSession, user_id: str, note_id: str) -> None:
        note = await self.get(db, user_id, note_id)
        await db.delete(note)
        await self._flush(db)
        logger.info("Note %s deleted for user %s", note_id, user_id)


note_repository = NoteRepository()
