"""
Noteful Backend — Reference Coordinator
=========================================

What:  Keeps note → folder and note → tag references consistent.
Why:   Deleting a folder or tag must not delete notes, and a note may only
       point at folders/tags owned by the same user.
Who:   FolderRepository / TagRepository call the cleanup side on delete;
       NoteRepository calls the resolve side on create/update.

Cleanup flow (DELETE /api/folders/{id}):
    ┌──────────────┐    ┌───────────────────────────┐    ┌──────────────┐
    │ owned folder │───▶│ UPDATE notes              │───▶│ DELETE folder│
    │ looked up    │    │ SET folder_id = NULL      │    │              │
    └──────────────┘    │ WHERE folder_id=:id AND   │    └──────────────┘
                        │       user_id=:user       │
                        └───────────────────────────┘

Transaction scope:
    Both statements run on the request's session and are committed together
    by get_db_session. A failure in either one rolls back both, so a crash
    between them cannot leave a dangling folder_id or tag id.
"""

import logging
from typing import Iterable, List, Optional

from sqlalchemy import delete, inspect as sa_inspect, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from noteful.exceptions import InvalidReferenceError
from noteful.models.folder import Folder
from noteful.models.note import Note, note_tags
from noteful.models.tag import Tag
from noteful.validation import is_valid_identifier

logger = logging.getLogger(__name__)


class ReferenceCoordinator:
    """Stateless; receives the request's session on every call."""

    # ── Cleanup on delete ─────────────────────────────────────────────────

    async def clear_folder(self, db: AsyncSession, user_id: str, folder_id: str) -> int:
        """Unset folder_id on every owned note in the folder. Returns the count."""
        result = await db.execute(
            update(Note)
            .where(Note.user_id == user_id, Note.folder_id == folder_id)
            .values(folder_id=None)
            .execution_options(synchronize_session="fetch")
        )
        logger.info(
            "Cleared folder %s from %d note(s) of user %s",
            folder_id, result.rowcount, user_id,
        )
        return result.rowcount

    async def pull_tag(self, db: AsyncSession, user_id: str, tag_id: str) -> int:
        """Remove the tag from every owned note; other tags stay. Returns the count."""
        owned_notes = select(Note.id).where(Note.user_id == user_id)
        result = await db.execute(
            delete(note_tags).where(
                note_tags.c.tag_id == tag_id,
                note_tags.c.note_id.in_(owned_notes),
            )
        )
        self._forget_tag(db, user_id, tag_id)
        logger.info(
            "Pulled tag %s from %d note(s) of user %s",
            tag_id, result.rowcount, user_id,
        )
        return result.rowcount

    def _forget_tag(self, db: AsyncSession, user_id: str, tag_id: str) -> None:
        # The DELETE above bypasses the ORM; loaded Note.tags collections in
        # this session would otherwise still list the tag
        for obj in list(db.identity_map.values()):
            if not isinstance(obj, Note) or obj.user_id != user_id:
                continue
            if "tags" in sa_inspect(obj).unloaded:
                continue
            remaining = [tag for tag in obj.tags if tag.id != tag_id]
            if len(remaining) != len(obj.tags):
                set_committed_value(obj, "tags", remaining)

    # ── Validation on create/update ───────────────────────────────────────

    async def resolve_folder(
        self, db: AsyncSession, user_id: str, folder_id: str
    ) -> str:
        """Return folder_id if it names a folder owned by user_id."""
        if not is_valid_identifier(folder_id):
            raise InvalidReferenceError("folderId", context={"folder_id": folder_id})

        found: Optional[str] = await db.scalar(
            select(Folder.id).where(Folder.id == folder_id, Folder.user_id == user_id)
        )
        if found is None:
            raise InvalidReferenceError("folderId", context={"folder_id": folder_id})
        return found

    async def resolve_tags(
        self, db: AsyncSession, user_id: str, tag_ids: Iterable[str]
    ) -> List[Tag]:
        """
        Load the owned Tag rows for tag_ids (duplicates collapse).

        Raises InvalidReferenceError("tags") if any element is malformed or
        does not belong to user_id; which one is not reported.
        """
        wanted = list(dict.fromkeys(tag_ids))
        if not wanted:
            return []
        if not all(is_valid_identifier(tag_id) for tag_id in wanted):
            raise InvalidReferenceError("tags", context={"tags": wanted})

        result = await db.execute(
            select(Tag).where(Tag.id.in_(wanted), Tag.user_id == user_id)
        )
        tags = list(result.scalars().all())
        if len(tags) != len(wanted):
            raise InvalidReferenceError("tags", context={"tags": wanted})
        return tags


reference_coordinator = ReferenceCoordinator()
