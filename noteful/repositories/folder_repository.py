"""Folder repository: per-user folders; deleting one clears it from notes."""

from sqlalchemy.ext.asyncio import AsyncSession

from noteful.models.folder import Folder
from noteful.repositories.base import NamedEntityRepository
from noteful.services.references import reference_coordinator


class FolderRepository(NamedEntityRepository[Folder]):
    model = Folder
    resource = "folder"
    conflict_message = "The folder name already exists"

    async def _release_references(
        self, db: AsyncSession, user_id: str, entity_id: str
    ) -> None:
        await reference_coordinator.clear_folder(db, user_id, entity_id)


folder_repository = FolderRepository()
