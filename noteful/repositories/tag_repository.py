"""Tag repository: per-user tags; deleting one pulls it from every note."""

from sqlalchemy.ext.asyncio import AsyncSession

from noteful.models.tag import Tag
from noteful.repositories.base import NamedEntityRepository
from noteful.services.references import reference_coordinator


class TagRepository(NamedEntityRepository[Tag]):
    model = Tag
    resource = "tag"
    conflict_message = "The tag name already exists"

    async def _release_references(
        self, db: AsyncSession, user_id: str, entity_id: str
    ) -> None:
        await reference_coordinator.pull_tag(db, user_id, entity_id)


tag_repository = TagRepository()
