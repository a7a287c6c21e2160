"""
Noteful Backend — User Repository
===================================

What:  Registration and lookups for accounts.
Why:   Users are the only entity not scoped by an owner; usernames are
       unique across the whole system.

Error translation:
    Duplicate username → ConflictError("The username already exists"), from
    the up-front lookup or, under a race, from the unique constraint.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from noteful.exceptions import ConflictError, NotFoundError
from noteful.models.user import User
from noteful.repositories.base import RepositoryBase

logger = logging.getLogger(__name__)


class UserRepository(RepositoryBase[User]):
    model = User
    resource = "user"
    conflict_message = "The username already exists"

    async def create(
        self,
        db: AsyncSession,
        username: str,
        password_hash: str,
        fullname: Optional[str] = None,
    ) -> User:
        """
        Insert a new user. The caller hashes the password and has already
        validated the fields (see routes/users.py).
        """
        if await self.find_by_username(db, username) is not None:
            raise ConflictError(message=self.conflict_message)

        user = User(username=username, password=password_hash, fullname=fullname)
        db.add(user)
        await self._flush(db)
        logger.info("User %s registered", user.id)
        return user

    async def get(self, db: AsyncSession, user_id: str) -> User:
        user = await db.get(User, user_id)
        if user is None:
            raise NotFoundError(resource=self.resource, resource_id=user_id)
        return user

    async def find_by_username(self, db: AsyncSession, username: str) -> Optional[User]:
        return await db.scalar(select(User).where(User.username == username))


user_repository = UserRepository()
