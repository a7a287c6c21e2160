"""Request/response schemas for /api/folders and /api/tags."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from noteful.schemas.common import CamelModel


class NamedEntityInput(CamelModel):
    """
    Body of POST/PUT for folders and tags.

    `name` is optional here on purpose: a missing name is reported as
    "Missing `name` in request body" by the repository, not as a schema error.
    """
    name: Optional[str] = Field(default=None, description="Unique per user")


class NamedEntityResponse(CamelModel):
    id: str
    name: str
    user_id: str
    created_at: datetime
    updated_at: datetime


FolderInput = NamedEntityInput
FolderResponse = NamedEntityResponse
