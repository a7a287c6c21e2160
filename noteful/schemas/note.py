"""
Noteful Backend — Note Request/Response Schemas
=================================================

What:  The explicit contract for POST/PUT /api/notes and note payloads.

Field presence matters on update:
    NoteInput.model_fields_set records which keys the client sent, so
    {"title": "x"} leaves folder and tags alone while
    {"title": "x", "folderId": null} moves the note out of its folder.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from noteful.models.note import Note
from noteful.schemas.common import CamelModel


class NoteInput(CamelModel):
    title: Optional[str] = Field(default=None, description="Required on create and update")
    content: Optional[str] = Field(default=None)
    folder_id: Optional[str] = Field(
        default=None,
        description="Folder owned by the same user; null or empty clears it",
    )
    tags: Optional[List[str]] = Field(
        default=None,
        description="Tag ids owned by the same user; order is irrelevant",
    )


class NoteResponse(CamelModel):
    id: str
    title: str
    content: Optional[str] = None
    folder_id: Optional[str] = None
    tags: List[str] = Field(default_factory=list, description="Tag ids")
    user_id: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_note(cls, note: Note) -> "NoteResponse":
        return cls(
            id=note.id,
            title=note.title,
            content=note.content,
            folder_id=note.folder_id,
            tags=note.tag_ids,
            user_id=note.user_id,
            created_at=note.created_at,
            updated_at=note.updated_at,
        )
