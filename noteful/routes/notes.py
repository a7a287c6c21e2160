"""
Noteful Backend — Notes Route Handlers
========================================

What:  CRUD endpoints for the authenticated user's notes.
Why:   Notes are the core resource; folders and tags only organize them.
How:   Validate ids up front (malformed ids never reach the repository),
       delegate to note_repository, serialize with NoteResponse.from_note.

Routes:
    GET    /api/notes?searchTerm=&folderId=&tagId=  → 200 [Note], newest update first
    GET    /api/notes/{id}                          → 200 | 400 | 404
    POST   /api/notes                               → 201 + Location | 400
    PUT    /api/notes/{id}                          → 200 | 400 | 404
    DELETE /api/notes/{id}                          → 204 | 400 | 404

Reference errors (400):
    "The `folderId` is not valid"                : unknown, foreign or malformed folder
    "The `tags` array contains an invalid `id`"  : any unknown, foreign or malformed tag
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from noteful.database import get_db_session
from noteful.repositories.note_repository import note_repository
from noteful.schemas.common import ErrorResponse
from noteful.schemas.note import NoteInput, NoteResponse
from noteful.security import get_current_user_id
from noteful.validation import ensure_valid_identifier

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/notes",
    tags=["Notes"],
    responses={401: {"description": "Missing or invalid bearer token", "model": ErrorResponse}},
)


@router.get(
    "",
    response_model=List[NoteResponse],
    responses={400: {"description": "Malformed folderId or tagId filter", "model": ErrorResponse}},
    summary="List notes",
    description=(
        "Returns the caller's notes, most recently updated first. `searchTerm` "
        "matches title or content (case-insensitive); `folderId` and `tagId` "
        "narrow the list to one folder or one tag."
    ),
)
async def list_notes(
    search_term: Optional[str] = Query(default=None, alias="searchTerm"),
    folder_id: Optional[str] = Query(default=None, alias="folderId"),
    tag_id: Optional[str] = Query(default=None, alias="tagId"),
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> List[NoteResponse]:
    if folder_id:
        ensure_valid_identifier(folder_id, "folderId")
    if tag_id:
        ensure_valid_identifier(tag_id, "tagId")

    notes = await note_repository.list(
        db,
        user_id,
        search_term=search_term,
        folder_id=folder_id,
        tag_id=tag_id,
    )
    return [NoteResponse.from_note(note) for note in notes]


@router.get(
    "/{note_id}",
    response_model=NoteResponse,
    responses={
        400: {"description": "Malformed id", "model": ErrorResponse},
        404: {"description": "Note not found"},
    },
    summary="Get a note",
)
async def get_note(
    note_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    ensure_valid_identifier(note_id)
    note = await note_repository.get(db, user_id, note_id)
    return NoteResponse.from_note(note)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=NoteResponse,
    responses={400: {"description": "Missing title or invalid references", "model": ErrorResponse}},
    summary="Create a note",
)
async def create_note(
    body: NoteInput,
    request: Request,
    response: Response,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    note = await note_repository.create(db, user_id, body)
    response.headers["Location"] = f"{request.url.path.rstrip('/')}/{note.id}"
    return NoteResponse.from_note(note)


@router.put(
    "/{note_id}",
    response_model=NoteResponse,
    responses={
        400: {"description": "Malformed id, missing title or invalid references", "model": ErrorResponse},
        404: {"description": "Note not found"},
    },
    summary="Update a note",
    description=(
        "`title` is required. `content`, `folderId` and `tags` are only changed "
        "when present in the body; `folderId: null` removes the note from its folder."
    ),
)
async def update_note(
    note_id: str,
    body: NoteInput,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    ensure_valid_identifier(note_id)
    note = await note_repository.update(db, user_id, note_id, body)
    return NoteResponse.from_note(note)


@router.delete(
    "/{note_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        400: {"description": "Malformed id", "model": ErrorResponse},
        404: {"description": "Note not found"},
    },
    summary="Delete a note",
)
async def delete_note(
    note_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    ensure_valid_identifier(note_id)
    await note_repository.delete(db, user_id, note_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
