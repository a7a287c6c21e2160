"""
Noteful Backend — Tag Route Handlers
======================================

Mirror of the folder endpoints under /api/tags. Deleting a tag pulls it from
every note that carries it; the notes and their other tags stay.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from noteful.database import get_db_session
from noteful.repositories.tag_repository import tag_repository
from noteful.schemas.common import ErrorResponse
from noteful.schemas.tag import TagInput, TagResponse
from noteful.security import get_current_user_id
from noteful.validation import ensure_valid_identifier

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/tags",
    tags=["Tags"],
    responses={401: {"description": "Missing or invalid bearer token", "model": ErrorResponse}},
)


@router.get("", response_model=List[TagResponse], summary="List tags")
async def list_tags(
    search_term: Optional[str] = Query(default=None, alias="searchTerm"),
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> List[TagResponse]:
    tags = await tag_repository.list(db, user_id, search_term=search_term)
    return [TagResponse.model_validate(tag) for tag in tags]


@router.get(
    "/{tag_id}",
    response_model=TagResponse,
    responses={
        400: {"description": "Malformed id", "model": ErrorResponse},
        404: {"description": "Tag not found"},
    },
    summary="Get a tag",
)
async def get_tag(
    tag_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> TagResponse:
    ensure_valid_identifier(tag_id)
    tag = await tag_repository.get(db, user_id, tag_id)
    return TagResponse.model_validate(tag)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=TagResponse,
    responses={400: {"description": "Missing or duplicate name", "model": ErrorResponse}},
    summary="Create a tag",
)
async def create_tag(
    body: TagInput,
    request: Request,
    response: Response,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> TagResponse:
    tag = await tag_repository.create(db, user_id, body.name)
    response.headers["Location"] = f"{request.url.path.rstrip('/')}/{tag.id}"
    return TagResponse.model_validate(tag)


@router.put(
    "/{tag_id}",
    response_model=TagResponse,
    responses={
        400: {"description": "Malformed id, missing or duplicate name", "model": ErrorResponse},
        404: {"description": "Tag not found"},
    },
    summary="Rename a tag",
)
async def update_tag(
    tag_id: str,
    body: TagInput,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> TagResponse:
    ensure_valid_identifier(tag_id)
    tag = await tag_repository.update(db, user_id, tag_id, body.name)
    return TagResponse.model_validate(tag)


@router.delete(
    "/{tag_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        400: {"description": "Malformed id", "model": ErrorResponse},
        404: {"description": "Tag not found"},
    },
    summary="Delete a tag and pull it from its notes",
)
async def delete_tag(
    tag_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    ensure_valid_identifier(tag_id)
    await tag_repository.delete(db, user_id, tag_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
