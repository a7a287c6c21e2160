"""
Noteful Backend — Folder Route Handlers
=========================================

What:  CRUD endpoints for the authenticated user's folders.
How:   Validate the path id, delegate to folder_repository, serialize.
       Errors raised by the repository reach the global handlers in main.py.

Routes:
    GET    /api/folders?searchTerm=   → 200 [Folder] (name ascending)
    GET    /api/folders/{id}          → 200 Folder | 400 | 404
    POST   /api/folders               → 201 Folder + Location | 400
    PUT    /api/folders/{id}          → 200 Folder | 400 | 404
    DELETE /api/folders/{id}          → 204 | 400 | 404 (notes keep existing,
                                        their folderId is cleared)
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from noteful.database import get_db_session
from noteful.repositories.folder_repository import folder_repository
from noteful.schemas.common import ErrorResponse
from noteful.schemas.folder import FolderInput, FolderResponse
from noteful.security import get_current_user_id
from noteful.validation import ensure_valid_identifier

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/folders",
    tags=["Folders"],
    responses={401: {"description": "Missing or invalid bearer token", "model": ErrorResponse}},
)


@router.get("", response_model=List[FolderResponse], summary="List folders")
async def list_folders(
    search_term: Optional[str] = Query(default=None, alias="searchTerm"),
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> List[FolderResponse]:
    folders = await folder_repository.list(db, user_id, search_term=search_term)
    return [FolderResponse.model_validate(folder) for folder in folders]


@router.get(
    "/{folder_id}",
    response_model=FolderResponse,
    responses={
        400: {"description": "Malformed id", "model": ErrorResponse},
        404: {"description": "Folder not found"},
    },
    summary="Get a folder",
)
async def get_folder(
    folder_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> FolderResponse:
    ensure_valid_identifier(folder_id)
    folder = await folder_repository.get(db, user_id, folder_id)
    return FolderResponse.model_validate(folder)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=FolderResponse,
    responses={400: {"description": "Missing or duplicate name", "model": ErrorResponse}},
    summary="Create a folder",
)
async def create_folder(
    body: FolderInput,
    request: Request,
    response: Response,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> FolderResponse:
    folder = await folder_repository.create(db, user_id, body.name)
    response.headers["Location"] = f"{request.url.path.rstrip('/')}/{folder.id}"
    return FolderResponse.model_validate(folder)


@router.put(
    "/{folder_id}",
    response_model=FolderResponse,
    responses={
        400: {"description": "Malformed id, missing or duplicate name", "model": ErrorResponse},
        404: {"description": "Folder not found"},
    },
    summary="Rename a folder",
)
async def update_folder(
    folder_id: str,
    body: FolderInput,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> FolderResponse:
    ensure_valid_identifier(folder_id)
    folder = await folder_repository.update(db, user_id, folder_id, body.name)
    return FolderResponse.model_validate(folder)


@router.delete(
    "/{folder_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        400: {"description": "Malformed id", "model": ErrorResponse},
        404: {"description": "Folder not found"},
    },
    summary="Delete a folder and clear it from its notes",
)
async def delete_folder(
    folder_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    ensure_valid_identifier(folder_id)
    await folder_repository.delete(db, user_id, folder_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
