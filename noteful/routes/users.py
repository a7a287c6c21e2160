"""
Noteful Backend — Registration Route
======================================

    POST /api/users → 201 {id, username, fullname} + Location | 400 | 422

Registration reports field problems as 422, checked in this order:
    1. missing username / password     "Missing 'username' in request body"
    2. non-string fields               "Field: 'username' must be type String"
       (raised by schema validation, rendered by main.py)
    3. surrounding whitespace          "Field: 'password' cannot start or end with whitespace"
    4. length bounds                   "Field: 'password' must be at least 8 characters long"
A taken username is a 400 "The username already exists".
"""

import logging

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from noteful.database import get_db_session
from noteful.repositories.user_repository import user_repository
from noteful.schemas.common import ErrorResponse
from noteful.schemas.user import UserCreate, UserResponse
from noteful.security import hash_password
from noteful.validation import (
    check_field_sizes,
    check_string_fields,
    check_trimmed_fields,
    require_fields,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=UserResponse,
    responses={
        400: {"description": "Username already exists", "model": ErrorResponse},
        422: {"description": "Missing or invalid registration field", "model": ErrorResponse},
    },
    summary="Register a user",
)
async def create_user(
    body: UserCreate,
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    require_fields(body, ["username", "password"], status_code=422, allow_empty=True)
    check_string_fields(body, ["username", "password", "fullname"])
    check_trimmed_fields(body, ["username", "password"])
    check_field_sizes(body)

    fullname = body.fullname.strip() if body.fullname is not None else None
    password_hash = await hash_password(body.password)

    user = await user_repository.create(
        db,
        username=body.username,
        password_hash=password_hash,
        fullname=fullname,
    )
    response.headers["Location"] = f"{request.url.path.rstrip('/')}/{user.id}"
    return UserResponse.model_validate(user)
