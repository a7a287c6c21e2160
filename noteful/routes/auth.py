"""
Noteful Backend — Login & Token Refresh
=========================================

    POST /api/login    {username, password} → 200 {authToken} | 401
    POST /api/refresh  (bearer)             → 200 {authToken} | 401

Refresh reloads the user so a deleted account cannot keep extending its
session, and so changes to fullname reach the new token's user claim.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from noteful.database import get_db_session
from noteful.exceptions import AuthenticationError, NotFoundError
from noteful.repositories.user_repository import user_repository
from noteful.schemas.common import ErrorResponse
from noteful.schemas.user import AuthTokenResponse, LoginRequest
from noteful.security import create_auth_token, get_current_claims, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["Auth"],
    responses={401: {"description": "Bad credentials or bearer token", "model": ErrorResponse}},
)


@router.post("/login", response_model=AuthTokenResponse, summary="Exchange credentials for a token")
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> AuthTokenResponse:
    if not body.username or not body.password:
        raise AuthenticationError("Missing credentials")

    user = await user_repository.find_by_username(db, body.username)
    if user is None:
        logger.info("Login rejected: unknown username")
        raise AuthenticationError("Incorrect username")

    if not await verify_password(body.password, user.password):
        logger.info("Login rejected for user %s: wrong password", user.id)
        raise AuthenticationError("Incorrect password")

    logger.info("User %s logged in", user.id)
    return AuthTokenResponse(auth_token=create_auth_token(user))


@router.post("/refresh", response_model=AuthTokenResponse, summary="Issue a fresh token")
async def refresh(
    claims: Dict[str, Any] = Depends(get_current_claims),
    db: AsyncSession = Depends(get_db_session),
) -> AuthTokenResponse:
    user_id = claims["user"]["id"]
    try:
        user = await user_repository.get(db, user_id)
    except NotFoundError as e:
        raise AuthenticationError(context={"reason": "user no longer exists"}) from e
    return AuthTokenResponse(auth_token=create_auth_token(user))
