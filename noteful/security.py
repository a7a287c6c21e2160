"""
Noteful Backend — Authentication Collaborator
===============================================

What:  Password hashing, bearer token issue/verify, and the FastAPI
       dependency that turns a bearer credential into the acting user id.
Who:   routes/users.py (hashing), routes/auth.py (login/refresh), and every
       protected router (get_current_user_id).

Token format (HS256, signed with settings.jwt_secret):
    {
        "user": {"id": "...", "username": "...", "fullname": "..."},
        "sub":  "<username>",
        "iat":  <issued at>,
        "exp":  <issued at + jwt_expiry_days>
    }

Why bcrypt runs in the threadpool:
    Hashing is deliberately slow CPU work (~250ms at 12 rounds). Running it
    on the event loop would stall every other in-flight request.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from starlette.concurrency import run_in_threadpool

from noteful.config import settings
from noteful.exceptions import AuthenticationError
from noteful.models.user import User

logger = logging.getLogger(__name__)

# auto_error=False: a missing header must produce our 401 body, not FastAPI's 403
bearer_scheme = HTTPBearer(auto_error=False)


# ── Passwords ─────────────────────────────────────────────────────────────

def _hash_password_sync(password: str) -> str:
    # bcrypt only reads the first 72 bytes; newer releases reject longer input
    secret = password.encode("utf-8")[:72]
    return bcrypt.hashpw(secret, bcrypt.gensalt(rounds=settings.bcrypt_rounds)).decode("ascii")


def _verify_password_sync(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8")[:72], password_hash.encode("ascii"))
    except ValueError:
        # Stored value is not a bcrypt hash
        logger.warning("Password check against a malformed hash")
        return False


async def hash_password(password: str) -> str:
    return await run_in_threadpool(_hash_password_sync, password)


async def verify_password(password: str, password_hash: str) -> bool:
    return await run_in_threadpool(_verify_password_sync, password, password_hash)


# ── Tokens ────────────────────────────────────────────────────────────────

def create_auth_token(user: User, now: Optional[datetime] = None) -> str:
    issued_at = now or datetime.now(timezone.utc)
    payload = {
        "user": {"id": user.id, "username": user.username, "fullname": user.fullname},
        "sub": user.username,
        "iat": issued_at,
        "exp": issued_at + timedelta(days=settings.jwt_expiry_days),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_auth_token(token: str) -> Dict[str, Any]:
    """
    Verify signature and expiry and return the claims.

    Raises:
        AuthenticationError: bad signature, expired, malformed, or missing
        the embedded user id.
    """
    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp", "sub"]},
        )
    except jwt.PyJWTError as e:
        raise AuthenticationError(context={"reason": type(e).__name__}) from e

    user = claims.get("user")
    if not isinstance(user, dict) or not user.get("id"):
        raise AuthenticationError(context={"reason": "missing user claim"})
    return claims


async def get_current_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Dict[str, Any]:
    if credentials is None:
        raise AuthenticationError(context={"reason": "missing bearer credential"})
    return decode_auth_token(credentials.credentials)


async def get_current_user_id(
    claims: Dict[str, Any] = Depends(get_current_claims),
) -> str:
    """Dependency for protected routes: the authenticated user's id."""
    return claims["user"]["id"]
