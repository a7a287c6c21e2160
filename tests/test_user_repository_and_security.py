"""
Noteful Backend — User Repository & Security Tests
====================================================

What we test:
    ✅ username uniqueness across the whole system
    ✅ bcrypt hashing (never stores the plain password)
    ✅ token issue/decode, tampering and expiry
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from noteful.config import settings
from noteful.exceptions import AuthenticationError, ConflictError, NotFoundError
from noteful.models.common import new_identifier
from noteful.repositories.user_repository import user_repository
from noteful.security import (
    create_auth_token,
    decode_auth_token,
    hash_password,
    verify_password,
)


class TestUserRepository:
    @pytest.mark.asyncio
    async def test_duplicate_username_conflicts(self, session, alice):
        with pytest.raises(ConflictError) as exc_info:
            await user_repository.create(session, username="alice", password_hash="x")
        assert exc_info.value.message == "The username already exists"

    @pytest.mark.asyncio
    async def test_find_by_username(self, session, alice):
        found = await user_repository.find_by_username(session, "alice")
        assert found.id == alice.id
        assert await user_repository.find_by_username(session, "nobody") is None

    @pytest.mark.asyncio
    async def test_get_missing_user(self, session):
        with pytest.raises(NotFoundError):
            await user_repository.get(session, new_identifier())

    @pytest.mark.asyncio
    async def test_password_is_stored_hashed(self, session, alice):
        assert alice.password != "password123"
        assert alice.password.startswith("$2")
        assert await verify_password("password123", alice.password)


class TestPasswords:
    @pytest.mark.asyncio
    async def test_hash_and_verify(self):
        hashed = await hash_password("correct horse")
        assert await verify_password("correct horse", hashed)
        assert not await verify_password("wrong horse", hashed)

    @pytest.mark.asyncio
    async def test_malformed_hash_does_not_verify(self):
        assert not await verify_password("anything", "not-a-bcrypt-hash")


class TestTokens:
    @pytest.mark.asyncio
    async def test_round_trip_carries_user_claim(self, alice):
        claims = decode_auth_token(create_auth_token(alice))

        assert claims["sub"] == "alice"
        assert claims["user"] == {
            "id": alice.id,
            "username": "alice",
            "fullname": "Alice Example",
        }

    @pytest.mark.asyncio
    async def test_expired_token_is_rejected(self, alice):
        issued = datetime.now(timezone.utc) - timedelta(days=settings.jwt_expiry_days + 1)
        with pytest.raises(AuthenticationError):
            decode_auth_token(create_auth_token(alice, now=issued))

    @pytest.mark.asyncio
    async def test_wrong_secret_is_rejected(self, alice):
        forged = jwt.encode(
            {"user": {"id": alice.id}, "sub": "alice", "exp": datetime.now(timezone.utc) + timedelta(days=1)},
            "some-other-secret",
            algorithm="HS256",
        )
        with pytest.raises(AuthenticationError):
            decode_auth_token(forged)

    def test_token_without_user_claim_is_rejected(self):
        token = jwt.encode(
            {"sub": "ghost", "exp": datetime.now(timezone.utc) + timedelta(days=1)},
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )
        with pytest.raises(AuthenticationError):
            decode_auth_token(token)

    @pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
    def test_garbage_is_rejected(self, token):
        with pytest.raises(AuthenticationError):
            decode_auth_token(token)
