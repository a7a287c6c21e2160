"""
Noteful Backend — User & Auth Schemas
=======================================

Registration fields are typed as strings, but none is required at the schema
level: the route reports missing fields with the registration wording
("Missing 'username' in request body", 422). A non-string value fails schema
validation and is rendered as "Field: 'username' must be type String".
"""

from typing import Optional

from pydantic import Field

from noteful.schemas.common import CamelModel


class UserCreate(CamelModel):
    username: Optional[str] = Field(default=None, description="Unique, no surrounding whitespace")
    password: Optional[str] = Field(default=None, description="8-72 characters")
    fullname: Optional[str] = Field(default=None, description="Trimmed before storing")


class UserResponse(CamelModel):
    """Public view of a user; the password hash is never part of it."""
    id: str
    username: str
    fullname: Optional[str] = None


class LoginRequest(CamelModel):
    username: Optional[str] = None
    password: Optional[str] = None


class AuthTokenResponse(CamelModel):
    auth_token: str = Field(description="Bearer credential for protected routes")
