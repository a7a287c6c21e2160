"""
Noteful Backend — Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for every failure the API reports.
Why:   Repositories raise domain errors; global handlers (main.py) turn them
       into HTTP status codes and a consistent JSON body.
How:   Each exception carries a user-facing message, an optional context dict
       (logged, never returned) and the status code it maps to.

Exception Hierarchy:
    NotefulError (base)
    ├── ValidationError             → 400 Bad Request (client can fix)
    │   ├── MalformedIdError        → 400 (id fails the format check)
    │   ├── MissingFieldError       → 400 or 422 (depends on the endpoint)
    │   ├── FieldValidationError    → 422 (registration field rules)
    │   └── InvalidReferenceError   → 400 (folderId / tags)
    ├── ConflictError               → 400 (duplicate name / username)
    ├── NotFoundError               → 404 Not Found
    ├── AuthenticationError         → 401 Unauthorized
    ├── DatabaseError               → 500 Internal Server Error
    └── RateLimitExceededError      → 429 Too Many Requests
"""

from typing import Any, Dict, Optional


class NotefulError(Exception):
    """
    Base exception for all Noteful application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NotefulError):
    """
    Raised when client input fails validation.

    HTTP: 400 by default. Subclasses and call sites may override the status
    code (registration reports field problems as 422).
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field
        if status_code is not None:
            self.status_code = status_code


class MalformedIdError(ValidationError):
    """An identifier failed the format check before any query ran."""

    def __init__(self, field: str = "id", context: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=f"The `{field}` is not valid",
            field=field,
            context=context,
        )


class MissingFieldError(ValidationError):
    """A required field is absent or empty in the request body."""

    def __init__(
        self,
        field: str,
        status_code: int = 400,
        context: Optional[Dict[str, Any]] = None,
    ):
        if status_code == 422:
            message = f"Missing '{field}' in request body"
        else:
            message = f"Missing `{field}` in request body"
        super().__init__(
            message=message, field=field, context=context, status_code=status_code
        )


class FieldValidationError(ValidationError):
    """A registration field has the wrong type, whitespace or length."""

    status_code = 422

    def __init__(
        self,
        field: str,
        reason: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=f"Field: '{field}' {reason}",
            field=field,
            context=context,
        )


class InvalidReferenceError(ValidationError):
    """
    A note references a folder or tag that is malformed, missing, or owned
    by another user. The offending tag element is not reported.
    """

    def __init__(self, field: str, context: Optional[Dict[str, Any]] = None):
        if field == "tags":
            message = "The `tags` array contains an invalid `id`"
        else:
            message = f"The `{field}` is not valid"
        super().__init__(message=message, field=field, context=context)


class ConflictError(NotefulError):
    """
    Raised when a uniqueness rule is violated.

    Reported as 400, not 409: clients match duplicates as a plain bad request.
    """

    status_code = 400

    def __init__(
        self,
        message: str = "The resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(NotefulError):
    """
    Raised when a requested resource does not exist for the caller.

    Records owned by another user raise this too, so existence never leaks
    across accounts.
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class AuthenticationError(NotefulError):
    """Missing, expired or invalid bearer credential, or a failed login."""

    status_code = 401

    def __init__(
        self,
        message: str = "Unauthorized",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(NotefulError):
    """
    Raised when a database operation fails unexpectedly.

    The message returned to the client is always generic; the original error
    type is kept in the context for the server log.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(NotefulError):
    """Client exceeded the per-IP request rate limit."""

    status_code = 429

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Too many requests. Please wait {retry_after} seconds before retrying."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after
