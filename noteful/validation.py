"""
Noteful Backend — Validation Helpers
======================================

Pure, stateless checks used by route handlers and repositories before any
query runs. Each helper either returns quietly or raises the matching
ValidationError subclass, whose message is what the client sees.

    require_field / require_fields   → MissingFieldError
    is_valid_identifier              → bool (format only, no DB access)
    ensure_valid_identifier          → MalformedIdError
    check_string_fields              → FieldValidationError "must be type String"
    check_trimmed_fields             → FieldValidationError "cannot start or end with whitespace"
    check_field_sizes                → FieldValidationError "must be at least/at most N characters long"
"""

import re
from typing import Any, Iterable, Mapping, Optional, Tuple

from noteful.exceptions import (
    FieldValidationError,
    MalformedIdError,
    MissingFieldError,
)
from noteful.models.common import IDENTIFIER_LENGTH

_IDENTIFIER_RE = re.compile(rf"[0-9a-f]{{{IDENTIFIER_LENGTH}}}")

# Registration bounds; bcrypt only reads the first 72 bytes of a password
USER_FIELD_SIZES: Mapping[str, Tuple[Optional[int], Optional[int]]] = {
    "username": (1, None),
    "password": (8, 72),
}


def _get(body: Any, field_name: str) -> Any:
    if isinstance(body, Mapping):
        return body.get(field_name)
    return getattr(body, field_name, None)


def require_field(
    body: Any,
    field_name: str,
    status_code: int = 400,
    allow_empty: bool = False,
) -> Any:
    """
    Return body[field_name], or raise MissingFieldError when it is absent or
    None. An empty string also counts as missing unless allow_empty is set
    (registration reports empty strings through check_field_sizes instead).
    `body` may be a mapping or a schema object.
    """
    value = _get(body, field_name)
    if value is None or (value == "" and not allow_empty):
        raise MissingFieldError(field_name, status_code=status_code)
    return value


def require_fields(
    body: Any,
    field_names: Iterable[str],
    status_code: int = 400,
    allow_empty: bool = False,
) -> None:
    """Check fields in order; the first missing one is reported."""
    for field_name in field_names:
        require_field(
            body, field_name, status_code=status_code, allow_empty=allow_empty
        )


def is_valid_identifier(value: Any) -> bool:
    return isinstance(value, str) and _IDENTIFIER_RE.fullmatch(value) is not None


def ensure_valid_identifier(value: Any, field_name: str = "id") -> str:
    if not is_valid_identifier(value):
        raise MalformedIdError(field_name)
    return value


def check_string_fields(body: Any, field_names: Iterable[str]) -> None:
    """Fields that are present must be strings."""
    for field_name in field_names:
        value = _get(body, field_name)
        if value is not None and not isinstance(value, str):
            raise FieldValidationError(field_name, "must be type String")


def check_trimmed_fields(body: Any, field_names: Iterable[str]) -> None:
    # Silently trimming credentials would surprise users at login time
    for field_name in field_names:
        value = _get(body, field_name)
        if isinstance(value, str) and value.strip() != value:
            raise FieldValidationError(
                field_name, "cannot start or end with whitespace"
            )


def check_field_sizes(
    body: Any,
    sizes: Mapping[str, Tuple[Optional[int], Optional[int]]] = USER_FIELD_SIZES,
) -> None:
    """Length bounds per field; None means unbounded on that side."""
    for field_name, (min_len, max_len) in sizes.items():
        value = _get(body, field_name)
        if not isinstance(value, str):
            continue
        if min_len is not None and len(value) < min_len:
            raise FieldValidationError(
                field_name, f"must be at least {min_len} characters long"
            )
        if max_len is not None and len(value) > max_len:
            raise FieldValidationError(
                field_name, f"must be at most {max_len} characters long"
            )
