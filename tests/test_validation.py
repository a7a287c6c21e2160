"""
Noteful Backend — Validation Helper Unit Tests
================================================

Pure functions, no database. The messages asserted here are the exact
strings clients match on.
"""

import pytest

from noteful.exceptions import (
    FieldValidationError,
    MalformedIdError,
    MissingFieldError,
)
from noteful.models.common import new_identifier
from noteful.validation import (
    check_field_sizes,
    check_string_fields,
    check_trimmed_fields,
    ensure_valid_identifier,
    is_valid_identifier,
    require_field,
    require_fields,
)


class TestIdentifiers:
    def test_generated_identifier_is_valid(self):
        assert is_valid_identifier(new_identifier())

    @pytest.mark.parametrize(
        "value",
        [
            "",
            "abc",
            "not-an-id",
            "A" * 32,                 # uppercase
            "g" * 32,                 # not hex
            "a" * 31,
            "a" * 33,
            "5c9b7e4b-2f2a-4b1c-9d3e-3e0f1a2b3c4d",  # dashed uuid
            None,
            12345,
        ],
    )
    def test_malformed_identifiers_are_rejected(self, value):
        assert not is_valid_identifier(value)

    def test_ensure_valid_identifier_returns_value(self):
        ident = new_identifier()
        assert ensure_valid_identifier(ident) == ident

    def test_ensure_valid_identifier_names_the_field(self):
        with pytest.raises(MalformedIdError) as exc_info:
            ensure_valid_identifier("nope")
        assert exc_info.value.message == "The `id` is not valid"
        assert exc_info.value.status_code == 400

    def test_ensure_valid_identifier_custom_field(self):
        with pytest.raises(MalformedIdError) as exc_info:
            ensure_valid_identifier("nope", "folderId")
        assert exc_info.value.message == "The `folderId` is not valid"


class TestRequiredFields:
    def test_present_field_is_returned(self):
        assert require_field({"name": "Work"}, "name") == "Work"

    @pytest.mark.parametrize("body", [{}, {"name": None}, {"name": ""}])
    def test_missing_field_uses_backtick_wording(self, body):
        with pytest.raises(MissingFieldError) as exc_info:
            require_field(body, "name")
        assert exc_info.value.message == "Missing `name` in request body"
        assert exc_info.value.status_code == 400

    def test_registration_wording_and_status(self):
        with pytest.raises(MissingFieldError) as exc_info:
            require_fields({"password": "secret123"}, ["username", "password"], status_code=422)
        assert exc_info.value.message == "Missing 'username' in request body"
        assert exc_info.value.status_code == 422

    def test_first_missing_field_is_reported(self):
        with pytest.raises(MissingFieldError) as exc_info:
            require_fields({}, ["username", "password"], status_code=422)
        assert exc_info.value.field == "username"

    def test_allow_empty_accepts_empty_string(self):
        assert require_field({"username": ""}, "username", allow_empty=True) == ""

    def test_works_on_objects(self):
        class Body:
            name = "Work"

        assert require_field(Body(), "name") == "Work"


class TestFieldRules:
    def test_non_string_field_is_rejected(self):
        with pytest.raises(FieldValidationError) as exc_info:
            check_string_fields({"username": 42}, ["username"])
        assert exc_info.value.message == "Field: 'username' must be type String"
        assert exc_info.value.status_code == 422

    def test_absent_optional_field_passes_type_check(self):
        check_string_fields({"username": "bob"}, ["username", "fullname"])

    @pytest.mark.parametrize("value", [" bob", "bob ", "\tbob"])
    def test_surrounding_whitespace_is_rejected(self, value):
        with pytest.raises(FieldValidationError) as exc_info:
            check_trimmed_fields({"username": value}, ["username"])
        assert exc_info.value.message == "Field: 'username' cannot start or end with whitespace"

    def test_inner_whitespace_is_allowed(self):
        check_trimmed_fields({"password": "correct horse"}, ["password"])

    def test_empty_username_is_too_short(self):
        with pytest.raises(FieldValidationError) as exc_info:
            check_field_sizes({"username": "", "password": "password123"})
        assert exc_info.value.message == "Field: 'username' must be at least 1 characters long"

    def test_short_password(self):
        with pytest.raises(FieldValidationError) as exc_info:
            check_field_sizes({"username": "bob", "password": "short"})
        assert exc_info.value.message == "Field: 'password' must be at least 8 characters long"

    def test_long_password(self):
        with pytest.raises(FieldValidationError) as exc_info:
            check_field_sizes({"username": "bob", "password": "x" * 73})
        assert exc_info.value.message == "Field: 'password' must be at most 72 characters long"

    def test_bounds_are_inclusive(self):
        check_field_sizes({"username": "b", "password": "x" * 8})
        check_field_sizes({"username": "b", "password": "x" * 72})
