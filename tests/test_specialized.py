"""
Tests for EmailType and UUIDType.
"""

import uuid

import pytest

from rapitapir.core.errors import ErrorCode
from rapitapir.types import EMAIL_PATTERN, UUID_PATTERN, EmailType, UUIDType


class TestEmail:
    @pytest.mark.parametrize(
        "value",
        ["user@example.com", "first.last+tag@sub.example.co.uk", "A_B-C@EXAMPLE.ORG"],
    )
    def test_accepts_addresses(self, value):
        assert EmailType().validate(value).valid

    @pytest.mark.parametrize("value", ["not-an-email", "user@", "@example.com", "user@example", "a b@example.com"])
    def test_malformed_address_is_a_type_error(self, value):
        result = EmailType().validate(value)
        assert result.errors == ("Invalid email format",)
        assert result.codes == (ErrorCode.E2004_INVALID_TYPE,)

    def test_non_string(self):
        assert EmailType().validate(5).errors == ("Expected string, got int",)

    def test_length_bounds_still_apply(self):
        result = EmailType(max_length=10).validate("someone@example.com")
        assert result.errors == ("String length 19 exceeds maximum 10",)
        assert result.codes == (ErrorCode.E2005_CONSTRAINT_VIOLATION,)

    def test_pattern_and_format_are_fixed(self):
        with pytest.raises(TypeError):
            EmailType(pattern=".*")

    def test_coerce_keeps_strings(self):
        assert EmailType().coerce("A@B.COM") == "A@B.COM"

    def test_json_schema(self):
        assert EmailType().to_json_schema() == {
            "type": "string",
            "pattern": EMAIL_PATTERN.pattern,
            "format": "email",
        }


class TestUUID:
    @pytest.mark.parametrize(
        "value",
        [
            "123e4567-e89b-12d3-a456-426614174000",
            "123E4567-E89B-12D3-A456-426614174000",
            str(uuid.uuid4()),
        ],
    )
    def test_accepts_versioned_uuids(self, value):
        assert UUIDType().validate(value).valid

    @pytest.mark.parametrize(
        "value",
        [
            "not-a-uuid",
            "123e4567-e89b-02d3-a456-426614174000",  # version 0
            "123e4567-e89b-12d3-c456-426614174000",  # variant c
            "123e4567e89b12d3a456426614174000",
        ],
    )
    def test_rejects(self, value):
        result = UUIDType().validate(value)
        assert result.errors == ("Invalid UUID format",)
        assert result.value_errors[0].category == "type"

    def test_coerces_uuid_objects_to_text(self):
        value = uuid.uuid4()
        assert UUIDType().coerce(value) == str(value)

    def test_json_schema(self):
        assert UUIDType().to_json_schema() == {
            "type": "string",
            "pattern": UUID_PATTERN.pattern,
            "format": "uuid",
        }
