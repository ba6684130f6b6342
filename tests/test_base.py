"""
Tests for the behaviour every type inherits from BaseType: the nil check,
phase ordering, metadata, introspection and the non-raising coercion path.
"""

import dataclasses

import pytest
from structlog.testing import capture_logs

from rapitapir.core.errors import Err, ErrorCode, Ok
from rapitapir.types import (
    BooleanType,
    CoercionError,
    CoercionPolicy,
    IntegerType,
    OptionalType,
    StringType,
    ValidationResult,
)


class TestNilHandling:
    """None is decided before either validation phase runs."""

    def test_required_type_rejects_none(self):
        result = StringType().validate(None)
        assert not result.valid
        assert result.errors == ("Value is required but got None",)
        assert result.codes == (ErrorCode.E2001_REQUIRED_FIELD_MISSING,)

    def test_optional_flag_accepts_none(self):
        assert StringType(optional=True).validate(None).valid
        assert StringType(optional=True).coerce(None) is None

    def test_required_coerce_of_none_raises(self):
        with pytest.raises(CoercionError, match="Required value cannot be None"):
            IntegerType().coerce(None)

    def test_none_skips_constraints(self):
        # a minimum of 10 is never evaluated against None
        result = IntegerType(minimum=10).validate(None)
        assert result.errors == ("Value is required but got None",)


class TestPhases:
    def test_type_errors_come_before_constraint_errors(self):
        result = IntegerType(minimum=5).validate(1.5)
        assert result.errors == ("Expected integer, got float", "Value 1.5 is below minimum 5")
        assert result.codes == (ErrorCode.E2004_INVALID_TYPE, ErrorCode.E2005_CONSTRAINT_VIOLATION)

    def test_value_errors_are_grouped_per_phase(self):
        result = StringType(min_length=5, max_length=1).validate("abc")
        assert len(result.value_errors) == 1
        grouped = result.value_errors[0]
        assert grouped.category == "constraint"
        assert grouped.errors == result.errors

    def test_constraint_checks_ignore_wrong_shapes(self):
        assert StringType(min_length=2).validate(5).errors == ("Expected string, got int",)

    def test_validation_is_idempotent(self):
        schema = StringType(min_length=3, pattern=r"^\d+$")
        assert schema.validate("ab") == schema.validate("ab")
        assert schema.validate("12345") == schema.validate("12345")

    def test_result_is_truthy_only_when_valid(self):
        assert StringType().validate("x")
        assert not StringType().validate(1)


class TestMetadata:
    """Metadata is copy-on-write and flows into the JSON Schema."""

    def test_describe_returns_new_instance(self):
        base = StringType()
        described = base.describe("Display name")
        assert base.description is None
        assert described.description == "Display name"
        assert described is not base

    def test_description_and_example_in_schema(self):
        schema = IntegerType(minimum=0).describe("Age").with_example(42)
        assert schema.to_json_schema() == {"type": "integer", "minimum": 0, "description": "Age", "example": 42}

    def test_with_metadata_merges(self):
        schema = StringType().with_metadata(description="a").with_metadata(example="b")
        assert dict(schema.metadata) == {"description": "a", "example": "b"}

    def test_metadata_is_read_only(self):
        schema = StringType(metadata={"description": "x"})
        with pytest.raises(TypeError):
            schema.metadata["description"] = "y"

    def test_types_are_frozen(self):
        schema = StringType(min_length=1)
        with pytest.raises(dataclasses.FrozenInstanceError):
            schema.min_length = 5


class TestIntrospection:
    def test_required_and_optional_flags(self):
        assert StringType().required
        assert not StringType().is_optional
        assert StringType(optional=True).is_optional
        assert not OptionalType(StringType()).required

    def test_constraints_only_list_set_values(self):
        assert dict(StringType(min_length=1).constraints) == {"optional": False, "min_length": 1}
        assert dict(BooleanType().constraints) == {"optional": False}

    @pytest.mark.parametrize(
        "schema,expected",
        [
            (StringType(), "StringType"),
            (StringType(min_length=1, max_length=5), "StringType(min_length: 1, max_length: 5)"),
            (IntegerType(minimum=0), "IntegerType(minimum: 0)"),
            (StringType(optional=True), "StringType(optional: True)"),
        ],
    )
    def test_string_rendering(self, schema, expected):
        assert str(schema) == expected


class TestTryCoerce:
    """try_coerce hands failures back as Err(AppError) instead of raising."""

    def test_success_is_ok(self):
        assert IntegerType().try_coerce("5") == Ok(5)

    def test_failure_is_err_with_coercion_code(self):
        result = IntegerType().try_coerce("five")
        assert isinstance(result, Err)
        error = result.unwrap_err()
        assert error.code == ErrorCode.E2030_COERCION_FAILED
        assert error.code.http_status == 400
        assert error.metadata["target"] == "Integer"
        assert error.context.origin == "IntegerType"
        assert isinstance(error.cause, CoercionError)

    def test_failure_is_logged_at_debug(self):
        with capture_logs() as logs:
            IntegerType().try_coerce("five")
        assert [entry["event"] for entry in logs] == ["coercion_failed"]
        assert logs[0]["log_level"] == "debug"
        assert logs[0]["target"] == "Integer"


class TestCoercionPolicy:
    def test_default_policy_is_lenient(self):
        assert IntegerType().policy is CoercionPolicy.LENIENT
        assert not IntegerType().strict

    def test_explicit_policy_wins(self):
        assert IntegerType(coercion=CoercionPolicy.STRICT).strict

    def test_process_wide_strict_mode(self, strict_mode):
        assert IntegerType().policy is CoercionPolicy.STRICT
        assert IntegerType(coercion=CoercionPolicy.LENIENT).policy is CoercionPolicy.LENIENT


class TestValidationResult:
    def test_success_has_no_errors(self):
        result = ValidationResult.success()
        assert result.valid
        assert result.errors == ()
        assert result.to_dict() == {"valid": True, "errors": []}

    def test_failure_serializes_details(self):
        result = IntegerType(minimum=0).validate(-1)
        assert result.to_dict() == {
            "valid": False,
            "errors": ["Value -1 is below minimum 0"],
            "details": [{
                "code": "E2005_CONSTRAINT_VIOLATION",
                "category": "constraint",
                "type": "IntegerType(minimum: 0)",
                "errors": ["Value -1 is below minimum 0"],
            }],
        }

    def test_to_app_error(self):
        error = StringType(min_length=3).validate(1).to_app_error(origin="signup")
        assert error.code == ErrorCode.E2000_VALIDATION_GENERIC
        assert error.message == "Validation failed: 1 error"
        assert error.metadata["errors"] == ["Expected string, got int"]
        assert error.metadata["categories"] == ["type"]
        assert error.context.origin == "signup"
