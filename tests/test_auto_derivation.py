"""
Tests for schema auto-derivation from example values, attribute objects,
JSON-Schema documents and pydantic models.
"""

import json
from dataclasses import dataclass
from datetime import date, datetime
from types import SimpleNamespace
from uuid import UUID

import pytest
from pydantic import BaseModel, Field
from structlog.testing import capture_logs

from rapitapir.types import (
    ArrayType,
    BooleanType,
    DateTimeType,
    DateType,
    EmailType,
    FloatType,
    HashType,
    IntegerType,
    OptionalType,
    SchemaDefinitionError,
    StringType,
    UUIDType,
    auto_derivation,
)


# ============================================================================
# Example values
# ============================================================================

class TestInferType:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (True, BooleanType),
            (1, IntegerType),
            (1.5, FloatType),
            ("x", StringType),
            (datetime(2024, 1, 15, 10, 30), DateTimeType),
            (date(2024, 1, 15), DateType),
            ({"a": 1}, HashType),
            (None, StringType),
            (object(), StringType),
        ],
    )
    def test_scalar_inference(self, value, expected):
        assert type(auto_derivation.infer_type(value)) is expected

    def test_array_uses_first_element(self):
        inferred = auto_derivation.infer_type([1, "a"])
        assert isinstance(inferred, ArrayType)
        assert isinstance(inferred.item_type, IntegerType)

    def test_empty_array_defaults_to_strings(self):
        assert isinstance(auto_derivation.infer_type([]).item_type, StringType)

    def test_nested_mapping_has_no_fields(self):
        assert dict(auto_derivation.infer_type({"a": 1}).fields) == {}


class TestFromMapping:
    def test_derives_every_field_as_required(self):
        schema = auto_derivation.from_mapping({"id": 1, "name": "Ana", "active": True, "tags": ["a"]})
        assert list(schema.fields) == ["id", "name", "active", "tags"]
        assert schema.required_fields == ["id", "name", "active", "tags"]
        assert schema.validate({"id": 2, "name": "Bo", "active": False, "tags": []}).valid

    def test_only_and_exclude(self):
        data = {"a": 1, "b": 2, "c": 3}
        assert list(auto_derivation.from_mapping(data, only=["a", "b"]).fields) == ["a", "b"]
        assert list(auto_derivation.from_mapping(data, exclude=["b"]).fields) == ["a", "c"]
        assert list(auto_derivation.from_mapping(data, only=["a", "b"], exclude=["a"]).fields) == ["b"]

    def test_rejects_non_mappings(self):
        with pytest.raises(SchemaDefinitionError, match="Expected a mapping"):
            auto_derivation.from_mapping([1, 2])

    def test_logs_derivation(self):
        with capture_logs() as logs:
            auto_derivation.from_mapping({"a": 1})
        assert logs[0]["event"] == "schema_derived"
        assert logs[0]["source"] == "mapping"
        assert logs[0]["fields"] == ["a"]


class TestFromObject:
    def test_simple_namespace(self):
        schema = auto_derivation.from_object(SimpleNamespace(name="Ana", age=30, _secret="x"))
        assert list(schema.fields) == ["name", "age"]
        assert isinstance(schema.fields["age"], IntegerType)

    def test_dataclass_instance(self):
        @dataclass
        class Point:
            x: float
            y: float
            label: str = "origin"

        schema = auto_derivation.from_object(Point(0.0, 1.5), exclude=["label"])
        assert list(schema.fields) == ["x", "y"]
        assert isinstance(schema.fields["x"], FloatType)

    def test_pydantic_instance(self):
        class Item(BaseModel):
            sku: str
            qty: int

        schema = auto_derivation.from_object(Item(sku="A1", qty=2))
        assert isinstance(schema.fields["qty"], IntegerType)

    @pytest.mark.parametrize("source", [42, {"a": 1}, SimpleNamespace])
    def test_rejects_non_objects(self, source):
        with pytest.raises(SchemaDefinitionError, match="Expected an attribute object"):
            auto_derivation.from_object(source)

    def test_rejection_is_logged(self):
        with capture_logs() as logs:
            with pytest.raises(SchemaDefinitionError):
                auto_derivation.from_object(42)
        assert logs[0]["event"] == "derivation_rejected"
        assert logs[0]["log_level"] == "warning"


# ============================================================================
# JSON Schema
# ============================================================================

class TestFromJsonSchema:
    @pytest.fixture
    def document(self) -> dict:
        return {
            "type": "object",
            "properties": {
                "id": {"type": "string", "format": "uuid"},
                "email": {"type": "string", "format": "email"},
                "name": {"type": "string", "minLength": 1, "maxLength": 40, "description": "Full name"},
                "age": {"type": "integer", "minimum": 0},
                "score": {"type": "number", "exclusiveMaximum": 100},
                "active": {"type": "boolean"},
                "born": {"type": "string", "format": "date"},
                "seen": {"type": "string", "format": "date-time"},
                "site": {"type": "string", "format": "uri"},
                "tags": {"type": "array", "items": {"type": "string"}, "uniqueItems": True},
                "meta": {"type": "object"},
            },
            "required": ["id", "email", "name"],
        }

    def test_required_and_optional_fields(self, document):
        schema = auto_derivation.from_json_schema(document)
        assert schema.required_fields == ["id", "email", "name"]
        assert isinstance(schema.fields["age"], OptionalType)

    def test_formats_map_to_specialized_types(self, document):
        fields = auto_derivation.from_json_schema(document).fields
        assert isinstance(fields["id"], UUIDType)
        assert isinstance(fields["email"], EmailType)
        assert isinstance(fields["born"].inner, DateType)
        assert isinstance(fields["seen"].inner, DateTimeType)
        assert fields["site"].inner.format == "uri"
        assert isinstance(fields["meta"].inner, HashType)

    def test_constraints_carry_over(self, document):
        fields = auto_derivation.from_json_schema(document).fields
        assert fields["name"].min_length == 1
        assert fields["name"].max_length == 40
        assert fields["name"].description == "Full name"
        assert fields["age"].inner.minimum == 0
        assert fields["score"].inner.exclusive_maximum == 100
        assert fields["tags"].inner.unique_items is True
        assert isinstance(fields["tags"].inner.item_type, StringType)

    def test_accepts_json_text(self, document):
        schema = auto_derivation.from_json_schema(json.dumps(document), only=["id", "age"])
        assert list(schema.fields) == ["id", "age"]

    def test_additional_properties_false(self):
        schema = auto_derivation.from_json_schema({"type": "object", "additionalProperties": False})
        assert schema.additional_properties is False

    def test_derived_schema_round_trips_its_fields(self, document):
        emitted = auto_derivation.from_json_schema(document).to_json_schema()
        assert emitted["required"] == ["id", "email", "name"]
        assert emitted["properties"]["age"] == {"type": "integer", "minimum": 0}

    @pytest.mark.parametrize(
        "document,message",
        [
            ({"type": "array"}, "JSON Schema must be an object type"),
            ({"properties": {}}, "JSON Schema must be an object type"),
            ({"type": "object", "properties": ["a"]}, "'properties' must be an object"),
            ("{not json", "Invalid JSON"),
            ({"type": "object", "properties": {"a": "string"}}, "Property definition must be an object"),
        ],
    )
    def test_rejects_malformed_documents(self, document, message):
        with pytest.raises(SchemaDefinitionError, match=message):
            auto_derivation.from_json_schema(document)

    @pytest.mark.parametrize(
        "prop",
        [
            {"type": "integer", "minimum": "0"},
            {"type": "number", "multipleOf": True},
            {"type": "string", "minLength": -1},
            {"type": "string", "pattern": 5},
            {"type": "array", "items": {"type": "string"}, "maxItems": "3"},
        ],
    )
    def test_malformed_constraints_fail_at_build_time(self, prop):
        with pytest.raises(SchemaDefinitionError):
            auto_derivation.from_json_schema({"type": "object", "properties": {"n": prop}})

    def test_deeply_nested_json_text(self):
        depth = 100_000
        with pytest.raises(SchemaDefinitionError, match="Invalid JSON"):
            auto_derivation.from_json_schema("[" * depth + "]" * depth)


# ============================================================================
# Pydantic models
# ============================================================================

class Address(BaseModel):
    city: str
    zip_code: str | None = None


class User(BaseModel):
    id: UUID
    name: str = Field(min_length=1, max_length=50, description="Display name")
    code: str = Field(pattern=r"^[A-Z]{3}$")
    age: int | None = Field(default=None, ge=0)
    score: float = 0.0
    active: bool = True
    tags: list[str] = Field(default_factory=list, max_length=5)
    created: datetime
    birthday: date | None = None
    address: Address
    extra: dict[str, int] = Field(default_factory=dict)


class TestFromModel:
    @pytest.fixture
    def schema(self) -> HashType:
        return auto_derivation.from_model(User)

    def test_required_fields(self, schema):
        assert schema.required_fields == ["id", "name", "code", "created", "address"]

    def test_annotations_map_to_types(self, schema):
        fields = schema.fields
        assert isinstance(fields["id"], UUIDType)
        assert isinstance(fields["created"], DateTimeType)
        assert isinstance(fields["score"].inner, FloatType)
        assert isinstance(fields["active"].inner, BooleanType)
        assert isinstance(fields["birthday"].inner, DateType)
        assert isinstance(fields["extra"].inner, HashType)

    def test_field_constraints_carry_over(self, schema):
        fields = schema.fields
        assert (fields["name"].min_length, fields["name"].max_length) == (1, 50)
        assert fields["name"].description == "Display name"
        assert fields["code"].pattern == r"^[A-Z]{3}$"
        assert fields["tags"].inner.max_items == 5

    def test_nullable_field_is_wrapped_once(self, schema):
        age = schema.fields["age"]
        assert isinstance(age, OptionalType)
        assert isinstance(age.inner, IntegerType)
        assert age.inner.minimum == 0

    def test_nested_models_are_derived(self, schema):
        address = schema.fields["address"]
        assert isinstance(address, HashType)
        assert address.required_fields == ["city"]

    def test_derived_schema_validates(self, schema):
        payload = {
            "id": "123e4567-e89b-12d3-a456-426614174000",
            "name": "Ana",
            "code": "ABC",
            "age": -1,
            "created": "2024-01-15T10:30:00Z",
            "address": {"city": "Lisbon"},
        }
        assert schema.validate(payload).errors == ("Field 'age': Value -1 is below minimum 0",)

    def test_only(self):
        assert list(auto_derivation.from_model(User, only=["id", "name"]).fields) == ["id", "name"]

    @pytest.mark.parametrize("source", [dict, 42, Address(city="Lisbon")])
    def test_rejects_non_models(self, source):
        with pytest.raises(SchemaDefinitionError, match="Expected a pydantic model class"):
            auto_derivation.from_model(source)
