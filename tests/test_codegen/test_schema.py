"""Tests for specgen.codegen.schema -- schema node to TypeSchema."""

from __future__ import annotations

from typing import Any

import pytest

from specgen.codegen.registry import SynthesisContext
from specgen.codegen.schema import generate_type
from specgen.exceptions import TypeGenerationError
from specgen.models import SpecLocation, TypeKind


def _ctx(schemas: dict[str, Any] | None = None, *path: str) -> SynthesisContext:
    model = {"openapi": "3.1.0", "components": {"schemas": schemas or {}}}
    return SynthesisContext(model=model, path=path or ("Root",))


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------


class TestScalars:
    @pytest.mark.parametrize("type_name", ["string", "integer", "number", "boolean"])
    def test_primitives(self, type_name: str) -> None:
        schema = generate_type({"type": type_name}, _ctx())
        assert schema.kind is TypeKind.PRIMITIVE
        assert schema.type_name == type_name

    def test_format_kept(self) -> None:
        schema = generate_type({"type": "string", "format": "date-time"}, _ctx())
        assert schema.format == "date-time"

    def test_enum(self) -> None:
        schema = generate_type({"type": "string", "enum": ["a", "b", None]}, _ctx())
        assert schema.kind is TypeKind.ENUM
        assert schema.enum_values == ["a", "b"]
        assert schema.nullable is True

    def test_integer_enum(self) -> None:
        schema = generate_type({"type": "integer", "enum": [1, 2]}, _ctx())
        assert schema.type_name == "integer"
        assert schema.enum_values == [1, 2]

    def test_openapi30_nullable(self) -> None:
        schema = generate_type({"type": "string", "nullable": True}, _ctx())
        assert schema.nullable is True

    def test_openapi31_type_list(self) -> None:
        schema = generate_type({"type": ["integer", "null"]}, _ctx())
        assert schema.kind is TypeKind.PRIMITIVE
        assert schema.type_name == "integer"
        assert schema.nullable is True

    def test_multi_type_list_is_union(self) -> None:
        schema = generate_type({"type": ["string", "integer"]}, _ctx())
        assert schema.kind is TypeKind.UNION
        assert schema.union_members == ["string", "integer"]

    def test_null_type(self) -> None:
        assert generate_type({"type": "null"}, _ctx()).kind is TypeKind.NULL

    @pytest.mark.parametrize("node", [{}, True, None, {"description": "anything"}])
    def test_any(self, node: Any) -> None:
        assert generate_type(node, _ctx()).kind is TypeKind.ANY

    def test_description_kept(self) -> None:
        schema = generate_type({"type": "string", "description": "A name"}, _ctx())
        assert schema.description == "A name"

    def test_non_schema_raises(self) -> None:
        with pytest.raises(TypeGenerationError, match="Expected a schema object at Root"):
            generate_type(["not", "a", "schema"], _ctx())


# ---------------------------------------------------------------------------
# Containers
# ---------------------------------------------------------------------------


class TestContainers:
    def test_array(self) -> None:
        schema = generate_type({"type": "array", "items": {"type": "string"}}, _ctx())
        assert schema.kind is TypeKind.ARRAY
        assert schema.type_name == "array<string>"
        assert schema.items is not None and schema.items.type_name == "string"

    def test_array_of_references(self) -> None:
        schema = generate_type(
            {"type": "array", "items": {"$ref": "#/components/schemas/Pet"}},
            _ctx({"Pet": {"type": "object"}}),
        )
        assert schema.type_name == "array<Pet>"

    def test_map(self) -> None:
        schema = generate_type(
            {"type": "object", "additionalProperties": {"type": "integer"}}, _ctx()
        )
        assert schema.kind is TypeKind.MAP
        assert schema.type_name == "map<string, integer>"

    def test_free_form_map(self) -> None:
        schema = generate_type({"type": "object", "additionalProperties": True}, _ctx())
        assert schema.kind is TypeKind.MAP
        assert schema.type_name == "map<string, any>"

    def test_object_properties_and_required(self) -> None:
        schema = generate_type(
            {
                "type": "object",
                "required": ["id"],
                "properties": {
                    "id": {"type": "integer"},
                    "name": {"type": "string", "description": "Display name"},
                },
            },
            _ctx(),
        )
        assert schema.kind is TypeKind.OBJECT
        assert [(p.name, p.required) for p in schema.properties] == [
            ("id", True),
            ("name", False),
        ]
        assert schema.properties[1].description == "Display name"

    def test_property_union_is_lifted(self) -> None:
        ctx = _ctx(None, "Note")
        schema = generate_type(
            {
                "type": "object",
                "properties": {
                    "value": {"oneOf": [{"type": "integer"}, {"type": "string"}]},
                },
            },
            ctx,
        )
        value = schema.properties[0].schema_
        assert value.kind is TypeKind.REFERENCE
        assert value.type_name == "NoteValue"
        lifted = ctx.registry.get("NoteValue")
        assert lifted is not None
        assert lifted.location is SpecLocation.UNION
        assert lifted.union_members == ["integer", "string"]
        assert [td.name for td in schema.additional_types] == ["NoteValue"]

    def test_property_optional_union_stays_inline(self) -> None:
        ctx = _ctx(None, "Note")
        schema = generate_type(
            {"properties": {"body": {"anyOf": [{"type": "string"}, {"type": "null"}]}}},
            ctx,
        )
        body = schema.properties[0].schema_
        assert body.kind is TypeKind.PRIMITIVE
        assert body.nullable is True
        assert len(ctx.registry) == 0


# ---------------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------------


class TestAllOf:
    def test_single_member_passthrough(self) -> None:
        schema = generate_type(
            {"allOf": [{"$ref": "#/components/schemas/Base"}]},
            _ctx({"Base": {"type": "object"}}),
        )
        assert schema.kind is TypeKind.REFERENCE
        assert schema.type_name == "Base"

    def test_merges_properties_and_required(self) -> None:
        schemas = {
            "Base": {
                "type": "object",
                "required": ["id"],
                "properties": {"id": {"type": "integer"}},
            },
        }
        schema = generate_type(
            {
                "allOf": [
                    {"$ref": "#/components/schemas/Base"},
                    {"type": "object", "required": ["name"], "properties": {"name": {"type": "string"}}},
                ]
            },
            _ctx(schemas),
        )
        assert schema.kind is TypeKind.OBJECT
        assert [(p.name, p.required) for p in schema.properties] == [
            ("id", True),
            ("name", True),
        ]

    def test_nested_all_of_flattened(self) -> None:
        schemas = {
            "A": {"properties": {"a": {"type": "string"}}},
            "B": {"allOf": [{"$ref": "#/components/schemas/A"}], "properties": {"b": {"type": "string"}}},
        }
        schema = generate_type(
            {"allOf": [{"$ref": "#/components/schemas/B"}, {"properties": {"c": {"type": "string"}}}]},
            _ctx(schemas),
        )
        assert [p.name for p in schema.properties] == ["a", "b", "c"]

    def test_self_referencing_all_of_terminates(self) -> None:
        schemas = {"Loop": {"allOf": [{"$ref": "#/components/schemas/Loop"}], "properties": {"x": {}}}}
        schema = generate_type(
            {"allOf": [{"$ref": "#/components/schemas/Loop"}, {"properties": {"y": {}}}]},
            _ctx(schemas),
        )
        assert [p.name for p in schema.properties] == ["x", "y"]


# ---------------------------------------------------------------------------
# References
# ---------------------------------------------------------------------------


class TestReferences:
    def test_component_reference_by_name(self) -> None:
        schema = generate_type({"$ref": "#/components/schemas/pet_owner"}, _ctx())
        assert schema.kind is TypeKind.REFERENCE
        assert schema.type_name == "PetOwner"
        assert schema.ref == "#/components/schemas/pet_owner"

    def test_external_reference_kept_by_name(self) -> None:
        schema = generate_type({"$ref": "common.yaml#/components/schemas/Money"}, _ctx())
        assert schema.kind is TypeKind.REFERENCE
        assert schema.type_name == "Money"

    def test_deep_reference_registered_as_own_type(self) -> None:
        schemas = {
            "Pet": {
                "type": "object",
                "properties": {
                    "owner": {"type": "object", "properties": {"name": {"type": "string"}}}
                },
            }
        }
        ctx = _ctx(schemas)
        schema = generate_type({"$ref": "#/components/schemas/Pet/properties/owner"}, ctx)
        assert schema.type_name == "PetOwner"
        registered = ctx.registry.get("PetOwner")
        assert registered is not None
        assert registered.schema_.kind is TypeKind.OBJECT

    def test_deep_reference_registered_once(self) -> None:
        schemas = {"Pet": {"properties": {"owner": {"type": "object", "properties": {}}}}}
        ctx = _ctx(schemas)
        generate_type({"$ref": "#/components/schemas/Pet/properties/owner"}, ctx)
        second = generate_type({"$ref": "#/components/schemas/Pet/properties/owner"}, ctx)
        assert second.additional_types == []
        assert len(ctx.registry) == 1

    def test_recursive_deep_reference_terminates(self) -> None:
        schemas = {
            "Tree": {
                "properties": {
                    "node": {
                        "type": "object",
                        "properties": {
                            "next": {"$ref": "#/components/schemas/Tree/properties/node"}
                        },
                    }
                }
            }
        }
        ctx = _ctx(schemas)
        schema = generate_type({"$ref": "#/components/schemas/Tree/properties/node"}, ctx)
        assert schema.type_name == "TreeNode"
        node = ctx.registry.get("TreeNode")
        assert node is not None
        assert node.schema_.properties[0].schema_.type_name == "TreeNode"
