"""Schema node -> :class:`~specgen.models.TypeSchema` synthesis.

:func:`generate_type` is the single recursive entry point of the type
generation stage. It reads a (possibly referencing) schema node out of the
pruned model and describes its shape in language-neutral terms. Composite
members that need a name of their own are registered in the context's
:class:`~specgen.codegen.registry.TypeRegistry` and referenced by name.

Naming is positional: the context path (``("Pet", "owner")``) becomes the
type name (``PetOwner``) of anything that has to be lifted out.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from specgen.codegen.components import ComponentKind, is_null_schema, is_null_type
from specgen.codegen.naming import (
    path_to_type_name,
    ref_to_name,
    schema_name_to_type_name,
)
from specgen.codegen.registry import SynthesisContext
from specgen.exceptions import TypeGenerationError
from specgen.models import Property, SpecLocation, TypeDefinition, TypeKind, TypeSchema
from specgen.parser.resolver import get_ref, is_local_ref, resolve_ref, split_pointer

logger = logging.getLogger(__name__)

PRIMITIVE_TYPES = frozenset({"string", "integer", "number", "boolean"})


def generate_type(node: Any, ctx: SynthesisContext) -> TypeSchema:
    """Describe the shape of one schema node.

    Args:
        node: A schema object, a ``$ref`` object, or ``True``/``None`` for
            "anything".
        ctx: Naming path, current reference and shared registry.

    Returns:
        A fresh :class:`TypeSchema`; nested definitions it introduced are
        listed in its ``additional_types`` and registered in ``ctx.registry``.

    Raises:
        TypeGenerationError: If *node* is not a schema.
        DiscriminatorError: If a union below *node* has an unusable mapping.
    """
    if node is None or node is True:
        return TypeSchema(kind=TypeKind.ANY, type_name="any")
    if not isinstance(node, dict):
        raise TypeGenerationError(
            f"Expected a schema object at {ctx.location}, got {type(node).__name__}"
        )

    ref = get_ref(node)
    if ref is not None:
        return _reference_type(ref, ctx)

    schema = _shape(node, ctx)
    if node.get("nullable") is True:
        schema.nullable = True
    if schema.description is None and isinstance(node.get("description"), str):
        schema.description = node["description"]
    return schema


def _shape(node: dict[str, Any], ctx: SynthesisContext) -> TypeSchema:
    for keyword in ("oneOf", "anyOf"):
        members = node.get(keyword)
        if isinstance(members, list) and members:
            from specgen.codegen.union import generate_union

            return generate_union(members, node.get("discriminator"), ctx)

    if isinstance(node.get("allOf"), list) and node["allOf"]:
        return _merge_all_of(node, ctx)

    schema_type = node.get("type")
    if isinstance(schema_type, list):
        return _type_list(node, schema_type, ctx)

    if "enum" in node and isinstance(node["enum"], list):
        values = node["enum"]
        return TypeSchema(
            kind=TypeKind.ENUM,
            type_name=schema_type or "string",
            format=node.get("format"),
            enum_values=[v for v in values if v is not None],
            nullable=None in values,
        )

    if is_null_schema(node):
        return TypeSchema(kind=TypeKind.NULL, type_name="null")

    if schema_type in PRIMITIVE_TYPES:
        return TypeSchema(
            kind=TypeKind.PRIMITIVE,
            type_name=schema_type,
            format=node.get("format"),
        )

    if schema_type == "array" or "items" in node:
        return _array_type(node, ctx)

    if (
        schema_type == "object"
        or "properties" in node
        or "additionalProperties" in node
    ):
        return _object_type(node, ctx)

    return TypeSchema(kind=TypeKind.ANY, type_name="any")


def _type_list(node: dict[str, Any], types: list[Any], ctx: SynthesisContext) -> TypeSchema:
    # OpenAPI 3.1: ``type: [string, "null"]``
    non_null = [t for t in types if not is_null_type(t)]
    nullable = len(non_null) != len(types)
    if not non_null:
        return TypeSchema(kind=TypeKind.NULL, type_name="null")
    if len(non_null) == 1:
        schema = _shape({**node, "type": non_null[0]}, ctx)
    else:
        from specgen.codegen.union import generate_union

        variants = [{**node, "type": t} for t in non_null]
        schema = generate_union(variants, None, ctx)
    schema.nullable = schema.nullable or nullable
    return schema


def _array_type(node: dict[str, Any], ctx: SynthesisContext) -> TypeSchema:
    items = node.get("items")
    if isinstance(items, list):
        # Tuple form; describe by the first item.
        items = items[0] if items else None
    item_ctx = ctx.with_path("item")
    item_schema = lift_union(generate_type(items, item_ctx), item_ctx)
    return TypeSchema(
        kind=TypeKind.ARRAY,
        type_name=f"array<{item_schema.type_name}>",
        items=item_schema,
        additional_types=list(item_schema.additional_types),
    )


def _object_type(node: dict[str, Any], ctx: SynthesisContext) -> TypeSchema:
    required = set(node.get("required") or [])
    properties: list[Property] = []
    nested: list[TypeDefinition] = []

    for name, prop in (node.get("properties") or {}).items():
        prop_ctx = ctx.with_path(name)
        prop_schema = lift_union(generate_type(prop, prop_ctx), prop_ctx)
        nested.extend(prop_schema.additional_types)
        description = prop.get("description") if isinstance(prop, dict) else None
        properties.append(
            Property(
                name=name,
                required=name in required,
                description=description,
                schema=prop_schema,
            )
        )

    additional: Optional[TypeSchema] = None
    raw_additional = node.get("additionalProperties")
    if isinstance(raw_additional, dict):
        add_ctx = ctx.with_path("additional")
        additional = lift_union(generate_type(raw_additional, add_ctx), add_ctx)
        nested.extend(additional.additional_types)
    elif raw_additional is True:
        additional = TypeSchema(kind=TypeKind.ANY, type_name="any")

    if not properties and additional is not None:
        return TypeSchema(
            kind=TypeKind.MAP,
            type_name=f"map<string, {additional.type_name}>",
            additional_properties=additional,
            additional_types=nested,
        )

    return TypeSchema(
        kind=TypeKind.OBJECT,
        type_name="object",
        properties=properties,
        additional_properties=additional,
        additional_types=nested,
    )


def lift_union(schema: TypeSchema, ctx: SynthesisContext) -> TypeSchema:
    """Register an inline union under its positional name and reference it instead."""
    if schema.kind is not TypeKind.UNION:
        return schema

    name = ctx.registry.claim(path_to_type_name(ctx.path), key="/".join(ctx.path))
    schema.type_name = name
    definition = TypeDefinition(name=name, schema=schema, location=SpecLocation.UNION)
    ctx.registry.add(definition)
    return TypeSchema(
        kind=TypeKind.REFERENCE,
        type_name=name,
        nullable=schema.nullable,
        additional_types=[definition],
    )


def _merge_all_of(node: dict[str, Any], ctx: SynthesisContext) -> TypeSchema:
    members = node["allOf"]
    own_keys = set(node) - {"allOf", "description", "nullable"}
    if len(members) == 1 and not own_keys:
        return generate_type(members[0], ctx)

    properties: dict[str, Any] = {}
    required: list[str] = []
    _collect_all_of(node, ctx, properties, required, seen=set())

    merged: dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        merged["required"] = required
    if "additionalProperties" in node:
        merged["additionalProperties"] = node["additionalProperties"]
    return _object_type(merged, ctx)


def _collect_all_of(
    node: dict[str, Any],
    ctx: SynthesisContext,
    properties: dict[str, Any],
    required: list[str],
    seen: set[str],
) -> None:
    for member in node.get("allOf") or []:
        ref = get_ref(member)
        if ref is not None:
            if ref in seen or not is_local_ref(ref):
                continue
            seen.add(ref)
            member = resolve_ref(ref, ctx.model)
        if isinstance(member, dict):
            _collect_all_of(member, ctx, properties, required, seen)

    properties.update(node.get("properties") or {})
    for name in node.get("required") or []:
        if name not in required:
            required.append(name)


def _reference_type(ref: str, ctx: SynthesisContext) -> TypeSchema:
    if not is_local_ref(ref):
        logger.debug("Keeping external reference %s by name", ref)
        return TypeSchema(
            kind=TypeKind.REFERENCE,
            type_name=schema_name_to_type_name(ref_to_name(ref)),
            ref=ref,
        )

    prefix = ComponentKind.SCHEMAS.ref_prefix
    remainder = ref[len(prefix):] if ref.startswith(prefix) else ""
    if remainder and "/" not in remainder:
        return TypeSchema(
            kind=TypeKind.REFERENCE,
            type_name=ctx.registry.component_name(ref_to_name(ref)),
            ref=ref,
        )

    # Deep reference (e.g. into Pet/properties/owner): lift the target out.
    segments = [s for s in split_pointer(ref)[2:] if s != "properties"]
    name = ctx.registry.claim(path_to_type_name(segments), key=ref)
    result = TypeSchema(kind=TypeKind.REFERENCE, type_name=name, ref=ref)

    if ctx.registry.begin(name):
        try:
            target = resolve_ref(ref, ctx.model)
            target_schema = generate_type(target, ctx.at(segments).with_reference(ref))
        finally:
            ctx.registry.finish(name)
        definition = TypeDefinition(name=name, schema=target_schema)
        ctx.registry.add(definition)
        result.additional_types.append(definition)
    return result
