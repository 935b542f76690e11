"""Operation definitions for the surviving operations of a pruned model.

Every path + method pair becomes one :class:`~specgen.models.OperationDefinition`.
Types an operation needs that have no component name of their own are
registered under names derived from the operation id:

* ``<Id>Params`` -- the query, header, and cookie parameters as one object;
* ``<Id>Body`` -- an inline request body schema;
* ``<Id><Status>Response`` -- an inline response schema.

Path parameters stay positional and are ordered by where they appear in the
path template.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from specgen.codegen.components import iter_operations
from specgen.codegen.naming import path_to_type_name, to_pascal_case
from specgen.codegen.registry import SynthesisContext
from specgen.codegen.schema import generate_type, lift_union
from specgen.exceptions import TypeGenerationError
from specgen.models import (
    HTTPMethod,
    OperationDefinition,
    ParameterDefinition,
    ParameterLocation,
    Property,
    RequestBodyDefinition,
    ResponseDefinition,
    SpecLocation,
    TypeDefinition,
    TypeKind,
    TypeSchema,
)
from specgen.parser.resolver import deref

logger = logging.getLogger(__name__)

_INLINE_KINDS = (TypeKind.OBJECT, TypeKind.ARRAY, TypeKind.MAP, TypeKind.ENUM, TypeKind.UNION)


def build_operations(ctx: SynthesisContext) -> list[OperationDefinition]:
    """Describe every operation in ``ctx.model``, registering their types."""
    operations = []
    for path, method, path_item, operation in iter_operations(ctx.model):
        operations.append(build_operation(path, method, path_item, operation, ctx))
    logger.debug("Built %d operation definitions", len(operations))
    return operations


def operation_id(operation: dict[str, Any], method: str, path: str) -> str:
    """Return the PascalCase id of an operation.

    Falls back to the method and path when ``operationId`` is missing::

        >>> operation_id({}, "get", "/pets/{id}")
        'GetPetsId'
    """
    raw = operation.get("operationId")
    if isinstance(raw, str) and raw.strip():
        return to_pascal_case(raw)
    return to_pascal_case(f"{method} {path}")


def merge_parameters(
    path_item: dict[str, Any], operation: dict[str, Any], model: dict[str, Any]
) -> list[dict[str, Any]]:
    """Combine path-level and operation-level parameters.

    References are resolved first. An operation parameter replaces a
    path-level one with the same ``(name, in)`` pair.
    """
    merged: dict[tuple[str, str], dict[str, Any]] = {}
    for raw in (path_item.get("parameters") or []) + (operation.get("parameters") or []):
        param = deref(raw, model)
        if not isinstance(param, dict) or "name" not in param:
            continue
        merged[(param["name"], param.get("in", "query"))] = param
    return list(merged.values())


def sort_path_params(path: str, params: list[ParameterDefinition]) -> list[ParameterDefinition]:
    """Order path parameters by the position of ``{name}`` in *path*."""

    def position(param: ParameterDefinition) -> int:
        index = path.find("{" + param.name + "}")
        return index if index >= 0 else len(path)

    return sorted(params, key=position)


def build_operation(
    path: str,
    method: str,
    path_item: dict[str, Any],
    operation: dict[str, Any],
    ctx: SynthesisContext,
) -> OperationDefinition:
    op_id = operation_id(operation, method, path)
    type_names: list[str] = []

    definition = OperationDefinition(
        id=op_id,
        method=HTTPMethod(method),
        path=path,
        summary=operation.get("summary"),
        description=operation.get("description"),
        tags=list(operation.get("tags") or []),
    )

    by_location: dict[ParameterLocation, list[ParameterDefinition]] = {
        loc: [] for loc in ParameterLocation
    }
    for param in merge_parameters(path_item, operation, ctx.model):
        try:
            location = ParameterLocation(param.get("in", "query"))
        except ValueError as exc:
            raise TypeGenerationError(
                f"Parameter '{param['name']}' of {method.upper()} {path} has "
                f"unknown location '{param.get('in')}'"
            ) from exc
        param_ctx = ctx.at((op_id, "params", param["name"]))
        schema = lift_union(generate_type(_parameter_schema(param), param_ctx), param_ctx)
        _record(schema, type_names)
        by_location[location].append(
            ParameterDefinition(
                name=param["name"],
                location=location,
                required=bool(param.get("required")) or location is ParameterLocation.PATH,
                description=param.get("description"),
                schema=schema,
            )
        )

    definition.path_params = sort_path_params(path, by_location[ParameterLocation.PATH])
    definition.query_params = by_location[ParameterLocation.QUERY]
    definition.header_params = by_location[ParameterLocation.HEADER]
    definition.cookie_params = by_location[ParameterLocation.COOKIE]

    if definition.params:
        params_type = TypeDefinition(
            name=ctx.registry.claim(f"{op_id}Params"),
            schema=TypeSchema(
                kind=TypeKind.OBJECT,
                type_name="object",
                properties=[
                    Property(
                        name=p.name,
                        required=p.required,
                        description=p.description,
                        schema=p.schema_,
                    )
                    for p in definition.params
                ],
            ),
            location=SpecLocation.PARAMETERS,
        )
        ctx.registry.add(params_type)
        type_names.append(params_type.name)

    body = operation.get("requestBody")
    if body is not None:
        definition.body = _build_body(op_id, deref(body, ctx.model), ctx, type_names)

    for status, response in (operation.get("responses") or {}).items():
        definition.responses.append(
            _build_response(op_id, str(status), deref(response, ctx.model), ctx, type_names)
        )

    definition.type_names = list(dict.fromkeys(type_names))
    return definition


def _parameter_schema(param: dict[str, Any]) -> Any:
    if "schema" in param:
        return param["schema"]
    _, media = _first_media(param)
    return media.get("schema") if media else None


def _first_media(node: dict[str, Any]) -> tuple[Optional[str], Optional[dict[str, Any]]]:
    content = node.get("content")
    if isinstance(content, dict):
        for content_type, media in content.items():
            if isinstance(media, dict):
                return content_type, media
    return None, None


def _build_body(
    op_id: str, body: dict[str, Any], ctx: SynthesisContext, type_names: list[str]
) -> Optional[RequestBodyDefinition]:
    content_type, media = _first_media(body)
    if media is None:
        return None
    name = f"{op_id}Body"
    schema = generate_type(media.get("schema"), ctx.at((name,)))
    schema = _named(schema, name, SpecLocation.BODY, ctx, type_names)
    return RequestBodyDefinition(
        required=bool(body.get("required")),
        content_type=content_type,
        schema=schema,
    )


def _build_response(
    op_id: str,
    status: str,
    response: dict[str, Any],
    ctx: SynthesisContext,
    type_names: list[str],
) -> ResponseDefinition:
    content_type, media = _first_media(response)
    result = ResponseDefinition(
        status_code=status,
        description=response.get("description"),
        content_type=content_type,
    )
    if media is not None:
        name = path_to_type_name((op_id, status, "Response"))
        schema = generate_type(media.get("schema"), ctx.at((name,)))
        result.schema_ = _named(schema, name, SpecLocation.RESPONSE, ctx, type_names)
    return result


def _named(
    schema: TypeSchema,
    name: str,
    location: SpecLocation,
    ctx: SynthesisContext,
    type_names: list[str],
) -> TypeSchema:
    """Register an inline composite *schema* as *name* and return a reference to it."""
    if schema.kind not in _INLINE_KINDS:
        _record(schema, type_names)
        return schema

    name = ctx.registry.claim(name)
    if schema.kind is TypeKind.UNION:
        schema.type_name = name
    definition = TypeDefinition(name=name, schema=schema, location=location)
    ctx.registry.add(definition)
    type_names.append(name)
    _record(schema, type_names)
    return TypeSchema(kind=TypeKind.REFERENCE, type_name=name, nullable=schema.nullable)


def _record(schema: TypeSchema, type_names: list[str]) -> None:
    type_names.extend(td.name for td in schema.additional_types)
