"""Component kinds and traversal helpers over the raw OpenAPI model.

The component table of an OpenAPI document holds several kinds of reusable
objects, and each kind keeps its nested schemas in different places: a
parameter has ``schema`` and ``content``, a response has ``content`` and
``headers``, a schema has ``properties``, ``items``, composition keywords, and
so on. :class:`ComponentKind` models that closed set of variants, and every
variant answers the same question through :meth:`ComponentKind.children`:
"which nested nodes, of which kind, does this object contain?"

The reference collector, the pruner, and the sanitizer all walk the document
through these helpers instead of inspecting raw dict shapes themselves.
"""

from __future__ import annotations

import enum
from collections.abc import Iterator
from typing import Any, Optional

from specgen.models import HTTPMethod

HTTP_METHODS = tuple(m.value for m in HTTPMethod)
"""Operation keys of a path item, in declaration order of :class:`HTTPMethod`."""

COMPOSITION_KEYWORDS = ("allOf", "oneOf", "anyOf")


class ComponentKind(str, enum.Enum):
    """The named component categories that pruning tracks.

    The enum value is the key under ``components`` in the document.
    """

    SCHEMAS = "schemas"
    PARAMETERS = "parameters"
    REQUEST_BODIES = "requestBodies"
    RESPONSES = "responses"
    HEADERS = "headers"

    @property
    def ref_prefix(self) -> str:
        return f"#/components/{self.value}/"

    def ref_for(self, name: str) -> str:
        """Build the reference string of the component called *name*."""
        escaped = name.replace("~", "~0").replace("/", "~1")
        return self.ref_prefix + escaped

    @classmethod
    def from_ref(cls, ref: str) -> Optional[ComponentKind]:
        """Return the kind a reference points into, or ``None`` if it is not a component ref."""
        for kind in cls:
            if ref.startswith(kind.ref_prefix):
                return kind
        return None

    def children(self, node: Any) -> Iterator[tuple[ComponentKind, Any]]:
        """Yield ``(kind, child)`` for every nested object *node* contains.

        Reference objects are yielded as-is; resolving them is up to the
        caller.
        """
        if not isinstance(node, dict):
            return
        if self is ComponentKind.SCHEMAS:
            for sub in subschemas(node):
                yield ComponentKind.SCHEMAS, sub
            return

        if self in (ComponentKind.PARAMETERS, ComponentKind.HEADERS):
            if isinstance(node.get("schema"), dict):
                yield ComponentKind.SCHEMAS, node["schema"]

        for media in media_types(node):
            if isinstance(media.get("schema"), dict):
                yield ComponentKind.SCHEMAS, media["schema"]

        if self is ComponentKind.RESPONSES:
            headers = node.get("headers")
            if isinstance(headers, dict):
                for header in headers.values():
                    if isinstance(header, dict):
                        yield ComponentKind.HEADERS, header


def subschemas(schema: dict[str, Any]) -> Iterator[dict[str, Any]]:
    """Yield the direct subschemas of *schema*.

    Covers ``properties``, ``items`` (single schema or tuple form),
    ``additionalProperties`` when it is a schema, ``allOf``/``oneOf``/``anyOf``
    members, and ``not``.
    """
    properties = schema.get("properties")
    if isinstance(properties, dict):
        for prop in properties.values():
            if isinstance(prop, dict):
                yield prop

    items = schema.get("items")
    if isinstance(items, dict):
        yield items
    elif isinstance(items, list):
        for item in items:
            if isinstance(item, dict):
                yield item

    additional = schema.get("additionalProperties")
    if isinstance(additional, dict):
        yield additional

    for keyword in COMPOSITION_KEYWORDS:
        members = schema.get(keyword)
        if isinstance(members, list):
            for member in members:
                if isinstance(member, dict):
                    yield member

    negated = schema.get("not")
    if isinstance(negated, dict):
        yield negated


def media_types(node: dict[str, Any]) -> Iterator[dict[str, Any]]:
    """Yield the media type objects of a body, response, parameter, or header."""
    content = node.get("content")
    if isinstance(content, dict):
        for media in content.values():
            if isinstance(media, dict):
                yield media


def iter_operations(
    model: dict[str, Any],
) -> Iterator[tuple[str, str, dict[str, Any], dict[str, Any]]]:
    """Yield ``(path, method, path_item, operation)`` for every operation in ``paths``."""
    paths = model.get("paths")
    if not isinstance(paths, dict):
        return
    for path, path_item in paths.items():
        if not isinstance(path_item, dict):
            continue
        for method in HTTP_METHODS:
            operation = path_item.get(method)
            if isinstance(operation, dict):
                yield path, method, path_item, operation


def iter_operation_roots(model: dict[str, Any]) -> Iterator[tuple[ComponentKind, Any]]:
    """Yield every object directly used by a surviving operation.

    For each path item: its path-level parameters, then for each operation its
    parameters, request body, and responses (``default`` and every status
    code).
    """
    paths = model.get("paths")
    if not isinstance(paths, dict):
        return
    for path_item in paths.values():
        if not isinstance(path_item, dict):
            continue
        for param in path_item.get("parameters") or []:
            yield ComponentKind.PARAMETERS, param

        for method in HTTP_METHODS:
            operation = path_item.get(method)
            if not isinstance(operation, dict):
                continue
            body = operation.get("requestBody")
            if isinstance(body, dict):
                yield ComponentKind.REQUEST_BODIES, body
            for param in operation.get("parameters") or []:
                yield ComponentKind.PARAMETERS, param
            responses = operation.get("responses")
            if isinstance(responses, dict):
                for response in responses.values():
                    yield ComponentKind.RESPONSES, response


def iter_components(
    model: dict[str, Any],
) -> Iterator[tuple[ComponentKind, str, Any]]:
    """Yield ``(kind, name, component)`` for every tracked component."""
    components = model.get("components")
    if not isinstance(components, dict):
        return
    for kind in ComponentKind:
        table = components.get(kind.value)
        if isinstance(table, dict):
            for name, component in table.items():
                yield kind, name, component


def is_null_type(value: Any) -> bool:
    """Whether a ``type`` value names null; unquoted YAML ``null`` loads as ``None``."""
    return value is None or value == "null"


def is_null_schema(schema: Any) -> bool:
    """Whether *schema* is exactly the null type (``type: null`` or ``type: [null]``)."""
    if not isinstance(schema, dict) or "type" not in schema:
        return False
    schema_type = schema["type"]
    if isinstance(schema_type, list):
        return len(schema_type) == 1 and is_null_type(schema_type[0])
    return is_null_type(schema_type)
