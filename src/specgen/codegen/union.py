"""Union synthesis for ``anyOf``/``oneOf`` nodes.

One composition node becomes one of three things:

* **passthrough** -- a single member is synthesized directly;
* **optional** -- when removing the exact null type leaves one member, that
  member is synthesized and marked nullable;
* **tagged union** -- otherwise every member gets a type name, the names are
  deduplicated (first occurrence wins), and a discriminator, if declared, is
  resolved to a complete ``value -> type name`` mapping.

Inline members are named from the positional path plus their index, so
``Pet.value``'s second inline member is ``PetValue1`` on every run.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from specgen.codegen.components import is_null_schema
from specgen.codegen.naming import path_to_type_name, ref_to_name
from specgen.codegen.registry import SynthesisContext
from specgen.codegen.schema import generate_type
from specgen.exceptions import (
    AmbiguousDiscriminatorMappingError,
    IncompleteDiscriminatorMappingError,
)
from specgen.models import (
    Discriminator,
    SpecLocation,
    TypeDefinition,
    TypeKind,
    TypeSchema,
)
from specgen.parser.resolver import get_ref, try_resolve_ref

logger = logging.getLogger(__name__)


def generate_union(
    elements: list[Any],
    discriminator: Optional[dict[str, Any]],
    ctx: SynthesisContext,
) -> TypeSchema:
    """Synthesize the members of one ``anyOf``/``oneOf`` node.

    Args:
        elements: The raw member schemas, in declaration order.
        discriminator: The node's ``discriminator`` object, if any.
        ctx: Context positioned at the composition node.

    Returns:
        The member's own shape for passthrough and optional collapse, or a
        :attr:`~specgen.models.TypeKind.UNION` shape otherwise.

    Raises:
        AmbiguousDiscriminatorMappingError: A member under a discriminator
            has no reference to derive its value from.
        IncompleteDiscriminatorMappingError: The mapping does not cover the
            distinct members exactly.
    """
    if len(elements) == 1:
        element = elements[0]
        return generate_type(element, ctx.with_reference(get_ref(element) or ""))

    has_null = False
    members: list[Any] = []
    for element in elements:
        target = element
        ref = get_ref(element)
        if ref is not None:
            target = try_resolve_ref(ref, ctx.model)
        if is_null_schema(target):
            has_null = True
            continue
        members.append(element)

    if not members:
        return TypeSchema(kind=TypeKind.NULL, type_name="null")

    if len(members) == 1:
        member = members[0]
        schema = generate_type(member, ctx.with_reference(get_ref(member) or ""))
        schema.nullable = True
        return schema

    union = TypeSchema(
        kind=TypeKind.UNION,
        type_name=path_to_type_name(ctx.path) or "union",
        nullable=has_null,
    )
    explicit: dict[str, str] = {}
    if isinstance(discriminator, dict):
        union.discriminator = Discriminator(
            property=discriminator.get("propertyName") or "",
        )
        explicit = discriminator.get("mapping") or {}

    names: list[str] = []
    for index, member in enumerate(members):
        ref = get_ref(member) or ""
        member_path = ctx.path + (str(index),)
        member_schema = generate_type(member, ctx.at(member_path).with_reference(ref))

        if ref or member_schema.is_primitive:
            member_name = member_schema.type_name
        else:
            member_name = ctx.registry.claim(
                path_to_type_name(member_path), key="/".join(member_path)
            )
            definition = TypeDefinition(
                name=member_name, schema=member_schema, location=SpecLocation.UNION
            )
            ctx.registry.add(definition)
            union.additional_types.append(definition)
        union.additional_types.extend(member_schema.additional_types)

        if union.discriminator is not None:
            _map_member(union.discriminator, explicit, ref, member_name, index, ctx)
        names.append(member_name)

    union.union_members = list(dict.fromkeys(names))

    if union.discriminator is not None and len(union.discriminator.mapping) != len(
        union.union_members
    ):
        raise IncompleteDiscriminatorMappingError(
            f"Discriminator '{union.discriminator.property}' maps "
            f"{len(union.discriminator.mapping)} value(s) for "
            f"{len(union.union_members)} union member(s)",
            ctx.location,
        )

    logger.debug(
        "Synthesized union %s with members %s", union.type_name, union.union_members
    )
    return union


def _map_member(
    discriminator: Discriminator,
    explicit: dict[str, str],
    ref: str,
    member_name: str,
    index: int,
    ctx: SynthesisContext,
) -> None:
    if not ref:
        raise AmbiguousDiscriminatorMappingError(
            f"Union member {index} is inline; cannot derive a value for "
            f"discriminator '{discriminator.property}'",
            ctx.location,
        )

    if not explicit:
        discriminator.mapping[ref_to_name(ref)] = member_name
        return

    bare = ref_to_name(ref)
    for value, target in explicit.items():
        if target == ref or target == bare:
            discriminator.mapping[value] = member_name
            return
