"""Reference collector -- the mark phase of component pruning.

Starting from every object a surviving operation uses directly (path-level
parameters, parameters, request body, responses), the collector records each
``$ref`` it meets and descends into the referenced component according to the
component's kind. Schema structure is followed through ``properties``,
``items``, ``additionalProperties``, ``allOf``/``oneOf``/``anyOf`` and
``not``.

Cycles are handled by the reachable set itself: a reference already recorded
is never descended again, so traversal terminates regardless of how the
schema graph loops. Traversal uses an explicit work stack rather than
recursion, so long reference chains do not hit the interpreter's recursion
limit.

A reference pointing *inside* a component (for example
``#/components/schemas/Pet/properties/owner``) also marks the owning
component, since the emitter can only keep ``Pet.owner`` by keeping ``Pet``.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from specgen.codegen.components import ComponentKind, iter_operation_roots
from specgen.parser.resolver import get_ref, try_resolve_ref

logger = logging.getLogger(__name__)


def collect_references(model: dict[str, Any]) -> set[str]:
    """Return every reference transitively reachable from the surviving operations.

    The set is computed from scratch on each call; nothing is cached between
    pruning iterations.

    Args:
        model: The document model (mutated by earlier stages, read-only here).

    Returns:
        A set of ``$ref`` strings, including owning-component references for
        every deep reference.
    """
    collector = ReferenceCollector(model)
    for kind, node in iter_operation_roots(model):
        collector.walk(kind, node)
    logger.debug("Collected %d references", len(collector.refs))
    return collector.refs


def owning_component_ref(ref: str) -> Optional[str]:
    """Return the reference of the component *ref* points into, if it is a deep reference.

    Example::

        >>> owning_component_ref("#/components/schemas/Pet/properties/owner")
        '#/components/schemas/Pet'
        >>> owning_component_ref("#/components/schemas/Pet") is None
        True
    """
    kind = ComponentKind.from_ref(ref)
    if kind is None:
        return None
    remainder = ref[len(kind.ref_prefix):]
    name, sep, _ = remainder.partition("/")
    if not sep or not name:
        return None
    return kind.ref_prefix + name


class ReferenceCollector:
    """Accumulates the reachable reference set for one document model.

    Args:
        model: The document model references are resolved against.
    """

    def __init__(self, model: dict[str, Any]) -> None:
        self._model = model
        self.refs: set[str] = set()
        self._stack: list[tuple[ComponentKind, Any]] = []

    def walk(self, kind: ComponentKind, node: Any) -> None:
        """Mark everything reachable from *node*, interpreted as a *kind* object."""
        self._stack.append((kind, node))
        while self._stack:
            current_kind, current = self._stack.pop()
            self._step(current_kind, current)

    def _step(self, kind: ComponentKind, node: Any) -> None:
        if not isinstance(node, dict):
            return

        ref = get_ref(node)
        if ref is not None:
            self._visit(ref, kind)
            # Only schemas may carry keywords next to $ref (OpenAPI 3.1).
            if kind is not ComponentKind.SCHEMAS:
                return

        for child in kind.children(node):
            self._stack.append(child)

    def _visit(self, ref: str, kind: ComponentKind) -> None:
        if ref in self.refs:
            return
        self.refs.add(ref)

        owner = owning_component_ref(ref)
        if owner is None:
            # Top-level component refs are interpreted by their own kind.
            kind = ComponentKind.from_ref(ref) or kind
        elif owner not in self.refs:
            # Visiting the owner re-derives its kind from the owner ref.
            self._stack.append((kind, {"$ref": owner}))

        target = try_resolve_ref(ref, self._model)
        if target is None:
            logger.debug("Not following unresolvable reference %s", ref)
            return
        self._stack.append((kind, target))
