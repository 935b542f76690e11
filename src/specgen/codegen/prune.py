"""Component pruning -- mark-and-sweep over the document's component table.

Pruning runs after filtering and before type generation. It first strips
everything the emitter has no representation for (see
:func:`sanitize_document`), then alternates two steps until nothing changes:

1. :func:`~specgen.codegen.collector.collect_references` marks every
   reference reachable from a surviving operation;
2. :func:`remove_orphaned_components` sweeps every schema, parameter,
   request body, response, and header whose own reference was not marked.

The loop is bounded by :data:`MAX_PRUNE_ITERATIONS`. Exceeding it means the
collector produced a reachable set that removal never stabilises, which is a
defect rather than a property of the input, so it fails loudly with
:class:`~specgen.exceptions.PruneError` instead of returning a half-pruned
model.
"""

from __future__ import annotations

import logging
from typing import Any

from specgen.codegen.collector import collect_references
from specgen.codegen.components import (
    ComponentKind,
    iter_components,
    iter_operation_roots,
    media_types,
)
from specgen.exceptions import PruneError
from specgen.parser.document import Document

logger = logging.getLogger(__name__)

MAX_PRUNE_ITERATIONS = 1000
"""Upper bound on collect/remove rounds. Do not raise it to make an input pass."""

DROPPED_COMPONENTS = ("securitySchemes", "callbacks", "examples", "links")
"""Component tables removed unconditionally before pruning."""


def prune_document(document: Document, max_iterations: int = MAX_PRUNE_ITERATIONS) -> int:
    """Remove every component not reachable from a surviving operation.

    Mutates the document's cached model in place; no reload happens, so later
    stages calling :meth:`~specgen.parser.document.Document.build_model` see
    the pruned structure directly.

    Args:
        document: The document whose model to prune.
        max_iterations: Safety cap on collect/remove rounds.

    Returns:
        The total number of components removed by the sweep loop.

    Raises:
        PruneError: If no fixpoint is reached within *max_iterations*.
    """
    model = document.build_model()

    logger.debug(
        "Pruning: removing webhooks, security schemes, callbacks, "
        "component examples, links"
    )
    sanitize_document(model)

    total = 0
    iteration = 0
    while True:
        iteration += 1
        if iteration > max_iterations:
            raise PruneError(
                f"Pruning exceeded maximum iterations ({max_iterations}), "
                "possible infinite loop"
            )

        refs = collect_references(model)
        logger.debug("Iteration %d: %d reachable references", iteration, len(refs))

        removed = remove_orphaned_components(model, refs)
        logger.debug("Iteration %d: removed %d components", iteration, removed)

        if removed < 1:
            return total
        total += removed


def remove_orphaned_components(model: dict[str, Any], refs: set[str]) -> int:
    """Delete every tracked component whose own reference is not in *refs*.

    Args:
        model: The document model to mutate.
        refs: The reachable set from the current iteration.

    Returns:
        The number of components deleted.
    """
    components = model.get("components")
    if not isinstance(components, dict):
        return 0

    removed = 0
    for kind in ComponentKind:
        table = components.get(kind.value)
        if not isinstance(table, dict):
            continue
        for name in list(table):
            ref = kind.ref_for(name)
            if ref not in refs:
                del table[name]
                removed += 1
                logger.debug("Removed unreferenced component %s", ref)
    return removed


def sanitize_document(model: dict[str, Any]) -> None:
    """Drop document parts the emitter cannot represent.

    Removes top-level ``webhooks`` and the ``securitySchemes``, ``callbacks``,
    ``examples`` and ``links`` component tables, then clears the plural
    ``examples`` collection from every schema, media type, parameter, and
    header. A singular ``example`` value is kept.
    """
    model.pop("webhooks", None)
    components = model.get("components")
    if isinstance(components, dict):
        for key in DROPPED_COMPONENTS:
            components.pop(key, None)

    seen: set[int] = set()
    for kind, node in iter_operation_roots(model):
        _clear_examples(kind, node, seen)
    for kind, _, node in iter_components(model):
        _clear_examples(kind, node, seen)


def _clear_examples(kind: ComponentKind, node: Any, seen: set[int]) -> None:
    stack: list[tuple[ComponentKind, Any]] = [(kind, node)]
    while stack:
        current_kind, current = stack.pop()
        if not isinstance(current, dict) or id(current) in seen:
            continue
        seen.add(id(current))

        if current_kind in (
            ComponentKind.SCHEMAS,
            ComponentKind.PARAMETERS,
            ComponentKind.HEADERS,
        ):
            current.pop("examples", None)
        for media in media_types(current):
            media.pop("examples", None)

        stack.extend(current_kind.children(current))
