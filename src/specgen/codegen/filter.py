"""Include/exclude filtering of operations and component schema properties.

Filtering is the first pipeline stage. It decides which operations survive,
and therefore which components the pruner will later consider live. Rules
come from a :class:`~specgen.models.FilterConfig` and are applied in three
layers:

1. **Path** -- a path missing from a non-empty ``include.paths``, or listed
   in ``exclude.paths``, is removed with every method on it.
2. **Operation** -- each method on a surviving path is removed when any of
   its tags is excluded, when ``include.tags`` is set and none of its tags
   match, when its operation id is excluded, or when ``include.operation_ids``
   is set and does not list it. Siblings on the same path are untouched. A
   path item left without operations is dropped.
3. **Schema properties** -- for component schemas named in the property
   map, include mode keeps only the listed properties and exclude mode
   deletes them. Required properties always stay. When both maps are set,
   include wins.

A rule that matches nothing is not an error.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from specgen.codegen.components import HTTP_METHODS
from specgen.models import FilterConfig
from specgen.parser.document import Document

logger = logging.getLogger(__name__)


def filter_document(document: Document, config: FilterConfig) -> Document:
    """Apply *config* to the document's model and reload it.

    Returns immediately, without touching the model, when every axis of both
    the include and exclude side is empty.

    Args:
        document: The document to filter. Its cached model is mutated.
        config: The include/exclude rules.

    Returns:
        The same document, holding the reloaded model.

    Raises:
        SpecParseError: If the mutated model cannot be rendered and reloaded.
    """
    if config.is_empty():
        return document

    model = document.build_model()
    filter_operations(model, config)
    filter_component_schema_properties(model, config)

    document.render_and_reload()
    return document


def filter_operations(model: dict[str, Any], config: FilterConfig) -> None:
    """Remove paths and operations rejected by the path, tag, and operation-id rules."""
    paths = model.get("paths")
    if not isinstance(paths, dict):
        return

    include, exclude = config.include, config.exclude

    for path in list(paths):
        if include.paths and path not in include.paths:
            logger.debug("Removing path %s: not in include.paths", path)
            del paths[path]
            continue
        if exclude.paths and path in exclude.paths:
            logger.debug("Removing path %s: in exclude.paths", path)
            del paths[path]
            continue

        path_item = paths[path]
        if not isinstance(path_item, dict):
            continue

        had_operations = False
        for method in HTTP_METHODS:
            operation = path_item.get(method)
            if not isinstance(operation, dict):
                continue
            had_operations = True
            if _should_remove_operation(operation, config):
                logger.debug("Removing operation %s %s", method.upper(), path)
                del path_item[method]

        if had_operations and not any(m in path_item for m in HTTP_METHODS):
            logger.debug("Removing path %s: no operations left", path)
            del paths[path]


def _should_remove_operation(operation: dict[str, Any], config: FilterConfig) -> bool:
    tags: list[str] = operation.get("tags") or []
    operation_id: Optional[str] = operation.get("operationId")
    include, exclude = config.include, config.exclude

    if any(tag in exclude.tags for tag in tags):
        return True
    if include.tags and not any(tag in include.tags for tag in tags):
        return True
    if exclude.operation_ids and operation_id in exclude.operation_ids:
        return True
    if include.operation_ids and operation_id not in include.operation_ids:
        return True
    return False


def filter_component_schema_properties(model: dict[str, Any], config: FilterConfig) -> None:
    """Keep or drop properties of the component schemas named in the property map."""
    schemas = (model.get("components") or {}).get("schemas")
    if not isinstance(schemas, dict):
        return

    include_mode = bool(config.include.schema_properties)
    if include_mode:
        props_filter = config.include.schema_properties
    elif config.exclude.schema_properties:
        props_filter = config.exclude.schema_properties
    else:
        return

    for schema_name, listed in props_filter.items():
        schema = schemas.get(schema_name)
        if not isinstance(schema, dict):
            continue
        properties = schema.get("properties")
        if not isinstance(properties, dict):
            continue

        required = schema.get("required") or []
        for prop_name in list(properties):
            if prop_name in required:
                continue
            keep = prop_name in listed if include_mode else prop_name not in listed
            if not keep:
                logger.debug("Removing property %s.%s", schema_name, prop_name)
                del properties[prop_name]
