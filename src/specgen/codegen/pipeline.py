"""Pipeline orchestration: filter, prune, then synthesize the type model.

The stages run strictly in order on the one model a
:class:`~specgen.parser.document.Document` owns::

    Filter Engine -> Component Pruner (fixpoint) -> type generation
                                                    (calls the Union Synthesizer)

The first stage that raises halts the run; there is no partial result.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Union

from specgen.codegen.components import ComponentKind
from specgen.codegen.filter import filter_document
from specgen.codegen.operations import build_operations
from specgen.codegen.prune import prune_document
from specgen.codegen.registry import SynthesisContext, TypeRegistry
from specgen.codegen.schema import generate_type
from specgen.models import GenerateConfig, GenerationResult, SpecLocation, TypeDefinition
from specgen.parser.document import Document

logger = logging.getLogger(__name__)


def prepare_document(
    document: Document, config: Optional[GenerateConfig] = None
) -> dict[str, Any]:
    """Filter and prune *document* in place and return its model.

    Args:
        document: The document to transform. It is mutated.
        config: Generation settings; defaults apply when omitted.

    Returns:
        The filtered (and, unless ``skip_prune`` is set, pruned) model.
    """
    config = config or GenerateConfig()

    filter_document(document, config.filter)
    if config.skip_prune:
        logger.debug("Skipping component pruning")
    else:
        removed = prune_document(document)
        logger.debug("Pruning removed %d components", removed)
    return document.build_model()


def generate(
    source: Union[str, Document], config: Optional[GenerateConfig] = None
) -> GenerationResult:
    """Run the whole pipeline and return the language-neutral type model.

    Args:
        source: A file path, URL, ``"-"`` for stdin, or an existing
            :class:`Document`.
        config: Generation settings; defaults apply when omitted.

    Returns:
        A :class:`~specgen.models.GenerationResult` whose ``types`` list holds
        every definition once, uniquely named.

    Raises:
        SpecParseError: The document cannot be loaded or reloaded.
        PruneError: Pruning did not reach a fixpoint.
        TypeGenerationError: A schema could not be synthesized, including
            discriminator mapping failures.
    """
    document = source if isinstance(source, Document) else Document.from_source(source)
    model = prepare_document(document, config)

    ctx = SynthesisContext(model=model, registry=TypeRegistry())
    generate_component_types(ctx)
    operations = build_operations(ctx)

    logger.debug(
        "Generated %d types for %d operations", len(ctx.registry), len(operations)
    )
    return GenerationResult(
        openapi_version=document.openapi_version,
        operations=operations,
        types=ctx.registry.types,
        document=model,
    )


def generate_component_types(ctx: SynthesisContext) -> None:
    """Register one definition per entry of ``components.schemas``."""
    schemas = (ctx.model.get("components") or {}).get("schemas") or {}
    ctx.registry.reserve_components(schemas)
    for name, node in schemas.items():
        type_name = ctx.registry.component_name(name)
        ref = ComponentKind.SCHEMAS.ref_for(name)
        schema = generate_type(node, ctx.at((type_name,)).with_reference(ref))
        ctx.registry.add(
            TypeDefinition(name=type_name, schema=schema, location=SpecLocation.SCHEMA)
        )
