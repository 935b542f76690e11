"""Inspect commands -- examine what a document would generate.

Provides the ``specgen inspect`` sub-command group with read-only views of
the pipeline's output: the named types and the surviving operations. Both
run the full pipeline (honouring ``--config`` and the project config) and
print a table in the active output format.
"""

from __future__ import annotations

from typing import Optional

import typer

from specgen.commands.common import config_option, fail
from specgen.exceptions import SpecgenError
from specgen.models import GenerationResult, TypeDefinition, TypeKind
from specgen.output import debug, get_output


inspect_app = typer.Typer(no_args_is_help=True)


def _run_pipeline(spec: str, config: Optional[str], skip_prune: bool) -> GenerationResult:
    from specgen.codegen import generate
    from specgen.config import resolve_config
    from specgen.parser import Document

    try:
        settings = resolve_config(
            cli_config=config, cli_skip_prune=True if skip_prune else None
        )
        debug(f"Loading {spec}")
        return generate(Document.from_source(spec), settings)
    except SpecgenError as exc:
        fail(exc)


def _describe(definition: TypeDefinition) -> str:
    schema = definition.schema_
    if schema.kind is TypeKind.UNION:
        return " | ".join(schema.union_members)
    if schema.kind is TypeKind.OBJECT:
        return ", ".join(p.name for p in schema.properties[:5]) or "-"
    return schema.type_name or "-"


@inspect_app.command("types")
def inspect_types(
    spec: str = typer.Argument(..., help="OpenAPI document: file path, URL, or '-' for stdin."),
    config: Optional[str] = config_option(),
    skip_prune: bool = typer.Option(False, "--skip-prune", help="Keep unused components."),
) -> None:
    """List the named types the document produces.

    Example::

        specgen inspect types openapi.yaml
    """
    result = _run_pipeline(spec, config, skip_prune)

    headers = ["Name", "Kind", "Location", "Shape", "Discriminator"]
    rows: list[list[str]] = []
    for td in result.types:
        discriminator = td.discriminator.property if td.discriminator else ""
        rows.append([
            td.name,
            td.schema_.kind.value,
            td.location.value,
            _describe(td),
            discriminator,
        ])

    get_output().print_table(headers, rows, title=f"Types ({len(rows)})")


@inspect_app.command("operations")
def inspect_operations(
    spec: str = typer.Argument(..., help="OpenAPI document: file path, URL, or '-' for stdin."),
    config: Optional[str] = config_option(),
) -> None:
    """List the operations that survive filtering.

    Example::

        specgen inspect operations openapi.yaml --config specgen.yaml
    """
    result = _run_pipeline(spec, config, skip_prune=False)

    headers = ["ID", "Method", "Path", "Tags", "Types"]
    rows: list[list[str]] = []
    for op in sorted(result.operations, key=lambda o: (o.path, o.method.value)):
        rows.append([
            op.id,
            op.method.value.upper(),
            op.path,
            ", ".join(op.tags),
            ", ".join(op.type_names),
        ])

    get_output().print_table(headers, rows, title=f"Operations ({len(rows)})")
