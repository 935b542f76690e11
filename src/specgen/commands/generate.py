"""The ``specgen generate`` command.

Runs the whole pipeline (filter, prune, type synthesis) over one OpenAPI
document and writes the language-neutral type model as JSON or YAML, to
stdout or to ``--output``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
import yaml

from specgen.commands.common import (
    check_format,
    config_option,
    exclude_operation_option,
    exclude_path_option,
    exclude_tag_option,
    fail,
    filter_from_flags,
    include_operation_option,
    include_path_option,
    include_tag_option,
)
from specgen.exceptions import SpecgenError
from specgen.output import debug, emit_document, success


def generate_command(
    spec: str = typer.Argument(..., help="OpenAPI document: file path, URL, or '-' for stdin."),
    include_tag: Optional[list[str]] = include_tag_option(),
    exclude_tag: Optional[list[str]] = exclude_tag_option(),
    include_path: Optional[list[str]] = include_path_option(),
    exclude_path: Optional[list[str]] = exclude_path_option(),
    include_operation_id: Optional[list[str]] = include_operation_option(),
    exclude_operation_id: Optional[list[str]] = exclude_operation_option(),
    config: Optional[str] = config_option(),
    skip_prune: bool = typer.Option(
        False, "--skip-prune", help="Keep components no operation uses."
    ),
    format: Optional[str] = typer.Option(
        None, "--format", help="Type model format: json or yaml.", callback=check_format
    ),
    output: Optional[str] = typer.Option(
        None, "--output", "-o", help="Write the type model to this file."
    ),
) -> None:
    """Generate the type model for an OpenAPI document.

    Example::

        specgen generate openapi.yaml --include-tag pets -o types.json
    """
    from specgen.codegen import generate
    from specgen.config import atomic_write, resolve_config
    from specgen.parser import Document

    try:
        settings = resolve_config(
            cli_config=config,
            cli_filter=filter_from_flags(
                include_tag,
                exclude_tag,
                include_path,
                exclude_path,
                include_operation_id,
                exclude_operation_id,
            ),
            cli_skip_prune=True if skip_prune else None,
            cli_format=format,
            cli_output=output,
        )
        debug(f"Loading {spec}")
        result = generate(Document.from_source(spec), settings)
    except SpecgenError as exc:
        fail(exc)

    model = result.to_type_model()
    if settings.output.format == "yaml":
        text = yaml.safe_dump(model, sort_keys=False, allow_unicode=True)
    else:
        text = json.dumps(model, indent=2, ensure_ascii=False) + "\n"

    if settings.output.path:
        atomic_write(Path(settings.output.path), text)
        success(
            f"Wrote {len(result.types)} types and {len(result.operations)} "
            f"operations to {settings.output.path}"
        )
    else:
        emit_document(text, settings.output.format)
