"""The ``specgen prune`` command.

Filters and prunes an OpenAPI document without synthesizing types, then
writes the reduced document. Handy for checking what a filter keeps.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

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
from specgen.output import emit_document, success


def prune_command(
    spec: str = typer.Argument(..., help="OpenAPI document: file path, URL, or '-' for stdin."),
    include_tag: Optional[list[str]] = include_tag_option(),
    exclude_tag: Optional[list[str]] = exclude_tag_option(),
    include_path: Optional[list[str]] = include_path_option(),
    exclude_path: Optional[list[str]] = exclude_path_option(),
    include_operation_id: Optional[list[str]] = include_operation_option(),
    exclude_operation_id: Optional[list[str]] = exclude_operation_option(),
    config: Optional[str] = config_option(),
    format: Optional[str] = typer.Option(
        None,
        "--format",
        help="Document format: json or yaml (default: same as input).",
        callback=check_format,
    ),
    output: Optional[str] = typer.Option(
        None, "--output", "-o", help="Write the pruned document to this file."
    ),
) -> None:
    """Write the filtered and pruned OpenAPI document.

    Example::

        specgen prune openapi.yaml --exclude-tag internal
    """
    from specgen.codegen import prepare_document
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
            cli_skip_prune=False,
        )
        document = Document.from_source(spec)
        prepare_document(document, settings)
        target = Document.from_model(document.build_model(), format=format or document.format)
        text = target.render().decode("utf-8")
    except SpecgenError as exc:
        fail(exc)

    if output:
        atomic_write(Path(output), text)
        success(f"Wrote pruned document to {output}")
    else:
        emit_document(text, target.format)
