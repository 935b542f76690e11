"""Option handling shared by the document-processing commands."""

from __future__ import annotations

from typing import Any, NoReturn, Optional

import typer

from specgen.exceptions import SpecgenError
from specgen.models import FilterConfig, FilterParamsConfig
from specgen.output import error

VALID_FORMATS = ("json", "yaml")


def filter_from_flags(
    include_tags: Optional[list[str]] = None,
    exclude_tags: Optional[list[str]] = None,
    include_paths: Optional[list[str]] = None,
    exclude_paths: Optional[list[str]] = None,
    include_operation_ids: Optional[list[str]] = None,
    exclude_operation_ids: Optional[list[str]] = None,
) -> FilterConfig:
    """Build a :class:`FilterConfig` from repeated CLI flags (``None`` means unset)."""
    return FilterConfig(
        include=FilterParamsConfig(
            tags=include_tags or [],
            paths=include_paths or [],
            operation_ids=include_operation_ids or [],
        ),
        exclude=FilterParamsConfig(
            tags=exclude_tags or [],
            paths=exclude_paths or [],
            operation_ids=exclude_operation_ids or [],
        ),
    )


def check_format(value: Optional[str]) -> Optional[str]:
    """Typer callback rejecting unknown ``--format`` values."""
    if value is not None and value not in VALID_FORMATS:
        raise typer.BadParameter(
            f"must be one of: {', '.join(VALID_FORMATS)}", param_hint="--format"
        )
    return value


def fail(exc: SpecgenError) -> NoReturn:
    """Report *exc* on stderr and exit with its code."""
    error(str(exc))
    raise typer.Exit(code=exc.exit_code)


# Typer option factories; each command gets its own OptionInfo.


def include_tag_option() -> Any:
    return typer.Option(None, "--include-tag", help="Keep operations with this tag (repeatable).")


def exclude_tag_option() -> Any:
    return typer.Option(None, "--exclude-tag", help="Drop operations with this tag (repeatable).")


def include_path_option() -> Any:
    return typer.Option(None, "--include-path", help="Keep only this path (repeatable).")


def exclude_path_option() -> Any:
    return typer.Option(None, "--exclude-path", help="Drop this path (repeatable).")


def include_operation_option() -> Any:
    return typer.Option(
        None, "--include-operation-id", help="Keep only this operation id (repeatable)."
    )


def exclude_operation_option() -> Any:
    return typer.Option(
        None, "--exclude-operation-id", help="Drop this operation id (repeatable)."
    )


def config_option() -> Any:
    return typer.Option(None, "--config", "-c", help="Path to a specgen config file.")
