"""Read OpenAPI documents from a URL, local file, or stdin.

This module is the I/O edge of the parser: it fetches raw document text,
turns JSON or YAML text into a plain ``dict``, and checks that the document
declares an OpenAPI 3.x version.

The public functions are:

* :func:`read_source` -- Fetch raw text plus a format hint from any source.
* :func:`parse_content` -- Parse text as JSON or YAML into a dict.
* :func:`validate_openapi_version` -- Check and return the ``openapi`` version
  string, rejecting Swagger 2.x and unsupported versions.

The text returned by :func:`read_source` is normally wrapped in a
:class:`~specgen.parser.document.Document`, which owns the parsed model for
the rest of a generation run.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml

from specgen.exceptions import SpecParseError


def read_source(source: str) -> tuple[str, str]:
    """Read a document from URL, file path, or stdin ('-').

    Args:
        source: A URL (http/https), file path, or '-' for stdin.

    Returns:
        A ``(content, hint)`` tuple where *hint* is ``"json"``, ``"yaml"``,
        or ``""`` when the format could not be guessed from the source.

    Raises:
        SpecParseError: If the source cannot be read.
    """
    if source == "-":
        return _read_stdin(), ""
    elif source.startswith(("http://", "https://")):
        return _fetch_url(source)
    else:
        return _read_file(source)


def _read_stdin() -> str:
    try:
        content = sys.stdin.read()
    except Exception as exc:
        raise SpecParseError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise SpecParseError("No input received from stdin")
    return content


def _fetch_url(url: str) -> tuple[str, str]:
    """Fetch a document over HTTP(S).

    The response ``content-type`` header is used as the format hint.

    Raises:
        SpecParseError: On HTTP errors or network failures.
    """
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecParseError(
            f"HTTP {exc.response.status_code} fetching spec from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SpecParseError(f"Failed to fetch spec from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"
    return response.text, hint


def _read_file(path: str) -> tuple[str, str]:
    """Read a document from a local file.

    ``.json``, ``.yaml`` and ``.yml`` extensions set the format hint; any
    other extension leaves detection to :func:`parse_content`.

    Raises:
        SpecParseError: If the file is missing, unreadable, or empty.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise SpecParseError(f"Spec file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SpecParseError(f"Failed to read spec file {path}: {exc}") from exc

    if not content.strip():
        raise SpecParseError(f"Spec file is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"
    return content, hint


def parse_content(content: str | bytes, hint: str = "") -> dict[str, Any]:
    """Parse document text into a dict.

    JSON is attempted first unless *hint* says YAML; a ``"json"`` hint makes
    a JSON syntax error final instead of falling through to YAML.

    Raises:
        SpecParseError: If neither parser accepts the text, or the top level
            is not a mapping.
    """
    if isinstance(content, bytes):
        content = content.decode("utf-8")

    errors: list[str] = []
    if hint != "yaml":
        try:
            return _require_mapping(json.loads(content))
        except json.JSONDecodeError as exc:
            if hint == "json":
                raise SpecParseError(f"Invalid JSON: {exc}") from exc
            errors.append(f"JSON error: {exc}")

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        errors.append(f"YAML error: {exc}")
        raise SpecParseError(
            "Failed to parse spec as JSON or YAML\n  " + "\n  ".join(errors)
        ) from exc
    return _require_mapping(data)


def _require_mapping(data: Any) -> dict[str, Any]:
    if isinstance(data, dict):
        return data
    got = "empty document" if data is None else type(data).__name__
    raise SpecParseError(f"Spec must be a JSON/YAML object (got {got})")


def validate_openapi_version(spec: dict[str, Any]) -> str:
    """Return the document's ``openapi`` version, accepting any 3.x release.

    Raises:
        SpecParseError: For Swagger 2.x documents, a missing ``openapi``
            field, or a major version other than 3.
    """
    if "swagger" in spec:
        raise SpecParseError(
            f"Swagger {spec['swagger']} is not supported; convert it to "
            "OpenAPI 3 first (e.g. https://converter.swagger.io)"
        )

    version = spec.get("openapi")
    if version is None:
        raise SpecParseError("Missing 'openapi' field. Is this an OpenAPI 3.x document?")

    version = str(version)
    if not version.startswith("3."):
        raise SpecParseError(
            f"Unsupported OpenAPI version: {version} (expected 3.0.x or 3.1.x)"
        )
    return version
