"""Single-owner wrapper around one OpenAPI document and its mutable model.

A :class:`Document` is created once per generation run. The pipeline stages
(filtering, pruning, type generation) all work on the dict returned by
:meth:`Document.build_model`, which is parsed lazily and then cached, so every
stage sees, and mutates, the same structure.

After filtering, :meth:`Document.render_and_reload` serialises the mutated
model back to canonical bytes and parses it again; this guarantees that what
later stages see is exactly what a fresh parse of the rendered document would
produce.

A ``Document`` is not safe to share between concurrent callers. Independent
runs should each build their own instance.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import yaml

from specgen.exceptions import SpecParseError
from specgen.parser.loader import parse_content, read_source, validate_openapi_version

logger = logging.getLogger(__name__)


class Document:
    """An OpenAPI document with a cached, mutable model.

    Args:
        content: Raw document text (JSON or YAML).
        hint: Optional format hint (``"json"`` or ``"yaml"``). When empty,
            the format is guessed from the first non-blank character.
        source: Human-readable origin used in error messages.

    Example::

        doc = Document.from_source("openapi.yaml")
        model = doc.build_model()
        assert doc.build_model() is model
    """

    def __init__(self, content: str | bytes, hint: str = "", source: str = "<memory>") -> None:
        if isinstance(content, bytes):
            content = content.decode("utf-8")
        self._content = content
        self._source = source
        self._format = hint or _guess_format(content)
        self._model: Optional[dict[str, Any]] = None
        self._openapi_version: Optional[str] = None

    @classmethod
    def from_source(cls, source: str) -> Document:
        """Read a document from a URL, file path, or ``-`` for stdin."""
        content, hint = read_source(source)
        return cls(content, hint=hint, source=source)

    @classmethod
    def from_model(cls, model: dict[str, Any], format: str = "json") -> Document:
        """Wrap an already-parsed model; the dict is used as-is, not copied."""
        doc = cls(_dump(model, format), hint=format)
        doc._model = model
        doc._openapi_version = validate_openapi_version(model)
        return doc

    @property
    def source(self) -> str:
        return self._source

    @property
    def format(self) -> str:
        """Serialisation format used by :meth:`render` (``json`` or ``yaml``)."""
        return self._format

    @property
    def openapi_version(self) -> str:
        if self._openapi_version is None:
            self.build_model()
        assert self._openapi_version is not None
        return self._openapi_version

    def build_model(self) -> dict[str, Any]:
        """Return the document model, parsing it on first use.

        Repeated calls return the identical dict object, so mutations made by
        one stage are visible to the next.

        Raises:
            SpecParseError: If the content is not a valid OpenAPI 3.x document.
        """
        if self._model is None:
            model = parse_content(self._content, hint=self._format)
            self._openapi_version = validate_openapi_version(model)
            self._model = model
            logger.debug(
                "Built model for %s (OpenAPI %s)", self._source, self._openapi_version
            )
        return self._model

    def render(self) -> bytes:
        """Serialise the current model to canonical bytes in :attr:`format`."""
        return _dump(self.build_model(), self._format).encode("utf-8")

    def render_and_reload(self) -> dict[str, Any]:
        """Render the current model and replace it with a fresh parse of the output.

        Returns:
            The newly parsed model, which subsequent :meth:`build_model`
            calls return.

        Raises:
            SpecParseError: If the rendered document cannot be parsed again.
        """
        try:
            rendered = self.render()
        except (TypeError, ValueError, yaml.YAMLError) as exc:
            raise SpecParseError(f"Error rendering document: {exc}") from exc

        self._content = rendered.decode("utf-8")
        self._model = None
        try:
            return self.build_model()
        except SpecParseError as exc:
            raise SpecParseError(f"Error reloading document: {exc}") from exc


def _guess_format(content: str) -> str:
    stripped = content.lstrip()
    if stripped.startswith(("{", "[")):
        return "json"
    return "yaml"


def _dump(model: dict[str, Any], format: str) -> str:
    if format == "yaml":
        return yaml.safe_dump(model, sort_keys=False, allow_unicode=True)
    return json.dumps(model, indent=2, ensure_ascii=False) + "\n"
