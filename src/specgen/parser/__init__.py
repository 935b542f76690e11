"""OpenAPI document parser -- load documents and look up ``$ref`` pointers.

This sub-package is the upstream collaborator of the generation pipeline:
it turns raw OpenAPI 3.x text (JSON or YAML, local file, remote URL, or
stdin) into a :class:`~specgen.parser.document.Document` whose cached model
the codegen stages mutate in place.

Typical usage::

    from specgen.parser import Document

    doc = Document.from_source("openapi.yaml")
    model = doc.build_model()

Sub-modules:

* :mod:`~specgen.parser.loader` -- I/O layer (URL, file, stdin) plus format
  detection and OpenAPI version validation.
* :mod:`~specgen.parser.document` -- The single-owner document with its
  cached model and render/reload support.
* :mod:`~specgen.parser.resolver` -- In-place JSON Pointer lookup of ``$ref``
  targets.
"""

from specgen.parser.document import Document
from specgen.parser.loader import parse_content, read_source, validate_openapi_version

__all__ = ["Document", "parse_content", "read_source", "validate_openapi_version"]
