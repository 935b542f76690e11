"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~specgen.exceptions.SpecgenError` subclass.
Build scripts can inspect the exit code to tell a broken input document
apart from a discriminator problem without parsing stderr.

Example::

    $ specgen generate openapi.yaml
    $ echo $?
    9   # EXIT_TYPE_ERROR -- a discriminator mapping did not cover every member
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_SPEC_PARSE_ERROR = 7
"""The OpenAPI document could not be parsed, validated, or reloaded."""

EXIT_PRUNE_ERROR = 8
"""Component pruning did not reach a fixpoint within the iteration cap."""

EXIT_TYPE_ERROR = 9
"""The type model could not be built (e.g. an invalid discriminator mapping)."""
