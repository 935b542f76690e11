"""Exception hierarchy for specgen.

All exceptions inherit from :class:`SpecgenError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`specgen.exit_codes`.
The top-level error handler in :func:`specgen.app.main` catches
``SpecgenError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Every pipeline stage raises rather than returning a partially processed
document, so the first failing stage halts the whole generation run.

Subclass hierarchy::

    SpecgenError (exit 1)
    +-- InvalidUsageError                        (exit 2)
    +-- ConfigError                              (exit 1)
    +-- SpecParseError                           (exit 7)
    +-- PruneError                               (exit 8)
    +-- TypeGenerationError                      (exit 9)
        +-- DiscriminatorError                   (exit 9)
            +-- AmbiguousDiscriminatorMappingError
            +-- IncompleteDiscriminatorMappingError
"""

from specgen.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_PRUNE_ERROR,
    EXIT_SPEC_PARSE_ERROR,
    EXIT_TYPE_ERROR,
)


class SpecgenError(Exception):
    """Base exception for all specgen errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`specgen.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SpecgenError):
    """Raised for invalid CLI arguments."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(SpecgenError):
    """Raised for configuration problems (missing file, invalid JSON/YAML, bad values)."""

    exit_code = EXIT_GENERIC_FAILURE


class SpecParseError(SpecgenError):
    """Raised when the OpenAPI document cannot be loaded, parsed, or reloaded."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class PruneError(SpecgenError):
    """Raised when component pruning exceeds its iteration cap.

    This never signals a legitimate input: it means the reference collector
    keeps producing a reachable set that the removal step cannot stabilise.
    """

    exit_code = EXIT_PRUNE_ERROR


class TypeGenerationError(SpecgenError):
    """Raised when a schema node cannot be turned into a type definition."""

    exit_code = EXIT_TYPE_ERROR


class DiscriminatorError(TypeGenerationError):
    """Base class for discriminator mapping failures on a union.

    Args:
        message: Human-readable error description.
        location: Positional schema path of the offending union, joined
            with ``/`` (e.g. ``"Pet/oneOf"``).
    """

    def __init__(self, message: str, location: str = ""):
        if location:
            message = f"{message} (at {location})"
        super().__init__(message)
        self.location = location


class AmbiguousDiscriminatorMappingError(DiscriminatorError):
    """Raised when a union member has no reference to derive a mapping key from."""


class IncompleteDiscriminatorMappingError(DiscriminatorError):
    """Raised when the discriminator mapping does not cover every union member."""
