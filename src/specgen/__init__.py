"""specgen -- Generate language-neutral type models from OpenAPI 3.0/3.1 specs.

This package reads an OpenAPI document, trims it down to what the caller asked
for, and turns the surviving operations and schemas into a type model that a
target-language emitter can render without looking at the raw document again.

Typical workflow::

    specgen generate openapi.yaml --include-tag pets -o types.json
    specgen prune openapi.yaml -o pruned.yaml

The heavy lifting happens in :mod:`specgen.codegen`: filtering, reachability
pruning of components, and union/discriminator synthesis.

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the entire package.
    config: Generation config loading and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
