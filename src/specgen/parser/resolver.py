"""Look up ``$ref`` JSON Reference pointers inside an OpenAPI model.

Unlike a full dereferencing pass, nothing here copies or rewrites the
document: the pipeline mutates one shared model in place, so references are
resolved lazily, one pointer at a time, against whatever the model currently
holds.

Only **internal** references (those starting with ``#/``) are supported.
External file or URL references raise
:class:`~specgen.exceptions.SpecParseError`; callers that can tolerate them
check :func:`is_local_ref` first.
"""

from __future__ import annotations

from typing import Any, Optional

from specgen.exceptions import SpecParseError

REF_KEY = "$ref"
"""Key marking a JSON Reference object."""


def get_ref(node: Any) -> Optional[str]:
    """Return the ``$ref`` string of *node*, or ``None`` if it is not a reference."""
    if isinstance(node, dict):
        ref = node.get(REF_KEY)
        if isinstance(ref, str) and ref:
            return ref
    return None


def is_local_ref(ref: str) -> bool:
    """Whether *ref* points inside the current document."""
    return ref.startswith("#/")


def split_pointer(ref: str) -> list[str]:
    """Split an internal reference into unescaped JSON Pointer segments.

    Handles RFC 6901 escaping (``~1`` for ``/``, ``~0`` for ``~``)::

        >>> split_pointer("#/components/schemas/a~1b")
        ['components', 'schemas', 'a/b']
    """
    if not is_local_ref(ref):
        raise SpecParseError(
            f"External $ref not supported: {ref}. "
            "Only internal references (#/...) are handled."
        )
    return [
        segment.replace("~1", "/").replace("~0", "~")
        for segment in ref[2:].split("/")
    ]


def resolve_ref(ref: str, root: dict[str, Any]) -> Any:
    """Resolve a single ``$ref`` string against the root model.

    Args:
        ref: The ``$ref`` string (e.g., ``"#/components/schemas/Pet"``).
        root: The document model to resolve against.

    Returns:
        The value found at the referenced path (the live object, not a copy).

    Raises:
        SpecParseError: If the reference is external, or if any segment in
            the pointer path does not exist in the document.
    """
    current: Any = root
    for segment in split_pointer(ref):
        if isinstance(current, dict):
            if segment not in current:
                raise SpecParseError(
                    f"Cannot resolve $ref '{ref}': "
                    f"key '{segment}' not found at path"
                )
            current = current[segment]
        elif isinstance(current, list):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError) as exc:
                raise SpecParseError(
                    f"Cannot resolve $ref '{ref}': "
                    f"invalid array index '{segment}'"
                ) from exc
        else:
            raise SpecParseError(
                f"Cannot resolve $ref '{ref}': "
                f"cannot navigate into {type(current).__name__}"
            )
    return current


def try_resolve_ref(ref: str, root: dict[str, Any]) -> Any:
    """Like :func:`resolve_ref` but return ``None`` for external or dangling refs."""
    if not is_local_ref(ref):
        return None
    try:
        return resolve_ref(ref, root)
    except SpecParseError:
        return None


def deref(node: Any, root: dict[str, Any], max_hops: int = 32) -> Any:
    """Follow a chain of reference objects until a non-reference node.

    Used for parameter/response/body components, which may themselves be
    ``$ref`` objects pointing at other components.

    Raises:
        SpecParseError: If a pointer cannot be resolved or the chain loops.
    """
    seen: set[str] = set()
    while (ref := get_ref(node)) is not None:
        if ref in seen or len(seen) >= max_hops:
            raise SpecParseError(f"Circular $ref chain at '{ref}'")
        seen.add(ref)
        node = resolve_ref(ref, root)
    return node
