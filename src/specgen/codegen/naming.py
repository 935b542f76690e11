"""Deterministic type names for synthesized definitions.

Every generated name is derived from document structure (a component name,
a reference, or the positional path of a schema node), never from counters
or hashing, so the same document always yields the same names.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

_WORD_RE = re.compile(r"[A-Za-z0-9]+")


def to_pascal_case(value: str) -> str:
    """Convert an arbitrary identifier to PascalCase.

    Non-alphanumeric characters separate words; the remainder of each word is
    left as-is so existing camelCase survives. A leading digit gets an ``N``
    prefix to keep the result a valid identifier in common target languages.

    Example::

        >>> to_pascal_case("get-pets_by id")
        'GetPetsById'
        >>> to_pascal_case("petOwner")
        'PetOwner'
        >>> to_pascal_case("200")
        'N200'
    """
    name = "".join(word[:1].upper() + word[1:] for word in _WORD_RE.findall(value))
    if name[:1].isdigit():
        name = "N" + name
    return name


def path_to_type_name(path: Iterable[str]) -> str:
    """Join a positional schema path into one type name.

    Example::

        >>> path_to_type_name(["Pet", "owner", "0"])
        'PetOwner0'
    """
    return to_pascal_case("_".join(path))


def ref_to_name(ref: str) -> str:
    """Return the unescaped final segment of a reference.

    Example::

        >>> ref_to_name("#/components/schemas/Cat")
        'Cat'
        >>> ref_to_name("pets.yaml#/Dog")
        'Dog'
    """
    if not ref:
        return ""
    segment = ref.rsplit("/", 1)[-1]
    segment = segment.rsplit("#", 1)[-1]
    return segment.replace("~1", "/").replace("~0", "~")


def schema_name_to_type_name(name: str) -> str:
    """Type name for the component schema called *name*."""
    return to_pascal_case(name)
