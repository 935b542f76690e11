"""Type registry and synthesis context shared by the type-generation stage.

:class:`TypeRegistry` is the handoff list for the emitter: each
:class:`~specgen.models.TypeDefinition` is registered once under a name no
other definition holds. :class:`SynthesisContext` carries the
positional path used to name generated types, the reference of the node being
synthesized, and the registry, through the recursive synthesis calls.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field, replace
from typing import Any, Optional

from specgen.codegen.naming import schema_name_to_type_name
from specgen.models import TypeDefinition


class TypeRegistry:
    """Insertion-ordered store of uniquely named type definitions.

    Names are handed out by :meth:`claim`, so two different definitions never
    end up under one name. Component schema names are reserved up front with
    :meth:`reserve_components`; a generated name that clashes with one gets a
    numeric suffix instead of displacing the component.
    """

    def __init__(self) -> None:
        self._types: dict[str, TypeDefinition] = {}
        self._pending: set[str] = set()
        self._claimed: set[str] = set()
        self._keys: dict[str, str] = {}
        self._components: dict[str, str] = {}

    def claim(self, base: str, key: Optional[str] = None) -> str:
        """Return an unused type name derived from *base*.

        *base* itself when free, otherwise *base* followed by the smallest
        integer from 2 that is free. Claims made with the same *key* return
        the same name; callers key by reference or by positional path.
        """
        if key is not None and key in self._keys:
            return self._keys[key]
        name = base
        suffix = 2
        while name in self._claimed or name in self._types:
            name = f"{base}{suffix}"
            suffix += 1
        self._claimed.add(name)
        if key is not None:
            self._keys[key] = name
        return name

    def reserve_components(self, names: Iterable[str]) -> None:
        """Claim a type name for each component schema, in document order."""
        for raw in names:
            if raw not in self._components:
                self._components[raw] = self.claim(schema_name_to_type_name(raw))

    def component_name(self, raw: str) -> str:
        """The type name of component schema *raw*, reserved or derived."""
        return self._components.get(raw) or schema_name_to_type_name(raw)

    def add(self, definition: TypeDefinition) -> bool:
        """Register *definition* unless its name is already taken.

        Returns:
            ``True`` if the definition was added, ``False`` if a definition
            with the same name was registered earlier.
        """
        if definition.name in self._types:
            return False
        self._types[definition.name] = definition
        return True

    def extend(self, definitions: Iterable[TypeDefinition]) -> None:
        for definition in definitions:
            self.add(definition)

    def get(self, name: str) -> Optional[TypeDefinition]:
        return self._types.get(name)

    def begin(self, name: str) -> bool:
        """Mark *name* as being synthesized; ``False`` if it already is or exists."""
        if name in self._types or name in self._pending:
            return False
        self._pending.add(name)
        return True

    def finish(self, name: str) -> None:
        self._pending.discard(name)

    @property
    def types(self) -> list[TypeDefinition]:
        return list(self._types.values())

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __iter__(self) -> Iterator[TypeDefinition]:
        return iter(self._types.values())

    def __len__(self) -> int:
        return len(self._types)


@dataclass(frozen=True)
class SynthesisContext:
    """Immutable per-call state for :func:`~specgen.codegen.schema.generate_type`.

    Derive child contexts with :meth:`with_path`, :meth:`at`, and
    :meth:`with_reference`; the registry and model are shared by all of them.
    """

    model: dict[str, Any]
    registry: TypeRegistry = field(default_factory=TypeRegistry)
    path: tuple[str, ...] = ()
    reference: str = ""

    def with_path(self, *parts: str) -> SynthesisContext:
        """Context for a child node, *parts* appended to the current path."""
        return replace(self, path=self.path + tuple(parts))

    def at(self, path: Iterable[str]) -> SynthesisContext:
        """Context rooted at an absolute *path*."""
        return replace(self, path=tuple(path))

    def with_reference(self, reference: str) -> SynthesisContext:
        return replace(self, reference=reference)

    @property
    def location(self) -> str:
        """The current path joined with ``/``, for error messages."""
        return "/".join(self.path) or "<root>"
