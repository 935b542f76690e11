"""Canonical Pydantic models shared across all specgen modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into three groups:

**Configuration models** -- loaded from ``specgen.yaml``/``specgen.json`` or
built from CLI flags:
    :class:`FilterParamsConfig`, :class:`FilterConfig`, :class:`OutputConfig`,
    and :class:`GenerateConfig`.

**Type model** -- the language-neutral output of type synthesis:
    :class:`TypeKind`, :class:`SpecLocation`, :class:`Discriminator`,
    :class:`Property`, :class:`TypeSchema`, and :class:`TypeDefinition`.

**Operation model** -- the surviving operations handed to an emitter:
    :class:`HTTPMethod`, :class:`ParameterLocation`,
    :class:`ParameterDefinition`, :class:`RequestBodyDefinition`,
    :class:`ResponseDefinition`, :class:`OperationDefinition`, and
    :class:`GenerationResult`.

All models use Pydantic v2. Fields named ``schema`` are stored as ``schema_``
with a ``schema`` alias so they do not shadow the ``BaseModel`` attribute.
"""

from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Filter Config ---


class FilterParamsConfig(BaseModel):
    """One side (include or exclude) of a :class:`FilterConfig`.

    Every axis is independent and an empty axis means "no filtering on this
    axis". ``schema_properties`` maps a component schema name to the property
    names to keep (include side) or drop (exclude side).

    Example::

        FilterParamsConfig(
            tags=["pets"],
            schema_properties={"Pet": ["id", "name"]},
        )
    """

    paths: list[str] = Field(default_factory=list, description="Exact path keys")
    tags: list[str] = Field(default_factory=list, description="Operation tags")
    operation_ids: list[str] = Field(
        default_factory=list, description="Operation identifiers"
    )
    schema_properties: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Schema name -> property names",
    )

    def is_empty(self) -> bool:
        """Return ``True`` when no axis carries a rule."""
        return not (
            self.paths or self.tags or self.operation_ids or self.schema_properties
        )


class FilterConfig(BaseModel):
    """Include/exclude rules applied to operations and schema properties.

    See :func:`~specgen.codegen.filter.filter_document` for how the axes
    combine.
    """

    include: FilterParamsConfig = Field(default_factory=FilterParamsConfig)
    exclude: FilterParamsConfig = Field(default_factory=FilterParamsConfig)

    def is_empty(self) -> bool:
        """Return ``True`` when neither side carries a rule on any axis."""
        return self.include.is_empty() and self.exclude.is_empty()


class OutputConfig(BaseModel):
    """Where and how the generated type model is written."""

    format: str = Field(default="json", description="Output format: json, yaml")
    path: Optional[str] = Field(
        default=None, description="Output file path (stdout when unset)"
    )


class GenerateConfig(BaseModel):
    """Top-level generation configuration.

    Loaded by :func:`~specgen.config.load_config` and merged with CLI flags
    by :func:`~specgen.config.resolve_config`. Unknown keys are preserved in
    ``model_extra`` so that emitters can carry their own settings in the
    same file.
    """

    model_config = ConfigDict(extra="allow")

    filter: FilterConfig = Field(default_factory=FilterConfig)
    skip_prune: bool = Field(
        default=False, description="Keep unreferenced components"
    )
    output: OutputConfig = Field(default_factory=OutputConfig)


# --- Type Model ---


class TypeKind(str, enum.Enum):
    """Shape categories of a synthesized :class:`TypeSchema`."""

    PRIMITIVE = "primitive"
    ENUM = "enum"
    ARRAY = "array"
    MAP = "map"
    OBJECT = "object"
    REFERENCE = "reference"
    UNION = "union"
    ANY = "any"
    NULL = "null"


class SpecLocation(str, enum.Enum):
    """Where in the document a :class:`TypeDefinition` originated."""

    SCHEMA = "schema"
    PARAMETERS = "parameters"
    BODY = "body"
    RESPONSE = "response"
    UNION = "union"


class Discriminator(BaseModel):
    """Discriminator of a tagged union: property name plus value -> type name."""

    property: str
    mapping: dict[str, str] = Field(default_factory=dict)


class Property(BaseModel):
    """A named property of an object :class:`TypeSchema`."""

    name: str
    required: bool = False
    description: Optional[str] = None
    schema_: TypeSchema = Field(alias="schema")

    model_config = {"populate_by_name": True}


class TypeSchema(BaseModel):
    """Language-neutral description of one schema node.

    ``type_name`` is the declaration an emitter would write where the type is
    used: a primitive name (``"string"``), a referenced type name
    (``"Pet"``), or a structural expression (``"array<Pet>"``). Nested
    definitions the shape pulls in (e.g. inline union members) are listed in
    ``additional_types``, which is left out of serialisation.
    """

    kind: TypeKind
    type_name: str = ""
    ref: Optional[str] = None
    format: Optional[str] = None
    nullable: bool = False
    description: Optional[str] = None
    enum_values: list[Any] = Field(default_factory=list)
    items: Optional[TypeSchema] = None
    properties: list[Property] = Field(default_factory=list)
    additional_properties: Optional[TypeSchema] = None
    union_members: list[str] = Field(default_factory=list)
    discriminator: Optional[Discriminator] = None
    # Serialised once at the top level of GenerationResult.types instead.
    additional_types: list[TypeDefinition] = Field(
        default_factory=list, exclude=True
    )

    @property
    def is_primitive(self) -> bool:
        """Whether the shape is a bare primitive usable in place."""
        return self.kind == TypeKind.PRIMITIVE


class TypeDefinition(BaseModel):
    """A named type handed to the emitter.

    Created fresh during synthesis and owned by whoever requested it; the
    :class:`~specgen.codegen.registry.TypeRegistry` guarantees each name is
    handed off once.
    """

    name: str
    schema_: TypeSchema = Field(alias="schema")
    location: SpecLocation = SpecLocation.SCHEMA

    model_config = {"populate_by_name": True}

    @property
    def discriminator(self) -> Optional[Discriminator]:
        return self.schema_.discriminator

    @property
    def union_members(self) -> list[str]:
        return self.schema_.union_members

    @property
    def additional_types(self) -> list[TypeDefinition]:
        return self.schema_.additional_types


# --- Operation Model ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised by OpenAPI 3.x path-item objects."""

    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"
    HEAD = "head"
    OPTIONS = "options"
    TRACE = "trace"


class ParameterLocation(str, enum.Enum):
    """Locations where an API parameter can appear, per OpenAPI ``in`` field."""

    QUERY = "query"
    HEADER = "header"
    PATH = "path"
    COOKIE = "cookie"


class ParameterDefinition(BaseModel):
    """A parameter of an :class:`OperationDefinition` with its synthesized type."""

    name: str
    location: ParameterLocation
    required: bool = False
    description: Optional[str] = None
    schema_: TypeSchema = Field(alias="schema")

    model_config = {"populate_by_name": True}


class RequestBodyDefinition(BaseModel):
    """The request body of an operation (first declared content type wins)."""

    required: bool = False
    content_type: str
    schema_: TypeSchema = Field(alias="schema")

    model_config = {"populate_by_name": True}


class ResponseDefinition(BaseModel):
    """One declared response of an operation."""

    status_code: str
    description: Optional[str] = None
    content_type: Optional[str] = None
    schema_: Optional[TypeSchema] = Field(default=None, alias="schema")

    model_config = {"populate_by_name": True}


class OperationDefinition(BaseModel):
    """A surviving operation (one path + method pair) ready for emission.

    ``type_names`` lists the definitions this operation introduced; the
    definitions themselves live once in :attr:`GenerationResult.types`.
    """

    id: str
    method: HTTPMethod
    path: str
    summary: Optional[str] = None
    description: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    path_params: list[ParameterDefinition] = Field(default_factory=list)
    query_params: list[ParameterDefinition] = Field(default_factory=list)
    header_params: list[ParameterDefinition] = Field(default_factory=list)
    cookie_params: list[ParameterDefinition] = Field(default_factory=list)
    body: Optional[RequestBodyDefinition] = None
    responses: list[ResponseDefinition] = Field(default_factory=list)
    type_names: list[str] = Field(default_factory=list)

    @property
    def params(self) -> list[ParameterDefinition]:
        """All parameters except path parameters, which are always positional."""
        return self.query_params + self.header_params + self.cookie_params

    @property
    def all_params(self) -> list[ParameterDefinition]:
        return self.params + self.path_params


class GenerationResult(BaseModel):
    """Output of :func:`~specgen.codegen.pipeline.generate`.

    ``types`` holds every :class:`TypeDefinition` exactly once, uniquely
    named. ``document`` is the filtered and pruned OpenAPI model the types
    were derived from.
    """

    openapi_version: str
    operations: list[OperationDefinition] = Field(default_factory=list)
    types: list[TypeDefinition] = Field(default_factory=list)
    document: dict[str, Any] = Field(default_factory=dict)

    def type_names(self) -> list[str]:
        return [td.name for td in self.types]

    def get_type(self, name: str) -> Optional[TypeDefinition]:
        for td in self.types:
            if td.name == name:
                return td
        return None

    def to_type_model(self) -> dict[str, Any]:
        """Serialise everything except the raw document for an emitter."""
        return self.model_dump(
            mode="json", by_alias=True, exclude={"document"}, exclude_none=True
        )


Property.model_rebuild()
TypeSchema.model_rebuild()
TypeDefinition.model_rebuild()
ParameterDefinition.model_rebuild()
RequestBodyDefinition.model_rebuild()
ResponseDefinition.model_rebuild()
