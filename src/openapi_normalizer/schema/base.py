"""Canonical schema models.

Every node of a normalized schema tree is exactly one of the variants below.
The variant is identified by its ``kind`` tag; the predicates in
``openapi_normalizer.schema.visitor`` only ever look at that tag.

Vendor extensions (``x-`` keys) are kept as pydantic extra fields and are
emitted unchanged by ``to_dict()``.
"""

from __future__ import annotations

from typing import Annotated, Any, ClassVar, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    TypeAdapter,
    model_serializer,
    model_validator,
)

SchemaKind = Literal[
    "boolean",
    "integer",
    "number",
    "string",
    "array",
    "object",
    "one_of",
    "constant",
    "null_only",
    "reference",
    "unknown",
]

PRIMITIVE_TYPES = ("boolean", "integer", "number", "string", "array", "object")


class SchemaBase(BaseModel):
    """Attributes shared by every schema variant."""

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    kind: ClassVar[str]

    title: str | None = None
    description: str | None = None
    deprecated: bool | None = None
    read_only: bool | None = Field(default=None, alias="readOnly")
    write_only: bool | None = Field(default=None, alias="writeOnly")
    nullable: bool | None = None
    example: Any = None
    examples: Any = None

    @property
    def extensions(self) -> dict[str, Any]:
        """The ``x-`` vendor extension fields of this node."""
        return {k: v for k, v in (self.model_extra or {}).items() if k.startswith("x-")}

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the canonical JSON Schema dialect."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class BooleanSchema(SchemaBase):
    kind: ClassVar[str] = "boolean"

    type: Literal["boolean"] = "boolean"
    default: bool | None = None


class _NumericSchema(SchemaBase):
    default: int | float | None = None
    minimum: int | float | None = None
    maximum: int | float | None = None
    exclusive_minimum: bool | None = Field(default=None, alias="exclusiveMinimum")
    exclusive_maximum: bool | None = Field(default=None, alias="exclusiveMaximum")
    multiple_of: int | float | None = Field(default=None, alias="multipleOf")


class IntegerSchema(_NumericSchema):
    kind: ClassVar[str] = "integer"

    type: Literal["integer"] = "integer"


class NumberSchema(_NumericSchema):
    kind: ClassVar[str] = "number"

    type: Literal["number"] = "number"


class StringSchema(SchemaBase):
    kind: ClassVar[str] = "string"

    type: Literal["string"] = "string"
    default: str | None = None
    format: str | None = None
    pattern: str | None = None
    min_length: int | None = Field(default=None, alias="minLength")
    max_length: int | None = Field(default=None, alias="maxLength")
    content_media_type: str | None = Field(default=None, alias="contentMediaType")


class ArraySchema(SchemaBase):
    """Homogeneous (``items``) or tuple (``prefixItems``) array, never both."""

    kind: ClassVar[str] = "array"

    type: Literal["array"] = "array"
    items: Schema | None = None
    prefix_items: list[Schema] | None = Field(default=None, alias="prefixItems")
    additional_items: bool | Schema | None = Field(default=None, alias="additionalItems")
    min_items: int | None = Field(default=None, alias="minItems")
    max_items: int | None = Field(default=None, alias="maxItems")
    unique_items: bool | None = Field(default=None, alias="uniqueItems")
    default: list | None = None

    @model_validator(mode="after")
    def _single_array_form(self) -> ArraySchema:
        if self.items is not None and self.prefix_items is not None:
            raise ValueError("array schema cannot carry both items and prefixItems")
        return self

    @property
    def is_tuple(self) -> bool:
        return self.prefix_items is not None


class ObjectSchema(SchemaBase):
    kind: ClassVar[str] = "object"

    type: Literal["object"] = "object"
    properties: dict[str, Schema] | None = None
    required: list[str] | None = None
    additional_properties: bool | Schema | None = Field(default=None, alias="additionalProperties")
    min_properties: int | None = Field(default=None, alias="minProperties")
    max_properties: int | None = Field(default=None, alias="maxProperties")
    default: dict | None = None


class OneOfSchema(SchemaBase):
    kind: ClassVar[str] = "one_of"

    one_of: list[Schema] = Field(alias="oneOf")
    discriminator: dict[str, Any] | None = None


class ConstantSchema(SchemaBase):
    kind: ClassVar[str] = "constant"

    const: Any = None

    @model_serializer(mode="wrap")
    def _keep_null_const(self, handler):
        # exclude_none would otherwise drop a literal null
        data = handler(self)
        data.setdefault("const", self.const)
        return data


class NullOnlySchema(SchemaBase):
    kind: ClassVar[str] = "null_only"

    type: Literal["null"] = "null"


class ReferenceSchema(SchemaBase):
    kind: ClassVar[str] = "reference"

    ref: str = Field(alias="$ref")


class UnknownSchema(SchemaBase):
    """Any shape the normalizer does not recognize; source keys ride along as extras."""

    kind: ClassVar[str] = "unknown"


def classify(data: dict[str, Any]) -> SchemaKind:
    """Tag a canonical-dialect mapping with the variant it serializes."""
    if "$ref" in data:
        return "reference"
    if "oneOf" in data:
        return "one_of"
    if "const" in data:
        return "constant"
    type_ = data.get("type")
    if type_ in PRIMITIVE_TYPES:
        return type_
    if type_ == "null":
        return "null_only"
    return "unknown"


def _schema_tag(value: Any) -> str | None:
    if isinstance(value, SchemaBase):
        return value.kind
    if isinstance(value, dict):
        return classify(value)
    return None


Schema = Annotated[
    Union[
        Annotated[BooleanSchema, Tag("boolean")],
        Annotated[IntegerSchema, Tag("integer")],
        Annotated[NumberSchema, Tag("number")],
        Annotated[StringSchema, Tag("string")],
        Annotated[ArraySchema, Tag("array")],
        Annotated[ObjectSchema, Tag("object")],
        Annotated[OneOfSchema, Tag("one_of")],
        Annotated[ConstantSchema, Tag("constant")],
        Annotated[NullOnlySchema, Tag("null_only")],
        Annotated[ReferenceSchema, Tag("reference")],
        Annotated[UnknownSchema, Tag("unknown")],
    ],
    Discriminator(_schema_tag),
]

SCHEMA_MODELS: dict[str, type[SchemaBase]] = {
    model.kind: model
    for model in (
        BooleanSchema,
        IntegerSchema,
        NumberSchema,
        StringSchema,
        ArraySchema,
        ObjectSchema,
        OneOfSchema,
        ConstantSchema,
        NullOnlySchema,
        ReferenceSchema,
        UnknownSchema,
    )
}

for _model in (ArraySchema, ObjectSchema, OneOfSchema):
    _model.model_rebuild()

_schema_adapter: TypeAdapter[Schema] = TypeAdapter(Schema)


def parse_schema(data: dict[str, Any]) -> SchemaBase:
    """Load an already-canonical schema mapping back into models."""
    return _schema_adapter.validate_python(data)
