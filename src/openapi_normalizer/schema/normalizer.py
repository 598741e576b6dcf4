"""Schema normalizer.

Rewrites draft-2020-12 style schemas (type arrays, ``anyOf``, ``enum``,
numeric exclusive bounds, ``prefixItems``) into the canonical dialect of
``openapi_normalizer.schema.base``.

A source node is decomposed into branches, each branch becomes one canonical
node, and the branches are reassembled: none gives ``unknown``, one is used
as-is, several are wrapped in a flat ``oneOf``. The node's ``title``,
``description`` and ``x-`` keys are attached to the reassembled result once.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any

from pydantic import ValidationError

from openapi_normalizer.config import get_settings
from openapi_normalizer.errors import RecursionLimitExceeded
from openapi_normalizer.schema.base import (
    SCHEMA_MODELS,
    ArraySchema,
    ConstantSchema,
    NullOnlySchema,
    ObjectSchema,
    OneOfSchema,
    ReferenceSchema,
    SchemaBase,
    UnknownSchema,
)

logger = logging.getLogger(__name__)

ATOMIC_TYPES = ("boolean", "integer", "number", "string")
NUMERIC_CONSTRAINTS = ("minimum", "maximum", "exclusiveMinimum", "exclusiveMaximum", "multipleOf")


def _is_attribute(key: Any) -> bool:
    return isinstance(key, str) and (key in ("title", "description") or key.startswith("x-"))


def _attributes(node: dict[str, Any]) -> dict[str, Any]:
    return {
        k: v
        for k, v in node.items()
        if _is_attribute(k) and v is not None and (k.startswith("x-") or isinstance(v, str))
    }


def _attach(schema: SchemaBase, attribute: dict[str, Any]) -> SchemaBase:
    return schema.model_copy(update=attribute) if attribute else schema


def _without(node: dict[str, Any], *keys: str) -> dict[str, Any]:
    return {k: v for k, v in node.items() if k not in keys}


def _derive(node: dict[str, Any], *cleared: str, **changes: Any) -> dict[str, Any]:
    """Copy of ``node`` for a decomposition branch.

    The attribute bag is left to the reassembly of ``node`` itself.
    """
    derived = {k: v for k, v in node.items() if k not in cleared and not _is_attribute(k)}
    derived.update(changes)
    return derived


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_integral(value: Any) -> bool:
    if isinstance(value, float):
        return value.is_integer()
    return _is_number(value)


_ENUM_FILTERS = {
    "boolean": lambda v: isinstance(v, bool),
    "integer": _is_integral,
    "number": _is_number,
    "string": lambda v: isinstance(v, str),
}


@lru_cache(maxsize=None)
def _accepted_keys(model: type[SchemaBase]) -> frozenset[str]:
    return frozenset(field.alias or name for name, field in model.model_fields.items())


def _build(model: type[SchemaBase], data: dict[str, Any]) -> SchemaBase:
    """Validate ``data`` into ``model``, keeping only the keys it declares plus extensions.

    Malformed keyword values are dropped; if the node still does not validate
    it degrades to ``unknown``.
    """
    data = {k: v for k, v in data.items() if v is not None or k == "const"}
    if model is not UnknownSchema:
        accepted = _accepted_keys(model)
        data = {k: v for k, v in data.items() if k in accepted or (isinstance(k, str) and k.startswith("x-"))}
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        bad = {err["loc"][0] for err in exc.errors() if err["loc"]}
        logger.warning("Dropping malformed keywords %s from %s schema", sorted(map(str, bad)), model.kind)
        data = {k: v for k, v in data.items() if k not in bad}
    try:
        return model.model_validate(data)
    except ValidationError:
        logger.warning("Passing malformed %s schema through as unknown", model.kind)
        return UnknownSchema.model_validate({k: v for k, v in data.items() if k not in _accepted_keys(SchemaBase)})


class SchemaNormalizer:
    """Converts source-dialect schema mappings into canonical schema models."""

    def __init__(self, max_depth: int | None = None):
        self.max_depth = get_settings().max_depth if max_depth is None else max_depth

    def normalize(self, node: Any) -> SchemaBase:
        return self._convert(node, 0)

    def _check_depth(self, depth: int) -> None:
        if depth > self.max_depth:
            raise RecursionLimitExceeded(depth, self.max_depth)

    def _convert(self, node: Any, depth: int) -> SchemaBase:
        self._check_depth(depth)
        if not isinstance(node, dict):
            return UnknownSchema()

        union: list[SchemaBase] = []
        self._visit(node, union, depth)

        if not union:
            result: SchemaBase = UnknownSchema()
        elif len(union) == 1:
            result = union[0]
        else:
            discriminator = node.get("discriminator")
            result = OneOfSchema(oneOf=union, discriminator=discriminator if isinstance(discriminator, dict) else None)

        return _attach(result, _attributes(node))

    def _visit(self, node: dict[str, Any], union: list[SchemaBase], depth: int) -> None:
        self._check_depth(depth)
        type_ = node.get("type")

        # mixed type: every applicable branch fires
        if isinstance(type_, list):
            if "const" in node:
                self._visit(_derive(node, "type", "oneOf", "allOf"), union, depth + 1)
            if "oneOf" in node:
                self._visit(_derive(node, "type", "const", "allOf"), union, depth + 1)
            if "anyOf" in node:
                self._visit(_derive(node, "type", "const", "oneOf"), union, depth + 1)
            enum = node.get("enum")
            for member in type_:
                if isinstance(member, str) and member in _ENUM_FILTERS and isinstance(enum, list) and enum:
                    matches = _ENUM_FILTERS[member]
                    branch = _derive(node, "const", enum=[v for v in enum if matches(v)], type=member)
                else:
                    branch = _derive(node, "const", type=member)
                self._visit(branch, union, depth + 1)
        elif isinstance(node.get("oneOf"), list):
            self._flatten(node["oneOf"], union, depth + 1)
        elif isinstance(node.get("anyOf"), list):
            self._flatten(node["anyOf"], union, depth + 1)
        elif type_ in ATOMIC_TYPES:
            self._atomic(node, union)
        elif type_ == "array":
            union.append(self._array(node, depth))
        elif type_ == "object":
            union.append(self._object(node, depth))
        else:
            union.append(self._passthrough(node))

    def _flatten(self, members: list[Any], union: list[SchemaBase], depth: int) -> None:
        # a member's own attributes go onto every branch it fans out into
        for member in members:
            if isinstance(member, dict):
                branches: list[SchemaBase] = []
                self._visit(member, branches, depth)
                attribute = _attributes(member)
                union.extend(_attach(branch, attribute) for branch in branches)

    def _atomic(self, node: dict[str, Any], union: list[SchemaBase]) -> None:
        type_ = node["type"]
        numeric = type_ in ("integer", "number")
        literal_cleared = ("type", "enum", "default") + (NUMERIC_CONSTRAINTS if numeric else ())

        enum = node.get("enum")
        if isinstance(enum, list) and enum:
            base = _derive(node, *literal_cleared)
            for value in enum:
                union.append(_build(ConstantSchema, {**base, "const": value}))
            return
        if "const" in node:
            union.append(_build(ConstantSchema, _without(node, *literal_cleared)))
            return

        data = _without(node, "enum")
        if numeric:
            for bound, flag in (("minimum", "exclusiveMinimum"), ("maximum", "exclusiveMaximum")):
                if _is_number(data.get(flag)):
                    data[bound] = data[flag]
                    data[flag] = True
        union.append(_build(SCHEMA_MODELS[type_], data))

    def _array(self, node: dict[str, Any], depth: int) -> SchemaBase:
        items = node.get("items")
        prefix = node.get("prefixItems")

        if isinstance(items, list) or isinstance(prefix, list):
            members = items if isinstance(items, list) else prefix
            additional = node.get("additionalItems")
            if additional is None and isinstance(prefix, list) and isinstance(items, dict):
                additional = items
            data = {
                **node,
                "items": None,
                "prefixItems": [self._convert(m, depth + 1) for m in members],
                "additionalItems": self._convert(additional, depth + 1) if isinstance(additional, dict) else additional,
            }
        else:
            data = {
                **node,
                "items": self._convert(items, depth + 1) if isinstance(items, dict) else None,
                "prefixItems": None,
                "additionalItems": None,
            }
        return _build(ArraySchema, data)

    def _object(self, node: dict[str, Any], depth: int) -> SchemaBase:
        properties = node.get("properties")
        if isinstance(properties, dict):
            properties = {
                name: self._convert(value, depth + 1) for name, value in properties.items() if value is not None
            }
        else:
            properties = None

        additional = node.get("additionalProperties")
        if isinstance(additional, dict):
            additional = self._convert(additional, depth + 1)
        elif additional is not False:
            additional = None

        return _build(ObjectSchema, {**node, "properties": properties, "additionalProperties": additional})

    def _passthrough(self, node: dict[str, Any]) -> SchemaBase:
        if isinstance(node.get("$ref"), str):
            return _build(ReferenceSchema, node)
        if "const" in node:
            return _build(ConstantSchema, node)
        if node.get("type") == "null":
            return _build(NullOnlySchema, node)
        return _build(UnknownSchema, node)


def normalize_schema(node: Any, max_depth: int | None = None) -> SchemaBase:
    """Normalize a single source-dialect schema mapping."""
    return SchemaNormalizer(max_depth=max_depth).normalize(node)
