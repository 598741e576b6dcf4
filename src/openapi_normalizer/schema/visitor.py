"""Traversal and discriminant tests over canonical schemas.

Downstream lowering passes use ``visit`` to walk a schema tree and the
``is_*`` predicates to classify nodes. Predicates only inspect the ``kind``
tag of a node, never its shape.
"""

from __future__ import annotations

import json
from typing import Callable

from openapi_normalizer.config import get_settings
from openapi_normalizer.errors import RecursionLimitExceeded
from openapi_normalizer.schema.base import ArraySchema, OneOfSchema, SchemaBase

Closure = Callable[[SchemaBase, str], None]

ROOT_ACCESSOR = "$input.schema"


def visit(
    schema: SchemaBase,
    closure: Closure,
    accessor: str = ROOT_ACCESSOR,
    max_depth: int | None = None,
) -> None:
    """Call ``closure(node, accessor)`` on ``schema`` and every nested schema, pre-order.

    Nested schemas are reached through ``oneOf`` branches, object
    ``properties`` and schema-valued ``additionalProperties``, and array
    ``items`` (or ``prefixItems`` and schema-valued ``additionalItems`` for
    tuples). The accessor names the path to each node, e.g.
    ``$input.schema.properties["id"].oneOf[1]``.
    """
    limit = get_settings().max_depth if max_depth is None else max_depth
    _visit(schema, closure, accessor, 0, limit)


def _visit(schema: SchemaBase, closure: Closure, accessor: str, depth: int, limit: int) -> None:
    if depth > limit:
        raise RecursionLimitExceeded(depth, limit, accessor)
    closure(schema, accessor)

    if is_one_of(schema):
        for i, branch in enumerate(schema.one_of):
            _visit(branch, closure, f"{accessor}.oneOf[{i}]", depth + 1, limit)
    elif is_object(schema):
        for name, prop in (schema.properties or {}).items():
            _visit(prop, closure, f"{accessor}.properties[{json.dumps(name)}]", depth + 1, limit)
        if isinstance(schema.additional_properties, SchemaBase):
            _visit(schema.additional_properties, closure, f"{accessor}.additionalProperties", depth + 1, limit)
    elif is_array(schema):
        if schema.items is not None:
            _visit(schema.items, closure, f"{accessor}.items", depth + 1, limit)
        for i, member in enumerate(schema.prefix_items or []):
            _visit(member, closure, f"{accessor}.prefixItems[{i}]", depth + 1, limit)
        if isinstance(schema.additional_items, SchemaBase):
            _visit(schema.additional_items, closure, f"{accessor}.additionalItems", depth + 1, limit)


def is_one_of(schema: SchemaBase) -> bool:
    return schema.kind == "one_of"


def is_object(schema: SchemaBase) -> bool:
    return schema.kind == "object"


def is_array(schema: SchemaBase) -> bool:
    return schema.kind == "array"


def is_tuple(schema: SchemaBase) -> bool:
    return isinstance(schema, ArraySchema) and schema.is_tuple


def is_boolean(schema: SchemaBase) -> bool:
    return schema.kind == "boolean"


def is_integer(schema: SchemaBase) -> bool:
    return schema.kind == "integer"


def is_number(schema: SchemaBase) -> bool:
    return schema.kind == "number"


def is_string(schema: SchemaBase) -> bool:
    return schema.kind == "string"


def is_constant(schema: SchemaBase) -> bool:
    return schema.kind == "constant"


def is_reference(schema: SchemaBase) -> bool:
    return schema.kind == "reference"


def is_null_only(schema: SchemaBase) -> bool:
    return schema.kind == "null_only"


def is_unknown(schema: SchemaBase) -> bool:
    return schema.kind == "unknown"


def is_nullable(schema: SchemaBase) -> bool:
    """Whether ``null`` is an accepted value.

    True for a null-only node, a ``oneOf`` with a nullable branch, or any
    node flagged ``nullable: true``; never for an unknown node.
    """
    if is_unknown(schema):
        return False
    if is_null_only(schema):
        return True
    if isinstance(schema, OneOfSchema):
        return any(is_nullable(branch) for branch in schema.one_of)
    return schema.nullable is True

