import pytest

from openapi_normalizer.errors import RecursionLimitExceeded
from openapi_normalizer.schema.base import (
    ArraySchema,
    BooleanSchema,
    ConstantSchema,
    IntegerSchema,
    NullOnlySchema,
    NumberSchema,
    ObjectSchema,
    OneOfSchema,
    ReferenceSchema,
    StringSchema,
    UnknownSchema,
)
from openapi_normalizer.schema.normalizer import normalize_schema
from openapi_normalizer.schema.visitor import (
    is_array,
    is_boolean,
    is_constant,
    is_integer,
    is_null_only,
    is_nullable,
    is_number,
    is_object,
    is_one_of,
    is_reference,
    is_string,
    is_tuple,
    is_unknown,
    visit,
)


def _collect(schema, **kwargs):
    seen = []
    visit(schema, lambda node, accessor: seen.append((accessor, node.kind)), **kwargs)
    return seen


class TestVisit:
    def test_pre_order_with_accessors(self):
        schema = normalize_schema(
            {
                "type": "object",
                "properties": {
                    "id": {"type": "string"},
                    "tags": {"type": "array", "items": {"type": ["string", "null"]}},
                },
                "additionalProperties": {"type": "integer"},
            }
        )
        assert _collect(schema) == [
            ("$input.schema", "object"),
            ('$input.schema.properties["id"]', "string"),
            ('$input.schema.properties["tags"]', "array"),
            ('$input.schema.properties["tags"].items', "one_of"),
            ('$input.schema.properties["tags"].items.oneOf[0]', "string"),
            ('$input.schema.properties["tags"].items.oneOf[1]', "null_only"),
            ("$input.schema.additionalProperties", "integer"),
        ]

    def test_custom_root_accessor(self):
        assert _collect(StringSchema(), accessor="$input.body") == [("$input.body", "string")]

    def test_boolean_additional_properties_not_visited(self):
        schema = ObjectSchema(additionalProperties=False)
        assert _collect(schema) == [("$input.schema", "object")]

    def test_tuple_members_are_visited(self):
        schema = normalize_schema(
            {"type": "array", "prefixItems": [{"type": "string"}], "additionalItems": {"type": "boolean"}}
        )
        assert _collect(schema) == [
            ("$input.schema", "array"),
            ("$input.schema.prefixItems[0]", "string"),
            ("$input.schema.additionalItems", "boolean"),
        ]

    def test_array_without_items(self):
        assert _collect(ArraySchema()) == [("$input.schema", "array")]

    def test_property_names_are_quoted(self):
        schema = ObjectSchema(properties={'say "hi"': StringSchema()})
        assert _collect(schema)[1][0] == '$input.schema.properties["say \\"hi\\""]'

    def test_depth_limit(self):
        schema = StringSchema()
        for _ in range(6):
            schema = ArraySchema(items=schema)
        with pytest.raises(RecursionLimitExceeded) as exc:
            visit(schema, lambda node, accessor: None, max_depth=3)
        assert exc.value.accessor.endswith(".items.items.items.items")


    def test_zero_depth_limit(self):
        assert _collect(StringSchema(), max_depth=0) == [("$input.schema", "string")]
        with pytest.raises(RecursionLimitExceeded):
            visit(ArraySchema(items=StringSchema()), lambda node, accessor: None, max_depth=0)

class TestPredicates:
    @pytest.mark.parametrize(
        "schema, predicate",
        [
            (BooleanSchema(), is_boolean),
            (IntegerSchema(), is_integer),
            (NumberSchema(), is_number),
            (StringSchema(), is_string),
            (ArraySchema(), is_array),
            (ObjectSchema(), is_object),
            (OneOfSchema(oneOf=[StringSchema(), IntegerSchema()]), is_one_of),
            (ConstantSchema(const=1), is_constant),
            (NullOnlySchema(), is_null_only),
            (ReferenceSchema(ref="#/components/schemas/A"), is_reference),
            (UnknownSchema(), is_unknown),
        ],
    )
    def test_predicate_matches_only_its_tag(self, schema, predicate):
        predicates = [
            is_boolean, is_integer, is_number, is_string, is_array, is_object,
            is_one_of, is_constant, is_null_only, is_reference, is_unknown,
        ]
        assert [p for p in predicates if p(schema)] == [predicate]

    def test_is_tuple(self):
        assert is_tuple(ArraySchema(prefixItems=[StringSchema()]))
        assert not is_tuple(ArraySchema(items=StringSchema()))
        assert not is_tuple(StringSchema())


class TestNullable:
    def test_null_only(self):
        assert is_nullable(NullOnlySchema())

    def test_union_with_null_branch(self):
        assert is_nullable(normalize_schema({"type": ["string", "null"]}))

    def test_union_without_null_branch(self):
        assert not is_nullable(normalize_schema({"type": ["string", "integer"]}))

    def test_explicit_flag(self):
        assert is_nullable(normalize_schema({"type": "string", "nullable": True}))
        assert not is_nullable(StringSchema())

    def test_unknown_is_never_nullable(self):
        assert not is_nullable(UnknownSchema(nullable=True))
