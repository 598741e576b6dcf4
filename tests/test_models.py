import pytest
from pydantic import ValidationError

from openapi_normalizer.document.base import Document, Operation, Parameter, PathItem
from openapi_normalizer.schema.base import (
    ArraySchema,
    ConstantSchema,
    IntegerSchema,
    ObjectSchema,
    OneOfSchema,
    ReferenceSchema,
    StringSchema,
    parse_schema,
)


class TestSchemaModels:
    def test_to_dict_uses_canonical_keywords(self):
        schema = IntegerSchema(minimum=1, exclusiveMinimum=True, title="Count")
        assert schema.to_dict() == {"type": "integer", "minimum": 1, "exclusiveMinimum": True, "title": "Count"}

    def test_reference_serializes_dollar_ref(self):
        assert ReferenceSchema(ref="#/components/schemas/A").to_dict() == {"$ref": "#/components/schemas/A"}

    def test_extensions_are_kept(self):
        schema = StringSchema.model_validate({"type": "string", "x-order": 3})
        assert schema.extensions == {"x-order": 3}
        assert schema.to_dict() == {"type": "string", "x-order": 3}

    def test_models_are_frozen(self):
        schema = StringSchema()
        with pytest.raises(ValidationError):
            schema.title = "changed"

    def test_array_cannot_mix_forms(self):
        with pytest.raises(ValidationError):
            ArraySchema(items=StringSchema(), prefixItems=[StringSchema()])

    def test_parse_schema_reads_canonical_dict(self):
        schema = parse_schema(
            {
                "type": "object",
                "properties": {
                    "kind": {"oneOf": [{"const": "a"}, {"const": "b"}]},
                    "owner": {"$ref": "#/components/schemas/User"},
                },
            }
        )
        assert isinstance(schema, ObjectSchema)
        assert isinstance(schema.properties["kind"], OneOfSchema)
        assert schema.properties["kind"].one_of[0] == ConstantSchema(const="a")
        assert isinstance(schema.properties["owner"], ReferenceSchema)


class TestDocumentModels:
    def test_parameter_aliases(self):
        p = Parameter.model_validate({"name": "id", "in": "path", "required": True, "schema": StringSchema()})
        assert p.location == "path"
        assert p.to_dict() == {"name": "id", "in": "path", "required": True, "schema": {"type": "string"}}

    def test_operation_passes_unknown_fields_through(self):
        op = Operation.model_validate({"operationId": "listWidgets", "tags": ["widgets"], "parameters": []})
        assert op.to_dict() == {"operationId": "listWidgets", "tags": ["widgets"], "parameters": []}

    def test_path_item_operations_in_method_order(self):
        item = PathItem(post=Operation(), get=Operation())
        assert list(item.operations()) == ["get", "post"]

    def test_document_serialization(self):
        doc = Document.model_validate(
            {"openapi": "3.1.0", "info": {"title": "T", "version": "1"}, "paths": {"/a": PathItem(get=Operation())}}
        )
        assert doc.to_dict() == {"openapi": "3.1.0", "info": {"title": "T", "version": "1"}, "paths": {"/a": {"get": {}}}}
