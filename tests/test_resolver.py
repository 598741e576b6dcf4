from openapi_normalizer.document.resolver import is_reference, parse_reference, resolve

COMPONENTS = {
    "parameters": {"Limit": {"name": "limit", "in": "query"}},
    "headers": {"X-Trace": {"schema": {"type": "string"}}},
}


class TestParseReference:
    def test_component_pointer(self):
        assert parse_reference("#/components/parameters/Limit") == ("parameters", "Limit")

    def test_foreign_pointer(self):
        assert parse_reference("other.yaml#/components/parameters/Limit") is None
        assert parse_reference("#/definitions/Limit") is None

    def test_unknown_category(self):
        assert parse_reference("#/components/examples/Limit") is None


class TestResolve:
    def test_found(self):
        assert resolve("#/components/parameters/Limit", "parameters", COMPONENTS) == {"name": "limit", "in": "query"}

    def test_uses_last_segment_only(self):
        assert resolve("#/anything/Limit", "parameters", COMPONENTS) is not None

    def test_missing_name(self):
        assert resolve("#/components/parameters/Offset", "parameters", COMPONENTS) is None

    def test_missing_category(self):
        assert resolve("#/components/responses/Ok", "responses", COMPONENTS) is None

    def test_no_components(self):
        assert resolve("#/components/parameters/Limit", "parameters", None) is None


class TestIsReference:
    def test_reference(self):
        assert is_reference({"$ref": "#/components/headers/X-Trace"})

    def test_not_reference(self):
        assert not is_reference({"name": "id"})
        assert not is_reference({"$ref": 3})
        assert not is_reference(None)
