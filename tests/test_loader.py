import json
from pathlib import Path

import pytest
import yaml

from openapi_normalizer.errors import DocumentLoadError
from openapi_normalizer.loader import detect_version, dump_document, load_document, resolve_format

FIXTURES = Path(__file__).parent / "fixtures"


class TestLoadDocument:
    def test_load_yaml(self):
        doc = load_document(FIXTURES / "widgets.yaml")
        assert doc["openapi"] == "3.1.0"
        assert "/widgets/{id}" in doc["paths"]

    def test_load_json(self, tmp_path):
        f = tmp_path / "api.json"
        f.write_text(json.dumps({"openapi": "3.1.0", "paths": {}}))
        assert load_document(f) == {"openapi": "3.1.0", "paths": {}}

    def test_not_a_mapping(self, tmp_path):
        f = tmp_path / "list.yaml"
        f.write_text("- a\n- b\n")
        with pytest.raises(DocumentLoadError):
            load_document(f)

    def test_not_openapi(self, tmp_path):
        f = tmp_path / "doc.yaml"
        f.write_text("title: Some notes\n")
        with pytest.raises(DocumentLoadError, match="not an OpenAPI document"):
            load_document(f)

    def test_broken_yaml(self, tmp_path):
        f = tmp_path / "broken.yaml"
        f.write_text("openapi: [3.1\n")
        with pytest.raises(DocumentLoadError):
            load_document(f)


class TestDetectVersion:
    def test_versions(self):
        assert detect_version({"openapi": "3.1.0"}) == "3.1"
        assert detect_version({"openapi": "3.0.3"}) == "3.0"
        assert detect_version({"swagger": "2.0"}) == "2.0"
        assert detect_version({"openapi": "4.0"}) == "unknown"


class TestDump:
    def test_resolve_format(self):
        assert resolve_format("auto", Path("out.yml")) == "yaml"
        assert resolve_format("auto", Path("out.json")) == "json"
        assert resolve_format("auto", None) == "json"
        assert resolve_format("yaml", Path("out.json")) == "yaml"

    def test_dump_yaml_keeps_key_order(self):
        text = dump_document({"openapi": "3.1.0", "info": {"title": "T"}}, "yaml")
        assert text.startswith("openapi:")
        assert yaml.safe_load(text) == {"openapi": "3.1.0", "info": {"title": "T"}}

    def test_dump_json(self):
        assert json.loads(dump_document({"a": [1, 2]})) == {"a": [1, 2]}
