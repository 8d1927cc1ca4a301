"""Tests for schema document loading."""

from pathlib import Path

import pytest

from schemagraph.core.exceptions import DocumentLoadError
from schemagraph.documents import document_base_uri, load_schema_document, save_schema_document


class TestLoadSchemaDocument:
    """Test loading JSON and YAML documents."""

    def test_load_json(self, sample_schemas_dir: Path) -> None:
        """Test a JSON document is parsed."""
        document = load_schema_document(sample_schemas_dir / "order.schema.json")
        assert document["title"] == "Order"

    def test_load_yaml(self, sample_schemas_dir: Path) -> None:
        """Test a YAML document is parsed."""
        document = load_schema_document(sample_schemas_dir / "tree.schema.yaml")
        assert document["properties"]["children"]["items"] == {"$ref": "#"}

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test a missing file raises."""
        with pytest.raises(DocumentLoadError) as exc_info:
            load_schema_document(tmp_path / "missing.json")
        assert exc_info.value.message.startswith("Schema file not found")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        """Test a YAML syntax error raises."""
        path = tmp_path / "broken.yaml"
        path.write_text("a: [1, 2")

        with pytest.raises(DocumentLoadError, match="Invalid YAML"):
            load_schema_document(path)

    def test_save_roundtrip(self, tmp_path: Path) -> None:
        """Test a saved document loads back unchanged."""
        document = {"properties": {"a": {"$ref": "#/definitions/b"}}, "definitions": {"b": {}}}
        path = tmp_path / "nested" / "schema.json"

        save_schema_document(document, path)

        assert load_schema_document(path) == document


class TestDocumentBaseUri:
    """Test file URIs of documents."""

    def test_file_uri(self, tmp_path: Path) -> None:
        """Test the base URI is an absolute file URI."""
        uri = document_base_uri(tmp_path / "schema.json")
        assert uri.startswith("file:///")
        assert uri.endswith("/schema.json")
