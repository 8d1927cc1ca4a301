"""Schema document utilities."""

from schemagraph.documents.loader import (
    document_base_uri,
    load_schema_document,
    save_schema_document,
)

__all__ = [
    "load_schema_document",
    "save_schema_document",
    "document_base_uri",
]
