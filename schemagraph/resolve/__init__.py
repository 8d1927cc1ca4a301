"""Reference resolution module for the schemagraph framework."""

from schemagraph.resolve.deref import deref, deref_schema
from schemagraph.resolve.fetcher import HttpDocumentFetcher
from schemagraph.resolve.index import (
    IndexEntry,
    SchemaIndex,
    canonicalize,
    location_uri,
    prepare_schema,
)

__all__ = [
    # Dereferencing
    "deref",
    "deref_schema",
    # Indexing
    "SchemaIndex",
    "IndexEntry",
    "prepare_schema",
    "location_uri",
    "canonicalize",
    # Fetching
    "HttpDocumentFetcher",
]
