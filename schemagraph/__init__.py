"""
schemagraph: JSON Schema reference graphs

Resolves RFC 3986 URI references and walks JSON Schema (draft-07 family)
documents into a flat, URI-addressed graph of schema nodes, following `$id`
base changes and `$ref` indirection, including forward references and cycles.

Example usage:

    from schemagraph import build_schema_graph

    graph = build_schema_graph({
        "properties": {"a": {"$ref": "#/definitions/X"}},
        "definitions": {"X": {"type": "string"}},
    })

    node = graph.get("#/definitions/X")
    node.parents  # {"#/properties/a"}

    # Diagnostics never abort the build
    for diagnostic in graph.diagnostics:
        print(diagnostic)

    # Plain URI resolution
    from schemagraph import resolve_uri

    resolve_uri("../g", "http://a/b/c/d;p?q")  # "http://a/b/g"
"""

__version__ = "0.1.0"

from schemagraph.core.config import ResolutionConfig, SchemaGraphConfig
from schemagraph.core.exceptions import (
    BadReferenceError,
    ConfigurationError,
    CyclicalReferenceError,
    DanglingPointerSegmentError,
    DocumentLoadError,
    InvalidSchemaError,
    ReferenceResolutionError,
    RemoteFetchError,
    SchemaGraphError,
    UnresolvedReferenceError,
)
from schemagraph.core.models import (
    Diagnostic,
    DiagnosticKind,
    Resolved,
    SchemaGraph,
    SchemaNode,
)
from schemagraph.graph import SchemaGraphBuilder, abuild_schema_graph, build_schema_graph
from schemagraph.resolve import deref, deref_schema, prepare_schema
from schemagraph.uri import UriReference, compose_uri, parse_uri, resolve_reference, resolve_uri

__all__ = [
    # Version
    "__version__",
    # Graph building
    "SchemaGraphBuilder",
    "build_schema_graph",
    "abuild_schema_graph",
    # Dereferencing
    "deref",
    "deref_schema",
    "prepare_schema",
    # URI resolution
    "UriReference",
    "parse_uri",
    "resolve_reference",
    "compose_uri",
    "resolve_uri",
    # Models
    "SchemaNode",
    "SchemaGraph",
    "Diagnostic",
    "DiagnosticKind",
    "Resolved",
    # Config
    "SchemaGraphConfig",
    "ResolutionConfig",
    # Exceptions
    "SchemaGraphError",
    "ConfigurationError",
    "DocumentLoadError",
    "ReferenceResolutionError",
    "DanglingPointerSegmentError",
    "CyclicalReferenceError",
    "RemoteFetchError",
    "BadReferenceError",
    "UnresolvedReferenceError",
    "InvalidSchemaError",
]
