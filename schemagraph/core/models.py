"""Core data models for the schemagraph framework."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, NamedTuple, Optional, Set, Union

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from schemagraph.core.exceptions import SchemaGraphError


class DiagnosticKind(str, Enum):
    """Kinds of non-fatal problems recorded while building a graph."""

    DANGLING_POINTER_SEGMENT = "dangling_pointer_segment"
    CYCLICAL_REFERENCE = "cyclical_reference"
    REMOTE_FETCH_FAILED = "remote_fetch_failed"
    BAD_REFERENCE = "bad_reference"
    UNRESOLVED_REFERENCE = "unresolved_reference"
    INVALID_SCHEMA = "invalid_schema"


class Resolved(NamedTuple):
    """A value paired with the error that occurred while producing it, if any."""

    value: Any
    error: Optional["SchemaGraphError"] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Diagnostic(BaseModel):
    """A non-fatal error recorded during a graph build."""

    kind: DiagnosticKind
    message: str
    uri: Optional[str] = None
    details: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_error(cls, error: "SchemaGraphError", uri: Optional[str] = None) -> "Diagnostic":
        """Convert an error value into a diagnostic record."""
        kind = error.kind or DiagnosticKind.INVALID_SCHEMA
        return cls(
            kind=kind,
            message=error.message,
            uri=uri,
            details=dict(error.details),
        )

    def __str__(self) -> str:
        location = f" at {self.uri}" if self.uri else ""
        return f"[{self.kind.value}]{location}: {self.message}"


class SchemaNode(BaseModel):
    """One schema location in the graph, keyed by its canonical URI."""

    uri: str
    title: Optional[str] = None
    description: Optional[str] = None
    value_type: Optional[Union[str, List[str]]] = None
    ref: Optional[str] = None  # Resolved $ref target, for reference nodes
    parents: Set[str] = Field(default_factory=set)
    children: Set[str] = Field(default_factory=set)

    @property
    def type_names(self) -> List[str]:
        """Declared instance types as a list, whatever form `type` took."""
        if self.value_type is None:
            return []
        if isinstance(self.value_type, str):
            return [self.value_type]
        return list(self.value_type)

    @property
    def label(self) -> str:
        """Human readable label: title when present, else the URI."""
        return self.title or self.uri


class SchemaGraph(BaseModel):
    """Result of a graph build: node table, root and diagnostics."""

    root_uri: Optional[str] = None
    nodes: Dict[str, SchemaNode] = Field(default_factory=dict)
    diagnostics: List[Diagnostic] = Field(default_factory=list)

    @property
    def root(self) -> Optional[SchemaNode]:
        if self.root_uri is None:
            return None
        return self.nodes.get(self.root_uri)

    def get(self, uri: str) -> Optional[SchemaNode]:
        """Retrieve a node by canonical URI."""
        return self.nodes.get(uri)

    def parents_of(self, uri: str) -> List[SchemaNode]:
        node = self.nodes.get(uri)
        if node is None:
            return []
        return [self.nodes[p] for p in sorted(node.parents) if p in self.nodes]

    def children_of(self, uri: str) -> List[SchemaNode]:
        node = self.nodes.get(uri)
        if node is None:
            return []
        return [self.nodes[c] for c in sorted(node.children) if c in self.nodes]

    def diagnostics_of_kind(self, kind: Union[DiagnosticKind, str]) -> List[Diagnostic]:
        """Filter diagnostics by kind."""
        kind = DiagnosticKind(kind)
        return [d for d in self.diagnostics if d.kind == kind]

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, uri: object) -> bool:
        return uri in self.nodes
