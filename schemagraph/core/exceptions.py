"""Custom exceptions for the schemagraph framework.

Reference resolution errors are returned as values (see `Resolved`) and
recorded as diagnostics; only the loading and configuration errors are raised.
"""

from __future__ import annotations

from typing import Any, ClassVar, List, Optional

from schemagraph.core.models import DiagnosticKind


class SchemaGraphError(Exception):
    """Base exception for all schemagraph errors."""

    kind: ClassVar[Optional[DiagnosticKind]] = None

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ConfigurationError(SchemaGraphError):
    """Raised when there's a configuration error."""

    pass


class DocumentLoadError(SchemaGraphError):
    """Raised when a schema document cannot be read or parsed."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.path = path
        details = details or {}
        if path:
            details["path"] = path
        super().__init__(message, details)


class ReferenceResolutionError(SchemaGraphError):
    """Base for errors produced while following a reference."""

    def __init__(
        self,
        message: str,
        reference: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.reference = reference
        details = details or {}
        if reference is not None:
            details["reference"] = reference
        super().__init__(message, details)


class DanglingPointerSegmentError(ReferenceResolutionError):
    """A JSON Pointer segment is missing in the value being indexed."""

    kind = DiagnosticKind.DANGLING_POINTER_SEGMENT

    def __init__(
        self,
        segment: str,
        pointer: Optional[str] = None,
        reference: Optional[str] = None,
    ) -> None:
        self.segment = segment
        self.pointer = pointer
        details: dict[str, Any] = {"segment": segment}
        if pointer is not None:
            details["pointer"] = pointer
        super().__init__(f'No key "{segment}" in given object', reference, details)


class CyclicalReferenceError(ReferenceResolutionError):
    """A chain of bare `$ref`s leads back to where it started."""

    kind = DiagnosticKind.CYCLICAL_REFERENCE

    def __init__(self, chain: List[str]) -> None:
        self.chain = list(chain)
        super().__init__(
            f"Cyclical reference: {' -> '.join(self.chain + self.chain[:1])}",
            self.chain[0] if self.chain else None,
            {"chain": self.chain},
        )


class RemoteFetchError(ReferenceResolutionError):
    """Fetching a remote document failed."""

    kind = DiagnosticKind.REMOTE_FETCH_FAILED

    def __init__(
        self,
        message: str,
        address: str,
        status_code: Optional[int] = None,
    ) -> None:
        self.address = address
        self.status_code = status_code
        details: dict[str, Any] = {"address": address}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, None, details)


class BadReferenceError(ReferenceResolutionError):
    """A reference resolved to something that is not a schema."""

    kind = DiagnosticKind.BAD_REFERENCE

    def __init__(self, reference: str, received: Any) -> None:
        self.received = received
        super().__init__(
            f'Bad reference: "{reference}"; Received: {received!r}',
            reference,
        )


class UnresolvedReferenceError(ReferenceResolutionError):
    """A reference target was never materialized."""

    kind = DiagnosticKind.UNRESOLVED_REFERENCE

    def __init__(self, reference: str, reason: str) -> None:
        super().__init__(f"Unresolved reference {reference}: {reason}", reference)


class InvalidSchemaError(SchemaGraphError):
    """A subschema position holds a value that is not a schema."""

    kind = DiagnosticKind.INVALID_SCHEMA

    def __init__(self, location: str, value: Any) -> None:
        self.location = location
        self.value = value
        super().__init__(
            f"Expected a schema object or boolean, got {type(value).__name__}",
            {"location": location},
        )
