"""RFC 3986 URI reference parsing, resolution and composition.

    URI           = scheme ":" hier-part [ "?" query ] [ "#" fragment ]

    hier-part     = "//" authority path-abempty
                  / path-absolute
                  / path-rootless
                  / path-empty

Components that do not occur in the text are `None`, which is different from
an empty component (`"http://a/b?"` has an empty query, `"http://a/b"` none).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Optional, Tuple

# RFC 3986 Appendix B
_URI_REGEX = re.compile(r"^(([^:/?#]+):)?(//([^/?#]*))?([^?#]*)(\?([^#]*))?(#(.*))?", re.DOTALL)


@dataclass(frozen=True)
class UriReference:
    """A URI reference broken down into its five components."""

    scheme: Optional[str] = None
    authority: Optional[str] = None
    path: str = ""
    query: Optional[str] = None
    fragment: Optional[str] = None

    @property
    def is_absolute(self) -> bool:
        return self.scheme is not None

    def with_fragment(self, fragment: Optional[str]) -> "UriReference":
        return replace(self, fragment=fragment)

    def without_fragment(self) -> "UriReference":
        return replace(self, fragment=None)

    def __str__(self) -> str:
        return compose_uri(self)


def parse_uri(uri: str) -> UriReference:
    """
    Break down a URI into its components.

    Example:
        >>> r = parse_uri("http://www.ics.uci.edu/pub/ietf/uri/#Related")
        >>> r.scheme, r.authority, r.path, r.query, r.fragment
        ('http', 'www.ics.uci.edu', '/pub/ietf/uri/', None, 'Related')
    """
    match = _URI_REGEX.match(uri)
    if match is None:
        raise ValueError(f"Not a URI reference: {uri!r}")
    return UriReference(
        scheme=match.group(2),
        authority=match.group(4),
        path=match.group(5) or "",
        query=match.group(7),
        fragment=match.group(9),
    )


def remove_dot_segments(path: str) -> str:
    """
    Remove `.` and `..` segments from a path (RFC 3986 section 5.2.4).

    The input buffer is consumed from the left; output segments keep their
    leading `/` so that `..` removes a segment together with its slash. A
    `..` with nothing left to remove is dropped, never an error.
    """
    output: list[str] = []

    while path:
        if path.startswith("../"):
            path = path[3:]
        elif path.startswith("./"):
            path = path[2:]
        elif path.startswith("/./"):
            path = path[2:]
        elif path == "/.":
            path = "/"
        elif path.startswith("/../"):
            path = path[3:]
            if output:
                output.pop()
        elif path == "/..":
            path = "/"
            if output:
                output.pop()
        elif path in (".", ".."):
            path = ""
        else:
            end = path.find("/", 1 if path.startswith("/") else 0)
            if end == -1:
                end = len(path)
            output.append(path[:end])
            path = path[end:]

    return "".join(output)


def merge_paths(base: UriReference, path: str) -> str:
    """Merge a relative-path reference with the base path (RFC 3986 section 5.2.3)."""
    if base.authority is not None and not base.path:
        return "/" + path
    return base.path[: base.path.rfind("/") + 1] + path


def resolve_reference(reference: UriReference, base: UriReference) -> UriReference:
    """
    Transform a reference into a target URI against a base (RFC 3986 section 5.2.2).

    Args:
        reference: Parsed reference to resolve
        base: Parsed base URI

    Returns:
        Target URI components
    """
    if reference.scheme is not None:
        return replace(reference, path=remove_dot_segments(reference.path))

    if reference.authority is not None:
        return replace(
            reference,
            scheme=base.scheme,
            path=remove_dot_segments(reference.path),
        )

    if not reference.path:
        query = reference.query if reference.query is not None else base.query
        return replace(base, query=query, fragment=reference.fragment)

    if reference.path.startswith("/"):
        path = remove_dot_segments(reference.path)
    else:
        path = remove_dot_segments(merge_paths(base, reference.path))

    return replace(base, path=path, query=reference.query, fragment=reference.fragment)


def compose_uri(reference: UriReference) -> str:
    """Recompose URI components into a string (RFC 3986 section 5.3)."""
    result = ""

    if reference.scheme is not None:
        result += f"{reference.scheme}:"
    if reference.authority is not None:
        result += f"//{reference.authority}"
    # There always is a path, even if empty
    result += reference.path
    if reference.query is not None:
        result += f"?{reference.query}"
    if reference.fragment is not None:
        result += f"#{reference.fragment}"

    return result


def resolve_uri(reference: str, base: str) -> str:
    """Resolve a reference string against a base URI string."""
    return compose_uri(resolve_reference(parse_uri(reference), parse_uri(base)))


def split_fragment(uri: str) -> Tuple[str, Optional[str]]:
    """Split a URI into its fragment-less part and its fragment."""
    parsed = parse_uri(uri)
    return compose_uri(parsed.without_fragment()), parsed.fragment
