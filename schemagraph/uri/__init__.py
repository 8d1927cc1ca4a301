"""URI reference resolution module for the schemagraph framework."""

from schemagraph.uri.reference import (
    UriReference,
    compose_uri,
    merge_paths,
    parse_uri,
    remove_dot_segments,
    resolve_reference,
    resolve_uri,
    split_fragment,
)

__all__ = [
    "UriReference",
    "parse_uri",
    "resolve_reference",
    "compose_uri",
    "resolve_uri",
    "remove_dot_segments",
    "merge_paths",
    "split_fragment",
]
