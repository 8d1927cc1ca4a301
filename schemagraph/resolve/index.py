"""Index of raw subschemas by canonical URI.

The index is the "pre-fetched dictionary" of a build: it is filled before the
graph walk so that the builder can look at the raw content of a `$ref` target
that has not been visited yet.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, NamedTuple, Tuple

from schemagraph.keywords import iter_subschemas
from schemagraph.pointer import (
    is_pointer_fragment,
    join_pointer,
    normalize_fragment,
    pointer_to_fragment,
)
from schemagraph.uri import compose_uri, parse_uri, resolve_uri, split_fragment

logger = logging.getLogger(__name__)


def location_uri(base_uri: str, tokens: Tuple[str, ...]) -> str:
    """Canonical URI of the subschema at `tokens` in the resource at `base_uri`."""
    fragment = pointer_to_fragment(join_pointer(tokens))
    return resolve_uri(f"#{fragment}", base_uri)


def canonicalize(uri: str) -> str:
    """
    Normalize a resolved URI into node-key form.

    Node keys always carry a fragment (`#` for a resource root) and pointer
    fragments use one percent-encoding.
    """
    parsed = parse_uri(uri)
    if parsed.fragment is None:
        return compose_uri(parsed.with_fragment(""))
    if is_pointer_fragment(parsed.fragment):
        return compose_uri(parsed.with_fragment(normalize_fragment(parsed.fragment)))
    return uri


def document_address(uri: str) -> str:
    """The fragment-less part of a URI, naming the resource it belongs to."""
    return split_fragment(uri)[0]


def is_reference(schema: Any) -> bool:
    """Whether a schema value is a `$ref` (its sibling keywords are ignored)."""
    return isinstance(schema, dict) and isinstance(schema.get("$ref"), str)


class IndexEntry(NamedTuple):
    """A raw subschema and the base URI in effect where it appears."""

    schema: Any
    base_uri: str


class SchemaIndex:
    """Raw subschemas keyed by canonical URI, plus the resources they live in."""

    def __init__(self) -> None:
        self.locations: Dict[str, IndexEntry] = {}
        self.resources: Dict[str, Any] = {}
        self.identified: Dict[str, Any] = {}

    def add_document(self, document: Any, base_uri: str = "") -> None:
        """Index every subschema position of a document."""
        base_uri = document_address(base_uri)
        self.resources.setdefault(base_uri, document)
        self._index(document, base_uri, ())
        logger.debug(f"Indexed document {base_uri or '<root>'}: {len(self.locations)} locations")

    def get(self, uri: str) -> Any:
        """Raw subschema at a canonical URI, or None."""
        entry = self.locations.get(uri)
        return entry.schema if entry else None

    def _index(
        self,
        schema: Any,
        base_uri: str,
        tokens: Tuple[str, ...],
        outers: Tuple[Tuple[str, Tuple[str, ...]], ...] = (),
    ) -> None:
        if schema is True:
            schema = {}
        elif schema is False:
            schema = {"not": {}}
        if not isinstance(schema, dict):
            return

        entry = IndexEntry(schema, base_uri)
        self.locations.setdefault(location_uri(base_uri, tokens), entry)
        # Pointers from enclosing resources reach the same subschema
        for outer_base, outer_tokens in outers:
            self.locations.setdefault(location_uri(outer_base, outer_tokens), entry)
        if is_reference(schema):
            return

        schema_id = schema.get("$id")
        if isinstance(schema_id, str):
            target = resolve_uri(schema_id, base_uri)
            address, fragment = split_fragment(target)
            if address != base_uri:
                self.identified[address if not fragment else target] = schema
                self.resources.setdefault(address, schema)
                outers = outers + ((base_uri, tokens),)
                base_uri, tokens = address, ()
                self.locations.setdefault(location_uri(base_uri, tokens), IndexEntry(schema, base_uri))
            elif fragment and not is_pointer_fragment(fragment):
                self.identified[target] = schema
                self.locations.setdefault(target, entry)

        for _, relative, subschema in iter_subschemas(schema):
            child_outers = tuple((outer_base, outer_tokens + relative) for outer_base, outer_tokens in outers)
            self._index(subschema, base_uri, tokens + relative, child_outers)


def prepare_schema(schema: Any, base_uri: str = "") -> Dict[str, Any]:
    """
    Collect the `$id`-bearing subschemas of a document.

    Args:
        schema: Root schema document
        base_uri: URI the document was retrieved from, if any

    Returns:
        Dictionary of resolved `$id` URI -> subschema, as consumed by `deref`
    """
    index = SchemaIndex()
    index.add_document(schema, base_uri)
    return dict(index.identified)
