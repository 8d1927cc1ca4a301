"""Schema graph builder.

Walks a JSON Schema document into a flat table of `SchemaNode`s keyed by
canonical URI. Each call of the walk goes through the same states:

1. normalize: boolean schemas become `{}` / `{"not": {}}`
2. ref-redirect: a `$ref` position becomes a node linked to its target
   (immediately, or through the pending-reference queue) and stops there
3. id-rebase: an `$id` naming another resource re-enters the walk with the
   new base URI
4. materialize-and-descend: create or reuse the node, link its parents and
   recurse into the subschema keywords
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Set, Tuple

from schemagraph.core.config import ResolutionConfig
from schemagraph.core.exceptions import (
    BadReferenceError,
    CyclicalReferenceError,
    DanglingPointerSegmentError,
    InvalidSchemaError,
    SchemaGraphError,
    UnresolvedReferenceError,
)
from schemagraph.core.interfaces import DocumentFetcher
from schemagraph.core.models import Diagnostic, SchemaGraph, SchemaNode
from schemagraph.keywords import is_schema_value, iter_subschemas
from schemagraph.pointer import (
    evaluate_pointer,
    fragment_to_pointer,
    is_pointer_fragment,
    parse_pointer,
)
from schemagraph.resolve.fetcher import HttpDocumentFetcher
from schemagraph.resolve.index import (
    SchemaIndex,
    canonicalize,
    document_address,
    is_reference,
    location_uri,
)
from schemagraph.uri import parse_uri, resolve_uri, split_fragment

logger = logging.getLogger(__name__)

_FETCHABLE_SCHEMES = ("http", "https")

# A subschema position: base URI of its resource and pointer tokens within it
Location = Tuple[str, Tuple[str, ...]]


def _text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _value_type(value: Any) -> Optional[Any]:
    if isinstance(value, str):
        return value
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return list(value)
    return None


def _resource_location(document: Any, address: str, tokens: List[str]) -> Location:
    """
    Map a pointer into a document onto the resource that holds its target.

    Every `$id` met above the target on the way down starts a new resource,
    so the returned tokens are relative to the innermost one. The pointer
    must already evaluate.
    """
    base_uri, relative = address, []
    current = document
    for token in tokens:
        if isinstance(current, dict) and isinstance(current.get("$id"), str):
            resource, _ = split_fragment(resolve_uri(current["$id"], base_uri))
            if resource != base_uri:
                base_uri, relative = resource, []
        relative.append(token)
        current = current[token] if isinstance(current, dict) else current[int(token)]
    return base_uri, tuple(relative)


class SchemaGraphBuilder:
    """
    Builds a URI-addressed graph of schema nodes.

    The builder owns the node table, the pending-reference queue (target URI
    -> URIs of the nodes waiting to link to it) and the diagnostics list.
    Documents are added one at a time; remote documents are fetched between
    walks so that only one walk ever mutates the shared state.

    Example:
        builder = SchemaGraphBuilder()
        graph = builder.build({"properties": {"a": {"type": "string"}}})
        graph.get("#/properties/a").parents  # {"#"}
    """

    def __init__(
        self,
        config: Optional[ResolutionConfig] = None,
        fetcher: Optional[DocumentFetcher] = None,
    ) -> None:
        """
        Initialize the builder.

        Args:
            config: Resolution configuration
            fetcher: Fetcher for remote documents; an HTTP fetcher is created
                on demand when remote resolution is enabled
        """
        self.config = config or ResolutionConfig()
        self._fetcher = fetcher
        self._detached: FrozenSet[str] = frozenset(self.config.detached_keywords)
        self._index = SchemaIndex()
        self._nodes: Dict[str, SchemaNode] = {}
        self._pending: Dict[str, Set[str]] = {}
        self._aliases: Dict[str, str] = {}
        self._diagnostics: List[Diagnostic] = []
        self._reported_cycles: Set[FrozenSet[str]] = set()
        self._failed_addresses: Set[str] = set()

    @property
    def nodes(self) -> Dict[str, SchemaNode]:
        return self._nodes

    @property
    def pending(self) -> Dict[str, Set[str]]:
        """Snapshot of the pending-reference queue."""
        return {target: set(parents) for target, parents in self._pending.items()}

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return list(self._diagnostics)

    @property
    def index(self) -> SchemaIndex:
        return self._index

    # -------------------------------------------------------------------------
    # Entry points
    # -------------------------------------------------------------------------

    def build(self, document: Any, base_uri: Optional[str] = None) -> SchemaGraph:
        """
        Build the graph of a document, synchronously.

        Remote documents are fetched in a private event loop when remote
        resolution is enabled; use `abuild` from async code.
        """
        root_uri = self.add_document(document, base_uri)
        if self.config.allow_remote_resolution:
            asyncio.run(self.resolve_remote())
        return self.finish(root_uri)

    async def abuild(self, document: Any, base_uri: Optional[str] = None) -> SchemaGraph:
        """Build the graph of a document, fetching remote documents if enabled."""
        root_uri = self.add_document(document, base_uri)
        if self.config.allow_remote_resolution:
            await self.resolve_remote()
        return self.finish(root_uri)

    def add_document(self, document: Any, base_uri: Optional[str] = None) -> Optional[str]:
        """
        Walk a document into the graph.

        Args:
            document: Root schema of the document
            base_uri: URI the document was retrieved from

        Returns:
            Canonical URI of the document's root node, or None if the root is
            not a schema
        """
        base = document_address(self.config.base_uri if base_uri is None else base_uri)
        logger.info(f"Walking document {base or '<root>'}")

        self._index.add_document(document, base)
        root_uri = self._walk(document, base, (), set())
        self._settle_pending()
        return root_uri

    async def resolve_remote(self) -> None:
        """Fetch and walk every external document that pending references need."""
        fetcher = self._fetcher
        owns_fetcher = fetcher is None
        if fetcher is None:
            fetcher = HttpDocumentFetcher(self.config.fetch)

        try:
            while True:
                addresses = self._missing_addresses()
                if not addresses:
                    break

                logger.info(f"Fetching {len(addresses)} remote document(s)")
                results = await fetcher.fetch_all(addresses)

                # Walks run one at a time after all fetches of the round settle
                for address in addresses:
                    document, error = results[address]
                    if error is not None:
                        self._failed_addresses.add(address)
                        self._record(error, address)
                        continue
                    self.add_document(document, address)
        finally:
            if owns_fetcher:
                await fetcher.aclose()

    def finish(self, root_uri: Optional[str]) -> SchemaGraph:
        """
        Report references that were never satisfied and produce the graph.

        The graph has no root when the top-level value is a `$ref` whose
        target was never resolved.
        """
        for target in sorted(self._pending):
            address, _ = split_fragment(target)
            if address in self._failed_addresses:
                continue
            if address not in self._index.resources and not self.config.allow_remote_resolution:
                reason = "remote resolution is disabled"
            else:
                reason = "target document is not available"
            self._record(UnresolvedReferenceError(target, reason), target)
        self._pending.clear()

        if root_uri is not None:
            root = self._nodes.get(root_uri)
            if root is None or (root.ref is not None and not root.children):
                root_uri = None

        return SchemaGraph(
            root_uri=root_uri,
            nodes=dict(self._nodes),
            diagnostics=list(self._diagnostics),
        )

    # -------------------------------------------------------------------------
    # Walk
    # -------------------------------------------------------------------------

    def _walk(
        self,
        schema: Any,
        base_uri: str,
        tokens: Tuple[str, ...],
        parents: Set[str],
        outers: Tuple[Location, ...] = (),
        rebased: bool = False,
    ) -> Optional[str]:
        """
        Walk one subschema position.

        `outers` holds the (base URI, tokens) pairs that address the same
        position from enclosing resources, i.e. the pointer paths that cross
        one or more `$id` boundaries. Their URIs become aliases of the node.
        """
        location = location_uri(base_uri, tokens)
        aliases = tuple(location_uri(outer_base, outer_tokens) for outer_base, outer_tokens in outers)

        if schema is True:
            schema = {}
        elif schema is False:
            schema = {"not": {}}
        if not isinstance(schema, dict):
            self._record(InvalidSchemaError(location, schema), location)
            return None

        if is_reference(schema):
            # Sibling keywords of $ref carry no meaning
            node, _ = self._materialize({}, location, parents, aliases)
            self._link_reference(node, schema["$ref"], base_uri)
            return node.uri

        schema_id = schema.get("$id")
        if not rebased and isinstance(schema_id, str):
            target = resolve_uri(schema_id, base_uri)
            address, fragment = split_fragment(target)
            if address != base_uri:
                logger.debug(f"Rebasing {location} onto {address}")
                return self._walk(
                    schema, address, (), parents, outers + ((base_uri, tokens),), rebased=True
                )
            if fragment and not is_pointer_fragment(fragment):
                aliases = aliases + (target,)

        node, created = self._materialize(schema, location, parents, aliases)
        if not created:
            return node.uri

        for keyword, relative, subschema in iter_subschemas(schema):
            child_parents = set() if keyword in self._detached else {node.uri}
            child_outers = tuple(
                (outer_base, outer_tokens + relative) for outer_base, outer_tokens in outers
            )
            self._walk(subschema, base_uri, tokens + relative, child_parents, child_outers)

        return node.uri

    def _materialize(
        self,
        schema: Dict[str, Any],
        uri: str,
        parents: Set[str],
        aliases: Iterable[str] = (),
    ) -> Tuple[SchemaNode, bool]:
        node = self._nodes.get(uri)
        created = node is None
        if node is None:
            node = SchemaNode(
                uri=uri,
                title=_text(schema.get("title")),
                description=_text(schema.get("description")),
                value_type=_value_type(schema.get("type")),
            )
            self._nodes[uri] = node
            logger.debug(f"Created node: {uri}")

        waiting = self._pending.pop(uri, set())
        for alias in aliases:
            if alias == uri:
                continue
            self._aliases[alias] = uri
            waiting |= self._pending.pop(alias, set())

        for parent_uri in parents | waiting:
            self._link(parent_uri, uri)
        return node, created

    def _link(self, parent_uri: str, child_uri: str) -> None:
        self._nodes[parent_uri].children.add(child_uri)
        self._nodes[child_uri].parents.add(parent_uri)

    def _lookup(self, uri: str) -> str:
        return self._aliases.get(uri, uri)

    # -------------------------------------------------------------------------
    # References
    # -------------------------------------------------------------------------

    def _link_reference(self, node: SchemaNode, reference: str, base_uri: str) -> None:
        target = self._lookup(canonicalize(resolve_uri(reference, base_uri)))
        node.ref = target

        cycle = self._reference_cycle(node.uri, target)
        if cycle:
            key = frozenset(cycle)
            if key not in self._reported_cycles:
                self._reported_cycles.add(key)
                self._record(CyclicalReferenceError(cycle), node.uri)
            return

        if target in self._nodes:
            self._link(node.uri, target)
        else:
            self._pending.setdefault(target, set()).add(node.uri)
            logger.debug(f"Queued reference {node.uri} -> {target}")

    def _reference_cycle(self, source_uri: str, target_uri: str) -> Optional[List[str]]:
        """Follow bare `$ref`s from a target; return the cycle if it closes on the source."""
        chain = [source_uri]
        current = target_uri
        while current not in chain:
            entry = self._index.locations.get(current)
            if entry is None or not is_reference(entry.schema):
                return None
            chain.append(current)
            current = self._lookup(canonicalize(resolve_uri(entry.schema["$ref"], entry.base_uri)))
        # A chain that only runs into a cycle further on is linked normally
        return chain if current == source_uri else None

    def _settle_pending(self) -> None:
        """Walk pending targets that live in loaded documents but off the tree walk."""
        progress = True
        while progress:
            progress = False
            for target in list(self._pending):
                if target not in self._pending:
                    continue
                address, fragment = split_fragment(target)
                document = self._index.resources.get(address)
                if document is None:
                    continue

                error = self._walk_target(document, address, fragment or "")
                if error is not None:
                    self._pending.pop(target, None)
                    self._record(error, target)
                elif target in self._pending:
                    # Target was walked but did not land at its own URI
                    self._pending.pop(target)
                    self._record(
                        UnresolvedReferenceError(target, "target is not a schema location"),
                        target,
                    )
                progress = True

    def _walk_target(self, document: Any, address: str, fragment: str) -> Optional[SchemaGraphError]:
        target = f"{address}#{fragment}"
        if not is_pointer_fragment(fragment):
            return UnresolvedReferenceError(target, "no schema declares this anchor")

        tokens = parse_pointer(fragment_to_pointer(fragment))
        value, error = evaluate_pointer(document, tokens)
        if isinstance(error, DanglingPointerSegmentError):
            return DanglingPointerSegmentError(error.segment, error.pointer, reference=target)
        if not is_schema_value(value):
            return BadReferenceError(target, value)

        base_uri, relative = _resource_location(document, address, tokens)
        self._walk(value, base_uri, relative, set(), ((address, tuple(tokens)),))
        return None

    def _missing_addresses(self) -> List[str]:
        addresses = set()
        for target in self._pending:
            address, _ = split_fragment(target)
            if address in self._index.resources or address in self._failed_addresses:
                continue
            if parse_uri(address).scheme in _FETCHABLE_SCHEMES:
                addresses.add(address)
        return sorted(addresses)

    def _record(self, error: SchemaGraphError, uri: Optional[str] = None) -> None:
        diagnostic = Diagnostic.from_error(error, uri)
        self._diagnostics.append(diagnostic)
        logger.warning(str(diagnostic))


def build_schema_graph(
    schema: Any,
    allow_remote_resolution: Optional[bool] = None,
    base_uri: Optional[str] = None,
    config: Optional[ResolutionConfig] = None,
    fetcher: Optional[DocumentFetcher] = None,
) -> SchemaGraph:
    """
    Build the schema graph of a document.

    Args:
        schema: Root schema document
        allow_remote_resolution: Overrides the config flag when given
        base_uri: URI the document was retrieved from
        config: Resolution configuration
        fetcher: Custom remote document fetcher

    Returns:
        SchemaGraph with the root node, node table and diagnostics
    """
    builder = SchemaGraphBuilder(_resolution_config(config, allow_remote_resolution), fetcher)
    return builder.build(schema, base_uri)


async def abuild_schema_graph(
    schema: Any,
    allow_remote_resolution: Optional[bool] = None,
    base_uri: Optional[str] = None,
    config: Optional[ResolutionConfig] = None,
    fetcher: Optional[DocumentFetcher] = None,
) -> SchemaGraph:
    """Async variant of `build_schema_graph`."""
    builder = SchemaGraphBuilder(_resolution_config(config, allow_remote_resolution), fetcher)
    return await builder.abuild(schema, base_uri)


def _resolution_config(
    config: Optional[ResolutionConfig], allow_remote_resolution: Optional[bool]
) -> ResolutionConfig:
    config = config or ResolutionConfig()
    if allow_remote_resolution is not None:
        config = config.model_copy(update={"allow_remote_resolution": allow_remote_resolution})
    return config
