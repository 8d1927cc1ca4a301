"""Tests for NetworkX-backed graph analysis."""

import pytest

from schemagraph.core.models import SchemaGraph
from schemagraph.graph import (
    build_schema_graph,
    detached_nodes,
    graph_stats,
    multi_parent_nodes,
    reference_cycles,
    to_networkx,
)


@pytest.fixture
def shared_graph() -> SchemaGraph:
    """Graph with a shared definition, an unused one and a recursion."""
    return build_schema_graph({
        "properties": {
            "billing": {"$ref": "#/definitions/address"},
            "shipping": {"$ref": "#/definitions/address"},
            "child": {"$ref": "#"},
        },
        "definitions": {
            "address": {"type": "object"},
            "unused": {"type": "string"},
        },
    })


class TestToNetworkx:
    """Test conversion to a NetworkX digraph."""

    def test_nodes_and_edges(self, shared_graph: SchemaGraph) -> None:
        """Test nodes and parent -> child edges are carried over."""
        digraph = to_networkx(shared_graph)

        assert set(digraph.nodes) == set(shared_graph.nodes)
        assert digraph.has_edge("#", "#/properties/billing")
        assert digraph.has_edge("#/properties/billing", "#/definitions/address")
        assert digraph.nodes["#/definitions/address"]["value_type"] == "object"

    def test_reference_edges_are_marked(self, shared_graph: SchemaGraph) -> None:
        """Test edges created by $ref carry the reference flag."""
        digraph = to_networkx(shared_graph)

        assert digraph.edges["#/properties/billing", "#/definitions/address"]["reference"]
        assert not digraph.edges["#", "#/properties/billing"]["reference"]


class TestAnalysis:
    """Test graph queries."""

    def test_multi_parent_nodes(self, shared_graph: SchemaGraph) -> None:
        """Test shared nodes are found."""
        uris = [node.uri for node in multi_parent_nodes(shared_graph)]
        assert uris == ["#/definitions/address"]

    def test_reference_cycles(self, shared_graph: SchemaGraph) -> None:
        """Test recursive references form a cycle."""
        assert reference_cycles(shared_graph) == [["#", "#/properties/child"]]

    def test_detached_nodes(self, shared_graph: SchemaGraph) -> None:
        """Test unused definitions are unreachable from the root."""
        assert [node.uri for node in detached_nodes(shared_graph)] == ["#/definitions/unused"]

    def test_detached_without_root(self) -> None:
        """Test every node is detached when the graph has no root."""
        graph = build_schema_graph({"$ref": "http://example.com/x.json"})
        assert [node.uri for node in detached_nodes(graph)] == ["#"]

    def test_graph_stats(self, shared_graph: SchemaGraph) -> None:
        """Test summary counts."""
        stats = graph_stats(shared_graph)

        assert stats["nodes"] == 6
        assert stats["reference_nodes"] == 3
        assert stats["multi_parent_nodes"] == 1
        assert stats["detached_nodes"] == 1
        assert stats["is_acyclic"] is False
        assert stats["diagnostics"] == {}

    def test_stats_count_diagnostics(self, cyclic_schema: dict) -> None:
        """Test diagnostics are counted by kind."""
        stats = graph_stats(build_schema_graph(cyclic_schema))
        assert stats["diagnostics"] == {"cyclical_reference": 1}
