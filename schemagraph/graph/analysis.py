"""Graph analysis helpers backed by NetworkX."""

from __future__ import annotations

from typing import Any, Dict, List

import networkx as nx

from schemagraph.core.models import SchemaGraph, SchemaNode


def to_networkx(graph: SchemaGraph) -> nx.DiGraph:
    """
    Convert a schema graph into a directed graph with parent -> child edges.

    Node attributes hold the `SchemaNode` under `node`, plus `title` and
    `value_type` for convenience.
    """
    digraph = nx.DiGraph()
    for uri, node in graph.nodes.items():
        digraph.add_node(uri, node=node, title=node.title, value_type=node.value_type)
    for uri, node in graph.nodes.items():
        for child_uri in node.children:
            digraph.add_edge(uri, child_uri, reference=node.ref == child_uri)
    return digraph


def multi_parent_nodes(graph: SchemaGraph) -> List[SchemaNode]:
    """Nodes with two or more parents, i.e. shared through `$ref`."""
    return [
        node for uri, node in sorted(graph.nodes.items()) if len(node.parents) >= 2
    ]


def reference_cycles(graph: SchemaGraph) -> List[List[str]]:
    """Cycles in the parent/child relation, e.g. recursive schemas."""
    cycles = [sorted(cycle) for cycle in nx.simple_cycles(to_networkx(graph))]
    return sorted(cycles)


def detached_nodes(graph: SchemaGraph) -> List[SchemaNode]:
    """Nodes not reachable from the root, e.g. unused definitions."""
    if graph.root_uri is None:
        return sorted(graph.nodes.values(), key=lambda n: n.uri)

    digraph = to_networkx(graph)
    reachable = nx.descendants(digraph, graph.root_uri) | {graph.root_uri}
    return [node for uri, node in sorted(graph.nodes.items()) if uri not in reachable]


def graph_stats(graph: SchemaGraph) -> Dict[str, Any]:
    """Summary counts of a schema graph."""
    digraph = to_networkx(graph)
    diagnostics: Dict[str, int] = {}
    for diagnostic in graph.diagnostics:
        diagnostics[diagnostic.kind.value] = diagnostics.get(diagnostic.kind.value, 0) + 1

    return {
        "nodes": digraph.number_of_nodes(),
        "edges": digraph.number_of_edges(),
        "reference_nodes": sum(1 for node in graph.nodes.values() if node.ref is not None),
        "multi_parent_nodes": len(multi_parent_nodes(graph)),
        "detached_nodes": len(detached_nodes(graph)),
        "is_acyclic": nx.is_directed_acyclic_graph(digraph),
        "diagnostics": diagnostics,
    }
