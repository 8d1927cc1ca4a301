"""Schema graph building and analysis."""

from schemagraph.graph.analysis import (
    detached_nodes,
    graph_stats,
    multi_parent_nodes,
    reference_cycles,
    to_networkx,
)
from schemagraph.graph.builder import (
    SchemaGraphBuilder,
    abuild_schema_graph,
    build_schema_graph,
)

__all__ = [
    # Building
    "SchemaGraphBuilder",
    "build_schema_graph",
    "abuild_schema_graph",
    # Analysis
    "to_networkx",
    "multi_parent_nodes",
    "reference_cycles",
    "detached_nodes",
    "graph_stats",
]
