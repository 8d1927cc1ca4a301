"""Integration tests using the sample schemas from the data directory."""

from pathlib import Path

import pytest

from schemagraph.core.models import SchemaGraph
from schemagraph.documents import load_schema_document
from schemagraph.graph import (
    build_schema_graph,
    detached_nodes,
    multi_parent_nodes,
    reference_cycles,
)

ORDER = "https://example.com/schemas/order.schema.json"


@pytest.fixture
def order_graph(sample_schemas_dir: Path) -> SchemaGraph:
    """Graph of the sample order schema."""
    return build_schema_graph(load_schema_document(sample_schemas_dir / "order.schema.json"))


@pytest.fixture
def tree_graph(sample_schemas_dir: Path) -> SchemaGraph:
    """Graph of the sample recursive tree schema."""
    return build_schema_graph(load_schema_document(sample_schemas_dir / "tree.schema.yaml"))


class TestOrderSchema:
    """Test the order schema: shared, recursive and unused definitions."""

    def test_root(self, order_graph: SchemaGraph) -> None:
        """Test the root $id is the base of the graph."""
        assert order_graph.root_uri == f"{ORDER}#"
        assert order_graph.root.title == "Order"
        assert order_graph.diagnostics == []

    def test_shared_address(self, order_graph: SchemaGraph) -> None:
        """Test the address definition has both address properties as parents."""
        address = order_graph.get(f"{ORDER}#/definitions/address")
        assert address.parents == {
            f"{ORDER}#/properties/billingAddress",
            f"{ORDER}#/properties/shippingAddress",
        }
        assert address.title == "Address"

    def test_array_items(self, order_graph: SchemaGraph) -> None:
        """Test the line item definition is reached through items."""
        line_item = order_graph.get(f"{ORDER}#/definitions/lineItem")
        assert line_item.parents == {f"{ORDER}#/properties/items/items"}

    def test_type_list(self, order_graph: SchemaGraph) -> None:
        """Test list-valued types are kept."""
        assert order_graph.get(f"{ORDER}#/properties/notes").type_names == ["string", "null"]

    def test_recursive_category(self, order_graph: SchemaGraph) -> None:
        """Test the recursive category definition forms one cycle."""
        category = f"{ORDER}#/definitions/category"
        subcategories = f"{category}/properties/subcategories"

        assert order_graph.get(category).parents == {
            f"{ORDER}#/properties/category",
            f"{subcategories}/items",
        }
        assert reference_cycles(order_graph) == [
            sorted([category, subcategories, f"{subcategories}/items"]),
        ]

    def test_analysis(self, order_graph: SchemaGraph) -> None:
        """Test shared and detached nodes."""
        assert [n.uri for n in multi_parent_nodes(order_graph)] == [
            f"{ORDER}#/definitions/address",
            f"{ORDER}#/definitions/category",
        ]
        assert [n.uri for n in detached_nodes(order_graph)] == [
            f"{ORDER}#/definitions/legacyCode",
        ]


class TestTreeSchema:
    """Test the YAML tree schema that references its own root."""

    def test_root_recursion(self, tree_graph: SchemaGraph) -> None:
        """Test the root is the target of the items reference."""
        assert tree_graph.root_uri == "#"
        assert tree_graph.root.title == "Tree node"
        assert tree_graph.root.parents == {"#/properties/children/items"}
        assert tree_graph.diagnostics == []

    def test_nodes(self, tree_graph: SchemaGraph) -> None:
        """Test every subschema position is a node."""
        assert set(tree_graph.nodes) == {
            "#",
            "#/properties/value",
            "#/properties/children",
            "#/properties/children/items",
        }
