"""Tests for the Graph aggregate: dedup, placeholders and add()."""

import pytest

from minigauge.entity import EntitySchema, Record
from minigauge.errors import InvalidArgument
from minigauge.graph.models import EdgeSpec, EdgeType, Graph, NodeSpec


class TestGraphDedup:
    """Nodes and edges are deduplicated by full equality."""

    def test_same_node_added_twice(self, graph):
        graph.add_node(NodeSpec(name="Invoice_1", attributes=["number: 1"]))
        graph.add_node(NodeSpec(name="Invoice_1", attributes=["number: 1"]))

        assert len(graph.nodes) == 1
        assert graph.render().count('"Invoice_1" [') == 1

    def test_same_name_different_content_kept(self, graph):
        graph.add_node(NodeSpec(name="Invoice_1", attributes=["number: 1"]))
        graph.add_node(NodeSpec(name="Invoice_1", attributes=["number: 2"]))

        assert len(graph.nodes) == 2

    def test_same_edge_added_twice(self, graph):
        graph.add_edge(EdgeSpec(source="A_1", destination="B_1", label="B"))
        graph.add_edge(EdgeSpec(source="A_1", destination="B_1", label="B"))

        assert len(graph.edges) == 1
        assert graph.render().count('"A_1" -> "B_1"') == 1

    def test_edges_differing_in_type_kept(self, graph):
        graph.add_edge(EdgeSpec(source="A_1", destination="B_1"))
        graph.add_edge(EdgeSpec(source="A_1", destination="B_1", type=EdgeType.ONE_MANY))

        assert len(graph.edges) == 2

    def test_insertion_order_preserved(self, graph):
        for name in ("C_1", "A_1", "B_1"):
            graph.add_node(NodeSpec(name=name))

        assert [node.name for node in graph.nodes] == ["C_1", "A_1", "B_1"]

    def test_add_node_accepts_entity(self, graph, member_product):
        graph.add_node(member_product)

        assert graph.nodes == [member_product.node_definition()]


class TestGraphAdd:
    """Tests for the add() convenience operation."""

    def test_add_without_destination_or_label(self, graph, member_product):
        with pytest.raises(InvalidArgument):
            graph.add(source=member_product)

    def test_add_without_source(self, graph):
        with pytest.raises(InvalidArgument):
            graph.add(source=None, destination="B_1")

    def test_add_placeholder(self, graph, member_product):
        edge = graph.add(source=member_product, destination=None, label="foo")

        assert len(graph.nodes) == 1
        assert len(graph.edges) == 1
        placeholder = graph.nodes[0]
        assert edge.empty_record is True
        assert edge.source == "MemberProduct_131299"
        assert edge.destination == placeholder.name
        assert placeholder.name == "_empty_foo_1"
        assert placeholder.label == "foo"
        assert placeholder.attributes == ["none"]
        assert placeholder.options == {"color": "gray61"}

    def test_placeholders_are_unique(self, graph, member_product):
        graph.add(source=member_product, destination=None, label="Invoice item")
        graph.add(source=member_product, destination=None, label="Invoice item")

        names = [node.name for node in graph.nodes]
        assert len(set(names)) == 2
        assert all(name.startswith("_empty_invoice_item_") for name in names)

    def test_placeholder_does_not_swallow_entity(self, graph):
        root = Record(EntitySchema(name="Root"), {"id": 1})
        note = Record(EntitySchema(name="note"), {"id": 1, "body": "hello"})

        graph.add(source=root, destination=None, label="note")
        graph.add(source=root, destination=note, label="Note")

        document = graph.render()
        assert "body: hello" in document
        assert '"Root_1" -> "note_1" [label="Note"]' in document
        assert len([node for node in graph.nodes if node.name == "note_1"]) == 1

    def test_placeholder_skips_taken_names(self, graph, member_product):
        graph.add_node(NodeSpec(name="_empty_note_1"))

        edge = graph.add(source=member_product, destination=None, label="note")

        assert edge.destination == "_empty_note_2"
        assert [node.name for node in graph.nodes].count("_empty_note_1") == 1

    def test_add_entities(self, graph, member_product):
        product = member_product.resolve("product")
        edge = graph.add(source=member_product, destination=product, label="product", type="one-one")

        assert [node.name for node in graph.nodes] == ["MemberProduct_131299", "Donation_3"]
        assert edge == EdgeSpec(
            source="MemberProduct_131299",
            destination="Donation_3",
            label="product",
            type=EdgeType.ONE_ONE,
        )

    def test_add_does_not_duplicate_present_nodes(self, graph, member_product):
        product = member_product.resolve("product")
        graph.add_node(NodeSpec(name="Donation_3", label="Existing"))

        graph.add(source=member_product, destination=product)

        assert [node.name for node in graph.nodes] == ["Donation_3", "MemberProduct_131299"]
        assert graph.nodes[0].label == "Existing"

    def test_add_node_names(self, graph):
        graph.add(source="Person_1", destination="Organization_2", label="Member")

        assert [node.name for node in graph.nodes] == ["Person_1", "Organization_2"]

    def test_unknown_edge_type(self, graph):
        with pytest.raises(ValueError):
            graph.add(source="A_1", destination="B_1", type="one-few")


class TestNilNodeDefinition:
    """Tests for placeholder node definitions."""

    def test_requires_name_or_label(self, graph):
        with pytest.raises(InvalidArgument):
            graph.nil_node_definition()

    def test_name_from_label(self, graph):
        node = graph.nil_node_definition(label="Invoice item")

        assert node.name == "invoice_item"
        assert node.label == "Invoice item"

    def test_label_from_name(self, graph):
        node = graph.nil_node_definition(name="invoice_item")

        assert node.label == "Invoice Item"

    def test_placeholder_color(self):
        graph = Graph(placeholder_color="lightgray")

        assert graph.nil_node_definition(name="x").options == {"color": "lightgray"}


class TestGraphDefaults:

    def test_default_title(self):
        graph = Graph(graph_type="Membership")

        assert graph.title == "Membership diagram"

    def test_render_is_idempotent(self, graph, member_product):
        member_product.fill_graph(graph, ["product", {"invoiceItem": "invoice"}])

        assert graph.render() == graph.render()
