"""Tests for system diagram graph construction."""

import networkx as nx

from systemdiagram.graph.builder import GraphBuilder, build_graph, find_dangling_nodes
from systemdiagram.graph.schema import EdgeLabel, LayoutDirection


def _edges(edges):
    return [(e.source, e.target, e.label.value) for e in edges]


def test_payments_checkout_cart_example(make_entity) -> None:
    """A component depending on another yields three nodes and one edge."""
    root = make_entity("System", "payments", namespace="default")
    checkout = make_entity(
        "Component",
        "checkout",
        system="payments",
        relations=[("dependsOn", "component:default/cart")],
    )

    nodes, edges = build_graph(root, [checkout])

    assert [n.id for n in nodes] == ["system:payments", "component:checkout", "component:cart"]
    assert [e.to_payload() for e in edges] == [
        {"from": "component:checkout", "to": "component:cart", "label": "depends on"}
    ]


def test_root_first_and_domain_edges(make_entity) -> None:
    """Root domains are added right after the root, even when not fetched."""
    root = make_entity(
        "System",
        "payments",
        relations=[
            ("partOf", "domain:default/finance"),
            ("partOf", "group:default/platform"),
            ("ownedBy", "group:default/team-a"),
        ],
    )

    nodes, edges = build_graph(root, [])

    assert [n.id for n in nodes] == ["system:payments", "domain:finance"]
    assert _edges(edges) == [("system:payments", "domain:finance", "part of")]


def test_no_domain_relation_means_no_root_edge(make_entity) -> None:
    """Without a domain relation nothing leaves the root."""
    root = make_entity("System", "payments")
    api = make_entity("API", "charge", relations=[("partOf", "system:default/payments")])

    _, edges = build_graph(root, [api])

    assert all(e.source != "system:payments" for e in edges)
    assert _edges(edges) == [("api:charge", "system:payments", "part of")]


def test_relation_order_per_entity(make_entity) -> None:
    """Each entity emits part of, then provides API, then depends on edges."""
    root = make_entity("System", "payments")
    checkout = make_entity(
        "Component",
        "checkout",
        relations=[
            ("dependsOn", "resource:default/db"),
            ("providesApi", "api:default/checkout-api"),
            ("partOf", "system:default/payments"),
            ("dependsOn", "component:default/cart"),
        ],
    )

    _, edges = build_graph(root, [checkout])

    assert [e.label for e in edges] == [
        EdgeLabel.PART_OF,
        EdgeLabel.PROVIDES_API,
        EdgeLabel.DEPENDS_ON,
        EdgeLabel.DEPENDS_ON,
    ]
    assert [e.target for e in edges][2:] == ["resource:db", "component:cart"]


def test_entity_without_relations_adds_node_only(make_entity) -> None:
    """A zero-relation entity contributes one node and no edges."""
    root = make_entity("System", "payments")
    lonely = make_entity("Resource", "bucket")

    nodes, edges = build_graph(root, [lonely])

    assert [n.id for n in nodes] == ["system:payments", "resource:bucket"]
    assert edges == []


def test_nodes_are_deduplicated_edges_are_not(make_entity) -> None:
    """Repeated ids collapse to one node; parallel edges stay."""
    root = make_entity("System", "payments")
    a = make_entity(
        "Component",
        "a",
        relations=[
            ("partOf", "component:default/b"),
            ("dependsOn", "component:default/b"),
            ("dependsOn", "component:default/b"),
        ],
    )
    b = make_entity("Component", "B", relations=[("partOf", "system:default/payments")])

    nodes, edges = build_graph(root, [a, b, a])

    ids = [n.id for n in nodes]
    assert ids == ["system:payments", "component:a", "component:b"]
    assert len(ids) == len(set(ids))
    assert len(edges) == 7


def test_labels_are_restricted(payments_entities) -> None:
    """Only the three fixed labels are ever produced."""
    root, related = payments_entities
    _, edges = build_graph(root, related)
    assert {e.label.value for e in edges} <= {"part of", "provides API", "depends on"}


def test_build_is_deterministic_and_fresh(payments_entities) -> None:
    """Repeated builds yield identical sequences and never accumulate."""
    root, related = payments_entities
    builder = GraphBuilder()

    first = builder.build(root, related)
    second = builder.build(root, related)

    assert first.node_ids() == second.node_ids()
    assert first.edges == second.edges
    assert first.root_id == "system:payments"


def test_dangling_nodes_and_networkx_projection(payments_entities) -> None:
    """Targets outside the fetched set are drawn and reported."""
    root, related = payments_entities
    graph = GraphBuilder(LayoutDirection.LEFT_RIGHT).build(root, related)

    assert find_dangling_nodes(graph, related) == ["domain:finance", "component:cart"]

    native = graph.to_networkx()
    assert isinstance(native, nx.MultiDiGraph)
    assert native.number_of_nodes() == len(graph.nodes)
    assert native.number_of_edges() == len(graph.edges)
    assert native.graph["rankdir"] == "LR"

    payload = graph.to_renderer_payload()
    assert payload["layoutDirection"] == "LR"
    assert payload["nodes"][0] == {"id": "system:payments"}
