"""Graph builder for system diagrams.

Turns a system entity and the entities assigned to it into the node and
edge lists of a system diagram. The builder is a pure transformation: the
related entities must already be fetched by the caller.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from systemdiagram.catalog.model import Entity, EntityRef, RelationKind
from systemdiagram.graph.identifiers import normalize_ref
from systemdiagram.graph.schema import (
    DiagramEdge,
    DiagramNode,
    EdgeLabel,
    LayoutDirection,
    SystemGraph,
)

logger = logging.getLogger("systemdiagram.graph.builder")

# Processing order per entity is fixed: part of, provides API, depends on.
_RELATION_LABELS: Tuple[Tuple[RelationKind, EdgeLabel], ...] = (
    (RelationKind.PART_OF, EdgeLabel.PART_OF),
    (RelationKind.PROVIDES_API, EdgeLabel.PROVIDES_API),
    (RelationKind.DEPENDS_ON, EdgeLabel.DEPENDS_ON),
)

DOMAIN_KIND = "domain"


class GraphBuilder:
    """Accumulates diagram nodes and edges for a single build.

    A builder instance is transient: ``build`` starts from an empty graph
    every time it is called.
    """

    def __init__(self, direction: LayoutDirection = LayoutDirection.BOTTOM_TOP) -> None:
        self.direction = direction
        self._nodes: Dict[str, DiagramNode] = {}
        self._edges: List[DiagramEdge] = []

    def _reset(self) -> None:
        self._nodes = {}
        self._edges = []

    def _add_node(self, node_id: str) -> None:
        if node_id in self._nodes:
            return
        self._nodes[node_id] = DiagramNode(id=node_id)

    def _add_edge(self, source: str, target: EntityRef, label: EdgeLabel) -> None:
        target_id = normalize_ref(target)
        # Dangling targets are drawn, not rejected
        self._add_node(target_id)
        self._edges.append(DiagramEdge(source=source, target=target_id, label=label))

    def build(self, root: Entity, related: Iterable[Entity]) -> SystemGraph:
        """Build the diagram graph for a system.

        Args:
            root: The system entity being diagrammed.
            related: Entities assigned to the system, in catalog order.

        Returns:
            SystemGraph: Nodes and edges in insertion order, root first.
        """
        self._reset()

        root_id = normalize_ref(root)
        self._add_node(root_id)

        # The domain may be missing from the catalog; it is still shown
        for domain in root.get_relations(RelationKind.PART_OF, target_kind=DOMAIN_KIND):
            self._add_edge(root_id, domain, EdgeLabel.PART_OF)

        entity_count = 0
        for entity in related:
            entity_count += 1
            entity_id = normalize_ref(entity)
            self._add_node(entity_id)
            for relation_kind, label in _RELATION_LABELS:
                for target in entity.get_relations(relation_kind):
                    self._add_edge(entity_id, target, label)

        graph = SystemGraph(
            nodes=list(self._nodes.values()),
            edges=list(self._edges),
            direction=self.direction,
        )
        logger.debug(
            "Built diagram for %s from %d entities: %d nodes, %d edges",
            root_id,
            entity_count,
            len(graph.nodes),
            len(graph.edges),
        )
        self._reset()
        return graph


def build_graph(
    root: Entity,
    related: Sequence[Entity],
    direction: Optional[LayoutDirection] = None,
) -> Tuple[List[DiagramNode], List[DiagramEdge]]:
    """Return ``(nodes, edges)`` for a system and its related entities."""
    builder = GraphBuilder(direction or LayoutDirection.BOTTOM_TOP)
    graph = builder.build(root, related)
    return graph.nodes, graph.edges


def find_dangling_nodes(graph: SystemGraph, related: Iterable[Entity]) -> List[str]:
    """Return node ids that do not correspond to a fetched entity.

    The root node is never reported.
    """
    known = {normalize_ref(entity) for entity in related}
    return [
        node_id
        for node_id in graph.node_ids()[1:]
        if node_id not in known
    ]
