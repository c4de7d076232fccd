"""Diagram graph schema models.

Nodes and edges are pydantic models so renderers receive validated,
uniformly shaped data instead of ad-hoc dictionaries.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Dict, List

import networkx as nx
from pydantic import BaseModel, ConfigDict, Field, field_validator


class EdgeLabel(str, Enum):
    """The only labels a diagram edge can carry."""

    PART_OF = "part of"
    PROVIDES_API = "provides API"
    DEPENDS_ON = "depends on"


class LayoutDirection(str, Enum):
    """Rank direction handed to the renderer."""

    TOP_BOTTOM = "TB"
    BOTTOM_TOP = "BT"
    LEFT_RIGHT = "LR"
    RIGHT_LEFT = "RL"


class DiagramNode(BaseModel):
    """A diagram node identified by its display id."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: Annotated[str, Field(..., description="Display id, also used as label")]

    @field_validator("id")
    @classmethod
    def _check_id_non_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("Node id must be a non-empty string")
        return value


class DiagramEdge(BaseModel):
    """A directed, labeled diagram edge.

    Serialized with ``from``/``to`` keys (``model_dump(by_alias=True)``).
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    source: Annotated[str, Field(..., alias="from", description="Source display id")]
    target: Annotated[str, Field(..., alias="to", description="Target display id")]
    label: Annotated[EdgeLabel, Field(..., description="Relationship label")]

    @field_validator("source", "target")
    @classmethod
    def _check_endpoint_non_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("Edge endpoints must be non-empty strings")
        return value

    def to_payload(self) -> Dict[str, str]:
        return {"from": self.source, "to": self.target, "label": self.label.value}


class SystemGraph(BaseModel):
    """Nodes and edges of one system diagram, in insertion order."""

    model_config = ConfigDict(extra="forbid")

    nodes: List[DiagramNode] = Field(default_factory=list)
    edges: List[DiagramEdge] = Field(default_factory=list)
    direction: LayoutDirection = LayoutDirection.BOTTOM_TOP

    @property
    def root_id(self) -> str:
        return self.nodes[0].id

    def node_ids(self) -> List[str]:
        return [node.id for node in self.nodes]

    def to_renderer_payload(self) -> Dict[str, Any]:
        """Return the ``{nodes, edges, layoutDirection}`` renderer input."""
        return {
            "nodes": [{"id": node.id} for node in self.nodes],
            "edges": [edge.to_payload() for edge in self.edges],
            "layoutDirection": self.direction.value,
        }

    def to_networkx(self) -> nx.MultiDiGraph:
        """Project the diagram onto a NetworkX multigraph.

        Parallel edges with different labels are kept as separate keyed
        edges.
        """
        graph = nx.MultiDiGraph(rankdir=self.direction.value)
        for node in self.nodes:
            graph.add_node(node.id, label=node.id)
        for edge in self.edges:
            graph.add_edge(edge.source, edge.target, label=edge.label.value)
        return graph
