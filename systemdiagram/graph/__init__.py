"""Public graph API surface."""

from systemdiagram.graph.builder import GraphBuilder, build_graph, find_dangling_nodes
from systemdiagram.graph.identifiers import normalize_ref
from systemdiagram.graph.schema import (
    DiagramEdge,
    DiagramNode,
    EdgeLabel,
    LayoutDirection,
    SystemGraph,
)

__all__ = [
    "DiagramEdge",
    "DiagramNode",
    "EdgeLabel",
    "GraphBuilder",
    "LayoutDirection",
    "SystemGraph",
    "build_graph",
    "find_dangling_nodes",
    "normalize_ref",
]
