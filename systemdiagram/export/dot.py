"""DOT rendering for system diagrams."""

import logging

import networkx as nx
from networkx.drawing.nx_pydot import to_pydot

from systemdiagram.graph.schema import SystemGraph

logger = logging.getLogger("systemdiagram.export.dot")

# Graphviz nodesep is in inches; node margin is in points.
_POINTS_PER_INCH = 72.0


def _quote(value: str) -> str:
    # Display ids contain ':' which pydot would otherwise read as a port
    return f'"{value}"'


class DotRenderer:
    """Render a system diagram as Graphviz DOT text."""

    def __init__(self, title: str = "System Diagram", node_margin: int = 10) -> None:
        self.title = title
        self.node_margin = node_margin

    def to_dot_graph(self, graph: SystemGraph) -> nx.MultiDiGraph:
        """Build a NetworkX graph with DOT-safe node names and attributes."""
        native = graph.to_networkx()
        dot_graph = nx.relabel_nodes(native, {n: _quote(n) for n in native.nodes})
        for _, attrs in dot_graph.nodes(data=True):
            # The quoted node name doubles as the label
            attrs.pop("label", None)
        dot_graph.graph.clear()
        dot_graph.graph["graph"] = {
            "rankdir": graph.direction.value,
            "label": self.title,
            "labelloc": "t",
            "nodesep": f"{self.node_margin / _POINTS_PER_INCH:.3f}",
        }
        dot_graph.graph["node"] = {"shape": "box"}
        return dot_graph

    def render(self, graph: SystemGraph) -> str:
        """Return the diagram as DOT source.

        Args:
            graph: Diagram graph to render.

        Returns:
            str: DOT text.
        """
        logger.debug("Rendering DOT: %d nodes, %d edges", len(graph.nodes), len(graph.edges))
        return to_pydot(self.to_dot_graph(graph)).to_string()
