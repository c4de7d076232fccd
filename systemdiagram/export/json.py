"""JSON rendering for system diagrams."""

import json
import logging

from systemdiagram.graph.schema import SystemGraph

logger = logging.getLogger("systemdiagram.export.json")


class JsonRenderer:
    """Render the renderer payload as a JSON document."""

    def __init__(self, title: str = "System Diagram", node_margin: int = 10) -> None:
        self.title = title
        self.node_margin = node_margin

    def render(self, graph: SystemGraph) -> str:
        """Return ``{title, nodes, edges, layoutDirection, nodeMargin}`` as JSON.

        Args:
            graph: Diagram graph to render.

        Returns:
            str: Indented JSON text.
        """
        data = {"title": self.title, **graph.to_renderer_payload()}
        data["nodeMargin"] = self.node_margin
        logger.debug("Rendering JSON: %d nodes, %d edges", len(graph.nodes), len(graph.edges))
        return json.dumps(data, indent=2, ensure_ascii=False)
