"""Rich console rendering for system diagrams."""

from __future__ import annotations

import io
import logging
from typing import Dict, List, Optional

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text
from rich.tree import Tree

from systemdiagram.graph.schema import DiagramEdge, EdgeLabel, SystemGraph

logger = logging.getLogger("systemdiagram.export.console")

_LABEL_STYLES = {
    EdgeLabel.PART_OF: "cyan",
    EdgeLabel.PROVIDES_API: "green",
    EdgeLabel.DEPENDS_ON: "yellow",
}

CAPTION = "Pipe the DOT output into Graphviz to lay out the full diagram."


class ConsoleRenderer:
    """Render a system diagram as a rich tree of nodes and outgoing edges."""

    def __init__(self, title: str = "System Diagram", width: int = 100) -> None:
        self.title = title
        self.width = width

    def build_panel(self, graph: SystemGraph) -> Panel:
        """Return a rich Panel listing each node with its outgoing edges."""
        outgoing: Dict[str, List[DiagramEdge]] = {node_id: [] for node_id in graph.node_ids()}
        for edge in graph.edges:
            outgoing.setdefault(edge.source, []).append(edge)

        tree = Tree(Text(graph.root_id, style="bold"))
        for node_id, edges in outgoing.items():
            branch = tree if node_id == graph.root_id else tree.add(Text(node_id, style="bold"))
            for edge in edges:
                line = Text()
                line.append(edge.label.value, style=_LABEL_STYLES[edge.label])
                line.append(" → ")
                line.append(edge.target)
                branch.add(line)

        caption = Text(CAPTION, style="dim", justify="right")
        return Panel(Group(tree, caption), title=self.title, expand=False)

    def render(self, graph: SystemGraph, console: Optional[Console] = None) -> str:
        """Return the diagram as plain terminal text.

        Args:
            graph: Diagram graph to render.
            console: Optional console to print to as well.

        Returns:
            str: Rendered text without ANSI styling.
        """
        panel = self.build_panel(graph)
        if console is not None:
            console.print(panel)

        capture = Console(width=self.width, record=True, no_color=True, file=io.StringIO())
        capture.print(panel)
        return capture.export_text(styles=False)
