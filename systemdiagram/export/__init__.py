"""Diagram renderers and file export."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional, Protocol, Type, Union

from systemdiagram.config.schema import DiagramConfig
from systemdiagram.export.console import ConsoleRenderer
from systemdiagram.export.dot import DotRenderer
from systemdiagram.export.json import JsonRenderer
from systemdiagram.graph.schema import SystemGraph

logger = logging.getLogger("systemdiagram.export")


class DiagramRenderer(Protocol):
    """Consumer of a built diagram graph."""

    def render(self, graph: SystemGraph) -> str:
        """Return the rendered diagram."""
        ...


RENDERERS: Dict[str, Type] = {
    "json": JsonRenderer,
    "dot": DotRenderer,
    "console": ConsoleRenderer,
}


def get_renderer(fmt: str, config: Optional[DiagramConfig] = None) -> DiagramRenderer:
    """Create the renderer for an output format.

    Args:
        fmt: One of ``json``, ``dot``, ``console``.
        config: Diagram settings; defaults apply when omitted.

    Raises:
        ValueError: If the format is unknown.
    """
    config = config or DiagramConfig()
    key = fmt.lower()
    if key == "console":
        return ConsoleRenderer(title=config.title)
    if key in RENDERERS:
        return RENDERERS[key](title=config.title, node_margin=config.node_margin)
    raise ValueError(f"Unknown diagram format '{fmt}'. Valid formats: {sorted(RENDERERS)}")


def export_graph(
    graph: SystemGraph,
    output_path: Union[str, Path],
    fmt: str = "json",
    config: Optional[DiagramConfig] = None,
) -> Path:
    """Render a diagram and write it to a file.

    Args:
        graph: Diagram graph to export.
        output_path: Output file path; parent directories are created.
        fmt: Output format.
        config: Diagram settings.

    Returns:
        Path: The written file.
    """
    path = Path(output_path)
    logger.info("Exporting diagram to %s: %s", fmt.upper(), path)

    text = get_renderer(fmt, config).render(graph)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")

    logger.info("Export completed: %d nodes, %d edges", len(graph.nodes), len(graph.edges))
    return path


__all__ = [
    "ConsoleRenderer",
    "DiagramRenderer",
    "DotRenderer",
    "JsonRenderer",
    "RENDERERS",
    "export_graph",
    "get_renderer",
]
