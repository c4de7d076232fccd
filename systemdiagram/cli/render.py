"""Render command implementation."""

import logging
import sys
from concurrent.futures import TimeoutError as FutureTimeoutError
from pathlib import Path

from rich.console import Console

from systemdiagram.card import DiagramState, SystemDiagramCard
from systemdiagram.catalog.client import CatalogError
from systemdiagram.cli.common import fetch_system, make_client, resolve_config
from systemdiagram.config import ConfigurationError
from systemdiagram.export import ConsoleRenderer, export_graph, get_renderer

logger = logging.getLogger("systemdiagram.cli.render")


def render_command(args) -> int:
    """Execute render command.

    Args:
        args: Parsed command-line arguments containing:
            - system: System reference (``name`` or ``system:ns/name``)
            - catalog_url / entities: Entity source
            - format: Output format (json, dot, console)
            - output: Output file path (optional, stdout when omitted)

    Returns:
        int: Exit code (0 for success, non-zero for failure).
    """
    try:
        config = resolve_config(args)
        client = make_client(args, config)
        system = fetch_system(client, args)
    except (CatalogError, ConfigurationError, ValueError) as e:
        logger.error("Cannot prepare diagram: %s", e)
        return 1
    if system is None:
        return 1

    fmt = getattr(args, "format", "json")
    output = getattr(args, "output", None)
    timeout = getattr(args, "timeout", None)

    with SystemDiagramCard(client, system, config.diagram) as card:
        card.refresh()
        try:
            state = card.wait(timeout=timeout)
        except FutureTimeoutError:
            logger.error("Timed out after %ss waiting for the catalog", timeout)
            return 1

        if state is DiagramState.ERROR:
            logger.error("Fetching system entities failed: %s", card.error)
            return 1

        graph = card.graph
        logger.info(
            "Diagram for %s: %d nodes, %d edges",
            graph.root_id,
            len(graph.nodes),
            len(graph.edges),
        )

        if output:
            try:
                export_graph(graph, Path(output), fmt, config.diagram)
            except OSError as e:
                logger.error("Cannot write diagram to %s: %s", output, e)
                return 1
            return 0

        if fmt == "console":
            ConsoleRenderer(title=config.diagram.title).render(graph, console=Console())
        else:
            sys.stdout.write(card.render(get_renderer(fmt, config.diagram)))
            sys.stdout.write("\n")
    return 0
