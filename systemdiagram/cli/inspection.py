"""Inspect command: summarize a system diagram and its dangling references.

Dangling references are relation targets that were not returned by the
catalog for the system. They are drawn like any other node; this command
lists them so incomplete catalog data can be spotted.
"""

from __future__ import annotations

import logging
from collections import Counter

from rich.console import Console
from rich.table import Table

from systemdiagram.catalog.client import CatalogError, EntityFilter
from systemdiagram.cli.common import fetch_system, make_client, resolve_config
from systemdiagram.config import ConfigurationError
from systemdiagram.graph.builder import GraphBuilder, find_dangling_nodes

logger = logging.getLogger("systemdiagram.cli.inspection")


def inspect_command(args, console: Console | None = None) -> int:
    """Execute inspect command.

    Args:
        args: Parsed command-line arguments.
        console: Console to print the summary to.

    Returns:
        int: Exit code (0 for success, non-zero for failure).
    """
    console = console or Console()
    try:
        config = resolve_config(args)
        client = make_client(args, config)
        system = fetch_system(client, args)
        if system is None:
            return 1
        related = client.get_entities(
            EntityFilter(system=system.metadata.name, kinds=tuple(config.diagram.kinds))
        )
    except (CatalogError, ConfigurationError, ValueError) as e:
        logger.error("Inspect failed: %s", e)
        return 1

    graph = GraphBuilder(config.diagram.direction).build(system, related)
    dangling = find_dangling_nodes(graph, related)
    labels = Counter(edge.label.value for edge in graph.edges)

    table = Table(title=f"{config.diagram.title}: {graph.root_id}")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("entities", str(len(related)))
    table.add_row("nodes", str(len(graph.nodes)))
    table.add_row("edges", str(len(graph.edges)))
    for label, count in sorted(labels.items()):
        table.add_row(f"edges: {label}", str(count))
    table.add_row("dangling references", str(len(dangling)))
    console.print(table)

    for node_id in dangling:
        console.print(f"  [yellow]dangling[/yellow] {node_id}")

    if getattr(args, "fail_on_dangling", False) and dangling:
        logger.error("%d dangling reference(s) found", len(dangling))
        return 1
    return 0
