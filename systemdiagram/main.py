"""Main CLI entry point for systemdiagram.

Provides commands: render, inspect
"""

import argparse
import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler

from systemdiagram.cli.inspection import inspect_command
from systemdiagram.cli.render import render_command
from systemdiagram.export import RENDERERS
from systemdiagram.graph.schema import LayoutDirection

logger = logging.getLogger("systemdiagram.cli")


def setup_logging(verbose: bool = False, console: Optional[Console] = None) -> None:
    """Setup logging configuration with Rich integration.

    Args:
        verbose: Enable verbose logging.
        console: Rich Console instance for coordinated output (optional).
    """
    if verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    # Log to stderr so rendered diagrams on stdout stay clean
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        log_time_format="[%H:%M:%S]",
    )

    logging.basicConfig(
        level=level,
        format="[%(name)s] [%(levelname)s] %(message)s",
        handlers=[handler],
    )


def _add_source_arguments(parser: argparse.ArgumentParser) -> None:
    """Arguments shared by commands that load a system from the catalog."""
    parser.add_argument(
        "system",
        help="System name or reference (e.g. payments, system:finance/payments)",
    )
    parser.add_argument(
        "-n",
        "--namespace",
        help="Namespace of the system when SYSTEM is a bare name (default: default)",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--catalog-url",
        help="Catalog backend base URL, e.g. http://localhost:7007",
    )
    source.add_argument(
        "--entities",
        help="JSON file with catalog entities (list or {\"items\": [...]})",
    )
    parser.add_argument(
        "-c",
        "--config",
        help=(
            "Optional configuration. Can be a path to a TOML/JSON file or an "
            "inline TOML/JSON string. When omitted, built-in defaults are used."
        ),
    )
    parser.add_argument(
        "--direction",
        choices=[d.name.lower() for d in LayoutDirection],
        help="Layout direction (default from config: bottom_top)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="systemdiagram",
        description="Systemdiagram - Catalog System Dependency Diagrams",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    render_parser = subparsers.add_parser(
        "render",
        help="Build and render the diagram of a system",
    )
    _add_source_arguments(render_parser)
    render_parser.add_argument(
        "-f",
        "--format",
        choices=sorted(RENDERERS),
        default="json",
        help="Output format (default: json)",
    )
    render_parser.add_argument(
        "-o",
        "--output",
        help="Output file (default: stdout)",
    )
    render_parser.add_argument(
        "--timeout",
        type=float,
        default=60.0,
        help="Seconds to wait for the catalog (default: 60)",
    )

    inspect_parser = subparsers.add_parser(
        "inspect",
        help="Summarize a system diagram and list dangling references",
    )
    _add_source_arguments(inspect_parser)
    inspect_parser.add_argument(
        "--fail-on-dangling",
        action="store_true",
        help="Exit with non-zero status when dangling references are found",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point.

    Returns:
        int: Exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if args.command == "render":
        return render_command(args)
    elif args.command == "inspect":
        return inspect_command(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
