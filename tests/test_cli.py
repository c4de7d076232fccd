"""Tests for systemdiagram CLI entrypoints."""

from __future__ import annotations

import json
import os
import subprocess
import sys
import textwrap
import time
from pathlib import Path

import pytest
from rich.console import Console

import systemdiagram.main as main
from systemdiagram.catalog.client import CatalogFetchError, InMemoryCatalogClient
from systemdiagram.cli import inspection as inspection_module


@pytest.fixture
def entities_file(tmp_path: Path, payments_docs) -> Path:
    path = tmp_path / "entities.json"
    path.write_text(json.dumps(payments_docs), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(main, "setup_logging", lambda *a, **k: None)


def test_main_requires_command(capsys: pytest.CaptureFixture[str]) -> None:
    """Missing subcommands make the CLI print help and fail."""
    exit_code = main.main([])

    assert exit_code == 1
    assert "Systemdiagram" in capsys.readouterr().out


def test_render_json_to_stdout(entities_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """render writes the JSON diagram to stdout."""
    exit_code = main.main(["render", "payments", "--entities", str(entities_file)])

    assert exit_code == 0
    data = json.loads(capsys.readouterr().out)
    assert data["nodes"][0] == {"id": "system:payments"}
    assert data["layoutDirection"] == "BT"


def test_render_dot_to_file_with_direction(tmp_path: Path, entities_file: Path) -> None:
    """render -o writes the chosen format and honours --direction."""
    output = tmp_path / "out" / "payments.dot"
    exit_code = main.main(
        [
            "render",
            "system:default/payments",
            "--entities",
            str(entities_file),
            "-f",
            "dot",
            "--direction",
            "top_bottom",
            "-o",
            str(output),
        ]
    )

    assert exit_code == 0
    text = output.read_text(encoding="utf-8")
    assert "rankdir=TB" in text
    assert '"component:cart"' in text


def test_render_unknown_system_fails(entities_file: Path) -> None:
    """A system missing from the catalog is an error."""
    assert main.main(["render", "missing", "--entities", str(entities_file)]) == 1


def test_render_without_source_fails() -> None:
    """Either a catalog URL or an entities file is required."""
    assert main.main(["render", "payments"]) == 1


def test_render_fetch_error_fails(
    monkeypatch: pytest.MonkeyPatch, entities_file: Path
) -> None:
    """A failing entity fetch is reported and yields exit code 1."""

    def _boom(self, entity_filter):
        raise CatalogFetchError("catalog down")

    monkeypatch.setattr(InMemoryCatalogClient, "get_entities", _boom)

    assert main.main(["render", "payments", "--entities", str(entities_file)]) == 1


def test_inspect_reports_dangling(
    monkeypatch: pytest.MonkeyPatch, entities_file: Path
) -> None:
    """inspect prints counts and fails on dangling refs when asked."""
    console = Console(width=120, record=True)
    original = inspection_module.inspect_command
    monkeypatch.setattr(
        main, "inspect_command", lambda args: original(args, console=console)
    )

    assert main.main(["inspect", "payments", "--entities", str(entities_file)]) == 0
    text = console.export_text()
    assert "dangling references" in text
    assert "component:cart" in text
    assert "domain:finance" in text

    assert (
        main.main(
            ["inspect", "payments", "--entities", str(entities_file), "--fail-on-dangling"]
        )
        == 1
    )


def test_invalid_catalog_url_fails() -> None:
    """A non-http catalog URL is rejected as configuration error."""
    assert main.main(["render", "payments", "--catalog-url", "ftp://nope"]) == 1


def test_render_timeout_exits_without_waiting_for_fetch(entities_file: Path) -> None:
    """--timeout ends the process even while the catalog call is still blocked."""
    script = textwrap.dedent(
        """
        import sys
        import time

        import systemdiagram.main as main
        from systemdiagram.catalog.client import InMemoryCatalogClient

        def _slow(self, entity_filter):
            time.sleep(8)
            return []

        InMemoryCatalogClient.get_entities = _slow
        sys.exit(main.main(["render", "payments", "--entities", sys.argv[1], "--timeout", "0.5"]))
        """
    )
    repo_root = Path(__file__).resolve().parents[1]
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(repo_root), env.get("PYTHONPATH")]))

    started = time.monotonic()
    result = subprocess.run(
        [sys.executable, "-c", script, str(entities_file)],
        env=env,
        capture_output=True,
        text=True,
        timeout=30,
    )
    elapsed = time.monotonic() - started

    assert result.returncode == 1
    assert elapsed < 5
