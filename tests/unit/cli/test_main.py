"""Unit tests for CLI command handling."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from azure.core.exceptions import ServiceRequestError

from cli.main import main
from tests.fixture_paths import source_fixture_dir


def test_cli_run_dry_run_writes_exports(tmp_path: Path, capsys) -> None:
    """CLI run with a dry-run directory writes one JSONL file per container."""
    args = [
        "--source-dir",
        str(source_fixture_dir()),
        "run",
        "--dry-run-dir",
        str(tmp_path),
    ]

    exit_code = main(args)
    output = capsys.readouterr().out

    products = (tmp_path / "products.jsonl").read_text(encoding="utf-8").splitlines()
    assert exit_code == 0
    assert "documents_written=13" in output
    assert "total_errors=1" in output
    assert json.loads(products[0])["id"] == "category-1"


def test_cli_run_fails_for_missing_source_dir(tmp_path: Path, capsys) -> None:
    """Missing source directories are fatal with exit code 1."""
    exit_code = main(["--source-dir", str(tmp_path / "missing"), "run", "--dry-run-dir", "out"])
    error_output = capsys.readouterr().err

    assert exit_code == 1
    assert "migration_error=" in error_output
    assert not Path("out").exists()


def test_cli_check_requires_endpoint(monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    """The destination check fails cleanly without an endpoint."""
    monkeypatch.delenv("MIGRATE_COSMOS_ENDPOINT", raising=False)

    exit_code = main(["check"])

    assert exit_code == 1
    assert "MIGRATE_COSMOS_ENDPOINT" in capsys.readouterr().err


class _DeadEndpointClient:
    def __init__(self, endpoint: str, credential: object) -> None:
        self.endpoint = endpoint

    async def __aenter__(self) -> _DeadEndpointClient:
        raise ServiceRequestError(f"Cannot connect to host {self.endpoint}")

    async def __aexit__(self, *exc_info: object) -> None:
        return None

    async def close(self) -> None:
        return None


def test_cli_run_reports_unreachable_destination(
    monkeypatch: pytest.MonkeyPatch, capsys
) -> None:
    """A live run against a dead endpoint exits 1 with a migration error line."""
    monkeypatch.setenv("MIGRATE_COSMOS_ENDPOINT", "https://127.0.0.1:9/")
    monkeypatch.setenv("MIGRATE_COSMOS_KEY", "a2V5")
    monkeypatch.setattr("store.cosmos_container.CosmosClient", _DeadEndpointClient)

    exit_code = main(["--source-dir", str(source_fixture_dir()), "run"])
    error_output = capsys.readouterr().err

    assert exit_code == 1
    assert "migration_error=Cannot connect to Cosmos DB account" in error_output
