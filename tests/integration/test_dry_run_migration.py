"""Integration tests for a full dry-run migration."""

from __future__ import annotations

import json
from dataclasses import replace
from pathlib import Path
from typing import Any

import pytest

from core.config import MigrationConfig
from ingest.migration_report import MigrationReport
from ingest.pipeline import migrate
from store.jsonl_container import open_jsonl_destination
from tests.fixture_paths import source_fixture_dir


def _read_jsonl(path: Path) -> dict[str, dict[str, Any]]:
    documents = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
    return {document["id"]: document for document in documents}


@pytest.mark.asyncio
async def test_dry_run_migration_exports_denormalized_documents(tmp_path: Path) -> None:
    """A dry run writes every aggregate with the wire field contract."""
    config = replace(MigrationConfig.from_env(), source_dir=source_fixture_dir())
    lines: list[str] = []

    summary = await migrate(
        config,
        lambda: open_jsonl_destination(config, tmp_path),
        report=MigrationReport(echo=lines.append),
    )

    products = _read_jsonl(tmp_path / f"{config.products_container}.jsonl")
    customers = _read_jsonl(tmp_path / f"{config.customers_container}.jsonl")
    assert products["category-1"]["name"] == "Bikes"
    assert products["category-1"]["parentProductCategoryId"] is None
    assert products["category-101"]["parentCategoryName"] == "Bikes"
    assert products["category-101"]["docType"] == "productCategory"
    assert products["product-771"]["categoryName"] == "Mountain Bikes"
    assert products["model-5"]["descriptions"][0] == {
        "culture": "en",
        "description": "Top-of-the-line competition mountain bike.",
    }
    assert customers["29485"]["addresses"][0]["countryRegion"] == "US"
    assert customers["43661"]["lineItems"][0]["productName"] == "Unknown"
    assert customers["43661"]["docType"] == "salesOrder"
    assert summary.total_written == 13
    assert any(line.startswith("  elapsed: ") for line in lines)


@pytest.mark.asyncio
async def test_rerunning_dry_run_is_idempotent(tmp_path: Path) -> None:
    """Running the migration twice yields identical exports."""
    config = replace(MigrationConfig.from_env(), source_dir=source_fixture_dir())
    for run_name in ("a", "b"):
        await migrate(
            config,
            lambda: open_jsonl_destination(config, tmp_path / run_name),
            report=MigrationReport(echo=lambda line: None),
        )

    for name in (config.products_container, config.customers_container):
        first = (tmp_path / "a" / f"{name}.jsonl").read_text(encoding="utf-8")
        second = (tmp_path / "b" / f"{name}.jsonl").read_text(encoding="utf-8")
        assert first == second
