"""Unit tests for the JSONL export container."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from core.errors import MigrationStoreError
from store.jsonl_container import JsonlExportContainer


@pytest.mark.asyncio
async def test_upsert_replaces_and_flush_sorts_by_id(tmp_path: Path) -> None:
    """Upserts replace by (id, partition key) and export sorted by id."""
    container = JsonlExportContainer("customers", tmp_path)
    await container.upsert_item({"id": "43659", "customerId": "29485", "v": 1}, "29485")
    await container.upsert_item({"id": "29485", "customerId": "29485"}, "29485")
    await container.upsert_item({"id": "43659", "customerId": "29485", "v": 2}, "29485")

    export_path = container.flush()

    lines = export_path.read_text(encoding="utf-8").splitlines()
    assert export_path == tmp_path / "customers.jsonl"
    assert [json.loads(line)["id"] for line in lines] == ["29485", "43659"]
    assert json.loads(lines[1])["v"] == 2


@pytest.mark.asyncio
async def test_read_item_returns_copy_or_none(tmp_path: Path) -> None:
    """Point reads return detached copies and None when absent."""
    container = JsonlExportContainer("products", tmp_path)
    body = {"id": "product-1", "tags": ["a"]}
    await container.upsert_item(body, "product-1")
    body["tags"].append("b")

    stored = await container.read_item("product-1", "product-1")

    assert stored == {"id": "product-1", "tags": ["a"]}
    assert await container.read_item("product-1", "other") is None


@pytest.mark.asyncio
async def test_upsert_requires_string_id(tmp_path: Path) -> None:
    """Documents without an id are rejected."""
    container = JsonlExportContainer("products", tmp_path)

    with pytest.raises(MigrationStoreError):
        await container.upsert_item({"name": "no id"}, "x")
