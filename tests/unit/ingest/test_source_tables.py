"""Unit tests for source table loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.errors import MigrationIngestError
from ingest.source_tables import SOURCE_TABLE_SPECS, load_source_tables
from tests.fixture_paths import source_fixture_dir


def test_load_source_tables_reads_every_table() -> None:
    """Loader should parse every registered table with stats."""
    tables = load_source_tables(source_fixture_dir(), "utf-8")

    stats = {item.table: item for item in tables.stats}
    assert len(stats) == len(SOURCE_TABLE_SPECS)
    assert [row.name for row in tables.categories] == ["Bikes", "Accessories"]
    assert stats["ShipMethod"].rows_read == 3
    assert stats["ShipMethod"].rows_rejected == 1
    assert len(tables.ship_methods) == 2


def test_load_source_tables_tolerates_missing_country_region(writable_source_dir: Path) -> None:
    """CountryRegion is optional; its absence leaves an empty table."""
    source_dir = writable_source_dir
    (source_dir / "CountryRegion.csv").unlink()

    tables = load_source_tables(source_dir, "utf-8")

    assert tables.country_regions == ()
    assert "CountryRegion" not in {item.table for item in tables.stats}


def test_load_source_tables_raises_for_missing_required_table(writable_source_dir: Path) -> None:
    """A missing required table is fatal."""
    source_dir = writable_source_dir
    (source_dir / "Product.csv").unlink()

    with pytest.raises(MigrationIngestError, match="Product.csv"):
        load_source_tables(source_dir, "utf-8")
