"""Unit tests for core config parsing."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import pytest

from core.config import MigrationConfig, discover_source_dir
from core.errors import MigrationConfigError, MigrationIngestError


def test_from_env_uses_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fall back to documented defaults."""
    for name in (
        "MIGRATE_SOURCE_DIR",
        "MIGRATE_COSMOS_ENDPOINT",
        "MIGRATE_SUBCATEGORY_OFFSET",
        "MIGRATE_DATABASE",
    ):
        monkeypatch.delenv(name, raising=False)

    config = MigrationConfig.from_env()

    assert config.source_dir is None
    assert config.cosmos_endpoint is None
    assert config.subcategory_id_offset == 100
    assert config.database_name == "adventureworks"


def test_from_env_reads_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should read every override from the environment."""
    monkeypatch.setenv("MIGRATE_SOURCE_DIR", "./exports")
    monkeypatch.setenv("MIGRATE_COSMOS_ENDPOINT", "https://example.documents.azure.com:443/")
    monkeypatch.setenv("MIGRATE_SUBCATEGORY_OFFSET", "1000")
    monkeypatch.setenv("MIGRATE_THROTTLE_FALLBACK_SECONDS", "0.5")
    monkeypatch.setenv("MIGRATE_LOG_LEVEL", "debug")

    config = MigrationConfig.from_env()

    assert config.source_dir == Path("exports")
    assert config.require_endpoint().startswith("https://example")
    assert config.subcategory_id_offset == 1000
    assert config.throttle_fallback_seconds == 0.5
    assert config.log_level == "DEBUG"


@pytest.mark.parametrize("raw_value", ["not-a-number", "0", "-5"])
def test_from_env_raises_for_invalid_offset(
    monkeypatch: pytest.MonkeyPatch,
    raw_value: str,
) -> None:
    """Config should fail for a non-positive or non-numeric offset."""
    monkeypatch.setenv("MIGRATE_SUBCATEGORY_OFFSET", raw_value)

    with pytest.raises(MigrationConfigError):
        MigrationConfig.from_env()


def test_from_env_raises_for_negative_fallback(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should reject a negative throttle fallback delay."""
    monkeypatch.setenv("MIGRATE_THROTTLE_FALLBACK_SECONDS", "-1")

    with pytest.raises(MigrationConfigError):
        MigrationConfig.from_env()


def test_require_endpoint_raises_when_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    """Live runs should require an endpoint."""
    monkeypatch.delenv("MIGRATE_COSMOS_ENDPOINT", raising=False)
    config = MigrationConfig.from_env()

    with pytest.raises(MigrationConfigError):
        config.require_endpoint()


def test_resolve_source_dir_raises_for_missing_dir(tmp_path: Path) -> None:
    """An explicit source directory must exist."""
    config = replace(MigrationConfig.from_env(), source_dir=tmp_path / "missing")

    with pytest.raises(MigrationIngestError):
        config.resolve_source_dir()


def test_discover_source_dir_walks_up(tmp_path: Path) -> None:
    """Discovery should find a schema folder in a parent directory."""
    schema_dir = tmp_path / "schema"
    nested_dir = tmp_path / "a" / "b"
    schema_dir.mkdir()
    nested_dir.mkdir(parents=True)

    found = discover_source_dir(nested_dir)

    assert found == schema_dir.resolve()
