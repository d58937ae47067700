"""Pytest configuration for repository test runs."""

from __future__ import annotations

import shutil
import sys
from pathlib import Path

import pytest

from tests.fixture_paths import source_fixture_dir


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


@pytest.fixture
def writable_source_dir(tmp_path: Path) -> Path:
    """Copy the fixture export into a scratch ``schema`` directory."""
    source_dir = tmp_path / "schema"
    shutil.copytree(source_fixture_dir(), source_dir)
    return source_dir
