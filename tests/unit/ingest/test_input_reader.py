"""Unit tests for input reader module."""

from __future__ import annotations

import codecs
from pathlib import Path

import pytest

from core.errors import MigrationIngestError
from ingest.input_reader import read_source_file, split_pipe_records, split_tab_records
from tests.fixture_paths import fixture_path


def test_split_tab_records_skips_blank_lines() -> None:
    """Tab reader should keep order, drop blank lines and keep empty fields."""
    rows = split_tab_records("1\tBikes\t\r\n\n2\tComponents\tx\n")

    assert rows == [("1", "Bikes", ""), ("2", "Components", "x")]


def test_split_tab_records_accepts_bare_carriage_returns() -> None:
    """Tab reader should treat CR, LF and CRLF alike as line terminators."""
    rows = split_tab_records("1\tBikes\r2\tComponents\r\n3\tClothing\n")

    assert rows == [("1", "Bikes"), ("2", "Components"), ("3", "Clothing")]


def test_split_pipe_records_uses_two_character_separators() -> None:
    """Pipe reader should allow bare pipes and ampersands inside fields."""
    rows = split_pipe_records("1+|a|b+|c&d&|\r\n2+|x+y+|&|\n\n")

    assert rows == [("1", "a|b", "c&d"), ("2", "x+y", "")]


def test_split_pipe_records_rejoin_reproduces_record() -> None:
    """Rejoining pipe fields should reproduce each record minus its terminator."""
    records = ["5+|Mountain-100+|<p1:Desc a='1|2'/>+|+|guid+|2011-05-01", "6+|Sport+|+|+|g+|d"]
    text = "".join(f"{record}&|\n" for record in records)

    rows = split_pipe_records(text)

    assert ["+|".join(row) for row in rows] == records


def test_read_source_file_reads_fixture_pipe_file() -> None:
    """Reader should parse CRLF-terminated pipe fixtures."""
    rows = read_source_file(fixture_path("adventureworks/Person.csv"), "pipe", "utf-8")

    assert len(rows) == 2
    assert rows[0][4] == "Catherine"
    assert len(rows[1]) == 13


def test_read_source_file_honours_utf16_bom(tmp_path: Path) -> None:
    """Reader should decode UTF-16 exports regardless of configured encoding."""
    file_path = tmp_path / "ProductCategory.csv"
    file_path.write_bytes(codecs.BOM_UTF16_LE + "1\tVélos\tg\td\n".encode("utf-16-le"))

    rows = read_source_file(file_path, "tab", "utf-8")

    assert rows == [("1", "Vélos", "g", "d")]


def test_read_source_file_raises_for_missing_path(tmp_path: Path) -> None:
    """Reader should fail when the table file is missing."""
    missing_path = tmp_path / "Product.csv"

    with pytest.raises(MigrationIngestError):
        read_source_file(missing_path, "tab", "utf-8")

    assert missing_path.exists() is False
