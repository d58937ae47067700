"""Unit tests for per-record transform isolation."""

from __future__ import annotations

from transforms.transform_runner import transform_rows
from transforms.value_parsing import parse_int


def test_transform_rows_counts_errors_and_skips() -> None:
    """A failing row is counted without stopping later rows."""
    rows = [("1",), ("x",), ("",), ("4",)]

    def build(row: tuple[str, ...]) -> int | None:
        if not row[0]:
            return None
        return parse_int(row[0], "Id")

    result = transform_rows("demo", rows, build, record_key=lambda row: row[0])

    assert result.documents == (1, 4)
    assert result.error_count == 1
    assert result.skipped_count == 1


def test_transform_rows_isolates_index_errors() -> None:
    """Positional access failures are per-record errors."""
    result = transform_rows("demo", [(), ("ok",)], lambda row: row[0], record_key=str)

    assert result.documents == ("ok",)
    assert result.error_count == 1
