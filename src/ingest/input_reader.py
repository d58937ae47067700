"""Flat-file readers for headerless table exports.

This module parses the tab and pipe export dialects into ordered row
tuples. Column meaning is left to the row parsers in ``source_rows``.
"""

from __future__ import annotations

import codecs
import re
from pathlib import Path
from typing import Literal

from core.constants import (
    PIPE_FIELD_SEPARATOR,
    PIPE_RECORD_TERMINATOR,
    TAB_FIELD_SEPARATOR,
)
from core.errors import MigrationIngestError
from core.types import SourceRow

Dialect = Literal["tab", "pipe"]

_BOM_ENCODINGS = (
    (codecs.BOM_UTF8, "utf-8-sig"),
    (codecs.BOM_UTF16_LE, "utf-16"),
    (codecs.BOM_UTF16_BE, "utf-16"),
)

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def read_source_file(file_path: Path, dialect: Dialect, encoding: str) -> list[SourceRow]:
    """Read one export file into ordered row tuples.

    Args:
        file_path: Path to the export file.
        dialect: ``tab`` or ``pipe``.
        encoding: Encoding used when the file has no byte-order mark.

    Returns:
        Rows in source order with blank lines/records skipped.

    Raises:
        MigrationIngestError: If the file is missing, undecodable, or the
            dialect is unknown.
    """
    if not file_path.is_file():
        raise MigrationIngestError(
            f"Failed to read source table at {file_path}: file does not exist. "
            "Export every required table into the source directory."
        )
    text = _read_text(file_path, encoding)
    if dialect == "tab":
        return split_tab_records(text)
    if dialect == "pipe":
        return split_pipe_records(text)
    raise MigrationIngestError(f"Unsupported source dialect '{dialect}' for {file_path}.")


def split_tab_records(text: str) -> list[SourceRow]:
    """Split tab-dialect text into rows.

    Only the line terminator is removed, so trailing empty fields survive.
    """
    rows: list[SourceRow] = []
    for line in _LINE_BREAK.split(text):
        if not line.strip():
            continue
        rows.append(tuple(line.split(TAB_FIELD_SEPARATOR)))
    return rows


def split_pipe_records(text: str) -> list[SourceRow]:
    """Split pipe-dialect text into rows.

    Records end with ``&|`` and fields are separated by ``+|``; line breaks
    around a record are not part of it.
    """
    rows: list[SourceRow] = []
    for record in text.split(PIPE_RECORD_TERMINATOR):
        record = record.strip("\r\n")
        if not record.strip():
            continue
        rows.append(tuple(record.split(PIPE_FIELD_SEPARATOR)))
    return rows


def _read_text(file_path: Path, encoding: str) -> str:
    """Decode a file, honouring a byte-order mark when present.

    Raises:
        MigrationIngestError: If the content cannot be decoded.
    """
    raw_bytes = file_path.read_bytes()
    resolved_encoding = _detect_encoding(raw_bytes, encoding)
    try:
        return raw_bytes.decode(resolved_encoding)
    except (UnicodeDecodeError, LookupError) as error:
        raise MigrationIngestError(
            f"Failed to decode {file_path} as {resolved_encoding}: {error}. "
            "Set MIGRATE_SOURCE_ENCODING to the export encoding."
        ) from error


def _detect_encoding(raw_bytes: bytes, default_encoding: str) -> str:
    """Pick a codec from the byte-order mark, else the default."""
    for bom, bom_encoding in _BOM_ENCODINGS:
        if raw_bytes.startswith(bom):
            return bom_encoding
    return default_encoding
