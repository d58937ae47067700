"""Field conversion helpers for document transforms.

This module centralizes text-to-value conversion so every aggregate
applies the same null, decimal and date policies.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from decimal import Decimal

from core.constants import ISO_UTC_FORMAT
from core.errors import MigrationTransformError

_FALLBACK_DATE_FORMATS = (
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %I:%M:%S %p",
    "%m/%d/%Y",
)

_DECIMAL_PATTERN = re.compile(r"[+-]?\d+(\.\d+)?", re.ASCII)


def null_if_empty(value: str) -> str | None:
    """Return trimmed text, or None when it is empty."""
    stripped = value.strip()
    return stripped if stripped else None


def parse_int(value: str, field_name: str) -> int:
    """Parse a required integer field."""
    try:
        return int(value.strip())
    except ValueError as error:
        raise MigrationTransformError(
            f"Field '{field_name}' must be an integer, got '{value}'."
        ) from error


def parse_decimal(value: str, field_name: str) -> Decimal:
    """Parse a non-nullable decimal field; empty text is zero."""
    parsed = nullable_decimal(value, field_name)
    return Decimal(0) if parsed is None else parsed


def nullable_decimal(value: str, field_name: str) -> Decimal | None:
    """Parse a nullable decimal field with a period decimal separator."""
    stripped = value.strip()
    if not stripped:
        return None
    if _DECIMAL_PATTERN.fullmatch(stripped) is None:
        raise MigrationTransformError(
            f"Field '{field_name}' must be a decimal, got '{value}'."
        )
    return Decimal(stripped)


def parse_flag(value: str) -> bool:
    """Interpret a bit column; ``1`` and ``true`` are set."""
    return value.strip().lower() in ("1", "true")


def normalize_date(value: str) -> str | None:
    """Normalize a timestamp to ISO-8601 UTC text.

    Empty values become None. Values that no known format accepts are
    returned unchanged rather than failing the document.

    Args:
        value: Raw timestamp text from the export.

    Returns:
        ``YYYY-MM-DDTHH:MM:SSZ`` text, the raw text, or None.
    """
    stripped = value.strip()
    if not stripped:
        return None
    parsed = _parse_datetime(stripped)
    if parsed is None:
        return stripped
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.strftime(ISO_UTC_FORMAT)


def _parse_datetime(value: str) -> datetime | None:
    """Try ISO-8601 first, then the invariant-culture export formats."""
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        pass
    for date_format in _FALLBACK_DATE_FORMATS:
        try:
            return datetime.strptime(value, date_format)
        except ValueError:
            continue
    return None
