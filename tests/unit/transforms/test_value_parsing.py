"""Unit tests for field conversion helpers."""

from __future__ import annotations

from decimal import Decimal

import pytest

from core.errors import MigrationTransformError
from transforms.value_parsing import (
    normalize_date,
    null_if_empty,
    nullable_decimal,
    parse_decimal,
    parse_flag,
    parse_int,
)


@pytest.mark.parametrize(
    ("raw_value", "expected"),
    [
        ("2011-05-31 00:00:00.000", "2011-05-31T00:00:00Z"),
        ("2014-02-08T10:01:36.827", "2014-02-08T10:01:36Z"),
        ("2014-02-08T12:00:00+02:00", "2014-02-08T10:00:00Z"),
        ("06/01/2008 00:00:00", "2008-06-01T00:00:00Z"),
        ("6/1/2008 1:30:00 PM", "2008-06-01T13:30:00Z"),
        ("  ", None),
        ("sometime in 2008", "sometime in 2008"),
    ],
)
def test_normalize_date(raw_value: str, expected: str | None) -> None:
    """Dates normalize to ISO UTC text; unparsable values pass through."""
    assert normalize_date(raw_value) == expected


def test_parse_decimal_defaults_empty_to_zero() -> None:
    """Non-nullable decimals treat empty text as zero."""
    assert parse_decimal("", "ListPrice") == Decimal(0)
    assert parse_decimal("3399.99", "ListPrice") == Decimal("3399.99")


def test_nullable_decimal_keeps_empty_as_none() -> None:
    """Nullable decimals keep empty text as None."""
    assert nullable_decimal(" ", "Weight") is None


def test_nullable_decimal_rejects_comma_separator() -> None:
    """Decimals use a period separator only."""
    with pytest.raises(MigrationTransformError, match="Weight"):
        nullable_decimal("20,35", "Weight")


def test_parse_int_raises_transform_error() -> None:
    """Integer failures name the offending field."""
    with pytest.raises(MigrationTransformError, match="ProductID"):
        parse_int("abc", "ProductID")


def test_flags_and_empty_text() -> None:
    """Bit columns and empty strings convert predictably."""
    assert parse_flag("1") and parse_flag("True") and not parse_flag("0")
    assert null_if_empty(" ") is None


@pytest.mark.parametrize("raw_value", ["1_000", "1e3", "NaN", "Infinity", "1.", ".5", "٣"])
def test_nullable_decimal_rejects_non_invariant_forms(raw_value: str) -> None:
    """Only plain signed digits with an optional fraction are decimals."""
    with pytest.raises(MigrationTransformError, match="ListPrice"):
        nullable_decimal(raw_value, "ListPrice")


def test_nullable_decimal_accepts_signed_values() -> None:
    """A leading sign is part of the invariant decimal form."""
    assert nullable_decimal("-12.50", "Freight") == Decimal("-12.50")
    assert nullable_decimal("+3", "Freight") == Decimal(3)
