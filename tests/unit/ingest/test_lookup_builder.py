"""Unit tests for lookup construction."""

from __future__ import annotations

from operator import itemgetter

import pytest

from ingest.lookup_builder import Lookups, build_lookups, group_by, index_first, index_last
from ingest.source_tables import load_source_tables
from tests.fixture_paths import source_fixture_dir


@pytest.fixture(name="lookups")
def _lookups() -> Lookups:
    return build_lookups(load_source_tables(source_fixture_dir(), "utf-8"))


def test_index_last_keeps_last_duplicate() -> None:
    """One-to-one maps default to last-write-wins."""
    rows = [("1", "a"), ("1", "b")]

    index = index_last(rows, itemgetter(0), itemgetter(1))

    assert index["1"] == "b"


def test_index_first_keeps_first_duplicate() -> None:
    """Append-only sources keep the first value."""
    rows = [("1", "a"), ("1", "b")]

    index = index_first(rows, itemgetter(0), itemgetter(1))

    assert index["1"] == "a"


def test_group_by_preserves_child_order() -> None:
    """Grouped maps keep child rows in source order."""
    rows = [("5", "en"), ("6", "fr"), ("5", "fr")]

    grouped = group_by(rows, itemgetter(0))

    assert grouped["5"] == (("5", "en"), ("5", "fr"))


def test_customer_lookup_drops_rows_without_person(lookups: Lookups) -> None:
    """Store-only customers are filtered out of the customer lookup."""
    assert set(lookups.orders.customers) == {"29485", "29486", "29487"}


def test_person_lookups_are_first_write_wins(lookups: Lookups) -> None:
    """Email and phone keep the first value per person."""
    assert lookups.people.emails["1"] == "catherine0@adventure-works.com"
    assert lookups.people.phones["1"] == "747-555-0171"


def test_lookups_are_read_only(lookups: Lookups) -> None:
    """Transforms cannot mutate shared join state."""
    with pytest.raises(TypeError):
        lookups.catalog.category_names["9"] = "Clothing"  # type: ignore[index]
