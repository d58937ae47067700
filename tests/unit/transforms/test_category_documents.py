"""Unit tests for category documents."""

from __future__ import annotations

import pytest

from core.errors import MigrationConfigError
from ingest.source_rows import CategoryRow, SubcategoryRow
from transforms.category_documents import (
    build_category_documents,
    subcategory_document_id,
    validate_subcategory_offset,
)

_CATEGORIES = (
    CategoryRow(category_id="1", name="Bikes", modified_date="2008-06-01 00:00:00"),
    CategoryRow(category_id="4", name="Accessories", modified_date="2008-06-01 00:00:00"),
)
_SUBCATEGORIES = (
    SubcategoryRow(
        subcategory_id="1",
        category_id="1",
        name="Mountain Bikes",
        modified_date="2008-06-01 00:00:00",
    ),
)


def test_build_category_documents_offsets_subcategories() -> None:
    """Subcategory ids are offset and carry the parent name."""
    result = build_category_documents(_CATEGORIES, _SUBCATEGORIES, {"1": "Bikes"}, 100)

    by_id = {document.id: document for document in result.documents}
    assert list(by_id) == ["category-1", "category-4", "category-101"]
    assert by_id["category-1"].parent_product_category_id is None
    assert by_id["category-1"].parent_category_name is None
    assert by_id["category-101"].product_category_id == 101
    assert by_id["category-101"].parent_product_category_id == 1
    assert by_id["category-101"].parent_category_name == "Bikes"
    assert by_id["category-101"].modified_date == "2008-06-01T00:00:00Z"


def test_subcategory_ids_never_collide_with_top_level_ids() -> None:
    """Derived subcategory ids stay clear of top-level ids."""
    subcategories = [
        SubcategoryRow(subcategory_id=str(n), category_id="1", name=f"s{n}", modified_date="")
        for n in range(1, 38)
    ]

    result = build_category_documents(_CATEGORIES, subcategories, {"1": "Bikes"}, 100)

    top_level = {document.id for document in result.documents[:2]}
    nested = {document.id for document in result.documents[2:]}
    assert top_level.isdisjoint(nested)
    assert subcategory_document_id("37", 100) == "category-137"


def test_validate_subcategory_offset_rejects_collisions() -> None:
    """The offset must exceed the largest top-level id."""
    with pytest.raises(MigrationConfigError, match="MIGRATE_SUBCATEGORY_OFFSET"):
        validate_subcategory_offset(_CATEGORIES, 4)

    validate_subcategory_offset(_CATEGORIES, 5)


def test_build_category_documents_counts_bad_subcategory() -> None:
    """A non-numeric subcategory id is a per-record error."""
    bad = SubcategoryRow(subcategory_id="x", category_id="1", name="Bad", modified_date="")

    result = build_category_documents(_CATEGORIES, (bad,), {"1": "Bikes"}, 100)

    assert len(result.documents) == 2
    assert result.error_count == 1
