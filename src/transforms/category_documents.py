"""Category document transform.

Top-level categories and subcategories share one id space in the source,
so subcategory documents are keyed by ``source id + offset``. The product
transform derives the same id through ``subcategory_document_id``.
"""

from __future__ import annotations

from typing import Iterable, Mapping

from core.constants import CATEGORY_ID_PREFIX
from core.errors import MigrationConfigError
from core.types import CategoryDocument
from ingest.source_rows import CategoryRow, SubcategoryRow
from transforms.transform_runner import TransformResult, transform_rows
from transforms.value_parsing import normalize_date, parse_int

AGGREGATE = CategoryDocument.doc_type


def validate_subcategory_offset(categories: Iterable[CategoryRow], offset: int) -> None:
    """Fail unless the offset lies above every top-level category id.

    Args:
        categories: Top-level category rows.
        offset: Configured subcategory id offset.

    Raises:
        MigrationConfigError: If an offset subcategory id could collide.
    """
    numeric_ids = [int(row.category_id) for row in categories if row.category_id.isdigit()]
    if not numeric_ids:
        return
    max_category_id = max(numeric_ids)
    if offset <= max_category_id:
        raise MigrationConfigError(
            f"Subcategory id offset {offset} must exceed the largest top-level "
            f"category id {max_category_id}. Raise MIGRATE_SUBCATEGORY_OFFSET."
        )


def subcategory_category_id(subcategory_id: str, offset: int) -> int:
    """Return the numeric category id assigned to a subcategory."""
    return parse_int(subcategory_id, "ProductSubcategoryID") + offset


def subcategory_document_id(subcategory_id: str, offset: int) -> str:
    """Return the category document id assigned to a subcategory."""
    return category_document_id(subcategory_category_id(subcategory_id, offset))


def category_document_id(category_id: int) -> str:
    return f"{CATEGORY_ID_PREFIX}{category_id}"


def build_category_documents(
    categories: Iterable[CategoryRow],
    subcategories: Iterable[SubcategoryRow],
    category_names: Mapping[str, str],
    offset: int,
) -> TransformResult[CategoryDocument]:
    """Build top-level and subcategory documents.

    Args:
        categories: Top-level category rows.
        subcategories: Subcategory rows.
        category_names: Top-level category id to name.
        offset: Subcategory id offset.

    Returns:
        Top-level documents followed by subcategory documents.
    """
    top_level = transform_rows(
        AGGREGATE,
        categories,
        _build_top_level_document,
        record_key=lambda row: row.category_id,
    )
    nested = transform_rows(
        AGGREGATE,
        subcategories,
        lambda row: _build_subcategory_document(row, category_names, offset),
        record_key=lambda row: row.subcategory_id,
    )
    return TransformResult(
        aggregate=AGGREGATE,
        documents=top_level.documents + nested.documents,
        error_count=top_level.error_count + nested.error_count,
        skipped_count=top_level.skipped_count + nested.skipped_count,
    )


def _build_top_level_document(row: CategoryRow) -> CategoryDocument:
    category_id = parse_int(row.category_id, "ProductCategoryID")
    return CategoryDocument(
        id=category_document_id(category_id),
        product_category_id=category_id,
        parent_product_category_id=None,
        parent_category_name=None,
        name=row.name,
        modified_date=normalize_date(row.modified_date),
    )


def _build_subcategory_document(
    row: SubcategoryRow,
    category_names: Mapping[str, str],
    offset: int,
) -> CategoryDocument:
    category_id = subcategory_category_id(row.subcategory_id, offset)
    return CategoryDocument(
        id=category_document_id(category_id),
        product_category_id=category_id,
        parent_product_category_id=parse_int(row.category_id, "ProductCategoryID"),
        parent_category_name=category_names.get(row.category_id),
        name=row.name,
        modified_date=normalize_date(row.modified_date),
    )
