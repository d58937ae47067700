"""Product document transform.

Products carry their category and model display names so catalog
browsing needs no joins. Category ids are re-derived with the same
offset the category transform uses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from core.constants import DEFAULT_THUMBNAIL_FILE_NAME, PRODUCT_ID_PREFIX
from core.types import ProductDocument
from ingest.lookup_builder import CatalogLookups
from ingest.source_rows import ProductRow
from transforms.category_documents import subcategory_document_id
from transforms.product_model_documents import product_model_document_id
from transforms.transform_runner import TransformResult, transform_rows
from transforms.value_parsing import (
    normalize_date,
    null_if_empty,
    nullable_decimal,
    parse_decimal,
    parse_int,
)

AGGREGATE = ProductDocument.doc_type


@dataclass(frozen=True)
class CategoryReference:
    """Denormalized category fields for one product."""

    document_id: str | None = None
    name: str | None = None
    parent_name: str | None = None


@dataclass(frozen=True)
class ModelReference:
    """Denormalized model fields for one product."""

    document_id: str | None = None
    name: str | None = None


def build_product_documents(
    products: Iterable[ProductRow],
    catalog: CatalogLookups,
    offset: int,
) -> TransformResult[ProductDocument]:
    """Build product documents with denormalized category and model names.

    Args:
        products: Product rows.
        catalog: Catalog lookups.
        offset: Subcategory id offset shared with the category transform.

    Returns:
        One document per product row.
    """
    return transform_rows(
        AGGREGATE,
        products,
        lambda row: _build_document(row, catalog, offset),
        record_key=lambda row: row.product_id,
    )


def resolve_category(
    subcategory_id: str,
    catalog: CatalogLookups,
    offset: int,
) -> CategoryReference:
    """Resolve a product's subcategory; absent or unknown ids resolve to nulls."""
    if not subcategory_id:
        return CategoryReference()
    subcategory = catalog.subcategories.get(subcategory_id)
    if subcategory is None:
        return CategoryReference()
    return CategoryReference(
        document_id=subcategory_document_id(subcategory.subcategory_id, offset),
        name=subcategory.name,
        parent_name=catalog.category_names.get(subcategory.category_id),
    )


def resolve_model(product_model_id: str, catalog: CatalogLookups) -> ModelReference:
    """Resolve a product's model; absent or unknown ids resolve to nulls."""
    if not product_model_id:
        return ModelReference()
    model = catalog.product_models.get(product_model_id)
    if model is None:
        return ModelReference()
    return ModelReference(document_id=product_model_document_id(product_model_id), name=model.name)


def _build_document(row: ProductRow, catalog: CatalogLookups, offset: int) -> ProductDocument:
    product_id = parse_int(row.product_id, "ProductID")
    category = resolve_category(row.subcategory_id, catalog, offset)
    model = resolve_model(row.product_model_id, catalog)
    return ProductDocument(
        id=f"{PRODUCT_ID_PREFIX}{product_id}",
        product_id=product_id,
        name=row.name,
        product_number=row.product_number,
        color=null_if_empty(row.color),
        standard_cost=parse_decimal(row.standard_cost, "StandardCost"),
        list_price=parse_decimal(row.list_price, "ListPrice"),
        size=null_if_empty(row.size),
        weight=nullable_decimal(row.weight, "Weight"),
        product_category_id=category.document_id,
        category_name=category.name,
        parent_category_name=category.parent_name,
        product_model_id=model.document_id,
        model_name=model.name,
        sell_start_date=normalize_date(row.sell_start_date),
        sell_end_date=normalize_date(row.sell_end_date),
        discontinued_date=normalize_date(row.discontinued_date),
        thumbnail_photo_file_name=DEFAULT_THUMBNAIL_FILE_NAME,
        modified_date=normalize_date(row.modified_date),
    )
