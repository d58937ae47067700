"""Product model document transform.

Each model embeds its localized descriptions, resolved through the
model/culture junction and then the description table.
"""

from __future__ import annotations

from typing import Iterable, Mapping

from core.constants import PRODUCT_MODEL_ID_PREFIX
from core.types import CultureDescription, ProductModelDocument
from ingest.lookup_builder import CatalogLookups
from ingest.source_rows import ModelDescriptionCultureRow, ProductModelRow
from transforms.transform_runner import TransformResult, transform_rows
from transforms.value_parsing import normalize_date, null_if_empty, parse_int

AGGREGATE = ProductModelDocument.doc_type


def product_model_document_id(product_model_id: str) -> str:
    return f"{PRODUCT_MODEL_ID_PREFIX}{product_model_id}"


def build_product_model_documents(
    product_models: Iterable[ProductModelRow],
    catalog: CatalogLookups,
) -> TransformResult[ProductModelDocument]:
    """Build product model documents with embedded descriptions.

    Args:
        product_models: Product model rows.
        catalog: Catalog lookups providing junction rows and description text.

    Returns:
        One document per model row.
    """
    return transform_rows(
        AGGREGATE,
        product_models,
        lambda row: _build_document(row, catalog),
        record_key=lambda row: row.product_model_id,
    )


def resolve_descriptions(
    junction_rows: Iterable[ModelDescriptionCultureRow],
    descriptions: Mapping[str, str],
) -> tuple[CultureDescription, ...]:
    """Resolve junction rows to (culture, text) pairs in source order.

    Junction rows pointing at an unknown description are dropped.
    """
    resolved: list[CultureDescription] = []
    for junction in junction_rows:
        text = descriptions.get(junction.description_id)
        if text is None:
            continue
        resolved.append(CultureDescription(culture=junction.culture_id, description=text))
    return tuple(resolved)


def _build_document(row: ProductModelRow, catalog: CatalogLookups) -> ProductModelDocument:
    return ProductModelDocument(
        id=product_model_document_id(row.product_model_id),
        product_model_id=parse_int(row.product_model_id, "ProductModelID"),
        name=row.name,
        catalog_description=null_if_empty(row.catalog_description),
        descriptions=resolve_descriptions(
            catalog.model_cultures.get(row.product_model_id, ()),
            catalog.descriptions,
        ),
        modified_date=normalize_date(row.modified_date),
    )
