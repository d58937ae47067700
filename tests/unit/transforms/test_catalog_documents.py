"""Unit tests for product model and product documents."""

from __future__ import annotations

from decimal import Decimal

import pytest

from ingest.lookup_builder import Lookups, build_lookups
from ingest.source_tables import SourceTables, load_source_tables
from tests.fixture_paths import source_fixture_dir
from transforms.category_documents import build_category_documents
from transforms.product_documents import build_product_documents
from transforms.product_model_documents import build_product_model_documents


@pytest.fixture(name="tables")
def _tables() -> SourceTables:
    return load_source_tables(source_fixture_dir(), "utf-8")


@pytest.fixture(name="lookups")
def _lookups(tables: SourceTables) -> Lookups:
    return build_lookups(tables)


def test_product_models_embed_resolved_descriptions(
    tables: SourceTables,
    lookups: Lookups,
) -> None:
    """Descriptions follow junction order and skip unknown description ids."""
    result = build_product_model_documents(tables.product_models, lookups.catalog)

    mountain = result.documents[0]
    assert mountain.id == "model-5"
    assert [item.culture for item in mountain.descriptions] == ["en", "fr"]
    assert mountain.descriptions[1].description == "Vélo de montagne de compétition."
    assert result.documents[1].catalog_description is None


def test_products_denormalize_category_and_model(tables: SourceTables, lookups: Lookups) -> None:
    """Products carry category, parent and model names."""
    result = build_product_documents(tables.products, lookups.catalog, 100)

    bike = result.documents[0]
    assert bike.id == "product-771"
    assert bike.product_category_id == "category-101"
    assert bike.category_name == "Mountain Bikes"
    assert bike.parent_category_name == "Bikes"
    assert bike.product_model_id == "model-5"
    assert bike.model_name == "Mountain-100"
    assert bike.weight == Decimal("20.35")
    assert bike.list_price == Decimal("3399.99")
    assert bike.thumbnail_photo_file_name == "no_image_available_small.gif"


def test_products_without_subcategory_have_null_references(
    tables: SourceTables,
    lookups: Lookups,
) -> None:
    """Absent foreign keys resolve to null denormalized fields."""
    result = build_product_documents(tables.products, lookups.catalog, 100)

    race = result.documents[2]
    assert race.id == "product-1"
    assert race.product_category_id is None
    assert race.category_name is None
    assert race.parent_category_name is None
    assert race.product_model_id is None
    assert race.weight is None
    assert race.color is None


def test_product_category_names_match_category_documents(
    tables: SourceTables,
    lookups: Lookups,
) -> None:
    """Product category links resolve to category documents with the same name."""
    categories = build_category_documents(
        tables.categories, tables.subcategories, lookups.catalog.category_names, 100
    )
    products = build_product_documents(tables.products, lookups.catalog, 100)

    names = {document.id: document.name for document in categories.documents}
    for product in products.documents:
        if product.product_category_id is not None:
            assert names[product.product_category_id] == product.category_name
