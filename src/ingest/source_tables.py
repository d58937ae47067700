"""Source table registry and loader.

This module maps every exported table to its file, dialect and row
struct, reads the whole export directory, and returns typed tables.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

from core.logging_config import get_logger
from core.types import SourceRow
from ingest.input_reader import Dialect, read_source_file
from ingest.source_rows import (
    AddressRow,
    AddressTypeRow,
    BusinessEntityAddressRow,
    CategoryRow,
    CountryRegionRow,
    CustomerRow,
    EmailAddressRow,
    ModelDescriptionCultureRow,
    PasswordRow,
    PersonPhoneRow,
    PersonRow,
    ProductDescriptionRow,
    ProductModelRow,
    ProductRow,
    SalesOrderDetailRow,
    SalesOrderHeaderRow,
    ShipMethodRow,
    StateProvinceRow,
    SubcategoryRow,
    parse_source_rows,
)

_LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class SourceTableSpec:
    """Where a table lives and how to parse it.

    Attributes:
        table: Source table name.
        attribute: Field name on ``SourceTables``.
        dialect: Flat-file dialect.
        parser: Row struct constructor.
        required: Whether a missing file aborts the run.
    """

    table: str
    attribute: str
    dialect: Dialect
    parser: Callable[[SourceRow], Any]
    required: bool = True

    @property
    def file_name(self) -> str:
        return f"{self.table}.csv"


SOURCE_TABLE_SPECS: tuple[SourceTableSpec, ...] = (
    SourceTableSpec("ProductCategory", "categories", "tab", CategoryRow.from_row),
    SourceTableSpec("ProductSubcategory", "subcategories", "tab", SubcategoryRow.from_row),
    SourceTableSpec("Product", "products", "tab", ProductRow.from_row),
    SourceTableSpec("ProductDescription", "descriptions", "tab", ProductDescriptionRow.from_row),
    SourceTableSpec(
        "ProductModelProductDescriptionCulture",
        "model_cultures",
        "tab",
        ModelDescriptionCultureRow.from_row,
    ),
    SourceTableSpec("Customer", "customers", "tab", CustomerRow.from_row),
    SourceTableSpec("Address", "addresses", "tab", AddressRow.from_row),
    SourceTableSpec("SalesOrderHeader", "order_headers", "tab", SalesOrderHeaderRow.from_row),
    SourceTableSpec("SalesOrderDetail", "order_details", "tab", SalesOrderDetailRow.from_row),
    SourceTableSpec("ShipMethod", "ship_methods", "tab", ShipMethodRow.from_row),
    SourceTableSpec("StateProvince", "state_provinces", "tab", StateProvinceRow.from_row),
    SourceTableSpec(
        "CountryRegion", "country_regions", "tab", CountryRegionRow.from_row, required=False
    ),
    SourceTableSpec("AddressType", "address_types", "tab", AddressTypeRow.from_row),
    SourceTableSpec("ProductModel", "product_models", "pipe", ProductModelRow.from_row),
    SourceTableSpec("Person", "persons", "pipe", PersonRow.from_row),
    SourceTableSpec("EmailAddress", "email_addresses", "pipe", EmailAddressRow.from_row),
    SourceTableSpec("Password", "passwords", "pipe", PasswordRow.from_row),
    SourceTableSpec("PersonPhone", "person_phones", "pipe", PersonPhoneRow.from_row),
    SourceTableSpec(
        "BusinessEntityAddress",
        "entity_addresses",
        "pipe",
        BusinessEntityAddressRow.from_row,
    ),
)


@dataclass(frozen=True)
class SourceTableStats:
    """Row counts for one table."""

    table: str
    rows_read: int
    rows_rejected: int


@dataclass(frozen=True)
class SourceTables:
    """Every source table parsed into named-field structs."""

    categories: tuple[CategoryRow, ...] = ()
    subcategories: tuple[SubcategoryRow, ...] = ()
    products: tuple[ProductRow, ...] = ()
    descriptions: tuple[ProductDescriptionRow, ...] = ()
    model_cultures: tuple[ModelDescriptionCultureRow, ...] = ()
    product_models: tuple[ProductModelRow, ...] = ()
    customers: tuple[CustomerRow, ...] = ()
    persons: tuple[PersonRow, ...] = ()
    email_addresses: tuple[EmailAddressRow, ...] = ()
    passwords: tuple[PasswordRow, ...] = ()
    person_phones: tuple[PersonPhoneRow, ...] = ()
    entity_addresses: tuple[BusinessEntityAddressRow, ...] = ()
    address_types: tuple[AddressTypeRow, ...] = ()
    addresses: tuple[AddressRow, ...] = ()
    state_provinces: tuple[StateProvinceRow, ...] = ()
    country_regions: tuple[CountryRegionRow, ...] = ()
    order_headers: tuple[SalesOrderHeaderRow, ...] = ()
    order_details: tuple[SalesOrderDetailRow, ...] = ()
    ship_methods: tuple[ShipMethodRow, ...] = ()
    stats: tuple[SourceTableStats, ...] = field(default=())


def load_source_tables(source_dir: Path, encoding: str) -> SourceTables:
    """Read and parse every registered table from the export directory.

    Args:
        source_dir: Directory holding one file per table.
        encoding: Encoding used when a file has no byte-order mark.

    Returns:
        Parsed tables with per-table row statistics.

    Raises:
        MigrationIngestError: If a required file is missing or unreadable.
    """
    parsed_tables: dict[str, tuple[Any, ...]] = {}
    stats: list[SourceTableStats] = []
    for spec in SOURCE_TABLE_SPECS:
        file_path = source_dir / spec.file_name
        if not spec.required and not file_path.is_file():
            _LOGGER.warning("source_table_missing", table=spec.table, path=str(file_path))
            continue
        rows = read_source_file(file_path, spec.dialect, encoding)
        parsed, rejected = parse_source_rows(spec.table, rows, spec.parser)
        parsed_tables[spec.attribute] = tuple(parsed)
        stats.append(
            SourceTableStats(table=spec.table, rows_read=len(rows), rows_rejected=rejected)
        )
        _LOGGER.info(
            "source_table_read",
            table=spec.table,
            dialect=spec.dialect,
            rows_read=len(rows),
            rows_rejected=rejected,
        )
    return SourceTables(**parsed_tables, stats=tuple(stats))
