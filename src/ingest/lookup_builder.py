"""In-memory join indexes over parsed source tables.

This module builds every keyed lookup the transforms need, once, before
any transform starts. Maps are read-only views so transforms cannot
mutate shared join state.
"""

from __future__ import annotations

from dataclasses import dataclass
from operator import attrgetter
from types import MappingProxyType
from typing import Callable, Iterable, Mapping, TypeVar

from core.logging_config import get_logger
from ingest.source_rows import (
    AddressRow,
    BusinessEntityAddressRow,
    CustomerRow,
    ModelDescriptionCultureRow,
    PasswordRow,
    PersonRow,
    ProductModelRow,
    SalesOrderDetailRow,
    StateProvinceRow,
    SubcategoryRow,
)
from ingest.source_tables import SourceTables

_LOGGER = get_logger(__name__)

RowT = TypeVar("RowT")
ValueT = TypeVar("ValueT")


@dataclass(frozen=True)
class CatalogLookups:
    """Catalog joins keyed by source ids.

    Attributes:
        category_names: ProductCategoryID to name.
        subcategories: ProductSubcategoryID to subcategory row.
        descriptions: ProductDescriptionID to description text.
        model_cultures: ProductModelID to its culture/description junction rows.
        product_models: ProductModelID to model row.
        product_names: ProductID to product name.
    """

    category_names: Mapping[str, str]
    subcategories: Mapping[str, SubcategoryRow]
    descriptions: Mapping[str, str]
    model_cultures: Mapping[str, tuple[ModelDescriptionCultureRow, ...]]
    product_models: Mapping[str, ProductModelRow]
    product_names: Mapping[str, str]


@dataclass(frozen=True)
class AddressLookups:
    """Address joins used by customer and order snapshots.

    Attributes:
        addresses: AddressID to address row.
        state_provinces: StateProvinceID to state/province row.
        country_regions: CountryRegionCode to country name.
        address_types: AddressTypeID to type name.
        entity_addresses: BusinessEntityID to its address links.
    """

    addresses: Mapping[str, AddressRow]
    state_provinces: Mapping[str, StateProvinceRow]
    country_regions: Mapping[str, str]
    address_types: Mapping[str, str]
    entity_addresses: Mapping[str, tuple[BusinessEntityAddressRow, ...]]


@dataclass(frozen=True)
class PersonLookups:
    """Person attributes keyed by BusinessEntityID."""

    persons: Mapping[str, PersonRow]
    emails: Mapping[str, str]
    passwords: Mapping[str, PasswordRow]
    phones: Mapping[str, str]


@dataclass(frozen=True)
class OrderLookups:
    """Order joins.

    Attributes:
        customers: CustomerID to customer row, person-backed customers only.
        order_details: SalesOrderID to its detail rows in source order.
        ship_methods: ShipMethodID to ship method name.
    """

    customers: Mapping[str, CustomerRow]
    order_details: Mapping[str, tuple[SalesOrderDetailRow, ...]]
    ship_methods: Mapping[str, str]


@dataclass(frozen=True)
class Lookups:
    """All join indexes for one migration run."""

    catalog: CatalogLookups
    addresses: AddressLookups
    people: PersonLookups
    orders: OrderLookups


def build_lookups(tables: SourceTables) -> Lookups:
    """Build every lookup from parsed tables.

    Args:
        tables: Parsed source tables.

    Returns:
        Fully populated, read-only lookups.
    """
    catalog = CatalogLookups(
        category_names=index_last(
            tables.categories, attrgetter("category_id"), attrgetter("name")
        ),
        subcategories=index_last(tables.subcategories, attrgetter("subcategory_id")),
        descriptions=index_last(
            tables.descriptions, attrgetter("description_id"), attrgetter("description")
        ),
        model_cultures=group_by(tables.model_cultures, attrgetter("product_model_id")),
        product_models=index_last(tables.product_models, attrgetter("product_model_id")),
        product_names=index_last(tables.products, attrgetter("product_id"), attrgetter("name")),
    )
    addresses = AddressLookups(
        addresses=index_last(tables.addresses, attrgetter("address_id")),
        state_provinces=index_last(tables.state_provinces, attrgetter("state_province_id")),
        country_regions=index_first(
            tables.country_regions, attrgetter("country_region_code"), attrgetter("name")
        ),
        address_types=index_last(
            tables.address_types, attrgetter("address_type_id"), attrgetter("name")
        ),
        entity_addresses=group_by(tables.entity_addresses, attrgetter("business_entity_id")),
    )
    people = PersonLookups(
        persons=index_last(tables.persons, attrgetter("business_entity_id")),
        emails=index_first(
            tables.email_addresses, attrgetter("business_entity_id"), attrgetter("email_address")
        ),
        passwords=index_last(tables.passwords, attrgetter("business_entity_id")),
        phones=index_first(
            tables.person_phones, attrgetter("business_entity_id"), attrgetter("phone_number")
        ),
    )
    orders = OrderLookups(
        customers=index_last(
            (row for row in tables.customers if row.person_id),
            attrgetter("customer_id"),
        ),
        order_details=group_by(tables.order_details, attrgetter("sales_order_id")),
        ship_methods=index_last(
            tables.ship_methods, attrgetter("ship_method_id"), attrgetter("name")
        ),
    )
    lookups = Lookups(catalog=catalog, addresses=addresses, people=people, orders=orders)
    _log_lookup_sizes(lookups)
    return lookups


def index_last(
    rows: Iterable[RowT],
    key_of: Callable[[RowT], str],
    value_of: Callable[[RowT], ValueT] | None = None,
) -> Mapping[str, ValueT]:
    """Build a 1:1 map where a repeated key keeps the last row."""
    index: dict[str, object] = {}
    for row in rows:
        index[key_of(row)] = value_of(row) if value_of else row
    return MappingProxyType(index)  # type: ignore[return-value]


def index_first(
    rows: Iterable[RowT],
    key_of: Callable[[RowT], str],
    value_of: Callable[[RowT], ValueT] | None = None,
) -> Mapping[str, ValueT]:
    """Build a 1:1 map where a repeated key keeps the first row."""
    index: dict[str, object] = {}
    for row in rows:
        key = key_of(row)
        if key not in index:
            index[key] = value_of(row) if value_of else row
    return MappingProxyType(index)  # type: ignore[return-value]


def group_by(
    rows: Iterable[RowT],
    key_of: Callable[[RowT], str],
) -> Mapping[str, tuple[RowT, ...]]:
    """Build a 1:many map preserving source order within each group."""
    groups: dict[str, list[RowT]] = {}
    for row in rows:
        groups.setdefault(key_of(row), []).append(row)
    return MappingProxyType({key: tuple(members) for key, members in groups.items()})


def _log_lookup_sizes(lookups: Lookups) -> None:
    _LOGGER.info(
        "lookups_built",
        categories=len(lookups.catalog.category_names),
        subcategories=len(lookups.catalog.subcategories),
        product_models=len(lookups.catalog.product_models),
        products=len(lookups.catalog.product_names),
        addresses=len(lookups.addresses.addresses),
        state_provinces=len(lookups.addresses.state_provinces),
        country_regions=len(lookups.addresses.country_regions),
        ship_methods=len(lookups.orders.ship_methods),
        customers_with_person=len(lookups.orders.customers),
        order_detail_groups=len(lookups.orders.order_details),
    )
