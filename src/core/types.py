"""Shared typed models.

This module defines the immutable aggregate documents written to the
destination. Each document type carries its discriminator as ``doc_type``
so multiple aggregates can share one partitioned container.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import ClassVar, Union

SourceRow = tuple[str, ...]


@dataclass(frozen=True)
class CategoryDocument:
    """Top-level category or offset subcategory.

    Attributes:
        id: Document id, ``category-{n}``.
        product_category_id: Numeric category id (offset for subcategories).
        parent_product_category_id: Parent category id, None at top level.
        parent_category_name: Denormalized parent name.
        name: Category display name.
        modified_date: ISO-8601 UTC timestamp text.
    """

    doc_type: ClassVar[str] = "productCategory"

    id: str
    product_category_id: int
    parent_product_category_id: int | None
    parent_category_name: str | None
    name: str
    modified_date: str | None


@dataclass(frozen=True)
class CultureDescription:
    """One localized product model description."""

    culture: str
    description: str


@dataclass(frozen=True)
class ProductModelDocument:
    """Product model with embedded localized descriptions."""

    doc_type: ClassVar[str] = "productModel"

    id: str
    product_model_id: int
    name: str
    catalog_description: str | None
    descriptions: tuple[CultureDescription, ...]
    modified_date: str | None


@dataclass(frozen=True)
class ProductDocument:
    """Catalog product with denormalized category and model names."""

    doc_type: ClassVar[str] = "product"

    id: str
    product_id: int
    name: str
    product_number: str
    color: str | None
    standard_cost: Decimal
    list_price: Decimal
    size: str | None
    weight: Decimal | None
    product_category_id: str | None
    category_name: str | None
    parent_category_name: str | None
    product_model_id: str | None
    model_name: str | None
    sell_start_date: str | None
    sell_end_date: str | None
    discontinued_date: str | None
    thumbnail_photo_file_name: str
    modified_date: str | None


@dataclass(frozen=True)
class AddressSnapshot:
    """Address fields frozen at migration time."""

    address_line1: str
    address_line2: str | None
    city: str
    state_province: str | None
    country_region: str | None
    postal_code: str


@dataclass(frozen=True)
class CustomerAddress:
    """Customer address snapshot labelled with its address type."""

    address_type: str
    address_line1: str
    address_line2: str | None
    city: str
    state_province: str | None
    country_region: str | None
    postal_code: str


@dataclass(frozen=True)
class CustomerDocument:
    """Customer merged from person, contact, credential and address tables.

    The document id doubles as the partition key (``customer_id``).
    """

    doc_type: ClassVar[str] = "customer"

    id: str
    customer_id: str
    name_style: bool
    title: str | None
    first_name: str
    middle_name: str | None
    last_name: str
    suffix: str | None
    company_name: str | None
    sales_person: str | None
    email_address: str | None
    phone: str | None
    password_hash: str | None
    password_salt: str | None
    addresses: tuple[CustomerAddress, ...]
    modified_date: str | None


@dataclass(frozen=True)
class LineItem:
    """Sales order line with the product name captured at migration time."""

    sales_order_detail_id: int
    product_id: int
    product_name: str
    order_qty: int
    unit_price: Decimal
    unit_price_discount: Decimal
    line_total: Decimal


@dataclass(frozen=True)
class SalesOrderDocument:
    """Sales order partitioned by its customer id."""

    doc_type: ClassVar[str] = "salesOrder"

    id: str
    sales_order_id: int
    customer_id: str
    customer_name: str | None
    revision_number: int
    order_date: str | None
    due_date: str | None
    ship_date: str | None
    status: int
    online_order_flag: bool
    sales_order_number: str
    purchase_order_number: str | None
    account_number: str | None
    ship_method: str | None
    credit_card_approval_code: str | None
    sub_total: Decimal
    tax_amt: Decimal
    freight: Decimal
    total_due: Decimal
    comment: str | None
    line_items: tuple[LineItem, ...]
    bill_to_address: AddressSnapshot | None
    ship_to_address: AddressSnapshot | None
    modified_date: str | None


AggregateDocument = Union[
    CategoryDocument,
    ProductModelDocument,
    ProductDocument,
    CustomerDocument,
    SalesOrderDocument,
]
