"""Sales order document transform.

Orders embed their line items and independent bill-to/ship-to address
snapshots. Product and customer names are copied at migration time.
"""

from __future__ import annotations

from typing import Iterable, Mapping

from core.constants import SALES_ORDER_NUMBER_PREFIX, UNKNOWN_PRODUCT_NAME
from core.logging_config import get_logger
from core.types import LineItem, SalesOrderDocument
from ingest.lookup_builder import AddressLookups, OrderLookups
from ingest.source_rows import SalesOrderDetailRow, SalesOrderHeaderRow
from transforms.address_snapshots import build_address_snapshot
from transforms.transform_runner import TransformResult, transform_rows
from transforms.value_parsing import (
    normalize_date,
    null_if_empty,
    parse_decimal,
    parse_flag,
    parse_int,
)

_LOGGER = get_logger(__name__)

AGGREGATE = SalesOrderDocument.doc_type


def build_sales_order_documents(
    order_headers: Iterable[SalesOrderHeaderRow],
    orders: OrderLookups,
    product_names: Mapping[str, str],
    addresses: AddressLookups,
    customer_names: Mapping[str, str],
) -> TransformResult[SalesOrderDocument]:
    """Build sales order documents.

    Orders placed by customers outside the customer lookup (store-only
    accounts) are skipped.

    Args:
        order_headers: Sales order header rows.
        orders: Customer, detail and ship method lookups.
        product_names: ProductID to product name for line items.
        addresses: Address lookups for bill-to/ship-to snapshots.
        customer_names: CustomerID to display name.

    Returns:
        One document per order of a migrated customer.
    """
    return transform_rows(
        AGGREGATE,
        order_headers,
        lambda row: _build_document(row, orders, product_names, addresses, customer_names),
        record_key=lambda row: row.sales_order_id,
    )


def build_line_items(
    details: Iterable[SalesOrderDetailRow],
    product_names: Mapping[str, str],
) -> tuple[LineItem, ...]:
    """Build line items in source order.

    A product id missing from the product lookup gets the ``Unknown``
    placeholder name.
    """
    line_items: list[LineItem] = []
    for detail in details:
        product_name = product_names.get(detail.product_id)
        if product_name is None:
            product_name = UNKNOWN_PRODUCT_NAME
            _LOGGER.warning(
                "line_item_product_missing",
                sales_order_id=detail.sales_order_id,
                sales_order_detail_id=detail.sales_order_detail_id,
                product_id=detail.product_id,
            )
        line_items.append(
            LineItem(
                sales_order_detail_id=parse_int(
                    detail.sales_order_detail_id, "SalesOrderDetailID"
                ),
                product_id=parse_int(detail.product_id, "ProductID"),
                product_name=product_name,
                order_qty=parse_int(detail.order_qty, "OrderQty"),
                unit_price=parse_decimal(detail.unit_price, "UnitPrice"),
                unit_price_discount=parse_decimal(detail.unit_price_discount, "UnitPriceDiscount"),
                line_total=parse_decimal(detail.line_total, "LineTotal"),
            )
        )
    return tuple(line_items)


def _build_document(
    row: SalesOrderHeaderRow,
    orders: OrderLookups,
    product_names: Mapping[str, str],
    addresses: AddressLookups,
    customer_names: Mapping[str, str],
) -> SalesOrderDocument | None:
    if row.customer_id not in orders.customers:
        return None
    sales_order_id = parse_int(row.sales_order_id, "SalesOrderID")
    return SalesOrderDocument(
        id=row.sales_order_id,
        sales_order_id=sales_order_id,
        customer_id=row.customer_id,
        customer_name=customer_names.get(row.customer_id),
        revision_number=parse_int(row.revision_number, "RevisionNumber"),
        order_date=normalize_date(row.order_date),
        due_date=normalize_date(row.due_date),
        ship_date=normalize_date(row.ship_date),
        status=parse_int(row.status, "Status"),
        online_order_flag=parse_flag(row.online_order_flag),
        sales_order_number=f"{SALES_ORDER_NUMBER_PREFIX}{sales_order_id}",
        purchase_order_number=null_if_empty(row.purchase_order_number),
        account_number=null_if_empty(row.account_number),
        ship_method=orders.ship_methods.get(row.ship_method_id),
        credit_card_approval_code=null_if_empty(row.credit_card_approval_code),
        sub_total=parse_decimal(row.sub_total, "SubTotal"),
        tax_amt=parse_decimal(row.tax_amt, "TaxAmt"),
        freight=parse_decimal(row.freight, "Freight"),
        total_due=parse_decimal(row.total_due, "TotalDue"),
        comment=null_if_empty(row.comment),
        line_items=build_line_items(
            orders.order_details.get(row.sales_order_id, ()), product_names
        ),
        bill_to_address=build_address_snapshot(row.bill_to_address_id, addresses),
        ship_to_address=build_address_snapshot(row.ship_to_address_id, addresses),
        modified_date=normalize_date(row.modified_date),
    )
