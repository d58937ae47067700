"""Named-field structs for each exported source table.

Each struct documents the positional column contract of its export file
and parses a raw row into trimmed text fields. Values stay text here;
numeric and date conversion belongs to the transforms.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, TypeVar

from core.errors import SourceRowError
from core.logging_config import get_logger
from core.types import SourceRow

_LOGGER = get_logger(__name__)

RowT = TypeVar("RowT")


def _columns(row: SourceRow, table: str, expected: int) -> tuple[str, ...]:
    """Validate column count and return trimmed values.

    Raises:
        SourceRowError: If fewer columns than the contract requires are present.
    """
    if len(row) < expected:
        raise SourceRowError(
            f"{table} row has {len(row)} columns, expected at least {expected}."
        )
    return tuple(value.strip() for value in row)


@dataclass(frozen=True)
class CategoryRow:
    """ProductCategoryID(0), Name(1), rowguid(2), ModifiedDate(3)."""

    category_id: str
    name: str
    modified_date: str

    @classmethod
    def from_row(cls, row: SourceRow) -> "CategoryRow":
        values = _columns(row, "ProductCategory", 4)
        return cls(category_id=values[0], name=values[1], modified_date=values[3])


@dataclass(frozen=True)
class SubcategoryRow:
    """ProductSubcategoryID(0), ProductCategoryID(1), Name(2), rowguid(3), ModifiedDate(4)."""

    subcategory_id: str
    category_id: str
    name: str
    modified_date: str

    @classmethod
    def from_row(cls, row: SourceRow) -> "SubcategoryRow":
        values = _columns(row, "ProductSubcategory", 5)
        return cls(
            subcategory_id=values[0],
            category_id=values[1],
            name=values[2],
            modified_date=values[4],
        )


@dataclass(frozen=True)
class ProductDescriptionRow:
    """ProductDescriptionID(0), Description(1), rowguid(2), ModifiedDate(3)."""

    description_id: str
    description: str

    @classmethod
    def from_row(cls, row: SourceRow) -> "ProductDescriptionRow":
        values = _columns(row, "ProductDescription", 4)
        return cls(description_id=values[0], description=values[1])


@dataclass(frozen=True)
class ModelDescriptionCultureRow:
    """ProductModelID(0), ProductDescriptionID(1), CultureID(2), ModifiedDate(3)."""

    product_model_id: str
    description_id: str
    culture_id: str

    @classmethod
    def from_row(cls, row: SourceRow) -> "ModelDescriptionCultureRow":
        values = _columns(row, "ProductModelProductDescriptionCulture", 4)
        return cls(product_model_id=values[0], description_id=values[1], culture_id=values[2])


@dataclass(frozen=True)
class ProductModelRow:
    """ProductModelID(0), Name(1), CatalogDescription(2), Instructions(3),
    rowguid(4), ModifiedDate(5)."""

    product_model_id: str
    name: str
    catalog_description: str
    modified_date: str

    @classmethod
    def from_row(cls, row: SourceRow) -> "ProductModelRow":
        values = _columns(row, "ProductModel", 6)
        return cls(
            product_model_id=values[0],
            name=values[1],
            catalog_description=values[2],
            modified_date=values[5],
        )


@dataclass(frozen=True)
class ProductRow:
    """Product export, 25 columns.

    ProductID(0), Name(1), ProductNumber(2), MakeFlag(3), FinishedGoodsFlag(4),
    Color(5), SafetyStockLevel(6), ReorderPoint(7), StandardCost(8), ListPrice(9),
    Size(10), SizeUnitMeasureCode(11), WeightUnitMeasureCode(12), Weight(13),
    DaysToManufacture(14), ProductLine(15), Class(16), Style(17),
    ProductSubcategoryID(18), ProductModelID(19), SellStartDate(20),
    SellEndDate(21), DiscontinuedDate(22), rowguid(23), ModifiedDate(24).
    """

    product_id: str
    name: str
    product_number: str
    color: str
    standard_cost: str
    list_price: str
    size: str
    weight: str
    subcategory_id: str
    product_model_id: str
    sell_start_date: str
    sell_end_date: str
    discontinued_date: str
    modified_date: str

    @classmethod
    def from_row(cls, row: SourceRow) -> "ProductRow":
        values = _columns(row, "Product", 25)
        return cls(
            product_id=values[0],
            name=values[1],
            product_number=values[2],
            color=values[5],
            standard_cost=values[8],
            list_price=values[9],
            size=values[10],
            weight=values[13],
            subcategory_id=values[18],
            product_model_id=values[19],
            sell_start_date=values[20],
            sell_end_date=values[21],
            discontinued_date=values[22],
            modified_date=values[24],
        )


@dataclass(frozen=True)
class CustomerRow:
    """CustomerID(0), PersonID(1), StoreID(2), TerritoryID(3), AccountNumber(4),
    rowguid(5), ModifiedDate(6)."""

    customer_id: str
    person_id: str
    store_id: str
    account_number: str
    modified_date: str

    @classmethod
    def from_row(cls, row: SourceRow) -> "CustomerRow":
        values = _columns(row, "Customer", 7)
        return cls(
            customer_id=values[0],
            person_id=values[1],
            store_id=values[2],
            account_number=values[4],
            modified_date=values[6],
        )


@dataclass(frozen=True)
class PersonRow:
    """BusinessEntityID(0), PersonType(1), NameStyle(2), Title(3), FirstName(4),
    MiddleName(5), LastName(6), Suffix(7), EmailPromotion(8),
    AdditionalContactInfo(9), Demographics(10), rowguid(11), ModifiedDate(12)."""

    business_entity_id: str
    name_style: str
    title: str
    first_name: str
    middle_name: str
    last_name: str
    suffix: str

    @classmethod
    def from_row(cls, row: SourceRow) -> "PersonRow":
        values = _columns(row, "Person", 13)
        return cls(
            business_entity_id=values[0],
            name_style=values[2],
            title=values[3],
            first_name=values[4],
            middle_name=values[5],
            last_name=values[6],
            suffix=values[7],
        )


@dataclass(frozen=True)
class EmailAddressRow:
    """BusinessEntityID(0), EmailAddressID(1), EmailAddress(2), rowguid(3), ModifiedDate(4)."""

    business_entity_id: str
    email_address: str

    @classmethod
    def from_row(cls, row: SourceRow) -> "EmailAddressRow":
        values = _columns(row, "EmailAddress", 5)
        return cls(business_entity_id=values[0], email_address=values[2])


@dataclass(frozen=True)
class PasswordRow:
    """BusinessEntityID(0), PasswordHash(1), PasswordSalt(2), rowguid(3), ModifiedDate(4)."""

    business_entity_id: str
    password_hash: str
    password_salt: str

    @classmethod
    def from_row(cls, row: SourceRow) -> "PasswordRow":
        values = _columns(row, "Password", 5)
        return cls(business_entity_id=values[0], password_hash=values[1], password_salt=values[2])


@dataclass(frozen=True)
class PersonPhoneRow:
    """BusinessEntityID(0), PhoneNumber(1), PhoneNumberTypeID(2), ModifiedDate(3)."""

    business_entity_id: str
    phone_number: str

    @classmethod
    def from_row(cls, row: SourceRow) -> "PersonPhoneRow":
        values = _columns(row, "PersonPhone", 4)
        return cls(business_entity_id=values[0], phone_number=values[1])


@dataclass(frozen=True)
class BusinessEntityAddressRow:
    """BusinessEntityID(0), AddressID(1), AddressTypeID(2), rowguid(3), ModifiedDate(4)."""

    business_entity_id: str
    address_id: str
    address_type_id: str

    @classmethod
    def from_row(cls, row: SourceRow) -> "BusinessEntityAddressRow":
        values = _columns(row, "BusinessEntityAddress", 5)
        return cls(business_entity_id=values[0], address_id=values[1], address_type_id=values[2])


@dataclass(frozen=True)
class AddressTypeRow:
    """AddressTypeID(0), Name(1), rowguid(2), ModifiedDate(3)."""

    address_type_id: str
    name: str

    @classmethod
    def from_row(cls, row: SourceRow) -> "AddressTypeRow":
        values = _columns(row, "AddressType", 4)
        return cls(address_type_id=values[0], name=values[1])


@dataclass(frozen=True)
class AddressRow:
    """AddressID(0), AddressLine1(1), AddressLine2(2), City(3), StateProvinceID(4),
    PostalCode(5), SpatialLocation(6), rowguid(7), ModifiedDate(8)."""

    address_id: str
    address_line1: str
    address_line2: str
    city: str
    state_province_id: str
    postal_code: str

    @classmethod
    def from_row(cls, row: SourceRow) -> "AddressRow":
        values = _columns(row, "Address", 9)
        return cls(
            address_id=values[0],
            address_line1=values[1],
            address_line2=values[2],
            city=values[3],
            state_province_id=values[4],
            postal_code=values[5],
        )


@dataclass(frozen=True)
class StateProvinceRow:
    """StateProvinceID(0), StateProvinceCode(1), CountryRegionCode(2),
    IsOnlyStateProvinceFlag(3), Name(4), TerritoryID(5), rowguid(6), ModifiedDate(7)."""

    state_province_id: str
    state_province_code: str
    country_region_code: str
    name: str

    @classmethod
    def from_row(cls, row: SourceRow) -> "StateProvinceRow":
        values = _columns(row, "StateProvince", 8)
        return cls(
            state_province_id=values[0],
            state_province_code=values[1],
            country_region_code=values[2],
            name=values[4],
        )


@dataclass(frozen=True)
class CountryRegionRow:
    """CountryRegionCode(0), Name(1), ModifiedDate(2)."""

    country_region_code: str
    name: str

    @classmethod
    def from_row(cls, row: SourceRow) -> "CountryRegionRow":
        values = _columns(row, "CountryRegion", 2)
        return cls(country_region_code=values[0], name=values[1])


@dataclass(frozen=True)
class SalesOrderHeaderRow:
    """Sales order header export, 26 columns.

    SalesOrderID(0), RevisionNumber(1), OrderDate(2), DueDate(3), ShipDate(4),
    Status(5), OnlineOrderFlag(6), SalesOrderNumber(7), PurchaseOrderNumber(8),
    AccountNumber(9), CustomerID(10), SalesPersonID(11), TerritoryID(12),
    BillToAddressID(13), ShipToAddressID(14), ShipMethodID(15),
    CreditCardID(16), CreditCardApprovalCode(17), CurrencyRateID(18),
    SubTotal(19), TaxAmt(20), Freight(21), TotalDue(22), Comment(23),
    rowguid(24), ModifiedDate(25).
    """

    sales_order_id: str
    revision_number: str
    order_date: str
    due_date: str
    ship_date: str
    status: str
    online_order_flag: str
    purchase_order_number: str
    account_number: str
    customer_id: str
    bill_to_address_id: str
    ship_to_address_id: str
    ship_method_id: str
    credit_card_approval_code: str
    sub_total: str
    tax_amt: str
    freight: str
    total_due: str
    comment: str
    modified_date: str

    @classmethod
    def from_row(cls, row: SourceRow) -> "SalesOrderHeaderRow":
        values = _columns(row, "SalesOrderHeader", 26)
        return cls(
            sales_order_id=values[0],
            revision_number=values[1],
            order_date=values[2],
            due_date=values[3],
            ship_date=values[4],
            status=values[5],
            online_order_flag=values[6],
            purchase_order_number=values[8],
            account_number=values[9],
            customer_id=values[10],
            bill_to_address_id=values[13],
            ship_to_address_id=values[14],
            ship_method_id=values[15],
            credit_card_approval_code=values[17],
            sub_total=values[19],
            tax_amt=values[20],
            freight=values[21],
            total_due=values[22],
            comment=values[23],
            modified_date=values[25],
        )


@dataclass(frozen=True)
class SalesOrderDetailRow:
    """SalesOrderID(0), SalesOrderDetailID(1), CarrierTrackingNumber(2), OrderQty(3),
    ProductID(4), SpecialOfferID(5), UnitPrice(6), UnitPriceDiscount(7),
    LineTotal(8), rowguid(9), ModifiedDate(10)."""

    sales_order_id: str
    sales_order_detail_id: str
    order_qty: str
    product_id: str
    unit_price: str
    unit_price_discount: str
    line_total: str

    @classmethod
    def from_row(cls, row: SourceRow) -> "SalesOrderDetailRow":
        values = _columns(row, "SalesOrderDetail", 11)
        return cls(
            sales_order_id=values[0],
            sales_order_detail_id=values[1],
            order_qty=values[3],
            product_id=values[4],
            unit_price=values[6],
            unit_price_discount=values[7],
            line_total=values[8],
        )


@dataclass(frozen=True)
class ShipMethodRow:
    """ShipMethodID(0), Name(1), ShipBase(2), ShipRate(3), rowguid(4), ModifiedDate(5)."""

    ship_method_id: str
    name: str

    @classmethod
    def from_row(cls, row: SourceRow) -> "ShipMethodRow":
        values = _columns(row, "ShipMethod", 6)
        return cls(ship_method_id=values[0], name=values[1])


def parse_source_rows(
    table: str,
    rows: Iterable[SourceRow],
    parser: Callable[[SourceRow], RowT],
) -> tuple[list[RowT], int]:
    """Parse raw rows into structs, rejecting rows that break the contract.

    Args:
        table: Table name used in log events.
        rows: Raw rows from the file reader.
        parser: Struct ``from_row`` constructor.

    Returns:
        Parsed structs in source order and the number of rejected rows.
    """
    parsed: list[RowT] = []
    rejected = 0
    for row_number, row in enumerate(rows, 1):
        try:
            parsed.append(parser(row))
        except SourceRowError as error:
            rejected += 1
            _LOGGER.error(
                "source_row_rejected",
                table=table,
                row_number=row_number,
                record_key=row[0] if row else None,
                error=str(error),
            )
    return parsed, rejected
