"""Customer document transform.

A customer merges the person row with email, phone and password rows
that share its business entity id, plus snapshots of its addresses.
"""

from __future__ import annotations

from typing import Iterable, Mapping

from core.types import CustomerDocument
from ingest.lookup_builder import AddressLookups, PersonLookups
from ingest.source_rows import CustomerRow, PersonRow
from transforms.address_snapshots import build_customer_addresses
from transforms.transform_runner import TransformResult, transform_rows
from transforms.value_parsing import normalize_date, null_if_empty, parse_flag

AGGREGATE = CustomerDocument.doc_type


def build_customer_documents(
    customers: Iterable[CustomerRow],
    people: PersonLookups,
    addresses: AddressLookups,
) -> TransformResult[CustomerDocument]:
    """Build customer documents.

    Customers whose person row is missing are skipped.

    Args:
        customers: Person-backed customer rows.
        people: Person, email, phone and password lookups.
        addresses: Address lookups for embedded snapshots.

    Returns:
        One document per customer with a person row.
    """
    return transform_rows(
        AGGREGATE,
        customers,
        lambda row: _build_document(row, people, addresses),
        record_key=lambda row: row.customer_id,
    )


def customer_display_name(person: PersonRow) -> str:
    return f"{person.first_name} {person.last_name}"


def customer_names(
    customers: Mapping[str, CustomerRow],
    persons: Mapping[str, PersonRow],
) -> Mapping[str, str]:
    """Map customer ids to display names for customers with a person row."""
    names: dict[str, str] = {}
    for customer_id, customer in customers.items():
        person = persons.get(customer.person_id)
        if person is not None:
            names[customer_id] = customer_display_name(person)
    return names


def _build_document(
    row: CustomerRow,
    people: PersonLookups,
    addresses: AddressLookups,
) -> CustomerDocument | None:
    person = people.persons.get(row.person_id)
    if person is None:
        return None
    password = people.passwords.get(row.person_id)
    return CustomerDocument(
        id=row.customer_id,
        customer_id=row.customer_id,
        name_style=parse_flag(person.name_style),
        title=null_if_empty(person.title),
        first_name=person.first_name,
        middle_name=null_if_empty(person.middle_name),
        last_name=person.last_name,
        suffix=null_if_empty(person.suffix),
        company_name=None,
        sales_person=None,
        email_address=people.emails.get(row.person_id),
        phone=people.phones.get(row.person_id),
        password_hash=password.password_hash if password else None,
        password_salt=password.password_salt if password else None,
        addresses=build_customer_addresses(row.person_id, addresses),
        modified_date=normalize_date(row.modified_date),
    )
