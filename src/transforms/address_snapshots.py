"""Address snapshot resolution shared by customers and orders.

A snapshot copies the address fields and resolves state/province and
country names at migration time; it keeps no link to the source row.
"""

from __future__ import annotations

from core.constants import UNKNOWN_ADDRESS_TYPE
from core.types import AddressSnapshot, CustomerAddress
from ingest.lookup_builder import AddressLookups
from ingest.source_rows import AddressRow, BusinessEntityAddressRow
from transforms.value_parsing import null_if_empty


def build_address_snapshot(address_id: str, lookups: AddressLookups) -> AddressSnapshot | None:
    """Snapshot an address by id; empty or unknown ids give None."""
    if not address_id:
        return None
    address = lookups.addresses.get(address_id)
    if address is None:
        return None
    state_name, country_name = resolve_region(address, lookups)
    return AddressSnapshot(
        address_line1=address.address_line1,
        address_line2=null_if_empty(address.address_line2),
        city=address.city,
        state_province=state_name,
        country_region=country_name,
        postal_code=address.postal_code,
    )


def build_customer_addresses(
    business_entity_id: str,
    lookups: AddressLookups,
) -> tuple[CustomerAddress, ...]:
    """Snapshot every address linked to a business entity.

    Links to unknown addresses are dropped; unknown address types are
    labelled ``Unknown``.
    """
    snapshots: list[CustomerAddress] = []
    for link in lookups.entity_addresses.get(business_entity_id, ()):
        address = lookups.addresses.get(link.address_id)
        if address is None:
            continue
        snapshots.append(_customer_address(link, address, lookups))
    return tuple(snapshots)


def resolve_region(address: AddressRow, lookups: AddressLookups) -> tuple[str | None, str | None]:
    """Return (state/province name, country name) for an address.

    The country falls back to its raw code when the code is not in the
    country lookup; both are None when the state/province is unknown.
    """
    state_province = lookups.state_provinces.get(address.state_province_id)
    if state_province is None:
        return None, None
    code = state_province.country_region_code
    return state_province.name, lookups.country_regions.get(code, code)


def _customer_address(
    link: BusinessEntityAddressRow,
    address: AddressRow,
    lookups: AddressLookups,
) -> CustomerAddress:
    state_name, country_name = resolve_region(address, lookups)
    return CustomerAddress(
        address_type=lookups.address_types.get(link.address_type_id, UNKNOWN_ADDRESS_TYPE),
        address_line1=address.address_line1,
        address_line2=null_if_empty(address.address_line2),
        city=address.city,
        state_province=state_name,
        country_region=country_name,
        postal_code=address.postal_code,
    )
