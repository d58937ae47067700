"""Destination container contract shared by live and offline writers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol


class DocumentContainer(Protocol):
    """Partitioned document collection supporting upsert and point reads."""

    @property
    def name(self) -> str:
        """Container name used in logs and the run report."""
        ...

    async def upsert_item(self, body: dict[str, Any], partition_key: str) -> None:
        """Create or replace the document with ``body['id']`` in ``partition_key``.

        Raises:
            DocumentThrottledError: If the destination asks the caller to back off.
            MigrationStoreError: For any other write failure.
        """
        ...

    async def read_item(self, item_id: str, partition_key: str) -> dict[str, Any] | None:
        """Return the stored document, or None when it does not exist."""
        ...


@dataclass(frozen=True)
class MigrationDestination:
    """The two destination containers of one run.

    Attributes:
        products: Catalog container, partitioned by document id.
        customers: Customer and order container, partitioned by customer id.
    """

    products: DocumentContainer
    customers: DocumentContainer


def product_partition_key(payload: dict[str, Any]) -> str:
    """Catalog documents are partitioned by their own id."""
    return str(payload["id"])


def customer_partition_key(payload: dict[str, Any]) -> str:
    """Customer and order documents are partitioned by customer id."""
    return str(payload["customerId"])
