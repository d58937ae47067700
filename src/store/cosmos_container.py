"""Azure Cosmos DB destination adapter.

This module opens the async Cosmos client, wraps containers behind the
``DocumentContainer`` contract, and maps throttling responses onto
``DocumentThrottledError`` so the bulk loader can retry them.
"""

from __future__ import annotations

from contextlib import AsyncExitStack, asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Callable

from azure.core.exceptions import AzureError, ClientAuthenticationError
from azure.cosmos.aio import ContainerProxy, CosmosClient
from azure.cosmos.exceptions import CosmosHttpResponseError, CosmosResourceNotFoundError
from azure.identity.aio import DefaultAzureCredential

from core.config import MigrationConfig
from core.errors import DocumentThrottledError, MigrationDependencyError, MigrationStoreError
from core.logging_config import get_logger
from store.document_container import MigrationDestination

_LOGGER = get_logger(__name__)

_THROTTLED_STATUS_CODE = 429
_RETRY_AFTER_HEADER = "x-ms-retry-after-ms"


@dataclass(frozen=True)
class ContainerDescription:
    """Container id and partition key paths reported by the destination."""

    container_id: str
    partition_key_paths: tuple[str, ...]


class CosmosDocumentContainer:
    """``DocumentContainer`` backed by an async Cosmos DB container proxy."""

    def __init__(self, container: ContainerProxy, name: str) -> None:
        self._container = container
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    async def upsert_item(self, body: dict[str, Any], partition_key: str) -> None:
        # The service derives the partition from the body; the key is kept for
        # contract parity with point reads.
        try:
            await self._container.upsert_item(body=body)
        except CosmosHttpResponseError as error:
            raise _translate_response_error(error, self._name, body.get("id")) from error

    async def read_item(self, item_id: str, partition_key: str) -> dict[str, Any] | None:
        try:
            item = await self._container.read_item(item=item_id, partition_key=partition_key)
        except CosmosResourceNotFoundError:
            return None
        except CosmosHttpResponseError as error:
            raise _translate_response_error(error, self._name, item_id) from error
        return dict(item)

    async def describe(self) -> ContainerDescription:
        """Read container properties from the service.

        Raises:
            MigrationDependencyError: If the credential cannot authenticate.
            MigrationStoreError: If the container cannot be read.
        """
        try:
            properties = await self._container.read()
        except ClientAuthenticationError as error:
            raise MigrationDependencyError(
                f"Cannot authenticate to read container '{self._name}': {error}. "
                "Set MIGRATE_COSMOS_KEY or sign in for the default Azure credential."
            ) from error
        except AzureError as error:
            raise MigrationStoreError(
                f"Cannot read container '{self._name}': {error}. "
                "Check MIGRATE_DATABASE and the container names."
            ) from error
        partition_key = properties.get("partitionKey") or {}
        return ContainerDescription(
            container_id=str(properties.get("id", self._name)),
            partition_key_paths=tuple(partition_key.get("paths", ())),
        )


@asynccontextmanager
async def open_cosmos_destination(config: MigrationConfig) -> AsyncIterator[MigrationDestination]:
    """Connect to the configured account and yield both containers.

    The account key is used when configured; otherwise the default Azure
    credential chain authenticates the client. Both containers are read
    once so a bad endpoint or name fails before any document is written.

    Args:
        config: Runtime configuration.

    Yields:
        Destination wrapping the products and customers containers.

    Raises:
        MigrationConfigError: If no endpoint is configured.
        MigrationDependencyError: If the credential cannot authenticate.
        MigrationStoreError: If either container is unreachable.
    """
    async with _open_containers(config) as (products, customers):
        for container in (products, customers):
            description = await container.describe()
            _LOGGER.info(
                "container_connected",
                container=description.container_id,
                partition_key_paths=list(description.partition_key_paths),
            )
        yield MigrationDestination(products=products, customers=customers)


async def run_destination_check(
    config: MigrationConfig,
    echo: Callable[[str], None] = print,
) -> tuple[ContainerDescription, ...]:
    """Connect and print each container's id and partition key path.

    Args:
        config: Runtime configuration.
        echo: Line printer.

    Returns:
        Descriptions of the products and customers containers.
    """
    descriptions: list[ContainerDescription] = []
    async with _open_containers(config) as containers:
        for container in containers:
            description = await container.describe()
            descriptions.append(description)
            echo(
                f"container={description.container_id} "
                f"partition_key={','.join(description.partition_key_paths)}"
            )
    return tuple(descriptions)


@asynccontextmanager
async def _open_containers(
    config: MigrationConfig,
) -> AsyncIterator[tuple[CosmosDocumentContainer, CosmosDocumentContainer]]:
    endpoint = config.require_endpoint()
    async with AsyncExitStack() as stack:
        if config.cosmos_key:
            credential: Any = config.cosmos_key
        else:
            credential = await stack.enter_async_context(DefaultAzureCredential())
        client = await _connect_client(stack, endpoint, credential)
        database = client.get_database_client(config.database_name)
        yield (
            CosmosDocumentContainer(
                database.get_container_client(config.products_container),
                config.products_container,
            ),
            CosmosDocumentContainer(
                database.get_container_client(config.customers_container),
                config.customers_container,
            ),
        )


async def _connect_client(stack: AsyncExitStack, endpoint: str, credential: Any) -> CosmosClient:
    """Open the client, which reads the database account on entry.

    Raises:
        MigrationDependencyError: If the credential cannot authenticate.
        MigrationStoreError: If the account endpoint is unreachable.
    """
    client = CosmosClient(endpoint, credential=credential)
    try:
        return await stack.enter_async_context(client)
    except ClientAuthenticationError as error:
        await client.close()
        raise MigrationDependencyError(
            f"Cannot authenticate to Cosmos DB account at {endpoint}: {error}. "
            "Set MIGRATE_COSMOS_KEY or sign in for the default Azure credential."
        ) from error
    except AzureError as error:
        await client.close()
        raise MigrationStoreError(
            f"Cannot connect to Cosmos DB account at {endpoint}: {error}. "
            "Check MIGRATE_COSMOS_ENDPOINT and network access."
        ) from error


def _translate_response_error(
    error: CosmosHttpResponseError,
    container_name: str,
    document_id: object,
) -> MigrationStoreError:
    if error.status_code == _THROTTLED_STATUS_CODE:
        return DocumentThrottledError(
            f"Container '{container_name}' throttled document '{document_id}'.",
            retry_after_seconds=retry_after_seconds(getattr(error, "headers", None)),
        )
    return MigrationStoreError(
        f"Container '{container_name}' rejected document '{document_id}' "
        f"with status {error.status_code}: {error.message}"
    )


def retry_after_seconds(headers: Any) -> float | None:
    """Read the service retry hint, in seconds, from response headers."""
    if not headers:
        return None
    raw_value = headers.get(_RETRY_AFTER_HEADER)
    if raw_value is None:
        return None
    try:
        return max(float(raw_value), 0.0) / 1000.0
    except (TypeError, ValueError):
        return None
