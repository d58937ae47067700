"""Migration orchestration.

This module coordinates source loading, lookup construction, the five
document transforms, and batched loads into the destination containers.
"""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Sequence

from core.config import MigrationConfig
from core.constants import (
    CATEGORY_BATCH_SIZE,
    CUSTOMER_BATCH_SIZE,
    PRODUCT_BATCH_SIZE,
    PRODUCT_MODEL_BATCH_SIZE,
    SALES_ORDER_BATCH_SIZE,
)
from core.types import (
    CategoryDocument,
    CustomerDocument,
    ProductDocument,
    ProductModelDocument,
    SalesOrderDocument,
)
from ingest.lookup_builder import Lookups, build_lookups
from ingest.migration_report import MigrationReport, MigrationSummary
from ingest.source_tables import SourceTables, load_source_tables
from store.bulk_loader import PartitionKeyOf, ThrottleRetryPolicy, load_in_batches
from store.document_container import (
    DocumentContainer,
    MigrationDestination,
    customer_partition_key,
    product_partition_key,
)
from store.document_payload import document_to_payload
from transforms.category_documents import build_category_documents, validate_subcategory_offset
from transforms.customer_documents import build_customer_documents, customer_names
from transforms.product_documents import build_product_documents
from transforms.product_model_documents import build_product_model_documents
from transforms.sales_order_documents import build_sales_order_documents
from transforms.transform_runner import TransformResult

DestinationOpener = Callable[[], AbstractAsyncContextManager[MigrationDestination]]


@dataclass(frozen=True)
class MigrationDocuments:
    """Transform results for all five aggregates."""

    categories: TransformResult[CategoryDocument]
    product_models: TransformResult[ProductModelDocument]
    products: TransformResult[ProductDocument]
    customers: TransformResult[CustomerDocument]
    sales_orders: TransformResult[SalesOrderDocument]

    def in_load_order(self) -> tuple[TransformResult[Any], ...]:
        return (
            self.categories,
            self.product_models,
            self.products,
            self.customers,
            self.sales_orders,
        )


@dataclass(frozen=True)
class AggregateLoadPlan:
    """How one aggregate's documents are written."""

    result: TransformResult[Any]
    container: DocumentContainer
    partition_key_of: PartitionKeyOf
    batch_size: int


class MigrationRunner:
    """Runner for one end-to-end migration into an open destination."""

    def __init__(
        self,
        config: MigrationConfig,
        destination: MigrationDestination,
        report: MigrationReport | None = None,
        retry_policy: ThrottleRetryPolicy | None = None,
    ) -> None:
        self._config = config
        self._destination = destination
        self._report = report or MigrationReport()
        self._retry_policy = retry_policy or ThrottleRetryPolicy(
            fallback_delay_seconds=config.throttle_fallback_seconds
        )

    async def run(self, source_dir: Path) -> MigrationSummary:
        """Execute every stage and return the run summary."""
        tables = self._load_tables(source_dir)
        validate_subcategory_offset(tables.categories, self._config.subcategory_id_offset)
        self._report.stage("Building lookups")
        lookups = build_lookups(tables)
        documents = self._transform(tables, lookups)
        await self._load(documents)
        return self._report.finish()

    def _load_tables(self, source_dir: Path) -> SourceTables:
        self._report.stage(f"Reading source files from {source_dir}")
        tables = load_source_tables(source_dir, self._config.source_encoding)
        self._report.record_tables(tables.stats)
        return tables

    def _transform(self, tables: SourceTables, lookups: Lookups) -> MigrationDocuments:
        self._report.stage("Transforming documents")
        documents = transform_documents(tables, lookups, self._config.subcategory_id_offset)
        for result in documents.in_load_order():
            self._report.record_transform(result)
        return documents

    async def _load(self, documents: MigrationDocuments) -> None:
        self._report.stage("Loading documents")
        for plan in _build_load_plans(documents, self._destination):
            payloads = [document_to_payload(document) for document in plan.result.documents]
            result = await load_in_batches(
                plan.container,
                payloads,
                plan.partition_key_of,
                plan.batch_size,
                plan.result.aggregate,
                self._retry_policy,
            )
            self._report.record_load(plan.result.aggregate, plan.container.name, result)


def transform_documents(
    tables: SourceTables,
    lookups: Lookups,
    subcategory_id_offset: int,
) -> MigrationDocuments:
    """Run all five aggregate transforms.

    Args:
        tables: Parsed source tables supplying each aggregate's primary rows.
        lookups: Fully built join indexes.
        subcategory_id_offset: Offset applied to subcategory ids.

    Returns:
        Transform results per aggregate.
    """
    names = customer_names(lookups.orders.customers, lookups.people.persons)
    return MigrationDocuments(
        categories=build_category_documents(
            tables.categories,
            tables.subcategories,
            lookups.catalog.category_names,
            subcategory_id_offset,
        ),
        product_models=build_product_model_documents(tables.product_models, lookups.catalog),
        products=build_product_documents(tables.products, lookups.catalog, subcategory_id_offset),
        customers=build_customer_documents(
            lookups.orders.customers.values(), lookups.people, lookups.addresses
        ),
        sales_orders=build_sales_order_documents(
            tables.order_headers,
            lookups.orders,
            lookups.catalog.product_names,
            lookups.addresses,
            names,
        ),
    )


async def migrate(
    config: MigrationConfig,
    open_destination: DestinationOpener,
    report: MigrationReport | None = None,
) -> MigrationSummary:
    """Run the migration against a destination opened for the run.

    The source directory is resolved and the destination opened before
    any transform runs, so setup failures abort before writes.

    Args:
        config: Runtime configuration.
        open_destination: Factory for the destination context manager.
        report: Optional report, e.g. with a custom printer.

    Returns:
        Final run summary.

    Raises:
        MigrationIngestError: If the source directory or a required file is missing.
        MigrationConfigError: If the subcategory offset collides with category ids.
        MigrationStoreError: If the destination cannot be opened.
    """
    source_dir = config.resolve_source_dir()
    async with open_destination() as destination:
        runner = MigrationRunner(config, destination, report=report)
        summary = await runner.run(source_dir)
    return summary


def _build_load_plans(
    documents: MigrationDocuments,
    destination: MigrationDestination,
) -> Sequence[AggregateLoadPlan]:
    products = destination.products
    customers = destination.customers
    return (
        AggregateLoadPlan(
            documents.categories, products, product_partition_key, CATEGORY_BATCH_SIZE
        ),
        AggregateLoadPlan(
            documents.product_models, products, product_partition_key, PRODUCT_MODEL_BATCH_SIZE
        ),
        AggregateLoadPlan(documents.products, products, product_partition_key, PRODUCT_BATCH_SIZE),
        AggregateLoadPlan(
            documents.customers, customers, customer_partition_key, CUSTOMER_BATCH_SIZE
        ),
        AggregateLoadPlan(
            documents.sales_orders, customers, customer_partition_key, SALES_ORDER_BATCH_SIZE
        ),
    )
