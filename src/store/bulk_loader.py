"""Concurrent upsert of document batches with per-record isolation.

Every document in a batch is written concurrently. A throttled write is
retried exactly once after the service hint (or the fallback delay); any
other failure, or a second throttle, becomes an error outcome for that
document only. Batches run one after another.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Sequence

from core.errors import DocumentThrottledError
from core.logging_config import get_logger
from store.document_container import DocumentContainer

_LOGGER = get_logger(__name__)

PartitionKeyOf = Callable[[dict[str, Any]], str]


@dataclass(frozen=True)
class UpsertOutcome:
    """Result of writing one document."""

    document_id: str
    succeeded: bool
    attempts: int
    error: str | None = None


@dataclass(frozen=True)
class BulkUpsertResult:
    """Outcomes for a set of documents, in input order."""

    outcomes: tuple[UpsertOutcome, ...] = ()

    @property
    def success_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.succeeded)

    @property
    def error_count(self) -> int:
        return len(self.outcomes) - self.success_count

    def merge(self, other: "BulkUpsertResult") -> "BulkUpsertResult":
        return BulkUpsertResult(outcomes=self.outcomes + other.outcomes)


@dataclass(frozen=True)
class ThrottleRetryPolicy:
    """Delay policy for the single throttling retry.

    Attributes:
        fallback_delay_seconds: Delay used when the service sends no hint.
        sleep: Awaitable sleep, replaceable in tests.
    """

    fallback_delay_seconds: float = 1.0
    sleep: Callable[[float], Awaitable[Any]] = field(default=asyncio.sleep)

    def delay_for(self, error: DocumentThrottledError) -> float:
        if error.retry_after_seconds is None:
            return self.fallback_delay_seconds
        return error.retry_after_seconds


async def bulk_upsert(
    container: DocumentContainer,
    documents: Sequence[dict[str, Any]],
    partition_key_of: PartitionKeyOf,
    retry_policy: ThrottleRetryPolicy,
) -> BulkUpsertResult:
    """Upsert every document concurrently.

    Args:
        container: Destination container.
        documents: JSON payloads, each with an ``id``.
        partition_key_of: Partition key selector for a payload.
        retry_policy: Throttling retry delay policy.

    Returns:
        One outcome per document; the call itself never raises for a
        single document's failure.
    """
    outcomes = await asyncio.gather(
        *(
            _upsert_one(container, document, partition_key_of, retry_policy)
            for document in documents
        )
    )
    return BulkUpsertResult(outcomes=tuple(outcomes))


async def load_in_batches(
    container: DocumentContainer,
    documents: Sequence[dict[str, Any]],
    partition_key_of: PartitionKeyOf,
    batch_size: int,
    aggregate: str,
    retry_policy: ThrottleRetryPolicy,
) -> BulkUpsertResult:
    """Write documents in serial batches of ``batch_size``.

    Args:
        container: Destination container.
        documents: JSON payloads in load order.
        partition_key_of: Partition key selector for a payload.
        batch_size: Documents per concurrent batch.
        aggregate: Aggregate discriminator used in logs.
        retry_policy: Throttling retry delay policy.

    Returns:
        Outcomes for every document across all batches.

    Raises:
        ValueError: If ``batch_size`` is not positive.
    """
    if batch_size <= 0:
        raise ValueError(f"batch_size must be positive, got {batch_size}.")
    result = BulkUpsertResult()
    for start in range(0, len(documents), batch_size):
        batch = documents[start : start + batch_size]
        batch_result = await bulk_upsert(container, batch, partition_key_of, retry_policy)
        result = result.merge(batch_result)
        _LOGGER.info(
            "bulk_batch_completed",
            aggregate=aggregate,
            container=container.name,
            batch_start=start,
            batch_size=len(batch),
            succeeded=batch_result.success_count,
            failed=batch_result.error_count,
        )
    return result


async def _upsert_one(
    container: DocumentContainer,
    document: dict[str, Any],
    partition_key_of: PartitionKeyOf,
    retry_policy: ThrottleRetryPolicy,
) -> UpsertOutcome:
    document_id = str(document.get("id"))
    attempts = 0
    try:
        partition_key = partition_key_of(document)
        attempts += 1
        try:
            await container.upsert_item(document, partition_key)
        except DocumentThrottledError as throttled:
            delay = retry_policy.delay_for(throttled)
            _LOGGER.warning(
                "document_upsert_throttled",
                container=container.name,
                document_id=document_id,
                retry_after_seconds=delay,
            )
            await retry_policy.sleep(delay)
            attempts += 1
            await container.upsert_item(document, partition_key)
    except Exception as error:
        _LOGGER.error(
            "document_upsert_failed",
            container=container.name,
            document_id=document_id,
            attempts=attempts,
            error=str(error),
            error_type=type(error).__name__,
        )
        return UpsertOutcome(
            document_id=document_id, succeeded=False, attempts=attempts, error=str(error)
        )
    return UpsertOutcome(document_id=document_id, succeeded=True, attempts=attempts)
