"""Per-record error isolation for document transforms.

Every aggregate transform walks its primary rows through ``transform_rows``
so that one bad row is logged and counted without stopping the others.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Iterable, TypeVar

from core.errors import MigrationError
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)

RowT = TypeVar("RowT")
DocumentT = TypeVar("DocumentT")

_RECORD_ERRORS = (MigrationError, ValueError, IndexError, KeyError, TypeError, ArithmeticError)


@dataclass(frozen=True)
class TransformResult(Generic[DocumentT]):
    """Documents produced for one aggregate type.

    Attributes:
        aggregate: Aggregate discriminator, e.g. ``product``.
        documents: Built documents in source order.
        error_count: Rows that failed to transform.
        skipped_count: Rows intentionally not migrated.
    """

    aggregate: str
    documents: tuple[DocumentT, ...]
    error_count: int = 0
    skipped_count: int = 0


def transform_rows(
    aggregate: str,
    rows: Iterable[RowT],
    build_document: Callable[[RowT], DocumentT | None],
    record_key: Callable[[RowT], str],
) -> TransformResult[DocumentT]:
    """Build one document per row, isolating failures.

    Args:
        aggregate: Aggregate discriminator used in logs.
        rows: Primary rows for the aggregate.
        build_document: Row transform; returns None to skip a row.
        record_key: Identifying key for log events.

    Returns:
        Built documents with error and skip counts.
    """
    documents: list[DocumentT] = []
    error_count = 0
    skipped_count = 0
    for row in rows:
        try:
            document = build_document(row)
        except _RECORD_ERRORS as error:
            error_count += 1
            _LOGGER.error(
                "transform_record_failed",
                aggregate=aggregate,
                record_key=record_key(row),
                error=str(error),
                error_type=type(error).__name__,
            )
            continue
        if document is None:
            skipped_count += 1
            continue
        documents.append(document)
    _LOGGER.info(
        "transform_completed",
        aggregate=aggregate,
        documents=len(documents),
        errors=error_count,
        skipped=skipped_count,
    )
    return TransformResult(
        aggregate=aggregate,
        documents=tuple(documents),
        error_count=error_count,
        skipped_count=skipped_count,
    )
