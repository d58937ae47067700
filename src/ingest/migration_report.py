"""Run progress and summary reporting.

The report echoes stage banners and per-aggregate lines to standard
output as the run progresses, then renders a final summary. It only
counts; no retry or correctness logic lives here.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, replace
from typing import Any, Callable, Iterable

from core.logging_config import get_logger
from ingest.source_tables import SourceTableStats
from store.bulk_loader import BulkUpsertResult
from transforms.transform_runner import TransformResult

_LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class AggregateCounts:
    """Per-aggregate document counts.

    Attributes:
        aggregate: Aggregate discriminator.
        container: Destination container name, empty until loaded.
        built: Documents produced by the transform.
        transform_errors: Rows that failed to transform.
        skipped: Rows intentionally not migrated.
        written: Documents upserted successfully.
        write_errors: Documents whose upsert failed permanently.
    """

    aggregate: str
    container: str = ""
    built: int = 0
    transform_errors: int = 0
    skipped: int = 0
    written: int = 0
    write_errors: int = 0


@dataclass(frozen=True)
class MigrationSummary:
    """Final counts for one migration run."""

    tables: tuple[SourceTableStats, ...]
    aggregates: tuple[AggregateCounts, ...]
    elapsed_seconds: float

    @property
    def rows_read(self) -> int:
        return sum(stats.rows_read for stats in self.tables)

    @property
    def rows_rejected(self) -> int:
        return sum(stats.rows_rejected for stats in self.tables)

    @property
    def total_written(self) -> int:
        return sum(counts.written for counts in self.aggregates)

    @property
    def total_errors(self) -> int:
        transform_errors = sum(counts.transform_errors for counts in self.aggregates)
        write_errors = sum(counts.write_errors for counts in self.aggregates)
        return self.rows_rejected + transform_errors + write_errors

    def container_totals(self) -> dict[str, int]:
        """Return documents written per destination container."""
        totals: dict[str, int] = {}
        for counts in self.aggregates:
            if counts.container:
                totals[counts.container] = totals.get(counts.container, 0) + counts.written
        return totals


class MigrationReport:
    """Mutable accumulator for one run's counts."""

    def __init__(
        self,
        echo: Callable[[str], None] = print,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self._echo = echo
        self._clock = clock
        self._started_at = clock()
        self._tables: tuple[SourceTableStats, ...] = ()
        self._aggregates: dict[str, AggregateCounts] = {}

    def stage(self, title: str) -> None:
        self._echo(f"== {title} ==")

    def record_tables(self, stats: Iterable[SourceTableStats]) -> None:
        self._tables = tuple(stats)
        for table_stats in self._tables:
            line = f"  {table_stats.table}: {table_stats.rows_read} rows"
            if table_stats.rows_rejected:
                line += f" ({table_stats.rows_rejected} rejected)"
            self._echo(line)

    def record_transform(self, result: TransformResult[Any]) -> None:
        counts = replace(
            self._counts_for(result.aggregate),
            built=len(result.documents),
            transform_errors=result.error_count,
            skipped=result.skipped_count,
        )
        self._aggregates[result.aggregate] = counts
        self._echo(
            f"  {result.aggregate}: {counts.built} built, "
            f"{counts.transform_errors} errors, {counts.skipped} skipped"
        )

    def record_load(self, aggregate: str, container: str, result: BulkUpsertResult) -> None:
        counts = replace(
            self._counts_for(aggregate),
            container=container,
            written=result.success_count,
            write_errors=result.error_count,
        )
        self._aggregates[aggregate] = counts
        self._echo(
            f"  {aggregate} -> {container}: {counts.written} written, "
            f"{counts.write_errors} errors"
        )

    def finish(self) -> MigrationSummary:
        """Freeze counts, print the summary and return it."""
        summary = MigrationSummary(
            tables=self._tables,
            aggregates=tuple(self._aggregates.values()),
            elapsed_seconds=max(self._clock() - self._started_at, 0.0),
        )
        for line in render_summary(summary):
            self._echo(line)
        _LOGGER.info(
            "migration_completed",
            rows_read=summary.rows_read,
            rows_rejected=summary.rows_rejected,
            documents_written=summary.total_written,
            total_errors=summary.total_errors,
            elapsed_seconds=round(summary.elapsed_seconds, 3),
        )
        return summary

    def _counts_for(self, aggregate: str) -> AggregateCounts:
        return self._aggregates.get(aggregate, AggregateCounts(aggregate=aggregate))


def render_summary(summary: MigrationSummary) -> list[str]:
    """Render the human-readable final summary lines."""
    lines = ["== Migration summary =="]
    lines.append(f"  source rows read: {summary.rows_read} ({summary.rows_rejected} rejected)")
    for counts in summary.aggregates:
        lines.append(
            f"  {counts.aggregate}: {counts.written}/{counts.built} written, "
            f"{counts.transform_errors + counts.write_errors} errors, "
            f"{counts.skipped} skipped"
        )
    for container, written in summary.container_totals().items():
        lines.append(f"  container {container}: {written} documents")
    lines.append(f"  total documents: {summary.total_written}")
    lines.append(f"  total errors: {summary.total_errors}")
    lines.append(f"  elapsed: {format_elapsed(summary.elapsed_seconds)}")
    return lines


def format_elapsed(seconds: float) -> str:
    """Format seconds as ``HH:MM:SS.fff``."""
    total_millis = int(round(seconds * 1000))
    hours, remainder = divmod(total_millis, 3_600_000)
    minutes, remainder = divmod(remainder, 60_000)
    whole_seconds, millis = divmod(remainder, 1000)
    return f"{hours:02d}:{minutes:02d}:{whole_seconds:02d}.{millis:03d}"
