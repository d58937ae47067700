"""Runtime configuration model for the migration.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from core.constants import (
    DEFAULT_CUSTOMERS_CONTAINER,
    DEFAULT_DATABASE_NAME,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PRODUCTS_CONTAINER,
    DEFAULT_SOURCE_ENCODING,
    DEFAULT_SUBCATEGORY_ID_OFFSET,
    DEFAULT_THROTTLE_FALLBACK_SECONDS,
    SOURCE_DIR_NAME,
    SOURCE_DIR_SEARCH_DEPTH,
)
from core.errors import MigrationConfigError, MigrationIngestError


@dataclass(frozen=True)
class MigrationConfig:
    """Validated runtime configuration.

    Attributes:
        source_dir: Flat-file export directory, discovered when unset.
        source_encoding: Text encoding used when a file has no byte-order mark.
        cosmos_endpoint: Destination account endpoint URL.
        cosmos_key: Optional account key; the Azure credential chain is used otherwise.
        database_name: Destination database name.
        products_container: Container holding catalog documents.
        customers_container: Container holding customer and order documents.
        subcategory_id_offset: Offset added to subcategory ids to form category ids.
        throttle_fallback_seconds: Retry delay used when no retry-after hint is sent.
        log_level: Minimum structured log level.
    """

    source_dir: Path | None
    source_encoding: str
    cosmos_endpoint: str | None
    cosmos_key: str | None
    database_name: str
    products_container: str
    customers_container: str
    subcategory_id_offset: int
    throttle_fallback_seconds: float
    log_level: str

    @classmethod
    def from_env(cls) -> "MigrationConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            MigrationConfigError: If environment values are invalid.
        """
        source_dir_value = os.getenv("MIGRATE_SOURCE_DIR")
        return cls(
            source_dir=Path(source_dir_value).expanduser() if source_dir_value else None,
            source_encoding=os.getenv("MIGRATE_SOURCE_ENCODING", DEFAULT_SOURCE_ENCODING),
            cosmos_endpoint=os.getenv("MIGRATE_COSMOS_ENDPOINT") or None,
            cosmos_key=os.getenv("MIGRATE_COSMOS_KEY") or None,
            database_name=os.getenv("MIGRATE_DATABASE", DEFAULT_DATABASE_NAME),
            products_container=os.getenv("MIGRATE_PRODUCTS_CONTAINER", DEFAULT_PRODUCTS_CONTAINER),
            customers_container=os.getenv(
                "MIGRATE_CUSTOMERS_CONTAINER", DEFAULT_CUSTOMERS_CONTAINER
            ),
            subcategory_id_offset=_parse_offset(
                os.getenv("MIGRATE_SUBCATEGORY_OFFSET", str(DEFAULT_SUBCATEGORY_ID_OFFSET))
            ),
            throttle_fallback_seconds=_parse_fallback_seconds(
                os.getenv(
                    "MIGRATE_THROTTLE_FALLBACK_SECONDS", str(DEFAULT_THROTTLE_FALLBACK_SECONDS)
                )
            ),
            log_level=os.getenv("MIGRATE_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        )

    def resolve_source_dir(self) -> Path:
        """Return the flat-file directory, discovering it when not configured.

        Returns:
            Existing source directory path.

        Raises:
            MigrationIngestError: If the directory cannot be found.
        """
        if self.source_dir is not None:
            if not self.source_dir.is_dir():
                raise MigrationIngestError(
                    f"Source directory {self.source_dir} does not exist. "
                    "Set MIGRATE_SOURCE_DIR to the flat-file export folder."
                )
            return self.source_dir.resolve()
        return discover_source_dir(Path.cwd())

    def require_endpoint(self) -> str:
        """Return the destination endpoint or fail for live runs.

        Raises:
            MigrationConfigError: If no endpoint is configured.
        """
        if not self.cosmos_endpoint:
            raise MigrationConfigError(
                "MIGRATE_COSMOS_ENDPOINT is not set. "
                "Set it to the destination account URL or use --dry-run-dir."
            )
        return self.cosmos_endpoint


def discover_source_dir(start: Path) -> Path:
    """Walk up from ``start`` looking for the ``schema`` export folder.

    Args:
        start: Directory to begin the search from.

    Returns:
        First matching directory.

    Raises:
        MigrationIngestError: If no folder is found within the search depth.
    """
    directory = start.resolve()
    for _ in range(SOURCE_DIR_SEARCH_DEPTH):
        candidate = directory / SOURCE_DIR_NAME
        if candidate.is_dir():
            return candidate
        if directory.parent == directory:
            break
        directory = directory.parent
    raise MigrationIngestError(
        f"Cannot find a '{SOURCE_DIR_NAME}/' folder above {start}. "
        "Set MIGRATE_SOURCE_DIR or pass --source-dir."
    )


def _parse_offset(raw_value: str) -> int:
    """Parse the subcategory offset environment value.

    Raises:
        MigrationConfigError: If value is not a positive integer.
    """
    try:
        offset = int(raw_value)
    except ValueError as error:
        raise MigrationConfigError(
            "Invalid MIGRATE_SUBCATEGORY_OFFSET value: "
            f"expected integer, got '{raw_value}'."
        ) from error
    if offset <= 0:
        raise MigrationConfigError(
            f"Invalid MIGRATE_SUBCATEGORY_OFFSET value: expected a positive integer, got {offset}."
        )
    return offset


def _parse_fallback_seconds(raw_value: str) -> float:
    """Parse the throttle fallback delay environment value.

    Raises:
        MigrationConfigError: If value is not a non-negative number.
    """
    try:
        seconds = float(raw_value)
    except ValueError as error:
        raise MigrationConfigError(
            "Invalid MIGRATE_THROTTLE_FALLBACK_SECONDS value: "
            f"expected number, got '{raw_value}'."
        ) from error
    if seconds < 0:
        raise MigrationConfigError(
            "Invalid MIGRATE_THROTTLE_FALLBACK_SECONDS value: must not be negative."
        )
    return seconds
