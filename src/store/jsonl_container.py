"""Offline JSONL destination for dry runs.

Documents are held in memory with upsert semantics and written as one
JSONL file per container when the run completes.
"""

from __future__ import annotations

import copy
import json
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator

from core.config import MigrationConfig
from core.constants import JSONL_SUFFIX
from core.errors import MigrationStoreError
from core.logging_config import get_logger
from store.document_container import MigrationDestination

_LOGGER = get_logger(__name__)


class JsonlExportContainer:
    """In-memory container that exports to ``<output_dir>/<name>.jsonl``."""

    def __init__(self, name: str, output_dir: Path) -> None:
        self._name = name
        self._output_dir = output_dir
        self._documents: dict[tuple[str, str], dict[str, Any]] = {}

    @property
    def name(self) -> str:
        return self._name

    @property
    def export_path(self) -> Path:
        return self._output_dir / f"{self._name}{JSONL_SUFFIX}"

    def __len__(self) -> int:
        return len(self._documents)

    async def upsert_item(self, body: dict[str, Any], partition_key: str) -> None:
        document_id = body.get("id")
        if not isinstance(document_id, str) or not document_id:
            raise MigrationStoreError(
                f"Document for container '{self._name}' has no string id."
            )
        self._documents[(document_id, partition_key)] = copy.deepcopy(body)

    async def read_item(self, item_id: str, partition_key: str) -> dict[str, Any] | None:
        stored = self._documents.get((item_id, partition_key))
        return copy.deepcopy(stored) if stored is not None else None

    def flush(self) -> Path:
        """Write every stored document, sorted by id, and return the file path.

        Raises:
            MigrationStoreError: If the export file cannot be written.
        """
        ordered = sorted(self._documents.items(), key=lambda item: item[0])
        lines = [json.dumps(document, sort_keys=False) for _, document in ordered]
        try:
            self._output_dir.mkdir(parents=True, exist_ok=True)
            self.export_path.write_text(
                "".join(f"{line}\n" for line in lines), encoding="utf-8"
            )
        except OSError as error:
            raise MigrationStoreError(
                f"Failed to write export file {self.export_path}: {error}"
            ) from error
        _LOGGER.info(
            "container_exported",
            container=self._name,
            path=str(self.export_path),
            documents=len(lines),
        )
        return self.export_path


@asynccontextmanager
async def open_jsonl_destination(
    config: MigrationConfig,
    output_dir: Path,
) -> AsyncIterator[MigrationDestination]:
    """Yield JSONL export containers and write them when the block completes.

    Args:
        config: Runtime configuration supplying the container names.
        output_dir: Directory receiving one JSONL file per container.

    Yields:
        Destination wrapping the products and customers export containers.
    """
    products = JsonlExportContainer(config.products_container, output_dir)
    customers = JsonlExportContainer(config.customers_container, output_dir)
    yield MigrationDestination(products=products, customers=customers)
    products.flush()
    customers.flush()
