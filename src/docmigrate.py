"""Public SDK surface for docmigrate.

This module provides a stable import path for programmatic runs.
It re-exports the config, pipeline entry points and report types.
"""

from __future__ import annotations

from core.config import MigrationConfig
from core.errors import MigrationError
from ingest.lookup_builder import Lookups, build_lookups
from ingest.migration_report import AggregateCounts, MigrationReport, MigrationSummary
from ingest.pipeline import MigrationDocuments, MigrationRunner, migrate, transform_documents
from ingest.source_tables import SourceTables, load_source_tables
from store.cosmos_container import open_cosmos_destination, run_destination_check
from store.document_container import DocumentContainer, MigrationDestination
from store.document_payload import document_to_payload
from store.jsonl_container import JsonlExportContainer, open_jsonl_destination

__all__ = [
    "AggregateCounts",
    "DocumentContainer",
    "JsonlExportContainer",
    "Lookups",
    "MigrationConfig",
    "MigrationDestination",
    "MigrationDocuments",
    "MigrationError",
    "MigrationReport",
    "MigrationRunner",
    "MigrationSummary",
    "SourceTables",
    "build_lookups",
    "document_to_payload",
    "load_source_tables",
    "migrate",
    "open_cosmos_destination",
    "open_jsonl_destination",
    "run_destination_check",
    "transform_documents",
]
