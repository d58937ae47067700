"""docmigrate CLI entry points.
This module exposes the migration run and the destination check.
It maps argparse commands onto the migration pipeline.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

from cli.check_command import add_check_command, run_check_command
from core.config import MigrationConfig
from core.errors import MigrationError
from core.logging_config import configure_logging
from ingest.pipeline import DestinationOpener, migrate
from store.cosmos_container import open_cosmos_destination
from store.jsonl_container import open_jsonl_destination


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="docmigrate",
        description="Migrate the relational flat-file export into document containers",
    )
    parser.add_argument("--source-dir", help="Override MIGRATE_SOURCE_DIR for this command")
    parser.add_argument("--log-level", help="Override MIGRATE_LOG_LEVEL for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_run_command(subparsers)
    add_check_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the docmigrate CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = _build_config(args.source_dir, args.log_level)
        configure_logging(config.log_level)
        if args.command == "run":
            return _run_migration_command(config, args)
        if args.command == "check":
            return run_check_command(config, args)
    except MigrationError as error:
        print(f"migration_error={error}", file=sys.stderr)
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_config(source_dir: str | None, log_level: str | None) -> MigrationConfig:
    """Build config with optional CLI overrides."""
    config = MigrationConfig.from_env()
    if source_dir:
        config = replace(config, source_dir=Path(source_dir).expanduser())
    if log_level:
        config = replace(config, log_level=log_level.upper())
    return config


def _add_run_command(subparsers: Any) -> None:
    parser = subparsers.add_parser("run", help="Run the full migration")
    parser.add_argument(
        "--dry-run-dir",
        help="Write documents as JSONL files to this directory instead of the destination",
    )


def _run_migration_command(config: MigrationConfig, args: argparse.Namespace) -> int:
    """Handle run command.

    Args:
        config: Runtime configuration.
        args: Parsed CLI args.

    Returns:
        Exit code; per-record errors do not fail the run.
    """
    summary = asyncio.run(migrate(config, _destination_opener(config, args.dry_run_dir)))
    print(f"documents_written={summary.total_written}")
    print(f"total_errors={summary.total_errors}")
    return 0


def _destination_opener(config: MigrationConfig, dry_run_dir: str | None) -> DestinationOpener:
    if dry_run_dir:
        output_dir = Path(dry_run_dir).expanduser()
        return lambda: open_jsonl_destination(config, output_dir)
    return lambda: open_cosmos_destination(config)
