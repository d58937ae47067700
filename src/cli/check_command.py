"""Destination check command wiring for docmigrate CLI."""

from __future__ import annotations

import argparse
import asyncio
from typing import Any

from core.config import MigrationConfig
from store.cosmos_container import run_destination_check


def add_check_command(subparsers: Any) -> None:
    """Register check subcommand."""
    subparsers.add_parser(
        "check",
        help="Connect to the destination and print each container's partition key",
    )


def run_check_command(config: MigrationConfig, args: argparse.Namespace) -> int:
    """Read both destination containers and print their partition keys."""
    descriptions = asyncio.run(run_destination_check(config))
    print(f"containers_checked={len(descriptions)}")
    return 0
