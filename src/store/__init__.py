"""Destination layer.

This module serializes documents and writes them to document containers.
It powers the live Cosmos DB load and the offline JSONL export.
"""
