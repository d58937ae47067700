"""Shared JSON serialization for aggregate documents.

This module centralizes document-to-payload conversion.
It is reused by the bulk loader and the JSONL export container.
"""

from __future__ import annotations

from dataclasses import fields, is_dataclass
from decimal import Decimal
from typing import Any

from core.types import AggregateDocument


def document_to_payload(document: AggregateDocument) -> dict[str, Any]:
    """Serialize a document into a JSON-safe payload.

    Keys are lower camel case. ``id`` comes first, followed by the
    ``docType`` discriminator and the remaining fields in declaration order.

    Args:
        document: Aggregate document instance.

    Returns:
        Dictionary payload for the destination.
    """
    payload: dict[str, Any] = {"id": document.id, "docType": document.doc_type}
    for field_info in fields(document):
        if field_info.name == "id":
            continue
        payload[camel_case(field_info.name)] = _to_json_value(getattr(document, field_info.name))
    return payload


def camel_case(name: str) -> str:
    """Convert ``snake_case`` to ``lowerCamelCase``."""
    head, *tail = name.split("_")
    return head + "".join(part.capitalize() for part in tail)


def _to_json_value(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (tuple, list)):
        return [_to_json_value(item) for item in value]
    if is_dataclass(value) and not isinstance(value, type):
        return {
            camel_case(field_info.name): _to_json_value(getattr(value, field_info.name))
            for field_info in fields(value)
        }
    return value
