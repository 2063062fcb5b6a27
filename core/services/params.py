"""Parsing of loosely typed request values: query-string dates and JSON ids."""

from __future__ import annotations

from datetime import date
from typing import Any, Iterable

from django.utils.dateparse import parse_date

from ..exceptions import ServiceError


def query_date(raw: Any, label: str) -> date | None:
    """Parse a ``YYYY-MM-DD`` value; blank means absent, anything else unusable is a 400."""

    raw = str(raw).strip() if raw is not None else ""
    if not raw:
        return None
    try:
        value = parse_date(raw)
    except ValueError:
        value = None
    if value is None:
        raise ServiceError(f"Invalid {label}. Use a real date in YYYY-MM-DD format")
    return value


def record_id(raw: Any, label: str) -> int | None:
    if raw is None or raw == "":
        return None
    if isinstance(raw, bool):
        raise ServiceError(f"Invalid {label}")
    try:
        value = int(str(raw).strip())
    except ValueError:
        raise ServiceError(f"Invalid {label}") from None
    if value < 1:
        raise ServiceError(f"Invalid {label}")
    return value


def record_ids(raw: Iterable[Any], label: str) -> list[int]:
    return [record_id(item, label) for item in raw]
