from __future__ import annotations

from datetime import date, datetime
from typing import Any

DMY_FORMAT = "%d/%m/%Y"


def parse_dmy(value: str) -> date:
    """Parses ``dd/mm/yyyy``; raises ValueError otherwise."""

    if not isinstance(value, str):
        raise ValueError(f"Invalid date format: {value!r}")
    try:
        return datetime.strptime(value, DMY_FORMAT).date()
    except ValueError as exc:
        raise ValueError(f"Invalid date format: {value}") from exc


def is_valid_dmy(value: Any) -> bool:
    # strptime tolerates missing zero padding, the round-trip does not
    try:
        parsed = parse_dmy(value)
    except ValueError:
        return False
    return format_dmy(parsed) == value


def format_dmy(value: date) -> str:
    # strftime drops the zero padding of years below 1000 on glibc
    return f"{value.day:02d}/{value.month:02d}/{value.year:04d}"


def convert_date(value: str) -> str:
    """``dd/mm/yyyy`` -> ``yyyy-mm-dd`` without any timezone handling."""

    return parse_dmy(value).isoformat()


__all__ = ["DMY_FORMAT", "convert_date", "format_dmy", "is_valid_dmy", "parse_dmy"]
