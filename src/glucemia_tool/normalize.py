"""Normalizadores tolerantes de fecha/hora y números en exportaciones CSV."""

from __future__ import annotations

import math
import re
from datetime import datetime
from typing import Any

from dateutil import parser as date_parser

# Orden importa: día-mes-año antes que mes-día-año.
TIMESTAMP_FORMATS: tuple[str, ...] = (
    "%d-%m-%Y %H:%M",
    "%d/%m/%Y %H:%M",
    "%Y-%m-%d %H:%M",
    "%d-%m-%Y %H:%M:%S",
    "%d/%m/%Y %H:%M:%S",
    "%m-%d-%Y %H:%M",
    "%m/%d/%Y %H:%M",
    "%Y/%m/%d %H:%M",
    "%d.%m.%Y %H:%M",
    "%d.%m.%Y %H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
)

_LEADING_NUMBER = re.compile(r"^-?\d*\.?\d+")


def parse_timestamp(
    value: Any, formats: tuple[str, ...] = TIMESTAMP_FORMATS
) -> datetime | None:
    """Parse a date/time string from any supported export locale.

    Each format in ``formats`` is tried in order; if none matches, generic
    parsing via ``dateutil`` is attempted. Timezone offsets are discarded so
    every timestamp is local wall-clock time.

    Args:
        value: Raw cell value.
        formats: Ordered ``strptime`` patterns.

    Returns:
        Naive datetime, or None if the value cannot be parsed.
    """
    if value is None:
        return None
    clean = str(value).strip().replace("T", " ", 1)
    if not clean:
        return None

    for fmt in formats:
        parsed = _try_strptime(clean, fmt)
        if parsed is not None:
            return parsed

    try:
        parsed = date_parser.parse(clean)
    except (ValueError, OverflowError):
        return None
    return parsed.replace(tzinfo=None)


def _try_strptime(text: str, fmt: str) -> datetime | None:
    try:
        return datetime.strptime(text, fmt)
    except ValueError:
        return None


def parse_number(value: Any) -> float:
    """Extract the leading decimal number ("180,5 mg/dL" -> 180.5).

    Returns:
        The parsed float, or NaN when there is no numeric prefix.
    """
    if value is None:
        return math.nan
    text = str(value).strip().replace(",", ".", 1)
    match = _LEADING_NUMBER.match(text)
    if not match:
        return math.nan
    return float(match.group(0))


def is_positive(number: float) -> bool:
    """True when the number is strictly positive (NaN is not)."""
    return not math.isnan(number) and number > 0
