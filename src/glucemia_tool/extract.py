"""Extracción de entradas canónicas de glucosa e insulina desde registros crudos."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from loguru import logger

from glucemia_tool.fields import (
    BASAL_FIELDS,
    CORRECTION_BOLUS_FIELDS,
    DATE_FIELDS,
    FOOD_BOLUS_FIELDS,
    GENERIC_BOLUS_FIELDS,
    GLUCOSE_FIELDS,
    TIME_FIELDS,
    TIMESTAMP_FIELDS,
    value_by_priority,
)
from glucemia_tool.model import GlucoseEntry, InsulinEntry, InsulinKind
from glucemia_tool.normalize import is_positive, parse_number, parse_timestamp


@dataclass
class ExtractedEntries:
    """Glucose and insulin streams extracted from a record set."""

    glucose: list[GlucoseEntry] = field(default_factory=list)
    insulin: list[InsulinEntry] = field(default_factory=list)
    skipped_records: int = 0


def resolve_timestamp(record: Mapping[str, Any]) -> datetime | None:
    """Timestamp of a record, falling back to separate date and time columns."""
    ts = parse_timestamp(value_by_priority(record, TIMESTAMP_FIELDS))
    if ts is not None:
        return ts

    day = value_by_priority(record, DATE_FIELDS)
    if not day:
        return None
    time_of_day = value_by_priority(record, TIME_FIELDS)
    return parse_timestamp(f"{day} {time_of_day}" if time_of_day else day)


def classify_bolus(
    food: float, correction: float, generic: float
) -> list[tuple[InsulinKind, float]]:
    """Split bolus columns into food and correction doses.

    An explicit food dose wins. Otherwise an unlabeled (generic) bolus counts
    as food only when no positive correction dose coexists. A positive
    correction dose is always emitted.
    """
    doses: list[tuple[InsulinKind, float]] = []
    if is_positive(food):
        doses.append((InsulinKind.BOLUS_FOOD, food))
    elif is_positive(generic) and (math.isnan(correction) or correction == 0):
        doses.append((InsulinKind.BOLUS_FOOD, generic))
    if is_positive(correction):
        doses.append((InsulinKind.BOLUS_CORRECTION, correction))
    return doses


def extract_record(
    record: Mapping[str, Any],
) -> tuple[GlucoseEntry | None, list[InsulinEntry]] | None:
    """Map one raw record to its glucose reading and insulin doses.

    Returns:
        None when the record has no resolvable timestamp.
    """
    ts = resolve_timestamp(record)
    if ts is None:
        return None

    glucose = None
    value = parse_number(value_by_priority(record, GLUCOSE_FIELDS))
    if is_positive(value):
        glucose = GlucoseEntry(timestamp=ts, value=value)

    insulin: list[InsulinEntry] = []
    basal = parse_number(value_by_priority(record, BASAL_FIELDS))
    if is_positive(basal):
        insulin.append(InsulinEntry(timestamp=ts, units=basal, kind=InsulinKind.BASAL))

    doses = classify_bolus(
        food=parse_number(value_by_priority(record, FOOD_BOLUS_FIELDS)),
        correction=parse_number(value_by_priority(record, CORRECTION_BOLUS_FIELDS)),
        generic=parse_number(value_by_priority(record, GENERIC_BOLUS_FIELDS)),
    )
    insulin.extend(InsulinEntry(timestamp=ts, units=u, kind=k) for k, u in doses)
    return glucose, insulin


def extract_entries(records: Iterable[Mapping[str, Any]]) -> ExtractedEntries:
    """Extract canonical entries from merged raw records.

    Records without a timestamp are skipped silently. Glucose entries are
    sorted by timestamp; insulin entries keep record order.
    """
    out = ExtractedEntries()
    for record in records:
        extracted = extract_record(record)
        if extracted is None:
            out.skipped_records += 1
            continue
        glucose, insulin = extracted
        if glucose is not None:
            out.glucose.append(glucose)
        out.insulin.extend(insulin)

    out.glucose.sort(key=lambda g: g.timestamp)
    logger.debug(
        f"Extracted {len(out.glucose)} glucose and {len(out.insulin)} insulin "
        f"entries ({out.skipped_records} records without timestamp)"
    )
    return out
