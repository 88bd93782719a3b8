"""Resolución de columnas por listas de prioridad (tolerante a nombres)."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

TIMESTAMP_FIELDS: tuple[str, ...] = (
    "Device Timestamp",
    "Timestamp",
    "Fecha y hora",
    "Fecha dispositivo",
    "Date",
)
DATE_FIELDS: tuple[str, ...] = ("Date", "Fecha", "Día")
TIME_FIELDS: tuple[str, ...] = ("Time", "Hora")

GLUCOSE_FIELDS: tuple[str, ...] = (
    "Historic Glucose",
    "Glucosa histórica",
    "Historial glucosa",
    "Blood Sugar",
    "Glucosa sanguínea",
    "Glucosa (mg/dL)",
    "Resultado",
    "Medición",
)

BASAL_FIELDS: tuple[str, ...] = (
    "Basal",
    "Tresiba",
    "Insulina (basal)",
    "Lenta",
    "Levemir",
    "Lantus",
)
FOOD_BOLUS_FIELDS: tuple[str, ...] = (
    "Food Bolus",
    "Insulina (alimentos)",
    "Alimento",
    "Bolo alimento",
    "Rápida",
)
CORRECTION_BOLUS_FIELDS: tuple[str, ...] = (
    "Correction Bolus",
    "Insulina (corrección)",
    "Corrección",
    "Bolo corrección",
)
GENERIC_BOLUS_FIELDS: tuple[str, ...] = (
    "Bolus",
    "Bolo",
    "Novorapid",
    "Humalog",
    "Apidra",
)


def _normalize_key(name: str) -> str:
    return name.lower().strip()


def find_column(columns: Sequence[str], candidates: Sequence[str]) -> str | None:
    """Return the first column containing a candidate, by candidate priority.

    Matching is case-insensitive and ignores surrounding whitespace. For each
    candidate in order, columns are scanned in their original order.
    """
    normalized = [(col, _normalize_key(col)) for col in columns]
    for candidate in candidates:
        needle = _normalize_key(candidate)
        for col, key in normalized:
            if needle in key:
                return col
    return None


def value_by_priority(record: Mapping[str, Any], candidates: Sequence[str]) -> Any:
    """Value of the best-matching column in ``record``, or None.

    The matched value is returned as-is, even when empty.
    """
    col = find_column(list(record.keys()), candidates)
    if col is None:
        return None
    return record[col]
