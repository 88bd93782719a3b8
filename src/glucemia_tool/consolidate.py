"""Consolidación de la línea de tiempo: merge de fuentes, filtros y DataFrames."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

import pandas as pd

from glucemia_tool.model import AnalysisWindow, GlucoseEntry, InsulinEntry
from glucemia_tool.sources.base import Record

GLUCOSE_COLUMNS = ["datetime", "date", "hour", "glucose_mg_dl"]
INSULIN_COLUMNS = ["datetime", "date", "kind", "units"]

_Entry = TypeVar("_Entry", GlucoseEntry, InsulinEntry)


def merge_records(*sources: Sequence[Record]) -> list[Record]:
    """Concatenate record sets in source order."""
    merged: list[Record] = []
    for records in sources:
        merged.extend(records)
    return merged


def filter_to_window(
    entries: Sequence[_Entry], window: AnalysisWindow
) -> list[_Entry]:
    """Entries whose timestamp lies inside the window (both ends inclusive)."""
    return [e for e in entries if window.contains(e.timestamp)]


def glucose_to_frame(entries: Sequence[GlucoseEntry]) -> pd.DataFrame:
    """Convert glucose entries to a DataFrame ordered by datetime."""
    if not entries:
        return pd.DataFrame(columns=GLUCOSE_COLUMNS)
    rows = [
        {
            "datetime": e.timestamp,
            "date": e.timestamp.date(),
            "hour": e.timestamp.hour,
            "glucose_mg_dl": e.value,
        }
        for e in entries
    ]
    df = pd.DataFrame(rows)
    return df.sort_values("datetime", kind="stable").reset_index(drop=True)


def insulin_to_frame(entries: Sequence[InsulinEntry]) -> pd.DataFrame:
    """Convert insulin entries to a DataFrame ordered by datetime."""
    if not entries:
        return pd.DataFrame(columns=INSULIN_COLUMNS)
    rows = [
        {
            "datetime": e.timestamp,
            "date": e.timestamp.date(),
            "kind": e.kind.value,
            "units": e.units,
        }
        for e in entries
    ]
    df = pd.DataFrame(rows)
    return df.sort_values("datetime", kind="stable").reset_index(drop=True)
