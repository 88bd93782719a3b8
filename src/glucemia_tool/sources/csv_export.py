"""Lectura de exportaciones CSV con cabecera en posición desconocida.

Both LibreView (sensor) and mySugr (manual log) exports are CSV-ish text with
device metadata lines before the real header, locale-dependent column names,
and either comma or semicolon delimiters.
"""

from __future__ import annotations

import csv
import re
from io import StringIO
from typing import Any

import pandas as pd
from loguru import logger

from glucemia_tool.errors import IngestionError
from glucemia_tool.sources.base import DataSource, Record

HEADER_KEYWORDS: tuple[str, ...] = (
    "timestamp",
    "fecha",
    "date",
    "time",
    "hora",
    "glucose",
    "glucosa",
    "insulin",
    "insulina",
)
HEADER_FALLBACK_KEYWORDS: tuple[str, ...] = ("timestamp", "fecha")

HEADER_SCAN_LINES = 100
HEADER_FALLBACK_SCAN_LINES = 50

DELIMITERS: tuple[str, ...] = (",", ";")
DELIMITER_SCAN_LINES = 20

_LINE_BREAK = re.compile(r"\r?\n")


def split_lines(text: str) -> list[str]:
    """Split text into lines, dropping blank ones."""
    return [line for line in _LINE_BREAK.split(text) if line.strip()]


def _header_score(line: str) -> int:
    lowered = line.lower()
    return sum(1 for kw in HEADER_KEYWORDS if kw in lowered)


def detect_header_line(lines: list[str]) -> int:
    """Index of the most header-like line among the first 100.

    The score of a line is the number of header keywords it contains; the
    first line with the highest score wins. If no line scores, the first line
    mentioning "timestamp" or "fecha" within the first 50 is used, else 0.
    """
    best_idx = 0
    best_score = 0
    for idx, line in enumerate(lines[:HEADER_SCAN_LINES]):
        score = _header_score(line)
        if score > best_score:
            best_score = score
            best_idx = idx

    if best_score == 0:
        for idx, line in enumerate(lines[:HEADER_FALLBACK_SCAN_LINES]):
            lowered = line.lower()
            if any(kw in lowered for kw in HEADER_FALLBACK_KEYWORDS):
                return idx
    return best_idx


def tabulate(text: str) -> str:
    """Drop the preamble before the detected header line."""
    lines = split_lines(text)
    if not lines:
        return ""
    header_idx = detect_header_line(lines)
    if header_idx:
        logger.debug(f"Skipping {header_idx} preamble lines before CSV header")
    return "\n".join(lines[header_idx:])


def sniff_delimiter(lines: list[str]) -> str:
    """Pick ``,`` or ``;`` by field-count consistency over the first lines.

    A delimiter qualifies when it splits the header into more than one field;
    the one whose data lines most often match the header width wins, ``,``
    on ties. Defaults to ``,``.
    """
    best_sep = ","
    best_hits = -1
    for sep in DELIMITERS:
        rows = list(csv.reader(lines[:DELIMITER_SCAN_LINES], delimiter=sep))
        width = len(rows[0]) if rows else 0
        if width <= 1:
            continue
        hits = sum(1 for row in rows[1:] if len(row) == width)
        if hits > best_hits:
            best_sep = sep
            best_hits = hits
    return best_sep


def _read_csv(
    content: str, sep: str, nrows: int | None = None, width: int | None = None
) -> pd.DataFrame:
    # Wide rows keep their first ``width`` fields; short rows are padded with None.
    on_bad_lines: Any = "error" if width is None else (lambda fields: fields[:width])
    return pd.read_csv(
        StringIO(content),
        sep=sep,
        engine="python",
        dtype=object,
        keep_default_na=False,
        skip_blank_lines=True,
        index_col=False,
        nrows=nrows,
        on_bad_lines=on_bad_lines,
    )


def parse_records(text: str, source: str = "csv") -> list[Record]:
    """Parse tabulated CSV text into field-keyed records.

    Values are kept as raw strings. The delimiter is sniffed first; if the
    header still yields one field or fewer, the text is parsed again with
    ``;``. Ragged rows are kept: extra fields are dropped and missing ones
    are empty.

    Args:
        text: CSV text starting at the header line.
        source: Label used in error messages.

    Returns:
        Records in file order.

    Raises:
        IngestionError: If the CSV structure cannot be read at all.
    """
    lines = split_lines(text)
    if not lines:
        return []
    sep = sniff_delimiter(lines)
    try:
        header = _read_csv(text, sep, nrows=0)
        if len(header.columns) <= 1 and sep != ";":
            logger.debug(f"{source}: one field with {sep!r} delimiter, retrying ';'")
            sep = ";"
            header = _read_csv(text, sep, nrows=0)
        df = _read_csv(text, sep, width=len(header.columns))
    except (pd.errors.ParserError, pd.errors.EmptyDataError, csv.Error) as exc:
        raise IngestionError(source, str(exc)) from exc

    df = df.fillna("")
    return [
        {str(col): str(val) for col, val in row.items()}
        for row in df.to_dict(orient="records")
    ]


class CsvExportSource(DataSource):
    """CSV export reader (sensor or manual log)."""

    def validate(self) -> None:
        """Validate that the export file exists."""
        if not self.path.is_file():
            raise FileNotFoundError(str(self.path))

    def read_text(self) -> str:
        return self.path.read_text(encoding="utf-8-sig", errors="replace")

    def load_records(self) -> list[Record]:
        """Read, tabulate and parse the export file.

        Raises:
            IngestionError: If the CSV structure cannot be read at all.
        """
        records = parse_records(tabulate(self.read_text()), source=self.label)
        logger.debug(f"{self.label}: {len(records)} records from {self.path}")
        return records
