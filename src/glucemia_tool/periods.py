"""Ventana de análisis y periodos de comparación según la duración elegida."""

from __future__ import annotations

from datetime import datetime, time
from enum import Enum

from dateutil.relativedelta import relativedelta

from glucemia_tool.model import AnalysisWindow, ComparisonPeriod

# Por encima de este número de días, el modo "max" se divide en deciles.
DECILE_THRESHOLD_DAYS = 180
DECILE_COUNT = 10


class Duration(str, Enum):
    """Report duration selector."""

    TWO_WEEKS = "2w"
    FOUR_WEEKS = "4w"
    TWO_MONTHS = "2m"
    THREE_MONTHS = "3m"
    SIX_MONTHS = "6m"
    MAXIMUM = "max"


_LOOKBACK: dict[Duration, relativedelta] = {
    Duration.TWO_WEEKS: relativedelta(weeks=2),
    Duration.FOUR_WEEKS: relativedelta(weeks=4),
    Duration.TWO_MONTHS: relativedelta(months=2),
    Duration.THREE_MONTHS: relativedelta(months=3),
    Duration.SIX_MONTHS: relativedelta(months=6),
}

_WEEKLY_COUNTS: dict[Duration, int] = {
    Duration.TWO_WEEKS: 2,
    Duration.FOUR_WEEKS: 4,
}

_MONTHLY_COUNTS: dict[Duration, int] = {
    Duration.TWO_MONTHS: 2,
    Duration.THREE_MONTHS: 3,
    Duration.SIX_MONTHS: 6,
}


def start_of_day(ts: datetime) -> datetime:
    return datetime.combine(ts.date(), time.min)


def end_of_day(ts: datetime) -> datetime:
    return datetime.combine(ts.date(), time.max)


def plan_window(
    earliest: datetime, latest: datetime, duration: Duration
) -> AnalysisWindow:
    """Compute the analysis window ending on the day of ``latest``.

    Args:
        earliest: Earliest glucose timestamp (used by ``Duration.MAXIMUM``).
        latest: Latest glucose timestamp.
        duration: Selected report duration.

    Returns:
        Window from start-of-day to end-of-day, inclusive.
    """
    end = end_of_day(latest)
    if duration is Duration.MAXIMUM:
        start = start_of_day(earliest)
    else:
        start = start_of_day(end - _LOOKBACK[duration])
    return AnalysisWindow(start=start, end=end)


def _consecutive(
    start: datetime, step: relativedelta, count: int, prefix: str
) -> list[ComparisonPeriod]:
    periods = []
    current = start
    for i in range(count):
        nxt = current + step
        periods.append(
            ComparisonPeriod(start=current, end=nxt, label=f"{prefix} {i + 1}")
        )
        current = nxt
    return periods


def _deciles(window: AnalysisWindow) -> list[ComparisonPeriod]:
    step = (window.end - window.start) / DECILE_COUNT
    periods = []
    for i in range(DECILE_COUNT):
        end = window.end if i == DECILE_COUNT - 1 else window.start + step * (i + 1)
        periods.append(
            ComparisonPeriod(start=window.start + step * i, end=end, label=f"P{i + 1}")
        )
    return periods


def _clipped_months(window: AnalysisWindow) -> list[ComparisonPeriod]:
    periods = []
    current = window.start
    i = 1
    while current < window.end:
        nxt = current + relativedelta(months=1)
        periods.append(
            ComparisonPeriod(
                start=current, end=min(nxt, window.end), label=f"Month {i}"
            )
        )
        current = nxt
        i += 1
    return periods


def comparison_periods(
    window: AnalysisWindow, duration: Duration
) -> list[ComparisonPeriod]:
    """Split the window into ordered, contiguous comparison periods.

    Weekly and monthly periods are anchored at the window start. In maximum
    mode, windows longer than 180 days are split into ten equal deciles and
    shorter ones into months, the last one clipped to the window end.
    """
    if duration in _WEEKLY_COUNTS:
        return _consecutive(
            window.start, relativedelta(weeks=1), _WEEKLY_COUNTS[duration], "Week"
        )
    if duration in _MONTHLY_COUNTS:
        return _consecutive(
            window.start, relativedelta(months=1), _MONTHLY_COUNTS[duration], "Month"
        )
    if (window.end - window.start).days > DECILE_THRESHOLD_DAYS:
        return _deciles(window)
    return _clipped_months(window)
