"""Motor de métricas glucémicas: resumen, patrón horario, histograma e insulina."""

from __future__ import annotations

import math
from collections.abc import Sequence

import pandas as pd

from glucemia_tool.consolidate import glucose_to_frame
from glucemia_tool.model import (
    AnalysisWindow,
    ComparisonPeriod,
    GlucoseEntry,
    HistogramBin,
    HourlyPattern,
    InsulinEntry,
    InsulinKind,
    InsulinProfile,
    MetricSummary,
    PeriodMetric,
    TimeInRangeBands,
)

# Umbrales de bandas (mg/dL).
VERY_LOW_LIMIT = 54.0
LOW_LIMIT = 70.0
HIGH_LIMIT = 180.0
VERY_HIGH_LIMIT = 250.0

# GMI = 3.31 + 0.02392 * media (mg/dL).
GMI_INTERCEPT = 3.31
GMI_SLOPE = 0.02392

HISTOGRAM_START = 40
HISTOGRAM_WIDTH = 10
HISTOGRAM_BINS = 46


def estimated_a1c(average: float) -> float:
    if not average:
        return 0.0
    return GMI_INTERCEPT + GMI_SLOPE * average


def _values(entries: Sequence[GlucoseEntry]) -> pd.Series:
    return pd.Series([e.value for e in entries], dtype=float)


def _band_counts(values: pd.Series) -> tuple[int, int, int, int, int]:
    very_low = int((values < VERY_LOW_LIMIT).sum())
    low = int(((values >= VERY_LOW_LIMIT) & (values < LOW_LIMIT)).sum())
    in_range = int(((values >= LOW_LIMIT) & (values <= HIGH_LIMIT)).sum())
    high = int(((values > HIGH_LIMIT) & (values <= VERY_HIGH_LIMIT)).sum())
    very_high = int((values > VERY_HIGH_LIMIT).sum())
    return very_low, low, in_range, high, very_high


def _population_std(values: pd.Series, mean: float, divisor: int) -> float:
    return math.sqrt(float(((values - mean) ** 2).sum()) / divisor)


def summarize(entries: Sequence[GlucoseEntry]) -> MetricSummary:
    """Summary statistics for a glucose subset.

    An empty subset yields zeros for every metric.
    """
    values = _values(entries)
    n = len(values)
    divisor = n or 1
    average = float(values.sum()) / divisor
    std = _population_std(values, average, divisor)

    very_low, low, in_range, high, very_high = _band_counts(values)
    bands = TimeInRangeBands(
        very_low=very_low / divisor * 100,
        low=low / divisor * 100,
        in_range=in_range / divisor * 100,
        high=high / divisor * 100,
        very_high=very_high / divisor * 100,
    )
    return MetricSummary(
        average=average,
        estimated_a1c=estimated_a1c(average),
        variability_coefficient=(std / average) * 100 if average else 0.0,
        time_in_range=bands,
        total_samples=n,
        hypo_count=very_low + low,
        hyper_count=very_high,
    )


def compare_periods(
    entries: Sequence[GlucoseEntry], periods: Sequence[ComparisonPeriod]
) -> list[PeriodMetric]:
    """Summary metrics per comparison period (half-open membership)."""
    return [
        PeriodMetric(
            label=p.label,
            metrics=summarize([e for e in entries if p.contains(e.timestamp)]),
        )
        for p in periods
    ]


def _hour_pattern(hour: int, values: pd.Series) -> HourlyPattern:
    n = len(values)
    if n == 0:
        return HourlyPattern(
            hour=hour,
            samples=0,
            average=0.0,
            std_dev=0.0,
            upper=0.0,
            lower=0.0,
            hypo_count=0,
            hyper_count=0,
            in_range=0.0,
        )
    average = float(values.mean())
    std = _population_std(values, average, n) if n > 1 else 0.0
    _, _, in_range, _, _ = _band_counts(values)
    return HourlyPattern(
        hour=hour,
        samples=n,
        average=average,
        std_dev=std,
        upper=average + std,
        lower=max(0.0, average - std),
        hypo_count=int((values < LOW_LIMIT).sum()),
        hyper_count=int((values > VERY_HIGH_LIMIT).sum()),
        in_range=in_range / n * 100,
    )


def hourly_patterns(entries: Sequence[GlucoseEntry]) -> list[HourlyPattern]:
    """Circadian profile: one aggregate per local hour of day (0-23)."""
    df = glucose_to_frame(entries)
    by_hour = {
        int(hour): group.astype(float)
        for hour, group in df.groupby("hour")["glucose_mg_dl"]
    }
    empty = pd.Series([], dtype=float)
    return [_hour_pattern(h, by_hour.get(h, empty)) for h in range(24)]


def histogram(entries: Sequence[GlucoseEntry]) -> list[HistogramBin]:
    """Counts per 10 mg/dL bin from 40 to 500; values outside are ignored."""
    edges = [HISTOGRAM_START + HISTOGRAM_WIDTH * i for i in range(HISTOGRAM_BINS + 1)]
    values = _values(entries)
    if values.empty:
        return [HistogramBin(lower=b, count=0) for b in edges[:-1]]
    counts = pd.cut(values, bins=edges, right=False).value_counts(sort=False)
    return [
        HistogramBin(lower=lower, count=int(count))
        for lower, count in zip(edges[:-1], counts.to_list())
    ]


def insulin_profile(
    entries: Sequence[InsulinEntry], window: AnalysisWindow
) -> InsulinProfile:
    """Insulin totals by kind and dose-balance ratios over the window."""
    totals = {kind: 0.0 for kind in InsulinKind}
    for e in entries:
        totals[e.kind] += e.units

    basal = totals[InsulinKind.BASAL]
    food = totals[InsulinKind.BOLUS_FOOD]
    correction = totals[InsulinKind.BOLUS_CORRECTION]
    total = basal + food + correction
    return InsulinProfile(
        basal_total=basal,
        bolus_food_total=food,
        bolus_correction_total=correction,
        basal_average_per_day=basal / window.days,
        basal_to_bolus_ratio=(basal / total) * 100 if total > 0 else 0.0,
        correction_to_food_ratio=correction / food if food > 0 else 0.0,
    )
