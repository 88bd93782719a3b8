"""Modelos tipados para entradas de glucosa/insulina y métricas derivadas."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

# Umbrales de interpretación clínica usados en el informe.
CV_STABILITY_LIMIT = 36.0
RANGE_TARGET_PERCENT = 70.0


class InsulinKind(str, Enum):
    """Insulin dose classification."""

    BASAL = "basal"
    BOLUS_FOOD = "bolus_food"
    BOLUS_CORRECTION = "bolus_correction"


@dataclass(frozen=True)
class GlucoseEntry:
    """One glucose measurement (mg/dL), timestamped."""

    timestamp: datetime
    value: float


@dataclass(frozen=True)
class InsulinEntry:
    """One insulin dose event."""

    timestamp: datetime
    units: float
    kind: InsulinKind


@dataclass(frozen=True)
class AnalysisWindow:
    """Global analysis window, inclusive on both ends."""

    start: datetime
    end: datetime

    @property
    def days(self) -> int:
        """Whole days spanned by the window (at least 1)."""
        return max(1, (self.end - self.start).days)

    def contains(self, ts: datetime) -> bool:
        return self.start <= ts <= self.end


@dataclass(frozen=True)
class ComparisonPeriod:
    """Half-open sub-interval of the window: start <= ts < end."""

    start: datetime
    end: datetime
    label: str

    def contains(self, ts: datetime) -> bool:
        return self.start <= ts < self.end


@dataclass(frozen=True)
class TimeInRangeBands:
    """Percentages of samples per glycemic band."""

    very_low: float = 0.0
    low: float = 0.0
    in_range: float = 0.0
    high: float = 0.0
    very_high: float = 0.0

    def total(self) -> float:
        return self.very_low + self.low + self.in_range + self.high + self.very_high


@dataclass(frozen=True)
class MetricSummary:
    """Summary statistics over a glucose subset."""

    average: float
    estimated_a1c: float
    variability_coefficient: float
    time_in_range: TimeInRangeBands
    total_samples: int
    hypo_count: int
    hyper_count: int

    @property
    def high_variability(self) -> bool:
        """CV above the stability limit (36%)."""
        return self.variability_coefficient > CV_STABILITY_LIMIT

    @property
    def meets_range_target(self) -> bool:
        """Time in range at or above the 70% target."""
        return self.time_in_range.in_range >= RANGE_TARGET_PERCENT


@dataclass(frozen=True)
class PeriodMetric:
    """Metrics for one comparison period."""

    label: str
    metrics: MetricSummary


@dataclass(frozen=True)
class HourlyPattern:
    """Circadian aggregate for one hour of day."""

    hour: int
    samples: int
    average: float
    std_dev: float
    upper: float
    lower: float
    hypo_count: int
    hyper_count: int
    in_range: float


@dataclass(frozen=True)
class HistogramBin:
    """Fixed-width histogram bin [lower, lower + width)."""

    lower: int
    count: int


@dataclass(frozen=True)
class InsulinProfile:
    """Insulin totals and balance ratios over the window."""

    basal_total: float
    bolus_food_total: float
    bolus_correction_total: float
    basal_average_per_day: float
    basal_to_bolus_ratio: float
    correction_to_food_ratio: float

    @property
    def total(self) -> float:
        return self.basal_total + self.bolus_food_total + self.bolus_correction_total
