"""Pipeline completo: exportaciones CSV -> informe glucémico."""

from __future__ import annotations

from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from glucemia_tool.consolidate import filter_to_window, merge_records
from glucemia_tool.errors import EmptyDatasetError, EmptyWindowError
from glucemia_tool.extract import extract_entries
from glucemia_tool.metrics import (
    compare_periods,
    histogram,
    hourly_patterns,
    insulin_profile,
    summarize,
)
from glucemia_tool.model import (
    AnalysisWindow,
    GlucoseEntry,
    HistogramBin,
    HourlyPattern,
    InsulinEntry,
    InsulinProfile,
    MetricSummary,
    PeriodMetric,
)
from glucemia_tool.periods import Duration, comparison_periods, plan_window
from glucemia_tool.sources.base import DataSource, ExportPaths, Record
from glucemia_tool.sources.csv_export import CsvExportSource

DEFAULT_PATIENT = "PACIENTE"


@dataclass(frozen=True)
class ReportConfig:
    """Report generation options."""

    duration: Duration = Duration.THREE_MONTHS
    patient: str = ""

    @property
    def patient_label(self) -> str:
        return self.patient.strip() or DEFAULT_PATIENT


@dataclass(frozen=True)
class GlycemicReport:
    """Everything the presentation layer needs for one report."""

    patient: str
    duration: Duration
    window: AnalysisWindow
    glucose: list[GlucoseEntry]
    insulin: list[InsulinEntry]
    metrics: MetricSummary
    comparison: list[PeriodMetric]
    hourly_patterns: list[HourlyPattern]
    histogram: list[HistogramBin]
    insulin_profile: InsulinProfile


def build_report(
    sensor_records: Sequence[Record],
    manual_records: Sequence[Record],
    config: ReportConfig,
) -> GlycemicReport:
    """Build the report from already-parsed records of both exports.

    Raises:
        EmptyDatasetError: If no glucose reading was found in any export.
        EmptyWindowError: If no glucose reading falls inside the window.
    """
    entries = extract_entries(merge_records(sensor_records, manual_records))
    if not entries.glucose:
        raise EmptyDatasetError()

    window = plan_window(
        earliest=entries.glucose[0].timestamp,
        latest=entries.glucose[-1].timestamp,
        duration=config.duration,
    )
    glucose = filter_to_window(entries.glucose, window)
    insulin = filter_to_window(entries.insulin, window)
    if not glucose:
        raise EmptyWindowError(config.duration.value)

    periods = comparison_periods(window, config.duration)
    report = GlycemicReport(
        patient=config.patient_label,
        duration=config.duration,
        window=window,
        glucose=glucose,
        insulin=insulin,
        metrics=summarize(glucose),
        comparison=compare_periods(glucose, periods),
        hourly_patterns=hourly_patterns(glucose),
        histogram=histogram(glucose),
        insulin_profile=insulin_profile(insulin, window),
    )
    logger.info(
        f"Report {config.duration.value}: {window.start:%Y-%m-%d} -> "
        f"{window.end:%Y-%m-%d}, {len(glucose)} glucose, {len(insulin)} insulin, "
        f"{len(periods)} periods"
    )
    return report


def load_sources(
    sensor: DataSource, manual: DataSource
) -> tuple[list[Record], list[Record]]:
    """Validate and parse both exports concurrently.

    Raises:
        FileNotFoundError: If an export file is missing.
        IngestionError: If an export cannot be parsed.
    """
    sensor.validate()
    manual.validate()
    with ThreadPoolExecutor(max_workers=2) as pool:
        sensor_future = pool.submit(sensor.load_records)
        manual_future = pool.submit(manual.load_records)
        return sensor_future.result(), manual_future.result()


def generate_report(
    sensor_path: Path, manual_path: Path, config: ReportConfig
) -> GlycemicReport:
    """Read both CSV exports from disk and build the report."""
    sensor = CsvExportSource(ExportPaths(path=sensor_path), label="sensor")
    manual = CsvExportSource(ExportPaths(path=manual_path), label="manual")
    sensor_records, manual_records = load_sources(sensor, manual)
    return build_report(sensor_records, manual_records, config)
