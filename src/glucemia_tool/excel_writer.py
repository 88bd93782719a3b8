"""Generación de Excel formateado con el informe glucémico para entrega médica."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

import pandas as pd
from openpyxl.styles import Alignment, Border, Font, Side
from openpyxl.utils import get_column_letter

from glucemia_tool.consolidate import glucose_to_frame, insulin_to_frame
from glucemia_tool.metrics import HISTOGRAM_WIDTH
from glucemia_tool.report import GlycemicReport

_DIA_SEMANA: tuple[str, ...] = ("lun", "mar", "mie", "jue", "vie", "sab", "dom")

_KIND_LABELS: dict[str, str] = {
    "basal": "Basal",
    "bolus_food": "Bolo alimento",
    "bolus_correction": "Bolo corrección",
}

_HEADER_MAP: dict[str, str] = {
    "weekday": "Día",
    "datetime": "Fecha / Hora",
    "glucose_mg_dl": "Glucosa (mg/dL)",
    "kind": "Tipo",
    "units": "Unidades",
}

_COLUMN_WIDTHS: dict[str, int] = {
    "Día": 6,
    "Fecha / Hora": 18,
    "Métrica": 30,
    "Valor": 22,
    "Periodo": 12,
    "Tipo": 16,
}
_DEFAULT_WIDTH = 12
_ROW_HEIGHT = 15

_THIN = Side(style="thin")
_THIN_BORDER = Border(left=_THIN, right=_THIN, top=_THIN, bottom=_THIN)
_CENTER = Alignment(horizontal="center", vertical="center", wrap_text=True)
_BOLD = Font(bold=True)

_NUMBER_FORMATS: dict[str, str] = {
    "Fecha / Hora": "dd/mm/yyyy hh:mm",
    "Glucosa (mg/dL)": "0.0",
    "Unidades": "0.0",
    "Promedio (mg/dL)": "0.0",
    "GMI (%)": "0.0",
    "CV (%)": "0.0",
    "Muy bajo (%)": "0.0",
    "Bajo (%)": "0.0",
    "En rango (%)": "0.0",
    "Alto (%)": "0.0",
    "Muy alto (%)": "0.0",
    "Media": "0.0",
    "DE": "0.0",
    "Media + DE": "0.0",
    "Media - DE": "0.0",
}


@dataclass(frozen=True)
class ExcelLayout:
    """Sheet names of the report workbook."""

    summary_sheet: str = "Resumen"
    comparison_sheet: str = "Comparación"
    hourly_sheet: str = "Patrón horario"
    histogram_sheet: str = "Histograma"
    glucose_sheet: str = "Glucosa"
    insulin_sheet: str = "Insulina"


def _weekday_label(ts: datetime) -> str:
    """Etiqueta de 3 letras del día de la semana (lun-dom)."""
    return _DIA_SEMANA[ts.weekday()]


def _add_weekday_column(export_df: pd.DataFrame) -> pd.DataFrame:
    """Añade columna weekday (Día) a partir de datetime."""
    if "datetime" not in export_df.columns or export_df.empty:
        return export_df
    export_df = export_df.copy()
    export_df["weekday"] = pd.to_datetime(export_df["datetime"]).map(_weekday_label)
    cols = ["weekday"] + [c for c in export_df.columns if c != "weekday"]
    return export_df[cols]


def summary_frame(report: GlycemicReport) -> pd.DataFrame:
    """Two-column (Métrica, Valor) overview of the report."""
    m = report.metrics
    tir = m.time_in_range
    ins = report.insulin_profile
    rows: list[tuple[str, object]] = [
        ("Paciente", report.patient),
        ("Periodo del informe", report.duration.value),
        ("Desde", report.window.start.strftime("%d/%m/%Y")),
        ("Hasta", report.window.end.strftime("%d/%m/%Y")),
        ("Lecturas", m.total_samples),
        ("Promedio glucosa (mg/dL)", round(m.average, 1)),
        ("GMI / HbA1c estimada (%)", round(m.estimated_a1c, 1)),
        ("Variabilidad CV (%)", round(m.variability_coefficient, 1)),
        ("Variabilidad", "ALTA (>36%)" if m.high_variability else "ESTABLE"),
        ("Muy bajo <54 (%)", round(tir.very_low, 1)),
        ("Bajo 54-69 (%)", round(tir.low, 1)),
        ("En rango 70-180 (%)", round(tir.in_range, 1)),
        ("Alto 181-250 (%)", round(tir.high, 1)),
        ("Muy alto >250 (%)", round(tir.very_high, 1)),
        (
            "Tiempo en rango",
            "OBJETIVO" if m.meets_range_target else "MEJORABLE (<70%)",
        ),
        ("Hipoglucemias (<70)", m.hypo_count),
        ("Hiperglucemias (>250)", m.hyper_count),
        ("Basal total (U)", round(ins.basal_total, 1)),
        ("Bolo alimento total (U)", round(ins.bolus_food_total, 1)),
        ("Bolo corrección total (U)", round(ins.bolus_correction_total, 1)),
        ("Basal promedio por día (U)", round(ins.basal_average_per_day, 1)),
        ("Basal / total (%)", round(ins.basal_to_bolus_ratio, 1)),
        ("Corrección / alimento", round(ins.correction_to_food_ratio, 2)),
    ]
    return pd.DataFrame(rows, columns=["Métrica", "Valor"])


def comparison_frame(report: GlycemicReport) -> pd.DataFrame:
    """One row per comparison period."""
    rows = []
    for period in report.comparison:
        m = period.metrics
        rows.append(
            {
                "Periodo": period.label,
                "Lecturas": m.total_samples,
                "Promedio (mg/dL)": m.average,
                "GMI (%)": m.estimated_a1c,
                "CV (%)": m.variability_coefficient,
                "Muy bajo (%)": m.time_in_range.very_low,
                "Bajo (%)": m.time_in_range.low,
                "En rango (%)": m.time_in_range.in_range,
                "Alto (%)": m.time_in_range.high,
                "Muy alto (%)": m.time_in_range.very_high,
                "Hipos": m.hypo_count,
                "Hipers": m.hyper_count,
            }
        )
    return pd.DataFrame(rows)


def hourly_frame(report: GlycemicReport) -> pd.DataFrame:
    """24 rows of the circadian profile."""
    return pd.DataFrame(
        [
            {
                "Hora": p.hour,
                "Lecturas": p.samples,
                "Media": p.average,
                "DE": p.std_dev,
                "Media + DE": p.upper,
                "Media - DE": p.lower,
                "Hipos": p.hypo_count,
                "Hipers": p.hyper_count,
                "En rango (%)": p.in_range,
            }
            for p in report.hourly_patterns
        ]
    )


def histogram_frame(report: GlycemicReport) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "Desde (mg/dL)": b.lower,
                "Hasta (mg/dL)": b.lower + HISTOGRAM_WIDTH,
                "Lecturas": b.count,
            }
            for b in report.histogram
        ]
    )


def _entries_frame(df: pd.DataFrame, keep: list[str]) -> pd.DataFrame:
    df = _add_weekday_column(df[keep])
    if "kind" in df.columns:
        df = df.assign(kind=df["kind"].map(_KIND_LABELS))
    return df.rename(columns=_HEADER_MAP)


def write_report_xlsx(
    report: GlycemicReport, out_path: Path, layout: ExcelLayout
) -> None:
    """Write the report as a formatted workbook suitable for printing.

    Args:
        report: Computed glycemic report.
        out_path: Output path for the XLSX file.
        layout: Sheet names.
    """
    out_path.parent.mkdir(parents=True, exist_ok=True)

    sheets = {
        layout.summary_sheet: summary_frame(report),
        layout.comparison_sheet: comparison_frame(report),
        layout.hourly_sheet: hourly_frame(report),
        layout.histogram_sheet: histogram_frame(report),
        layout.glucose_sheet: _entries_frame(
            glucose_to_frame(report.glucose), ["datetime", "glucose_mg_dl"]
        ),
        layout.insulin_sheet: _entries_frame(
            insulin_to_frame(report.insulin), ["datetime", "kind", "units"]
        ),
    }

    with pd.ExcelWriter(out_path, engine="openpyxl") as writer:
        for name, frame in sheets.items():
            frame.to_excel(writer, index=False, sheet_name=name)
            _format_sheet(writer.book[name])


def _style_header_row(ws: Any) -> None:
    for cell in ws[1]:
        cell.font = _BOLD
        cell.alignment = _CENTER
        cell.border = _THIN_BORDER


def _style_body_rows(ws: Any) -> None:
    """Bordes finos, centrado y altura fija en las filas de datos."""
    for row in ws.iter_rows(min_row=2):
        for cell in row:
            cell.alignment = _CENTER
            cell.border = _THIN_BORDER
        ws.row_dimensions[row[0].row].height = _ROW_HEIGHT


def _header_columns(ws: Any) -> dict[str, int]:
    """Cabecera -> índice de columna (1-based)."""
    return {str(cell.value): cell.column for cell in ws[1]}


def _apply_column_widths(ws: Any, col_index: dict[str, int]) -> None:
    """Establece anchos de columna para evitar ###."""
    for header, idx in col_index.items():
        letter = get_column_letter(idx)
        ws.column_dimensions[letter].width = _COLUMN_WIDTHS.get(header, _DEFAULT_WIDTH)


def _apply_number_formats(ws: Any, col_index: dict[str, int]) -> None:
    formats = {
        idx: _NUMBER_FORMATS[header]
        for header, idx in col_index.items()
        if header in _NUMBER_FORMATS
    }
    for row in ws.iter_rows(min_row=2):
        for idx, fmt in formats.items():
            row[idx - 1].number_format = fmt


def _format_sheet(ws: Any) -> None:
    """Apply borders, widths and number formats to a worksheet.

    Args:
        ws: openpyxl worksheet.
    """
    _style_header_row(ws)
    _style_body_rows(ws)
    col_index = _header_columns(ws)
    _apply_column_widths(ws, col_index)
    _apply_number_formats(ws, col_index)
