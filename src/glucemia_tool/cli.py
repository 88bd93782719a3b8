"""CLI para generar el informe glucémico (sensor + registro manual) en Excel."""

from __future__ import annotations

import argparse
import re
import sys
from datetime import datetime
from pathlib import Path

from loguru import logger

from glucemia_tool.errors import ReportError
from glucemia_tool.excel_writer import ExcelLayout, write_report_xlsx
from glucemia_tool.periods import Duration
from glucemia_tool.report import ReportConfig, generate_report


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argparse namespace.
    """
    parser = argparse.ArgumentParser(
        description="Informe glucémico: sensor (LibreView) + registro manual (mySugr)."
    )
    parser.add_argument(
        "--sensor", required=True, help="CSV exportado del sensor (LibreView)."
    )
    parser.add_argument(
        "--manual", required=True, help="CSV del registro manual (mySugr)."
    )
    parser.add_argument(
        "--duration",
        choices=[d.value for d in Duration],
        default=Duration.THREE_MONTHS.value,
        help="Periodo del informe (default: 3m).",
    )
    parser.add_argument("--patient", default="", help="Nombre del paciente.")
    parser.add_argument(
        "--out-dir",
        default=str(Path.cwd() / "salidas"),
        help="Directorio de salida (default: ./salidas).",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Mostrar mensajes de depuración."
    )
    return parser.parse_args(argv)


def configure_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO")


def _slug(name: str) -> str:
    return re.sub(r"[^\w-]+", "_", name.strip()).strip("_") or "paciente"


def main(argv: list[str] | None = None) -> int:
    """Run the report CLI.

    Returns:
        Exit code (0 on success, 1 when the report cannot be built).
    """
    ns = parse_args(argv)
    configure_logging(ns.verbose)

    config = ReportConfig(duration=Duration(ns.duration), patient=ns.patient)
    sensor = Path(ns.sensor).expanduser().resolve()
    manual = Path(ns.manual).expanduser().resolve()

    try:
        report = generate_report(sensor, manual, config)
    except ReportError as exc:
        logger.error(str(exc))
        return 1

    ts = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    out_dir = Path(ns.out_dir).expanduser().resolve()
    out_path = out_dir / f"informe_glucemico_{_slug(report.patient)}_{ts}.xlsx"
    write_report_xlsx(report, out_path, ExcelLayout())

    print(f"OK: Sensor file: {sensor}")
    print(f"OK: Manual file: {manual}")
    print(f"OK: Glucose readings: {len(report.glucose)}")
    print(f"OK: Output: {out_path}")
    return 0
