"""Tests for CLI entrypoints."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
from loguru import logger

from glucemia_tool import cli
from glucemia_tool.errors import EmptyDatasetError

SENSOR_CSV = (
    "Device,Device Timestamp,Historic Glucose mg/dL\n"
    "FreeStyle LibreLink,14-03-2024 08:00,95\n"
    "FreeStyle LibreLink,14-03-2024 08:15,110\n"
)
MANUAL_CSV = "Fecha;Hora;Insulina (basal)\n14/03/2024;22:00;18\n"


@pytest.fixture
def exports(tmp_path: Path) -> tuple[Path, Path]:
    sensor = tmp_path / "sensor.csv"
    manual = tmp_path / "manual.csv"
    sensor.write_text(SENSOR_CSV, encoding="utf-8")
    manual.write_text(MANUAL_CSV, encoding="utf-8")
    return sensor, manual


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    yield
    logger.remove()


def test_parse_args_defaults() -> None:
    ns = cli.parse_args(["--sensor", "a.csv", "--manual", "b.csv"])
    assert ns.sensor == "a.csv"
    assert ns.manual == "b.csv"
    assert ns.duration == "3m"
    assert ns.patient == ""
    assert ns.verbose is False
    assert ns.out_dir.endswith("salidas")


def test_parse_args_custom_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "sys.argv",
        [
            "prog",
            "--sensor",
            "s.csv",
            "--manual",
            "m.csv",
            "--duration",
            "max",
            "--patient",
            "Ana Pérez",
            "--out-dir",
            "/tmp/out",
        ],
    )
    ns = cli.parse_args()
    assert ns.duration == "max"
    assert ns.patient == "Ana Pérez"
    assert ns.out_dir == "/tmp/out"


def test_parse_args_rejects_unknown_duration() -> None:
    with pytest.raises(SystemExit):
        cli.parse_args(["--sensor", "a", "--manual", "b", "--duration", "1y"])


def test_main_happy_path(
    exports: tuple[Path, Path],
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    sensor, manual = exports
    out_dir = tmp_path / "salidas"
    code = cli.main(
        [
            "--sensor",
            str(sensor),
            "--manual",
            str(manual),
            "--duration",
            "2w",
            "--patient",
            "Ana Pérez",
            "--out-dir",
            str(out_dir),
        ]
    )
    assert code == 0
    files = list(out_dir.glob("*.xlsx"))
    assert len(files) == 1
    assert files[0].name.startswith("informe_glucemico_Ana_Pérez_")
    printed = capsys.readouterr().out
    assert "OK: Glucose readings: 2" in printed
    assert f"OK: Output: {files[0]}" in printed


def test_main_returns_one_on_report_error(
    monkeypatch: pytest.MonkeyPatch, exports: tuple[Path, Path], tmp_path: Path
) -> None:
    def _generate_report(*_: Any) -> Any:
        raise EmptyDatasetError()

    monkeypatch.setattr(cli, "generate_report", _generate_report)
    sensor, manual = exports
    out_dir = tmp_path / "salidas"
    code = cli.main(
        ["--sensor", str(sensor), "--manual", str(manual), "--out-dir", str(out_dir)]
    )
    assert code == 1
    assert not out_dir.exists()


def test_main_propagates_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        cli.main(
            [
                "--sensor",
                str(tmp_path / "noexiste.csv"),
                "--manual",
                str(tmp_path / "tampoco.csv"),
            ]
        )


def test_slug() -> None:
    assert cli._slug("  Ana Pérez ") == "Ana_Pérez"
    assert cli._slug("../x") == "x"
    assert cli._slug("   ") == "paciente"
