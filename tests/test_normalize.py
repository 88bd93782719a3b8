from __future__ import annotations

import math
from datetime import datetime

import pytest

from glucemia_tool.normalize import is_positive, parse_number, parse_timestamp


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("14-03-2024 10:05", datetime(2024, 3, 14, 10, 5)),
        ("14/03/2024 10:05", datetime(2024, 3, 14, 10, 5)),
        ("2024-03-14 10:05", datetime(2024, 3, 14, 10, 5)),
        ("5/3/2024 9:07", datetime(2024, 3, 5, 9, 7)),
        ("14/03/2024 10:05:30", datetime(2024, 3, 14, 10, 5, 30)),
        ("03/14/2024 10:05", datetime(2024, 3, 14, 10, 5)),
        ("2024/03/14 10:05", datetime(2024, 3, 14, 10, 5)),
        ("14.03.2024 10:05", datetime(2024, 3, 14, 10, 5)),
        ("14.03.2024 10:05:30", datetime(2024, 3, 14, 10, 5, 30)),
        ("2024-03-14T10:05:00", datetime(2024, 3, 14, 10, 5)),
        ("  14-03-2024 10:05  ", datetime(2024, 3, 14, 10, 5)),
    ],
)
def test_parse_timestamp_known_formats(raw: str, expected: datetime) -> None:
    assert parse_timestamp(raw) == expected


def test_parse_timestamp_day_first_wins_when_ambiguous() -> None:
    assert parse_timestamp("04/03/2024 10:00") == datetime(2024, 3, 4, 10, 0)


def test_parse_timestamp_falls_back_to_generic_parser() -> None:
    assert parse_timestamp("14 Mar 2024 10:00") == datetime(2024, 3, 14, 10, 0)


def test_parse_timestamp_drops_timezone_keeping_wall_clock() -> None:
    ts = parse_timestamp("2024-03-14 10:00:00+02:00")
    assert ts == datetime(2024, 3, 14, 10, 0)
    assert ts is not None and ts.tzinfo is None


def test_parse_timestamp_custom_formats() -> None:
    assert parse_timestamp("20240314 0800", formats=("%Y%m%d %H%M",)) == datetime(
        2024, 3, 14, 8, 0
    )


@pytest.mark.parametrize("raw", [None, "", "   ", "sin dato", "31/02/2024 10:00"])
def test_parse_timestamp_invalid_returns_none(raw: str | None) -> None:
    assert parse_timestamp(raw) is None


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("180,5 mg/dL", 180.5),
        ("120", 120.0),
        (" 95 ", 95.0),
        ("-3.5", -3.5),
        (".5", 0.5),
        (12, 12.0),
        (7.25, 7.25),
        ("18 U", 18.0),
    ],
)
def test_parse_number_extracts_leading_number(raw: object, expected: float) -> None:
    assert parse_number(raw) == pytest.approx(expected)


@pytest.mark.parametrize("raw", [None, "", "N/A", "abc12", "mg/dL"])
def test_parse_number_without_numeric_prefix_is_nan(raw: object) -> None:
    assert math.isnan(parse_number(raw))


def test_parse_number_only_first_comma_is_decimal() -> None:
    assert parse_number("1,5,0") == pytest.approx(1.5)


def test_is_positive() -> None:
    assert is_positive(1.0)
    assert not is_positive(0.0)
    assert not is_positive(-2.0)
    assert not is_positive(math.nan)
