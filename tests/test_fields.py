from __future__ import annotations

from glucemia_tool.fields import GLUCOSE_FIELDS, find_column, value_by_priority


def test_candidate_priority_beats_column_order() -> None:
    record = {"Scan Glucose mg/dL": "90", "Historic Glucose mg/dL": "100"}
    assert value_by_priority(record, GLUCOSE_FIELDS) == "100"


def test_match_ignores_case_and_whitespace() -> None:
    record = {"  HISTORIC GLUCOSE MG/DL ": "5"}
    assert value_by_priority(record, ["historic glucose"]) == "5"
    assert value_by_priority({"Basal Insulin": "12"}, ["  basal "]) == "12"


def test_first_match_is_returned_even_when_empty() -> None:
    record = {"Historic Glucose mg/dL": "", "Blood Sugar": "120"}
    assert value_by_priority(record, GLUCOSE_FIELDS) == ""


def test_no_match_returns_none() -> None:
    assert value_by_priority({"Notes": "x"}, GLUCOSE_FIELDS) is None
    assert value_by_priority({}, GLUCOSE_FIELDS) is None


def test_spanish_column_names() -> None:
    record = {"Fecha": "14/03/2024", "Glucosa histórica mg/dL": "130"}
    assert value_by_priority(record, GLUCOSE_FIELDS) == "130"


def test_find_column_uses_column_order_for_same_candidate() -> None:
    columns = ["Food Bolus", "Correction Bolus"]
    assert find_column(columns, ["Bolus"]) == "Food Bolus"
    assert find_column(columns, ["Correction", "Bolus"]) == "Correction Bolus"
    assert find_column(columns, ["Basal"]) is None
