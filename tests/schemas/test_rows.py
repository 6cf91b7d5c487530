# tests/schemas/test_rows.py
import pandas as pd

from allocheck.schemas.rows import as_text, normalize_cell, normalize_row, normalize_rows


def test_normalize_cell_closed_variant():
    """
    @brief
    Every scalar collapses to None, str, int or float.

    @details
    Blank strings, None and NaN are absent; strings are trimmed; numbers keep
    their numeric type; booleans become lowercase text.
    """
    assert normalize_cell(None) is None
    assert normalize_cell("   ") is None
    assert normalize_cell(float("nan")) is None
    assert normalize_cell(pd.NA) is None
    assert normalize_cell("  T1 ") == "T1"
    assert normalize_cell(5) == 5
    assert normalize_cell(2.5) == 2.5
    assert normalize_cell(True) == "true"
    assert normalize_cell([1, 2]) == "[1,2]"
    assert normalize_cell([0, 2.0]) == "[0,2]"


def test_normalize_row_strips_keys():
    assert normalize_row({" TaskID ": "T1", "Duration": ""}) == {"TaskID": "T1", "Duration": None}


def test_normalize_rows_from_dataframe():
    # --- Arrange ---
    df = pd.DataFrame(
        [
            {"WorkerID": "W1", "MaxLoadPerPhase": 2},
            {"WorkerID": "W2", "MaxLoadPerPhase": None},
        ]
    )

    # --- Act ---
    rows = normalize_rows(df)

    # --- Assert ---
    assert [r["WorkerID"] for r in rows] == ["W1", "W2"]
    # pandas widens the column to float; the missing value must come back absent
    assert rows[0]["MaxLoadPerPhase"] == 2
    assert rows[1]["MaxLoadPerPhase"] is None


def test_normalize_rows_none_is_empty():
    assert normalize_rows(None) == []


def test_as_text_drops_integral_float_suffix():
    assert as_text(3.0) == "3"
    assert as_text(3.5) == "3.5"
    assert as_text(None) == ""
