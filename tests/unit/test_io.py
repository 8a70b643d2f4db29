"""
Tests of covid_analysis.io
"""

from __future__ import annotations

import re

import pandas as pd
import pytest

from covid_analysis.exceptions import MalformedRecord
from covid_analysis.io import (
    CASE_COLUMNS,
    VACCINATION_COLUMNS,
    parse_records,
    read_cases,
    read_vaccinations,
)


def test_read_cases(cases_csv):
    res = read_cases(cases_csv)

    assert res.columns.tolist() == list(CASE_COLUMNS)
    assert len(res) == 7
    assert pd.api.types.is_datetime64_any_dtype(res["date"])
    for col in ["population", "total_cases", "new_cases", "total_deaths", "new_deaths"]:
        assert res[col].dtype == "Int64"

    # Blank and missing continents both come back as missing
    assert res["continent"].isna().sum() == 2
    assert res["total_deaths"].isna().sum() == 1


def test_read_vaccinations(vaccinations_csv):
    res = read_vaccinations(vaccinations_csv)

    assert res.columns.tolist() == list(VACCINATION_COLUMNS)
    new_vaccinations = res["new_vaccinations"]
    assert new_vaccinations.iloc[0] == 100
    assert pd.isna(new_vaccinations.iloc[1])
    assert new_vaccinations.iloc[2] == 50


def _raw(**overrides):
    raw = {
        "location": ["Testland", "Testland"],
        "date": ["2021-01-01", "2021-01-02"],
        "new_vaccinations": ["10", "20"],
    }
    raw.update(overrides)

    return pd.DataFrame(raw, dtype=object)


def test_parse_records_float_counts():
    res = parse_records(_raw(new_vaccinations=["10.0", None]), VACCINATION_COLUMNS)

    assert res["new_vaccinations"].dtype == "Int64"
    assert res["new_vaccinations"].iloc[0] == 10
    assert res["new_vaccinations"].isna().iloc[1]


@pytest.mark.parametrize(
    "overrides, field, value",
    (
        pytest.param({"new_vaccinations": ["10", "abc"]}, "new_vaccinations", "abc", id="text"),
        pytest.param({"new_vaccinations": ["10", "12.5"]}, "new_vaccinations", "12.5", id="fraction"),
        pytest.param({"date": ["2021-01-01", "yesterday"]}, "date", "yesterday", id="date"),
    ),
)
def test_parse_records_malformed(overrides, field, value):
    error_msg = re.escape(f"vacs.csv: Row 2: could not parse {field}={value!r}")
    with pytest.raises(MalformedRecord, match=error_msg) as exc_info:
        parse_records(_raw(**overrides), VACCINATION_COLUMNS, source="vacs.csv")

    assert exc_info.value.row == 2
    assert exc_info.value.field == field
    assert exc_info.value.value == value


def test_parse_records_missing_column():
    raw = _raw().drop(columns="new_vaccinations")

    with pytest.raises(MalformedRecord, match="Required column 'new_vaccinations' is missing") as exc_info:
        parse_records(raw, VACCINATION_COLUMNS)

    assert exc_info.value.row is None


def test_read_cases_malformed_file(tmp_path):
    out = tmp_path / "deaths.csv"
    out.write_text(
        "continent,location,date,population,total_cases,new_cases,total_deaths,new_deaths\n"
        "Europe,Testland,2021-01-01,1000,10,10,,0\n"
        "Europe,Testland,2021-01-02,1000,20,ten,1,1\n"
    )

    with pytest.raises(MalformedRecord, match=re.escape("Row 2: could not parse new_cases='ten'")):
        read_cases(out)


def test_read_cases_date_format(tmp_path):
    out = tmp_path / "deaths.csv"
    out.write_text(
        "continent,location,date,population,total_cases,new_cases,total_deaths,new_deaths\n"
        "Europe,Testland,24/02/2020,1000,10,10,,0\n"
    )

    res = read_cases(out, date_format="%d/%m/%Y")

    assert res["date"].iloc[0] == pd.Timestamp("2020-02-24")
