"""
Loading of the case/death and vaccination datasets
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

import numpy as np
import pandas as pd
from dagster import get_dagster_logger

from covid_analysis.exceptions import MalformedRecord

CASE_COLUMNS: dict[str, str] = {
    "continent": "text",
    "location": "text",
    "date": "date",
    "population": "integer",
    "total_cases": "integer",
    "new_cases": "integer",
    "total_deaths": "integer",
    "new_deaths": "integer",
}
"""
Columns kept from the case/death dataset and how each one is parsed
"""

VACCINATION_COLUMNS: dict[str, str] = {
    "location": "text",
    "date": "date",
    "new_vaccinations": "integer",
}
"""
Columns kept from the vaccination dataset and how each one is parsed
"""

DEFAULT_DATE_FORMAT = "ISO8601"

SourceLike = Union[str, Path]


def _first_bad_row(bad: pd.Series) -> int:
    # 1-based data row, the header line isn't counted
    return int(np.flatnonzero(bad.to_numpy(dtype=bool))[0]) + 1


def _parse_column(
    raw: pd.Series, kind: str, date_format: str, source: Optional[str]
) -> pd.Series:
    if kind == "text":
        return raw.str.strip()

    if kind == "date":
        parsed = pd.to_datetime(raw, errors="coerce", format=date_format)
    elif kind == "integer":
        parsed = pd.to_numeric(raw, errors="coerce")
        # Values like "12.0" are fine, "12.5" isn't a count
        parsed = parsed.where(parsed.isna() | (parsed % 1 == 0), np.nan)
    else:
        raise NotImplementedError(kind)

    bad = raw.notna() & parsed.isna()
    if bad.any():
        row = _first_bad_row(bad)
        raise MalformedRecord(
            field=str(raw.name), value=raw.iloc[row - 1], row=row, source=source
        )

    if kind == "integer":
        return parsed.astype("Int64")

    return parsed


def parse_records(
    raw: pd.DataFrame,
    columns: dict[str, str],
    date_format: str = DEFAULT_DATE_FORMAT,
    source: Optional[str] = None,
) -> pd.DataFrame:
    """
    Parse raw (string) records into typed columns

    Parameters
    ----------
    raw
        Raw records, as read from the file.
        Columns not in `columns` are ignored.

    columns
        Columns to keep, mapped to how to parse them
        ("text", "date" or "integer")

    date_format
        Format of the date column, passed to [pd.to_datetime][pandas.to_datetime]

    source
        Name of the source, used in error messages

    Returns
    -------
    :
        Parsed records, integer columns use the nullable `Int64` dtype

    Raises
    ------
    MalformedRecord
        A required column is missing or a value can't be parsed
    """
    missing = [c for c in columns if c not in raw.columns]
    if missing:
        raise MalformedRecord(field=missing[0], source=source)

    res = pd.DataFrame(
        {
            col: _parse_column(
                raw[col].reset_index(drop=True), kind, date_format, source
            )
            for col, kind in columns.items()
        }
    )

    return res


def _read(
    source: SourceLike, columns: dict[str, str], date_format: str
) -> pd.DataFrame:
    raw = pd.read_csv(source, dtype=str, skipinitialspace=True)
    res = parse_records(raw, columns, date_format=date_format, source=str(source))
    get_dagster_logger().info(f"Loaded {len(res)} records from {source}")

    return res


def read_cases(
    source: SourceLike, date_format: str = DEFAULT_DATE_FORMAT
) -> pd.DataFrame:
    """
    Read the case/death dataset from a CSV file or URL
    """
    return _read(source, CASE_COLUMNS, date_format)


def read_vaccinations(
    source: SourceLike, date_format: str = DEFAULT_DATE_FORMAT
) -> pd.DataFrame:
    """
    Read the vaccination dataset from a CSV file or URL
    """
    return _read(source, VACCINATION_COLUMNS, date_format)
