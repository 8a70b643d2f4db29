"""
Percentage helpers

The scalar helpers raise [DivisionUndefined][covid_analysis.exceptions.DivisionUndefined]
when the denominator is zero or null.
[with_percentage][covid_analysis.ratios.with_percentage] applies the same
calculation to a whole column and lets the caller decide
what to do with rows where the percentage is undefined.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

import pandas as pd

from covid_analysis.exceptions import DivisionUndefined

ON_UNDEFINED_OPTIONS = ("raise", "null", "skip")
"""
Supported values for `on_undefined`
"""


def describe_row(row: Mapping[str, Any]) -> str:
    """
    Describe a row by its key fields, for use in error messages
    """
    parts = []
    for key in ("location", "date", "continent"):
        if key not in row:
            continue

        value = row[key]
        if isinstance(value, pd.Timestamp):
            parts.append(f"{key}={value.date().isoformat()}")
        else:
            parts.append(f"{key}={value!r}")

    return ", ".join(parts)


def _percentage(
    numerator: Any,
    denominator: Any,
    digits: int,
    numerator_name: str,
    denominator_name: str,
    where: Optional[str] = None,
) -> Optional[float]:
    if pd.isna(denominator) or denominator == 0:
        raise DivisionUndefined(numerator_name, denominator_name, where=where)

    if pd.isna(numerator):
        # Null numerator propagates, like in SQL
        return None

    return round(float(numerator) / float(denominator) * 100, digits)


def percent_vaccinated(record: Mapping[str, Any]) -> Optional[float]:
    """
    Percentage of the population vaccinated so far

    Parameters
    ----------
    record
        Joined record, must have `rolling_vaccinated` and `population`

    Returns
    -------
    :
        `rolling_vaccinated / population * 100`, rounded to 2 decimal places

    Raises
    ------
    DivisionUndefined
        `population` is zero or null
    """
    return _percentage(
        record["rolling_vaccinated"],
        record["population"],
        digits=2,
        numerator_name="rolling_vaccinated",
        denominator_name="population",
        where=describe_row(record),
    )


def death_percentage(total_deaths: Any, total_cases: Any) -> Optional[float]:
    """
    Likelihood of dying once infected, rounded to 2 decimal places

    Returns `None` if `total_deaths` is null.
    Raises [DivisionUndefined][covid_analysis.exceptions.DivisionUndefined]
    if `total_cases` is zero or null,
    callers have to filter or guard those rows themselves.
    """
    return _percentage(
        total_deaths,
        total_cases,
        digits=2,
        numerator_name="total_deaths",
        denominator_name="total_cases",
    )


def infection_percentage(total_cases: Any, population: Any) -> Optional[float]:
    """
    Share of the population infected, rounded to 4 decimal places
    """
    return _percentage(
        total_cases,
        population,
        digits=4,
        numerator_name="total_cases",
        denominator_name="population",
    )


def with_percentage(
    indf: pd.DataFrame,
    numerator: str,
    denominator: str,
    name: str,
    digits: Optional[int],
    on_undefined: str = "raise",
) -> pd.DataFrame:
    """
    Add a percentage column to a [pd.DataFrame][pandas.DataFrame]

    Parameters
    ----------
    indf
        Data to which to add the column

    numerator
        Column to use as the numerator

    denominator
        Column to use as the denominator

    name
        Name of the new column

    digits
        Number of decimal places to round to, `None` to leave unrounded

    on_undefined
        What to do with rows where `denominator` is zero or null.

        - "raise": raise a `DivisionUndefined` naming the first such row
        - "null": the percentage is null for those rows
        - "skip": drop those rows from the output

    Returns
    -------
    :
        Copy of `indf` with the `name` column added

    Raises
    ------
    DivisionUndefined
        `on_undefined` is "raise" and there are rows with an undefined percentage
    """
    if on_undefined not in ON_UNDEFINED_OPTIONS:
        raise NotImplementedError(on_undefined)

    undefined = indf[denominator].isna() | indf[denominator].fillna(0).eq(0)
    if undefined.any():
        if on_undefined == "raise":
            raise DivisionUndefined(
                numerator, denominator, where=describe_row(indf[undefined].iloc[0])
            )

        if on_undefined == "skip":
            indf = indf[~undefined]

    res = indf.copy()
    numerator_values = res[numerator].astype("float64")
    denominator_values = res[denominator].astype("float64")
    denominator_values = denominator_values.where(denominator_values != 0)
    res[name] = numerator_values / denominator_values * 100
    if digits is not None:
        res[name] = res[name].round(digits)

    return res
