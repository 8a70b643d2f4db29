"""
Exceptions raised by the analysis
"""

from __future__ import annotations

from typing import Any


class CovidAnalysisError(Exception):
    """Base class for errors raised by covid_analysis"""


class DivisionUndefined(CovidAnalysisError, ZeroDivisionError):
    """
    Raised when a ratio has a zero or null denominator
    """

    def __init__(self, numerator_name: str, denominator_name: str, where: str | None = None) -> None:
        msg = f"{numerator_name} / {denominator_name} is undefined: {denominator_name} is zero or null"
        if where is not None:
            msg = f"{msg} ({where})"

        super().__init__(msg)
        self.numerator_name = numerator_name
        self.denominator_name = denominator_name
        self.where = where


class MalformedRecord(CovidAnalysisError, ValueError):
    """
    Raised when a record can't be parsed

    `row` is the 1-based data row of the offending record,
    or `None` when a whole column is missing.
    """

    def __init__(self, field: str, value: Any = None, row: int | None = None, source: str | None = None) -> None:
        if row is None:
            msg = f"Required column {field!r} is missing"
        else:
            msg = f"Row {row}: could not parse {field}={value!r}"

        if source is not None:
            msg = f"{source}: {msg}"

        super().__init__(msg)
        self.field = field
        self.value = value
        self.row = row
        self.source = source
