"""
Re-useable fixtures etc. for tests

See https://docs.pytest.org/en/7.1.x/reference/fixtures.html#conftest-py-sharing-fixtures-across-multiple-files
"""

import pandas as pd
import pytest

CASE_ROWS = [
    # continent, location, date, population, total_cases, new_cases, total_deaths, new_deaths
    ("Europe", "Testland", "2021-01-01", 1000, 10, 10, None, 0),
    ("Europe", "Testland", "2021-01-02", 1000, 20, 10, 1, 1),
    ("Europe", "Testland", "2021-01-03", 1000, 40, 20, 2, 1),
    ("Asia", "Otherland", "2021-01-01", 500, 0, 0, 0, 0),
    ("Asia", "Otherland", "2021-01-02", 500, 50, 50, 5, 5),
    # Aggregate rows
    (None, "World", "2021-01-01", 1500, 10, 10, 0, 0),
    ("", "Europe", "2021-01-01", 1000, 10, 10, 0, 0),
]

VACCINATION_ROWS = [
    # location, date, new_vaccinations
    ("Testland", "2021-01-01", 100),
    ("Testland", "2021-01-02", None),
    ("Testland", "2021-01-03", 50),
    ("Otherland", "2021-01-02", 25),
    ("Nowhere", "2021-01-01", 5),
    ("World", "2021-01-01", 105),
]


def make_cases(rows) -> pd.DataFrame:
    res = pd.DataFrame(
        rows,
        columns=[
            "continent",
            "location",
            "date",
            "population",
            "total_cases",
            "new_cases",
            "total_deaths",
            "new_deaths",
        ],
    )
    res["date"] = pd.to_datetime(res["date"])
    for col in ["population", "total_cases", "new_cases", "total_deaths", "new_deaths"]:
        res[col] = res[col].astype("Int64")

    return res


def make_vaccinations(rows) -> pd.DataFrame:
    res = pd.DataFrame(rows, columns=["location", "date", "new_vaccinations"])
    res["date"] = pd.to_datetime(res["date"])
    res["new_vaccinations"] = res["new_vaccinations"].astype("Int64")

    return res


@pytest.fixture(scope="session", autouse=True)
def pandas_terminal_width():
    # Set pandas terminal width so that error messages don't depend on terminal width.
    pd.set_option("display.width", 120)
    pd.set_option("display.max_columns", 1000)


@pytest.fixture
def cases():
    return make_cases(CASE_ROWS)


@pytest.fixture
def vaccinations():
    return make_vaccinations(VACCINATION_ROWS)


@pytest.fixture
def cases_csv(tmp_path, cases):
    out = tmp_path / "CovidDeaths.csv"
    cases.assign(date=cases["date"].dt.strftime("%Y-%m-%d"), iso_code="XXX").to_csv(
        out, index=False
    )

    return out


@pytest.fixture
def vaccinations_csv(tmp_path, vaccinations):
    out = tmp_path / "CovidVaccinations.csv"
    vaccinations.assign(date=vaccinations["date"].dt.strftime("%Y-%m-%d")).to_csv(
        out, index=False
    )

    return out


@pytest.fixture
def case_frame():
    """Build a case/death frame from rows in the same layout as `CASE_ROWS`"""
    return make_cases


@pytest.fixture
def vaccination_frame():
    """Build a vaccination frame from rows in the same layout as `VACCINATION_ROWS`"""
    return make_vaccinations
