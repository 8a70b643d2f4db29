"""
Analyses of the case/death and vaccination datasets

All functions are pure: they take fully loaded
[pd.DataFrame][pandas.DataFrame]'s (see [covid_analysis.io][])
and return new ones.
Case rows with a null or empty continent are continent or world aggregates,
not countries, so every analysis of the case data drops them first.
"""

from __future__ import annotations

import numpy as np
import pandas as pd
from dagster import get_dagster_logger

from covid_analysis.ratios import with_percentage

KEY_COLUMNS = ["location", "date"]
"""
Columns which identify a record in both datasets
"""

JOINED_COLUMNS = ["continent", "location", "date", "population", "new_vaccinations"]


def filter_real_locations(cases: pd.DataFrame) -> pd.DataFrame:
    """
    Drop continent and world aggregate rows

    These are the rows whose continent is null or blank.
    """
    continent = cases["continent"]
    is_country = continent.notna() & (continent.astype("string").str.strip() != "")

    return cases[is_country.fillna(False).astype(bool)]


def _filter_location(cases: pd.DataFrame, location_pattern: str) -> pd.DataFrame:
    # Same as `location LIKE '%pattern%'` with a case-insensitive collation
    matches = cases["location"].str.contains(location_pattern, case=False, regex=False)

    return cases[matches.fillna(False).astype(bool)]


def join(cases: pd.DataFrame, vaccinations: pd.DataFrame) -> pd.DataFrame:
    """
    Inner join of cases and vaccinations on location and date

    Rows on either side without a match on the other are dropped,
    this isn't an error.
    Aggregate rows (null or blank continent) are dropped from `cases` first.

    Parameters
    ----------
    cases
        Case/death records

    vaccinations
        Vaccination records

    Returns
    -------
    :
        Joined records, with the columns
        continent, location, date, population and new_vaccinations
    """
    real_cases = filter_real_locations(cases)
    res = real_cases[["continent", *KEY_COLUMNS, "population"]].merge(
        vaccinations[[*KEY_COLUMNS, "new_vaccinations"]],
        on=KEY_COLUMNS,
        how="inner",
    )

    get_dagster_logger().debug(
        f"Join kept {len(res)} rows, "
        f"dropped {len(real_cases) - len(res)} case and "
        f"{len(vaccinations) - len(res)} vaccination rows without a match"
    )

    return res[JOINED_COLUMNS].reset_index(drop=True)


def cumulative_vaccinations(joined: pd.DataFrame) -> pd.DataFrame:
    """
    Add the running total of new vaccinations per location

    Within each location, records are ordered by date.
    The sort is stable, so records which share a date
    keep the order they have in `joined`.
    Null `new_vaccinations` count as zero.
    The total includes the record itself.

    Parameters
    ----------
    joined
        Output of [join][covid_analysis.aggregator.join]

    Returns
    -------
    :
        Copy of `joined`, ordered by location then date,
        with a `rolling_vaccinated` column
    """
    res = joined.sort_values(KEY_COLUMNS, kind="stable").reset_index(drop=True)
    res["rolling_vaccinated"] = (
        res["new_vaccinations"]
        .fillna(0)
        .astype("Int64")
        .groupby(res["location"], sort=False)
        .cumsum()
    )

    return res


def percent_population_vaccinated(
    cases: pd.DataFrame, vaccinations: pd.DataFrame, on_undefined: str = "raise"
) -> pd.DataFrame:
    """
    Rolling vaccinations per location and the share of the population they cover

    This is [join][covid_analysis.aggregator.join] followed by
    [cumulative_vaccinations][covid_analysis.aggregator.cumulative_vaccinations]
    with a `percent_vaccinated` column (2 decimal places) added.
    `on_undefined` is passed to [with_percentage][covid_analysis.ratios.with_percentage].
    """
    rolling = cumulative_vaccinations(join(cases, vaccinations))

    return with_percentage(
        rolling,
        numerator="rolling_vaccinated",
        denominator="population",
        name="percent_vaccinated",
        digits=2,
        on_undefined=on_undefined,
    ).reset_index(drop=True)


def overview(cases: pd.DataFrame) -> pd.DataFrame:
    """
    Cases, deaths and population of each country over time
    """
    res = filter_real_locations(cases)[
        [*KEY_COLUMNS, "total_cases", "new_cases", "total_deaths", "population"]
    ]

    return res.sort_values(KEY_COLUMNS, kind="stable").reset_index(drop=True)


def location_death_rates(cases: pd.DataFrame, location_pattern: str) -> pd.DataFrame:
    """
    Death percentage over time for the locations matching `location_pattern`

    Matching is a case-insensitive substring match.
    Rows without cases are left out, so the percentage is always defined.
    """
    res = _filter_location(filter_real_locations(cases), location_pattern)
    res = res[res["total_cases"].fillna(0) > 0]
    res = with_percentage(
        res[[*KEY_COLUMNS, "total_cases", "total_deaths"]],
        numerator="total_deaths",
        denominator="total_cases",
        name="death_percentage",
        digits=2,
    )

    return res.sort_values(KEY_COLUMNS, kind="stable").reset_index(drop=True)


def location_infection_rates(
    cases: pd.DataFrame, location_pattern: str, on_undefined: str = "raise"
) -> pd.DataFrame:
    """
    Share of the population infected over time for the locations matching `location_pattern`
    """
    res = _filter_location(filter_real_locations(cases), location_pattern)
    res = with_percentage(
        res[[*KEY_COLUMNS, "population", "total_cases"]],
        numerator="total_cases",
        denominator="population",
        name="infected_population_perc",
        digits=4,
        on_undefined=on_undefined,
    )

    return res.sort_values(KEY_COLUMNS, kind="stable").reset_index(drop=True)


def highest_infection_by_location(cases: pd.DataFrame) -> pd.DataFrame:
    """
    Highest case count and highest infected share of the population per location

    The two maxima are taken independently,
    so they don't have to come from the same date.
    Rows with a zero or null population don't contribute to the share.

    Returns
    -------
    :
        Indexed by location, ordered by `highest_infected_population_perc`
        (largest first)
    """
    real = filter_real_locations(cases)
    infected_perc = with_percentage(
        real,
        numerator="total_cases",
        denominator="population",
        name="infected_perc",
        digits=None,
        on_undefined="null",
    )["infected_perc"]

    grouped = real.assign(infected_perc=infected_perc).groupby("location")
    res = pd.DataFrame(
        {
            "population": grouped["population"].max(),
            "highest_infection_count": grouped["total_cases"].max(),
            "highest_infected_population_perc": grouped["infected_perc"].max().round(4),
        }
    )

    return res.sort_values(
        "highest_infected_population_perc", ascending=False, kind="stable"
    )


def highest_death_count_by_location(cases: pd.DataFrame) -> pd.DataFrame:
    """
    Highest death count per location, largest first
    """
    res = (
        filter_real_locations(cases)
        .groupby("location")["total_deaths"]
        .max()
        .rename("highest_death_count")
        .to_frame()
    )

    return res.sort_values("highest_death_count", ascending=False, kind="stable")


def death_count_by_continent(cases: pd.DataFrame) -> pd.DataFrame:
    """
    Highest death count of any country in each continent, largest first
    """
    # Matches the original analysis: the largest single country total,
    # not the sum over the continent's countries
    res = (
        filter_real_locations(cases)
        .groupby("continent")["total_deaths"]
        .max()
        .rename("total_death_count")
        .to_frame()
    )

    return res.sort_values("total_death_count", ascending=False, kind="stable")


def global_daily_totals(cases: pd.DataFrame) -> pd.DataFrame:
    """
    New cases and deaths summed over all countries for each date

    Returns
    -------
    :
        One row per date, in date order, with columns
        date, total_cases, total_deaths and death_pct.
        `death_pct` is zero on dates without any new cases.
    """
    grouped = filter_real_locations(cases).groupby("date", sort=True)
    res = pd.DataFrame(
        {
            "total_cases": grouped["new_cases"].sum(),
            "total_deaths": grouped["new_deaths"].sum(),
        }
    )

    total_cases = res["total_cases"].astype("float64")
    total_deaths = res["total_deaths"].astype("float64")
    with np.errstate(divide="ignore", invalid="ignore"):
        res["death_pct"] = np.where(
            total_cases > 0, total_deaths / total_cases * 100, 0.0
        )

    return res.reset_index()


def global_summary(cases: pd.DataFrame) -> pd.DataFrame:
    """
    Single row summary of the whole pandemic

    Totals are the sums of [global_daily_totals][covid_analysis.aggregator.global_daily_totals],
    `avg_death_percentage` is the mean of the daily death percentages
    (rounded to 2 decimal places).
    """
    daily = global_daily_totals(cases)
    avg_death_percentage = round(float(daily["death_pct"].mean()), 2) if len(daily) else np.nan

    return pd.DataFrame(
        {
            "global_total_cases": [int(daily["total_cases"].sum())],
            "global_total_deaths": [int(daily["total_deaths"].sum())],
            "avg_death_percentage": [avg_death_percentage],
        }
    )
