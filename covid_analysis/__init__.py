from dagster import Definitions
from .assets import (
    covid_deaths,
    covid_vaccinations,
    percent_population_vaccinated,
    covid_overview,
    death_rate_by_location,
    infection_rate_by_location,
    highest_infection_rates,
    highest_death_counts,
    continent_death_counts,
    global_daily_totals,
    global_summary,
    covid_excel_report,
    check_case_columns,
    check_vaccination_columns,
    check_unique_case_location_date,
    check_unique_vaccination_location_date,
    check_population_positive,
    check_new_cases_non_negative,
    check_rolling_matches_total
)
from .resources import CovidDataSource

defs = Definitions(
    assets=[
        covid_deaths,
        covid_vaccinations,
        percent_population_vaccinated,
        covid_overview,
        death_rate_by_location,
        infection_rate_by_location,
        highest_infection_rates,
        highest_death_counts,
        continent_death_counts,
        global_daily_totals,
        global_summary,
        covid_excel_report
    ],
    asset_checks=[
        check_case_columns,
        check_vaccination_columns,
        check_unique_case_location_date,
        check_unique_vaccination_location_date,
        check_population_positive,
        check_new_cases_non_negative,
        check_rolling_matches_total
    ],
    resources={
        "covid_source": CovidDataSource()
    }
)
