# assets.py
import os
from datetime import datetime

import pandas as pd
from dagster import (
    asset, AssetCheckResult, asset_check, AssetExecutionContext,
    AssetCheckSeverity, MetadataValue
)

from covid_analysis import aggregator
from covid_analysis.io import CASE_COLUMNS, VACCINATION_COLUMNS
from covid_analysis.resources import CovidDataSource, LocationConfig, ReportConfig

# ------------------ SOURCES ------------------

@asset
def covid_deaths(context: AssetExecutionContext, covid_source: CovidDataSource) -> pd.DataFrame:
    df = covid_source.load_cases()
    context.log.info(f"Case/death records read from {covid_source.cases_path}")
    context.add_output_metadata({
        "registros": MetadataValue.int(len(df)),
        "locations": MetadataValue.int(int(df["location"].nunique())),
    })
    return df

@asset
def covid_vaccinations(context: AssetExecutionContext, covid_source: CovidDataSource) -> pd.DataFrame:
    df = covid_source.load_vaccinations()
    context.log.info(f"Vaccination records read from {covid_source.vaccinations_path}")
    context.add_output_metadata({
        "registros": MetadataValue.int(len(df)),
        "locations": MetadataValue.int(int(df["location"].nunique())),
    })
    return df

# ------------------ CHECKS ------------------

def _check_columns(df: pd.DataFrame, columns) -> AssetCheckResult:
    faltantes = [c for c in columns if c not in df.columns]
    passed = len(faltantes) == 0
    return AssetCheckResult(
        passed=passed,
        description="All columns present" if passed else f"Missing columns: {faltantes}",
        severity=AssetCheckSeverity.ERROR,
        metadata={
            "columnas_faltantes": MetadataValue.json(faltantes),
            "columnas_presentes": MetadataValue.json([c for c in columns if c in df.columns])
        }
    )

def _check_unique_location_date(df: pd.DataFrame) -> AssetCheckResult:
    dup = int(df.duplicated(subset=aggregator.KEY_COLUMNS).sum())
    passed = dup == 0
    return AssetCheckResult(
        passed=passed,
        description="No duplicates" if passed else f"{dup} duplicated (location, date) pairs",
        severity=AssetCheckSeverity.ERROR,
        metadata={"duplicados": MetadataValue.int(dup)}
    )

@asset_check(asset=covid_deaths, name="check_case_columns")
def check_case_columns(covid_deaths: pd.DataFrame) -> AssetCheckResult:
    return _check_columns(covid_deaths, CASE_COLUMNS)

@asset_check(asset=covid_vaccinations, name="check_vaccination_columns")
def check_vaccination_columns(covid_vaccinations: pd.DataFrame) -> AssetCheckResult:
    return _check_columns(covid_vaccinations, VACCINATION_COLUMNS)

@asset_check(asset=covid_deaths, name="check_unique_case_location_date")
def check_unique_case_location_date(covid_deaths: pd.DataFrame) -> AssetCheckResult:
    return _check_unique_location_date(covid_deaths)

@asset_check(asset=covid_vaccinations, name="check_unique_vaccination_location_date")
def check_unique_vaccination_location_date(covid_vaccinations: pd.DataFrame) -> AssetCheckResult:
    return _check_unique_location_date(covid_vaccinations)

@asset_check(asset=covid_deaths, name="check_population_positive")
def check_population_positive(covid_deaths: pd.DataFrame) -> AssetCheckResult:
    # Aggregate rows don't take part in any ratio
    population = aggregator.filter_real_locations(covid_deaths)["population"]
    neg = int((population.fillna(0) <= 0).sum())
    passed = neg == 0
    return AssetCheckResult(
        passed=passed,
        description="Population positive" if passed else f"{neg} zero, negative or missing values",
        severity=AssetCheckSeverity.WARN,
        metadata={"filas_afectadas": MetadataValue.int(neg)}
    )

@asset_check(asset=covid_deaths, name="check_new_cases_non_negative")
def check_new_cases_non_negative(covid_deaths: pd.DataFrame) -> AssetCheckResult:
    neg = int((covid_deaths["new_cases"].fillna(0) < 0).sum())
    passed = neg == 0
    return AssetCheckResult(
        passed=passed,
        description="new_cases non-negative" if passed else f"{neg} negative values",
        severity=AssetCheckSeverity.WARN,
        metadata={"filas_afectadas": MetadataValue.int(neg)}
    )

# ------------------ VACCINATION VIEW ------------------

@asset
def percent_population_vaccinated(context: AssetExecutionContext, covid_deaths: pd.DataFrame,
                                  covid_vaccinations: pd.DataFrame) -> pd.DataFrame:
    df = aggregator.percent_population_vaccinated(covid_deaths, covid_vaccinations, on_undefined="null")
    sin_poblacion = int(df["percent_vaccinated"].isna().sum())
    if sin_poblacion:
        context.log.warning(f"{sin_poblacion} rows without population, percent_vaccinated left empty")
    context.add_output_metadata({
        "registros": MetadataValue.int(len(df)),
        "locations": MetadataValue.int(int(df["location"].nunique())),
        "sin_poblacion": MetadataValue.int(sin_poblacion),
    })
    return df

@asset_check(asset=percent_population_vaccinated, name="check_rolling_matches_total")
def check_rolling_matches_total(percent_population_vaccinated: pd.DataFrame) -> AssetCheckResult:
    df = percent_population_vaccinated
    grouped = df.groupby("location", sort=False)
    ultimo = grouped["rolling_vaccinated"].last()
    total = grouped["new_vaccinations"].sum()
    distintos = sorted(ultimo.index[(ultimo != total).to_numpy(dtype=bool)])
    passed = len(distintos) == 0
    return AssetCheckResult(
        passed=passed,
        description="Rolling totals consistent" if passed else f"Rolling total differs for {distintos}",
        severity=AssetCheckSeverity.ERROR,
        metadata={"locations_afectadas": MetadataValue.json(distintos)}
    )

# ------------------ ANALYSES ------------------

@asset
def covid_overview(covid_deaths: pd.DataFrame) -> pd.DataFrame:
    return aggregator.overview(covid_deaths)

@asset
def death_rate_by_location(context: AssetExecutionContext, config: LocationConfig,
                           covid_deaths: pd.DataFrame) -> pd.DataFrame:
    context.log.info(f"Death rate for locations matching {config.location_pattern!r}")
    return aggregator.location_death_rates(covid_deaths, config.location_pattern)

@asset
def infection_rate_by_location(context: AssetExecutionContext, config: LocationConfig,
                               covid_deaths: pd.DataFrame) -> pd.DataFrame:
    context.log.info(f"Infection rate for locations matching {config.location_pattern!r}")
    return aggregator.location_infection_rates(covid_deaths, config.location_pattern, on_undefined="null")

@asset
def highest_infection_rates(covid_deaths: pd.DataFrame) -> pd.DataFrame:
    return aggregator.highest_infection_by_location(covid_deaths)

@asset
def highest_death_counts(covid_deaths: pd.DataFrame) -> pd.DataFrame:
    return aggregator.highest_death_count_by_location(covid_deaths)

@asset
def continent_death_counts(covid_deaths: pd.DataFrame) -> pd.DataFrame:
    return aggregator.death_count_by_continent(covid_deaths)

@asset
def global_daily_totals(covid_deaths: pd.DataFrame) -> pd.DataFrame:
    return aggregator.global_daily_totals(covid_deaths)

@asset
def global_summary(context: AssetExecutionContext, covid_deaths: pd.DataFrame) -> pd.DataFrame:
    df = aggregator.global_summary(covid_deaths)
    fila = df.iloc[0]
    context.add_output_metadata({
        "global_total_cases": MetadataValue.int(int(fila["global_total_cases"])),
        "global_total_deaths": MetadataValue.int(int(fila["global_total_deaths"])),
        "avg_death_percentage": MetadataValue.float(float(fila["avg_death_percentage"])),
    })
    return df

# ------------------ REPORT ------------------

@asset
def covid_excel_report(context: AssetExecutionContext, config: ReportConfig,
                       covid_overview: pd.DataFrame, death_rate_by_location: pd.DataFrame,
                       infection_rate_by_location: pd.DataFrame, highest_infection_rates: pd.DataFrame,
                       highest_death_counts: pd.DataFrame, continent_death_counts: pd.DataFrame,
                       global_daily_totals: pd.DataFrame, global_summary: pd.DataFrame,
                       percent_population_vaccinated: pd.DataFrame) -> str:
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    archivo = os.path.join(config.output_dir, f"reporte_covid_{timestamp}.xlsx")
    hojas = {
        "Overview": covid_overview,
        "Death_Rate": death_rate_by_location,
        "Infection_Rate": infection_rate_by_location,
        "Highest_Infection": highest_infection_rates.reset_index(),
        "Highest_Deaths": highest_death_counts.reset_index(),
        "Continent_Deaths": continent_death_counts.reset_index(),
        "Global_Daily": global_daily_totals,
        "Global_Summary": global_summary,
        "Percent_Vaccinated": percent_population_vaccinated,
    }
    with pd.ExcelWriter(archivo, engine='openpyxl') as writer:
        for hoja, df in hojas.items():
            df.to_excel(writer, sheet_name=hoja, index=False)
    context.log.info(f"Reporte exportado: {archivo}")
    return archivo
