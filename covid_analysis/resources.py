# resources.py
"""
Dagster resources and run config
"""

import pandas as pd
from dagster import Config, ConfigurableResource
from pydantic import Field

from covid_analysis import config
from covid_analysis.io import read_cases, read_vaccinations


class CovidDataSource(ConfigurableResource):
    """
    Where the case/death and vaccination datasets are read from

    Paths can be local files or URLs.
    """

    cases_path: str = config.COVID_DEATHS_SOURCE
    vaccinations_path: str = config.COVID_VACCINATIONS_SOURCE
    date_format: str = config.DATE_FORMAT

    def load_cases(self) -> pd.DataFrame:
        return read_cases(self.cases_path, date_format=self.date_format)

    def load_vaccinations(self) -> pd.DataFrame:
        return read_vaccinations(self.vaccinations_path, date_format=self.date_format)


class LocationConfig(Config):
    location_pattern: str = Field(
        default=config.DEFAULT_LOCATION_PATTERN,
        description="Case-insensitive substring of the locations to analyse",
    )


class ReportConfig(Config):
    output_dir: str = config.REPORT_DIR
