# config.py
"""
Default locations and settings, each can be overridden with an environment variable
"""

import os

COVID_DEATHS_SOURCE = os.getenv("COVID_DEATHS_CSV", "CovidDeaths.csv")
COVID_VACCINATIONS_SOURCE = os.getenv("COVID_VACCINATIONS_CSV", "CovidVaccinations.csv")
DATE_FORMAT = os.getenv("COVID_DATE_FORMAT", "ISO8601")

# Locations for the per-country analyses, substring match as in `LIKE '%ndia%'`
DEFAULT_LOCATION_PATTERN = os.getenv("COVID_LOCATION_PATTERN", "ndia")

REPORT_DIR = os.getenv("COVID_REPORT_DIR", os.getcwd())
