"""Schema descriptors for the wide and incident tables read by the sources.

A `WideSchema` tells the reshaper which columns describe an entity and how
to recognize and parse the per-day observation columns, so the reshaper
never has to guess from the data.
"""

from dataclasses import dataclass, replace
from typing import Iterable


@dataclass(frozen=True)
class WideSchema:
    """Describes a wide table: entity attributes plus one column per date."""

    attribute_columns: tuple[str, ...] = ()
    entity_columns: tuple[str, ...] = ()
    date_prefix: str = "X"
    date_format: str = "%m.%d.%y"

    def is_date_column(self, column: str) -> bool:
        return (
            column not in self.attribute_columns
            and str(column).startswith(self.date_prefix)
        )

    def date_columns(self, columns: Iterable[str]) -> list[str]:
        """Columns holding per-day observations, in input order."""
        return [c for c in columns if self.is_date_column(c)]

    def attributes(self, columns: Iterable[str]) -> list[str]:
        """Every column that is not a date column, in input order."""
        return [c for c in columns if not self.is_date_column(c)]

    def missing_attributes(self, columns: Iterable[str]) -> list[str]:
        present = set(columns)
        return [c for c in self.attribute_columns if c not in present]

    def strip_prefix(self, column: str) -> str:
        return str(column)[len(self.date_prefix):]


# Default rule: date headers turned into identifiers, e.g. "X1.22.20"
DEFAULT_SCHEMA = WideSchema()

# JHU CSSE time series, headers as published ("1/22/20")
JHU_GLOBAL = WideSchema(
    attribute_columns=("Province/State", "Country/Region", "Lat", "Long"),
    entity_columns=("Province/State", "Country/Region"),
    date_prefix="",
    date_format="%m/%d/%y",
)

JHU_US_CASES = WideSchema(
    attribute_columns=(
        "UID", "iso2", "iso3", "code3", "FIPS", "Admin2",
        "Province_State", "Country_Region", "Lat", "Long_",
        "Combined_Key",
    ),
    entity_columns=("Combined_Key",),
    date_prefix="",
    date_format="%m/%d/%y",
)

# The US deaths file carries county population next to the attributes
JHU_US_DEATHS = replace(
    JHU_US_CASES,
    attribute_columns=JHU_US_CASES.attribute_columns + ("Population",),
)

# NYPD Shooting Incident Data (Historic)
NYPD_SHOOTING_COLUMNS = (
    "INCIDENT_KEY", "OCCUR_DATE", "OCCUR_TIME", "BORO", "PRECINCT",
    "JURISDICTION_CODE", "LOCATION_DESC", "STATISTICAL_MURDER_FLAG",
    "PERP_AGE_GROUP", "PERP_SEX", "PERP_RACE",
    "VIC_AGE_GROUP", "VIC_SEX", "VIC_RACE",
    "Latitude", "Longitude",
)

NYPD_REQUIRED_COLUMNS = ("INCIDENT_KEY", "OCCUR_DATE", "BORO", "STATISTICAL_MURDER_FLAG")
