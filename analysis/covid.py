"""COVID-19 report tables built on the JHU CSSE time series."""

import pandas as pd

from models.schemas import JHU_GLOBAL, JHU_US_CASES, JHU_US_DEATHS

from .pipeline import (
    DATE_COLUMN,
    add_ratio,
    aggregate,
    daily_delta,
    join_long,
    latest_date,
    melt_wide,
    rank_groups,
    with_coordinates,
)

COUNTRY = "Country/Region"
STATE = "Province_State"

CASES_AND_DEATHS = {
    "cases": ("cases", "sum"),
    "deaths": ("deaths", "sum"),
}


def _reported(table: pd.DataFrame) -> pd.DataFrame:
    # days before the first reported case carry no information
    return table[table["cases"] > 0].reset_index(drop=True)


def _cases_and_deaths(
    cases_wide, deaths_wide, cases_schema, deaths_schema, reported_only=True
) -> pd.DataFrame:
    cases = melt_wide(cases_wide, "cases", cases_schema)
    deaths = melt_wide(deaths_wide, "deaths", deaths_schema)
    joined = join_long(
        cases, deaths, on=[*cases_schema.entity_columns, DATE_COLUMN], how="inner"
    )
    return _reported(joined) if reported_only else joined


def global_long(cases_wide: pd.DataFrame, deaths_wide: pd.DataFrame) -> pd.DataFrame:
    return _cases_and_deaths(cases_wide, deaths_wide, JHU_GLOBAL, JHU_GLOBAL)


def us_long(cases_wide: pd.DataFrame, deaths_wide: pd.DataFrame) -> pd.DataFrame:
    """US counties, zero-case rows included.

    A county without cases still belongs to its state's population, so rows
    are only dropped after aggregation (see `daily_totals`, `state_daily`
    and `map_points`).
    """
    return _cases_and_deaths(
        cases_wide, deaths_wide, JHU_US_CASES, JHU_US_DEATHS, reported_only=False
    )


def _with_deltas(table: pd.DataFrame) -> pd.DataFrame:
    table = daily_delta(table, None, "cases")
    return daily_delta(table, None, "deaths")


def country_totals(long: pd.DataFrame) -> pd.DataFrame:
    """Cases, deaths and case fatality rate per country at the latest date."""
    totals = aggregate(
        long,
        by=COUNTRY,
        metrics={
            "total_cases": ("cases", "sum"),
            "total_deaths": ("deaths", "sum"),
        },
        latest=True,
    )
    return add_ratio(totals, "total_deaths", "total_cases", "case_fatality_rate", scale=100)


def top_fatality_countries(
    long: pd.DataFrame,
    min_cases: int = 10000,
    top_n: int = 10,
    ascending: bool = False,
) -> pd.DataFrame:
    """Countries ranked on case fatality rate, ignoring those with few cases."""
    return rank_groups(
        country_totals(long),
        by="case_fatality_rate",
        ascending=ascending,
        top_n=top_n,
        min_values={"total_cases": min_cases},
    )


def daily_totals(long: pd.DataFrame) -> pd.DataFrame:
    """Totals over all entities per date with new cases and deaths."""
    return _with_deltas(_reported(aggregate(long, by=DATE_COLUMN, metrics=CASES_AND_DEATHS)))


def state_totals(long: pd.DataFrame) -> pd.DataFrame:
    """Per-state totals at the latest date, per 100,000 residents and CFR."""
    totals = aggregate(
        long,
        by=STATE,
        metrics={**CASES_AND_DEATHS, "population": ("Population", "sum")},
        latest=True,
    )
    totals = add_ratio(totals, "cases", "population", "cases_per_100k", scale=100000)
    totals = add_ratio(totals, "deaths", "population", "deaths_per_100k", scale=100000)
    return add_ratio(totals, "deaths", "cases", "case_fatality_rate", scale=100)


def state_daily(long: pd.DataFrame, state: str) -> pd.DataFrame:
    """One state's daily series; empty when the state is not in the data."""
    in_state = long[long[STATE] == state]
    daily = aggregate(in_state, by=DATE_COLUMN, metrics=CASES_AND_DEATHS)
    return _with_deltas(_reported(daily)).assign(**{STATE: state})


def map_points(
    long: pd.DataFrame,
    label_columns: list[str],
    value_columns: list[str],
    lat: str = "Lat",
    lon: str = "Long",
) -> pd.DataFrame:
    """Latest values per entity with coordinates, for point maps."""
    latest = _reported(long[long[DATE_COLUMN] == latest_date(long)])
    return with_coordinates(latest[[*label_columns, lat, lon, *value_columns]], lat, lon)
