"""NYPD shooting incident report tables.

The source has one row per victim; several rows can share an
`INCIDENT_KEY`. Incident counts therefore use distinct keys, victim counts
use rows.
"""

import numpy as np
import pandas as pd

from models.schemas import NYPD_REQUIRED_COLUMNS

from .pipeline import add_ratio, aggregate, rank_groups, with_coordinates

NULL_MARKERS = ["", "(null)", "(NULL)"]
TRUE_MARKERS = ["true", "1", "y", "yes"]

INCIDENT_COUNTS = {
    "incidents": ("INCIDENT_KEY", "nunique"),
    "victims": ("INCIDENT_KEY", "size"),
}


def _strip(value):
    return value.strip() if isinstance(value, str) else value


def prepare_incidents(raw: pd.DataFrame) -> pd.DataFrame:
    """Normalize null markers, parse timestamps and the murder flag.

    "UNKNOWN" and "U" are real categories in the data and are kept; only
    empty strings and "(null)" become missing values. Dates or times that do
    not parse become `NaT`.
    """
    missing = [c for c in NYPD_REQUIRED_COLUMNS if c not in raw.columns]
    if missing:
        raise ValueError(f"Incident table is missing required columns: {missing}")

    df = raw.copy()
    for col in df.columns:
        if pd.api.types.is_object_dtype(df[col]) or pd.api.types.is_string_dtype(df[col]):
            # read_csv leaves partly empty true/false columns as object bools
            df[col] = df[col].map(_strip).replace(NULL_MARKERS, np.nan)

    occur_date = pd.to_datetime(df["OCCUR_DATE"], format="%m/%d/%Y", errors="coerce")
    if "OCCUR_TIME" in df.columns:
        occur_time = pd.to_timedelta(df["OCCUR_TIME"], errors="coerce")
    else:
        occur_time = pd.Series(pd.NaT, index=df.index, dtype="timedelta64[ns]")

    flag = df["STATISTICAL_MURDER_FLAG"].astype(str).str.strip().str.lower()

    return df.assign(
        STATISTICAL_MURDER_FLAG=flag.isin(TRUE_MARKERS),
        occurred_on=occur_date,
        occurred_at=occur_date + occur_time,
        year=occur_date.dt.year.astype("Int64"),
        month=occur_date.dt.month.astype("Int64"),
        weekday=occur_date.dt.day_name(),
        hour=(occur_time // pd.Timedelta(hours=1)).astype("Int64"),
    )


def counts_by(incidents: pd.DataFrame, by: str | list[str]) -> pd.DataFrame:
    """Incidents and victims per group, most incidents first."""
    counts = aggregate(incidents, by=by, metrics=INCIDENT_COUNTS)
    return rank_groups(counts, by="incidents")


def murder_rate_by(incidents: pd.DataFrame, by: str | list[str]) -> pd.DataFrame:
    """Share of victims whose shooting was classified as a murder, in percent."""
    counts = aggregate(
        incidents,
        by=by,
        metrics={
            "victims": ("INCIDENT_KEY", "size"),
            "murders": ("STATISTICAL_MURDER_FLAG", "sum"),
        },
    )
    rates = add_ratio(counts, "murders", "victims", "murder_rate", scale=100)
    return rank_groups(rates, by="murder_rate")


def yearly_trend(incidents: pd.DataFrame, by: str | None = None) -> pd.DataFrame:
    keys = ["year"] + ([by] if by else [])
    return aggregate(incidents, by=keys, metrics=INCIDENT_COUNTS)


def hourly_profile(incidents: pd.DataFrame) -> pd.DataFrame:
    """Incidents per hour of day, 0 to 23, including hours without any."""
    timed = incidents[incidents["hour"].notna()]
    counts = aggregate(timed, by="hour", metrics={"incidents": ("INCIDENT_KEY", "nunique")})
    counts["hour"] = counts["hour"].astype(int)
    return (
        counts.set_index("hour")
        .reindex(range(24), fill_value=0)
        .rename_axis("hour")
        .reset_index()
    )


def victim_profile(incidents: pd.DataFrame, column: str) -> pd.DataFrame:
    """Victims per value of a demographic column with their share in percent."""
    counts = aggregate(incidents, by=column, metrics={"victims": ("INCIDENT_KEY", "size")})
    shares = add_ratio(counts, "victims", len(incidents), "share", scale=100)
    return rank_groups(shares, by="victims")


def incident_points(incidents: pd.DataFrame) -> pd.DataFrame:
    columns = ["INCIDENT_KEY", "occurred_at", "BORO", "STATISTICAL_MURDER_FLAG", "Latitude", "Longitude"]
    present = [c for c in columns if c in incidents.columns]
    return with_coordinates(incidents[present], "Latitude", "Longitude")
