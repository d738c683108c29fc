"""Reshape and aggregate helpers shared by every report.

All functions take a DataFrame and return a new one; inputs are never
modified in place.
"""

import logging
from typing import Any, Iterable, Mapping

import numpy as np
import pandas as pd

from models.schemas import DEFAULT_SCHEMA, WideSchema

logger = logging.getLogger(__name__)

DATE_COLUMN = "date"
AGGREGATIONS = {"sum", "max", "min", "mean", "count", "nunique", "size"}


def _as_list(columns: str | Iterable[str] | None) -> list[str]:
    if columns is None:
        return []
    if isinstance(columns, str):
        return [columns]
    return list(columns)


def melt_wide(
    wide: pd.DataFrame,
    value_name: str | None = None,
    schema: WideSchema | None = None,
) -> pd.DataFrame:
    """Reshape a wide table (one column per date) into one row per entity and date.

    Rows come out entity-major: every date of the first input row, then
    every date of the second, with the date columns kept in input order.
    A date column whose name does not parse gives `NaT` and a non-numeric
    cell gives `NaN`; neither stops the reshape.
    """
    schema = schema or DEFAULT_SCHEMA

    missing = schema.missing_attributes(wide.columns)
    if missing:
        raise ValueError(f"Wide table is missing declared attribute columns: {missing}")

    if value_name is None:
        value_name = "deaths" if "deaths" in wide.columns else "cases"
        logger.warning(f"No value column name given, assuming '{value_name}'")

    date_cols = schema.date_columns(wide.columns)
    attr_cols = schema.attributes(wide.columns)

    clashing = [c for c in attr_cols if c in (DATE_COLUMN, value_name)]
    if clashing:
        logger.warning(f"Attribute columns {clashing} are replaced by the reshaped output")
        attr_cols = [c for c in attr_cols if c not in clashing]

    dates = pd.to_datetime(
        pd.Series([schema.strip_prefix(c) for c in date_cols], dtype=object),
        format=schema.date_format,
        errors="coerce",
    )
    unparsed = [c for c, d in zip(date_cols, dates) if pd.isna(d)]
    if unparsed:
        logger.warning(
            f"{len(unparsed)} date columns do not match '{schema.date_format}' "
            f"and get a missing date: {unparsed[:10]}"
        )

    n_rows, n_dates = len(wide), len(date_cols)
    if n_dates:
        values = wide[date_cols].apply(pd.to_numeric, errors="coerce").to_numpy(dtype=float).ravel()
    else:
        values = np.empty(0, dtype=float)

    attrs = wide[attr_cols].iloc[np.repeat(np.arange(n_rows), n_dates)].reset_index(drop=True)
    long = attrs.assign(**{
        DATE_COLUMN: np.tile(dates.to_numpy(dtype="datetime64[ns]"), n_rows),
        value_name: values,
    })

    logger.debug(f"Reshaped {n_rows} rows x {n_dates} dates into {len(long)} '{value_name}' rows")
    return long


def join_long(
    left: pd.DataFrame,
    right: pd.DataFrame,
    on: Iterable[str],
    how: str = "inner",
) -> pd.DataFrame:
    """Join two long tables on entity and date columns.

    Columns present in both tables are taken from `left`; `right` only adds
    its new columns. With `how="inner"` unmatched entities are dropped, with
    `"left"` or `"outer"` they are kept with missing values.
    """
    on = _as_list(on)
    extra = [c for c in right.columns if c not in left.columns]
    joined = left.merge(right[on + extra], on=on, how=how)

    if how == "inner" and len(joined) < len(left):
        logger.info(f"Inner join dropped {len(left) - len(joined)} unmatched rows")
    return joined


def latest_date(long: pd.DataFrame, date_col: str = DATE_COLUMN) -> pd.Timestamp:
    return long[date_col].max()


def aggregate(
    long: pd.DataFrame,
    by: str | Iterable[str] | None,
    metrics: Mapping[str, tuple[str, str]],
    at_date: Any = None,
    latest: bool = False,
    date_col: str = DATE_COLUMN,
) -> pd.DataFrame:
    """Reduce a long table to one row per group.

    `metrics` maps an output column to `(input column, function)`. With
    `latest=True` only rows at the most recent date are used, which is how
    every "to date" total in the reports is computed.
    """
    for name, (_, func) in metrics.items():
        if func not in AGGREGATIONS:
            raise ValueError(f"Unsupported aggregation '{func}' for '{name}'")

    frame = long
    if latest:
        at_date = latest_date(long, date_col)
    if at_date is not None:
        frame = frame[frame[date_col] == pd.Timestamp(at_date)]

    by = _as_list(by)
    if not by:
        row = {name: frame[col].agg(func) for name, (col, func) in metrics.items()}
        return pd.DataFrame([row])

    named = {
        name: pd.NamedAgg(column=col, aggfunc=func)
        for name, (col, func) in metrics.items()
    }
    return frame.groupby(by, dropna=False).agg(**named).reset_index()


def add_ratio(
    table: pd.DataFrame,
    numerator: str,
    denominator: str | pd.Series | float,
    name: str,
    scale: float = 1.0,
) -> pd.DataFrame:
    """Add `name = numerator / denominator * scale`.

    A zero or missing denominator gives `NaN` for that row.
    """
    if isinstance(denominator, str):
        den = table[denominator]
    elif isinstance(denominator, pd.Series):
        den = denominator.reindex(table.index)
    else:
        den = pd.Series(denominator, index=table.index)

    den = pd.to_numeric(den, errors="coerce").astype(float)
    num = pd.to_numeric(table[numerator], errors="coerce").astype(float)
    ratio = num / den.where(den != 0) * scale
    return table.assign(**{name: ratio})


def rank_groups(
    table: pd.DataFrame,
    by: str,
    ascending: bool = False,
    top_n: int | None = None,
    min_values: Mapping[str, float] | None = None,
) -> pd.DataFrame:
    """Sort groups on a metric, optionally keeping only the first `top_n`.

    Groups whose base metric is below its `min_values` threshold are removed
    before ranking, so they never take a slot in the top N. Missing metric
    values sort last.
    """
    ranked = table
    for column, threshold in (min_values or {}).items():
        ranked = ranked[ranked[column] >= threshold]

    ranked = ranked.sort_values(by, ascending=ascending, na_position="last", kind="stable")
    if top_n is not None:
        ranked = ranked.head(top_n)
    return ranked.reset_index(drop=True)


def grand_total(table: pd.DataFrame, column: str) -> float:
    return float(table[column].sum())


def _entity_codes(long: pd.DataFrame, entity_columns: list[str]) -> list[np.ndarray]:
    # factorize maps missing keys to -1 so they still form a group
    return [pd.factorize(long[c])[0] for c in entity_columns]


def previous_values(
    long: pd.DataFrame,
    entity_columns: str | Iterable[str] | None,
    value_col: str,
) -> pd.Series:
    """Value of the previous row of the same entity (`NaN` on its first row)."""
    entity_columns = _as_list(entity_columns)
    values = long[value_col]
    if not entity_columns:
        return values.shift(1)
    return values.groupby(_entity_codes(long, entity_columns), sort=False).shift(1)


def daily_delta(
    long: pd.DataFrame,
    entity_columns: str | Iterable[str] | None,
    value_col: str,
    new_col: str | None = None,
) -> pd.DataFrame:
    """Turn a cumulative series into per-day increments, entity by entity.

    The input must already be sorted by entity and date. The first row of
    each entity gets a delta of 0. Decreases in the cumulative series come
    through as negative deltas.
    """
    entity_columns = _as_list(entity_columns)
    new_col = new_col or f"new_{value_col}"
    values = long[value_col]

    if entity_columns:
        codes = pd.DataFrame(
            dict(enumerate(_entity_codes(long, entity_columns))), index=long.index
        )
        first = ~codes.duplicated(keep="first")
    else:
        first = pd.Series(np.arange(len(long)) == 0, index=long.index)

    previous = previous_values(long, entity_columns, value_col).mask(first, values)
    return long.assign(**{new_col: values - previous})


def with_coordinates(table: pd.DataFrame, lat: str, lon: str) -> pd.DataFrame:
    """Rows with usable coordinates; missing or (0, 0) points are dropped."""
    lat_v = pd.to_numeric(table[lat], errors="coerce")
    lon_v = pd.to_numeric(table[lon], errors="coerce")
    usable = lat_v.notna() & lon_v.notna() & ~((lat_v == 0) & (lon_v == 0))
    return table[usable].reset_index(drop=True)
