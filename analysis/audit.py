"""Missing-data and consistency checks run before summarizing a dataset."""

from typing import Iterable

import pandas as pd

from .pipeline import add_ratio, previous_values


def missing_data_audit(df: pd.DataFrame) -> pd.DataFrame:
    """Missing values per column, most incomplete columns first."""
    audit = pd.DataFrame({
        "column": list(df.columns),
        "dtype": [str(t) for t in df.dtypes],
        "missing": df.isna().sum().to_numpy(),
    })
    audit = add_ratio(audit, "missing", len(df), "missing_pct", scale=100)
    return audit.sort_values("missing", ascending=False, kind="stable").reset_index(drop=True)


def decreasing_series(
    long: pd.DataFrame,
    entity_columns: Iterable[str],
    value_col: str,
) -> pd.DataFrame:
    """Rows where a cumulative series falls below the previous day's value.

    These are reporting corrections in the source data. They are reported
    here and left untouched everywhere else.
    """
    previous = previous_values(long, entity_columns, value_col)
    dropped = previous > long[value_col]
    return long.loc[dropped].assign(
        previous=previous[dropped],
        drop=previous[dropped] - long.loc[dropped, value_col],
    ).reset_index(drop=True)
