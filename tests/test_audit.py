import numpy as np
import pandas as pd
import pytest

from analysis.audit import decreasing_series, missing_data_audit

pytestmark = pytest.mark.unit


def test_missing_data_audit_counts_and_orders():
    df = pd.DataFrame({
        "a": [1, 2, 3, 4],
        "b": [np.nan, np.nan, 1, np.nan],
        "c": ["x", None, "y", "z"],
    })
    audit = missing_data_audit(df)

    assert audit["column"].tolist() == ["b", "c", "a"]
    assert audit["missing"].tolist() == [3, 1, 0]
    assert audit["missing_pct"].tolist() == pytest.approx([75.0, 25.0, 0.0])


def test_missing_data_audit_on_empty_frame():
    audit = missing_data_audit(pd.DataFrame({"a": pd.Series([], dtype=float)}))

    assert audit["missing"].tolist() == [0]
    assert audit["missing_pct"].isna().all()


def test_decreasing_series_flags_corrections_only():
    long = pd.DataFrame({
        "entity": ["A", "A", "A", "B", "B"],
        "cases": [10, 8, 12, 100, 50],
    })
    drops = decreasing_series(long, ["entity"], "cases")

    assert drops["entity"].tolist() == ["A", "B"]
    assert drops["previous"].tolist() == [10, 100]
    assert drops["drop"].tolist() == [2, 50]
    # the source table is left as it was
    assert long["cases"].tolist() == [10, 8, 12, 100, 50]
