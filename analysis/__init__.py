from .pipeline import (
    melt_wide,
    join_long,
    latest_date,
    aggregate,
    add_ratio,
    rank_groups,
    grand_total,
    daily_delta,
)
from .audit import missing_data_audit, decreasing_series

__all__ = [
    'melt_wide',
    'join_long',
    'latest_date',
    'aggregate',
    'add_ratio',
    'rank_groups',
    'grand_total',
    'daily_delta',
    'missing_data_audit',
    'decreasing_series',
]
