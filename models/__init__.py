from .schemas import (
    WideSchema,
    DEFAULT_SCHEMA,
    JHU_GLOBAL,
    JHU_US_CASES,
    JHU_US_DEATHS,
    NYPD_SHOOTING_COLUMNS,
    NYPD_REQUIRED_COLUMNS,
)

__all__ = [
    'WideSchema',
    'DEFAULT_SCHEMA',
    'JHU_GLOBAL',
    'JHU_US_CASES',
    'JHU_US_DEATHS',
    'NYPD_SHOOTING_COLUMNS',
    'NYPD_REQUIRED_COLUMNS',
]
