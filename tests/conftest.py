import numpy as np
import pandas as pd
import pytest
import requests
import yaml

from core.config import Config
from core.container import Container

GLOBAL_CASES_URL = "https://example.test/global_cases.csv"
GLOBAL_DEATHS_URL = "https://example.test/global_deaths.csv"
US_CASES_URL = "https://example.test/us_cases.csv"
US_DEATHS_URL = "https://example.test/us_deaths.csv"
NYPD_URL = "https://example.test/nypd.csv"


class FakeHttpClient:
    """Serves in-memory tables instead of downloading them."""

    def __init__(self, tables):
        self.tables = tables
        self.calls = []
        self.timeouts = []

    def get_csv(self, url, timeout=None, **read_csv_kwargs):
        self.calls.append(url)
        self.timeouts.append(timeout)
        if url not in self.tables:
            raise requests.HTTPError(f"404 Client Error for url: {url}")
        return self.tables[url].copy()


@pytest.fixture
def small_wide():
    """Two entities, three days, date headers in the X<m>.<d>.<yy> form."""
    return pd.DataFrame({
        "entity": ["A", "B"],
        "X1.22.20": [10, 5],
        "X1.23.20": [20, 5],
        "X1.24.20": [30, 10],
    })


def _jhu_global(values):
    rows = [
        (np.nan, "Italy", 41.87, 12.57),
        (np.nan, "France", 46.23, 2.21),
        ("Reunion", "France", -21.12, 55.54),
        (np.nan, "Smallland", 0.0, 0.0),
        (np.nan, "Antarctica", -71.95, 23.35),
    ]
    frame = pd.DataFrame(rows, columns=["Province/State", "Country/Region", "Lat", "Long"])
    for i, day in enumerate(["1/22/20", "1/23/20", "1/24/20"]):
        frame[day] = [v[i] for v in values]
    return frame


@pytest.fixture
def global_cases_wide():
    return _jhu_global([
        [0, 100, 20000],
        [10, 50, 15000],
        [0, 0, 1000],
        [1, 2, 5000],
        [0, 0, 0],
    ])


@pytest.fixture
def global_deaths_wide():
    return _jhu_global([
        [0, 5, 2000],
        [0, 1, 300],
        [0, 0, 10],
        [0, 1, 2500],
        [0, 0, 0],
    ])


def _jhu_us(values, population=None):
    rows = [
        (84008031, "US", "USA", 840, 8031.0, "Denver", "Colorado", "US", 39.76, -104.88, "Denver, Colorado, US"),
        (84008013, "US", "USA", 840, 8013.0, "Boulder", "Colorado", "US", 40.09, -105.36, "Boulder, Colorado, US"),
        (84099999, "US", "USA", 840, 99999.0, np.nan, "Grand Princess", "US", np.nan, np.nan, "Grand Princess, US"),
        (84036047, "US", "USA", 840, 36047.0, "Kings", "New York", "US", 40.64, -73.95, "Kings, New York, US"),
    ]
    frame = pd.DataFrame(rows, columns=[
        "UID", "iso2", "iso3", "code3", "FIPS", "Admin2", "Province_State",
        "Country_Region", "Lat", "Long_", "Combined_Key",
    ])
    if population is not None:
        frame["Population"] = population
    for i, day in enumerate(["1/22/20", "1/23/20"]):
        frame[day] = [v[i] for v in values]
    return frame


@pytest.fixture
def us_cases_wide():
    return _jhu_us([[10, 30], [5, 20], [0, 100], [50, 40]])


@pytest.fixture
def us_deaths_wide():
    return _jhu_us(
        [[1, 2], [0, 1], [0, 3], [2, 2]],
        population=[700000, 300000, 0, 2500000],
    )


@pytest.fixture
def nypd_raw():
    columns = [
        "INCIDENT_KEY", "OCCUR_DATE", "OCCUR_TIME", "BORO", "PRECINCT",
        "JURISDICTION_CODE", "LOCATION_DESC", "STATISTICAL_MURDER_FLAG",
        "PERP_AGE_GROUP", "PERP_SEX", "PERP_RACE",
        "VIC_AGE_GROUP", "VIC_SEX", "VIC_RACE",
        "Latitude", "Longitude", "Lon_Lat",
    ]
    rows = [
        (1001, "01/15/2020", "23:30:00", "BRONX", 40, 0, "(null)", "true",
         "18-24", "M", "BLACK", "18-24", "M", "BLACK", 40.85, -73.90, "POINT (-73.90 40.85)"),
        (1001, "01/15/2020", "23:30:00", "BRONX", 40, 0, "(null)", "false",
         "18-24", "M", "BLACK", "25-44", "F", "BLACK", 40.85, -73.90, "POINT (-73.90 40.85)"),
        (1002, "06/03/2021", "02:10:00", "BROOKLYN", 75, 0, "MULTI DWELL - PUBLIC HOUS", "false",
         np.nan, np.nan, np.nan, "25-44", "M", "WHITE HISPANIC", 40.65, -73.95, "POINT (-73.95 40.65)"),
        (1003, "07/04/2021", "14:00:00", "BROOKLYN", 73, 2, " GROCERY/BODEGA ", "true",
         "UNKNOWN", "U", "UNKNOWN", "<18", "M", "BLACK", np.nan, np.nan, np.nan),
        (1004, "not a date", "", "QUEENS", 113, 0, "", "false",
         "25-44", "M", "BLACK", "25-44", "M", "BLACK", 40.70, -73.80, "POINT (-73.80 40.70)"),
    ]
    return pd.DataFrame(rows, columns=columns)


@pytest.fixture
def config_path(tmp_path):
    cfg = {
        "global": {
            "logging": {"level": "DEBUG"},
            "http": {"retries": 2, "retry_delay": 0, "timeout": 5},
        },
        "sources": {
            "covid_global": {
                "enabled": True,
                "urls": {"cases": GLOBAL_CASES_URL, "deaths": GLOBAL_DEATHS_URL},
                "min_cases": 10000,
                "top_n": 10,
            },
            "covid_us": {
                "enabled": True,
                "urls": {"cases": US_CASES_URL, "deaths": US_DEATHS_URL},
                "top_n": 2,
                "focus_state": "Colorado",
            },
            "nypd_shootings": {
                "enabled": False,
                "url": NYPD_URL,
            },
        },
    }
    path = tmp_path / "sources.yaml"
    path.write_text(yaml.safe_dump(cfg), encoding="utf-8")
    return path


@pytest.fixture
def fake_http(global_cases_wide, global_deaths_wide, us_cases_wide, us_deaths_wide, nypd_raw):
    return FakeHttpClient({
        GLOBAL_CASES_URL: global_cases_wide,
        GLOBAL_DEATHS_URL: global_deaths_wide,
        US_CASES_URL: us_cases_wide,
        US_DEATHS_URL: us_deaths_wide,
        NYPD_URL: nypd_raw,
    })


@pytest.fixture
def container(config_path, fake_http):
    container = Container(Config(str(config_path)))
    container.set_http_client(fake_http)
    return container
