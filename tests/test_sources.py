import pytest

import sources.covid_timeseries  # noqa: F401
import sources.nypd_shootings  # noqa: F401
from sources.base import BaseDataSource
from sources.registry import SourceRegistry, get_registry

from .conftest import NYPD_URL

pytestmark = pytest.mark.integration


def test_builtin_sources_are_registered():
    registry = get_registry()
    assert {"covid_global", "covid_us", "nypd_shootings"} <= set(registry.names())
    assert "covid_us" in registry


def test_registry_rejects_name_clash():
    registry = SourceRegistry()

    class First(BaseDataSource):
        name = "dup"

    class Second(BaseDataSource):
        name = "dup"

    registry.register(First)
    registry.register(First)
    with pytest.raises(ValueError, match="dup"):
        registry.register(Second)


def test_unknown_source_raises(container):
    with pytest.raises(KeyError):
        get_registry().create_source("flu", container)


def test_enabled_sources_follow_config(container):
    names = [s.name for s in get_registry().create_enabled_sources(container)]
    assert sorted(names) == ["covid_global", "covid_us"]


def test_covid_global_run(container):
    result = get_registry().create_source("covid_global", container).run()

    assert result["success"] is True
    tables = result["tables"]
    assert {"global", "global_missing", "cases_corrections", "deaths_corrections",
            "country_totals", "highest_fatality", "lowest_fatality",
            "global_daily", "global_map"} <= set(tables)
    assert tables["highest_fatality"]["Country/Region"].tolist() == ["Italy", "France"]
    assert tables["country_totals"]["Country/Region"].iloc[0] == "Italy"
    assert result["rows"]["global"] == 9


def test_covid_global_audit_flags_missing_provinces(container):
    result = get_registry().create_source("covid_global", container).run()
    audit = result["tables"]["global_missing"].set_index("column")

    # only Reunion has a province
    assert audit.loc["Province/State", "missing"] == 8


def test_covid_us_run(container):
    result = get_registry().create_source("covid_us", container).run()

    assert result["success"] is True
    tables = result["tables"]
    assert len(tables["states_by_cases_per_100k"]) == 2
    assert tables["states_by_cases_per_100k"]["Province_State"].tolist() == ["Colorado", "New York"]
    assert tables["state_daily"]["new_cases"].tolist() == [0, 35]
    assert len(tables["cases_corrections"]) == 1
    assert len(tables["us_map"]) == 3


def test_nypd_run(container):
    result = get_registry().create_source("nypd_shootings", container).run()

    assert result["success"] is True
    tables = result["tables"]
    assert "Lon_Lat" not in tables["incidents"].columns
    assert len(tables["hourly_profile"]) == 24
    assert tables["incidents_by_borough"]["BORO"].iloc[0] == "BROOKLYN"
    assert "victims_by_vic_age_group" in tables
    assert "victims_by_perp_race" in tables
    assert container.get_http_client().calls == [NYPD_URL]


def test_downloads_use_the_global_http_timeout(container, fake_http):
    get_registry().create_source("covid_global", container).extract()

    # no per-source override; the client falls back to global.http.timeout
    assert fake_http.timeouts == [None, None]


def test_failed_download_is_reported_not_raised(container, fake_http):
    del fake_http.tables[NYPD_URL]
    result = get_registry().create_source("nypd_shootings", container).run()

    assert result["success"] is False
    assert "404" in result["error"]
