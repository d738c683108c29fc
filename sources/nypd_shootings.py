"""NYPD shooting incident data source - NYC Open Data (historic)."""

from analysis import incidents
from models.schemas import NYPD_SHOOTING_COLUMNS

from .base import BaseDataSource, Tables
from .registry import register

DEMOGRAPHIC_COLUMNS = ("VIC_AGE_GROUP", "VIC_SEX", "VIC_RACE", "PERP_AGE_GROUP", "PERP_SEX", "PERP_RACE")


@register
class NypdShootingsSource(BaseDataSource):
    """Shooting incidents in New York City since 2006."""

    name = "nypd_shootings"
    description = "NYPD Shooting Incident Data (Historic)"

    def extract(self) -> Tables:
        """Download the incident table."""
        url = self.config.get('url')
        if not url:
            raise KeyError(f"No URL configured for {self.name}")

        self.logger.info(f"Fetching shooting incidents from {url}")
        raw = self.http_client.get_csv(url)
        self.logger.info(f"Received {len(raw)} victim records")
        return {"raw_incidents": raw}

    def transform(self, raw: Tables) -> Tables:
        """Keep the report columns and parse dates, times and flags."""
        table = raw["raw_incidents"]
        unused = [c for c in table.columns if c not in NYPD_SHOOTING_COLUMNS]
        if unused:
            self.logger.info(f"Dropping {len(unused)} unused columns: {unused}")

        prepared = incidents.prepare_incidents(
            table[[c for c in table.columns if c in NYPD_SHOOTING_COLUMNS]]
        )

        undated = prepared["occurred_on"].isna().sum()
        if undated:
            self.logger.warning(f"{undated} records have an unparseable OCCUR_DATE")

        return {"incidents": prepared}

    def summarize(self, data: Tables) -> Tables:
        table = data["incidents"]
        self.logger.info(
            f"{table['INCIDENT_KEY'].nunique()} incidents, {len(table)} victims, "
            f"{int(table['STATISTICAL_MURDER_FLAG'].sum())} murders"
        )

        summaries = {
            "incidents_by_borough": incidents.counts_by(table, "BORO"),
            "murder_rate_by_borough": incidents.murder_rate_by(table, "BORO"),
            "yearly_trend": incidents.yearly_trend(table),
            "yearly_trend_by_borough": incidents.yearly_trend(table, by="BORO"),
            "hourly_profile": incidents.hourly_profile(table),
            "incidents_by_weekday": incidents.counts_by(table, "weekday"),
            "incident_map": incidents.incident_points(table),
        }

        for column in self.config.get('demographics', DEMOGRAPHIC_COLUMNS):
            if column in table.columns:
                summaries[f"victims_by_{column.lower()}"] = incidents.victim_profile(table, column)

        return summaries
