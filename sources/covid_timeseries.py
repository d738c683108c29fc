"""COVID-19 cumulative case and death time series - JHU CSSE."""

from analysis import covid
from analysis.audit import decreasing_series
from analysis.pipeline import grand_total, latest_date, rank_groups
from models.schemas import JHU_GLOBAL, JHU_US_CASES

from .base import BaseDataSource, Tables
from .registry import register


class CovidTimeSeriesSource(BaseDataSource):
    """Shared extract and validation for the cases/deaths file pairs."""

    entity_columns: tuple[str, ...]
    long_table: str

    def extract(self) -> Tables:
        """Download the cumulative cases and deaths tables."""
        urls = self.config.get('urls', {})

        raw = {}
        for metric in ('cases', 'deaths'):
            url = urls.get(metric)
            if not url:
                raise KeyError(f"No '{metric}' URL configured for {self.name}")

            self.logger.info(f"Fetching {metric} from {url}")
            raw[f"{metric}_wide"] = self.http_client.get_csv(url)
            self.logger.info(f"Received {len(raw[f'{metric}_wide'])} {metric} rows")

        return raw

    def validate(self, data: Tables) -> Tables:
        """Audit missing data and report cumulative counts that go down."""
        audits = super().validate(data)

        long = data[self.long_table]
        for metric in ('cases', 'deaths'):
            drops = decreasing_series(long, self.entity_columns, metric)
            if not drops.empty:
                self.logger.warning(
                    f"{len(drops)} {metric} values fall below the previous day "
                    f"(largest drop {drops['drop'].max():,.0f}); left as reported"
                )
            audits[f"{metric}_corrections"] = drops

        return audits


@register
class CovidGlobalSource(CovidTimeSeriesSource):
    """Global COVID-19 cases and deaths by country and province."""

    name = "covid_global"
    description = "COVID-19 Global Cases and Deaths (JHU CSSE)"
    entity_columns = JHU_GLOBAL.entity_columns
    long_table = "global"

    def transform(self, raw: Tables) -> Tables:
        return {"global": covid.global_long(raw["cases_wide"], raw["deaths_wide"])}

    def summarize(self, data: Tables) -> Tables:
        long = data["global"]
        min_cases = self.config.get('min_cases', 10000)
        top_n = self.config.get('top_n', 10)

        totals = covid.country_totals(long)
        daily = covid.daily_totals(long)

        if not totals.empty:
            self.logger.info(
                f"World total as of {latest_date(long)}: "
                f"{grand_total(totals, 'total_cases'):,.0f} cases, "
                f"{grand_total(totals, 'total_deaths'):,.0f} deaths"
            )

        return {
            "country_totals": rank_groups(totals, by="total_cases"),
            "highest_fatality": covid.top_fatality_countries(long, min_cases=min_cases, top_n=top_n),
            "lowest_fatality": covid.top_fatality_countries(
                long, min_cases=min_cases, top_n=top_n, ascending=True
            ),
            "global_daily": daily,
            "global_map": covid.map_points(
                long,
                label_columns=["Province/State", "Country/Region"],
                value_columns=["cases", "deaths"],
                lat="Lat",
                lon="Long",
            ),
        }


@register
class CovidUSSource(CovidTimeSeriesSource):
    """US COVID-19 cases and deaths by county."""

    name = "covid_us"
    description = "COVID-19 US Cases and Deaths by County (JHU CSSE)"
    entity_columns = JHU_US_CASES.entity_columns
    long_table = "us"

    def transform(self, raw: Tables) -> Tables:
        return {"us": covid.us_long(raw["cases_wide"], raw["deaths_wide"])}

    def summarize(self, data: Tables) -> Tables:
        long = data["us"]
        top_n = self.config.get('top_n', 10)
        focus_state = self.config.get('focus_state')

        states = covid.state_totals(long)
        summaries = {
            "state_totals": rank_groups(states, by="cases"),
            "states_by_cases_per_100k": rank_groups(states, by="cases_per_100k", top_n=top_n),
            "states_by_deaths_per_100k": rank_groups(states, by="deaths_per_100k", top_n=top_n),
            "us_daily": covid.daily_totals(long),
            "us_map": covid.map_points(
                long,
                label_columns=["Admin2", "Province_State"],
                value_columns=["cases", "deaths"],
                lat="Lat",
                lon="Long_",
            ),
        }

        if focus_state:
            state = covid.state_daily(long, focus_state)
            if state.empty:
                self.logger.warning(f"Focus state '{focus_state}' not found in US data")
            summaries["state_daily"] = state

        return summaries
