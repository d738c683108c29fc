"""Prefect flows wrapping the report sources.

Each stage of a source runs as its own task so a failed download can be
retried without recomputing anything else.
"""

import logging
from typing import Any

from prefect import flow, task
from prefect.cache_policies import NO_CACHE

from core.config import Config
from core.container import Container
from sources.base import BaseDataSource, Tables
from sources.registry import get_registry

# Import sources to register them
import sources.covid_timeseries  # noqa: F401
import sources.nypd_shootings  # noqa: F401

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@task(name="Extract Source Tables", retries=3, retry_delay_seconds=60, cache_policy=NO_CACHE)
def extract_source(source: BaseDataSource) -> Tables:
    return source.extract()


@task(name="Reshape Source Tables", cache_policy=NO_CACHE)
def transform_source(source: BaseDataSource, raw: Tables) -> Tables:
    return source.transform(raw)


@task(name="Audit Missing Data", cache_policy=NO_CACHE)
def validate_source(source: BaseDataSource, data: Tables) -> Tables:
    return source.validate(data)


@task(name="Summarize Report Tables", cache_policy=NO_CACHE)
def summarize_source(source: BaseDataSource, data: Tables) -> Tables:
    return source.summarize(data)


@flow(name="Public Data Report Pipeline", log_prints=True)
def report_flow(source_name: str, config_path: str | None = None) -> dict[str, Any]:
    """
    Run one report end to end and return its row counts.
    Unlike `BaseDataSource.run`, failures propagate so Prefect marks the run failed.
    """
    container = Container(Config(config_path))
    source = get_registry().create_source(source_name, container)

    logger.info("=" * 50)
    logger.info(f"Starting {source.description} report")
    logger.info("=" * 50)

    raw = extract_source(source)
    data = transform_source(source, raw)
    audits = validate_source(source, data)
    summaries = summarize_source(source, data)

    rows = {name: len(table) for name, table in {**data, **audits, **summaries}.items()}
    logger.info(f"Report {source_name} produced {len(rows)} tables")
    return {'source': source_name, 'rows': rows}


if __name__ == "__main__":
    for name in Config().get_enabled_sources():
        report_flow(name)
