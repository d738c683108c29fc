"""Base class for all report sources with dependency injection."""

from abc import ABC, abstractmethod
from typing import Any
from datetime import datetime, timezone

import pandas as pd

from core.container import Container
from analysis.audit import missing_data_audit

Tables = dict[str, pd.DataFrame]


class BaseDataSource(ABC):
    """Abstract base class for report sources with dependency injection."""

    # Subclasses must define these
    name: str
    description: str

    def __init__(self, container: Container):
        """Initialize with dependency container."""
        self.container = container
        self.config = container.get_config().get_source_config(self.name)
        self.logger = container.get_logger(f"sources.{self.name}")
        self.http_client = container.get_http_client()

    @abstractmethod
    def extract(self) -> Tables:
        """Download the raw tables.

        Returns:
            Raw tables keyed by name.
        """
        ...

    @abstractmethod
    def transform(self, raw: Tables) -> Tables:
        """Reshape raw tables into the long tables the report works on.

        Args:
            raw: Raw tables from extract phase.

        Returns:
            Transformed tables keyed by name.
        """
        ...

    def validate(self, data: Tables) -> Tables:
        """Audit missing data in every transformed table.

        Args:
            data: Transformed tables.

        Returns:
            One missing-data audit table per input table, named `<table>_missing`.
        """
        audits = {}
        for table_name, table in data.items():
            audit = missing_data_audit(table)
            incomplete = audit[audit["missing"] > 0]
            if not incomplete.empty:
                self.logger.warning(f"{table_name}: {len(incomplete)} columns have missing values")
                for row in incomplete.head(10).itertuples():
                    self.logger.warning(f"  {row.column}: {row.missing} missing ({row.missing_pct:.1f}%)")
                if len(incomplete) > 10:
                    self.logger.warning(f"  ... and {len(incomplete) - 10} more columns")
            audits[f"{table_name}_missing"] = audit
        return audits

    @abstractmethod
    def summarize(self, data: Tables) -> Tables:
        """Compute the report's aggregate tables.

        Args:
            data: Transformed tables.

        Returns:
            Aggregate tables keyed by name, ready for rendering.
        """
        ...

    def run(self) -> dict[str, Any]:
        """Execute the full report pipeline.

        Returns:
            Summary of the run including timing and every produced table.
        """
        self.logger.info("=" * 60)
        self.logger.info(f"Starting {self.description} report")
        self.logger.info("=" * 60)

        start_time = datetime.now(timezone.utc)

        try:
            raw = self.extract()
            self.logger.info(f"Extracted {sum(len(t) for t in raw.values())} rows from {len(raw)} tables")

            data = self.transform(raw)
            self.logger.info(f"Transformed into {', '.join(f'{k} ({len(v)} rows)' for k, v in data.items())}")

            audits = self.validate(data)

            summaries = self.summarize(data)
            self.logger.info(f"Summarized {len(summaries)} tables")

            duration = (datetime.now(timezone.utc) - start_time).total_seconds()

            self.logger.info("=" * 60)
            self.logger.info(f"Report completed in {duration:.2f}s")
            self.logger.info("=" * 60)

            tables = {**data, **audits, **summaries}
            return {
                'source': self.name,
                'success': True,
                'duration_seconds': duration,
                'tables': tables,
                'rows': {k: len(v) for k, v in tables.items()},
            }

        except Exception as e:
            self.logger.error(f"Report failed: {str(e)}")
            return {
                'source': self.name,
                'success': False,
                'error': str(e)
            }
