"""Protocol definitions for dependency injection."""

from typing import Protocol, Any

import pandas as pd


class HttpClient(Protocol):
    """Protocol for HTTP client implementations."""

    def get_csv(self, url: str, timeout: int | None = None, **read_csv_kwargs: Any) -> pd.DataFrame:
        """Download a CSV resource and parse it into a DataFrame."""
        ...
