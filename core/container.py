"""Dependency injection container."""

import io
import time
import logging
import requests
import pandas as pd
from typing import Any

from .config import Config
from .protocols import HttpClient

logger = logging.getLogger(__name__)


class RequestsHttpClient:
    """HTTP client implementation using requests library."""

    def __init__(self, retries: int = 3, retry_delay: int = 5, timeout: int = 60):
        self.retries = max(1, retries)
        self.retry_delay = retry_delay
        self.timeout = timeout

    def _get(self, url: str, timeout: int | None = None) -> requests.Response:
        """Make a GET request with retry logic."""
        last_error = None
        for attempt in range(self.retries):
            try:
                response = requests.get(url, timeout=timeout or self.timeout)
                response.raise_for_status()
                return response
            except requests.RequestException as e:
                last_error = e
                logger.warning(f"GET {url} failed (attempt {attempt + 1}/{self.retries}): {e}")
                if attempt < self.retries - 1:
                    time.sleep(self.retry_delay)

        raise last_error

    def get_csv(self, url: str, timeout: int | None = None, **read_csv_kwargs: Any) -> pd.DataFrame:
        """Download a CSV file and parse it with pandas."""
        response = self._get(url, timeout=timeout)
        return pd.read_csv(io.StringIO(response.text), **read_csv_kwargs)


class Container:
    """Dependency injection container for managing application dependencies."""

    def __init__(self, config: Config | None = None):
        self._config = config or Config()
        self._instances: dict[str, Any] = {}
        self._factories: dict[str, Any] = {}

        # Register default implementations
        self._register_defaults()

    def _register_defaults(self) -> None:
        """Register default dependency implementations."""
        global_config = self._config.get_global_config()

        # Logger factory
        def create_logger(name: str) -> logging.Logger:
            log_config = global_config.get('logging', {})
            logging.basicConfig(
                level=getattr(logging, log_config.get('level', 'INFO')),
                format=log_config.get('format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s')
            )
            return logging.getLogger(name)

        self._factories['logger'] = create_logger

        # HTTP client (singleton)
        http_config = global_config.get('http', {})
        self._factories['http_client'] = lambda: RequestsHttpClient(
            retries=http_config.get('retries', 3),
            retry_delay=http_config.get('retry_delay', 5),
            timeout=http_config.get('timeout', 60),
        )

    def get_logger(self, name: str) -> logging.Logger:
        """Get a logger instance for the given name."""
        return self._factories['logger'](name)

    def get_http_client(self) -> HttpClient:
        """Get the HTTP client instance."""
        if 'http_client' not in self._instances:
            self._instances['http_client'] = self._factories['http_client']()
        return self._instances['http_client']

    def get_config(self) -> Config:
        """Get the configuration instance."""
        return self._config

    # Methods for testing - allow overriding dependencies
    def set_http_client(self, client: HttpClient) -> None:
        """Override the HTTP client (useful for testing)."""
        self._instances['http_client'] = client
