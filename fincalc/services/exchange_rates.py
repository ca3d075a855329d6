"""
Live exchange rate client.

Fetches the latest rate table for a base currency from the exchange rate
API. Any failure (missing API key, network error, HTTP error, malformed body
or an API-reported error) falls back to the static rate table so currency
conversion keeps working offline.
"""

import logging
from datetime import datetime
from typing import Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from fincalc.config import Settings, get_global_settings
from fincalc.models.currency import ExchangeRateTable, fallback_rate_table


class ExchangeRateError(Exception):
    """Raised when the exchange rate API returns an unusable response."""


class ExchangeRateClient:
    """Client for the exchange rate API with a static fallback."""

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: int = 10,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the client.

        Args:
            base_url: API base URL (without key or path)
            api_key: API key; without one the fallback table is always used
            timeout: Request timeout in seconds
            session: Preconfigured session (a retrying session is created if None)
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or self._create_session()
        self.logger = logging.getLogger(__name__)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "ExchangeRateClient":
        """Create a client from application settings."""
        settings = settings or get_global_settings()
        return cls(
            base_url=settings.exchange_rate_api_url,
            api_key=settings.exchange_rate_api_key,
            timeout=settings.exchange_rate_timeout,
        )

    def _create_session(self) -> requests.Session:
        """Create a requests session with retry strategy."""
        session = requests.Session()

        retry_strategy = Retry(
            total=3,
            backoff_factor=1,
            status_forcelist=[429, 500, 502, 503, 504],
        )

        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        return session

    def _fetch_live_rates(self, base_currency: str) -> ExchangeRateTable:
        """Fetch rates from the API, raising on any failure."""
        if not self.api_key:
            raise ExchangeRateError("Exchange rate API key is not configured")

        url = f"{self.base_url}/{self.api_key}/latest/{base_currency}"
        response = self.session.get(url, timeout=self.timeout)
        response.raise_for_status()

        data = response.json()
        if not isinstance(data, dict):
            raise ExchangeRateError("Unexpected response body")
        if data.get("result") != "success":
            raise ExchangeRateError(data.get("error-type") or "Unknown API error")

        rates = data.get("conversion_rates")
        if not isinstance(rates, dict) or not rates:
            raise ExchangeRateError("Response did not contain conversion rates")

        return ExchangeRateTable(
            base=base_currency,
            rates={code: float(rate) for code, rate in rates.items()},
            source="live",
            fetched_at=datetime.now(),
        )

    def fetch_rates(self, base_currency: str = "USD") -> ExchangeRateTable:
        """
        Get the latest rates for ``base_currency``.

        Args:
            base_currency: Currency the rates are quoted against

        Returns:
            Live rate table, or the static fallback table with the failure
            recorded in ``error``
        """
        try:
            table = self._fetch_live_rates(base_currency.upper())
            self.logger.info(
                f"Fetched {len(table.rates)} exchange rates for {table.base}"
            )
            return table
        except (requests.RequestException, ValueError, TypeError, ExchangeRateError) as e:
            self.logger.warning(f"Failed to fetch exchange rates, using fallback: {e}")
            return fallback_rate_table(error=str(e))
