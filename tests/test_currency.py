"""
Tests for currency conversion and the exchange rate client.

This module tests rate lookup and conversion against a rate table, and the
live rate client with its fallback to the static table.
"""

from unittest.mock import MagicMock

import pytest
import requests

from fincalc.config import Settings
from fincalc.models.currency import (
    CURRENCIES,
    FALLBACK_RATES,
    CurrencyConverter,
    ExchangeRateTable,
    fallback_rate_table,
)
from fincalc.services.exchange_rates import ExchangeRateClient


@pytest.fixture
def table():
    return ExchangeRateTable(base="USD", rates={"EUR": 0.8, "GBP": 0.5, "JPY": 150.0})


def make_response(payload, status_code=200):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} Error")
    else:
        response.raise_for_status.return_value = None
    return response


class TestCurrencyConverter:
    """Test cases for CurrencyConverter."""

    def test_same_currency(self, table):
        assert CurrencyConverter.get_exchange_rate("EUR", "EUR", table) == 1.0

    def test_from_base(self, table):
        assert CurrencyConverter.get_exchange_rate("USD", "EUR", table) == 0.8

    def test_to_base(self, table):
        assert CurrencyConverter.get_exchange_rate("GBP", "USD", table) == 2.0

    def test_cross_rate_through_base(self, table):
        """Test EUR to GBP as rates[GBP] / rates[EUR]."""
        assert abs(CurrencyConverter.get_exchange_rate("EUR", "GBP", table) - 0.625) < 1e-12

    def test_custom_rate_overrides_table(self, table):
        assert CurrencyConverter.get_exchange_rate("USD", "EUR", table, custom_rate=0.9) == 0.9

    def test_unknown_currency(self, table):
        assert CurrencyConverter.get_exchange_rate("USD", "XYZ", table) is None
        assert CurrencyConverter.convert(100, "XYZ", "USD", table) is None

    def test_convert(self, table):
        """Test converting 100 USD to JPY."""
        result = CurrencyConverter.convert(100, "USD", "JPY", table)

        assert result.to_amount == 15000
        assert result.exchange_rate == 150
        assert result.from_currency == "USD"
        assert result.last_updated == table.fetched_at

    def test_round_trip_is_identity(self, table):
        """Test that converting there and back returns the original amount."""
        there = CurrencyConverter.convert(250, "EUR", "JPY", table)
        back = CurrencyConverter.convert(there.to_amount, "JPY", "EUR", table)

        assert abs(back.to_amount - 250) < 1e-9

    def test_fallback_table(self):
        """Test the static table and currency list."""
        fallback = fallback_rate_table()

        assert fallback.base == "USD"
        assert fallback.source == "fallback"
        assert fallback.rates == FALLBACK_RATES
        assert fallback.rate_for("USD") == 1.0
        assert len(FALLBACK_RATES) == 33
        assert len(CURRENCIES) == 30
        assert CURRENCIES[0].code == "USD"

    @pytest.mark.parametrize("code", [currency.code for currency in CURRENCIES])
    def test_every_listed_currency_converts_with_fallback(self, code):
        """Test that each advertised currency has a fallback rate."""
        fallback = fallback_rate_table()

        result = CurrencyConverter.convert(100, "USD", code, fallback)

        assert result is not None
        assert result.to_amount > 0
        back = CurrencyConverter.convert(result.to_amount, code, "USD", fallback)
        assert abs(back.to_amount - 100) < 1e-9


class TestExchangeRateClient:
    """Test cases for ExchangeRateClient."""

    def make_client(self, payload=None, status_code=200, api_key="test-key"):
        session = MagicMock()
        session.get.return_value = make_response(payload, status_code)
        client = ExchangeRateClient(
            base_url="https://rates.example.com/v6/",
            api_key=api_key,
            timeout=5,
            session=session,
        )
        return client, session

    def test_fetch_live_rates(self):
        """Test a successful API response."""
        client, session = self.make_client(
            {"result": "success", "conversion_rates": {"USD": 1, "EUR": 0.9, "GBP": 0.75}}
        )

        table = client.fetch_rates("usd")

        session.get.assert_called_once_with(
            "https://rates.example.com/v6/test-key/latest/USD", timeout=5
        )
        assert table.source == "live"
        assert table.base == "USD"
        assert table.rates["EUR"] == 0.9
        assert table.error is None

    def test_api_error_falls_back(self):
        """Test that an API-reported error gives the static table."""
        client, _ = self.make_client({"result": "error", "error-type": "invalid-key"})

        table = client.fetch_rates("USD")

        assert table.source == "fallback"
        assert table.error == "invalid-key"
        assert table.rates == FALLBACK_RATES

    def test_http_error_falls_back(self):
        client, _ = self.make_client({}, status_code=503)

        table = client.fetch_rates("USD")

        assert table.source == "fallback"
        assert "503" in table.error

    def test_network_error_falls_back(self):
        client, session = self.make_client()
        session.get.side_effect = requests.ConnectionError("connection refused")

        table = client.fetch_rates("USD")

        assert table.source == "fallback"
        assert "connection refused" in table.error

    def test_malformed_body_falls_back(self):
        client, _ = self.make_client(["not", "a", "dict"])

        assert client.fetch_rates("USD").source == "fallback"

    def test_missing_rates_falls_back(self):
        client, _ = self.make_client({"result": "success", "conversion_rates": {}})

        assert client.fetch_rates("USD").source == "fallback"

    def test_missing_api_key_skips_request(self):
        """Test that no request is made without an API key."""
        client, session = self.make_client(api_key=None)

        table = client.fetch_rates("USD")

        session.get.assert_not_called()
        assert table.source == "fallback"
        assert "API key" in table.error

    def test_from_settings(self):
        settings = Settings(
            _env_file=None,
            EXCHANGE_RATE_API_KEY="abc",
            EXCHANGE_RATE_API_URL="https://rates.example.com/v6",
            EXCHANGE_RATE_TIMEOUT=3,
        )

        client = ExchangeRateClient.from_settings(settings)

        assert client.api_key == "abc"
        assert client.base_url == "https://rates.example.com/v6"
        assert client.timeout == 3

    def test_session_retries(self):
        """Test that the default session retries transient failures."""
        client = ExchangeRateClient(base_url="https://rates.example.com/v6")
        adapter = client.session.get_adapter("https://rates.example.com")

        assert adapter.max_retries.total == 3
        assert 503 in adapter.max_retries.status_forcelist
