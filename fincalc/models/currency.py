"""
Currency conversion.

Rates are held in a table quoted against a base currency (units of each
currency per one unit of the base). Conversions between two non-base
currencies go through the base. A static USD table is kept as the fallback
whenever live rates cannot be fetched.
"""

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

FALLBACK_BASE = "USD"

FALLBACK_RATES: Dict[str, float] = {
    "EUR": 0.85197, "GBP": 0.736947, "JPY": 147.445, "CAD": 1.39665, "AUD": 1.5147,
    "CNY": 7.1195, "CHF": 0.790154, "BRL": 5.3368, "INR": 88.7353, "MXN": 18.3987,
    "RUB": 98.5234, "KRW": 1342.15, "SGD": 1.3456, "NZD": 1.6123, "ZAR": 18.76,
    "HKD": 7.8123, "SEK": 10.234, "NOK": 10.567, "DKK": 6.789, "PLN": 4.123,
    "CZK": 23.456, "HUF": 367.89, "ILS": 3.789, "TRY": 27.456, "THB": 35.678,
    "MYR": 4.567, "PHP": 56.789, "IDR": 15234.56, "VND": 24567.89, "AED": 3.6725,
    "RON": 4.2384, "BGN": 1.66629, "HRK": 6.41917,
}


class CurrencyInfo(BaseModel):
    """Display metadata for a currency."""

    code: str = Field(..., min_length=3, max_length=3)
    name: str
    symbol: str


CURRENCIES: List[CurrencyInfo] = [
    CurrencyInfo(code=code, name=name, symbol=symbol)
    for code, name, symbol in (
        ("USD", "United States Dollar", "$"),
        ("EUR", "Euro", "€"),
        ("GBP", "British Pound Sterling", "£"),
        ("JPY", "Japanese Yen", "¥"),
        ("CAD", "Canadian Dollar", "C$"),
        ("AUD", "Australian Dollar", "A$"),
        ("CNY", "Chinese Yuan", "¥"),
        ("CHF", "Swiss Franc", "CHF"),
        ("BRL", "Brazilian Real", "R$"),
        ("INR", "Indian Rupee", "₹"),
        ("MXN", "Mexican Peso", "$"),
        ("SEK", "Swedish Krona", "kr"),
        ("NOK", "Norwegian Krone", "kr"),
        ("DKK", "Danish Krone", "kr"),
        ("PLN", "Polish Zloty", "zł"),
        ("CZK", "Czech Koruna", "Kč"),
        ("HUF", "Hungarian Forint", "Ft"),
        ("RON", "Romanian Leu", "lei"),
        ("BGN", "Bulgarian Lev", "лв"),
        ("HRK", "Croatian Kuna", "kn"),
        ("TRY", "Turkish Lira", "₺"),
        ("RUB", "Russian Ruble", "₽"),
        ("ZAR", "South African Rand", "R"),
        ("KRW", "South Korean Won", "₩"),
        ("SGD", "Singapore Dollar", "S$"),
        ("HKD", "Hong Kong Dollar", "HK$"),
        ("NZD", "New Zealand Dollar", "NZ$"),
        ("THB", "Thai Baht", "฿"),
        ("MYR", "Malaysian Ringgit", "RM"),
        ("IDR", "Indonesian Rupiah", "Rp"),
    )
]


class ExchangeRateTable(BaseModel):
    """Exchange rates quoted against a base currency."""

    base: str = Field(default=FALLBACK_BASE, description="Base currency code")
    rates: Dict[str, float] = Field(..., description="Units per one unit of base")
    source: Literal["live", "fallback"] = Field(default="fallback")
    fetched_at: datetime = Field(default_factory=datetime.now)
    error: Optional[str] = Field(None, description="Why live rates were not used")

    def rate_for(self, code: str) -> Optional[float]:
        if code == self.base:
            return 1.0
        rate = self.rates.get(code)
        if rate is None or rate <= 0:
            return None
        return rate


class ConversionResult(BaseModel):
    """A completed currency conversion."""

    from_amount: float
    to_amount: float
    from_currency: str
    to_currency: str
    exchange_rate: float
    last_updated: datetime


def fallback_rate_table(error: Optional[str] = None) -> ExchangeRateTable:
    """The static USD rate table."""
    return ExchangeRateTable(
        base=FALLBACK_BASE, rates=dict(FALLBACK_RATES), source="fallback", error=error
    )


class CurrencyConverter:
    """Converts amounts between currencies using a rate table."""

    @staticmethod
    def get_exchange_rate(
        from_currency: str,
        to_currency: str,
        table: ExchangeRateTable,
        custom_rate: Optional[float] = None,
    ) -> Optional[float]:
        """
        Rate to multiply an amount in ``from_currency`` by.

        Args:
            from_currency: Source currency code
            to_currency: Target currency code
            table: Rate table
            custom_rate: User-supplied rate that overrides the table

        Returns:
            Exchange rate, or None if either currency is not in the table
        """
        if from_currency == to_currency:
            return 1.0
        if custom_rate is not None:
            return custom_rate

        from_rate = table.rate_for(from_currency)
        to_rate = table.rate_for(to_currency)
        if from_rate is None or to_rate is None:
            return None
        return to_rate / from_rate

    @staticmethod
    def convert(
        amount: float,
        from_currency: str,
        to_currency: str,
        table: ExchangeRateTable,
        custom_rate: Optional[float] = None,
    ) -> Optional[ConversionResult]:
        """Convert ``amount``; None when no rate is available."""
        rate = CurrencyConverter.get_exchange_rate(
            from_currency, to_currency, table, custom_rate
        )
        if rate is None:
            return None

        return ConversionResult(
            from_amount=amount,
            to_amount=amount * rate,
            from_currency=from_currency,
            to_currency=to_currency,
            exchange_rate=rate,
            last_updated=table.fetched_at,
        )
