from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Callable, Protocol

from price_fetcher.integrations.yahoo_rest import YahooChartClient
from price_fetcher.schemas.quote import Quote

logger = logging.getLogger(__name__)


class ProviderName(str, Enum):
    YAHOO = "yahoo"
    ALPHA_VANTAGE = "alpha_vantage"
    MOCK = "mock"


MOCK_BASE_PRICES: dict[str, float] = {
    "AAPL": 150.0,
    "TSLA": 200.0,
    "MSFT": 300.0,
    "GOOGL": 2500.0,
    "AMZN": 3000.0,
    "NVDA": 400.0,
    "META": 250.0,
    "NFLX": 400.0,
}


def mock_base_price(symbol: str) -> float:
    return MOCK_BASE_PRICES.get(symbol, 100.0 + 10.0 * len(symbol))


def mock_variation(now: int) -> float:
    """Time-derived factor in [-0.5, 0.5)."""
    return (now % 100) / 100.0 - 0.5


class QuoteProvider(Protocol):
    name: ProviderName

    def fetch(self, symbol: str) -> Quote:
        ...


class MockQuoteProvider:
    """Formula-based quotes; never raises for a non-empty symbol."""

    name = ProviderName.MOCK

    def __init__(self, clock: Callable[[], float] | None = None) -> None:
        self.clock = clock or time.time

    def fetch(self, symbol: str) -> Quote:
        now = int(self.clock())
        variation = mock_variation(now)
        price = mock_base_price(symbol) * (1 + variation * 0.1)
        return Quote(
            symbol=symbol,
            # built-in round(): half-to-even on the binary float
            price=round(price, 2),
            currency="USD",
            timestamp=now,
            source=self.name.value,
            change_24h=variation * 5.0,
            change_percent_24h=variation * 2.0,
        )


class AlphaVantageStubProvider:
    """Placeholder for Alpha Vantage; the API key is not managed, so it serves mock quotes."""

    name = ProviderName.ALPHA_VANTAGE

    def __init__(self, fallback: MockQuoteProvider) -> None:
        self.fallback = fallback

    def fetch(self, symbol: str) -> Quote:
        logger.warning("[QUOTE][alpha_vantage_stub] symbol=%s delegate=mock reason=api_key_required", symbol)
        return self.fallback.fetch(symbol)


class YahooQuoteProvider:
    name = ProviderName.YAHOO

    def __init__(self, client: YahooChartClient) -> None:
        self.client = client

    def fetch(self, symbol: str) -> Quote:
        return Quote.model_validate(self.client.get_quote(symbol))
