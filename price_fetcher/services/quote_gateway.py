from __future__ import annotations

import logging
from typing import Mapping

from price_fetcher.errors import FetchError
from price_fetcher.integrations.yahoo_rest import YahooChartClient
from price_fetcher.schemas.quote import Quote
from price_fetcher.services.providers import (
    AlphaVantageStubProvider,
    MockQuoteProvider,
    ProviderName,
    QuoteProvider,
    YahooQuoteProvider,
)

logger = logging.getLogger(__name__)


def resolve_provider(source: str | None) -> ProviderName:
    """Map a ``?source=`` value onto a provider; unknown names fall back to mock."""
    value = (source or "").strip().lower()
    try:
        return ProviderName(value)
    except ValueError:
        logger.warning("[QUOTE][unknown_source] source=%r fallback=%s", source, ProviderName.MOCK.value)
        return ProviderName.MOCK


class QuoteGatewayService:
    """Dispatches single-symbol lookups to the provider named by ``source``."""

    def __init__(self, providers: Mapping[ProviderName, QuoteProvider]) -> None:
        missing = [name.value for name in ProviderName if name not in providers]
        if missing:
            raise ValueError(f"missing providers: {', '.join(missing)}")
        self.providers = dict(providers)

    @classmethod
    def from_client(cls, yahoo_client: YahooChartClient, mock: MockQuoteProvider | None = None) -> "QuoteGatewayService":
        mock = mock or MockQuoteProvider()
        return cls(
            {
                ProviderName.YAHOO: YahooQuoteProvider(yahoo_client),
                ProviderName.ALPHA_VANTAGE: AlphaVantageStubProvider(mock),
                ProviderName.MOCK: mock,
            }
        )

    def fetch(self, symbol: str, source: str | ProviderName | None) -> Quote:
        provider_name = source if isinstance(source, ProviderName) else resolve_provider(source)
        provider = self.providers[provider_name]
        try:
            quote = provider.fetch(symbol)
        except FetchError as exc:
            logger.warning(
                "[QUOTE][fetch_failed] symbol=%s source=%s kind=%s error=%s",
                symbol,
                provider_name.value,
                exc.kind,
                exc,
            )
            raise
        logger.info("[QUOTE][fetched] symbol=%s source=%s price=%.2f", quote.symbol, quote.source, quote.price)
        return quote
