from __future__ import annotations

import logging
from typing import Iterable

from price_fetcher.errors import AllPricesFailedError, FetchError
from price_fetcher.schemas.quote import BatchResult, Quote
from price_fetcher.services.providers import ProviderName
from price_fetcher.services.quote_gateway import QuoteGatewayService, resolve_provider

logger = logging.getLogger(__name__)


def normalize_symbol(symbol: str) -> str:
    return str(symbol).strip().upper()


def parse_symbols(raw: str | None) -> list[str]:
    """Split a comma-separated ``symbols`` query value, dropping blank entries."""
    if not raw:
        return []
    return [s.strip() for s in raw.split(",") if s.strip()]


class PriceAggregator:
    """Fetches each symbol independently and splits results into quotes and failures."""

    def __init__(self, service: QuoteGatewayService) -> None:
        self.service = service

    def fetch_batch(self, symbols: Iterable[str], source: str | ProviderName | None) -> BatchResult:
        provider = source if isinstance(source, ProviderName) else resolve_provider(source)
        targets = [normalize_symbol(s) for s in symbols]

        quotes: list[Quote] = []
        failures: list[tuple[str, str]] = []
        for symbol in targets:
            try:
                quotes.append(self.service.fetch(symbol, provider))
            except FetchError as exc:
                failures.append((symbol, str(exc)))

        logger.info(
            "[QUOTE][batch_resolve] source=%s target_count=%d success_count=%d failure_count=%d",
            provider.value,
            len(targets),
            len(quotes),
            len(failures),
        )

        if not quotes:
            raise AllPricesFailedError(failures)
        return BatchResult(quotes=quotes, failures=failures)
