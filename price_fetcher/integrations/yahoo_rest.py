from __future__ import annotations

import math
import threading
import time
from typing import Any, Dict, Optional

import requests

from price_fetcher.errors import (
    MalformedPayloadError,
    MissingFieldError,
    UpstreamHttpError,
    UpstreamUnreachableError,
)


class YahooChartClient:
    """Yahoo Finance chart API client returning normalized quote fields."""

    DEFAULT_BASE_URL = "https://query1.finance.yahoo.com"
    USER_AGENT = "WSB-Price-Fetcher/1.0"
    SOURCE = "yahoo"

    def __init__(
        self,
        session: Optional[Any] = None,
        base_url: Optional[str] = None,
        timeout: float = 5.0,
    ) -> None:
        self._session = session
        self._local = threading.local()
        self._owned_sessions: list[requests.Session] = []
        self._lock = threading.Lock()
        self.base_url = (base_url or self.DEFAULT_BASE_URL).rstrip("/")
        self.timeout = timeout

    @property
    def session(self) -> Any:
        """Injected session, or one ``requests.Session`` per worker thread."""
        if self._session is not None:
            return self._session
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            self._local.session = session
            with self._lock:
                self._owned_sessions.append(session)
        return session

    def close(self) -> None:
        # injected sessions belong to the caller
        with self._lock:
            sessions, self._owned_sessions = self._owned_sessions, []
        for session in sessions:
            session.close()
        self._local = threading.local()

    @staticmethod
    def _to_float(value: Any) -> Optional[float]:
        # bool is an int subclass but never a price
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        try:
            value = float(value)
        except OverflowError:
            return None
        if not math.isfinite(value):
            return None
        return value

    def _get_chart(self, symbol: str) -> Any:
        try:
            response = self.session.get(
                f"{self.base_url}/v8/finance/chart/{requests.utils.quote(symbol, safe='')}",
                headers={"User-Agent": self.USER_AGENT},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise UpstreamUnreachableError(f"request failed: {exc}") from exc

        if not 200 <= response.status_code < 300:
            raise UpstreamHttpError(response.status_code, getattr(response, "reason", "") or "")

        try:
            return response.json()
        except ValueError as exc:
            raise MalformedPayloadError("Invalid response format") from exc

    @staticmethod
    def _extract_meta(payload: Any) -> Dict[str, Any]:
        chart = payload.get("chart") if isinstance(payload, dict) else None
        results = chart.get("result") if isinstance(chart, dict) else None
        if not isinstance(results, list) or not results or not isinstance(results[0], dict):
            raise MalformedPayloadError("Invalid response format")

        meta = results[0].get("meta")
        if not isinstance(meta, dict):
            raise MalformedPayloadError("Missing meta data")
        return meta

    def get_quote(self, symbol: str) -> Dict[str, Any]:
        meta = self._extract_meta(self._get_chart(symbol))

        price = self._to_float(meta.get("regularMarketPrice"))
        if price is None:
            raise MissingFieldError("Missing price data")

        currency = meta.get("currency")
        return {
            "symbol": symbol,
            "price": price,
            "currency": currency if isinstance(currency, str) and currency else "USD",
            "timestamp": int(time.time()),
            "source": self.SOURCE,
            "change_24h": self._to_float(meta.get("regularMarketChange")),
            "change_percent_24h": self._to_float(meta.get("regularMarketChangePercent")),
        }
