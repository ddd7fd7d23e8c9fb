import threading
import unittest
from unittest.mock import MagicMock, patch

import requests

from price_fetcher.errors import (
    MalformedPayloadError,
    MissingFieldError,
    UpstreamHttpError,
    UpstreamUnreachableError,
)
from price_fetcher.integrations.yahoo_rest import YahooChartClient


def _response(status_code=200, payload=None, reason="OK"):
    response = MagicMock()
    response.status_code = status_code
    response.reason = reason
    response.json.return_value = payload
    return response


def _chart(meta):
    return {"chart": {"result": [{"meta": meta}], "error": None}}


class TestYahooChartClient(unittest.TestCase):
    def _client(self, session):
        return YahooChartClient(session=session, base_url="https://example.test/", timeout=2.5)

    def test_get_quote_uses_chart_contract(self):
        session = MagicMock()
        session.get.return_value = _response(payload=_chart({"regularMarketPrice": 187.44, "currency": "USD"}))

        self._client(session).get_quote("AAPL")

        session.get.assert_called_once_with(
            "https://example.test/v8/finance/chart/AAPL",
            headers={"User-Agent": "WSB-Price-Fetcher/1.0"},
            timeout=2.5,
        )

    def test_get_quote_parses_meta(self):
        session = MagicMock()
        session.get.return_value = _response(
            payload=_chart(
                {
                    "regularMarketPrice": 187.44,
                    "currency": "EUR",
                    "regularMarketChange": -1.2345,
                    "regularMarketChangePercent": -0.65,
                    "regularMarketTime": 1600000000,
                }
            )
        )

        with patch("price_fetcher.integrations.yahoo_rest.time.time", return_value=1700000123.9):
            quote = self._client(session).get_quote("AAPL")

        self.assertEqual(
            quote,
            {
                "symbol": "AAPL",
                "price": 187.44,
                "currency": "EUR",
                "timestamp": 1700000123,
                "source": "yahoo",
                "change_24h": -1.2345,
                "change_percent_24h": -0.65,
            },
        )

    def test_optional_fields_default(self):
        session = MagicMock()
        session.get.return_value = _response(
            payload=_chart({"regularMarketPrice": 10, "regularMarketChange": "n/a"})
        )

        quote = self._client(session).get_quote("XYZ")

        self.assertEqual(quote["price"], 10.0)
        self.assertEqual(quote["currency"], "USD")
        self.assertIsNone(quote["change_24h"])
        self.assertIsNone(quote["change_percent_24h"])

    def test_connection_error_is_unreachable(self):
        session = MagicMock()
        session.get.side_effect = requests.ConnectionError("dns failure")

        with self.assertRaises(UpstreamUnreachableError) as ctx:
            self._client(session).get_quote("AAPL")
        self.assertIn("dns failure", str(ctx.exception))

    def test_timeout_is_unreachable(self):
        session = MagicMock()
        session.get.side_effect = requests.Timeout("read timed out")

        with self.assertRaises(UpstreamUnreachableError):
            self._client(session).get_quote("AAPL")

    def test_non_2xx_is_http_error(self):
        session = MagicMock()
        session.get.return_value = _response(status_code=404, reason="Not Found", payload={})

        with self.assertRaises(UpstreamHttpError) as ctx:
            self._client(session).get_quote("NOPE")

        self.assertEqual(ctx.exception.status_code, 404)
        self.assertEqual(str(ctx.exception), "HTTP error: 404 Not Found")
        self.assertEqual(ctx.exception.kind, "upstream_http_error")

    def test_non_json_body_is_malformed(self):
        session = MagicMock()
        response = _response()
        response.json.side_effect = ValueError("Expecting value")
        session.get.return_value = response

        with self.assertRaises(MalformedPayloadError):
            self._client(session).get_quote("AAPL")

    def test_empty_result_is_malformed(self):
        session = MagicMock()
        session.get.return_value = _response(payload={"chart": {"result": None, "error": {"code": "Not Found"}}})

        with self.assertRaises(MalformedPayloadError) as ctx:
            self._client(session).get_quote("AAPL")
        self.assertEqual(str(ctx.exception), "Invalid response format")

    def test_missing_meta_is_malformed(self):
        session = MagicMock()
        session.get.return_value = _response(payload={"chart": {"result": [{"timestamp": []}]}})

        with self.assertRaises(MalformedPayloadError) as ctx:
            self._client(session).get_quote("AAPL")
        self.assertEqual(str(ctx.exception), "Missing meta data")

    def test_missing_price_is_missing_field(self):
        session = MagicMock()
        session.get.return_value = _response(payload=_chart({"currency": "USD"}))

        with self.assertRaises(MissingFieldError) as ctx:
            self._client(session).get_quote("AAPL")
        self.assertEqual(str(ctx.exception), "Missing price data")

    def test_boolean_price_is_missing_field(self):
        session = MagicMock()
        session.get.return_value = _response(payload=_chart({"regularMarketPrice": True}))

        with self.assertRaises(MissingFieldError):
            self._client(session).get_quote("AAPL")

    def test_oversized_price_is_missing_field(self):
        session = MagicMock()
        session.get.return_value = _response(payload=_chart({"regularMarketPrice": 10**400}))

        with self.assertRaises(MissingFieldError) as ctx:
            self._client(session).get_quote("AAPL")
        self.assertEqual(str(ctx.exception), "Missing price data")

    def test_oversized_changes_become_none(self):
        session = MagicMock()
        session.get.return_value = _response(
            payload=_chart(
                {
                    "regularMarketPrice": 12.5,
                    "regularMarketChange": 10**400,
                    "regularMarketChangePercent": -(10**400),
                }
            )
        )

        quote = self._client(session).get_quote("AAPL")

        self.assertEqual(quote["price"], 12.5)
        self.assertIsNone(quote["change_24h"])
        self.assertIsNone(quote["change_percent_24h"])

    def test_nan_price_is_missing_field(self):
        session = MagicMock()
        session.get.return_value = _response(payload=_chart({"regularMarketPrice": float("nan")}))

        with self.assertRaises(MissingFieldError):
            self._client(session).get_quote("AAPL")

    def test_symbol_is_encoded_into_path(self):
        session = MagicMock()
        session.get.return_value = _response(payload=_chart({"regularMarketPrice": 1.0}))
        client = self._client(session)

        client.get_quote("A?B#C/D")
        client.get_quote("BRK.B")

        urls = [c.args[0] for c in session.get.call_args_list]
        self.assertEqual(
            urls,
            [
                "https://example.test/v8/finance/chart/A%3FB%23C%2FD",
                "https://example.test/v8/finance/chart/BRK.B",
            ],
        )


class TestYahooChartClientSessions(unittest.TestCase):
    def test_injected_session_is_used_and_not_closed(self):
        session = MagicMock()
        client = YahooChartClient(session=session)

        self.assertIs(client.session, session)
        client.close()
        session.close.assert_not_called()

    def test_one_session_per_thread(self):
        with patch(
            "price_fetcher.integrations.yahoo_rest.requests.Session",
            side_effect=lambda: MagicMock(),
        ):
            client = YahooChartClient()
            main_session = client.session
            worker_sessions = []
            worker = threading.Thread(target=lambda: worker_sessions.append(client.session))
            worker.start()
            worker.join()

        self.assertIs(client.session, main_session)
        self.assertEqual(len(worker_sessions), 1)
        self.assertIsNot(worker_sessions[0], main_session)

        client.close()
        main_session.close.assert_called_once()
        worker_sessions[0].close.assert_called_once()


if __name__ == "__main__":
    unittest.main()
