import unittest
from unittest.mock import MagicMock

import requests

from coinconv.errors import UpstreamFetchFailedError
from coinconv.integrations.ticker_rest import TickerRestClient


def _session_returning(payload):
    session = MagicMock()
    response = MagicMock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    session.get.return_value = response
    return session


class TestTickerRestClient(unittest.TestCase):
    def test_get_tickers_uses_url_and_timeout(self):
        session = _session_returning([{"symbol": "ETHUSDT", "lastPrice": "2000.00", "volume": "1"}])
        client = TickerRestClient("https://example.test/ticker", session=session, timeout=3)

        tickers = client.get_tickers()

        session.get.assert_called_once_with("https://example.test/ticker", timeout=3)
        self.assertEqual(len(tickers), 1)
        self.assertEqual(tickers[0].symbol, "ETHUSDT")
        self.assertEqual(tickers[0].last_price, "2000.00")

    def test_numeric_last_price_is_accepted(self):
        session = _session_returning([{"symbol": "ETHUSDT", "lastPrice": 2000.5}])
        client = TickerRestClient(session=session)

        self.assertEqual(client.get_tickers()[0].last_price, "2000.5")

    def test_malformed_rows_are_skipped(self):
        session = _session_returning(
            [
                {"symbol": "ETHUSDT", "lastPrice": "2000"},
                {"symbol": "BTCUSDT"},
                "garbage",
                {"lastPrice": "1"},
            ]
        )
        client = TickerRestClient(session=session)

        tickers = client.get_tickers()

        self.assertEqual([t.symbol for t in tickers], ["ETHUSDT"])
        self.assertEqual(client.skipped_rows, 3)

    def test_connection_error_is_upstream_failure(self):
        session = MagicMock()
        session.get.side_effect = requests.ConnectionError("boom")
        client = TickerRestClient(session=session)

        with self.assertRaises(UpstreamFetchFailedError):
            client.get_tickers()

    def test_http_error_is_upstream_failure(self):
        session = _session_returning([])
        session.get.return_value.raise_for_status.side_effect = requests.HTTPError("503 Server Error")
        client = TickerRestClient(session=session)

        with self.assertRaises(UpstreamFetchFailedError) as ctx:
            client.get_tickers()
        self.assertIn("503", str(ctx.exception))

    def test_invalid_json_is_upstream_failure(self):
        session = _session_returning(None)
        session.get.return_value.json.side_effect = ValueError("Expecting value")
        client = TickerRestClient(session=session)

        with self.assertRaises(UpstreamFetchFailedError):
            client.get_tickers()

    def test_non_list_payload_is_upstream_failure(self):
        session = _session_returning({"code": -1003, "msg": "Too many requests"})
        client = TickerRestClient(session=session)

        with self.assertRaises(UpstreamFetchFailedError) as ctx:
            client.get_tickers()
        self.assertIn("dict", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
