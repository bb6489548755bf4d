import unittest

from fastapi.testclient import TestClient

from coinconv.main import app
from coinconv.schemas.ticker import RawTicker
from coinconv.services.price_table import PriceTable, build_price_table, price_table_store
from coinconv.services.usage import usage_tracker


class ConverterApiContractTest(unittest.TestCase):
    def setUp(self):
        price_table_store.replace(
            build_price_table([RawTicker(symbol="ETHUSDT", lastPrice="2000")], "USDT")
        )
        usage_tracker.reset()
        self.client = TestClient(app)

    def tearDown(self):
        price_table_store.replace(PriceTable())

    def test_list_coins(self):
        r = self.client.get('/api/coins')

        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json(), ['ETH', 'USDT'])

    def test_convert_defaults_to_base_currency(self):
        r = self.client.get('/api/convert/ETH/2')

        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json(), {'result': '4000.00000000'})

    def test_convert_defaults_amount_to_one(self):
        r = self.client.get('/api/convert/eth')

        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json(), {'result': '2000.00000000'})

    def test_convert_base_to_asset(self):
        r = self.client.get('/api/convert/USDT/4000/ETH')

        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json(), {'result': '2.00000000'})

    def test_unknown_symbol_lists_available(self):
        r = self.client.get('/api/convert/XRP/1/USDT')

        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json(), {'error': 'Symbol must be one of: ETH, USDT'})

    def test_unknown_target_symbol_is_rejected(self):
        r = self.client.get('/api/convert/ETH/1/XRP')

        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json(), {'error': 'Symbol must be one of: ETH, USDT'})

    def test_invalid_amount(self):
        r = self.client.get('/api/convert/ETH/notanumber/USDT')

        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json(), {'error': 'Amount must be a number'})

    def test_empty_table_is_server_error(self):
        price_table_store.replace(PriceTable())

        r = self.client.get('/api/convert/ETH/notanumber/XRP')

        self.assertEqual(r.status_code, 500)
        self.assertEqual(r.json(), {'error': 'No coins available'})
        self.assertEqual(self.client.get('/api/coins').json(), [])

    def test_log_known_and_unknown_keys_return_empty_200(self):
        known = self.client.post('/api/log/convert')
        unknown = self.client.post('/api/log/not-a-real-key')

        self.assertEqual(known.status_code, 200)
        self.assertEqual(known.content, b'')
        self.assertEqual(unknown.status_code, 200)
        self.assertEqual(unknown.content, b'')

        metrics = self.client.get('/api/metrics/usage').json()
        self.assertEqual(metrics['known'], {'convert': 1})
        self.assertEqual(metrics['unknown'], 1)
        self.assertEqual(metrics['total'], 2)

    def test_price_metrics_contract(self):
        r = self.client.get('/api/metrics/prices')

        self.assertEqual(r.status_code, 200)
        body = r.json()
        for key in ('runs', 'successes', 'failures', 'last_error', 'last_success_ts', 'symbols', 'base_currency'):
            self.assertIn(key, body)
        self.assertEqual(body['symbols'], 2)

    def test_front_end_is_served_from_root(self):
        r = self.client.get('/')

        self.assertEqual(r.status_code, 200)
        self.assertIn('text/html', r.headers['content-type'])
        self.assertIn('/api/coins', r.text)


if __name__ == '__main__':
    unittest.main()
