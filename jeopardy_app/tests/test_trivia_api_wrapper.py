"""
Tests for the trivia API wrapper.
"""

from unittest.mock import Mock, patch

import requests
from django.core.cache import cache
from django.test import TestCase, override_settings

from board_core.exceptions import DataSourceError

from jeopardy_app.trivia_api_wrapper import TriviaAPIWrapper


def make_response(json_data=None, status_code=200, json_error=None):
    response = Mock()
    response.status_code = status_code
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} Error", response=response)
    else:
        response.raise_for_status.return_value = None
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = json_data
    return response


@override_settings(TRIVIA_API_BASE_URL="https://trivia.example/api/", TRIVIA_API_MAX_RETRIES=3, TRIVIA_API_MIN_DELAY=0.0)
class TestTriviaAPIWrapper(TestCase):
    def setUp(self):
        cache.clear()
        self.session = Mock(spec=requests.Session)
        self.session.headers = {}
        self.wrapper = TriviaAPIWrapper(session=self.session)

    def tearDown(self):
        cache.clear()

    def test_initialization(self):
        self.assertEqual(self.wrapper.base_url, "https://trivia.example/api")
        self.assertEqual(self.wrapper.max_retries, 3)
        self.assertEqual(self.wrapper.request_timeout, 5.0)
        self.assertEqual(self.session.headers['Accept'], 'application/json')

    def test_get_categories(self):
        self.session.get.return_value = make_response([{'id': 1, 'title': 'a', 'clues_count': 5}])

        categories = self.wrapper.get_categories(100)

        self.assertEqual(categories, [{'id': 1, 'title': 'a', 'clues_count': 5}])
        self.session.get.assert_called_once_with(
            "https://trivia.example/api/categories", params={'count': 100}, timeout=5.0
        )
        self.assertEqual(self.wrapper.successful_calls, 1)

    def test_categories_are_not_cached(self):
        self.session.get.return_value = make_response([{'id': 1}])
        self.wrapper.get_categories(10)
        self.wrapper.get_categories(10)
        self.assertEqual(self.session.get.call_count, 2)

    def test_category_is_cached(self):
        self.session.get.return_value = make_response({'id': 7, 'title': 't', 'clues': []})

        first = self.wrapper.get_category(7)
        second = self.wrapper.get_category(7)

        self.assertEqual(first, second)
        self.session.get.assert_called_once_with("https://trivia.example/api/category", params={'id': 7}, timeout=5.0)
        self.assertEqual(self.wrapper.cache_hits, 1)

    def test_force_refresh_skips_cache(self):
        self.session.get.return_value = make_response({'id': 7, 'title': 't', 'clues': []})
        self.wrapper.get_category(7)
        self.wrapper.get_category(7, force_refresh=True)
        self.assertEqual(self.session.get.call_count, 2)

    def test_wrong_payload_shapes(self):
        self.session.get.return_value = make_response({'id': 1})
        with self.assertRaises(DataSourceError):
            self.wrapper.get_categories(10)

        self.session.get.return_value = make_response([{'id': 1}])
        with self.assertRaises(DataSourceError):
            self.wrapper.get_category(1)
        self.assertIsNone(cache.get(self.wrapper._get_cache_key('category', {'id': 1})))

    def test_malformed_category_is_not_cached(self):
        for payload in [{'id': 3, 'clues': []}, {'id': 3, 'title': '  ', 'clues': []}, {'id': 3, 'title': 't', 'clues': None}]:
            with self.subTest(payload=payload):
                cache.clear()
                self.session.get.reset_mock()
                self.session.get.return_value = make_response(payload)

                self.assertEqual(self.wrapper.get_category(3), payload)
                self.assertIsNone(cache.get(self.wrapper._get_cache_key('category', {'id': 3})))

                self.wrapper.get_category(3)
                self.assertEqual(self.session.get.call_count, 2)

    def test_invalid_json_is_not_retried(self):
        self.session.get.return_value = make_response(json_error=ValueError("Expecting value"))
        with patch('time.sleep') as mock_sleep:
            with self.assertRaises(DataSourceError):
                self.wrapper.get_categories(10)
        self.assertEqual(self.session.get.call_count, 1)
        mock_sleep.assert_not_called()

    def test_timeout_is_retried(self):
        self.session.get.side_effect = [requests.Timeout("read timed out"), make_response([{'id': 1}])]
        with patch('time.sleep') as mock_sleep:
            categories = self.wrapper.get_categories(10)
        self.assertEqual(categories, [{'id': 1}])
        self.assertEqual(self.session.get.call_count, 2)
        mock_sleep.assert_called_once()
        self.assertEqual(self.wrapper.failed_calls, 1)
        self.assertEqual(self.wrapper.successful_calls, 1)

    def test_server_errors_exhaust_retries(self):
        self.session.get.return_value = make_response(status_code=503)
        with patch('time.sleep') as mock_sleep:
            with self.assertRaises(DataSourceError):
                self.wrapper.get_category(3)
        self.assertEqual(self.session.get.call_count, 3)
        self.assertEqual(mock_sleep.call_count, 2)

    def test_rate_limit_uses_longer_backoff(self):
        self.session.get.side_effect = [make_response(status_code=429), make_response([{'id': 1}])]
        with patch('time.sleep') as mock_sleep:
            self.wrapper.get_categories(10)
        self.assertEqual(self.wrapper.rate_limited_calls, 1)
        self.assertGreaterEqual(mock_sleep.call_args[0][0], self.wrapper.rate_limit_base_delay)

    def test_client_errors_are_not_retried(self):
        self.session.get.return_value = make_response(status_code=404)
        with patch('time.sleep') as mock_sleep:
            with self.assertRaises(DataSourceError):
                self.wrapper.get_category(99)
        self.assertEqual(self.session.get.call_count, 1)
        mock_sleep.assert_not_called()

    def test_connection_errors_become_data_source_errors(self):
        self.session.get.side_effect = requests.ConnectionError("connection refused")
        with patch('time.sleep'):
            with self.assertRaises(DataSourceError) as ctx:
                self.wrapper.get_categories(10)
        self.assertIsInstance(ctx.exception.__cause__, requests.ConnectionError)

    def test_exponential_backoff(self):
        self.assertGreaterEqual(self.wrapper._exponential_backoff(0), 0.5)
        self.assertLessEqual(self.wrapper._exponential_backoff(0), 0.55)
        self.assertGreaterEqual(self.wrapper._exponential_backoff(2), 2.0)
        self.assertLessEqual(self.wrapper._exponential_backoff(20), self.wrapper.max_delay * 1.1)

    def test_minimum_delay_enforcement(self):
        self.wrapper.min_delay_between_calls = 1.0
        self.wrapper.last_call_time = 0
        with patch('time.sleep') as mock_sleep:
            self.wrapper._enforce_minimum_delay()
            mock_sleep.assert_not_called()
            self.wrapper._enforce_minimum_delay()
            mock_sleep.assert_called_once()

    def test_cache_key_is_deterministic(self):
        key = self.wrapper._get_cache_key('category', {'id': 5, 'b': 'x y'})
        self.assertEqual(key, self.wrapper._get_cache_key('category', {'b': 'x y', 'id': 5}))
        self.assertNotIn(' ', key)

    def test_status_and_reset(self):
        self.session.get.return_value = make_response([{'id': 1}])
        self.wrapper.get_categories(10)

        status = self.wrapper.get_status()
        self.assertEqual(status['total_calls'], 1)
        self.assertEqual(status['success_rate'], 100)
        self.assertEqual(status['base_url'], "https://trivia.example/api")

        self.wrapper.reset_counters()
        self.assertEqual(self.wrapper.get_status()['total_calls'], 0)
