"""
Robust wrapper around the trivia API that handles spacing, retries, and caching.
This makes board builds more reliable when the public trivia service is slow or flaky.
"""

import logging
import random
import threading
import time
import urllib.parse
from typing import Any, Dict, List, Optional

import requests
from django.conf import settings
from django.core.cache import cache

from board_core.exceptions import DataSourceError

from jeopardy_app.metrics import record_trivia_api_cache, record_trivia_api_call

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = (429, 500, 502, 503, 504)


class TriviaAPIWrapper:
    """
    Wrapper for trivia API calls with request spacing, retries, and caching.
    """

    def __init__(self, base_url: Optional[str] = None, session: Optional[requests.Session] = None):
        self.base_url = (base_url or settings.TRIVIA_API_BASE_URL).rstrip('/')

        # Minimum delay between calls
        self.min_delay_between_calls = settings.TRIVIA_API_MIN_DELAY
        self.last_call_time = 0

        # Retry configuration
        self.max_retries = max(1, settings.TRIVIA_API_MAX_RETRIES)
        self.base_delay = 0.5
        self.max_delay = 10.0

        # Rate limit specific configuration
        self.rate_limit_base_delay = 5.0
        self.rate_limit_max_delay = 60.0

        self.request_timeout = settings.TRIVIA_API_TIMEOUT

        # Cache configuration
        self.default_cache_timeout = settings.TRIVIA_API_CACHE_TIMEOUT
        self.cache_prefix = "trivia_api"

        self._session = session or requests.Session()
        self._session.headers.update({'Accept': 'application/json'})

        # Category fetches may run on several threads
        self._lock = threading.Lock()

        # Track API calls for monitoring
        self.total_calls = 0
        self.successful_calls = 0
        self.failed_calls = 0
        self.rate_limited_calls = 0
        self.cache_hits = 0

    def _enforce_minimum_delay(self):
        """Enforce minimum delay between API calls."""
        with self._lock:
            time_since_last_call = time.time() - self.last_call_time
            wait_time = self.min_delay_between_calls - time_since_last_call
            self.last_call_time = time.time() + max(wait_time, 0)

        if wait_time > 0:
            logger.debug(f"Enforcing minimum delay: waiting {wait_time:.2f} seconds between calls")
            time.sleep(wait_time)

    def _get_cache_key(self, endpoint: str, params: Dict[str, Any]) -> str:
        """Generate a cache key for the API call."""
        param_str = "&".join(f"{k}={v}" for k, v in sorted(params.items()))
        return f"{self.cache_prefix}:{endpoint}:{urllib.parse.quote(param_str, safe='')}"

    def _get_cached_response(self, cache_key: str) -> Optional[Any]:
        cached = cache.get(cache_key)
        record_trivia_api_cache(cached is not None)
        if cached is not None:
            with self._lock:
                self.cache_hits += 1
            logger.debug(f"Cache hit: {cache_key}")
        return cached

    def _set_cached_response(self, cache_key: str, response: Any, timeout: Optional[int] = None):
        if timeout is None:
            timeout = self.default_cache_timeout
        cache.set(cache_key, response, timeout)
        logger.debug(f"Cached response for {cache_key} (timeout: {timeout}s)")

    def _exponential_backoff(self, attempt: int, is_rate_limit: bool = False) -> float:
        """Calculate delay for exponential backoff with jitter."""
        if is_rate_limit:
            delay = min(self.rate_limit_base_delay * (2 ** attempt), self.rate_limit_max_delay)
        else:
            delay = min(self.base_delay * (2 ** attempt), self.max_delay)

        # Add jitter to prevent thundering herd
        jitter = random.uniform(0, 0.1 * delay)
        return delay + jitter

    def _is_retryable(self, error: requests.RequestException) -> bool:
        if isinstance(error, (requests.Timeout, requests.ConnectionError)):
            return True
        response = getattr(error, 'response', None)
        return response is not None and response.status_code in RETRYABLE_STATUS_CODES

    def _handle_api_error(self, error: requests.RequestException, attempt: int, max_attempts: int) -> bool:
        """Handle API errors and decide whether to retry."""
        if not self._is_retryable(error):
            logger.error(f"Non-retryable error on attempt {attempt + 1}/{max_attempts}: {error}")
            return False

        response = getattr(error, 'response', None)
        is_rate_limit = response is not None and response.status_code == 429
        if is_rate_limit:
            with self._lock:
                self.rate_limited_calls += 1

        logger.warning(f"Retryable error on attempt {attempt + 1}/{max_attempts}: {error}")
        if attempt >= max_attempts - 1:
            return False

        wait_time = self._exponential_backoff(attempt, is_rate_limit=is_rate_limit)
        logger.info(f"Waiting {wait_time:.1f} seconds before retry...")
        time.sleep(wait_time)
        return True

    def call_api(self, endpoint: str, **params) -> Any:
        """
        Make a robust API call with request spacing and retries.

        Args:
            endpoint: Path below the base URL, e.g. 'categories'
            **params: Query parameters

        Returns:
            Decoded JSON response

        Raises:
            DataSourceError: If the call fails after all retries or the body is not JSON
        """
        url = f"{self.base_url}/{endpoint}"
        last_error = None

        for attempt in range(self.max_retries):
            self._enforce_minimum_delay()
            with self._lock:
                self.total_calls += 1

            try:
                logger.debug(f"Calling {url} with {params} (attempt {attempt + 1}/{self.max_retries})")
                response = self._session.get(url, params=params, timeout=self.request_timeout)
                response.raise_for_status()
                data = response.json()
            except ValueError as error:
                # Undecodable body, retrying will not help
                with self._lock:
                    self.failed_calls += 1
                record_trivia_api_call(endpoint, "invalid_json")
                logger.error(f"Invalid JSON from {url}: {error}")
                raise DataSourceError(f"Trivia API returned invalid JSON for {endpoint}") from error
            except requests.RequestException as error:
                last_error = error
                with self._lock:
                    self.failed_calls += 1
                if self._handle_api_error(error, attempt, self.max_retries):
                    continue
                break

            with self._lock:
                self.successful_calls += 1
            record_trivia_api_call(endpoint, "success")
            return data

        record_trivia_api_call(endpoint, "error")
        logger.error(f"API call to {endpoint} failed after {attempt + 1} attempts: {last_error}")
        raise DataSourceError(f"Trivia API request to {endpoint} failed: {last_error}") from last_error

    def get_categories(self, count: int) -> List[Dict[str, Any]]:
        """
        Get a list of candidate categories.

        Never cached, so every board samples from a fresh pool.
        """
        data = self.call_api('categories', count=count)
        if not isinstance(data, list):
            raise DataSourceError(f"Expected a list of categories, got {type(data).__name__}")
        return data

    @staticmethod
    def _is_well_formed_category(data: Dict[str, Any]) -> bool:
        """A category worth caching has a non-blank title and a clue list."""
        title = data.get('title')
        return isinstance(title, str) and bool(title.strip()) and isinstance(data.get('clues'), list)

    def get_category(self, category_id: Any, force_refresh: bool = False) -> Dict[str, Any]:
        """
        Get one category with all of its clues.

        Category contents do not change upstream, so responses are cached.
        """
        cache_key = self._get_cache_key('category', {'id': category_id})
        if not force_refresh:
            cached_response = self._get_cached_response(cache_key)
            if cached_response is not None:
                return cached_response

        data = self.call_api('category', id=category_id)
        if not isinstance(data, dict):
            raise DataSourceError(f"Expected a category object for {category_id}, got {type(data).__name__}")

        if self._is_well_formed_category(data):
            self._set_cached_response(cache_key, data)
        else:
            logger.warning(f"Not caching malformed payload for category {category_id}")
        return data

    def get_status(self) -> Dict[str, Any]:
        """Get current status of the API wrapper."""
        return {
            'base_url': self.base_url,
            'total_calls': self.total_calls,
            'successful_calls': self.successful_calls,
            'failed_calls': self.failed_calls,
            'rate_limited_calls': self.rate_limited_calls,
            'cache_hits': self.cache_hits,
            'success_rate': (self.successful_calls / max(self.total_calls, 1)) * 100,
            'min_delay_between_calls': self.min_delay_between_calls,
            'request_timeout': self.request_timeout,
        }

    def reset_counters(self):
        """Reset all counters (useful for testing)."""
        with self._lock:
            self.total_calls = 0
            self.successful_calls = 0
            self.failed_calls = 0
            self.rate_limited_calls = 0
            self.cache_hits = 0
            self.last_call_time = 0


# Global instance
trivia_api_wrapper = TriviaAPIWrapper()


# Convenience functions
def get_categories(count: int) -> List[Dict[str, Any]]:
    """Get candidate categories with retries."""
    return trivia_api_wrapper.get_categories(count)


def get_category(category_id: Any) -> Dict[str, Any]:
    """Get a category with its clues, cached."""
    return trivia_api_wrapper.get_category(category_id)


def get_trivia_api_status() -> Dict[str, Any]:
    """Get the status of the global wrapper."""
    return trivia_api_wrapper.get_status()
