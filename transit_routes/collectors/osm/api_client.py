"""
OSM API client

Handles communication with the OSM API including:
- Response caching
- Retry logic
- Connection limiting across worker threads
"""

import time
import threading
import requests
from typing import Optional
from loguru import logger

from .cache import OSMCache
from ...config import get_config, APIConfig
from ...errors import TransportError

# 4xx responses other than these are not retried
RETRYABLE_CLIENT_ERRORS = (408, 429)


class OSMAPIClient:
    """Client for fetching single entities from the OSM API"""

    def __init__(self, api_config: Optional[APIConfig] = None, cache: Optional[OSMCache] = None):
        self.api = api_config or get_config().api
        self.cache = cache or OSMCache(None)
        self.timeout = self.api.request_timeout
        self._connections = threading.BoundedSemaphore(self.api.max_connections)

    def url_for(self, kind: str, entity_id: int) -> str:
        return f"{self.api.osm_api_url.rstrip('/')}/{kind}/{entity_id}"

    def get(self, url: str, retry_delay: Optional[float] = None) -> str:
        """
        Fetch a URL, consulting the cache first

        Args:
            url: Resource URL
            retry_delay: Initial delay between retries (increases with attempts)

        Returns:
            Response body as text

        Raises:
            TransportError: If the request fails after all retries
        """
        cached = self.cache.load(url)
        if cached is not None:
            logger.debug(f"Cache hit: {url}")
            return cached

        body = self._request(url, self.api.retry_delay if retry_delay is None else retry_delay)
        self.cache.save(url, body)
        return body

    def _request(self, url: str, retry_delay: float) -> str:
        headers = {"User-Agent": self.api.user_agent}
        max_retries = self.api.max_retries

        for attempt in range(max_retries):
            last_attempt = attempt == max_retries - 1
            try:
                with self._connections:
                    response = requests.get(url, headers=headers, timeout=self.timeout)
                response.raise_for_status()
                return response.text
            except requests.exceptions.Timeout:
                if last_attempt:
                    raise TransportError(
                        f"OSM API timeout after {max_retries} attempts: {url}", timed_out=True
                    )
                wait_time = retry_delay * (attempt + 1)
                logger.debug(f"Timeout for {url} (attempt {attempt + 1}/{max_retries}). Retrying in {wait_time}s...")
                time.sleep(wait_time)
            except requests.exceptions.HTTPError as e:
                status = e.response.status_code if e.response is not None else None
                if last_attempt or self._is_permanent(status):
                    raise TransportError(f"OSM API HTTP {status}: {url}", status_code=status) from e
                wait_time = retry_delay * (attempt + 1)
                logger.debug(f"HTTP {status} for {url} (attempt {attempt + 1}/{max_retries}). Retrying in {wait_time}s...")
                time.sleep(wait_time)
            except requests.exceptions.RequestException as e:
                if last_attempt:
                    raise TransportError(f"OSM API request failed after {max_retries} attempts: {e}") from e
                wait_time = retry_delay * (attempt + 1)
                logger.debug(f"Request for {url} failed (attempt {attempt + 1}): {e}. Retrying in {wait_time}s...")
                time.sleep(wait_time)

        raise TransportError(f"OSM API request not attempted: {url}")

    @staticmethod
    def _is_permanent(status: Optional[int]) -> bool:
        return status is not None and 400 <= status < 500 and status not in RETRYABLE_CLIENT_ERRORS
