"""HTTP client for downloading ICS calendar files."""

import asyncio
import logging
import random
from typing import Any, Optional
from urllib.parse import urlparse

import httpx

from .exceptions import (
    ICSAuthError,
    ICSFetchError,
    ICSHTTPError,
    ICSNetworkError,
    ICSTimeoutError,
)
from .models import ICSSource

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "User-Agent": "icsprint/1.0 (+https://github.com/icsprint/icsprint)",
    "Accept": "text/calendar, text/plain;q=0.9, */*;q=0.8",
}

# Backoff calculation constants
MAX_BACKOFF_SECONDS = 30.0
JITTER_MIN_FACTOR = 0.1
JITTER_MAX_FACTOR = 0.3


class ICSFetcher:
    """Async HTTP client for downloading ICS calendar files."""

    def __init__(
        self,
        settings: Any = None,
        client: Optional[httpx.AsyncClient] = None,
        log: Optional[logging.Logger] = None,
    ) -> None:
        """Initialize ICS fetcher.

        Args:
            settings: Object with optional ``max_retries`` and ``retry_backoff_factor``
            client: Optional pre-built client; it is not closed by the fetcher
            log: Logger for diagnostics (module logger when None)
        """
        self.settings = settings
        self.client = client
        self._owns_client = client is None
        self.log = log or logger

    async def __aenter__(self) -> "ICSFetcher":
        """Async context manager entry."""
        self._ensure_client()
        return self

    async def __aexit__(self, _exc_type: Any, _exc_val: Any, _exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.aclose()

    def _ensure_client(self) -> httpx.AsyncClient:
        if self.client is None or self.client.is_closed:
            self.client = httpx.AsyncClient(
                follow_redirects=True,
                timeout=httpx.Timeout(connect=10.0, read=30.0, write=10.0, pool=30.0),
                headers=DEFAULT_HEADERS,
            )
            self._owns_client = True
            self.log.debug("Created HTTP client")
        return self.client

    async def aclose(self) -> None:
        """Close the HTTP client if this fetcher created it."""
        if self.client is not None and self._owns_client and not self.client.is_closed:
            await self.client.aclose()
            self.log.debug("Closed HTTP client")
        if self._owns_client:
            self.client = None

    @staticmethod
    def validate_url(url: str) -> bool:
        """Accept only http(s) URLs with a host."""
        parsed = urlparse(url)
        return parsed.scheme in ("http", "https") and bool(parsed.hostname)

    async def fetch_ics(self, source: ICSSource) -> str:
        """Download the full calendar text for a source.

        Args:
            source: Calendar source (URL, auth, headers, timeout)

        Returns:
            Response body as text

        Raises:
            ICSAuthError: HTTP 401/403
            ICSHTTPError: Any other non-success status
            ICSTimeoutError: Request timed out on every attempt
            ICSNetworkError: Connection failed on every attempt
            ICSFetchError: Invalid URL or empty response
        """
        if not self.validate_url(source.url):
            raise ICSFetchError(f"Unsupported calendar URL: {source.url!r}")

        headers = {**source.auth.get_headers(), **source.custom_headers}

        try:
            response = await self._make_request_with_retry(source.url, headers, source.timeout)
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            self.log.error("HTTP %s fetching ICS from %s", status, source.url)
            if status == 401:
                raise ICSAuthError("Authentication failed - check credentials", status) from e
            if status == 403:
                raise ICSAuthError("Access forbidden - insufficient permissions", status) from e
            raise ICSHTTPError(f"HTTP {status}: {e.response.reason_phrase}", status) from e
        except httpx.TimeoutException as e:
            raise ICSTimeoutError(f"Request timeout after {source.timeout}s: {source.url}") from e
        except httpx.TransportError as e:
            raise ICSNetworkError(f"Network error: {e}") from e

        text = response.text
        if not text.strip():
            raise ICSFetchError(f"Empty response from {source.url}")

        self.log.info("Fetched %d bytes from %s", len(response.content), source.url)
        return text

    def _calculate_backoff(self, attempt: int, backoff_factor: float) -> float:
        """Calculate exponential backoff time with jitter."""
        base_backoff = min(backoff_factor**attempt, MAX_BACKOFF_SECONDS)
        jitter = random.uniform(JITTER_MIN_FACTOR, JITTER_MAX_FACTOR) * base_backoff  # nosec B311 - jitter not cryptographic
        return base_backoff + jitter

    async def _make_request_with_retry(
        self, url: str, headers: dict[str, str], timeout: int
    ) -> httpx.Response:
        """GET the URL, retrying transport failures with backoff.

        HTTP status errors are raised immediately without retry.
        """
        client = self._ensure_client()
        max_retries = int(getattr(self.settings, "max_retries", 2))
        backoff_factor = float(getattr(self.settings, "retry_backoff_factor", 1.5))

        attempt = 0
        while True:
            try:
                self.log.debug("GET %s (attempt %d)", url, attempt + 1)
                response = await client.get(url, headers=headers, timeout=timeout)
                response.raise_for_status()
                return response

            except (httpx.TimeoutException, httpx.TransportError) as e:
                if attempt >= max_retries:
                    self.log.error("All %d attempts failed for %s: %s", attempt + 1, url, e)
                    raise

                backoff_time = self._calculate_backoff(attempt, backoff_factor)
                self.log.warning(
                    "Request failed (attempt %s/%s), retrying in %.1fs: %s",
                    attempt + 1,
                    max_retries + 1,
                    backoff_time,
                    e,
                )
                await asyncio.sleep(backoff_time)
                attempt += 1
