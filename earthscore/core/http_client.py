"""
Base HTTP client with per-call deadlines and tolerant JSON handling.

Provides a reusable foundation for all upstream source adapters.
Every call is a single bounded read: there are no retries and no backoff.
Subclasses expose a ``fetch`` method that never raises; failures become
``None`` at that boundary.
"""
import asyncio
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx

from earthscore.core.api_errors import (
    APIError,
    UpstreamError,
    UpstreamTimeoutError,
    classify_http_error,
)
from earthscore.core.api_registry import get_api_config

logger = logging.getLogger(__name__)


class BaseAPIClient(ABC):
    """
    Base class for all upstream source adapters.

    Provides unified:
    - HTTP request handling with a fixed deadline per call
    - Standardized error classification
    - Deterministic client cleanup (async context manager)

    Subclasses should:
    - Set SOURCE_NAME (a key of the source registry)
    - Implement ``_fetch`` returning a parsed payload or None
    """

    # Override in subclass
    SOURCE_NAME: str = "unknown"

    USER_AGENT: str = "EarthScore/1.0 (livability score service)"

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the adapter.

        Args:
            api_key: Optional API key for authentication
            timeout: Deadline in seconds for one call (registry default if None)
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        config = get_api_config(self.SOURCE_NAME)
        self.config = config
        self.base_url = config.base_url
        self.api_key = api_key
        self.timeout = timeout if timeout is not None else config.timeout_seconds
        self.connect_timeout = min(config.connect_timeout_seconds, self.timeout)
        self._transport = transport

        # HTTP client (lazy initialization, closed on exit)
        self._client: Optional[httpx.AsyncClient] = None

        logger.debug(
            f"Initialized {self.SOURCE_NAME} client: "
            f"api_key_present={api_key is not None}, timeout={self.timeout}"
        )

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout, connect=self.connect_timeout),
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client and release resources."""
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.debug(f"{self.SOURCE_NAME} client closed")

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit - ensures cleanup."""
        await self.close()

    def _build_headers(self) -> Dict[str, str]:
        """
        Build request headers.

        Override to add source-specific headers (e.g., X-API-Key).

        Returns:
            Dict of headers
        """
        return {
            "Accept": "application/json",
            "User-Agent": self.USER_AGENT,
        }

    async def _request(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        resource_id: str = "unknown",
    ) -> Any:
        """
        Make one HTTP request and parse its JSON body.

        Args:
            method: HTTP method (GET, POST, etc.)
            url: Full URL or path (if path, the registry base URL is prepended)
            params: Query parameters
            resource_id: Identifier for logging

        Returns:
            Parsed JSON response

        Raises:
            UpstreamError: On network failure, error status, or unparsable body
        """
        if not url.startswith("http"):
            url = f"{self.base_url.rstrip('/')}/{url.lstrip('/')}"

        client = await self._get_client()
        logger.debug(f"[{self.SOURCE_NAME}] {method} {resource_id}")

        try:
            response = await client.request(
                method, url, params=params, headers=self._build_headers()
            )
        except httpx.TimeoutException:
            raise UpstreamTimeoutError(source=self.SOURCE_NAME, timeout=self.timeout)
        except httpx.RequestError as e:
            raise UpstreamError(
                message=f"Request failed: {str(e)}", source=self.SOURCE_NAME
            )

        if not response.is_success:
            raise classify_http_error(
                response.status_code, response.text[:500], self.SOURCE_NAME
            )

        try:
            return json.loads(response.text)
        except ValueError:
            raise UpstreamError(
                message="Response body is not valid JSON",
                source=self.SOURCE_NAME,
                status_code=response.status_code,
            )

    async def get(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        resource_id: str = "unknown",
    ) -> Any:
        """
        Make GET request.

        Args:
            url: URL or path
            params: Query parameters
            resource_id: Identifier for logging

        Returns:
            Parsed JSON response
        """
        return await self._request("GET", url, params=params, resource_id=resource_id)

    @abstractmethod
    async def _fetch(self, *args, **kwargs) -> Any:
        """Source-specific read and parse. May raise; ``fetch`` recovers."""

    async def fetch(self, *args, **kwargs) -> Any:
        """
        Read the source under a fixed deadline.

        Returns:
            Parsed payload, or None when the source is unavailable
        """
        try:
            return await asyncio.wait_for(
                self._fetch(*args, **kwargs), timeout=self.timeout
            )
        except asyncio.TimeoutError:
            logger.warning(
                f"[{self.SOURCE_NAME}] Unavailable: deadline of {self.timeout:.1f}s exceeded"
            )
        except APIError as e:
            logger.warning(f"[{self.SOURCE_NAME}] Unavailable: {e}")
        except (KeyError, TypeError, ValueError, AttributeError, IndexError) as e:
            logger.warning(f"[{self.SOURCE_NAME}] Malformed payload: {e!r}")
        except Exception as e:
            logger.warning(
                f"[{self.SOURCE_NAME}] Unavailable: unexpected {type(e).__name__}: {e!r:.200}"
            )
        return None
