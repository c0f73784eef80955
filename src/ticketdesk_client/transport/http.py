"""
Async HTTP transport for the TicketDesk REST backend.

Owns one aiohttp session per transport, decodes JSON bodies and turns every
failure into a TicketDesk error carrying the original status and payload.
It never retries; retry is the caller's policy.
"""

import asyncio
import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol
from urllib.parse import urlsplit

import aiohttp

from ..config import ClientConfig
from ..runtime.errors import (
    DecodeError, RequestTimeoutError, TransportError, error_from_response
)


logger = logging.getLogger(__name__)

_JSON_ERRORS = (json.JSONDecodeError, UnicodeDecodeError)


class Transport(Protocol):
    """Anything that can perform one JSON round trip against the backend."""

    async def request(self, method: str, path: str, *, json: Any = None,
                      params: Optional[Dict[str, Any]] = None) -> Any:
        ...

    async def close(self) -> None:
        ...


class TransportClosed(TransportError):
    """Transport has been closed."""


@dataclass
class ConnectionStats:
    """Request statistics for a transport."""
    created_at: float = field(default_factory=time.time)
    last_used: float = field(default_factory=time.time)
    request_count: int = 0
    error_count: int = 0

    @property
    def idle_time(self) -> float:
        """Get idle time in seconds."""
        return time.time() - self.last_used


def decode_body(text: str) -> Any:
    """Decode a response body; empty bodies decode to None."""
    if not text or not text.strip():
        return None
    return json.loads(text)


class HttpTransport:
    """
    aiohttp-backed transport.

    The session is created lazily inside the running loop, or supplied by
    the caller (in which case the caller keeps ownership of it).
    """

    def __init__(self, config: ClientConfig, session: Optional[aiohttp.ClientSession] = None):
        self.config = config
        self._session = session
        self._owns_session = session is None
        self.closed = False
        self.stats = ConnectionStats()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    @property
    def base_url(self) -> str:
        """Backend base URL."""
        return self.config.base_url

    def url_for(self, path: str) -> str:
        """
        Join the base URL and a resource path.

        A path that already starts with the base URL's own path (`/api/history`
        against `http://host/api`) is resolved against the origin instead.
        """
        base = urlsplit(self.config.base_url)
        prefix = base.path.rstrip("/")
        if prefix and path.startswith(prefix + "/"):
            return f"{base.scheme}://{base.netloc}{path}"
        return f"{self.config.base_url}/{path.lstrip('/')}"

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create the HTTP session."""
        if self.closed:
            raise TransportClosed("Transport has been closed")

        if self._session is None:
            timeout = aiohttp.ClientTimeout(total=self.config.timeout)
            self._session = aiohttp.ClientSession(
                timeout=timeout,
                headers={
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                    "User-Agent": self.config.user_agent,
                },
            )
            logger.debug(f"Created HTTP session for {self.config.base_url}")

        return self._session

    async def request(self, method: str, path: str, *, json: Any = None,
                      params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Perform one HTTP round trip and decode the JSON response.

        Args:
            method: HTTP method
            path: Resource path relative to the base URL
            json: JSON-serialisable request body
            params: Query string parameters

        Returns:
            Decoded response body (None for an empty body)

        Raises:
            BackendError: Non-2xx response
            TransportError: Connection failure
            RequestTimeoutError: Request timed out
        """
        session = await self._get_session()
        url = self.url_for(path)

        self.stats.last_used = time.time()
        self.stats.request_count += 1
        logger.debug(f"{method} {url}")

        try:
            response = await session.request(method, url, json=json, params=params)
            try:
                text = await response.text()
            finally:
                response.release()
        except asyncio.TimeoutError as e:
            self.stats.error_count += 1
            raise RequestTimeoutError(f"Request timed out: {method} {url}", cause=e) from e
        except aiohttp.ClientError as e:
            self.stats.error_count += 1
            raise TransportError(f"HTTP request failed: {e}", cause=e) from e

        status = response.status
        try:
            payload = decode_body(text)
        except _JSON_ERRORS as e:
            if 200 <= status < 300:
                self.stats.error_count += 1
                raise DecodeError(f"Invalid JSON response from {method} {url}", payload=text, cause=e) from e
            payload = text

        if not 200 <= status < 300:
            self.stats.error_count += 1
            logger.debug(f"{method} {url} -> HTTP {status}")
            raise error_from_response(status, payload, response.reason)

        return payload

    async def close(self) -> None:
        """Close the HTTP session if owned by this transport."""
        if self.closed:
            return
        self.closed = True
        if self._session is not None and self._owns_session:
            try:
                await self._session.close()
            except Exception as e:
                logger.warning(f"Error closing HTTP session: {e}")
        self._session = None


__all__ = [
    "Transport",
    "TransportClosed",
    "ConnectionStats",
    "HttpTransport",
    "decode_body",
]
