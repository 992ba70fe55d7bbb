"""
MEXC API - HTTP Transport.

============================================================
PURPOSE
============================================================
Executes a SignedRequest over aiohttp and returns status + body text.

CONSTRAINTS:
- URLs are sent verbatim (no re-quoting), the exchange hashes the
  exact bytes it receives
- Bodies are sent exactly as serialized by the signer
- No retries; failures surface once as TransportError

============================================================
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

import aiohttp
from yarl import URL

from .config import TimeoutConfig
from .errors import DecodeError, DecodeErrorReason, TransportError, TransportErrorReason
from .signing import SignedRequest


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HttpResponse:
    """Raw response handed to the envelope resolvers."""

    status: int
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class HttpTransport:
    """
    aiohttp-backed transport shared by one client.

    The session is created on first use so the transport can be built
    outside a running event loop.
    """

    def __init__(
        self,
        timeout_config: Optional[TimeoutConfig] = None,
        proxy_url: Optional[str] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """
        Args:
            timeout_config: Connect and total timeouts
            proxy_url: Proxy passed to every request
            session: Externally owned session; it is not closed by close()
        """
        self._timeout_config = timeout_config or TimeoutConfig()
        self._proxy_url = proxy_url
        self._session = session
        self._owns_session = session is None

    @property
    def proxy_url(self) -> Optional[str]:
        return self._proxy_url

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(
                connect=self._timeout_config.connection_timeout_seconds,
                total=self._timeout_config.read_timeout_seconds,
            )
            self._session = aiohttp.ClientSession(timeout=timeout)
            self._owns_session = True
        return self._session

    async def request(self, request: SignedRequest) -> HttpResponse:
        """
        Send one request.

        Raises:
            TransportError: NETWORK on connection failures,
                TIMEOUT when the configured timeout elapses
            DecodeError: INVALID_JSON when the body is not valid UTF-8
        """
        session = self._get_session()

        try:
            async with session.request(
                request.method,
                URL(request.url, encoded=True),
                headers=request.headers or None,
                data=request.body.encode("utf-8") if request.body is not None else None,
                proxy=self._proxy_url,
            ) as response:
                try:
                    text = await response.text()
                except UnicodeDecodeError as e:
                    raise DecodeError(
                        DecodeErrorReason.INVALID_JSON,
                        f"Response body is not valid text: {e}",
                        http_status=response.status,
                    )
                return HttpResponse(status=response.status, text=text)

        # aiohttp timeout errors are also ClientErrors
        except asyncio.TimeoutError:
            raise TransportError(TransportErrorReason.TIMEOUT, "Request timeout")
        except aiohttp.ClientError as e:
            raise TransportError(TransportErrorReason.NETWORK, f"Network error: {e}")

    async def close(self) -> None:
        """Close the session if this transport created it."""
        if self._session is not None and self._owns_session:
            await self._session.close()
            logger.debug("HTTP session closed")
        self._session = None

    async def __aenter__(self) -> "HttpTransport":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
