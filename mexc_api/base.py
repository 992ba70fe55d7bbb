"""
MEXC API - Client Base.

============================================================
PURPOSE
============================================================
Shared plumbing of the spot and futures clients.

RESPONSIBILITIES:
- Own credentials, configuration, clock and transport
- Execute one SignedRequest, resolve it and log both sides
- Transport lifecycle (close, async context manager)

CONCURRENCY:
- No state is shared between calls except the read-only credentials
- Every call reads the clock itself; nothing is cached or retried

============================================================
"""

import logging
import time
from datetime import timedelta
from typing import Any, Callable, Optional, TypeVar

from .config import ClientConfig
from .errors import MexcError
from .logging_utils import ClientLogger
from .signing import SignedRequest
from .transport import HttpResponse, HttpTransport
from .types import Credentials
from .utils import timestamp_ms


logger = logging.getLogger(__name__)

T = TypeVar("T")

Resolver = Callable[[HttpResponse, Callable[[Any], T]], T]


class BaseClient:
    """
    Base class of the market clients.

    Subclasses set ``market`` and build SignedRequests; this class sends
    them and turns responses into entities or errors.
    """

    market: str = "base"

    def __init__(
        self,
        credentials: Optional[Credentials] = None,
        config: Optional[ClientConfig] = None,
        transport: Optional[Any] = None,
        clock: Callable[[], int] = timestamp_ms,
    ):
        """
        Args:
            credentials: Key, secret and/or web token; empty for public use
            config: Base URLs, receive window, timeouts, proxy
            transport: Object with ``request(SignedRequest)`` and ``close()``;
                an HttpTransport is created when omitted
            clock: Millisecond clock used for every signed request
        """
        self._credentials = credentials or Credentials()
        self._config = config or ClientConfig()
        self._owns_transport = transport is None
        self._transport = transport if transport is not None else HttpTransport(
            timeout_config=self._config.timeout,
            proxy_url=self._config.proxy_url,
        )
        self._clock = clock
        self._log = ClientLogger(self.market)

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def credentials(self) -> Credentials:
        return self._credentials

    # --------------------------------------------------------
    # EXECUTION
    # --------------------------------------------------------

    async def _execute(
        self,
        operation: str,
        request: SignedRequest,
        resolver: Resolver,
        decoder: Callable[[Any], T],
    ) -> T:
        """
        Send a request and resolve its response.

        Every failure is logged once and re-raised unchanged.
        """
        request_id = self._log.log_request(
            operation,
            request.method,
            request.url,
            request.kind.value,
            headers=request.headers,
            body=request.body,
        )
        start = time.perf_counter()
        response: Optional[HttpResponse] = None

        try:
            response = await self._transport.request(request)
            result = resolver(response, decoder)
        except MexcError as e:
            self._log.log_response(
                operation,
                request_id,
                latency_ms=(time.perf_counter() - start) * 1000,
                success=False,
                status_code=response.status if response is not None else None,
                error=str(e),
            )
            raise

        self._log.log_response(
            operation,
            request_id,
            latency_ms=(time.perf_counter() - start) * 1000,
            success=True,
            status_code=response.status,
        )
        return result

    async def _round_trip(self, operation: str, request: SignedRequest) -> timedelta:
        """
        Time one request; the response body is not inspected.

        Raises:
            TransportError: If the request never completes
        """
        request_id = self._log.log_request(operation, request.method, request.url, request.kind.value)
        start = time.perf_counter()
        response = await self._transport.request(request)
        elapsed = time.perf_counter() - start

        self._log.log_response(
            operation,
            request_id,
            latency_ms=elapsed * 1000,
            success=True,
            status_code=response.status,
        )
        return timedelta(seconds=elapsed)

    # --------------------------------------------------------
    # LIFECYCLE
    # --------------------------------------------------------

    async def close(self) -> None:
        """Close the transport if this client created it."""
        if self._owns_transport:
            await self._transport.close()
            logger.debug(f"{self.market} client closed")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
