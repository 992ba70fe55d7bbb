"""
MEXC API - Configuration.

============================================================
PURPOSE
============================================================
All configuration for the spot and futures clients.

CRITICAL CONSTRAINTS:
- No retries, no rate limiting, no caching
- Credentials are injected by the caller, never read from the environment

============================================================
"""

from dataclasses import dataclass, field
from typing import Optional


SPOT_API_URL = "https://api.mexc.com"
FUTURES_API_URL = "https://contract.mexc.com"
FUTURES_WEB_URL = "https://futures.mexc.com"

DEFAULT_RECV_WINDOW = 5000


# ============================================================
# TIMEOUT CONFIGURATION
# ============================================================

@dataclass
class TimeoutConfig:
    """
    Timeout configuration.
    """

    connection_timeout_seconds: float = 5.0
    """Connection timeout."""

    read_timeout_seconds: float = 30.0
    """Total timeout for one request/response."""


# ============================================================
# CLIENT CONFIGURATION
# ============================================================

@dataclass
class ClientConfig:
    """
    Client configuration shared by the spot and futures clients.
    """

    spot_url: str = SPOT_API_URL
    """Spot REST base URL."""

    futures_url: str = FUTURES_API_URL
    """Futures REST base URL (public + v1 header-signed endpoints)."""

    futures_web_url: str = FUTURES_WEB_URL
    """Futures web endpoint used for session-signed order submission."""

    recv_window: int = DEFAULT_RECV_WINDOW
    """Default receive window in ms for signed spot calls."""

    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)
    """Transport timeouts."""

    proxy_url: Optional[str] = None
    """Proxy passed through to the HTTP transport."""

    def __post_init__(self):
        if self.recv_window <= 0:
            raise ValueError("recv_window must be positive")
        self.spot_url = self.spot_url.rstrip("/")
        self.futures_url = self.futures_url.rstrip("/")
        self.futures_web_url = self.futures_web_url.rstrip("/")
