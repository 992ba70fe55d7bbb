"""
MEXC API - Secure Logging Utilities.

============================================================
PURPOSE
============================================================
Structured request/response logging for the clients with:
- Credential masking (API key, signatures, session token)
- Listen key masking in URLs
- JSON log entries with a per-client request id

============================================================
SECURITY REQUIREMENTS
============================================================
1. NEVER log raw API keys, secrets or the web session token
2. Mask every authentication header of the three signing schemes
3. Log a hash of request bodies, not the body itself

============================================================
"""

import hashlib
import json
import logging
import re
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Any, Dict, Optional


logger = logging.getLogger(__name__)


# ============================================================
# SENSITIVE DATA
# ============================================================

# Header names that should be masked (compared lower-cased)
SENSITIVE_HEADERS = {
    "x-mexc-apikey",
    "apikey",
    "signature",
    "authorization",
    "x-mxc-sign",
}

# Query parameters that should be masked
SENSITIVE_PARAMS = {
    "signature",
    "listenkey",
}

_SENSITIVE_PARAM_PATTERN = re.compile(
    r"(?<=[?&])(" + "|".join(sorted(SENSITIVE_PARAMS)) + r")=([^&]*)",
    re.IGNORECASE,
)


# ============================================================
# MASKING FUNCTIONS
# ============================================================

def mask_value(value: str, show_chars: int = 4) -> str:
    """
    Mask a sensitive value, showing only the first few chars.

    Values no longer than ``show_chars`` are hidden entirely.
    """
    if not value or len(value) <= show_chars:
        return "***"
    return f"{value[:show_chars]}...***"


def mask_headers(headers: Optional[Dict[str, str]]) -> Dict[str, str]:
    """Copy of headers with authentication values masked."""
    if not headers:
        return {}

    masked = {}
    for key, value in headers.items():
        if key.lower() in SENSITIVE_HEADERS:
            masked[key] = mask_value(str(value))
        else:
            masked[key] = value
    return masked


def mask_url(url: str) -> str:
    """URL with signature and listen key query values replaced by ***."""
    if not url:
        return url
    return _SENSITIVE_PARAM_PATTERN.sub(lambda m: f"{m.group(1)}=***", url)


def hash_body(body: Optional[str]) -> Optional[str]:
    """Short SHA-256 fingerprint of a request body."""
    if not body:
        return None
    return hashlib.sha256(body.encode("utf-8")).hexdigest()[:16]


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# ============================================================
# LOG ENTRY STRUCTURES
# ============================================================

@dataclass
class RequestLogEntry:
    """Structured log entry for requests."""

    timestamp: str
    market: str
    operation: str
    method: str
    url: str
    request_id: str
    signer: str

    headers: Optional[Dict[str, str]] = None
    body_hash: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


@dataclass
class ResponseLogEntry:
    """Structured log entry for responses."""

    timestamp: str
    market: str
    operation: str
    request_id: str
    latency_ms: float
    success: bool

    status_code: Optional[int] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


@dataclass
class OrderLogEntry:
    """Structured log entry for order submissions and cancels."""

    timestamp: str
    market: str
    operation: str
    symbol: str

    side: Optional[str] = None
    order_type: Optional[str] = None
    quantity: Optional[str] = None
    price: Optional[str] = None
    order_id: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


# ============================================================
# CLIENT LOGGER
# ============================================================

class ClientLogger:
    """
    Secure logger for one client instance.

    Requests and successful responses go to DEBUG, failed responses to
    WARNING, order operations to INFO.
    """

    def __init__(self, market: str, logger_name: Optional[str] = None):
        """
        Args:
            market: "spot" or "futures"
            logger_name: Override of the default ``mexc_api.<market>``
        """
        self._market = market
        self._logger = logging.getLogger(logger_name or f"mexc_api.{market}")
        self._request_counter = 0

    @property
    def market(self) -> str:
        return self._market

    def _generate_request_id(self) -> str:
        self._request_counter += 1
        return f"{self._market}-{self._request_counter}"

    def log_request(
        self,
        operation: str,
        method: str,
        url: str,
        signer: str,
        headers: Optional[Dict[str, str]] = None,
        body: Optional[str] = None,
    ) -> str:
        """
        Log an outgoing request.

        Returns:
            Request id for correlating the response entry
        """
        request_id = self._generate_request_id()

        entry = RequestLogEntry(
            timestamp=_now(),
            market=self._market,
            operation=operation,
            method=method,
            url=mask_url(url),
            request_id=request_id,
            signer=signer,
            headers=mask_headers(headers) or None,
            body_hash=hash_body(body),
        )

        self._logger.debug(f"REQUEST: {entry.to_json()}")
        return request_id

    def log_response(
        self,
        operation: str,
        request_id: str,
        latency_ms: float,
        success: bool,
        status_code: Optional[int] = None,
        error: Optional[str] = None,
    ) -> None:
        entry = ResponseLogEntry(
            timestamp=_now(),
            market=self._market,
            operation=operation,
            request_id=request_id,
            latency_ms=round(latency_ms, 3),
            success=success,
            status_code=status_code,
            error=error[:200] if error else None,
        )

        if success:
            self._logger.debug(f"RESPONSE: {entry.to_json()}")
        else:
            self._logger.warning(f"RESPONSE_ERROR: {entry.to_json()}")

    def log_order(
        self,
        operation: str,
        symbol: str,
        side: Optional[str] = None,
        order_type: Optional[str] = None,
        quantity: Optional[str] = None,
        price: Optional[str] = None,
        order_id: Optional[str] = None,
        error: Optional[str] = None,
    ) -> None:
        entry = OrderLogEntry(
            timestamp=_now(),
            market=self._market,
            operation=operation,
            symbol=symbol,
            side=side,
            order_type=order_type,
            quantity=quantity,
            price=price,
            order_id=order_id,
            error=error[:200] if error else None,
        )

        if error:
            self._logger.warning(f"ORDER_ERROR: {entry.to_json()}")
        else:
            self._logger.info(f"ORDER: {entry.to_json()}")
