"""
MEXC API - Request Signing.

============================================================
PURPOSE
============================================================
Builds ready-to-send request descriptors for the three
authentication schemes the exchange uses.

SIGNING SCHEMES:
- SPOT:            hex(HMAC-SHA256(secret, query)) appended as
                   &signature=..., API key in X-MEXC-APIKEY
- FUTURES_V1:      hex(HMAC-SHA256(secret, key + timestamp + params))
                   in ApiKey / Request-Time / Signature headers
- FUTURES_SESSION: two-stage MD5 over web token, timestamp and the
                   exact JSON body, in x-mxc-nonce / x-mxc-sign headers

The set is closed; each client operation picks its scheme.

============================================================
SESSION SIGNING WARNING
============================================================
FUTURES_SESSION reproduces the exchange's own web client rather than
a documented API. The offset-7 substring and the browser headers are
kept byte-for-byte and can stop working after any exchange-side change.

============================================================
"""

import hashlib
import hmac
import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, Any, Iterable, Tuple

from .types import Credentials


logger = logging.getLogger(__name__)


# ============================================================
# CONSTANTS
# ============================================================

SPOT_API_KEY_HEADER = "X-MEXC-APIKEY"

SESSION_PARTIAL_HASH_OFFSET = 7

SESSION_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)
SESSION_ORIGIN = "https://futures.mexc.com"
SESSION_REFERER = "https://futures.mexc.com/exchange"


class SignerKind(Enum):
    """Authentication scheme attached to a request."""

    PUBLIC = "PUBLIC"
    SPOT = "SPOT"
    FUTURES_V1 = "FUTURES_V1"
    FUTURES_SESSION = "FUTURES_SESSION"


# ============================================================
# SIGNED REQUEST DESCRIPTOR
# ============================================================

@dataclass(frozen=True)
class SignedRequest:
    """
    Assembled request, built fresh for every call.

    ``url`` already carries any signed query string and ``body`` is the
    exact text sent, so neither may be re-encoded downstream.
    """

    method: str
    url: str
    kind: SignerKind
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[str] = None


def public_request(method: str, url: str) -> SignedRequest:
    """Descriptor for an unauthenticated endpoint."""
    return SignedRequest(method=method, url=url, kind=SignerKind.PUBLIC)


# ============================================================
# PRIMITIVES
# ============================================================

def hmac_sha256_hex(secret: str, message: str) -> str:
    """Hex HMAC-SHA256 of message under secret."""
    return hmac.new(
        secret.encode("utf-8"),
        message.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


def md5_hex(message: str) -> str:
    return hashlib.md5(message.encode("utf-8")).hexdigest()


def build_query(pairs: Iterable[Tuple[str, Any]]) -> str:
    """
    Join ordered (name, value) pairs as name=value&...

    Values are rendered verbatim and pairs with a None value are
    skipped. The result is the byte sequence that gets signed.
    """
    return "&".join(f"{name}={value}" for name, value in pairs if value is not None)


# ============================================================
# SPOT SIGNER
# ============================================================

class SpotSigner:
    """Query-string HMAC signer for spot endpoints."""

    kind = SignerKind.SPOT

    def __init__(self, credentials: Credentials):
        self._credentials = credentials

    def sign(self, query: str) -> str:
        """
        Append the signature to an unsigned query string.

        Args:
            query: Query string already containing timestamp

        Returns:
            ``query&signature=<hex>``

        Raises:
            AuthError: If no secret is configured
        """
        secret = self._credentials.require_api_secret()
        return f"{query}&signature={hmac_sha256_hex(secret, query)}"

    def build(self, method: str, base_url: str, path: str, query: str) -> SignedRequest:
        """Signed spot request with the API key header."""
        signed = self.sign(query)
        api_key = self._credentials.require_api_key()
        return SignedRequest(
            method=method,
            url=f"{base_url}{path}?{signed}",
            kind=self.kind,
            headers={SPOT_API_KEY_HEADER: api_key},
        )


# ============================================================
# FUTURES HEADER SIGNER (V1)
# ============================================================

class FuturesHeaderSigner:
    """Header-delivered HMAC signer for futures account endpoints."""

    kind = SignerKind.FUTURES_V1

    def __init__(self, credentials: Credentials):
        self._credentials = credentials

    def signature(self, timestamp: int, params: Optional[str] = None) -> str:
        """
        Signature over ``api_key + timestamp + params``.

        Raises:
            AuthError: If key or secret is missing
        """
        api_key = self._credentials.require_api_key()
        secret = self._credentials.require_api_secret()
        return hmac_sha256_hex(secret, f"{api_key}{timestamp}{params or ''}")

    def headers(self, timestamp: int, params: Optional[str] = None) -> Dict[str, str]:
        signature = self.signature(timestamp, params)
        return {
            "ApiKey": self._credentials.require_api_key(),
            "Request-Time": str(timestamp),
            "Signature": signature,
            "Content-Type": "application/json",
        }

    def build(
        self,
        method: str,
        base_url: str,
        path: str,
        timestamp: int,
        params: Optional[Dict[str, Any]] = None,
    ) -> SignedRequest:
        """
        Signed futures v1 request.

        Parameters are sorted by name; the same string is signed and
        sent as the query string.
        """
        param_string = None
        url = f"{base_url}{path}"
        if params:
            param_string = build_query(sorted(params.items()))
            url = f"{url}?{param_string}"

        return SignedRequest(
            method=method,
            url=url,
            kind=self.kind,
            headers=self.headers(timestamp, param_string),
        )


# ============================================================
# FUTURES SESSION SIGNER
# ============================================================

class FuturesSessionSigner:
    """Web-session MD5 signer for futures order submission."""

    kind = SignerKind.FUTURES_SESSION

    def __init__(self, credentials: Credentials):
        self._credentials = credentials
        self._warned = False

    def partial_hash(self, timestamp: int) -> str:
        """md5(token + timestamp) from the fixed offset onwards."""
        token = self._credentials.require_web_token()
        return md5_hex(f"{token}{timestamp}")[SESSION_PARTIAL_HASH_OFFSET:]

    @staticmethod
    def serialize(payload: Dict[str, Any]) -> str:
        """Canonical JSON body, the exact bytes sent and signed."""
        return json.dumps(payload, separators=(",", ":"))

    def signature(self, timestamp: int, body: str) -> str:
        return md5_hex(f"{timestamp}{body}{self.partial_hash(timestamp)}")

    def headers(self, timestamp: int, body: str) -> Dict[str, str]:
        return {
            "x-mxc-nonce": str(timestamp),
            "x-mxc-sign": self.signature(timestamp, body),
            "authorization": self._credentials.require_web_token(),
            "user-agent": SESSION_USER_AGENT,
            "content-type": "application/json",
            "origin": SESSION_ORIGIN,
            "referer": SESSION_REFERER,
        }

    def build(
        self,
        base_url: str,
        path: str,
        payload: Dict[str, Any],
        timestamp: int,
    ) -> SignedRequest:
        """Signed POST whose body is the serialized payload."""
        body = self.serialize(payload)
        headers = self.headers(timestamp, body)

        if not self._warned:
            logger.warning(
                "Futures order submission uses the undocumented web session "
                "endpoint; it may break without notice"
            )
            self._warned = True

        return SignedRequest(
            method="POST",
            url=f"{base_url}{path}",
            kind=self.kind,
            headers=headers,
            body=body,
        )
