"""
MEXC API - Error Taxonomy.

============================================================
PURPOSE
============================================================
Standardized errors raised by the spot and futures clients.

ERROR CATEGORIES:
1. AUTHENTICATION - Credential required by the operation is missing
2. API            - Exchange reported a failure or a malformed envelope
3. DECODE         - Response JSON does not match the expected shape
4. TRANSPORT      - Network failure or timeout

RETRY POLICY:
- Nothing is retried inside the library
- is_retryable() is informational for the caller's own policy

============================================================
"""

from enum import Enum
from typing import Optional, Dict, Any


# ============================================================
# ERROR CATEGORIES
# ============================================================

class ErrorCategory(Enum):
    """Top-level error classification."""

    AUTHENTICATION = "AUTHENTICATION"
    API = "API"
    DECODE = "DECODE"
    TRANSPORT = "TRANSPORT"


class AuthErrorReason(Enum):
    """Which credential was missing."""

    MISSING_KEY = "MISSING_KEY"
    MISSING_SECRET = "MISSING_SECRET"
    MISSING_SESSION_TOKEN = "MISSING_SESSION_TOKEN"


class ApiErrorReason(Enum):
    """Exchange-side failure reasons."""

    REJECTED = "REJECTED"
    """Exchange rejected the request (bad params, balance, rate limit...)."""

    MISSING_PAYLOAD = "MISSING_PAYLOAD"
    """Success envelope without a data field."""


class DecodeErrorReason(Enum):
    """Response decoding failures."""

    INVALID_NUMBER = "INVALID_NUMBER"
    INVALID_TYPE = "INVALID_TYPE"
    INVALID_JSON = "INVALID_JSON"
    MISSING_FIELD = "MISSING_FIELD"
    INVALID_VALUE = "INVALID_VALUE"


class TransportErrorReason(Enum):
    """Transport failures."""

    NETWORK = "NETWORK"
    TIMEOUT = "TIMEOUT"


# ============================================================
# EXCEPTIONS
# ============================================================

class MexcError(Exception):
    """
    Base class for every error raised by the clients.

    Carries the category, a category-specific reason and whatever
    exchange context is available.
    """

    category: ErrorCategory = ErrorCategory.API

    def __init__(
        self,
        reason: Enum,
        message: str = "",
        http_status: Optional[int] = None,
        code: Optional[int] = None,
        field: Optional[str] = None,
    ):
        self.reason = reason
        self.message = message
        self.http_status = http_status
        self.code = code
        self.field = field
        super().__init__(str(self))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "category": self.category.value,
            "reason": self.reason.value,
            "message": self.message,
            "http_status": self.http_status,
            "code": self.code,
            "field": self.field,
        }

    def is_retryable(self) -> bool:
        """Check if the caller may reasonably retry."""
        return False

    def __str__(self) -> str:
        prefix = f"[{self.category.value}] {self.reason.value}"
        if self.field:
            prefix = f"{prefix} ({self.field})"
        return f"{prefix}: {self.message}" if self.message else prefix


class AuthError(MexcError):
    """A credential required by the operation is not configured."""

    category = ErrorCategory.AUTHENTICATION


class ApiError(MexcError):
    """The exchange reported a failure."""

    category = ErrorCategory.API

    @classmethod
    def rejected(
        cls,
        message: str,
        http_status: Optional[int] = None,
        code: Optional[int] = None,
    ) -> "ApiError":
        return cls(ApiErrorReason.REJECTED, message, http_status=http_status, code=code)

    @classmethod
    def missing_payload(cls, http_status: Optional[int] = None, code: Optional[int] = None) -> "ApiError":
        return cls(
            ApiErrorReason.MISSING_PAYLOAD,
            "Success envelope carries no data",
            http_status=http_status,
            code=code,
        )

    @property
    def is_rejected(self) -> bool:
        return self.reason == ApiErrorReason.REJECTED


class DecodeError(MexcError):
    """Unexpected JSON shape, usually an exchange schema change."""

    category = ErrorCategory.DECODE


class TransportError(MexcError):
    """Network failure or timeout."""

    category = ErrorCategory.TRANSPORT

    def is_retryable(self) -> bool:
        return True


# ============================================================
# HELPERS
# ============================================================

def missing_key() -> AuthError:
    return AuthError(AuthErrorReason.MISSING_KEY, "Missing api key")


def missing_secret() -> AuthError:
    return AuthError(AuthErrorReason.MISSING_SECRET, "Missing secret key")


def missing_session_token() -> AuthError:
    return AuthError(AuthErrorReason.MISSING_SESSION_TOKEN, "Missing web session token")
