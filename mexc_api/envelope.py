"""
MEXC API - Response Envelope Resolver.

============================================================
PURPOSE
============================================================
Decide success or failure of a response and extract its payload.

The two markets disagree on where success lives:
- Spot:    the HTTP status is authoritative. 200 means the body is the
           payload, anything else means the body text is the error.
- Futures: the ``success`` flag of the JSON envelope is authoritative,
           whatever the HTTP status. ``200 + success:false`` is a normal
           rejection, not a transport anomaly.

============================================================
"""

import json
from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar

from .errors import ApiError, DecodeError, DecodeErrorReason
from .transport import HttpResponse


T = TypeVar("T")

Decoder = Callable[[Any], T]


def _loads(text: str) -> Any:
    try:
        return json.loads(text)
    except ValueError as e:
        raise DecodeError(DecodeErrorReason.INVALID_JSON, f"Response is not JSON: {e}")


def _identity(value: Any) -> Any:
    return value


# ============================================================
# SPOT
# ============================================================

def _spot_error_code(text: str) -> Optional[int]:
    """Exchange error code from a ``{"code": ..., "msg": ...}`` body, if any."""
    try:
        body = json.loads(text)
    except ValueError:
        return None

    if isinstance(body, dict):
        code = body.get("code")
        if isinstance(code, int) and not isinstance(code, bool):
            return code
    return None


def resolve_spot(response: HttpResponse, decoder: Decoder = _identity) -> T:
    """
    Resolve a spot response.

    Args:
        response: Raw status and body text
        decoder: Maps the decoded JSON payload to the expected entity

    Raises:
        ApiError: REJECTED with the body text verbatim on any non-200 status
        DecodeError: If a 200 body is not JSON or does not fit the entity
    """
    if response.status != 200:
        raise ApiError.rejected(
            response.text,
            http_status=response.status,
            code=_spot_error_code(response.text),
        )

    return decoder(_loads(response.text))


# ============================================================
# FUTURES
# ============================================================

@dataclass(frozen=True)
class FuturesEnvelope:
    """``{success, code, data?, message?}`` wrapper of every futures response."""

    success: bool
    code: Optional[int] = None
    data: Any = None
    message: Optional[str] = None

    @classmethod
    def from_json(cls, payload: Any) -> "FuturesEnvelope":
        if not isinstance(payload, dict):
            raise DecodeError(
                DecodeErrorReason.INVALID_TYPE,
                f"Expected envelope object, got {type(payload).__name__}",
            )

        if "success" not in payload:
            raise DecodeError(DecodeErrorReason.MISSING_FIELD, "Envelope has no success flag", field="success")

        success = payload["success"]
        if not isinstance(success, bool):
            raise DecodeError(DecodeErrorReason.INVALID_TYPE, "success must be a boolean", field="success")

        code = payload.get("code")
        if code is not None and (isinstance(code, bool) or not isinstance(code, int)):
            raise DecodeError(DecodeErrorReason.INVALID_TYPE, "code must be an integer", field="code")

        message = payload.get("message")
        if message is not None and not isinstance(message, str):
            message = str(message)

        return cls(success=success, code=code, data=payload.get("data"), message=message)


def resolve_futures(response: HttpResponse, decoder: Decoder = _identity) -> T:
    """
    Resolve a futures response.

    Raises:
        ApiError: REJECTED when ``success`` is false (message or ""),
            MISSING_PAYLOAD when a success envelope has no data
        DecodeError: If the body is not an envelope or data does not fit
    """
    try:
        body = json.loads(response.text)
    except ValueError:
        # Gateways answer some failures with HTML or plain text
        if not 200 <= response.status < 300:
            raise ApiError.rejected(response.text, http_status=response.status)
        raise DecodeError(DecodeErrorReason.INVALID_JSON, "Futures response is not JSON")

    envelope = FuturesEnvelope.from_json(body)

    if not envelope.success:
        raise ApiError.rejected(
            envelope.message or "",
            http_status=response.status,
            code=envelope.code,
        )

    if envelope.data is None:
        raise ApiError.missing_payload(http_status=response.status, code=envelope.code)

    return decoder(envelope.data)
