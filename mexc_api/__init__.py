"""
MEXC API - Package.

============================================================
PURPOSE
============================================================
Async REST client for the MEXC spot and futures markets.

CLIENTS:
- MexcSpotClient: spot API v3 (query-string HMAC signing)
- MexcFuturesClient: futures API (v1 header signing, web session
  signing for order submission)

ERROR HANDLING:
- MexcError: base of AuthError, ApiError, DecodeError, TransportError
- Nothing is retried inside the library

============================================================
"""

# Clients
from .spot import MexcSpotClient
from .futures import MexcFuturesClient

# Configuration
from .config import (
    ClientConfig,
    TimeoutConfig,
    SPOT_API_URL,
    FUTURES_API_URL,
    FUTURES_WEB_URL,
    DEFAULT_RECV_WINDOW,
)

# Types
from .types import (
    Credentials,
    OrderSide,
    OrderType,
    OrderStatus,
    SpotOrder,
    FuturesOrderSide,
    OpenType,
    FuturesOrderType,
    FuturesOrderRequest,
)

# Entities
from .models import (
    Account,
    AccountBalance,
    ListenKey,
    OrderReceipt,
    CancelledOrder,
    OrderQuery,
    ExchangeInfo,
    SymbolInfo,
    Orderbook,
    Level,
    FuturesBalance,
    FuturesPosition,
    ContractInfo,
    FuturesOrderReceipt,
    decode_list,
)

# Signing
from .signing import (
    SignerKind,
    SignedRequest,
    SpotSigner,
    FuturesHeaderSigner,
    FuturesSessionSigner,
)

# Envelope
from .envelope import FuturesEnvelope, resolve_spot, resolve_futures

# Transport
from .transport import HttpTransport, HttpResponse

# Errors
from .errors import (
    ErrorCategory,
    AuthErrorReason,
    ApiErrorReason,
    DecodeErrorReason,
    TransportErrorReason,
    MexcError,
    AuthError,
    ApiError,
    DecodeError,
    TransportError,
)

# Utilities
from .utils import parse_float, timestamp_ms, format_number, round_down


__all__ = [
    # Clients
    "MexcSpotClient",
    "MexcFuturesClient",
    # Configuration
    "ClientConfig",
    "TimeoutConfig",
    "SPOT_API_URL",
    "FUTURES_API_URL",
    "FUTURES_WEB_URL",
    "DEFAULT_RECV_WINDOW",
    # Types
    "Credentials",
    "OrderSide",
    "OrderType",
    "OrderStatus",
    "SpotOrder",
    "FuturesOrderSide",
    "OpenType",
    "FuturesOrderType",
    "FuturesOrderRequest",
    # Entities
    "Account",
    "AccountBalance",
    "ListenKey",
    "OrderReceipt",
    "CancelledOrder",
    "OrderQuery",
    "ExchangeInfo",
    "SymbolInfo",
    "Orderbook",
    "Level",
    "FuturesBalance",
    "FuturesPosition",
    "ContractInfo",
    "FuturesOrderReceipt",
    "decode_list",
    # Signing
    "SignerKind",
    "SignedRequest",
    "SpotSigner",
    "FuturesHeaderSigner",
    "FuturesSessionSigner",
    # Envelope
    "FuturesEnvelope",
    "resolve_spot",
    "resolve_futures",
    # Transport
    "HttpTransport",
    "HttpResponse",
    # Errors
    "ErrorCategory",
    "AuthErrorReason",
    "ApiErrorReason",
    "DecodeErrorReason",
    "TransportErrorReason",
    "MexcError",
    "AuthError",
    "ApiError",
    "DecodeError",
    "TransportError",
    # Utilities
    "parse_float",
    "timestamp_ms",
    "format_number",
    "round_down",
]
