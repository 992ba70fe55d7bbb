"""
MEXC API - Types.

============================================================
PURPOSE
============================================================
Credential set, order enums and order request payloads shared by
the spot and futures clients.

============================================================
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Optional, Dict, Any

from .errors import missing_key, missing_secret, missing_session_token
from .utils import format_number


# ============================================================
# CREDENTIALS
# ============================================================

@dataclass(frozen=True)
class Credentials:
    """
    Credential set for one client instance.

    Every field is optional: public endpoints need none, spot and
    futures v1 endpoints need key + secret, futures order submission
    needs the web session token. Secrets are excluded from repr.
    """

    api_key: Optional[str] = None
    api_secret: Optional[str] = field(default=None, repr=False)
    web_token: Optional[str] = field(default=None, repr=False)

    def require_api_key(self) -> str:
        if not self.api_key:
            raise missing_key()
        return self.api_key

    def require_api_secret(self) -> str:
        if not self.api_secret:
            raise missing_secret()
        return self.api_secret

    def require_web_token(self) -> str:
        if not self.web_token:
            raise missing_session_token()
        return self.web_token


# ============================================================
# SPOT ORDER TYPES
# ============================================================

class OrderSide(Enum):
    """Spot order side."""

    BUY = "BUY"
    SELL = "SELL"


class OrderType(Enum):
    """Spot order type."""

    LIMIT = "LIMIT"
    MARKET = "MARKET"
    LIMIT_MAKER = "LIMIT_MAKER"
    IMMEDIATE_OR_CANCEL = "IMMEDIATE_OR_CANCEL"
    FILL_OR_KILL = "FILL_OR_KILL"


class OrderStatus(Enum):
    """Spot order status."""

    NEW = "NEW"
    FILLED = "FILLED"
    PARTIALLY_FILLED = "PARTIALLY_FILLED"
    CANCELED = "CANCELED"
    PARTIALLY_CANCELED = "PARTIALLY_CANCELED"


@dataclass(frozen=True)
class SpotOrder:
    """One entry of a spot batch order."""

    symbol: str
    price: float
    quantity: float
    side: OrderSide
    order_type: OrderType

    def to_payload(self) -> Dict[str, Any]:
        """Wire form; price and quantity travel as decimal strings."""
        return {
            "symbol": self.symbol,
            "price": format_number(self.price),
            "quantity": format_number(self.quantity),
            "side": self.side.value,
            "type": self.order_type.value,
        }


# ============================================================
# FUTURES ORDER TYPES
# ============================================================

class FuturesOrderSide(IntEnum):
    """Futures order side."""

    OPEN_LONG = 1
    CLOSE_SHORT = 2
    OPEN_SHORT = 3
    CLOSE_LONG = 4


class OpenType(IntEnum):
    """Futures margin mode."""

    ISOLATED = 1
    CROSS = 2


class FuturesOrderType(IntEnum):
    """Futures order type."""

    LIMIT = 1
    POST_ONLY = 2
    IMMEDIATE_OR_CANCEL = 3
    FILL_OR_KILL = 4
    MARKET = 5
    MARKET_TO_CURRENT = 6
    """Market order that converts the unfilled part at the current price."""

    @property
    def requires_price(self) -> bool:
        return self in {
            FuturesOrderType.LIMIT,
            FuturesOrderType.POST_ONLY,
            FuturesOrderType.IMMEDIATE_OR_CANCEL,
            FuturesOrderType.FILL_OR_KILL,
        }


@dataclass(frozen=True)
class FuturesOrderRequest:
    """
    Futures order submitted through the web session endpoint.

    ``volume`` is a number of contracts, not a base-asset quantity.
    """

    symbol: str
    side: FuturesOrderSide
    open_type: OpenType
    order_type: FuturesOrderType
    volume: int
    leverage: int
    price: Optional[float] = None

    def __post_init__(self):
        if not self.symbol:
            raise ValueError("symbol is required")
        if isinstance(self.volume, bool) or not isinstance(self.volume, int) or self.volume <= 0:
            raise ValueError("volume must be a positive number of contracts")
        if isinstance(self.leverage, bool) or not isinstance(self.leverage, int) or self.leverage <= 0:
            raise ValueError("leverage must be a positive integer")
        if self.order_type.requires_price and self.price is None:
            raise ValueError(f"{self.order_type.name} orders require a price")
        if self.price is not None and not self.price > 0:
            raise ValueError("price must be positive")

    def to_payload(self) -> Dict[str, Any]:
        """
        Order body for the web endpoint.

        Price must be a string; a JSON number is rejected by the exchange.
        """
        payload: Dict[str, Any] = {
            "symbol": self.symbol,
            "side": int(self.side),
            "openType": int(self.open_type),
            "type": int(self.order_type),
            "vol": self.volume,
            "leverage": self.leverage,
            "marketCeiling": False,
            "priceProtect": "0",
            "reduceOnly": False,
        }
        if self.price is not None:
            payload["price"] = format_number(self.price)
        return payload
