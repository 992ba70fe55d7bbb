"""
MEXC API - Spot Client.

============================================================
PURPOSE
============================================================
Async client for the MEXC spot REST API (v3).

ENDPOINTS:
- Public:  server time, ping, exchange info, order book
- Account: account info, listen key lifecycle
- Orders:  submit, batch submit, cancel, cancel all, open orders

Every signed call carries its parameters in the query string in a
fixed order, followed by timestamp and the signature. The response
is authoritative by HTTP status (see envelope.resolve_spot).

============================================================
"""

import json
import logging
from datetime import timedelta
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple
from urllib.parse import urlencode

from .base import BaseClient, T
from .envelope import resolve_spot
from .errors import MexcError
from .models import (
    Account,
    CancelledOrder,
    ExchangeInfo,
    ListenKey,
    OrderQuery,
    OrderReceipt,
    Orderbook,
    decode_list,
    server_time_from_json,
)
from .signing import SpotSigner, build_query, public_request
from .types import OrderSide, OrderType, SpotOrder
from .utils import format_number


logger = logging.getLogger(__name__)


# ============================================================
# SPOT CLIENT
# ============================================================

class MexcSpotClient(BaseClient):
    """
    MEXC spot REST client.

    Public endpoints work without credentials; every other call needs
    an API key and secret.
    """

    market = "spot"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._signer = SpotSigner(self._credentials)

    # --------------------------------------------------------
    # INTERNAL
    # --------------------------------------------------------

    async def _public(
        self,
        operation: str,
        path: str,
        decoder: Callable[[Any], T],
        pairs: Iterable[Tuple[str, Any]] = (),
    ) -> T:
        query = build_query(pairs)
        url = f"{self._config.spot_url}{path}"
        if query:
            url = f"{url}?{query}"
        return await self._execute(operation, public_request("GET", url), resolve_spot, decoder)

    async def _signed(
        self,
        operation: str,
        method: str,
        path: str,
        decoder: Callable[[Any], T],
        pairs: Sequence[Tuple[str, Any]] = (),
        encoded_prefix: Optional[str] = None,
    ) -> T:
        """
        Sign and send a spot request.

        Args:
            pairs: Ordered parameters preceding ``timestamp``
            encoded_prefix: Already url-encoded leading segment
        """
        timestamp = self._clock()
        query = build_query([*pairs, ("timestamp", timestamp)])
        if encoded_prefix:
            query = f"{encoded_prefix}&{query}"

        request = self._signer.build(method, self._config.spot_url, path, query)
        return await self._execute(operation, request, resolve_spot, decoder)

    def _recv_window(self, recv_window: Optional[int]) -> int:
        if recv_window is None:
            return self._config.recv_window
        if recv_window <= 0:
            raise ValueError("recv_window must be positive")
        return recv_window

    # --------------------------------------------------------
    # PUBLIC
    # --------------------------------------------------------

    async def get_server_time(self) -> int:
        """Exchange time in milliseconds."""
        return await self._public("get_server_time", "/api/v3/time", server_time_from_json)

    async def ping(self) -> timedelta:
        """Round trip to the spot API; the body is ignored."""
        request = public_request("GET", f"{self._config.spot_url}/api/v3/ping")
        return await self._round_trip("ping", request)

    async def exchange_info(self) -> ExchangeInfo:
        return await self._public("exchange_info", "/api/v3/exchangeInfo", ExchangeInfo.from_json)

    async def symbol_info(self, symbol: str) -> ExchangeInfo:
        """Exchange info restricted to one symbol."""
        return await self._public(
            "symbol_info",
            "/api/v3/exchangeInfo",
            ExchangeInfo.from_json,
            [("symbol", symbol)],
        )

    async def get_orderbook(self, symbol: str, depth: Optional[int] = None) -> Orderbook:
        """
        Order book snapshot.

        Args:
            symbol: e.g. "BTCUSDT"
            depth: Levels per side; exchange default when omitted
        """
        return await self._public(
            "get_orderbook",
            "/api/v3/depth",
            Orderbook.from_json,
            [("symbol", symbol), ("limit", depth)],
        )

    # --------------------------------------------------------
    # ACCOUNT
    # --------------------------------------------------------

    async def get_account(self) -> Account:
        return await self._signed("get_account", "GET", "/api/v3/account", Account.from_json)

    async def create_listen_key(self) -> str:
        """Open a user data stream and return its listen key."""
        key = await self._signed(
            "create_listen_key", "POST", "/api/v3/userDataStream", ListenKey.from_json
        )
        return key.listen_key

    async def keep_alive_listen_key(self, listen_key: str) -> str:
        """Extend the validity of a listen key."""
        key = await self._signed(
            "keep_alive_listen_key",
            "PUT",
            "/api/v3/userDataStream",
            ListenKey.from_json,
            [("listenKey", listen_key)],
        )
        return key.listen_key

    async def delete_listen_key(self, listen_key: str) -> str:
        """Close a user data stream."""
        key = await self._signed(
            "delete_listen_key",
            "DELETE",
            "/api/v3/userDataStream",
            ListenKey.from_json,
            [("listenKey", listen_key)],
        )
        return key.listen_key

    # --------------------------------------------------------
    # ORDERS
    # --------------------------------------------------------

    async def submit_order(
        self,
        symbol: str,
        side: OrderSide,
        order_type: OrderType,
        price: float,
        quantity: float,
        recv_window: Optional[int] = None,
    ) -> OrderReceipt:
        """
        Submit one spot order.

        Price and quantity are sent as plain decimals, never in
        exponent notation.
        """
        price_str = format_number(price)
        quantity_str = format_number(quantity)
        window = self._recv_window(recv_window)

        self._log.log_order(
            "submit",
            symbol,
            side=side.value,
            order_type=order_type.value,
            quantity=quantity_str,
            price=price_str,
        )

        try:
            receipt = await self._signed(
                "submit_order",
                "POST",
                "/api/v3/order",
                OrderReceipt.from_json,
                [
                    ("symbol", symbol),
                    ("side", side.value),
                    ("type", order_type.value),
                    ("quantity", quantity_str),
                    ("price", price_str),
                    ("recvWindow", window),
                ],
            )
        except MexcError as e:
            self._log.log_order("submit", symbol, error=str(e))
            raise

        logger.info(f"Spot order accepted: {receipt.symbol} {receipt.side.value} id={receipt.order_id}")
        return receipt

    async def batch_orders(
        self,
        orders: Sequence[SpotOrder],
        recv_window: Optional[int] = None,
    ) -> List[OrderReceipt]:
        """
        Submit several orders in one call.

        The result is all-or-error: either every receipt decodes or a
        single error is raised.

        Raises:
            ValueError: If ``orders`` is empty
        """
        if not orders:
            raise ValueError("batch_orders requires at least one order")

        batch = json.dumps([order.to_payload() for order in orders], separators=(",", ":"))
        encoded = urlencode({"batchOrders": batch})

        self._log.log_order("batch_submit", ",".join(sorted({o.symbol for o in orders})))

        return await self._signed(
            "batch_orders",
            "POST",
            "/api/v3/batchOrders",
            decode_list(OrderReceipt.from_json),
            [("recvWindow", self._recv_window(recv_window))],
            encoded_prefix=encoded,
        )

    async def cancel_order(
        self,
        symbol: str,
        order_id: str,
        recv_window: Optional[int] = None,
    ) -> CancelledOrder:
        self._log.log_order("cancel", symbol, order_id=order_id)

        return await self._signed(
            "cancel_order",
            "DELETE",
            "/api/v3/order",
            CancelledOrder.from_json,
            [
                ("symbol", symbol),
                ("orderId", order_id),
                ("recvWindow", self._recv_window(recv_window)),
            ],
        )

    async def cancel_all_orders(
        self,
        symbol: str,
        recv_window: Optional[int] = None,
    ) -> List[CancelledOrder]:
        """Cancel every open order of a symbol."""
        self._log.log_order("cancel_all", symbol)

        return await self._signed(
            "cancel_all_orders",
            "DELETE",
            "/api/v3/openOrders",
            decode_list(CancelledOrder.from_json),
            [("symbol", symbol), ("recvWindow", self._recv_window(recv_window))],
        )

    async def get_open_orders(
        self,
        symbol: str,
        recv_window: Optional[int] = None,
    ) -> List[OrderQuery]:
        return await self._signed(
            "get_open_orders",
            "GET",
            "/api/v3/openOrders",
            decode_list(OrderQuery.from_json),
            [("symbol", symbol), ("recvWindow", self._recv_window(recv_window))],
        )
