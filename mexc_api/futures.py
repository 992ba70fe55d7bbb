"""
MEXC API - Futures Client.

============================================================
PURPOSE
============================================================
Async client for the MEXC futures (contract) REST API.

ENDPOINTS:
- Public:   ping, index price, contract detail
- Account:  assets, single asset, open positions (v1 header signing)
- Orders:   order submission (web session signing)

Every response is wrapped in ``{success, code, data?, message?}``;
the success flag is authoritative, not the HTTP status.

============================================================
ORDER SUBMISSION WARNING
============================================================
The documented API does not accept futures orders. submit_order goes
through the exchange's web endpoint with a browser session token and
may stop working without notice.

============================================================
"""

import logging
from datetime import timedelta
from typing import Any, Callable, Dict, List, Optional

from .base import BaseClient, T
from .envelope import resolve_futures
from .errors import MexcError
from .models import (
    ContractInfo,
    FuturesBalance,
    FuturesOrderReceipt,
    FuturesPosition,
    decode_list,
    index_price_from_json,
)
from .signing import (
    FuturesHeaderSigner,
    FuturesSessionSigner,
    build_query,
    public_request,
)
from .types import FuturesOrderRequest


logger = logging.getLogger(__name__)


ORDER_CREATE_PATH = "/api/v1/private/order/create"


# ============================================================
# FUTURES CLIENT
# ============================================================

class MexcFuturesClient(BaseClient):
    """
    MEXC futures REST client.

    Account endpoints need an API key and secret; order submission
    needs the web session token instead.
    """

    market = "futures"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._header_signer = FuturesHeaderSigner(self._credentials)
        self._session_signer = FuturesSessionSigner(self._credentials)

    # --------------------------------------------------------
    # INTERNAL
    # --------------------------------------------------------

    async def _public(
        self,
        operation: str,
        path: str,
        decoder: Callable[[Any], T],
        params: Optional[Dict[str, Any]] = None,
    ) -> T:
        url = f"{self._config.futures_url}{path}"
        if params:
            url = f"{url}?{build_query(params.items())}"
        return await self._execute(operation, public_request("GET", url), resolve_futures, decoder)

    async def _private(
        self,
        operation: str,
        path: str,
        decoder: Callable[[Any], T],
        params: Optional[Dict[str, Any]] = None,
    ) -> T:
        request = self._header_signer.build(
            "GET",
            self._config.futures_url,
            path,
            self._clock(),
            params,
        )
        return await self._execute(operation, request, resolve_futures, decoder)

    # --------------------------------------------------------
    # PUBLIC
    # --------------------------------------------------------

    async def ping(self) -> timedelta:
        """Round trip to the futures API; the body is ignored."""
        request = public_request("GET", f"{self._config.futures_url}/api/v1/contract/ping")
        return await self._round_trip("ping", request)

    async def get_fair_price(self, symbol: str) -> float:
        """Index price of a contract, e.g. "BTC_USDT"."""
        return await self._public(
            "get_fair_price",
            f"/api/v1/contract/index_price/{symbol}",
            index_price_from_json,
        )

    async def get_contract_info(self, symbol: str) -> ContractInfo:
        return await self._public(
            "get_contract_info",
            "/api/v1/contract/detail",
            ContractInfo.from_json,
            {"symbol": symbol},
        )

    # --------------------------------------------------------
    # ACCOUNT
    # --------------------------------------------------------

    async def get_futures_account(self) -> List[FuturesBalance]:
        """Every asset of the futures account."""
        return await self._private(
            "get_futures_account",
            "/api/v1/private/account/assets",
            decode_list(FuturesBalance.from_json),
        )

    async def get_account_asset(self, currency: str) -> FuturesBalance:
        return await self._private(
            "get_account_asset",
            f"/api/v1/private/account/asset/{currency}",
            FuturesBalance.from_json,
        )

    async def get_open_positions(self, symbol: Optional[str] = None) -> List[FuturesPosition]:
        """
        Open positions, optionally for one contract.

        The symbol filter is part of the signed material.
        """
        return await self._private(
            "get_open_positions",
            "/api/v1/private/position/open_positions",
            decode_list(FuturesPosition.from_json),
            {"symbol": symbol} if symbol else None,
        )

    # --------------------------------------------------------
    # ORDERS
    # --------------------------------------------------------

    async def submit_order(self, order: FuturesOrderRequest) -> FuturesOrderReceipt:
        """
        Submit a futures order through the web session endpoint.

        Raises:
            AuthError: MISSING_SESSION_TOKEN without a web token
            ApiError: REJECTED when the exchange refuses the order
        """
        payload = order.to_payload()
        request = self._session_signer.build(
            self._config.futures_web_url,
            ORDER_CREATE_PATH,
            payload,
            self._clock(),
        )

        self._log.log_order(
            "submit",
            order.symbol,
            side=order.side.name,
            order_type=order.order_type.name,
            quantity=str(order.volume),
            price=payload.get("price"),
        )

        try:
            receipt = await self._execute("submit_order", request, resolve_futures, FuturesOrderReceipt.from_json)
        except MexcError as e:
            self._log.log_order("submit", order.symbol, error=str(e))
            raise

        logger.info(f"Futures order accepted: {order.symbol} {order.side.name} id={receipt.order_id}")
        return receipt
