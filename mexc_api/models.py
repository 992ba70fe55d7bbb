"""
MEXC API - Entity Decoders.

============================================================
PURPOSE
============================================================
Typed, immutable records decoded from resolved JSON payloads.

DECODING RULES:
- Float fields go through parse_float (string, number or null)
- String, bool and int fields pass through with a type check
- A required field that is absent is a DecodeError, never a default
- Unknown extra fields are ignored
- Enum fields reject values outside the known set

Decoders are pure: no I/O, no signing.

============================================================
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple, Type, TypeVar

from .errors import DecodeError, DecodeErrorReason
from .types import OrderSide, OrderStatus, OrderType
from .utils import parse_float


T = TypeVar("T")
E = TypeVar("E", bound=Enum)


# ============================================================
# FIELD HELPERS
# ============================================================

def _object(payload: Any, entity: str) -> Dict[str, Any]:
    if not isinstance(payload, dict):
        raise DecodeError(
            DecodeErrorReason.INVALID_TYPE,
            f"{entity}: expected object, got {type(payload).__name__}",
        )
    return payload


def _require(payload: Dict[str, Any], name: str) -> Any:
    if name not in payload:
        raise DecodeError(DecodeErrorReason.MISSING_FIELD, "Required field is absent", field=name)
    return payload[name]


def _invalid_type(name: str, expected: str, value: Any) -> DecodeError:
    return DecodeError(
        DecodeErrorReason.INVALID_TYPE,
        f"Expected {expected}, got {type(value).__name__}",
        field=name,
    )


def _float(payload: Dict[str, Any], name: str) -> float:
    return parse_float(_require(payload, name), field=name)


def _str(payload: Dict[str, Any], name: str) -> str:
    value = _require(payload, name)
    if not isinstance(value, str):
        raise _invalid_type(name, "string", value)
    return value


def _bool(payload: Dict[str, Any], name: str) -> bool:
    value = _require(payload, name)
    if not isinstance(value, bool):
        raise _invalid_type(name, "boolean", value)
    return value


def _check_int(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise _invalid_type(name, "integer", value)
    return value


def _int(payload: Dict[str, Any], name: str) -> int:
    return _check_int(name, _require(payload, name))


def _optional_int(payload: Dict[str, Any], name: str) -> Optional[int]:
    value = payload.get(name)
    if value is None:
        return None
    return _check_int(name, value)


def _id(payload: Dict[str, Any], name: str) -> str:
    """Identifier sent either as a string or as a JSON integer."""
    value = _require(payload, name)
    if isinstance(value, str):
        return value
    return str(_check_int(name, value))


def _list(payload: Dict[str, Any], name: str) -> List[Any]:
    value = _require(payload, name)
    if not isinstance(value, list):
        raise _invalid_type(name, "array", value)
    return value


def _str_list(payload: Dict[str, Any], name: str) -> Tuple[str, ...]:
    items = _list(payload, name)
    for item in items:
        if not isinstance(item, str):
            raise _invalid_type(name, "array of strings", item)
    return tuple(items)


def _int_list(payload: Dict[str, Any], name: str) -> Tuple[int, ...]:
    return tuple(_check_int(name, item) for item in _list(payload, name))


def _enum(payload: Dict[str, Any], name: str, enum_cls: Type[E]) -> E:
    value = _require(payload, name)
    try:
        return enum_cls(value)
    except ValueError:
        raise DecodeError(
            DecodeErrorReason.INVALID_VALUE,
            f"Unknown {enum_cls.__name__} {value!r}",
            field=name,
        )


def _optional_enum(payload: Dict[str, Any], name: str, enum_cls: Type[E]) -> Optional[E]:
    if payload.get(name) is None:
        return None
    return _enum(payload, name, enum_cls)


def decode_list(decoder: Callable[[Any], T]) -> Callable[[Any], List[T]]:
    """
    Lift an entity decoder to a JSON array of entities.

    The whole array fails if any element fails.
    """
    def _decode(payload: Any) -> List[T]:
        if not isinstance(payload, list):
            raise _invalid_type("[]", "array", payload)
        return [decoder(item) for item in payload]

    return _decode


# ============================================================
# SCALAR PAYLOADS
# ============================================================

def server_time_from_json(payload: Any) -> int:
    """``{"serverTime": <ms>}``."""
    return _int(_object(payload, "ServerTime"), "serverTime")


def index_price_from_json(payload: Any) -> float:
    """Futures ``{"indexPrice": ...}`` payload."""
    return _float(_object(payload, "IndexPrice"), "indexPrice")


# ============================================================
# SPOT ACCOUNT
# ============================================================

@dataclass(frozen=True)
class AccountBalance:
    """Free and locked amount of one asset."""

    asset: str
    free: float
    locked: float

    @classmethod
    def from_json(cls, payload: Any) -> "AccountBalance":
        data = _object(payload, cls.__name__)
        return cls(
            asset=_str(data, "asset"),
            free=_float(data, "free"),
            locked=_float(data, "locked"),
        )


@dataclass(frozen=True)
class Account:
    """Spot account information."""

    account_type: str
    can_deposit: bool
    can_trade: bool
    can_withdraw: bool
    permissions: Tuple[str, ...]
    balances: Tuple[AccountBalance, ...]

    @classmethod
    def from_json(cls, payload: Any) -> "Account":
        data = _object(payload, cls.__name__)
        return cls(
            account_type=_str(data, "accountType"),
            can_deposit=_bool(data, "canDeposit"),
            can_trade=_bool(data, "canTrade"),
            can_withdraw=_bool(data, "canWithdraw"),
            permissions=_str_list(data, "permissions"),
            balances=tuple(AccountBalance.from_json(b) for b in _list(data, "balances")),
        )

    def balance(self, asset: str) -> Optional[AccountBalance]:
        """Balance of one asset, if the account holds it."""
        for balance in self.balances:
            if balance.asset == asset:
                return balance
        return None


@dataclass(frozen=True)
class ListenKey:
    """User data stream token."""

    listen_key: str

    @classmethod
    def from_json(cls, payload: Any) -> "ListenKey":
        return cls(listen_key=_str(_object(payload, cls.__name__), "listenKey"))


# ============================================================
# SPOT ORDERS
# ============================================================

@dataclass(frozen=True)
class OrderReceipt:
    """Acknowledgement of a submitted spot order."""

    symbol: str
    order_id: str
    order_list_id: int
    price: float
    orig_qty: float
    order_type: OrderType
    side: OrderSide
    transact_time: int

    @classmethod
    def from_json(cls, payload: Any) -> "OrderReceipt":
        data = _object(payload, cls.__name__)
        return cls(
            symbol=_str(data, "symbol"),
            order_id=_id(data, "orderId"),
            order_list_id=_int(data, "orderListId"),
            price=_float(data, "price"),
            orig_qty=_float(data, "origQty"),
            order_type=_enum(data, "type", OrderType),
            side=_enum(data, "side", OrderSide),
            transact_time=_int(data, "transactTime"),
        )


@dataclass(frozen=True)
class CancelledOrder:
    """Spot order as reported by a cancel call."""

    symbol: str
    order_id: str
    price: float
    orig_qty: float
    executed_qty: float
    cummulative_quote_qty: float
    order_type: OrderType
    side: OrderSide
    status: Optional[OrderStatus] = None

    @classmethod
    def from_json(cls, payload: Any) -> "CancelledOrder":
        data = _object(payload, cls.__name__)
        return cls(
            symbol=_str(data, "symbol"),
            order_id=_id(data, "orderId"),
            price=_float(data, "price"),
            orig_qty=_float(data, "origQty"),
            executed_qty=_float(data, "executedQty"),
            # exchange spelling
            cummulative_quote_qty=_float(data, "cummulativeQuoteQty"),
            order_type=_enum(data, "type", OrderType),
            side=_enum(data, "side", OrderSide),
            status=_optional_enum(data, "status", OrderStatus),
        )


@dataclass(frozen=True)
class OrderQuery:
    """Open spot order."""

    symbol: str
    order_id: str
    price: float
    orig_qty: float
    executed_qty: float
    order_type: OrderType
    side: OrderSide
    time: int
    update_time: Optional[int] = None
    status: Optional[OrderStatus] = None

    @classmethod
    def from_json(cls, payload: Any) -> "OrderQuery":
        data = _object(payload, cls.__name__)
        return cls(
            symbol=_str(data, "symbol"),
            order_id=_id(data, "orderId"),
            price=_float(data, "price"),
            orig_qty=_float(data, "origQty"),
            executed_qty=_float(data, "executedQty"),
            order_type=_enum(data, "type", OrderType),
            side=_enum(data, "side", OrderSide),
            time=_int(data, "time"),
            update_time=_optional_int(data, "updateTime"),
            status=_optional_enum(data, "status", OrderStatus),
        )

    @property
    def remaining_qty(self) -> float:
        return self.orig_qty - self.executed_qty


# ============================================================
# SPOT MARKET DATA
# ============================================================

@dataclass(frozen=True)
class SymbolInfo:
    """Trading rules of one spot symbol."""

    symbol: str
    status: str
    base_asset: str
    quote_asset: str
    full_name: str
    base_asset_precision: int
    base_commission_precision: int
    quote_asset_precision: int
    quote_commission_precision: int
    quote_precision: int
    base_size_precision: float
    quote_amount_precision: float
    quote_amount_precision_market: float
    max_quote_amount: float
    max_quote_amount_market: float
    maker_commission: float
    taker_commission: float
    is_spot_trading_allowed: bool
    is_margin_trading_allowed: bool
    order_types: Tuple[str, ...]
    permissions: Tuple[str, ...]
    filters: Tuple[Any, ...]

    @classmethod
    def from_json(cls, payload: Any) -> "SymbolInfo":
        data = _object(payload, cls.__name__)
        return cls(
            symbol=_str(data, "symbol"),
            status=_str(data, "status"),
            base_asset=_str(data, "baseAsset"),
            quote_asset=_str(data, "quoteAsset"),
            full_name=_str(data, "fullName"),
            base_asset_precision=_int(data, "baseAssetPrecision"),
            base_commission_precision=_int(data, "baseCommissionPrecision"),
            quote_asset_precision=_int(data, "quoteAssetPrecision"),
            quote_commission_precision=_int(data, "quoteCommissionPrecision"),
            quote_precision=_int(data, "quotePrecision"),
            base_size_precision=_float(data, "baseSizePrecision"),
            quote_amount_precision=_float(data, "quoteAmountPrecision"),
            quote_amount_precision_market=_float(data, "quoteAmountPrecisionMarket"),
            max_quote_amount=_float(data, "maxQuoteAmount"),
            max_quote_amount_market=_float(data, "maxQuoteAmountMarket"),
            maker_commission=_float(data, "makerCommission"),
            taker_commission=_float(data, "takerCommission"),
            is_spot_trading_allowed=_bool(data, "isSpotTradingAllowed"),
            is_margin_trading_allowed=_bool(data, "isMarginTradingAllowed"),
            order_types=_str_list(data, "orderTypes"),
            permissions=_str_list(data, "permissions"),
            # raw filter entries, shape varies per symbol
            filters=tuple(_list(data, "filters")),
        )


@dataclass(frozen=True)
class ExchangeInfo:
    """Exchange trading rules."""

    server_time: int
    symbols: Tuple[SymbolInfo, ...]

    @classmethod
    def from_json(cls, payload: Any) -> "ExchangeInfo":
        data = _object(payload, cls.__name__)
        return cls(
            server_time=_int(data, "serverTime"),
            symbols=tuple(SymbolInfo.from_json(s) for s in _list(data, "symbols")),
        )

    def get(self, symbol: str) -> Optional[SymbolInfo]:
        for info in self.symbols:
            if info.symbol == symbol:
                return info
        return None


@dataclass(frozen=True)
class Level:
    """One order book price level."""

    price: float
    size: float

    @classmethod
    def from_json(cls, payload: Any) -> "Level":
        if not isinstance(payload, list) or len(payload) < 2:
            raise DecodeError(
                DecodeErrorReason.INVALID_TYPE,
                "Expected a [price, size] array",
                field="level",
            )
        return cls(
            price=parse_float(payload[0], field="price"),
            size=parse_float(payload[1], field="size"),
        )


@dataclass(frozen=True)
class Orderbook:
    """Order book snapshot; bids best first, asks best first."""

    timestamp: int
    bids: Tuple[Level, ...]
    asks: Tuple[Level, ...]

    @classmethod
    def from_json(cls, payload: Any) -> "Orderbook":
        data = _object(payload, cls.__name__)
        return cls(
            timestamp=_int(data, "timestamp"),
            bids=tuple(Level.from_json(level) for level in _list(data, "bids")),
            asks=tuple(Level.from_json(level) for level in _list(data, "asks")),
        )

    @property
    def best_bid(self) -> Optional[Level]:
        return self.bids[0] if self.bids else None

    @property
    def best_ask(self) -> Optional[Level]:
        return self.asks[0] if self.asks else None


# ============================================================
# FUTURES ENTITIES
# ============================================================

@dataclass(frozen=True)
class FuturesBalance:
    """Futures account asset."""

    currency: str
    position_margin: float
    available_balance: float
    cash_balance: float
    frozen_balance: float
    equity: float
    unrealized: float
    bonus: float

    @classmethod
    def from_json(cls, payload: Any) -> "FuturesBalance":
        data = _object(payload, cls.__name__)
        return cls(
            currency=_str(data, "currency"),
            position_margin=_float(data, "positionMargin"),
            available_balance=_float(data, "availableBalance"),
            cash_balance=_float(data, "cashBalance"),
            frozen_balance=_float(data, "frozenBalance"),
            equity=_float(data, "equity"),
            unrealized=_float(data, "unrealized"),
            bonus=_float(data, "bonus"),
        )


@dataclass(frozen=True)
class FuturesPosition:
    """
    Open futures position.

    ``position_type`` is 1 for long and 2 for short; ``open_type`` is
    1 isolated and 2 cross.
    """

    position_id: int
    symbol: str
    position_type: int
    open_type: int
    state: int
    hold_vol: float
    frozen_vol: float
    close_vol: float
    hold_avg_price: float
    hold_avg_price_fully_scale: float
    open_avg_price: float
    open_avg_price_fully_scale: float
    close_avg_price: float
    new_open_avg_price: float
    new_close_avg_price: float
    liquidate_price: float
    oim: float
    im: float
    hold_fee: float
    realised: float
    close_profit_loss: float
    fee: float
    leverage: float
    margin_ratio: float
    profit_ratio: float
    auto_add_im: bool
    version: int
    create_time: int
    update_time: int

    @classmethod
    def from_json(cls, payload: Any) -> "FuturesPosition":
        data = _object(payload, cls.__name__)
        return cls(
            position_id=_int(data, "positionId"),
            symbol=_str(data, "symbol"),
            position_type=_int(data, "positionType"),
            open_type=_int(data, "openType"),
            state=_int(data, "state"),
            hold_vol=_float(data, "holdVol"),
            frozen_vol=_float(data, "frozenVol"),
            close_vol=_float(data, "closeVol"),
            hold_avg_price=_float(data, "holdAvgPrice"),
            hold_avg_price_fully_scale=_float(data, "holdAvgPriceFullyScale"),
            open_avg_price=_float(data, "openAvgPrice"),
            open_avg_price_fully_scale=_float(data, "openAvgPriceFullyScale"),
            close_avg_price=_float(data, "closeAvgPrice"),
            new_open_avg_price=_float(data, "newOpenAvgPrice"),
            new_close_avg_price=_float(data, "newCloseAvgPrice"),
            liquidate_price=_float(data, "liquidatePrice"),
            oim=_float(data, "oim"),
            im=_float(data, "im"),
            hold_fee=_float(data, "holdFee"),
            realised=_float(data, "realised"),
            close_profit_loss=_float(data, "closeProfitLoss"),
            fee=_float(data, "fee"),
            leverage=_float(data, "leverage"),
            margin_ratio=_float(data, "marginRatio"),
            profit_ratio=_float(data, "profitRatio"),
            auto_add_im=_bool(data, "autoAddIm"),
            version=_int(data, "version"),
            create_time=_int(data, "createTime"),
            update_time=_int(data, "updateTime"),
        )

    @property
    def is_long(self) -> bool:
        return self.position_type == 1


@dataclass(frozen=True)
class ContractInfo:
    """Contract specification of one futures symbol."""

    id: int
    symbol: str
    display_name: str
    display_name_en: str
    base_coin: str
    base_coin_id: str
    base_coin_name: str
    base_coin_icon_url: str
    quote_coin: str
    quote_coin_name: str
    settle_coin: str
    vid: str
    state: int
    future_type: int
    position_open_type: int
    api_allowed: bool
    is_hidden: bool
    is_hot: bool
    is_new: bool
    automatic_delivery: int
    contract_size: float
    min_vol: float
    max_vol: float
    limit_max_vol: float
    vol_unit: float
    vol_scale: int
    price_unit: float
    price_scale: int
    amount_scale: int
    min_leverage: int
    max_leverage: int
    initial_margin_rate: float
    maintenance_margin_rate: float
    maker_fee_rate: float
    taker_fee_rate: float
    ask_limit_price_rate: float
    bid_limit_price_rate: float
    market_order_max_level: int
    market_order_price_limit_rate1: float
    market_order_price_limit_rate2: float
    max_num_orders: Tuple[int, ...]
    price_coefficient_variation: float
    risk_base_vol: float
    risk_incr_vol: float
    risk_incr_imr: float
    risk_incr_mmr: float
    risk_level_limit: int
    risk_limit_type: str
    risk_long_short_switch: int
    trigger_protect: float
    appraisal: float
    show_appraisal_countdown: int
    threshold: float
    concept_plate: Tuple[str, ...]
    depth_step_list: Tuple[str, ...]
    index_origin: Tuple[str, ...]

    @classmethod
    def from_json(cls, payload: Any) -> "ContractInfo":
        data = _object(payload, cls.__name__)
        return cls(
            id=_int(data, "id"),
            symbol=_str(data, "symbol"),
            display_name=_str(data, "displayName"),
            display_name_en=_str(data, "displayNameEn"),
            base_coin=_str(data, "baseCoin"),
            base_coin_id=_str(data, "baseCoinId"),
            base_coin_name=_str(data, "baseCoinName"),
            base_coin_icon_url=_str(data, "baseCoinIconUrl"),
            quote_coin=_str(data, "quoteCoin"),
            quote_coin_name=_str(data, "quoteCoinName"),
            settle_coin=_str(data, "settleCoin"),
            vid=_str(data, "vid"),
            state=_int(data, "state"),
            future_type=_int(data, "futureType"),
            position_open_type=_int(data, "positionOpenType"),
            api_allowed=_bool(data, "apiAllowed"),
            is_hidden=_bool(data, "isHidden"),
            is_hot=_bool(data, "isHot"),
            is_new=_bool(data, "isNew"),
            automatic_delivery=_int(data, "automaticDelivery"),
            contract_size=_float(data, "contractSize"),
            min_vol=_float(data, "minVol"),
            max_vol=_float(data, "maxVol"),
            limit_max_vol=_float(data, "limitMaxVol"),
            vol_unit=_float(data, "volUnit"),
            vol_scale=_int(data, "volScale"),
            price_unit=_float(data, "priceUnit"),
            price_scale=_int(data, "priceScale"),
            amount_scale=_int(data, "amountScale"),
            min_leverage=_int(data, "minLeverage"),
            max_leverage=_int(data, "maxLeverage"),
            initial_margin_rate=_float(data, "initialMarginRate"),
            maintenance_margin_rate=_float(data, "maintenanceMarginRate"),
            maker_fee_rate=_float(data, "makerFeeRate"),
            taker_fee_rate=_float(data, "takerFeeRate"),
            ask_limit_price_rate=_float(data, "askLimitPriceRate"),
            bid_limit_price_rate=_float(data, "bidLimitPriceRate"),
            market_order_max_level=_int(data, "marketOrderMaxLevel"),
            market_order_price_limit_rate1=_float(data, "marketOrderPriceLimitRate1"),
            market_order_price_limit_rate2=_float(data, "marketOrderPriceLimitRate2"),
            max_num_orders=_int_list(data, "maxNumOrders"),
            price_coefficient_variation=_float(data, "priceCoefficientVariation"),
            risk_base_vol=_float(data, "riskBaseVol"),
            risk_incr_vol=_float(data, "riskIncrVol"),
            risk_incr_imr=_float(data, "riskIncrImr"),
            risk_incr_mmr=_float(data, "riskIncrMmr"),
            risk_level_limit=_int(data, "riskLevelLimit"),
            risk_limit_type=_str(data, "riskLimitType"),
            risk_long_short_switch=_int(data, "riskLongShortSwitch"),
            trigger_protect=_float(data, "triggerProtect"),
            appraisal=_float(data, "appraisal"),
            show_appraisal_countdown=_int(data, "showAppraisalCountdown"),
            threshold=_float(data, "threshold"),
            concept_plate=_str_list(data, "conceptPlate"),
            depth_step_list=_str_list(data, "depthStepList"),
            index_origin=_str_list(data, "indexOrigin"),
        )


@dataclass(frozen=True)
class FuturesOrderReceipt:
    """Acknowledgement of a futures order submission."""

    order_id: str
    ts: int

    @classmethod
    def from_json(cls, payload: Any) -> "FuturesOrderReceipt":
        data = _object(payload, cls.__name__)
        return cls(order_id=_id(data, "orderId"), ts=_int(data, "ts"))
