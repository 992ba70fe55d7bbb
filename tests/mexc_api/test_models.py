"""
MEXC API Entity Decoder Tests.

============================================================
PURPOSE
============================================================
Decoding of recorded exchange payloads into typed entities.

============================================================
"""

import json

import pytest

from mexc_api import (
    Account,
    CancelledOrder,
    ContractInfo,
    DecodeError,
    DecodeErrorReason,
    ExchangeInfo,
    FuturesBalance,
    FuturesOrderReceipt,
    FuturesPosition,
    Level,
    ListenKey,
    OrderQuery,
    OrderReceipt,
    OrderSide,
    OrderStatus,
    OrderType,
    Orderbook,
    decode_list,
)
from mexc_api.models import index_price_from_json, server_time_from_json


ORDER_RECEIPT = json.loads(
    '{"symbol":"PLSUSDT","orderId":"C02__426060921085927424065","orderListId":-1,'
    '"price":"0.00009512","origQty":"599971.13","type":"MARKET","side":"BUY",'
    '"transactTime":1717363075282}'
)

CANCELLED_ORDERS = json.loads(
    '[{"symbol":"PLSUSDT","orderId":"C02__426199983784497153065","price":"0.00009712",'
    '"origQty":"299985.56","type":"LIMIT","side":"SELL","executedQty":"0",'
    '"cummulativeQuoteQty":"0","status":"NEW"},'
    '{"symbol":"PLSUSDT","orderId":"C02__426199982572318720065","price":"0.00009512",'
    '"origQty":"299985.56","type":"LIMIT","side":"SELL","executedQty":"0",'
    '"cummulativeQuoteQty":"0","status":"NEW"}]'
)

SYMBOL_INFO = {
    "symbol": "MXUSDT",
    "status": "1",
    "baseAsset": "MX",
    "baseAssetPrecision": 2,
    "quoteAsset": "USDT",
    "quotePrecision": 4,
    "quoteAssetPrecision": 4,
    "baseCommissionPrecision": 2,
    "quoteCommissionPrecision": 4,
    "orderTypes": ["LIMIT", "MARKET", "LIMIT_MAKER"],
    "isSpotTradingAllowed": True,
    "isMarginTradingAllowed": False,
    "quoteAmountPrecision": "5.000000000000000000",
    "baseSizePrecision": "0",
    "permissions": ["SPOT"],
    "filters": [],
    "maxQuoteAmount": "2000000.000000000000000000",
    "makerCommission": "0",
    "takerCommission": "0.0005",
    "quoteAmountPrecisionMarket": "5.000000000000000000",
    "maxQuoteAmountMarket": "100000.000000000000000000",
    "fullName": "MX Token",
    "tradeSideType": 1,
}

FUTURES_POSITION = {
    "positionId": 1394650,
    "symbol": "ETH_USDT",
    "positionType": 1,
    "openType": 1,
    "state": 1,
    "holdVol": 1,
    "frozenVol": 0,
    "closeVol": 0,
    "holdAvgPrice": 1217.3,
    "holdAvgPriceFullyScale": "1217.3",
    "openAvgPrice": 1217.3,
    "openAvgPriceFullyScale": "1217.3",
    "closeAvgPrice": 0,
    "newOpenAvgPrice": 1217.3,
    "newCloseAvgPrice": 0,
    "liquidatePrice": 1211.2,
    "oim": 0.6085,
    "im": 0.6085,
    "holdFee": 0,
    "realised": -0.0073,
    "closeProfitLoss": None,
    "fee": 0.0073,
    "leverage": 20,
    "marginRatio": 0.0019,
    "profitRatio": 0,
    "autoAddIm": False,
    "version": 1,
    "createTime": 1609991676000,
    "updateTime": 1609991676000,
}

CONTRACT_INFO = {
    "symbol": "BTC_USDT",
    "displayName": "BTC_USDT",
    "displayNameEn": "BTC_USDT PERPETUAL",
    "positionOpenType": 3,
    "baseCoin": "BTC",
    "quoteCoin": "USDT",
    "baseCoinName": "BTC",
    "quoteCoinName": "USDT",
    "futureType": 1,
    "settleCoin": "USDT",
    "contractSize": 0.0001,
    "minLeverage": 1,
    "maxLeverage": 200,
    "priceScale": 1,
    "volScale": 0,
    "amountScale": 4,
    "priceUnit": 0.1,
    "volUnit": 1,
    "minVol": 1,
    "maxVol": 1250000,
    "bidLimitPriceRate": 0.1,
    "askLimitPriceRate": 0.1,
    "takerFeeRate": 0.0002,
    "makerFeeRate": 0,
    "maintenanceMarginRate": 0.004,
    "initialMarginRate": 0.005,
    "riskBaseVol": 1250000,
    "riskIncrVol": 200000,
    "riskIncrMmr": 0.004,
    "riskIncrImr": 0.004,
    "riskLevelLimit": 5,
    "priceCoefficientVariation": 0.1,
    "indexOrigin": ["BINANCE", "GATEIO", "HUOBI", "MXC"],
    "state": 0,
    "isNew": False,
    "isHot": True,
    "isHidden": False,
    "conceptPlate": ["mc-trade-zone-pow"],
    "riskLimitType": "BY_VOLUME",
    "maxNumOrders": [200, 50],
    "marketOrderMaxLevel": 20,
    "marketOrderPriceLimitRate1": 0.2,
    "marketOrderPriceLimitRate2": 0.005,
    "triggerProtect": 0.1,
    "appraisal": 0,
    "showAppraisalCountdown": 0,
    "automaticDelivery": 0,
    "apiAllowed": False,
    "depthStepList": ["0.1", "1", "10", "100"],
    "limitMaxVol": 1250000,
    "threshold": 0,
    "baseCoinIconUrl": "https://public.mocortech.com/coin/F20210514192151938ROqHVhx8HHBMjK.png",
    "id": 10,
    "vid": "128f589271cb4951b03e71e6323eb7be",
    "baseCoinId": "febc9973be4d4d53bb374476239eb219",
    "riskLongShortSwitch": 0,
}


# ============================================================
# SPOT ORDER TESTS
# ============================================================

class TestOrderReceipt:
    """Tests for OrderReceipt decoding."""

    def test_recorded_payload(self):
        """Test the recorded exchange receipt decodes."""
        receipt = OrderReceipt.from_json(ORDER_RECEIPT)

        assert receipt.symbol == "PLSUSDT"
        assert receipt.order_id == "C02__426060921085927424065"
        assert receipt.order_list_id == -1
        assert receipt.price == 0.00009512
        assert receipt.orig_qty == 599971.13
        assert receipt.order_type == OrderType.MARKET
        assert receipt.side == OrderSide.BUY
        assert receipt.transact_time == 1717363075282

    def test_numeric_price(self):
        """Test prices given as JSON numbers decode the same way."""
        receipt = OrderReceipt.from_json({**ORDER_RECEIPT, "price": 0.00009512})

        assert receipt.price == 0.00009512

    def test_ignores_unknown_fields(self):
        receipt = OrderReceipt.from_json({**ORDER_RECEIPT, "newField": {"x": 1}})

        assert receipt.symbol == "PLSUSDT"

    def test_missing_field(self):
        """Test an absent required field fails rather than defaulting."""
        payload = dict(ORDER_RECEIPT)
        del payload["origQty"]

        with pytest.raises(DecodeError) as exc_info:
            OrderReceipt.from_json(payload)

        assert exc_info.value.reason == DecodeErrorReason.MISSING_FIELD
        assert exc_info.value.field == "origQty"

    def test_unknown_side(self):
        with pytest.raises(DecodeError) as exc_info:
            OrderReceipt.from_json({**ORDER_RECEIPT, "side": "HOLD"})

        assert exc_info.value.reason == DecodeErrorReason.INVALID_VALUE

    def test_bool_price_rejected(self):
        with pytest.raises(DecodeError) as exc_info:
            OrderReceipt.from_json({**ORDER_RECEIPT, "price": True})

        assert exc_info.value.reason == DecodeErrorReason.INVALID_TYPE
        assert exc_info.value.field == "price"

    def test_not_an_object(self):
        with pytest.raises(DecodeError) as exc_info:
            OrderReceipt.from_json("PLSUSDT")

        assert exc_info.value.reason == DecodeErrorReason.INVALID_TYPE


class TestCancelledOrders:
    """Tests for CancelledOrder list decoding."""

    def test_recorded_payload(self):
        orders = decode_list(CancelledOrder.from_json)(CANCELLED_ORDERS)

        assert len(orders) == 2
        assert orders[0].order_id == "C02__426199983784497153065"
        assert orders[0].price == 0.00009712
        assert orders[0].orig_qty == 299985.56
        assert orders[0].executed_qty == 0.0
        assert orders[0].cummulative_quote_qty == 0.0
        assert orders[0].order_type == OrderType.LIMIT
        assert orders[0].side == OrderSide.SELL
        assert orders[0].status == OrderStatus.NEW
        assert orders[1].price == 0.00009512

    def test_whole_list_fails_on_bad_element(self):
        """Test one bad element fails the whole list."""
        bad = [CANCELLED_ORDERS[0], {**CANCELLED_ORDERS[1], "price": "n/a"}]

        with pytest.raises(DecodeError) as exc_info:
            decode_list(CancelledOrder.from_json)(bad)

        assert exc_info.value.reason == DecodeErrorReason.INVALID_NUMBER

    def test_list_expected(self):
        with pytest.raises(DecodeError):
            decode_list(CancelledOrder.from_json)(CANCELLED_ORDERS[0])


class TestOrderQuery:
    """Tests for open order decoding."""

    BASE = {
        "symbol": "PLSUSDT",
        "orderId": "C02__1",
        "price": "0.0001",
        "origQty": "100",
        "executedQty": "40",
        "type": "LIMIT",
        "side": "BUY",
        "time": 1717363075282,
    }

    def test_optional_update_time_absent(self):
        order = OrderQuery.from_json(self.BASE)

        assert order.update_time is None
        assert order.status is None
        assert order.remaining_qty == 60.0

    def test_update_time_present(self):
        order = OrderQuery.from_json({**self.BASE, "updateTime": 1717363075999, "status": "PARTIALLY_FILLED"})

        assert order.update_time == 1717363075999
        assert order.status == OrderStatus.PARTIALLY_FILLED

    def test_update_time_null(self):
        order = OrderQuery.from_json({**self.BASE, "updateTime": None})

        assert order.update_time is None


# ============================================================
# SPOT ACCOUNT / MARKET TESTS
# ============================================================

class TestAccount:
    """Tests for account decoding."""

    def test_decode(self):
        account = Account.from_json({
            "accountType": "SPOT",
            "canDeposit": True,
            "canTrade": True,
            "canWithdraw": False,
            "permissions": ["SPOT"],
            "balances": [
                {"asset": "USDT", "free": "120.5", "locked": "0"},
                {"asset": "MX", "free": 3, "locked": None},
            ],
            "updateTime": None,
        })

        assert account.account_type == "SPOT"
        assert account.can_withdraw is False
        assert account.permissions == ("SPOT",)
        assert account.balance("USDT").free == 120.5
        assert account.balance("MX").locked == 0.0
        assert account.balance("BTC") is None

    def test_wrong_bool_type(self):
        with pytest.raises(DecodeError) as exc_info:
            Account.from_json({
                "accountType": "SPOT",
                "canDeposit": "yes",
                "canTrade": True,
                "canWithdraw": True,
                "permissions": [],
                "balances": [],
            })

        assert exc_info.value.field == "canDeposit"

    def test_listen_key(self):
        key = ListenKey.from_json({"listenKey": "pqia91ma19a5s61cv6a81va65sdf19v8a65a1a5s61cv6a81va65sdf19v8a65a1"})

        assert key.listen_key.startswith("pqia91ma")


class TestMarketData:
    """Tests for exchange info and order book decoding."""

    def test_exchange_info(self):
        info = ExchangeInfo.from_json({
            "timezone": "CST",
            "serverTime": 1717363075282,
            "symbols": [SYMBOL_INFO],
        })

        symbol = info.get("MXUSDT")
        assert info.server_time == 1717363075282
        assert symbol.base_asset_precision == 2
        assert symbol.taker_commission == 0.0005
        assert symbol.max_quote_amount == 2000000.0
        assert symbol.order_types == ("LIMIT", "MARKET", "LIMIT_MAKER")
        assert symbol.is_spot_trading_allowed is True
        assert info.get("BTCUSDT") is None

    def test_orderbook(self):
        book = Orderbook.from_json({
            "lastUpdateId": 1,
            "timestamp": 1717363075282,
            "bids": [["65000.5", "0.12"], ["65000.0", "1"]],
            "asks": [["65001", "0.5"]],
        })

        assert book.timestamp == 1717363075282
        assert book.best_bid == Level(price=65000.5, size=0.12)
        assert book.best_ask == Level(price=65001.0, size=0.5)
        assert len(book.bids) == 2

    def test_bad_level(self):
        with pytest.raises(DecodeError):
            Level.from_json(["65000.5"])

    def test_server_time(self):
        assert server_time_from_json({"serverTime": 1717363075282}) == 1717363075282


# ============================================================
# FUTURES TESTS
# ============================================================

class TestFuturesEntities:
    """Tests for futures entity decoding."""

    def test_balance(self):
        balance = FuturesBalance.from_json({
            "currency": "USDT",
            "positionMargin": 0,
            "availableBalance": "120.31",
            "cashBalance": 120.31,
            "frozenBalance": 0,
            "equity": 120.31,
            "unrealized": 0,
            "bonus": None,
            "availableCash": 120.31,
        })

        assert balance.currency == "USDT"
        assert balance.available_balance == 120.31
        assert balance.bonus == 0.0

    def test_position(self):
        position = FuturesPosition.from_json(FUTURES_POSITION)

        assert position.position_id == 1394650
        assert position.is_long
        assert position.hold_avg_price_fully_scale == 1217.3
        assert position.close_profit_loss == 0.0
        assert position.leverage == 20.0
        assert position.auto_add_im is False

    def test_contract_info(self):
        info = ContractInfo.from_json(CONTRACT_INFO)

        assert info.symbol == "BTC_USDT"
        assert info.contract_size == 0.0001
        assert info.max_leverage == 200
        assert info.max_num_orders == (200, 50)
        assert info.depth_step_list == ("0.1", "1", "10", "100")
        assert info.api_allowed is False

    def test_contract_info_missing_field(self):
        payload = dict(CONTRACT_INFO)
        del payload["priceUnit"]

        with pytest.raises(DecodeError) as exc_info:
            ContractInfo.from_json(payload)

        assert exc_info.value.field == "priceUnit"

    def test_order_receipt(self):
        receipt = FuturesOrderReceipt.from_json({"orderId": 102015012431820288, "ts": 1609991676000})

        assert receipt.order_id == "102015012431820288"
        assert receipt.ts == 1609991676000

    def test_index_price(self):
        assert index_price_from_json({"symbol": "BTC_USDT", "indexPrice": 65000.5, "timestamp": 1}) == 65000.5


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
