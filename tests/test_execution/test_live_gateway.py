"""Tests for the live gateway (ccxt result parsing and error translation)."""

from decimal import Decimal
from unittest.mock import AsyncMock

import ccxt
import pytest

from trendbot.config import TradingSettings
from trendbot.exceptions import GatewayError, OrderError
from trendbot.exchange.client import ExchangeClient
from trendbot.execution.live_gateway import LiveGateway
from trendbot.models import OrderSide


@pytest.fixture
def mock_exchange_client() -> AsyncMock:
    client = AsyncMock(spec=ExchangeClient)
    client.fetch_ohlcv.return_value = [
        [1_700_000_000_000, 0.08, 0.081, 0.079, 0.0805, 120000.0],
    ]
    client.fetch_balance.return_value = {
        "USDT": {"free": 123.45, "used": 0.0, "total": 123.45},
        "DOGE": {"free": 10.0, "used": 0.0, "total": 10.0},
    }
    client.amount_to_precision.return_value = "625"
    client.create_order.return_value = {
        "id": "8675309",
        "filled": 625.0,
        "average": 0.0801,
        "fee": {"cost": 0.05, "currency": "USDT"},
        "timestamp": 1_700_000_000_000,
    }
    return client


@pytest.fixture
def live_gateway(mock_exchange_client: AsyncMock) -> LiveGateway:
    return LiveGateway(mock_exchange_client, TradingSettings(symbol="DOGE/USDT", candle_limit=200))


class TestReads:
    """Candle and balance reads."""

    @pytest.mark.asyncio
    async def test_fetch_candles(
        self, live_gateway: LiveGateway, mock_exchange_client: AsyncMock
    ) -> None:
        candles = await live_gateway.fetch_candles()

        mock_exchange_client.fetch_ohlcv.assert_awaited_once_with(
            "DOGE/USDT", timeframe="15m", limit=200
        )
        assert candles[0].close == Decimal("0.0805")
        assert candles[0].timestamp_ms == 1_700_000_000_000

    @pytest.mark.asyncio
    async def test_free_quote_balance(self, live_gateway: LiveGateway) -> None:
        assert await live_gateway.fetch_free_balance() == Decimal("123.45")

    @pytest.mark.asyncio
    async def test_missing_quote_balance_is_zero(
        self, live_gateway: LiveGateway, mock_exchange_client: AsyncMock
    ) -> None:
        mock_exchange_client.fetch_balance.return_value = {"DOGE": {"free": 1.0}}
        assert await live_gateway.fetch_free_balance() == Decimal("0")

    @pytest.mark.asyncio
    async def test_read_errors_become_gateway_errors(
        self, live_gateway: LiveGateway, mock_exchange_client: AsyncMock
    ) -> None:
        mock_exchange_client.fetch_ohlcv.side_effect = ccxt.NetworkError("timeout")
        mock_exchange_client.fetch_balance.side_effect = ccxt.ExchangeNotAvailable("down")

        with pytest.raises(GatewayError):
            await live_gateway.fetch_candles()
        with pytest.raises(GatewayError):
            await live_gateway.fetch_free_balance()


class TestOrders:
    """Market order placement and result parsing."""

    @pytest.mark.asyncio
    async def test_buy_parses_result(
        self, live_gateway: LiveGateway, mock_exchange_client: AsyncMock
    ) -> None:
        result = await live_gateway.place_buy_order(Decimal("625.4"))

        mock_exchange_client.amount_to_precision.assert_called_once_with("DOGE/USDT", 625.4)
        mock_exchange_client.create_order.assert_awaited_once_with(
            symbol="DOGE/USDT", order_type="market", side="buy", amount=625.0
        )
        assert result.order_id == "8675309"
        assert result.side == OrderSide.BUY
        assert result.filled_qty == Decimal("625.0")
        assert result.filled_price == Decimal("0.0801")
        assert result.fee == Decimal("0.05")
        assert result.timestamp == 1_700_000_000.0
        assert not result.is_simulated

    @pytest.mark.asyncio
    async def test_sell_side(
        self, live_gateway: LiveGateway, mock_exchange_client: AsyncMock
    ) -> None:
        result = await live_gateway.place_sell_order(Decimal("625"))

        assert mock_exchange_client.create_order.await_args.kwargs["side"] == "sell"
        assert result.side == OrderSide.SELL

    @pytest.mark.asyncio
    async def test_rejection_becomes_order_error(
        self, live_gateway: LiveGateway, mock_exchange_client: AsyncMock
    ) -> None:
        mock_exchange_client.create_order.side_effect = ccxt.InsufficientFunds("no funds")

        with pytest.raises(OrderError, match="buy"):
            await live_gateway.place_buy_order(Decimal("625"))

    @pytest.mark.asyncio
    async def test_zero_fill_is_order_error(
        self, live_gateway: LiveGateway, mock_exchange_client: AsyncMock
    ) -> None:
        mock_exchange_client.create_order.return_value = {"id": "1", "filled": 0}

        with pytest.raises(OrderError, match="no fill"):
            await live_gateway.place_sell_order(Decimal("625"))
