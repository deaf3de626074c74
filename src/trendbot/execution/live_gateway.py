"""Live trading gateway via exchange client.

Delegates all reads and orders to the ExchangeClient (ccxt wrapper).
All monetary values are converted through Decimal(str(value)) to avoid
float precision loss. ccxt errors are translated into GatewayError (reads)
and OrderError (orders).
"""

import time
from decimal import Decimal

import ccxt

from trendbot.config import TradingSettings
from trendbot.exceptions import GatewayError, OrderError
from trendbot.exchange.client import ExchangeClient
from trendbot.execution.gateway import TradingGateway
from trendbot.logging import get_logger
from trendbot.models import Candle, OrderRequest, OrderResult, OrderSide, OrderType

logger = get_logger(__name__)


class LiveGateway(TradingGateway):
    """Real gateway that delegates to an exchange client.

    Args:
        exchange_client: The exchange client to read data and place orders through.
        settings: Trading settings (symbol, timeframe, candle limit).
    """

    def __init__(self, exchange_client: ExchangeClient, settings: TradingSettings) -> None:
        self._exchange_client = exchange_client
        self._settings = settings

    async def fetch_candles(self) -> list[Candle]:
        """Fetch OHLCV rows and convert them to Candles."""
        try:
            rows = await self._exchange_client.fetch_ohlcv(
                self._settings.symbol,
                timeframe=self._settings.timeframe,
                limit=self._settings.candle_limit,
            )
        except ccxt.BaseError as exc:
            raise GatewayError(
                f"Failed to fetch candles for {self._settings.symbol}: {exc}"
            ) from exc
        return [Candle.from_ccxt(row) for row in rows]

    async def fetch_free_balance(self) -> Decimal:
        """Free balance of the quote asset (e.g. USDT for DOGE/USDT)."""
        try:
            balance = await self._exchange_client.fetch_balance()
        except ccxt.BaseError as exc:
            raise GatewayError(f"Failed to fetch balance: {exc}") from exc

        asset = balance.get(self._settings.quote_asset) or {}
        free = asset.get("free")
        return Decimal(str(free)) if free else Decimal("0")

    async def place_buy_order(self, quantity: Decimal) -> OrderResult:
        return await self._place(OrderSide.BUY, quantity)

    async def place_sell_order(self, quantity: Decimal) -> OrderResult:
        return await self._place(OrderSide.SELL, quantity)

    async def _place(self, side: OrderSide, quantity: Decimal) -> OrderResult:
        """Place a market order and parse the ccxt result into an OrderResult.

        Raises:
            OrderError: If ccxt rejects the order or it reports no fill.
        """
        request = OrderRequest(
            symbol=self._settings.symbol,
            side=side,
            order_type=OrderType.MARKET,
            quantity=quantity,
        )
        try:
            amount = self._exchange_client.amount_to_precision(
                request.symbol, float(request.quantity)
            )
            result = await self._exchange_client.create_order(
                symbol=request.symbol,
                order_type=request.order_type.value,
                side=request.side.value,
                amount=float(amount),
            )
        except ccxt.BaseError as exc:
            raise OrderError(
                f"Failed to place {side.value} order for {quantity} "
                f"{request.symbol}: {exc}"
            ) from exc

        # Parse ccxt order result -- all values through Decimal(str()) to avoid float
        order_id = str(result.get("id", ""))
        filled_qty = Decimal(str(result.get("filled") or 0))
        if filled_qty <= 0:
            raise OrderError(
                f"{side.value} order {order_id} for {request.symbol} reported no fill"
            )

        average_price = result.get("average") or result.get("price")
        filled_price = Decimal(str(average_price)) if average_price else Decimal("0")

        fee_info = result.get("fee") or {}
        fee_cost = fee_info.get("cost") or 0
        fee = Decimal(str(fee_cost))

        timestamp = result.get("timestamp")
        ts = float(timestamp) / 1000.0 if timestamp else time.time()

        logger.info(
            "live_order_filled",
            order_id=order_id,
            symbol=request.symbol,
            side=side.value,
            quantity=str(filled_qty),
            fill_price=str(filled_price),
            fee=str(fee),
        )

        return OrderResult(
            order_id=order_id,
            symbol=request.symbol,
            side=side,
            filled_qty=filled_qty,
            filled_price=filled_price,
            fee=fee,
            timestamp=ts,
            is_simulated=False,
        )
