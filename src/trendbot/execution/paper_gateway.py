"""Paper trading gateway with simulated fills.

Reads real candles through the exchange client (public endpoint, no API
keys needed), then fills market orders instantly at the latest close with
configurable slippage and taker fee, tracking virtual quote and base
balances.
"""

import time
from decimal import Decimal
from uuid import uuid4

import ccxt

from trendbot.config import PaperSettings, TradingSettings
from trendbot.exceptions import GatewayError, OrderError
from trendbot.exchange.client import ExchangeClient
from trendbot.execution.gateway import TradingGateway
from trendbot.logging import get_logger
from trendbot.models import Candle, OrderResult, OrderSide

logger = get_logger(__name__)


class PaperGateway(TradingGateway):
    """Simulated gateway for paper trading. All results have is_simulated=True.

    Args:
        exchange_client: Used for candle data only.
        settings: Trading settings (symbol, timeframe, candle limit).
        paper_settings: Starting balance, slippage and fee.
    """

    def __init__(
        self,
        exchange_client: ExchangeClient,
        settings: TradingSettings,
        paper_settings: PaperSettings,
    ) -> None:
        self._exchange_client = exchange_client
        self._settings = settings
        self._paper = paper_settings
        self._quote_balance = paper_settings.initial_quote_balance
        self._base_balance = Decimal("0")
        self._last_price: Decimal | None = None

    @property
    def quote_balance(self) -> Decimal:
        return self._quote_balance

    @property
    def base_balance(self) -> Decimal:
        return self._base_balance

    def set_price(self, price: Decimal) -> None:
        """Override the simulated fill price (the latest close otherwise)."""
        self._last_price = price

    async def fetch_candles(self) -> list[Candle]:
        """Fetch real candles and remember the latest close as the fill price."""
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

        candles = [Candle.from_ccxt(row) for row in rows]
        if candles:
            self._last_price = candles[-1].close
        return candles

    async def fetch_free_balance(self) -> Decimal:
        return self._quote_balance

    async def place_buy_order(self, quantity: Decimal) -> OrderResult:
        """Simulate a market buy: price * (1 + slippage), fee on notional.

        Raises:
            OrderError: If no price is known yet, the quantity is not positive,
                or the virtual quote balance cannot cover cost plus fee.
        """
        price = self._require_price(quantity)
        fill_price = price * (Decimal("1") + self._paper.slippage)
        notional = quantity * fill_price
        fee = notional * self._paper.taker_fee

        if notional + fee > self._quote_balance:
            raise OrderError(
                f"Insufficient virtual {self._settings.quote_asset}: "
                f"need {notional + fee}, have {self._quote_balance}"
            )

        self._quote_balance -= notional + fee
        self._base_balance += quantity
        return self._fill(OrderSide.BUY, quantity, fill_price, fee)

    async def place_sell_order(self, quantity: Decimal) -> OrderResult:
        """Simulate a market sell: price * (1 - slippage), fee on proceeds.

        Raises:
            OrderError: If no price is known yet, the quantity is not positive,
                or it exceeds the virtual base holding.
        """
        price = self._require_price(quantity)
        if quantity > self._base_balance:
            raise OrderError(
                f"Insufficient virtual {self._settings.base_asset}: "
                f"selling {quantity}, have {self._base_balance}"
            )

        fill_price = price * (Decimal("1") - self._paper.slippage)
        proceeds = quantity * fill_price
        fee = proceeds * self._paper.taker_fee

        self._base_balance -= quantity
        self._quote_balance += proceeds - fee
        return self._fill(OrderSide.SELL, quantity, fill_price, fee)

    def _require_price(self, quantity: Decimal) -> Decimal:
        if quantity <= 0:
            raise OrderError(f"Order quantity must be positive, got {quantity}")
        if self._last_price is None:
            raise OrderError(f"No price available for {self._settings.symbol}")
        return self._last_price

    def _fill(
        self, side: OrderSide, quantity: Decimal, fill_price: Decimal, fee: Decimal
    ) -> OrderResult:
        order_id = f"paper_{uuid4().hex[:12]}"

        logger.info(
            "paper_order_filled",
            order_id=order_id,
            symbol=self._settings.symbol,
            side=side.value,
            quantity=str(quantity),
            fill_price=str(fill_price),
            fee=str(fee),
            quote_balance=str(self._quote_balance),
        )

        return OrderResult(
            order_id=order_id,
            symbol=self._settings.symbol,
            side=side,
            filled_qty=quantity,
            filled_price=fill_price,
            fee=fee,
            timestamp=time.time(),
            is_simulated=True,
        )
