"""Binance exchange client implementation via ccxt async.

Wraps ccxt.async_support.binance with proper initialization, market loading,
and async cleanup.
"""

import ccxt.async_support as ccxt_async

from trendbot.config import ExchangeSettings
from trendbot.exchange.client import ExchangeClient
from trendbot.logging import get_logger

logger = get_logger(__name__)


class BinanceClient(ExchangeClient):
    """Concrete Binance spot client using ccxt async."""

    def __init__(self, settings: ExchangeSettings) -> None:
        self._settings = settings

        config: dict = {
            "apiKey": settings.api_key.get_secret_value(),
            "secret": settings.api_secret.get_secret_value(),
            "enableRateLimit": True,
            "options": {
                "defaultType": "spot",
            },
        }

        self._exchange = ccxt_async.binance(config)
        if settings.sandbox:
            self._exchange.set_sandbox_mode(True)
        self._markets: dict = {}

    @property
    def exchange(self) -> ccxt_async.binance:
        """Access the underlying ccxt exchange instance."""
        return self._exchange

    async def connect(self) -> None:
        """Initialize connection by loading markets."""
        logger.info("connecting_to_binance", sandbox=self._settings.sandbox)
        self._markets = await self._exchange.load_markets()
        logger.info(
            "binance_connected",
            market_count=len(self._markets),
            sandbox=self._settings.sandbox,
        )

    async def close(self) -> None:
        """Clean up ccxt async resources. CRITICAL: must be called to avoid resource leaks."""
        logger.info("closing_binance_connection")
        await self._exchange.close()
        logger.info("binance_connection_closed")

    async def fetch_ohlcv(
        self,
        symbol: str,
        timeframe: str = "15m",
        limit: int = 500,
    ) -> list[list]:
        """Fetch OHLCV candles via ccxt."""
        return await self._exchange.fetch_ohlcv(symbol, timeframe, limit=limit)

    async def fetch_balance(self) -> dict:
        """Fetch account balance via ccxt."""
        return await self._exchange.fetch_balance()

    async def create_order(
        self,
        symbol: str,
        order_type: str,
        side: str,
        amount: float,
        price: float | None = None,
        params: dict | None = None,
    ) -> dict:
        """Place an order via ccxt."""
        logger.info(
            "creating_order",
            symbol=symbol,
            order_type=order_type,
            side=side,
            amount=amount,
        )
        return await self._exchange.create_order(
            symbol, order_type, side, amount, price, params=params or {}
        )

    def amount_to_precision(self, symbol: str, amount: float) -> str:
        """Round an amount to the symbol's lot precision (requires loaded markets)."""
        return self._exchange.amount_to_precision(symbol, amount)
