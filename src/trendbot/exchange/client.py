"""Abstract exchange client interface.

Defines the contract for all exchange implementations.
Gateway code depends only on this interface,
keeping Binance-specific details isolated in the concrete implementation.
"""

from abc import ABC, abstractmethod


class ExchangeClient(ABC):
    """Abstract base class for exchange API clients."""

    @abstractmethod
    async def connect(self) -> None:
        """Initialize connection and load markets."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Clean up resources (CRITICAL for ccxt async)."""
        ...

    @abstractmethod
    async def fetch_ohlcv(
        self,
        symbol: str,
        timeframe: str = "15m",
        limit: int = 500,
    ) -> list[list]:
        """Fetch OHLCV candle data.

        Returns list of [timestamp_ms, open, high, low, close, volume],
        oldest first.
        """
        ...

    @abstractmethod
    async def fetch_balance(self) -> dict:
        """Fetch account balance (ccxt unified structure)."""
        ...

    @abstractmethod
    async def create_order(
        self,
        symbol: str,
        order_type: str,
        side: str,
        amount: float,
        price: float | None = None,
        params: dict | None = None,
    ) -> dict:
        """Place an order on the exchange."""
        ...

    @abstractmethod
    def amount_to_precision(self, symbol: str, amount: float) -> str:
        """Round an order amount to the market's lot precision."""
        ...
