"""Abstract market-data and order gateway.

Defines everything the trade manager needs from the outside world: the
candle series, the free quote balance, and market buy/sell orders for the
traded symbol. PaperGateway and LiveGateway both implement this ABC, so
trade management code is identical regardless of trading mode.
"""

from abc import ABC, abstractmethod
from decimal import Decimal

from trendbot.models import Candle, OrderResult


class TradingGateway(ABC):
    """Abstract base class for market-data and order gateways.

    The concrete gateway (paper or live) is injected at startup based on
    TradingSettings.mode.
    """

    @abstractmethod
    async def fetch_candles(self) -> list[Candle]:
        """Fetch the configured symbol/timeframe candle series, oldest first.

        Raises:
            GatewayError: On network or exchange failure.
        """
        ...

    @abstractmethod
    async def fetch_free_balance(self) -> Decimal:
        """Return the free quote-currency balance.

        Raises:
            GatewayError: On network or exchange failure.
        """
        ...

    @abstractmethod
    async def place_buy_order(self, quantity: Decimal) -> OrderResult:
        """Buy ``quantity`` base units at market.

        Raises:
            OrderError: If the order is rejected or nothing fills.
        """
        ...

    @abstractmethod
    async def place_sell_order(self, quantity: Decimal) -> OrderResult:
        """Sell ``quantity`` base units at market.

        Raises:
            OrderError: If the order is rejected or nothing fills.
        """
        ...
