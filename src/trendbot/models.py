"""Shared data models for the trend trading bot.

CRITICAL: All monetary values use Decimal. Never use float for prices, quantities, or PnL.
Floats coming from ccxt are converted with Decimal(str(value)) at the gateway boundary.
"""

import time
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum


class OrderSide(str, Enum):
    """Order direction."""

    BUY = "buy"
    SELL = "sell"


class OrderType(str, Enum):
    """Order type."""

    MARKET = "market"


class ExitReason(str, Enum):
    """Why some or all of a position was sold."""

    STOP_LOSS = "stop_loss"
    TAKE_PROFIT = "take_profit"
    REVERSAL = "reversal"


@dataclass(frozen=True)
class Candle:
    """A single OHLCV observation. Series are ordered oldest-first."""

    timestamp_ms: int
    open: Decimal
    high: Decimal
    low: Decimal
    close: Decimal
    volume: Decimal

    @classmethod
    def from_ccxt(cls, row: list) -> "Candle":
        """Build a candle from a ccxt OHLCV row ``[ts, open, high, low, close, volume]``."""
        ts, o, h, l, c, v = row[:6]
        return cls(
            timestamp_ms=int(ts),
            open=Decimal(str(o)),
            high=Decimal(str(h)),
            low=Decimal(str(l)),
            close=Decimal(str(c)),
            volume=Decimal(str(v)),
        )


@dataclass
class OrderRequest:
    """Request to place an order."""

    symbol: str
    side: OrderSide
    order_type: OrderType
    quantity: Decimal


@dataclass
class OrderResult:
    """Result of an executed order."""

    order_id: str
    symbol: str
    side: OrderSide
    filled_qty: Decimal
    filled_price: Decimal
    fee: Decimal
    timestamp: float
    is_simulated: bool = False


@dataclass
class Position:
    """An open long position, from entry until the last unit is sold.

    ``trailing_stop`` only ratchets up, ``initial_stop`` and ``take_profits``
    are fixed at entry, and ``filled`` counts take-profit levels already hit.
    Stops are not recomputed when a take-profit partially closes the position.
    """

    id: str
    entry_price: Decimal
    quantity: Decimal
    trailing_stop: Decimal
    initial_stop: Decimal
    take_profits: tuple[Decimal, Decimal, Decimal]
    filled: int = 0
    opened_at: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        levels = self.take_profits
        if not (
            self.initial_stop < self.entry_price < levels[0] < levels[1] < levels[2]
        ):
            raise ValueError(
                f"Position levels out of order: initial_stop={self.initial_stop} "
                f"entry={self.entry_price} take_profits={list(levels)}"
            )
        if self.trailing_stop >= self.entry_price:
            raise ValueError(
                f"trailing_stop {self.trailing_stop} must start below "
                f"entry {self.entry_price}"
            )

    @property
    def remaining_levels(self) -> int:
        return len(self.take_profits) - self.filled

    def raise_trailing_stop(self, candidate: Decimal) -> bool:
        """Move the trailing stop up to ``candidate`` if it is higher.

        Returns:
            True if the stop moved.
        """
        if candidate > self.trailing_stop:
            self.trailing_stop = candidate
            return True
        return False

    def is_stopped_out(self, price: Decimal) -> bool:
        return price <= self.trailing_stop or price <= self.initial_stop

    def next_take_profit_index(self, price: Decimal) -> int | None:
        """Return the first un-filled level index reached by ``price``, if any."""
        for index in range(self.filled, len(self.take_profits)):
            if price >= self.take_profits[index]:
                return index
        return None


@dataclass
class RiskState:
    """Account-level risk counters. Process lifetime only, never persisted."""

    daily_pnl: Decimal = Decimal("0")
    consecutive_losses: int = 0
    last_trade_time: float = 0.0  # epoch seconds, 0 = never traded
    daily_trades: int = 0
    trading_day: str = ""  # UTC date (YYYY-MM-DD) the daily counters belong to
