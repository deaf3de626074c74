"""Position sizing and exit-level construction.

Size scales with signal strength and shrinks with the loss streak, but is
never larger than the base allocation (balance * trade_amount).

CRITICAL: All monetary values use Decimal. Never use float.
"""

from decimal import Decimal
from uuid import uuid4

from trendbot.config import RiskSettings, TradingSettings
from trendbot.models import Position


class PositionSizer:
    """Calculates entry size and the stop / take-profit levels of new positions.

    Args:
        trading_settings: Provides ``trade_amount`` (fraction of free balance).
        risk_settings: Stop percentages, take-profit levels, loss size step.
    """

    def __init__(
        self, trading_settings: TradingSettings, risk_settings: RiskSettings
    ) -> None:
        self._trading = trading_settings
        self._risk = risk_settings

    def calculate_position_size(
        self,
        balance: Decimal,
        signal_strength: Decimal,
        consecutive_losses: int = 0,
    ) -> Decimal:
        """Quote-currency notional to commit to a new position.

        Formula:
            base = balance * trade_amount
            size = base * (1 - consecutive_losses * loss_size_step) * signal_strength
        clamped to [0, base].

        Args:
            balance: Free quote balance.
            signal_strength: Entry signal strength (0-1).
            consecutive_losses: Current loss streak.

        Returns:
            Notional in quote currency.
        """
        base_size = balance * self._trading.trade_amount
        loss_factor = Decimal("1") - Decimal(consecutive_losses) * self._risk.loss_size_step
        adjusted = base_size * loss_factor * signal_strength
        return max(Decimal("0"), min(adjusted, base_size))

    def calculate_take_profit_levels(
        self, entry_price: Decimal
    ) -> tuple[Decimal, Decimal, Decimal]:
        """Three ascending take-profit prices above ``entry_price``."""
        first, second, third = (
            entry_price * (Decimal("1") + level) for level in self._risk.take_profit_levels
        )
        return first, second, third

    def calculate_stops(self, entry_price: Decimal) -> tuple[Decimal, Decimal]:
        """Return (trailing_stop, initial_stop) for a fresh entry."""
        trailing = entry_price * (Decimal("1") - self._risk.trailing_stop)
        initial = entry_price * (Decimal("1") - self._risk.initial_stop)
        return trailing, initial

    def trailing_stop_for(self, price: Decimal) -> Decimal:
        """Trailing stop candidate for the current price."""
        return price * (Decimal("1") - self._risk.trailing_stop)

    def build_position(
        self, entry_price: Decimal, quantity: Decimal, opened_at: float
    ) -> Position:
        """Create a new Position with all exit levels anchored at ``entry_price``.

        Args:
            entry_price: Price the exit levels are computed from.
            quantity: Filled base quantity.
            opened_at: Entry time, epoch seconds.
        """
        trailing, initial = self.calculate_stops(entry_price)
        return Position(
            id=uuid4().hex[:16],
            entry_price=entry_price,
            quantity=quantity,
            trailing_stop=trailing,
            initial_stop=initial,
            take_profits=self.calculate_take_profit_levels(entry_price),
            filled=0,
            opened_at=opened_at,
        )
