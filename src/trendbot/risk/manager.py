"""Account-level risk bookkeeping for the trade manager.

Owns the RiskState: realized daily PnL, the consecutive-loss streak, the
trade cooldown and the daily trade count. Entry is blocked when any of the
daily loss cap, the open-position cap or the loss-streak cap is hit.

State is held in memory only; a restart starts from a clean RiskState.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from decimal import Decimal
from typing import TYPE_CHECKING

from trendbot.config import RiskSettings
from trendbot.logging import get_logger
from trendbot.models import RiskState

if TYPE_CHECKING:
    from trendbot.models import Position

logger = get_logger(__name__)


def utc_trading_day(timestamp: float) -> str:
    """UTC calendar date (YYYY-MM-DD) for an epoch timestamp."""
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).date().isoformat()


class RiskManager:
    """Pre-trade checks and realized-PnL bookkeeping.

    Args:
        settings: Risk settings containing all thresholds.
        clock: Returns the current epoch time in seconds. Injected for tests.
    """

    def __init__(
        self,
        settings: RiskSettings,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._settings = settings
        self._clock = clock
        self._state = RiskState(trading_day=utc_trading_day(clock()))

    @property
    def state(self) -> RiskState:
        return self._state

    def in_cooldown(self, now: float | None = None) -> bool:
        """True while the cooldown since the last trade has not elapsed."""
        now = self._clock() if now is None else now
        return now - self._state.last_trade_time < self._settings.cooldown_seconds

    def check_can_open(self, open_positions: Sequence[Position]) -> tuple[bool, str]:
        """Check if a new position can be opened.

        All three limits must hold: daily PnL above the loss cap, fewer open
        positions than the maximum, and a loss streak below the cap.

        Args:
            open_positions: Currently open positions.

        Returns:
            Tuple of (allowed, reason). If allowed is True, reason is "".
        """
        if self._state.daily_pnl <= -self._settings.max_daily_loss:
            return False, (
                f"Daily loss limit reached: {self._state.daily_pnl} "
                f"<= -{self._settings.max_daily_loss}"
            )

        if len(open_positions) >= self._settings.max_positions:
            return False, f"At max positions: {self._settings.max_positions}"

        if self._state.consecutive_losses >= self._settings.max_consecutive_losses:
            return False, (
                f"Loss streak limit reached: {self._state.consecutive_losses} "
                f"consecutive losses"
            )

        return True, ""

    def record_realized_pnl(self, pnl: Decimal) -> None:
        """Fold a realized PnL event into the daily total and the loss streak.

        A losing event extends the streak; a break-even or winning one resets it.
        """
        self._state.daily_pnl += pnl
        if pnl < 0:
            self._state.consecutive_losses += 1
        else:
            self._state.consecutive_losses = 0

        logger.info(
            "realized_pnl_recorded",
            pnl=str(pnl),
            daily_pnl=str(self._state.daily_pnl),
            consecutive_losses=self._state.consecutive_losses,
        )

    def record_trade(self, now: float | None = None) -> None:
        """Register an entry: restarts the cooldown and counts the trade."""
        self._state.last_trade_time = self._clock() if now is None else now
        self._state.daily_trades += 1

    def mark_exit(self, now: float | None = None) -> None:
        """Register a full exit: restarts the cooldown."""
        self._state.last_trade_time = self._clock() if now is None else now

    def reset_daily(self, trading_day: str) -> None:
        """Start a new accounting day.

        Daily PnL and the daily trade count reset; the loss streak and the
        cooldown carry over.
        """
        logger.info(
            "daily_risk_reset",
            previous_day=self._state.trading_day,
            trading_day=trading_day,
            daily_pnl=str(self._state.daily_pnl),
            daily_trades=self._state.daily_trades,
        )
        self._state.daily_pnl = Decimal("0")
        self._state.daily_trades = 0
        self._state.trading_day = trading_day

    def roll_day(self, now: float | None = None) -> bool:
        """Reset the daily counters if the UTC date has changed.

        Returns:
            True if a reset happened.
        """
        today = utc_trading_day(self._clock() if now is None else now)
        if today == self._state.trading_day:
            return False
        self.reset_daily(today)
        return True
