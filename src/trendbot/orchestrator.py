"""Main bot orchestrator -- drives the trade manager on a fixed interval.

Each tick:
  1. ROLL: Reset daily risk counters when the UTC date changed
  2. EVALUATE: Run TradeManager.evaluate() (fetch, analyze, manage/enter)
  3. LOG: Position status

At most one tick is ever in flight. The trade manager mutates its positions
and risk state without locking, so a tick that fires while the previous one
is still waiting on the exchange is dropped rather than run concurrently.
Errors from a tick are logged and never stop the loop.
"""

from __future__ import annotations

import asyncio

import structlog

from trendbot.config import AppSettings
from trendbot.exceptions import BotError
from trendbot.logging import get_logger
from trendbot.position.manager import TradeManager
from trendbot.risk.manager import RiskManager

logger = get_logger(__name__)


class Orchestrator:
    """Fixed-interval evaluation loop around the trade manager.

    Args:
        settings: Application-wide settings.
        trade_manager: Position and risk manager evaluated every tick.
        risk_manager: The trade manager's risk manager (for daily resets).
    """

    def __init__(
        self,
        settings: AppSettings,
        trade_manager: TradeManager,
        risk_manager: RiskManager,
    ) -> None:
        self._settings = settings
        self._trade_manager = trade_manager
        self._risk_manager = risk_manager
        self._running = False
        self._cycle_lock = asyncio.Lock()
        self._tick_count = 0
        self._dropped_ticks = 0
        self._failed_ticks = 0

    async def start(self) -> None:
        """Run the tick loop until stop() is called."""
        logger.info(
            "orchestrator_starting",
            mode=self._settings.trading.mode,
            symbol=self._settings.trading.symbol,
            timeframe=self._settings.trading.timeframe,
            interval=self._settings.trading.tick_interval_seconds,
        )
        self._running = True
        try:
            await self._run_loop()
        finally:
            logger.info("orchestrator_stopped", **self.get_status())

    async def stop(self) -> None:
        """Stop scheduling new ticks.

        Open positions are left as they are: there is no persistence, so a
        restart stops tracking them even though the exchange still holds them.
        """
        logger.info(
            "orchestrator_stopping_gracefully",
            open_positions=len(self._trade_manager.open_positions),
        )
        self._running = False

    async def _run_loop(self) -> None:
        """Schedule ticks on a fixed cadence.

        Deadlines advance by whole intervals; intervals missed while a slow
        tick was running are skipped instead of replayed back to back.
        """
        interval = self._settings.trading.tick_interval_seconds
        loop = asyncio.get_running_loop()
        next_tick = loop.time()
        while self._running:
            try:
                await self.tick()
                next_tick += interval
                now = loop.time()
                if next_tick < now:
                    missed = int((now - next_tick) // interval) + 1
                    self._dropped_ticks += missed
                    logger.warning("ticks_skipped_slow_cycle", missed=missed)
                    next_tick += missed * interval
                await asyncio.sleep(next_tick - now)
            except asyncio.CancelledError:
                break

    async def tick(self) -> bool:
        """Run one evaluation unless another is still in flight.

        Returns:
            True if the tick ran (successfully or not), False if dropped.
        """
        if self._cycle_lock.locked():
            self._dropped_ticks += 1
            logger.warning("tick_dropped", reason="previous_tick_in_flight")
            return False

        async with self._cycle_lock:
            self._tick_count += 1
            structlog.contextvars.bind_contextvars(tick=self._tick_count)
            try:
                self._risk_manager.roll_day()
                outcome = await self._trade_manager.evaluate()
                logger.debug("tick_complete", outcome=outcome.value)
                self._log_position_status()
            except BotError as e:
                self._failed_ticks += 1
                logger.error("tick_aborted", error_type=type(e).__name__, error=str(e))
            except Exception as e:
                self._failed_ticks += 1
                logger.error("orchestrator_cycle_error", error=str(e), exc_info=True)
            finally:
                structlog.contextvars.unbind_contextvars("tick")
        return True

    def _log_position_status(self) -> None:
        """Log stop and take-profit progress for all open positions."""
        for position in self._trade_manager.open_positions:
            logger.info(
                "position_status",
                position_id=position.id,
                entry_price=str(position.entry_price),
                quantity=str(position.quantity),
                trailing_stop=str(position.trailing_stop),
                take_profits_filled=position.filled,
            )

    def get_status(self) -> dict:
        """Return a summary of loop and risk state."""
        state = self._trade_manager.risk_state
        return {
            "running": self._running,
            "ticks": self._tick_count,
            "dropped_ticks": self._dropped_ticks,
            "failed_ticks": self._failed_ticks,
            "open_positions": len(self._trade_manager.open_positions),
            "daily_pnl": str(state.daily_pnl),
            "daily_trades": state.daily_trades,
            "consecutive_losses": state.consecutive_losses,
        }

    @property
    def is_running(self) -> bool:
        """Check if the orchestrator is currently running."""
        return self._running
