"""Position lifecycle and per-tick risk management for a single symbol.

Tick flow (evaluate):
1. Skip while the post-trade cooldown is running.
2. Fetch candles, analyze, skip when the latest bar's spread is too wide.
3. With open positions: manage them. When flat and risk allows: evaluate entry.

Position management, per position and independent of the others:
  a. Ratchet the trailing stop up to price * (1 - trailing_stop).
  b. Price at or below the trailing or initial stop: sell everything.
  c. Otherwise, the next take-profit level reached: sell an equal share of
     the remainder across the levels still open (the last level sells all).
  d. Otherwise, a bearish EMA crossover after at least one take-profit:
     sell everything.

An OrderError never mutates a position or the risk state; the same checks
run again on the next tick.

Positions live in memory only. A restart loses them while the exchange
balance remains.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from decimal import ROUND_DOWN, Decimal
from enum import Enum

from trendbot.config import FilterSettings
from trendbot.exceptions import OrderError
from trendbot.execution.gateway import TradingGateway
from trendbot.logging import get_logger
from trendbot.models import ExitReason, Position, RiskState
from trendbot.position.sizing import PositionSizer
from trendbot.risk.manager import RiskManager
from trendbot.signals.aggregator import SignalAggregator
from trendbot.signals.models import AnalysisSnapshot

logger = get_logger(__name__)

#: Order quantities are rounded down to 8 decimal places before submission.
_QTY_QUANTIZE = Decimal("0.00000001")


class TickOutcome(str, Enum):
    """What a single evaluate() call ended up doing."""

    COOLDOWN = "cooldown"
    SPREAD_FILTERED = "spread_filtered"
    MANAGED = "managed"
    ENTRY_EVALUATED = "entry_evaluated"
    BLOCKED = "blocked"


class TradeManager:
    """Opens, scales out of and closes positions for one traded symbol.

    Not safe for concurrent use: the orchestrator guarantees at most one
    evaluate() in flight.

    Args:
        filter_settings: Spread limit (entry threshold lives in the aggregator).
        gateway: Market data and order gateway (paper or live).
        aggregator: Turns candles into an AnalysisSnapshot and entry strength.
        risk_manager: Owns the RiskState and the entry permission checks.
        position_sizer: Entry size and exit levels.
        clock: Returns the current epoch time in seconds. Injected for tests.
    """

    def __init__(
        self,
        filter_settings: FilterSettings,
        gateway: TradingGateway,
        aggregator: SignalAggregator,
        risk_manager: RiskManager,
        position_sizer: PositionSizer,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._filters = filter_settings
        self._gateway = gateway
        self._aggregator = aggregator
        self._risk = risk_manager
        self._sizer = position_sizer
        self._clock = clock
        self._positions: list[Position] = []

    @property
    def open_positions(self) -> list[Position]:
        """Snapshot of the currently open positions."""
        return list(self._positions)

    @property
    def risk_state(self) -> RiskState:
        return self._risk.state

    async def evaluate(self) -> TickOutcome:
        """Run one tick of the trading decision.

        Raises:
            GatewayError: If candles (or the balance during entry) cannot be read.
            InsufficientDataError: If the candle series is too short.
            InvalidMarketDataError: If an indicator is undefined for the data.
        """
        if self._risk.in_cooldown(self._clock()):
            logger.debug("cooldown_active")
            return TickOutcome.COOLDOWN

        candles = await self._gateway.fetch_candles()
        snapshot = self._aggregator.analyze(candles)

        if snapshot.spread > self._filters.spread_limit:
            logger.info(
                "spread_too_high",
                spread=str(snapshot.spread),
                limit=str(self._filters.spread_limit),
            )
            return TickOutcome.SPREAD_FILTERED

        if self._positions:
            await self.manage_positions(snapshot)
            return TickOutcome.MANAGED

        allowed, reason = self._risk.check_can_open(self._positions)
        if not allowed:
            logger.info("entry_blocked", reason=reason)
            return TickOutcome.BLOCKED

        await self.evaluate_entry(snapshot)
        return TickOutcome.ENTRY_EVALUATED

    async def evaluate_entry(self, snapshot: AnalysisSnapshot) -> Position | None:
        """Open a position when the bullish signal strength is high enough.

        Order of gateway calls: balance -> size -> buy.

        Returns:
            The new Position, or None if no position was opened.

        Raises:
            GatewayError: If the balance read fails (nothing is mutated).
        """
        signal = self._aggregator.evaluate_entry(snapshot)
        if not signal.passes:
            logger.debug(
                "entry_signal_too_weak",
                strength=str(signal.strength),
                bullish=signal.bullish_count,
                total=signal.total,
                threshold=str(self._aggregator.entry_threshold),
            )
            return None

        balance = await self._gateway.fetch_free_balance()
        size = self._sizer.calculate_position_size(
            balance, signal.strength, self._risk.state.consecutive_losses
        )
        quantity = (size / snapshot.current_price).quantize(_QTY_QUANTIZE, rounding=ROUND_DOWN)
        if quantity <= 0:
            logger.warning(
                "entry_size_zero",
                balance=str(balance),
                size=str(size),
                price=str(snapshot.current_price),
            )
            return None

        try:
            result = await self._gateway.place_buy_order(quantity)
        except OrderError as exc:
            logger.error("open_position_failed", quantity=str(quantity), error=str(exc))
            return None

        now = self._clock()
        position = self._sizer.build_position(snapshot.current_price, result.filled_qty, now)
        self._positions.append(position)
        self._risk.record_trade(now)

        logger.info(
            "position_opened",
            position_id=position.id,
            entry_price=str(position.entry_price),
            quantity=str(position.quantity),
            notional=str(size),
            signal_strength=str(signal.strength),
            trailing_stop=str(position.trailing_stop),
            initial_stop=str(position.initial_stop),
            take_profits=[str(level) for level in position.take_profits],
        )
        return position

    async def manage_positions(self, snapshot: AnalysisSnapshot) -> None:
        """Apply stop, take-profit and reversal rules to every open position."""
        for position in list(self._positions):
            await self._manage_position(position, snapshot)

    async def _manage_position(self, position: Position, snapshot: AnalysisSnapshot) -> None:
        price = snapshot.current_price

        if position.raise_trailing_stop(self._sizer.trailing_stop_for(price)):
            logger.debug(
                "trailing_stop_raised",
                position_id=position.id,
                trailing_stop=str(position.trailing_stop),
            )

        if position.is_stopped_out(price):
            await self.close_position(position, ExitReason.STOP_LOSS, price)
            return

        if position.next_take_profit_index(price) is not None:
            await self.partial_close(position, price)
            return

        if snapshot.ema_signal.bearish and position.filled > 0:
            await self.close_position(position, ExitReason.REVERSAL, price)

    async def partial_close(self, position: Position, price: Decimal) -> bool:
        """Sell ``1 / remaining_levels`` of the remaining quantity for the next level.

        The final level sells the whole remainder, which closes the position.

        Returns:
            True if the sell filled.
        """
        level_index = position.filled
        remaining_levels = position.remaining_levels
        if remaining_levels == 1:
            quantity = position.quantity
        else:
            quantity = position.quantity / Decimal(remaining_levels)

        try:
            result = await self._gateway.place_sell_order(quantity)
        except OrderError as exc:
            logger.error(
                "partial_close_failed",
                position_id=position.id,
                level=level_index + 1,
                quantity=str(quantity),
                error=str(exc),
            )
            return False

        closed = min(result.filled_qty, position.quantity)
        pnl = (price - position.entry_price) * closed
        position.quantity -= closed
        position.filled += 1
        self._risk.record_realized_pnl(pnl)

        logger.info(
            "take_profit_hit",
            position_id=position.id,
            level=position.filled,
            level_price=str(position.take_profits[level_index]),
            price=str(price),
            closed_quantity=str(closed),
            remaining_quantity=str(position.quantity),
            pnl=str(pnl),
        )

        if position.quantity <= 0:
            self._remove(position)
            self._risk.mark_exit(self._clock())
            logger.info(
                "position_closed",
                position_id=position.id,
                reason=ExitReason.TAKE_PROFIT.value,
            )
        return True

    async def close_position(
        self, position: Position, reason: ExitReason, price: Decimal
    ) -> bool:
        """Sell the remaining quantity and drop the position once nothing is left.

        An underfilled sell keeps the position with the unsold remainder.

        Returns:
            True if the position was fully closed and removed.
        """
        quantity = position.quantity
        try:
            result = await self._gateway.place_sell_order(quantity)
        except OrderError as exc:
            logger.error(
                "close_position_failed",
                position_id=position.id,
                reason=reason.value,
                quantity=str(quantity),
                error=str(exc),
            )
            return False

        closed = min(result.filled_qty, quantity)
        pnl = (price - position.entry_price) * closed
        position.quantity -= closed
        self._risk.record_realized_pnl(pnl)

        if position.quantity > 0:
            # Remainder stays tracked; the next tick retries the exit
            logger.warning(
                "close_underfilled",
                position_id=position.id,
                reason=reason.value,
                requested=str(quantity),
                filled=str(closed),
                remaining_quantity=str(position.quantity),
                pnl=str(pnl),
            )
            return False

        self._remove(position)
        self._risk.mark_exit(self._clock())

        logger.info(
            "position_closed",
            position_id=position.id,
            reason=reason.value,
            price=str(price),
            entry_price=str(position.entry_price),
            closed_quantity=str(closed),
            pnl=str(pnl),
        )
        return True

    def _remove(self, position: Position) -> None:
        self._positions = [p for p in self._positions if p is not position]
