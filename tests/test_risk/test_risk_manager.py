"""Tests for the risk manager: entry limits, loss streak, cooldown, daily reset."""

from decimal import Decimal

import pytest

from trendbot.config import RiskSettings
from trendbot.models import Position
from trendbot.risk.manager import RiskManager, utc_trading_day

# 2023-11-14 22:13:20 UTC
T0 = 1_700_000_000.0


class FakeClock:
    """Settable epoch clock."""

    def __init__(self, now: float = T0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def _position(pid: str = "p1") -> Position:
    return Position(
        id=pid,
        entry_price=Decimal("100"),
        quantity=Decimal("1"),
        trailing_stop=Decimal("99"),
        initial_stop=Decimal("98.5"),
        take_profits=(Decimal("102"), Decimal("103"), Decimal("105")),
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def risk_manager(clock: FakeClock) -> RiskManager:
    return RiskManager(RiskSettings(), clock=clock)


class TestCheckCanOpen:
    """Tests for the entry permission check."""

    def test_allowed_when_clean(self, risk_manager: RiskManager) -> None:
        assert risk_manager.check_can_open([]) == (True, "")

    def test_daily_loss_beyond_limit_blocks(self, risk_manager: RiskManager) -> None:
        risk_manager.state.daily_pnl = Decimal("-0.11")
        allowed, reason = risk_manager.check_can_open([])

        assert not allowed
        assert "Daily loss limit" in reason

    def test_daily_loss_at_limit_blocks(self, risk_manager: RiskManager) -> None:
        risk_manager.state.daily_pnl = Decimal("-0.10")
        assert risk_manager.check_can_open([])[0] is False

    def test_max_positions_blocks(self, risk_manager: RiskManager) -> None:
        positions = [_position("a"), _position("b"), _position("c")]
        allowed, reason = risk_manager.check_can_open(positions)

        assert not allowed
        assert "At max positions" in reason

    def test_loss_streak_blocks(self, risk_manager: RiskManager) -> None:
        risk_manager.state.consecutive_losses = 3
        allowed, reason = risk_manager.check_can_open([])

        assert not allowed
        assert "Loss streak" in reason

    def test_loss_streak_below_limit_allowed(self, risk_manager: RiskManager) -> None:
        risk_manager.state.consecutive_losses = 2
        assert risk_manager.check_can_open([])[0] is True


class TestRecordRealizedPnl:
    """Tests for daily PnL and the consecutive-loss streak."""

    def test_loss_extends_streak(self, risk_manager: RiskManager) -> None:
        risk_manager.record_realized_pnl(Decimal("-2"))
        risk_manager.record_realized_pnl(Decimal("-1"))

        assert risk_manager.state.daily_pnl == Decimal("-3")
        assert risk_manager.state.consecutive_losses == 2

    def test_win_resets_streak(self, risk_manager: RiskManager) -> None:
        risk_manager.state.consecutive_losses = 2
        risk_manager.record_realized_pnl(Decimal("0.5"))

        assert risk_manager.state.consecutive_losses == 0
        assert risk_manager.state.daily_pnl == Decimal("0.5")

    def test_break_even_resets_streak(self, risk_manager: RiskManager) -> None:
        risk_manager.state.consecutive_losses = 1
        risk_manager.record_realized_pnl(Decimal("0"))
        assert risk_manager.state.consecutive_losses == 0


class TestCooldown:
    """Tests for the post-trade cooldown."""

    def test_no_cooldown_before_first_trade(self, risk_manager: RiskManager) -> None:
        assert not risk_manager.in_cooldown()

    def test_cooldown_after_trade(self, risk_manager: RiskManager, clock: FakeClock) -> None:
        risk_manager.record_trade()

        assert risk_manager.state.daily_trades == 1
        assert risk_manager.state.last_trade_time == T0
        assert risk_manager.in_cooldown()

        clock.now = T0 + 4.9
        assert risk_manager.in_cooldown()
        clock.now = T0 + 5.0
        assert not risk_manager.in_cooldown()

    def test_exit_restarts_cooldown(self, risk_manager: RiskManager) -> None:
        risk_manager.mark_exit(T0 + 100)

        assert risk_manager.in_cooldown(T0 + 101)
        assert risk_manager.state.daily_trades == 0


class TestDailyReset:
    """Tests for the UTC day rollover."""

    def test_utc_trading_day(self) -> None:
        assert utc_trading_day(T0) == "2023-11-14"

    def test_same_day_no_reset(self, risk_manager: RiskManager) -> None:
        risk_manager.record_realized_pnl(Decimal("-1"))
        assert risk_manager.roll_day(T0 + 60) is False
        assert risk_manager.state.daily_pnl == Decimal("-1")

    def test_next_day_resets_daily_counters(
        self, risk_manager: RiskManager, clock: FakeClock
    ) -> None:
        risk_manager.record_trade()
        risk_manager.record_realized_pnl(Decimal("-1"))

        clock.now = T0 + 86_400
        assert risk_manager.roll_day() is True

        state = risk_manager.state
        assert state.daily_pnl == Decimal("0")
        assert state.daily_trades == 0
        assert state.trading_day == "2023-11-15"
        assert state.consecutive_losses == 1
        assert state.last_trade_time == T0
