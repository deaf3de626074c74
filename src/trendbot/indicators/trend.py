"""Trend strength: share of rising closes in the recent window."""

from collections.abc import Sequence
from decimal import Decimal

from trendbot.indicators.base import require_length


def compute_trend_strength(closes: Sequence[Decimal], period: int = 20) -> Decimal:
    """Fraction of positive period-over-period returns over the last ``period`` closes.

    With positive prices a return is positive exactly when the close rose,
    so flat bars count as non-positive.

    Args:
        closes: Close prices ordered oldest-first.
        period: Number of most recent closes to consider (yields
            ``period - 1`` returns).

    Returns:
        Decimal in [0, 1].

    Raises:
        InsufficientDataError: If fewer than ``period`` closes are given.
    """
    require_length(closes, max(period, 2), "trend strength")

    window = closes[-period:]
    rising = sum(1 for prev, curr in zip(window, window[1:]) if curr > prev)
    return Decimal(rising) / Decimal(len(window) - 1)
