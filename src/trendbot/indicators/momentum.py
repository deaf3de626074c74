"""Relative Strength Index (Wilder smoothing).

CRITICAL: All computations use Decimal. Never use float.
"""

from collections.abc import Sequence
from decimal import Decimal

from trendbot.indicators.base import QUANTIZE, require_length

_HUNDRED = Decimal("100")
_NEUTRAL = Decimal("50")


def _rsi_value(avg_gain: Decimal, avg_loss: Decimal) -> Decimal:
    if avg_loss == 0:
        # No losses: saturated at 100 if price rose, neutral if it went nowhere
        return _HUNDRED if avg_gain > 0 else _NEUTRAL
    rs = avg_gain / avg_loss
    return (_HUNDRED - _HUNDRED / (Decimal("1") + rs)).quantize(QUANTIZE)


def compute_rsi(closes: Sequence[Decimal], period: int = 14) -> list[Decimal]:
    """Compute the RSI series over ``closes``.

    The first average gain/loss is the simple mean of the first ``period``
    deltas; each later value uses Wilder's smoothing:
        avg_t = (avg_{t-1} * (period - 1) + x_t) / period

    Args:
        closes: Close prices ordered oldest-first.
        period: RSI lookback.

    Returns:
        ``len(closes) - period`` RSI values in [0, 100]; the first one
        corresponds to ``closes[period]``.

    Raises:
        InsufficientDataError: If fewer than ``period + 1`` closes are given.
    """
    require_length(closes, period + 1, "RSI")

    deltas = [b - a for a, b in zip(closes, closes[1:])]
    gains = [d if d > 0 else Decimal("0") for d in deltas]
    losses = [-d if d < 0 else Decimal("0") for d in deltas]

    p = Decimal(period)
    avg_gain = (sum(gains[:period], Decimal("0")) / p).quantize(QUANTIZE)
    avg_loss = (sum(losses[:period], Decimal("0")) / p).quantize(QUANTIZE)
    rsi = [_rsi_value(avg_gain, avg_loss)]

    for gain, loss in zip(gains[period:], losses[period:]):
        avg_gain = ((avg_gain * (p - 1) + gain) / p).quantize(QUANTIZE)
        avg_loss = ((avg_loss * (p - 1) + loss) / p).quantize(QUANTIZE)
        rsi.append(_rsi_value(avg_gain, avg_loss))

    return rsi
