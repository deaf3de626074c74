"""Moving averages and EMA crossover detection.

Simple, exponential and volume-weighted moving averages over Decimal
series. Uses Decimal arithmetic with quantize to prevent precision explosion.

CRITICAL: All computations use Decimal. Never use float.
"""

from collections.abc import Sequence
from decimal import Decimal

from trendbot.exceptions import InvalidMarketDataError
from trendbot.indicators.base import QUANTIZE, require_length
from trendbot.indicators.models import Crossover, CrossoverType


def compute_sma(values: Sequence[Decimal], period: int) -> list[Decimal]:
    """Compute a simple moving average, one value per full window.

    Returns:
        ``len(values) - period + 1`` values; the last one covers the most
        recent ``period`` inputs.

    Raises:
        InsufficientDataError: If fewer than ``period`` values are given.
    """
    require_length(values, period, "SMA")

    p = Decimal(period)
    window_sum = sum(values[:period], Decimal("0"))
    sma = [(window_sum / p).quantize(QUANTIZE)]
    for i in range(period, len(values)):
        window_sum += values[i] - values[i - period]
        sma.append((window_sum / p).quantize(QUANTIZE))
    return sma


def compute_ema(values: Sequence[Decimal], span: int) -> list[Decimal]:
    """Compute Exponential Moving Average over a list of Decimal values.

    Uses the standard recursive formula:
        alpha = 2 / (span + 1)
        EMA_t = alpha * value_t + (1 - alpha) * EMA_{t-1}

    First EMA value = first input value, so the output is index-aligned with
    the input and EMAs of different spans can be compared bar by bar.

    Args:
        values: Ordered list of Decimal values (oldest first).
        span: Number of periods for EMA smoothing.

    Returns:
        List of EMA values, same length as input.

    Raises:
        InsufficientDataError: If fewer than ``span`` values are given.
    """
    require_length(values, span, "EMA")

    alpha = Decimal("2") / (Decimal(span) + Decimal("1"))
    one_minus_alpha = Decimal("1") - alpha

    ema = [values[0].quantize(QUANTIZE)]
    for v in values[1:]:
        next_ema = (alpha * v + one_minus_alpha * ema[-1]).quantize(QUANTIZE)
        ema.append(next_ema)

    return ema


def compute_vwma(
    prices: Sequence[Decimal], volumes: Sequence[Decimal], period: int
) -> list[Decimal]:
    """Compute a volume-weighted moving average.

    For each full window: sum(price * volume) / sum(volume).

    Raises:
        InsufficientDataError: If fewer than ``period`` values are given.
        InvalidMarketDataError: If the series lengths differ, or a window's
            total volume is zero (the average is undefined there).
    """
    if len(prices) != len(volumes):
        raise InvalidMarketDataError(
            f"VWMA needs equal-length series, got {len(prices)} prices "
            f"and {len(volumes)} volumes"
        )
    require_length(prices, period, "VWMA")

    vwma: list[Decimal] = []
    for end in range(period, len(prices) + 1):
        window_prices = prices[end - period : end]
        window_volumes = volumes[end - period : end]
        volume_sum = sum(window_volumes, Decimal("0"))
        if volume_sum == 0:
            raise InvalidMarketDataError(
                f"VWMA window ending at index {end - 1} has zero total volume"
            )
        pv_sum = sum(
            (p * v for p, v in zip(window_prices, window_volumes)), Decimal("0")
        )
        vwma.append((pv_sum / volume_sum).quantize(QUANTIZE))
    return vwma


def detect_crossovers(
    fast: Sequence[Decimal], slow: Sequence[Decimal]
) -> list[Crossover]:
    """Find every fast/slow crossing across the whole series.

    A move from ``fast <= slow`` to ``fast > slow`` is bullish at that index;
    a move from ``fast >= slow`` to ``fast < slow`` is bearish.

    Known weakness: callers treat "any crossover anywhere in the series" as a
    live signal, so an old crossing keeps signalling until it scrolls out of
    the fetched candle window. Restricting this to recent bars is a behaviour
    change and must be made deliberately.

    Args:
        fast: Fast EMA series.
        slow: Slow EMA series, index-aligned with ``fast``.

    Returns:
        Crossovers in index order.
    """
    if len(fast) != len(slow):
        raise InvalidMarketDataError(
            f"crossover detection needs aligned series, got {len(fast)} and {len(slow)}"
        )

    crossovers: list[Crossover] = []
    for i in range(1, len(fast)):
        if fast[i] > slow[i] and fast[i - 1] <= slow[i - 1]:
            crossovers.append(Crossover(CrossoverType.BULLISH, i))
        elif fast[i] < slow[i] and fast[i - 1] >= slow[i - 1]:
            crossovers.append(Crossover(CrossoverType.BEARISH, i))
    return crossovers
