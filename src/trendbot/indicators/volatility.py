"""Bollinger-style volatility band."""

from collections.abc import Sequence
from decimal import Decimal

from trendbot.indicators.base import QUANTIZE, require_length
from trendbot.indicators.models import VolatilityBand


def compute_bollinger_bands(
    values: Sequence[Decimal],
    period: int = 14,
    std_dev: Decimal = Decimal("2"),
) -> list[VolatilityBand]:
    """Compute Bollinger bands, one per full window.

    middle = SMA(period), upper/lower = middle +/- std_dev * sigma, where sigma
    is the population standard deviation of the window.

    Raises:
        InsufficientDataError: If fewer than ``period`` values are given.
    """
    require_length(values, period, "Bollinger bands")

    p = Decimal(period)
    bands: list[VolatilityBand] = []
    for end in range(period, len(values) + 1):
        window = values[end - period : end]
        mean = sum(window, Decimal("0")) / p
        variance = sum(((v - mean) ** 2 for v in window), Decimal("0")) / p
        offset = std_dev * variance.sqrt()
        bands.append(
            VolatilityBand(
                middle=mean.quantize(QUANTIZE),
                upper=(mean + offset).quantize(QUANTIZE),
                lower=(mean - offset).quantize(QUANTIZE),
            )
        )
    return bands
