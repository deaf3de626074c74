"""Volume significance filter."""

from collections.abc import Sequence
from decimal import Decimal

from trendbot.indicators.base import QUANTIZE, require_length


def compute_average_volume(volumes: Sequence[Decimal], lookback: int = 24) -> Decimal:
    """Mean volume over the most recent ``lookback`` bars (current bar included).

    Raises:
        InsufficientDataError: If fewer than ``lookback`` volumes are given.
    """
    require_length(volumes, lookback, "average volume")
    recent = volumes[-lookback:]
    return (sum(recent, Decimal("0")) / Decimal(lookback)).quantize(QUANTIZE)


def is_volume_significant(
    current_volume: Decimal,
    average_volume: Decimal,
    threshold: Decimal = Decimal("1.5"),
    minimum_volume: Decimal = Decimal("0"),
) -> bool:
    """True when the current bar's volume is a spike above both filters.

    Requires ``current > average * threshold`` AND ``current > minimum_volume``.
    """
    return current_volume > average_volume * threshold and current_volume > minimum_volume
