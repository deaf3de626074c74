"""Indicator output models."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class CrossoverType(str, Enum):
    """Direction of a fast/slow EMA crossing."""

    BULLISH = "bullish"
    BEARISH = "bearish"


@dataclass(frozen=True)
class Crossover:
    """A fast/slow EMA crossing at a series index."""

    type: CrossoverType
    index: int


@dataclass(frozen=True)
class VolatilityBand:
    """One Bollinger-style band value."""

    middle: Decimal
    upper: Decimal
    lower: Decimal

    @property
    def width(self) -> Decimal:
        return self.upper - self.lower


@dataclass(frozen=True)
class MovingAverage:
    """A configured moving average and its computed series."""

    period: int
    values: tuple[Decimal, ...]
    volume_weighted: bool = False

    @property
    def latest(self) -> Decimal:
        return self.values[-1]


@dataclass(frozen=True)
class IndicatorReadings:
    """Raw indicator outputs for one candle series, before signal folding."""

    current_price: Decimal
    current_volume: Decimal
    average_volume: Decimal
    spread: Decimal
    rsi: Decimal
    crossovers: tuple[Crossover, ...]
    moving_averages: tuple[MovingAverage, ...]
    volatility: VolatilityBand
    trend_strength: Decimal
