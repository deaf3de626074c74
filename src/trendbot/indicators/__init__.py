"""Indicator engine: RSI, EMA crossover, SMA/VWMA, volatility band, trend and volume.

Pure functions over Decimal series plus the IndicatorEngine that runs them
all against a candle series.
"""

from trendbot.indicators.engine import IndicatorEngine, compute_spread
from trendbot.indicators.models import (
    Crossover,
    CrossoverType,
    IndicatorReadings,
    MovingAverage,
    VolatilityBand,
)
from trendbot.indicators.momentum import compute_rsi
from trendbot.indicators.moving_average import (
    compute_ema,
    compute_sma,
    compute_vwma,
    detect_crossovers,
)
from trendbot.indicators.trend import compute_trend_strength
from trendbot.indicators.volatility import compute_bollinger_bands
from trendbot.indicators.volume import compute_average_volume, is_volume_significant

__all__ = [
    "Crossover",
    "CrossoverType",
    "IndicatorEngine",
    "IndicatorReadings",
    "MovingAverage",
    "VolatilityBand",
    "compute_average_volume",
    "compute_bollinger_bands",
    "compute_ema",
    "compute_rsi",
    "compute_sma",
    "compute_spread",
    "compute_trend_strength",
    "compute_vwma",
    "detect_crossovers",
    "is_volume_significant",
]
