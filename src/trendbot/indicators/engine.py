"""Indicator engine: candle series -> raw indicator readings.

The engine is a pure function of its settings and the candle series. It
checks the series length once against the longest configured lookback so a
short series fails as a whole instead of producing a partial reading.
"""

from collections.abc import Sequence
from decimal import Decimal

from trendbot.config import IndicatorSettings
from trendbot.exceptions import InvalidMarketDataError
from trendbot.indicators.base import QUANTIZE, require_length
from trendbot.indicators.models import IndicatorReadings, MovingAverage
from trendbot.indicators.momentum import compute_rsi
from trendbot.indicators.moving_average import (
    compute_ema,
    compute_sma,
    compute_vwma,
    detect_crossovers,
)
from trendbot.indicators.trend import compute_trend_strength
from trendbot.indicators.volatility import compute_bollinger_bands
from trendbot.indicators.volume import compute_average_volume
from trendbot.models import Candle


def compute_spread(candle: Candle) -> Decimal:
    """Relative range of a bar: (high - low) / close.

    Raises:
        InvalidMarketDataError: If the close is not positive.
    """
    if candle.close <= 0:
        raise InvalidMarketDataError(f"non-positive close {candle.close}")
    return ((candle.high - candle.low) / candle.close).quantize(QUANTIZE)


class IndicatorEngine:
    """Computes every configured indicator for a candle series.

    Args:
        settings: Indicator lookbacks and thresholds.
    """

    def __init__(self, settings: IndicatorSettings) -> None:
        self._settings = settings

    @property
    def settings(self) -> IndicatorSettings:
        return self._settings

    def required_candles(self) -> int:
        """Length of the longest lookback across all indicators."""
        return self._settings.required_candles

    def compute(self, candles: Sequence[Candle]) -> IndicatorReadings:
        """Compute all indicator readings for ``candles`` (oldest-first).

        Raises:
            InsufficientDataError: If the series is shorter than
                ``required_candles()``.
            InvalidMarketDataError: If a value is undefined for the data
                (zero volume across the latest VWMA window, non-positive close).
        """
        require_length(candles, self.required_candles(), "indicator engine")
        s = self._settings

        closes = [c.close for c in candles]
        volumes = [c.volume for c in candles]
        latest = candles[-1]

        rsi = compute_rsi(closes, s.rsi_period)
        fast = compute_ema(closes, s.ema_fast_period)
        slow = compute_ema(closes, s.ema_slow_period)

        moving_averages = []
        for period in s.ma_periods:
            if s.ma_volume_weighted:
                # Signals read only the latest window; older windows may hold zero volume
                values = compute_vwma(closes[-period:], volumes[-period:], period)
            else:
                values = compute_sma(closes, period)
            moving_averages.append(
                MovingAverage(
                    period=period,
                    values=tuple(values),
                    volume_weighted=s.ma_volume_weighted,
                )
            )

        bands = compute_bollinger_bands(closes, s.volatility_period, s.volatility_std_dev)

        return IndicatorReadings(
            current_price=latest.close,
            current_volume=latest.volume,
            average_volume=compute_average_volume(volumes, s.volume_lookback_periods),
            spread=compute_spread(latest),
            rsi=rsi[-1],
            crossovers=tuple(detect_crossovers(fast, slow)),
            moving_averages=tuple(moving_averages),
            volatility=bands[-1],
            trend_strength=compute_trend_strength(closes, s.trend_strength_period),
        )
