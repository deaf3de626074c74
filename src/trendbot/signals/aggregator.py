"""Signal aggregation: indicator readings -> analysis snapshot -> entry strength.

The entry vote counts four fixed signals (RSI oversold, any bullish EMA
crossover, volume spike, trend strength above the filter) plus one vote per
configured moving average, and divides by the number of votes. Entry is
eligible when the share of bullish votes reaches the configured threshold
(default 0.70).
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from trendbot.config import FilterSettings
from trendbot.indicators.engine import IndicatorEngine
from trendbot.indicators.models import CrossoverType, IndicatorReadings
from trendbot.indicators.volume import is_volume_significant
from trendbot.logging import get_logger
from trendbot.models import Candle
from trendbot.signals.models import AnalysisSnapshot, EmaSignal, EntrySignal, MaSignal

logger = get_logger(__name__)

#: Signals counted besides the per-MA votes.
_FIXED_SIGNAL_COUNT = 4


class SignalAggregator:
    """Folds indicator readings into snapshots and scores entry strength.

    Args:
        engine: Indicator engine (carries the indicator settings).
        filter_settings: Trend, volume and entry-threshold filters.
    """

    def __init__(self, engine: IndicatorEngine, filter_settings: FilterSettings) -> None:
        self._engine = engine
        self._filters = filter_settings

    @property
    def entry_threshold(self) -> Decimal:
        return self._filters.entry_signal_threshold

    def analyze(self, candles: Sequence[Candle]) -> AnalysisSnapshot:
        """Run the indicator engine and fold the result into a snapshot.

        Raises:
            InsufficientDataError: If the series is too short.
            InvalidMarketDataError: If an indicator is undefined for the data.
        """
        snapshot = self.build_snapshot(self._engine.compute(candles))
        logger.debug(
            "analysis_snapshot",
            price=str(snapshot.current_price),
            spread=str(snapshot.spread),
            rsi=str(snapshot.rsi),
            oversold=snapshot.is_oversold,
            overbought=snapshot.is_overbought,
            ema_bullish=snapshot.ema_signal.bullish,
            ema_bearish=snapshot.ema_signal.bearish,
            ma_bullish=[ma.bullish for ma in snapshot.ma_signals],
            volume_signal=snapshot.volume_signal,
            trend_strength=str(snapshot.trend_strength),
        )
        return snapshot

    def build_snapshot(self, readings: IndicatorReadings) -> AnalysisSnapshot:
        """Turn raw readings into the boolean signals of an AnalysisSnapshot."""
        ind = self._engine.settings
        crossover_types = {c.type for c in readings.crossovers}

        return AnalysisSnapshot(
            current_price=readings.current_price,
            spread=readings.spread,
            is_overbought=readings.rsi > ind.rsi_overbought,
            is_oversold=readings.rsi < ind.rsi_oversold,
            ema_signal=EmaSignal(
                bullish=CrossoverType.BULLISH in crossover_types,
                bearish=CrossoverType.BEARISH in crossover_types,
            ),
            ma_signals=tuple(
                MaSignal(period=ma.period, bullish=readings.current_price > ma.latest)
                for ma in readings.moving_averages
            ),
            volume_signal=is_volume_significant(
                readings.current_volume,
                readings.average_volume,
                threshold=ind.volume_threshold,
                minimum_volume=self._filters.minimum_volume,
            ),
            volatility=readings.volatility,
            trend_strength=readings.trend_strength,
            rsi=readings.rsi,
        )

    def evaluate_entry(self, snapshot: AnalysisSnapshot) -> EntrySignal:
        """Count bullish votes and compare their share to the entry threshold."""
        votes = [
            snapshot.is_oversold,
            snapshot.ema_signal.bullish,
            snapshot.volume_signal,
            snapshot.trend_strength > self._filters.trend_strength,
            *(ma.bullish for ma in snapshot.ma_signals),
        ]
        bullish = sum(1 for vote in votes if vote)
        total = _FIXED_SIGNAL_COUNT + len(snapshot.ma_signals)
        strength = Decimal(bullish) / Decimal(total)
        return EntrySignal(
            strength=strength,
            bullish_count=bullish,
            total=total,
            passes=strength >= self._filters.entry_signal_threshold,
        )

    def signal_strength(self, snapshot: AnalysisSnapshot) -> Decimal:
        """Share of bullish votes in [0, 1]."""
        return self.evaluate_entry(snapshot).strength
