"""Signal data models.

CRITICAL: All score and price values use Decimal. Never use float for signal computations.
"""

from dataclasses import dataclass
from decimal import Decimal

from trendbot.indicators.models import VolatilityBand


@dataclass(frozen=True)
class EmaSignal:
    """Whether any bullish / bearish EMA crossover exists in the series."""

    bullish: bool
    bearish: bool


@dataclass(frozen=True)
class MaSignal:
    """Price position relative to one configured moving average."""

    period: int
    bullish: bool  # current price above the latest MA value


@dataclass(frozen=True)
class AnalysisSnapshot:
    """Everything the trade manager needs to know about one tick.

    Produced fresh every tick from the candle series; never mutated.
    """

    current_price: Decimal
    spread: Decimal
    is_overbought: bool
    is_oversold: bool
    ema_signal: EmaSignal
    ma_signals: tuple[MaSignal, ...]
    volume_signal: bool
    volatility: VolatilityBand
    trend_strength: Decimal  # 0-1
    rsi: Decimal


@dataclass(frozen=True)
class EntrySignal:
    """Signal-strength breakdown for an entry decision."""

    strength: Decimal  # bullish_count / total, 0-1
    bullish_count: int
    total: int
    passes: bool  # strength >= entry threshold
