"""Signal aggregation module.

Folds indicator readings into the per-tick AnalysisSnapshot and scores the
bullish signal strength used for entry decisions.
"""

from trendbot.signals.aggregator import SignalAggregator
from trendbot.signals.models import AnalysisSnapshot, EmaSignal, EntrySignal, MaSignal

__all__ = [
    "AnalysisSnapshot",
    "EmaSignal",
    "EntrySignal",
    "MaSignal",
    "SignalAggregator",
]
