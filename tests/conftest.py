"""Shared test fixtures for the trend trading bot."""

from collections.abc import Callable, Sequence
from decimal import Decimal

import pytest

from trendbot.config import (
    AppSettings,
    ExchangeSettings,
    FilterSettings,
    IndicatorSettings,
    RiskSettings,
    TradingSettings,
)
from trendbot.models import Candle


@pytest.fixture
def mock_settings() -> AppSettings:
    """Return AppSettings with test defaults (paper mode, dummy API keys)."""
    return AppSettings(
        log_level="DEBUG",
        exchange=ExchangeSettings(
            api_key="test-api-key",  # type: ignore[arg-type]
            api_secret="test-api-secret",  # type: ignore[arg-type]
            sandbox=True,
        ),
        trading=TradingSettings(mode="paper", tick_interval_seconds=0.01),
        indicators=IndicatorSettings(),
        risk=RiskSettings(),
        filters=FilterSettings(),
    )


@pytest.fixture
def candle_factory() -> Callable[..., list[Candle]]:
    """Build an oldest-first candle series from close prices.

    Each bar gets a 0.1% high/low range (below the default spread limit)
    and a constant volume unless volumes are given.
    """

    def _make(
        closes: Sequence[Decimal | int | str],
        volumes: Sequence[Decimal | int | str] | None = None,
        range_pct: Decimal = Decimal("0.001"),
    ) -> list[Candle]:
        if volumes is None:
            volumes = [Decimal("5000")] * len(closes)
        half = range_pct / 2
        candles = []
        for i, (close, volume) in enumerate(zip(closes, volumes)):
            c = Decimal(str(close))
            candles.append(
                Candle(
                    timestamp_ms=1_700_000_000_000 + i * 900_000,
                    open=c,
                    high=c * (1 + half),
                    low=c * (1 - half),
                    close=c,
                    volume=Decimal(str(volume)),
                )
            )
        return candles

    return _make
