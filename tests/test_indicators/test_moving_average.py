"""Tests for SMA, EMA, VWMA and EMA crossover detection.

All test values use Decimal (project convention).
"""

from decimal import Decimal

import pytest

from trendbot.exceptions import InsufficientDataError, InvalidMarketDataError
from trendbot.indicators.models import Crossover, CrossoverType
from trendbot.indicators.moving_average import (
    compute_ema,
    compute_sma,
    compute_vwma,
    detect_crossovers,
)


def _d(*values: str | int) -> list[Decimal]:
    return [Decimal(str(v)) for v in values]


PRICES = _d(10, 11, 12, 11, 10, 9, 8, 9, 10, 11, 12, 13, 14, 15)


class TestComputeSma:
    """Tests for the simple moving average."""

    def test_known_values(self) -> None:
        assert compute_sma(_d(1, 2, 3, 4, 5), 3) == _d(2, 3, 4)

    def test_one_value_per_window(self) -> None:
        assert len(compute_sma(PRICES, 5)) == len(PRICES) - 4

    def test_too_short_raises(self) -> None:
        with pytest.raises(InsufficientDataError, match="SMA"):
            compute_sma(_d(1, 2), 3)


class TestComputeEma:
    """Tests for EMA computation."""

    def test_known_values_span_3(self) -> None:
        """alpha = 0.5: 1, 1.5, 2.25, 3.125, 4.0625."""
        result = compute_ema(_d(1, 2, 3, 4, 5), span=3)

        assert result == [
            Decimal("1.000000000000"),
            Decimal("1.500000000000"),
            Decimal("2.250000000000"),
            Decimal("3.125000000000"),
            Decimal("4.062500000000"),
        ]

    def test_index_aligned_with_input(self) -> None:
        assert len(compute_ema(PRICES, 5)) == len(compute_ema(PRICES, 13)) == len(PRICES)

    def test_constant_values_return_same(self) -> None:
        result = compute_ema([Decimal("0.25")] * 10, span=6)
        assert all(v == Decimal("0.25") for v in result)

    def test_shorter_than_span_raises(self) -> None:
        with pytest.raises(InsufficientDataError, match="EMA"):
            compute_ema(_d(1, 2, 3), span=5)


class TestComputeVwma:
    """Tests for the volume-weighted moving average."""

    def test_weights_by_volume(self) -> None:
        """(10 * 1 + 20 * 3) / 4 = 17.5."""
        assert compute_vwma(_d(10, 20), _d(1, 3), 2) == [Decimal("17.5")]

    def test_output_length(self) -> None:
        volumes = [Decimal("100")] * len(PRICES)
        assert len(compute_vwma(PRICES, volumes, 5)) == 10

    def test_equal_volumes_match_sma(self) -> None:
        volumes = [Decimal("7")] * len(PRICES)
        assert compute_vwma(PRICES, volumes, 5) == compute_sma(PRICES, 5)

    def test_zero_volume_window_raises(self) -> None:
        volumes = _d(5, 5, 0, 0, 0, 5)
        with pytest.raises(InvalidMarketDataError, match="zero total volume"):
            compute_vwma(_d(1, 2, 3, 4, 5, 6), volumes, 3)

    def test_mismatched_lengths_raise(self) -> None:
        with pytest.raises(InvalidMarketDataError, match="equal-length"):
            compute_vwma(_d(1, 2, 3), _d(1, 1), 2)


class TestDetectCrossovers:
    """Tests for fast/slow crossing detection."""

    def test_bullish_then_bearish(self) -> None:
        fast = _d(1, 2, 3, 2, 1)
        slow = _d(2, 2, 2, 2, 2)

        assert detect_crossovers(fast, slow) == [
            Crossover(CrossoverType.BULLISH, 2),
            Crossover(CrossoverType.BEARISH, 4),
        ]

    def test_no_crossing(self) -> None:
        assert detect_crossovers(_d(3, 4, 5), _d(1, 2, 3)) == []

    def test_old_crossing_still_reported(self) -> None:
        """A crossing early in the series is returned however long ago it was."""
        fast = _d(1) + [Decimal("5")] * 50
        slow = [Decimal("2")] * 51

        result = detect_crossovers(fast, slow)

        assert result == [Crossover(CrossoverType.BULLISH, 1)]

    def test_misaligned_series_raise(self) -> None:
        with pytest.raises(InvalidMarketDataError):
            detect_crossovers(_d(1, 2), _d(1, 2, 3))
