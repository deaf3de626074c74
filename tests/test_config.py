"""Tests for settings defaults, environment loading and cross-field validation."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from trendbot.config import (
    AppSettings,
    FilterSettings,
    IndicatorSettings,
    RiskSettings,
    TradingSettings,
)


class TestDefaults:
    """Defaults match the documented strategy parameters."""

    def test_trading_defaults(self) -> None:
        settings = TradingSettings()
        assert settings.symbol == "DOGE/USDT"
        assert settings.timeframe == "15m"
        assert settings.trade_amount == Decimal("0.05")
        assert settings.base_asset == "DOGE"
        assert settings.quote_asset == "USDT"

    def test_indicator_defaults(self) -> None:
        settings = IndicatorSettings()
        assert settings.rsi_period == 14
        assert settings.ema_fast_period == 5
        assert settings.ema_slow_period == 13
        assert settings.ma_periods == [20, 30, 50]
        assert settings.required_candles == 50

    def test_risk_defaults(self) -> None:
        settings = RiskSettings()
        assert settings.take_profit_levels == [
            Decimal("0.02"),
            Decimal("0.03"),
            Decimal("0.05"),
        ]
        assert settings.max_positions == 3
        assert settings.max_consecutive_losses == 3

    def test_filter_defaults(self) -> None:
        settings = FilterSettings()
        assert settings.spread_limit == Decimal("0.002")
        assert settings.entry_signal_threshold == Decimal("0.70")


class TestEnvironment:
    """Each settings class reads its own env prefix."""

    def test_risk_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RISK_MAX_POSITIONS", "5")
        assert RiskSettings().max_positions == 5

    def test_list_field_from_json(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("INDICATOR_MA_PERIODS", "[10,20]")
        settings = IndicatorSettings()
        assert settings.ma_periods == [10, 20]
        assert settings.required_candles == 24

    def test_quote_asset_strips_settle_suffix(self) -> None:
        assert TradingSettings(symbol="BTC/USDT:USDT").quote_asset == "USDT"


class TestValidation:
    """Invalid configurations fail at load time."""

    def test_take_profits_must_ascend(self) -> None:
        with pytest.raises(ValidationError, match="ascending"):
            RiskSettings(
                take_profit_levels=[Decimal("0.03"), Decimal("0.02"), Decimal("0.05")]
            )

    def test_exactly_three_take_profits(self) -> None:
        with pytest.raises(ValidationError, match="three"):
            RiskSettings(take_profit_levels=[Decimal("0.02"), Decimal("0.03")])

    def test_take_profits_must_be_positive(self) -> None:
        with pytest.raises(ValidationError, match="positive"):
            RiskSettings(
                take_profit_levels=[Decimal("0"), Decimal("0.03"), Decimal("0.05")]
            )

    def test_stop_must_be_fraction(self) -> None:
        with pytest.raises(ValidationError):
            RiskSettings(initial_stop=Decimal("1.5"))

    def test_ema_periods_ordered(self) -> None:
        with pytest.raises(ValidationError, match="shorter"):
            IndicatorSettings(ema_fast_period=13, ema_slow_period=5)

    def test_rsi_band_ordered(self) -> None:
        with pytest.raises(ValidationError, match="below"):
            IndicatorSettings(rsi_oversold=Decimal("80"), rsi_overbought=Decimal("70"))

    def test_symbol_needs_quote(self) -> None:
        with pytest.raises(ValidationError):
            TradingSettings(symbol="DOGEUSDT")

    def test_threshold_range(self) -> None:
        with pytest.raises(ValidationError):
            FilterSettings(entry_signal_threshold=Decimal("1.2"))

    def test_candle_limit_covers_lookbacks(self) -> None:
        with pytest.raises(ValidationError, match="candle_limit"):
            AppSettings(trading=TradingSettings(candle_limit=30))

    def test_valid_app_settings(self, mock_settings: AppSettings) -> None:
        assert mock_settings.trading.mode == "paper"
        assert mock_settings.exchange.api_key.get_secret_value() == "test-api-key"
