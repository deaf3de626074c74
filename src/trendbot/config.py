"""Configuration system using pydantic-settings with environment variable loading.

Every tunable of the signal and risk engine lives here as a typed field with
a documented default. Cross-field invariants (take-profit ordering, EMA
period ordering, RSI band) are validated once at load time so an invalid
configuration never reaches the trading loop.
"""

from decimal import Decimal
from typing import Literal

from pydantic import SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _check_fraction(value: Decimal, name: str) -> Decimal:
    if not Decimal("0") < value < Decimal("1"):
        raise ValueError(f"{name} must be between 0 and 1 (exclusive), got {value}")
    return value


class ExchangeSettings(BaseSettings):
    """Binance exchange connection settings."""

    model_config = SettingsConfigDict(env_prefix="BINANCE_")

    api_key: SecretStr = SecretStr("")
    api_secret: SecretStr = SecretStr("")
    sandbox: bool = False


class TradingSettings(BaseSettings):
    """Traded instrument and evaluation cadence."""

    model_config = SettingsConfigDict(env_prefix="TRADING_")

    mode: Literal["paper", "live"] = "paper"
    symbol: str = "DOGE/USDT"
    timeframe: str = "15m"
    trade_amount: Decimal = Decimal("0.05")  # 5% of free quote balance per entry
    tick_interval_seconds: float = 5.0
    candle_limit: int = 500

    @field_validator("trade_amount")
    @classmethod
    def _validate_trade_amount(cls, v: Decimal) -> Decimal:
        if not Decimal("0") < v <= Decimal("1"):
            raise ValueError(f"trade_amount must be in (0, 1], got {v}")
        return v

    @field_validator("symbol")
    @classmethod
    def _validate_symbol(cls, v: str) -> str:
        if "/" not in v:
            raise ValueError(f"symbol must be in BASE/QUOTE form, got {v!r}")
        return v

    @property
    def base_asset(self) -> str:
        return self.symbol.split("/")[0]

    @property
    def quote_asset(self) -> str:
        return self.symbol.split("/")[1].split(":")[0]


class IndicatorSettings(BaseSettings):
    """Indicator lookbacks and thresholds.

    All fields configurable via INDICATOR_ environment variable prefix.
    List fields are read as JSON, e.g. ``INDICATOR_MA_PERIODS=[20,30,50]``.
    """

    model_config = SettingsConfigDict(env_prefix="INDICATOR_")

    # RSI
    rsi_period: int = 14
    rsi_overbought: Decimal = Decimal("70")
    rsi_oversold: Decimal = Decimal("30")

    # EMA crossover
    ema_fast_period: int = 5
    ema_slow_period: int = 13

    # Moving averages
    ma_periods: list[int] = [20, 30, 50]
    ma_volume_weighted: bool = True

    # Volume significance
    volume_threshold: Decimal = Decimal("1.5")  # current must exceed 1.5x average
    volume_lookback_periods: int = 24

    # Volatility band
    volatility_period: int = 14
    volatility_std_dev: Decimal = Decimal("2.0")

    # Trend strength
    trend_strength_period: int = 20

    @field_validator(
        "rsi_period",
        "ema_fast_period",
        "ema_slow_period",
        "volume_lookback_periods",
        "volatility_period",
    )
    @classmethod
    def _validate_period(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"period must be >= 1, got {v}")
        return v

    @field_validator("trend_strength_period")
    @classmethod
    def _validate_trend_period(cls, v: int) -> int:
        if v < 2:
            raise ValueError(f"trend_strength_period needs at least 2 closes, got {v}")
        return v

    @field_validator("ma_periods")
    @classmethod
    def _validate_ma_periods(cls, v: list[int]) -> list[int]:
        if not v:
            raise ValueError("at least one moving-average period is required")
        if any(p < 1 for p in v):
            raise ValueError(f"moving-average periods must be >= 1, got {v}")
        return v

    @model_validator(mode="after")
    def _validate_ordering(self) -> "IndicatorSettings":
        if self.ema_fast_period >= self.ema_slow_period:
            raise ValueError(
                f"ema_fast_period ({self.ema_fast_period}) must be shorter than "
                f"ema_slow_period ({self.ema_slow_period})"
            )
        if self.rsi_oversold >= self.rsi_overbought:
            raise ValueError(
                f"rsi_oversold ({self.rsi_oversold}) must be below "
                f"rsi_overbought ({self.rsi_overbought})"
            )
        return self

    @property
    def required_candles(self) -> int:
        """Longest lookback across all indicators (RSI needs one extra close)."""
        return max(
            self.rsi_period + 1,
            self.ema_slow_period,
            max(self.ma_periods),
            self.volatility_period,
            self.volume_lookback_periods,
            self.trend_strength_period,
        )


class RiskSettings(BaseSettings):
    """Stops, take-profits and account-level limits."""

    model_config = SettingsConfigDict(env_prefix="RISK_")

    trailing_stop: Decimal = Decimal("0.01")  # 1% below the best price seen
    initial_stop: Decimal = Decimal("0.015")  # 1.5% below entry, fixed
    take_profit_levels: list[Decimal] = [
        Decimal("0.02"),
        Decimal("0.03"),
        Decimal("0.05"),
    ]
    max_daily_loss: Decimal = Decimal("0.10")
    cooldown_seconds: float = 5.0
    max_positions: int = 3
    max_consecutive_losses: int = 3
    loss_size_step: Decimal = Decimal("0.2")  # size reduction per consecutive loss

    @field_validator("trailing_stop", "initial_stop")
    @classmethod
    def _validate_stop(cls, v: Decimal) -> Decimal:
        return _check_fraction(v, "stop percentage")

    @field_validator("take_profit_levels")
    @classmethod
    def _validate_take_profits(cls, v: list[Decimal]) -> list[Decimal]:
        if len(v) != 3:
            raise ValueError(f"exactly three take-profit levels required, got {len(v)}")
        if v[0] <= Decimal("0"):
            raise ValueError(f"take-profit levels must be positive, got {v}")
        if not all(a < b for a, b in zip(v, v[1:])):
            raise ValueError(f"take-profit levels must be strictly ascending, got {v}")
        return v

    @field_validator("max_positions", "max_consecutive_losses")
    @classmethod
    def _validate_positive_count(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"limit must be >= 1, got {v}")
        return v

    @field_validator("max_daily_loss")
    @classmethod
    def _validate_max_daily_loss(cls, v: Decimal) -> Decimal:
        if v <= Decimal("0"):
            raise ValueError(f"max_daily_loss must be positive, got {v}")
        return v


class FilterSettings(BaseSettings):
    """Entry filters and the signal-strength gate."""

    model_config = SettingsConfigDict(env_prefix="FILTER_")

    trend_strength: Decimal = Decimal("0.6")  # min fraction of rising closes
    minimum_volume: Decimal = Decimal("1000")
    spread_limit: Decimal = Decimal("0.002")  # 0.2% max candle range
    entry_signal_threshold: Decimal = Decimal("0.70")

    @field_validator("entry_signal_threshold")
    @classmethod
    def _validate_threshold(cls, v: Decimal) -> Decimal:
        if not Decimal("0") < v <= Decimal("1"):
            raise ValueError(f"entry_signal_threshold must be in (0, 1], got {v}")
        return v


class PaperSettings(BaseSettings):
    """Paper trading simulation parameters."""

    model_config = SettingsConfigDict(env_prefix="PAPER_")

    initial_quote_balance: Decimal = Decimal("1000")
    slippage: Decimal = Decimal("0.0005")  # 5 basis points
    taker_fee: Decimal = Decimal("0.001")  # 0.1%


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"  # LOG_FORMAT
    exchange: ExchangeSettings = ExchangeSettings()
    trading: TradingSettings = TradingSettings()
    indicators: IndicatorSettings = IndicatorSettings()
    risk: RiskSettings = RiskSettings()
    filters: FilterSettings = FilterSettings()
    paper: PaperSettings = PaperSettings()

    @model_validator(mode="after")
    def _validate_candle_limit(self) -> "AppSettings":
        required = self.indicators.required_candles
        if self.trading.candle_limit < required:
            raise ValueError(
                f"trading.candle_limit ({self.trading.candle_limit}) is shorter than "
                f"the longest indicator lookback ({required})"
            )
        return self
