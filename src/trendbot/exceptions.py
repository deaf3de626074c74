"""Custom exceptions for the trend trading bot.

All indicator, gateway and order exceptions live here
to avoid circular imports between modules.
"""


class BotError(Exception):
    """Base exception for all bot errors."""


class InsufficientDataError(BotError):
    """Raised when a candle series is shorter than a required lookback."""


class InvalidMarketDataError(BotError):
    """Raised when market data cannot produce a defined indicator value.

    Examples: a VWMA window whose volume sums to zero, a non-positive close.
    """


class GatewayError(BotError):
    """Raised when a market-data or balance read from the exchange fails."""


class OrderError(BotError):
    """Raised when a buy or sell order submission fails or fills nothing."""
