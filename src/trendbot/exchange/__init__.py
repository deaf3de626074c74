"""Exchange client layer -- Binance API integration via ccxt."""

from trendbot.exchange.binance_client import BinanceClient
from trendbot.exchange.client import ExchangeClient

__all__ = ["BinanceClient", "ExchangeClient"]
