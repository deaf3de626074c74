"""Market-data and order gateways (paper and live)."""

from trendbot.execution.gateway import TradingGateway
from trendbot.execution.live_gateway import LiveGateway
from trendbot.execution.paper_gateway import PaperGateway

__all__ = ["LiveGateway", "PaperGateway", "TradingGateway"]
