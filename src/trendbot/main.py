"""Entry point for the trend trading bot.

Wires all components together and starts the orchestrator.
Handles SIGINT/SIGTERM for graceful shutdown.

Component wiring order (in _build_components):
1. AppSettings (configuration)
2. Logging setup
3. ExchangeClient (BinanceClient; public endpoints work without keys)
4. TradingGateway (PaperGateway or LiveGateway based on mode)
5. IndicatorEngine + SignalAggregator
6. RiskManager
7. PositionSizer
8. TradeManager (position and risk manager)
9. Orchestrator (fixed-interval evaluation loop)
"""

import asyncio
import signal
from typing import Any

import structlog

from trendbot.config import AppSettings
from trendbot.exchange.binance_client import BinanceClient
from trendbot.execution.gateway import TradingGateway
from trendbot.indicators.engine import IndicatorEngine
from trendbot.logging import get_logger, setup_logging
from trendbot.orchestrator import Orchestrator
from trendbot.position.manager import TradeManager
from trendbot.position.sizing import PositionSizer
from trendbot.risk.manager import RiskManager
from trendbot.signals.aggregator import SignalAggregator


def _build_components(settings: AppSettings) -> dict[str, Any]:
    """Build all bot components from settings.

    Note: Does NOT call exchange_client.connect() -- that happens in run().

    Args:
        settings: Application-wide settings.

    Returns:
        Dict mapping component names to instances.
    """
    logger = get_logger("trendbot.main")

    exchange_client = BinanceClient(settings.exchange)

    gateway: TradingGateway
    if settings.trading.mode == "paper":
        from trendbot.execution.paper_gateway import PaperGateway

        if not settings.exchange.api_key.get_secret_value():
            logger.info(
                "no_api_keys_configured",
                mode="paper",
                note="Public candle data only; orders and balance are simulated.",
            )
        gateway = PaperGateway(exchange_client, settings.trading, settings.paper)
    else:
        from trendbot.execution.live_gateway import LiveGateway

        gateway = LiveGateway(exchange_client, settings.trading)

    engine = IndicatorEngine(settings.indicators)
    aggregator = SignalAggregator(engine, settings.filters)
    risk_manager = RiskManager(settings.risk)
    position_sizer = PositionSizer(settings.trading, settings.risk)

    trade_manager = TradeManager(
        filter_settings=settings.filters,
        gateway=gateway,
        aggregator=aggregator,
        risk_manager=risk_manager,
        position_sizer=position_sizer,
    )

    orchestrator = Orchestrator(
        settings=settings,
        trade_manager=trade_manager,
        risk_manager=risk_manager,
    )

    return {
        "exchange_client": exchange_client,
        "gateway": gateway,
        "engine": engine,
        "aggregator": aggregator,
        "risk_manager": risk_manager,
        "position_sizer": position_sizer,
        "trade_manager": trade_manager,
        "orchestrator": orchestrator,
    }


def _setup_signal_handlers(orchestrator: Orchestrator) -> None:
    """Register SIGINT/SIGTERM to stop the orchestrator gracefully.

    Must be called after the asyncio event loop is running.
    """
    logger = get_logger("trendbot.main")
    loop = asyncio.get_running_loop()

    def _graceful_handler() -> None:
        logger.info("graceful_shutdown_signal")
        asyncio.create_task(orchestrator.stop())

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, _graceful_handler)


async def run() -> None:
    """Run the trend trading bot until a shutdown signal arrives."""
    settings = AppSettings()

    setup_logging(settings.log_level, settings.log_format)
    structlog.contextvars.bind_contextvars(
        symbol=settings.trading.symbol, mode=settings.trading.mode
    )
    logger = get_logger("trendbot.main")

    components = _build_components(settings)
    _setup_signal_handlers(components["orchestrator"])

    logger.info(
        "trendbot_starting",
        mode=settings.trading.mode,
        symbol=settings.trading.symbol,
        timeframe=settings.trading.timeframe,
        required_candles=components["engine"].required_candles(),
        max_positions=settings.risk.max_positions,
        max_daily_loss=str(settings.risk.max_daily_loss),
    )

    try:
        await components["exchange_client"].connect()
        await components["orchestrator"].start()
    finally:
        await components["exchange_client"].close()
        logger.info("trendbot_stopped")


def main() -> None:
    """Synchronous entry point."""
    asyncio.run(run())


if __name__ == "__main__":
    main()
