"""Tests for component wiring in the entry point."""

from trendbot.config import AppSettings, TradingSettings
from trendbot.execution.live_gateway import LiveGateway
from trendbot.execution.paper_gateway import PaperGateway
from trendbot.main import _build_components
from trendbot.orchestrator import Orchestrator


class TestBuildComponents:
    def test_paper_mode_uses_paper_gateway(self, mock_settings: AppSettings) -> None:
        components = _build_components(mock_settings)

        assert isinstance(components["gateway"], PaperGateway)
        assert isinstance(components["orchestrator"], Orchestrator)
        assert components["engine"].required_candles() == 50

    def test_live_mode_uses_live_gateway(self, mock_settings: AppSettings) -> None:
        settings = mock_settings.model_copy(
            update={"trading": TradingSettings(mode="live")}
        )

        components = _build_components(settings)

        assert isinstance(components["gateway"], LiveGateway)

    def test_shared_risk_manager(self, mock_settings: AppSettings) -> None:
        components = _build_components(mock_settings)

        trade_manager = components["trade_manager"]
        assert trade_manager.risk_state is components["risk_manager"].state
