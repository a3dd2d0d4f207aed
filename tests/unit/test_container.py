"""Unit tests for the DI container and the composition root."""

from unittest.mock import MagicMock, patch

import pytest

from scenario_trace.domain.config import ConfigurationLoader
from scenario_trace.infrastructure.catalog_loader import ScenarioCatalogLoader
from scenario_trace.infrastructure.di.container import ScenarioTraceContainer
from scenario_trace.infrastructure.discoverers import DiscovererRegistry
from scenario_trace.interface.telemetry import ProjectTelemetry


class TestScenarioTraceContainer:
    """Default registrations."""

    @patch(
        "scenario_trace.infrastructure.di.container.ConfigFileLoader.load_config_from_fs",
        return_value=({"catalog": "qa/c.yaml"}, "/repo"),
    )
    def test_defaults_are_registered(self, _mock_load: MagicMock) -> None:
        container = ScenarioTraceContainer()

        config_loader = container.get_config_loader()
        assert isinstance(config_loader, ConfigurationLoader)
        assert config_loader.catalog_path == "qa/c.yaml"
        assert config_loader.base_path == "/repo"
        assert isinstance(container.get_telemetry_port(), ProjectTelemetry)
        assert isinstance(container.get_discoverer_registry(), DiscovererRegistry)
        assert isinstance(container.get_catalog_loader(), ScenarioCatalogLoader)

    @patch(
        "scenario_trace.infrastructure.di.container.ConfigFileLoader.load_config_from_fs",
        return_value=({}, "."),
    )
    def test_unknown_key_raises(self, _mock_load: MagicMock) -> None:
        with pytest.raises(ValueError, match="not registered"):
            ScenarioTraceContainer().get("Nope")


def test_main_wires_dependencies_and_runs_app() -> None:
    with patch("scenario_trace.__main__.ScenarioTraceContainer") as mock_container, \
         patch("scenario_trace.__main__.CLIAppFactory") as mock_factory:
        from scenario_trace.__main__ import main

        main()

        mock_container.assert_called_once()
        deps = mock_factory.create_app.call_args.args[0]
        assert deps.telemetry is mock_container.return_value.get_telemetry_port.return_value
        mock_factory.create_app.return_value.assert_called_once()
