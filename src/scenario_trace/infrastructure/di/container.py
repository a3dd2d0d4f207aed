from typing import TYPE_CHECKING, Any, cast

from scenario_trace.domain.config import ConfigurationLoader
from scenario_trace.infrastructure.catalog_loader import ScenarioCatalogLoader
from scenario_trace.infrastructure.config_file_loader import ConfigFileLoader
from scenario_trace.infrastructure.discoverers.registry import DiscovererRegistry
from scenario_trace.infrastructure.gateways.filesystem_gateway import FileSystemGateway
from scenario_trace.interface.telemetry import ProjectTelemetry

if TYPE_CHECKING:
    from scenario_trace.domain.protocols import (
        CatalogLoaderProtocol,
        DiscovererRegistryProtocol,
        FileSystemProtocol,
        TelemetryPort,
    )


class ScenarioTraceContainer:
    """Dependency Injection Container for scenario-trace."""

    def __init__(self) -> None:
        self._singletons: dict[str, Any] = {}
        self._register_defaults()

    def _register_defaults(self) -> None:
        """Register default implementations for protocols."""
        config_dict, base_path = ConfigFileLoader.load_config_from_fs()
        self.register_singleton("ConfigurationLoader", ConfigurationLoader(config_dict, base_path))
        self.register_singleton(
            "TelemetryPort", ProjectTelemetry("TRACE", "cyan", "Scenario coverage engine ready")
        )
        filesystem = FileSystemGateway()
        self.register_singleton("FileSystemGateway", filesystem)
        self.register_singleton("DiscovererRegistry", DiscovererRegistry.with_defaults(filesystem))
        self.register_singleton("ScenarioCatalogLoader", ScenarioCatalogLoader())

    def register_singleton(self, key: str, instance: Any) -> None:
        """Register a singleton instance."""
        self._singletons[key] = instance

    def get(self, key: str) -> Any:
        """Retrieve a dependency by key. Prefer explicit get_* methods for type safety."""
        if key in self._singletons:
            return self._singletons[key]
        raise ValueError(f"Dependency '{key}' not registered.")

    def get_config_loader(self) -> ConfigurationLoader:
        return cast(ConfigurationLoader, self.get("ConfigurationLoader"))

    def get_telemetry_port(self) -> "TelemetryPort":
        """Return the telemetry/UI port."""
        return cast("TelemetryPort", self.get("TelemetryPort"))

    def get_filesystem_gateway(self) -> "FileSystemProtocol":
        return cast("FileSystemProtocol", self.get("FileSystemGateway"))

    def get_discoverer_registry(self) -> "DiscovererRegistryProtocol":
        return cast("DiscovererRegistryProtocol", self.get("DiscovererRegistry"))

    def get_catalog_loader(self) -> "CatalogLoaderProtocol":
        return cast("CatalogLoaderProtocol", self.get("ScenarioCatalogLoader"))
