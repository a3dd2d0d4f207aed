"""Ordered registry of declaration-convention discoverers."""

from scenario_trace.domain.errors import ConfigurationError
from scenario_trace.domain.protocols import (
    DiscovererProtocol,
    DiscovererRegistryProtocol,
    FileSystemProtocol,
)
from scenario_trace.infrastructure.discoverers.go_discoverer import GoTestDiscoverer
from scenario_trace.infrastructure.discoverers.jest_discoverer import JestDiscoverer
from scenario_trace.infrastructure.discoverers.junit_discoverer import JUnitDiscoverer
from scenario_trace.infrastructure.discoverers.pytest_discoverer import PytestDiscoverer


class DiscovererRegistry(DiscovererRegistryProtocol):
    """First registered discoverer whose can_handle() accepts wins."""

    def __init__(self, discoverers: list[DiscovererProtocol] | None = None) -> None:
        self._discoverers: list[DiscovererProtocol] = list(discoverers or [])

    @classmethod
    def with_defaults(cls, filesystem: FileSystemProtocol | None = None) -> "DiscovererRegistry":
        return cls(
            [
                JestDiscoverer(filesystem),
                JUnitDiscoverer(filesystem),
                PytestDiscoverer(filesystem),
                GoTestDiscoverer(filesystem),
            ]
        )

    def register(self, discoverer: DiscovererProtocol) -> None:
        self._discoverers.append(discoverer)

    def all(self) -> list[DiscovererProtocol]:
        return list(self._discoverers)

    def is_supported(self, language: str, framework: str) -> bool:
        return any(d.can_handle(language, framework) for d in self._discoverers)

    def get_discoverer(self, language: str, framework: str) -> DiscovererProtocol:
        for discoverer in self._discoverers:
            if discoverer.can_handle(language, framework):
                return discoverer
        supported = ", ".join(d.convention for d in self._discoverers) or "none"
        raise ConfigurationError(
            f"No test discoverer for language '{language}' with framework '{framework}'. "
            f"Registered conventions: {supported}"
        )
