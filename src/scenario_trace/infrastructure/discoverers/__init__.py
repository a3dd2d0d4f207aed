"""Per-convention test discoverers."""

from scenario_trace.infrastructure.discoverers.base import BaseDiscoverer, Declaration
from scenario_trace.infrastructure.discoverers.go_discoverer import GoTestDiscoverer
from scenario_trace.infrastructure.discoverers.jest_discoverer import JestDiscoverer
from scenario_trace.infrastructure.discoverers.junit_discoverer import JUnitDiscoverer
from scenario_trace.infrastructure.discoverers.pytest_discoverer import PytestDiscoverer
from scenario_trace.infrastructure.discoverers.registry import DiscovererRegistry

__all__ = [
    "BaseDiscoverer",
    "Declaration",
    "DiscovererRegistry",
    "GoTestDiscoverer",
    "JUnitDiscoverer",
    "JestDiscoverer",
    "PytestDiscoverer",
]
