"""Unit tests for DiscovererRegistry."""

from unittest.mock import Mock

import pytest

from scenario_trace.domain.errors import ConfigurationError
from scenario_trace.infrastructure.discoverers import (
    DiscovererRegistry,
    GoTestDiscoverer,
    JestDiscoverer,
    JUnitDiscoverer,
    PytestDiscoverer,
)


class TestDiscovererRegistry:
    """Dispatch by (language, framework)."""

    @pytest.mark.parametrize(
        ("language", "framework", "expected"),
        [
            ("typescript", "jest", JestDiscoverer),
            ("javascript", "vitest", JestDiscoverer),
            ("java", "junit5", JUnitDiscoverer),
            ("kotlin", "junit", JUnitDiscoverer),
            ("python", "pytest", PytestDiscoverer),
            ("go", "go-test", GoTestDiscoverer),
        ],
    )
    def test_defaults(self, language: str, framework: str, expected: type) -> None:
        registry = DiscovererRegistry.with_defaults()
        assert isinstance(registry.get_discoverer(language, framework), expected)
        assert registry.is_supported(language, framework)

    def test_unknown_combination_raises(self) -> None:
        registry = DiscovererRegistry.with_defaults()
        assert not registry.is_supported("ruby", "rspec")
        with pytest.raises(ConfigurationError, match="ruby"):
            registry.get_discoverer("ruby", "rspec")

    def test_first_registered_wins(self) -> None:
        custom = Mock()
        custom.can_handle.return_value = True
        registry = DiscovererRegistry([custom])
        registry.register(PytestDiscoverer())
        assert registry.get_discoverer("python", "pytest") is custom
        assert len(registry.all()) == 2

    def test_empty_registry(self) -> None:
        with pytest.raises(ConfigurationError, match="Registered conventions: none"):
            DiscovererRegistry().get_discoverer("python", "pytest")
