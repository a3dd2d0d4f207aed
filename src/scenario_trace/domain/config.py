"""Configuration for scenario-trace. Immutable value object created by Infrastructure."""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path

from scenario_trace.domain.constants import DEFAULT_CATALOG_PATH, DEFAULT_MAX_WORKERS
from scenario_trace.domain.entities import ServiceConfig
from scenario_trace.domain.errors import ConfigurationError
from scenario_trace.domain.gate import GateSettings

logger = logging.getLogger(__name__)

_REQUIRED_SERVICE_KEYS: tuple[str, ...] = ("name", "test_directory", "language", "test_framework")


class ConfigurationLoader:
    """
    Typed view over the [tool.scenario-trace] table.

    Domain does not read the filesystem; Infrastructure calls
    ConfigFileLoader.load_config_from_fs() and constructs
    ConfigurationLoader(config_dict) at composition root.

    Example pyproject.toml:

        [tool.scenario-trace]
        catalog = "qa/scenarios.yaml"

        [[tool.scenario-trace.services]]
        name = "onboarding-service"
        path = "."
        test_directory = "test/unit"
        test_pattern = "**/*.test.ts"
        language = "typescript"
        test_framework = "jest"

        [tool.scenario-trace.gate]
        block_on_critical_gaps = true
        max_orphan_tests = 10
    """

    def __init__(self, config_dict: dict[str, object], base_path: str = ".") -> None:
        self._config = config_dict
        self._base_path = base_path

    @property
    def config(self) -> dict[str, object]:
        """Return the loaded configuration."""
        return self._config

    @property
    def base_path(self) -> str:
        """Directory holding the pyproject.toml the config came from."""
        return self._base_path

    @property
    def catalog_path(self) -> str:
        raw = self._config.get("catalog", DEFAULT_CATALOG_PATH)
        return str(raw) if raw else DEFAULT_CATALOG_PATH

    @property
    def max_workers(self) -> int:
        raw = self._config.get("max_workers", DEFAULT_MAX_WORKERS)
        if isinstance(raw, int) and not isinstance(raw, bool) and raw > 0:
            return raw
        logger.warning(
            "Configuration Warning: 'max_workers' must be a positive integer, using %d",
            DEFAULT_MAX_WORKERS,
        )
        return DEFAULT_MAX_WORKERS

    @property
    def services(self) -> list[ServiceConfig]:
        """Enabled services, in configured order. Malformed entries are skipped with a warning."""
        raw = self._config.get("services", [])
        if not isinstance(raw, list):
            raise ConfigurationError("'services' must be an array of tables")
        services: list[ServiceConfig] = []
        for index, entry in enumerate(raw):
            try:
                services.append(self.parse_service(entry, index))
            except ConfigurationError as exc:
                logger.warning("Configuration Warning: skipping service. %s", exc)
        # Relative service paths are anchored at the directory of pyproject.toml.
        return [
            replace(s, path=str(Path(self._base_path) / s.path))
            for s in services
            if s.enabled
        ]

    def get_service(self, name: str) -> ServiceConfig:
        for service in self.services:
            if service.name == name:
                return service
        raise ConfigurationError(f"No enabled service named '{name}'", service=name)

    @staticmethod
    def parse_service(entry: object, index: int = 0) -> ServiceConfig:
        """Build a ServiceConfig from one [[services]] table."""
        if not isinstance(entry, dict):
            raise ConfigurationError(f"Service entry #{index} must be a table")
        missing = [k for k in _REQUIRED_SERVICE_KEYS if not entry.get(k)]
        name = str(entry.get("name") or f"#{index}")
        if missing:
            raise ConfigurationError(
                f"Service '{name}' is missing required keys: {', '.join(missing)}",
                service=name,
            )
        pattern = entry.get("test_pattern")
        return ServiceConfig(
            name=name,
            path=str(entry.get("path") or "."),
            test_directory=str(entry["test_directory"]),
            language=str(entry["language"]).lower(),
            test_framework=str(entry["test_framework"]).lower(),
            test_pattern=str(pattern) if pattern else None,
            enabled=bool(entry.get("enabled", True)),
        )

    @property
    def gate_settings(self) -> GateSettings:
        raw = self._config.get("gate", {})
        gate = raw if isinstance(raw, dict) else {}
        max_orphans = gate.get("max_orphan_tests")
        return GateSettings(
            block_on_critical_gaps=bool(gate.get("block_on_critical_gaps", True)),
            block_on_high_priority_gaps=bool(gate.get("block_on_high_priority_gaps", False)),
            max_orphan_tests=(
                max_orphans if isinstance(max_orphans, int) and max_orphans >= 0 else None
            ),
            minimum_coverage_percent=int(gate.get("minimum_coverage_percent", 0) or 0),
        )
