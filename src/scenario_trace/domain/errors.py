"""Exception hierarchy for scenario-trace.

- ScenarioTraceError (base)
- DiscoveryError: a single test file could not be read or parsed
- ConfigurationError: a service or convention is misconfigured
- CatalogError: the scenario catalog is malformed
- MappingError: the mapper was used out of order
"""

__all__ = [
    "ScenarioTraceError",
    "DiscoveryError",
    "ConfigurationError",
    "CatalogError",
    "MappingError",
]


class ScenarioTraceError(Exception):
    """Base class for all scenario-trace errors."""


class DiscoveryError(ScenarioTraceError):
    """A test file could not be read, parsed, or held no recognizable declarations.

    Bulk discovery catches this, logs a warning and moves on to the next file.
    """

    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(f"Cannot discover tests in {file_path}: {reason}")
        self.file_path = file_path
        self.reason = reason


class ConfigurationError(ScenarioTraceError):
    """Discovery configuration is unusable for one service.

    The analysis logs a warning and treats the service as having zero tests.
    """

    def __init__(self, message: str, *, service: str | None = None) -> None:
        super().__init__(message)
        self.service = service


class CatalogError(ScenarioTraceError):
    """The scenario catalog failed validation.

    Raised at load time, before any mapping begins. Carries every problem found
    so a catalog author can fix them in one pass.
    """

    def __init__(self, message: str, *, problems: list[str] | None = None) -> None:
        self.problems = list(problems or [])
        if self.problems:
            message = message + ":\n" + "\n".join(f"  - {p}" for p in self.problems)
        super().__init__(message)


class MappingError(ScenarioTraceError):
    """The mapper was asked for orphans before a mapping pass completed."""
