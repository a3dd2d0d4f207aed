from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from scenario_trace.domain.entities import ScenarioCatalog, ServiceConfig, UnitTest


class DiscovererProtocol(Protocol):
    """One binding per test-declaration convention."""

    convention: str

    def can_handle(self, language: str, framework: str) -> bool: ...

    def discover(self, service: "ServiceConfig") -> list["UnitTest"]:
        """Scan the service's test directory and return every declared test."""
        ...

    def extract_test_metadata(
        self, file_path: str, service: "ServiceConfig | None" = None
    ) -> list["UnitTest"]:
        """Run recognition and transform on a single file."""
        ...


class DiscovererRegistryProtocol(Protocol):
    def get_discoverer(self, language: str, framework: str) -> DiscovererProtocol: ...
    def is_supported(self, language: str, framework: str) -> bool: ...


class CatalogLoaderProtocol(Protocol):
    def load(self, path: str) -> "ScenarioCatalog": ...


class TelemetryPort(Protocol):
    """Protocol for telemetry/UI updates."""

    def step(self, message: str) -> None: ...
    def error(self, message: str) -> None: ...
    def warning(self, message: str) -> None: ...
    def debug(self, message: str) -> None: ...
    def handshake(self) -> None: ...


class FileSystemProtocol(Protocol):
    """Protocol for filesystem operations - abstracts Path usage."""

    def resolve_path(self, path: str) -> str:
        """Resolve and normalize a path string."""
        ...

    def is_directory(self, path: str) -> bool:
        """Check if path is a directory."""
        ...

    def join_path(self, *paths: str) -> str:
        """Join path components into a single path string."""
        ...

    def relative_path(self, path: str, start: str) -> str:
        """Express path relative to start, using forward slashes."""
        ...

    def glob_files(self, root: str, patterns: list[str]) -> list[str]:
        """Files under root matching any of the glob patterns, sorted and de-duplicated."""
        ...

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        """Read a text file."""
        ...

    def write_text(self, path: str, content: str, encoding: str = "utf-8") -> None:
        """Write text content to a file."""
        ...
