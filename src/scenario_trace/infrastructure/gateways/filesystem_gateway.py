"""Filesystem Gateway - Infrastructure implementation of FileSystemProtocol."""

import logging
from pathlib import Path

from scenario_trace.domain.constants import IGNORED_DIRECTORIES
from scenario_trace.domain.protocols import FileSystemProtocol

logger = logging.getLogger(__name__)


class FileSystemGateway(FileSystemProtocol):
    """Infrastructure implementation of FileSystemProtocol using pathlib."""

    def resolve_path(self, path: str) -> str:
        """Resolve and normalize a path string."""
        return str(Path(path).resolve())

    def is_directory(self, path: str) -> bool:
        """Check if path is a directory."""
        return Path(path).is_dir()

    def join_path(self, *paths: str) -> str:
        """Join path components into a single path string."""
        return str(Path(*paths))

    def relative_path(self, path: str, start: str) -> str:
        """Express path relative to start, using forward slashes."""
        try:
            return Path(path).resolve().relative_to(Path(start).resolve()).as_posix()
        except ValueError:
            return Path(path).as_posix()

    def glob_files(self, root: str, patterns: list[str]) -> list[str]:
        """Files under root matching any pattern, sorted, skipping vendored and tool directories."""
        root_obj = Path(root).resolve()
        found: set[str] = set()
        for pattern in patterns:
            for candidate in root_obj.glob(pattern):
                if not candidate.is_file():
                    continue
                parts = candidate.relative_to(root_obj).parts[:-1]
                skipped = next((part for part in parts if part in IGNORED_DIRECTORIES), None)
                if skipped is not None:
                    logger.debug("Skipping %s (inside %s/)", candidate, skipped)
                    continue
                found.add(str(candidate))
        return sorted(found)

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        """Read a text file."""
        return Path(path).read_text(encoding=encoding)

    def write_text(self, path: str, content: str, encoding: str = "utf-8") -> None:
        """Write text content to a file, creating parent directories."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding=encoding)
