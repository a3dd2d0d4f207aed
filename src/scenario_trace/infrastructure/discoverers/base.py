"""Shared scan loop for all declaration conventions."""

import logging
import re
from dataclasses import dataclass
from pathlib import PurePath

from scenario_trace.domain.entities import ServiceConfig, UnitTest
from scenario_trace.domain.errors import DiscoveryError
from scenario_trace.domain.protocols import DiscovererProtocol, FileSystemProtocol
from scenario_trace.infrastructure.gateways.filesystem_gateway import FileSystemGateway

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[_\-\s]+")
_CASE_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_UNKNOWN_SERVICE = "unknown"


@dataclass(frozen=True)
class Declaration:
    """A recognized test declaration before it is turned into a UnitTest."""
    description: str
    line_number: int
    suite: str | None = None


class BaseDiscoverer(DiscovererProtocol):
    """
    Template for one declaration convention.

    Subclasses set the class attributes and implement scan(); everything else
    (file selection, partial-failure policy, id derivation) lives here so the
    bulk path and extract_test_metadata() share a single code path.
    """

    convention: str = ""
    languages: frozenset[str] = frozenset()
    frameworks: frozenset[str] = frozenset()
    default_framework: str = ""
    default_patterns: tuple[str, ...] = ()

    def __init__(self, filesystem: FileSystemProtocol | None = None) -> None:
        self._fs = filesystem or FileSystemGateway()

    def can_handle(self, language: str, framework: str) -> bool:
        return language.lower() in self.languages and framework.lower() in self.frameworks

    def file_patterns(self, service: ServiceConfig) -> list[str]:
        """Configured glob (made recursive) or the convention's defaults."""
        if not service.test_pattern:
            return list(self.default_patterns)
        pattern = service.test_pattern.replace("\\", "/")
        if "**" not in pattern:
            pattern = f"**/{pattern.lstrip('/')}"
        return [pattern]

    def discover(self, service: ServiceConfig) -> list[UnitTest]:
        test_dir = self._fs.join_path(service.path, service.test_directory)
        if not self._fs.is_directory(test_dir):
            logger.warning(
                "%s: 0 tests (test directory not found: %s)", service.name, test_dir
            )
            return []

        try:
            files = self._fs.glob_files(test_dir, self.file_patterns(service))
        except (OSError, ValueError) as exc:
            logger.warning("%s: 0 tests (cannot list test files: %s)", service.name, exc)
            return []

        tests: list[UnitTest] = []
        for file_path in files:
            try:
                tests.extend(self.extract_test_metadata(file_path, service))
            except DiscoveryError as exc:
                logger.warning("%s: skipping file. %s", service.name, exc)
        logger.debug("%s: %d test(s) via %s", service.name, len(tests), self.convention)
        return tests

    def extract_test_metadata(
        self, file_path: str, service: ServiceConfig | None = None
    ) -> list[UnitTest]:
        """
        Recognize and transform the declarations of a single file.

        Raises DiscoveryError when the file cannot be read or parsed, or holds
        no recognizable declaration.
        """
        try:
            content = self._fs.read_text(file_path)
        except (OSError, UnicodeDecodeError) as exc:
            raise DiscoveryError(file_path, str(exc)) from exc

        declarations = self.scan(content, file_path)
        if not declarations:
            raise DiscoveryError(file_path, "no recognizable test declarations")

        if service is not None:
            owner = service.name
            source_file = self._fs.relative_path(file_path, service.path)
            framework = service.test_framework
        else:
            owner = _UNKNOWN_SERVICE
            source_file = PurePath(file_path).name
            framework = self.default_framework

        tests: list[UnitTest] = []
        per_line: dict[int, int] = {}
        for decl in declarations:
            ordinal = per_line.get(decl.line_number, 0)
            per_line[decl.line_number] = ordinal + 1
            tests.append(
                UnitTest(
                    id=self.build_test_id(owner, source_file, decl.line_number, ordinal),
                    owning_service=owner,
                    source_file=source_file,
                    file_path=file_path,
                    description=decl.description,
                    suite=decl.suite,
                    declaration_convention=self.convention,
                    test_framework=framework,
                    line_number=decl.line_number,
                )
            )
        return tests

    def scan(self, content: str, file_path: str) -> list[Declaration]:
        """Return declarations in source order. Implemented per convention."""
        raise NotImplementedError

    @staticmethod
    def build_test_id(owner: str, source_file: str, line_number: int, ordinal: int = 0) -> str:
        """service::relative/file::L<line>, with #<n> for extra declarations on one line."""
        test_id = f"{owner}::{source_file}::L{line_number}"
        if ordinal:
            test_id += f"#{ordinal + 1}"
        return test_id

    @staticmethod
    def humanize(identifier: str, lowercase: bool = False) -> str:
        """
        Split a compound identifier into words and capitalize the first letter.

        create_user_with_valid_data -> "Create user with valid data"
        CreateUserWithValidData     -> "Create User With Valid Data"
        """
        words = [
            word
            for chunk in _SEPARATORS.split(identifier)
            for word in _CASE_BOUNDARY.split(chunk)
            if word
        ]
        text = " ".join(words)
        if lowercase:
            text = text.lower()
        return text[:1].upper() + text[1:]
