"""JVM test discovery (JUnit 4/5, TestNG) for Java and Kotlin sources."""

import re

from scenario_trace.domain.constants import DISPLAY_NAME_LOOKBACK
from scenario_trace.infrastructure.discoverers.base import BaseDiscoverer, Declaration

_CLASS_DECL = re.compile(
    r"^\s*(?:@\w+(?:\([^)]*\))?\s+)*"
    r"(?:(?:public|protected|private|abstract|final|static|open|internal|inner|data)\s+)*"
    r"class\s+(\w+)"
)
_TEST_ANNOTATION = re.compile(r"@(?:Test|ParameterizedTest|RepeatedTest)\b")
_DISPLAY_NAME = re.compile(r'@DisplayName\s*\(\s*"((?:[^"\\]|\\.)*)"\s*\)')
_JAVA_METHOD = re.compile(r"\bvoid\s+(\w+)\s*\(")
_KOTLIN_METHOD = re.compile(r"\bfun\s+(?:`([^`]+)`|(\w+))\s*\(")
_PREFIXES = (re.compile(r"^test_?", re.IGNORECASE), re.compile(r"^should_?", re.IGNORECASE),
             re.compile(r"^when_?", re.IGNORECASE))


class JUnitDiscoverer(BaseDiscoverer):
    """
    A test is a method declaration preceded by @Test, @ParameterizedTest or
    @RepeatedTest. The reported line is the annotation's line.

    A @DisplayName found within DISPLAY_NAME_LOOKBACK lines above the method
    declaration replaces the derived description. Kotlin backtick names are
    used verbatim.
    """

    convention = "junit"
    languages = frozenset({"java", "kotlin"})
    frameworks = frozenset({"junit", "junit4", "junit5", "testng"})
    default_framework = "junit"
    default_patterns = ("**/*Test.java", "**/*Tests.java", "**/*Test.kt", "**/*Tests.kt")

    def scan(self, content: str, file_path: str) -> list[Declaration]:
        lines = content.splitlines()
        declarations: list[Declaration] = []
        suite: str | None = None
        pending_line: int | None = None
        lookback_floor = -1

        for index, line in enumerate(lines):
            class_match = _CLASS_DECL.match(line)
            if class_match:
                suite = class_match.group(1)
                pending_line = None
                lookback_floor = index
                continue

            annotation = _TEST_ANNOTATION.search(line)
            if annotation:
                pending_line = index + 1
                line = line[annotation.end():]

            if pending_line is None:
                continue
            method_name = self._method_name(line)
            if method_name is None:
                continue

            display_name = self._display_name(lines, index, lookback_floor)
            declarations.append(
                Declaration(
                    description=display_name or self.describe(method_name),
                    line_number=pending_line,
                    suite=suite,
                )
            )
            pending_line = None
            lookback_floor = index
        return declarations

    @staticmethod
    def _method_name(line: str) -> str | None:
        java = _JAVA_METHOD.search(line)
        if java:
            return java.group(1)
        kotlin = _KOTLIN_METHOD.search(line)
        if kotlin:
            return kotlin.group(1) or kotlin.group(2)
        return None

    @staticmethod
    def _display_name(lines: list[str], method_index: int, lookback_floor: int) -> str | None:
        start = max(lookback_floor + 1, method_index - DISPLAY_NAME_LOOKBACK)
        for candidate in reversed(lines[start:method_index + 1]):
            match = _DISPLAY_NAME.search(candidate)
            if match:
                return match.group(1).strip()
        return None

    @staticmethod
    def describe(name: str) -> str:
        """shouldCreateUserSuccessfully -> "Create User Successfully"."""
        if " " in name:
            return name.strip()
        stripped = name
        for prefix in _PREFIXES:
            stripped = prefix.sub("", stripped)
        return BaseDiscoverer.humanize(stripped or name)
