"""Go test discovery (`go test`)."""

import re

from scenario_trace.infrastructure.discoverers.base import BaseDiscoverer, Declaration

_TEST_FUNC = re.compile(r"^func\s+(Test(?![a-z])\w*)\s*\(\s*\w+\s+\*testing\.T\s*\)")


class GoTestDiscoverer(BaseDiscoverer):
    """Top-level `func TestXxx(t *testing.T)` declarations. Go has no group marker."""

    convention = "go-test"
    languages = frozenset({"go", "golang"})
    frameworks = frozenset({"go-test", "testing", "go"})
    default_framework = "go-test"
    default_patterns = ("**/*_test.go",)

    def scan(self, content: str, file_path: str) -> list[Declaration]:
        declarations: list[Declaration] = []
        for line_number, line in enumerate(content.splitlines(), start=1):
            match = _TEST_FUNC.match(line)
            if match:
                declarations.append(Declaration(self.describe(match.group(1)), line_number))
        return declarations

    @staticmethod
    def describe(name: str) -> str:
        """TestUserCreation_InvalidEmail -> "User creation invalid email"."""
        stripped = name[len("Test"):].lstrip("_") or name
        return BaseDiscoverer.humanize(stripped, lowercase=True)
