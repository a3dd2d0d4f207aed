"""JavaScript / TypeScript test discovery (jest, mocha, jasmine, vitest)."""

import re

from scenario_trace.infrastructure.discoverers.base import BaseDiscoverer, Declaration

_MODIFIER = r"(?:\.(?:only|skip|concurrent|todo))?"
_TITLE = r"\s*\(\s*(['\"`])(?P<title>.+?)(?<!\\)\1"
_TEST_CALL = re.compile(rf"(?<![\w.$])(?:x|f)?(?:it|test){_MODIFIER}{_TITLE}")
_SUITE_CALL = re.compile(rf"(?<![\w.$])(?:x|f)?(?:describe|context|suite){_MODIFIER}{_TITLE}")
_WHITESPACE = re.compile(r"\s+")


class JestDiscoverer(BaseDiscoverer):
    """`it('...')` / `test('...')` declarations grouped by `describe('...')`."""

    convention = "jest"
    languages = frozenset({"typescript", "javascript"})
    frameworks = frozenset({"jest", "mocha", "jasmine", "vitest"})
    default_framework = "jest"
    default_patterns = (
        "**/*.test.ts",
        "**/*.spec.ts",
        "**/*.test.tsx",
        "**/*.spec.tsx",
        "**/*.test.js",
        "**/*.spec.js",
    )

    def scan(self, content: str, file_path: str) -> list[Declaration]:
        declarations: list[Declaration] = []
        suite: str | None = None
        for line_number, line in enumerate(content.splitlines(), start=1):
            stripped = line.lstrip()
            if stripped.startswith(("//", "*", "/*")):
                continue
            # Several calls on one line are taken left to right.
            events = [(m.start(), True, m) for m in _SUITE_CALL.finditer(line)]
            events += [(m.start(), False, m) for m in _TEST_CALL.finditer(line)]
            for _, is_suite, match in sorted(events, key=lambda e: e[0]):
                title = self.describe(match.group("title"))
                if is_suite:
                    suite = title
                else:
                    declarations.append(Declaration(title, line_number, suite))
        return declarations

    @staticmethod
    def describe(title: str) -> str:
        return _WHITESPACE.sub(" ", title).strip()
