"""Python test discovery (pytest / unittest) using astroid."""

import re

import astroid
from astroid import nodes
from astroid.exceptions import AstroidBuildingError

from scenario_trace.domain.errors import DiscoveryError
from scenario_trace.infrastructure.discoverers.base import BaseDiscoverer, Declaration

_TEST_PREFIX = re.compile(r"^test(?:_|(?=[A-Z0-9])|$)")


class PytestDiscoverer(BaseDiscoverer):
    """
    Recognizes `def test_*` and `async def test_*` functions.

    The module is parsed with astroid rather than scanned line by line, so
    strings and comments that merely look like declarations are ignored. Each
    ClassDef is a group marker; a module-level test after a class keeps that
    class as its suite, matching the line-order rule of the other conventions.
    """

    convention = "pytest"
    languages = frozenset({"python"})
    frameworks = frozenset({"pytest", "unittest"})
    default_framework = "pytest"
    default_patterns = ("**/test_*.py", "**/*_test.py")

    def scan(self, content: str, file_path: str) -> list[Declaration]:
        try:
            module = astroid.parse(content, path=file_path)
        except AstroidBuildingError as exc:
            raise DiscoveryError(file_path, f"invalid Python source ({exc})") from exc

        definitions = sorted(
            module.nodes_of_class((nodes.ClassDef, nodes.FunctionDef)),
            key=lambda node: (node.lineno or 0, node.col_offset or 0),
        )
        declarations: list[Declaration] = []
        suite: str | None = None
        for node in definitions:
            if isinstance(node, nodes.ClassDef):
                suite = node.name
                continue
            if not _TEST_PREFIX.match(node.name):
                continue
            declarations.append(
                Declaration(
                    description=self.describe(node.name),
                    line_number=node.lineno,
                    suite=suite,
                )
            )
        return declarations

    @staticmethod
    def describe(name: str) -> str:
        """test_user_creation_with_valid_data -> "User creation with valid data"."""
        stripped = _TEST_PREFIX.sub("", name) or name
        return BaseDiscoverer.humanize(stripped)
