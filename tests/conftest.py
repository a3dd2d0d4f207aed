"""Shared fixtures.

Run pytest from the project root; pythonpath in pyproject.toml puts src/ on
the import path.
"""

from collections.abc import Callable

import pytest

from scenario_trace.domain.entities import (
    ExpectedCoverage,
    MatchPattern,
    Priority,
    RiskLevel,
    Scenario,
    UnitTest,
)


@pytest.fixture
def make_test() -> Callable[..., UnitTest]:
    """Factory for UnitTest records with a stable id derived from the line number."""

    def _make(
        description: str,
        line: int = 1,
        service: str = "svc",
        source_file: str = "test/sample.test.ts",
        suite: str | None = None,
    ) -> UnitTest:
        return UnitTest(
            id=f"{service}::{source_file}::L{line}",
            owning_service=service,
            source_file=source_file,
            file_path=f"/repo/{service}/{source_file}",
            description=description,
            suite=suite,
            declaration_convention="jest",
            test_framework="jest",
            line_number=line,
        )

    return _make


@pytest.fixture
def make_scenario() -> Callable[..., Scenario]:
    """Factory for Scenario records with regex match patterns."""

    def _make(
        scenario_id: str,
        patterns: list[str],
        expected: ExpectedCoverage = ExpectedCoverage.FULL,
        priority: Priority = Priority.P2,
        risk: RiskLevel = RiskLevel.MEDIUM,
        category: str = "General",
        gap_template: str | None = None,
    ) -> Scenario:
        return Scenario(
            id=scenario_id,
            description=f"Scenario {scenario_id}",
            category=category,
            priority=priority,
            risk_level=risk,
            expected_coverage=expected,
            match_patterns=tuple(MatchPattern.from_regex(p) for p in patterns),
            gap_template=gap_template,
        )

    return _make
