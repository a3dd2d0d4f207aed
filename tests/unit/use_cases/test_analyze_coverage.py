"""Unit tests for AnalyzeCoverageUseCase."""

import json
from pathlib import Path
from unittest.mock import Mock

from scenario_trace.domain.entities import (
    CoverageStatus,
    ExpectedCoverage,
    ScenarioCatalog,
    ServiceConfig,
)
from scenario_trace.infrastructure.discoverers import DiscovererRegistry
from scenario_trace.use_cases.analyze_coverage import AnalyzeCoverageUseCase
from scenario_trace.use_cases.discover_tests import DiscoverTestsUseCase


class TestAnalyzeCoverageUseCase:
    """End-to-end pass over discovered tests."""

    def test_analyze_with_preloaded_tests(self, make_scenario, make_test) -> None:
        catalog = ScenarioCatalog(
            scenarios=(
                make_scenario("S1", ["create.*user"]),
                make_scenario("S2", ["password"], expected=ExpectedCoverage.PARTIAL),
            ),
            gap_templates={"S2": "Password reset is only covered end-to-end."},
        )
        tests = [
            make_test("should create a user", line=1),
            make_test("formats dates", line=2),
        ]
        use_case = AnalyzeCoverageUseCase(discover_tests=Mock(), telemetry=Mock())

        result = use_case.analyze(catalog, tests)

        assert [m.coverage_status for m in result.mappings] == [
            CoverageStatus.FULLY_COVERED,
            CoverageStatus.NOT_COVERED,
        ]
        assert result.mappings[1].gap_explanation == "Password reset is only covered end-to-end."
        assert result.orphan_tests == (tests[1],)
        assert result.statistics.coverage_percent == 50
        assert result.orphan_analysis.total_orphans == 1

    def test_execute_discovers_then_maps(self, tmp_path: Path, make_scenario) -> None:
        test_dir = tmp_path / "test"
        test_dir.mkdir()
        (test_dir / "customer.test.ts").write_text(
            "describe('Customers', () => {\n"
            "  it('creates a customer', () => {});\n"
            "  it('renders the footer', () => {});\n"
            "});\n",
            encoding="utf-8",
        )
        service = ServiceConfig(
            name="onboarding",
            path=str(tmp_path),
            test_directory="test",
            language="typescript",
            test_framework="jest",
        )
        catalog = ScenarioCatalog(scenarios=(make_scenario("ONB-1", ["creates a customer"]),))
        telemetry = Mock()
        use_case = AnalyzeCoverageUseCase(
            discover_tests=DiscoverTestsUseCase(DiscovererRegistry.with_defaults(), telemetry),
            telemetry=telemetry,
        )

        result = use_case.execute(catalog, [service])

        assert len(result.tests) == 2
        assert result.mappings[0].matched_tests[0].id == "onboarding::test/customer.test.ts::L2"
        assert [t.description for t in result.orphan_tests] == ["renders the footer"]
        payload = json.loads(json.dumps(result.to_dict()))
        assert set(payload) == {
            "mappings", "orphan_tests", "statistics", "orphan_analysis", "total_tests",
        }
        assert payload["statistics"]["coverage_percent"] == 100
