"""Gap explanations: a template table keyed by scenario id plus a default rule."""

from collections.abc import Mapping

from scenario_trace.domain.constants import (
    COVERED_MULTIPLE_TESTS,
    COVERED_PARTIAL_SCENARIO,
    COVERED_SINGLE_TEST,
    EXPECTED_NO_COVERAGE,
    INCOMPLETE_VALIDATION,
    NO_COVERAGE_FOUND,
    UNEXPECTEDLY_COVERED,
)
from scenario_trace.domain.entities import CoverageStatus, ExpectedCoverage, Scenario


class GapExplainer:
    """
    Produces the human-readable rationale attached to each ScenarioMapping.

    Templates are looked up by scenario id: first the catalog-level table, then
    the scenario's own gap_template. Templates are only consulted for gaps;
    fully covered scenarios always get the fixed "None." explanations.
    """

    def __init__(self, templates: Mapping[str, str] | None = None) -> None:
        self._templates: dict[str, str] = dict(templates or {})

    def template_for(self, scenario: Scenario) -> str | None:
        """Return the configured template for a scenario, if any."""
        return self._templates.get(scenario.id) or scenario.gap_template

    def explain(
        self, scenario: Scenario, status: CoverageStatus, match_count: int
    ) -> str:
        if status is CoverageStatus.FULLY_COVERED:
            return self.explain_covered(scenario, match_count)
        template = self.template_for(scenario)
        if template:
            return template
        return self.default_explanation(scenario, status, match_count)

    @staticmethod
    def explain_covered(scenario: Scenario, match_count: int) -> str:
        if scenario.expected_coverage is ExpectedCoverage.NONE:
            return UNEXPECTEDLY_COVERED
        if scenario.expected_coverage is ExpectedCoverage.PARTIAL:
            return COVERED_PARTIAL_SCENARIO
        if match_count == 1:
            return COVERED_SINGLE_TEST
        return COVERED_MULTIPLE_TESTS

    @staticmethod
    def default_explanation(
        scenario: Scenario, status: CoverageStatus, match_count: int
    ) -> str:
        """Fallback rule used when no template is configured for a gap."""
        if match_count == 0:
            if scenario.expected_coverage is ExpectedCoverage.NONE:
                return EXPECTED_NO_COVERAGE
            return NO_COVERAGE_FOUND
        if status is CoverageStatus.PARTIALLY_COVERED:
            return INCOMPLETE_VALIDATION
        return NO_COVERAGE_FOUND
