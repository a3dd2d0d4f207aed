"""Use Case: Analyze Coverage - discovery, mapping, orphans and statistics in one pass."""

from collections.abc import Sequence

from scenario_trace.domain.entities import (
    AnalysisResult,
    ScenarioCatalog,
    ServiceConfig,
    UnitTest,
)
from scenario_trace.domain.gaps import GapExplainer
from scenario_trace.domain.orphans import OrphanCategorizer
from scenario_trace.domain.protocols import TelemetryPort
from scenario_trace.use_cases.calculate_statistics import StatisticsAggregator
from scenario_trace.use_cases.discover_tests import DiscoverTestsUseCase
from scenario_trace.use_cases.map_scenarios import ScenarioMapper


class AnalyzeCoverageUseCase:
    """Orchestrate one analysis run and return its AnalysisResult."""

    def __init__(
        self,
        discover_tests: DiscoverTestsUseCase,
        telemetry: TelemetryPort,
        categorizer: OrphanCategorizer | None = None,
    ) -> None:
        self.discover_tests = discover_tests
        self.telemetry = telemetry
        self.categorizer = categorizer or OrphanCategorizer()

    def execute(
        self, catalog: ScenarioCatalog, services: Sequence[ServiceConfig]
    ) -> AnalysisResult:
        """
        Run the whole pipeline.

        Steps run strictly in order: discovery completes before mapping, and
        orphans are computed from the ledger of the finished mapping pass.
        """
        self.telemetry.step(f"Discovering tests in {len(services)} service(s)...")
        tests = self.discover_tests.execute(services)
        return self.analyze(catalog, tests)

    def analyze(self, catalog: ScenarioCatalog, tests: Sequence[UnitTest]) -> AnalysisResult:
        """Map already-discovered tests against the catalog."""
        self.telemetry.step(f"Mapping {len(catalog)} scenario(s) against {len(tests)} test(s)...")
        mapper = ScenarioMapper(GapExplainer(catalog.gap_templates))
        run = mapper.map_run(catalog.scenarios, tests)
        orphans = run.orphans(tests)
        statistics = StatisticsAggregator.calculate_statistics(run.mappings)
        orphan_analysis = self.categorizer.categorize(orphans)

        self.telemetry.step(
            f"Coverage: {statistics.coverage_percent}% "
            f"({statistics.fully_covered} fully, {statistics.partially_covered} partially, "
            f"{statistics.not_covered} not covered); {len(orphans)} orphan test(s)"
        )
        return AnalysisResult(
            tests=tuple(tests),
            mappings=run.mappings,
            orphan_tests=tuple(orphans),
            statistics=statistics,
            orphan_analysis=orphan_analysis,
        )
