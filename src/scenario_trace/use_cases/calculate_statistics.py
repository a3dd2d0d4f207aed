"""Use Case: Calculate Statistics - aggregate a mapping list into coverage numbers."""

from collections.abc import Sequence

from scenario_trace.domain.entities import (
    CategoryBreakdown,
    CoverageStatistics,
    CoverageStatus,
    Priority,
    ScenarioMapping,
)


class StatisticsAggregator:
    """Pure aggregation. Every call rebuilds the statistics from the mappings it is given."""

    @staticmethod
    def calculate_statistics(mappings: Sequence[ScenarioMapping]) -> CoverageStatistics:
        total = len(mappings)
        fully = sum(1 for m in mappings if m.coverage_status is CoverageStatus.FULLY_COVERED)
        partially = sum(
            1 for m in mappings if m.coverage_status is CoverageStatus.PARTIALLY_COVERED
        )
        not_covered = sum(1 for m in mappings if m.coverage_status is CoverageStatus.NOT_COVERED)

        by_category: dict[str, CategoryBreakdown] = {}
        gaps_by_priority: dict[str, int] = {}
        gaps_by_risk: dict[str, int] = {}
        for mapping in mappings:
            scenario = mapping.scenario
            current = by_category.get(scenario.category, CategoryBreakdown())
            by_category[scenario.category] = CategoryBreakdown(
                total=current.total + 1,
                covered=current.covered
                + (mapping.coverage_status is CoverageStatus.FULLY_COVERED),
                partial=current.partial
                + (mapping.coverage_status is CoverageStatus.PARTIALLY_COVERED),
                not_covered=current.not_covered
                + (mapping.coverage_status is CoverageStatus.NOT_COVERED),
            )
            if mapping.is_gap:
                priority = scenario.priority.value
                risk = scenario.risk_level.value
                gaps_by_priority[priority] = gaps_by_priority.get(priority, 0) + 1
                gaps_by_risk[risk] = gaps_by_risk.get(risk, 0) + 1

        return CoverageStatistics(
            total=total,
            fully_covered=fully,
            partially_covered=partially,
            not_covered=not_covered,
            coverage_percent=StatisticsAggregator.coverage_percent(fully, total),
            by_category=by_category,
            gaps_by_priority=gaps_by_priority,
            gaps_by_risk=gaps_by_risk,
        )

    @staticmethod
    def coverage_percent(fully_covered: int, total: int) -> int:
        """Half-up rounding of fully/total*100; 0 for an empty run."""
        if total <= 0:
            return 0
        return (fully_covered * 200 + total) // (total * 2)

    @staticmethod
    def critical_gaps(mappings: Sequence[ScenarioMapping]) -> list[ScenarioMapping]:
        """P0 scenarios that are not Fully Covered."""
        return [m for m in mappings if m.is_gap and m.scenario.priority is Priority.P0]

    @staticmethod
    def high_priority_gaps(mappings: Sequence[ScenarioMapping]) -> list[ScenarioMapping]:
        """P1 scenarios that are not Fully Covered."""
        return [m for m in mappings if m.is_gap and m.scenario.priority is Priority.P1]

    @staticmethod
    def all_gaps(mappings: Sequence[ScenarioMapping]) -> list[ScenarioMapping]:
        return [m for m in mappings if m.is_gap]
