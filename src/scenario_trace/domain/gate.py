"""Quality gate: decides whether an analysis run should fail the calling pipeline."""

from dataclasses import dataclass

from scenario_trace.domain.entities import AnalysisResult, Priority


@dataclass(frozen=True)
class GateSettings:
    """Thresholds read from [tool.scenario-trace.gate]."""
    block_on_critical_gaps: bool = True
    block_on_high_priority_gaps: bool = False
    max_orphan_tests: int | None = None
    minimum_coverage_percent: int = 0


class QualityGate:
    """Evaluates an AnalysisResult against GateSettings."""

    @staticmethod
    def evaluate(result: AnalysisResult, settings: GateSettings) -> str | None:
        """
        Return the first blocking reason, or None when the run passes.

        Priority order: critical gaps > high priority gaps > orphan threshold >
        minimum coverage.
        """
        gaps = [m for m in result.mappings if m.is_gap]
        critical = [m for m in gaps if m.scenario.priority is Priority.P0]
        high = [m for m in gaps if m.scenario.priority is Priority.P1]

        if settings.block_on_critical_gaps and critical:
            ids = ", ".join(m.scenario.id for m in critical)
            return f"critical_gaps: {len(critical)} P0 scenario(s) not fully covered ({ids})"
        if settings.block_on_high_priority_gaps and high:
            ids = ", ".join(m.scenario.id for m in high)
            return f"high_priority_gaps: {len(high)} P1 scenario(s) not fully covered ({ids})"
        if (
            settings.max_orphan_tests is not None
            and len(result.orphan_tests) > settings.max_orphan_tests
        ):
            return (
                f"orphan_tests: {len(result.orphan_tests)} orphan test(s) exceed "
                f"the limit of {settings.max_orphan_tests}"
            )
        coverage = result.statistics.coverage_percent
        if result.statistics.total and coverage < settings.minimum_coverage_percent:
            return (
                f"coverage: {coverage}% is below the minimum of "
                f"{settings.minimum_coverage_percent}%"
            )
        return None
