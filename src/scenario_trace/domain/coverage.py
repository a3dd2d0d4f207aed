"""Coverage-tier decision table."""

from scenario_trace.domain.entities import CoverageStatus, ExpectedCoverage


class CoverageTierPolicy:
    """
    Maps (expected_coverage, match_count) to a coverage tier.

        expected | 0           | 1                 | >=2
        full     | Not Covered | Fully Covered     | Fully Covered
        partial  | Not Covered | Partially Covered | Fully Covered
        none     | Not Covered | Fully Covered*    | Fully Covered*

    (*) flagged as unexpected coverage.
    """

    @staticmethod
    def decide(expected: ExpectedCoverage, match_count: int) -> tuple[CoverageStatus, bool]:
        """Return (status, unexpected_coverage)."""
        if match_count <= 0:
            return CoverageStatus.NOT_COVERED, False
        if expected is ExpectedCoverage.NONE:
            return CoverageStatus.FULLY_COVERED, True
        if expected is ExpectedCoverage.PARTIAL and match_count == 1:
            return CoverageStatus.PARTIALLY_COVERED, False
        return CoverageStatus.FULLY_COVERED, False
