"""Unit tests for the coverage-tier decision table."""

import pytest

from scenario_trace.domain.coverage import CoverageTierPolicy
from scenario_trace.domain.entities import CoverageStatus, ExpectedCoverage


class TestCoverageTierPolicy:
    """Every cell of the (expected_coverage, match_count) table."""

    @pytest.mark.parametrize(
        ("expected", "count", "status", "unexpected"),
        [
            (ExpectedCoverage.FULL, 0, CoverageStatus.NOT_COVERED, False),
            (ExpectedCoverage.FULL, 1, CoverageStatus.FULLY_COVERED, False),
            (ExpectedCoverage.FULL, 5, CoverageStatus.FULLY_COVERED, False),
            (ExpectedCoverage.PARTIAL, 0, CoverageStatus.NOT_COVERED, False),
            (ExpectedCoverage.PARTIAL, 1, CoverageStatus.PARTIALLY_COVERED, False),
            (ExpectedCoverage.PARTIAL, 2, CoverageStatus.FULLY_COVERED, False),
            (ExpectedCoverage.NONE, 0, CoverageStatus.NOT_COVERED, False),
            (ExpectedCoverage.NONE, 1, CoverageStatus.FULLY_COVERED, True),
            (ExpectedCoverage.NONE, 3, CoverageStatus.FULLY_COVERED, True),
        ],
    )
    def test_decide(
        self,
        expected: ExpectedCoverage,
        count: int,
        status: CoverageStatus,
        unexpected: bool,
    ) -> None:
        """Test each table cell."""
        assert CoverageTierPolicy.decide(expected, count) == (status, unexpected)

    def test_more_matches_never_lower_the_tier(self) -> None:
        """Tier is monotone in match count for a fixed expectation."""
        rank = {
            CoverageStatus.NOT_COVERED: 0,
            CoverageStatus.PARTIALLY_COVERED: 1,
            CoverageStatus.FULLY_COVERED: 2,
        }
        for expected in ExpectedCoverage:
            tiers = [rank[CoverageTierPolicy.decide(expected, n)[0]] for n in range(6)]
            assert tiers == sorted(tiers)
