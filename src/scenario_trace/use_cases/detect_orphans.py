"""Use Case: Detect Orphans - tests that no scenario matched."""

from collections.abc import Container, Sequence

from scenario_trace.domain.entities import UnitTest


class OrphanDetector:
    """Complement of the matched ids. No top-level functions."""

    @staticmethod
    def detect(all_tests: Sequence[UnitTest], matched_ids: Container[str]) -> list[UnitTest]:
        """Every test whose id was not matched, in the order of all_tests."""
        return [test for test in all_tests if test.id not in matched_ids]
