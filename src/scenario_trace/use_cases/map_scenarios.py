"""Use Case: Map Scenarios - match catalog scenarios against discovered tests."""

import logging
import threading
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from scenario_trace.domain.coverage import CoverageTierPolicy
from scenario_trace.domain.entities import Scenario, ScenarioMapping, UnitTest
from scenario_trace.domain.errors import MappingError
from scenario_trace.domain.gaps import GapExplainer
from scenario_trace.use_cases.detect_orphans import OrphanDetector

logger = logging.getLogger(__name__)


class MatchLedger:
    """
    Run-scoped set of matched test ids.

    Owned by exactly one mapping pass. A fresh ledger is created for every
    run, so two runs can never share ids.
    """

    def __init__(self) -> None:
        self._ids: set[str] = set()
        self._ordered: list[str] = []

    def record(self, tests: Iterable[UnitTest]) -> None:
        for test in tests:
            if test.id not in self._ids:
                self._ids.add(test.id)
                self._ordered.append(test.id)

    def __contains__(self, test_id: object) -> bool:
        return test_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    @property
    def matched_ids(self) -> frozenset[str]:
        return frozenset(self._ids)

    def ordered_ids(self) -> list[str]:
        """Matched ids in the order they were first recorded."""
        return list(self._ordered)


@dataclass(frozen=True)
class MappingRun:
    """Mappings of one completed pass together with the ledger it produced."""
    mappings: tuple[ScenarioMapping, ...]
    ledger: MatchLedger

    def orphans(self, all_tests: Sequence[UnitTest]) -> list[UnitTest]:
        return OrphanDetector.detect(all_tests, self.ledger)


class ScenarioMapper:
    """
    Maps every scenario to the tests whose description matches one of its patterns.

    map_run() returns the ledger explicitly. map_scenarios() and
    get_orphan_tests() keep the instance-level contract: the last completed
    run is remembered, and a lock serializes clear-then-map against orphan
    queries on the same instance.
    """

    def __init__(self, gap_explainer: GapExplainer | None = None) -> None:
        self.gap_explainer = gap_explainer or GapExplainer()
        self._lock = threading.Lock()
        self._last_run: MappingRun | None = None

    def map_run(self, scenarios: Sequence[Scenario], tests: Sequence[UnitTest]) -> MappingRun:
        """Map all scenarios into a fresh ledger. Never touches instance state."""
        ledger = MatchLedger()
        mappings = tuple(self.map_scenario(scenario, tests, ledger) for scenario in scenarios)
        logger.debug(
            "Mapped %d scenario(s) against %d test(s); %d test(s) matched",
            len(mappings), len(tests), len(ledger),
        )
        return MappingRun(mappings=mappings, ledger=ledger)

    def map_scenarios(
        self, scenarios: Sequence[Scenario], tests: Sequence[UnitTest]
    ) -> list[ScenarioMapping]:
        with self._lock:
            self._last_run = None
            run = self.map_run(scenarios, tests)
            self._last_run = run
        return list(run.mappings)

    def get_orphan_tests(self, all_tests: Sequence[UnitTest]) -> list[UnitTest]:
        """Tests absent from the last completed mapping pass."""
        with self._lock:
            run = self._last_run
        if run is None:
            raise MappingError(
                "get_orphan_tests() called before map_scenarios() completed on this mapper"
            )
        return run.orphans(all_tests)

    @property
    def matched_ids(self) -> frozenset[str]:
        with self._lock:
            return self._last_run.ledger.matched_ids if self._last_run else frozenset()

    def map_scenario(
        self, scenario: Scenario, tests: Sequence[UnitTest], ledger: MatchLedger
    ) -> ScenarioMapping:
        matched = self.find_matching_tests(scenario, tests)
        ledger.record(matched)
        status, unexpected = CoverageTierPolicy.decide(scenario.expected_coverage, len(matched))
        return ScenarioMapping(
            scenario=scenario,
            matched_tests=tuple(matched),
            coverage_status=status,
            gap_explanation=self.gap_explainer.explain(scenario, status, len(matched)),
            unexpected_coverage=unexpected,
        )

    @staticmethod
    def find_matching_tests(scenario: Scenario, tests: Sequence[UnitTest]) -> list[UnitTest]:
        """Union over patterns, unique by id, first-seen order (pattern, then test)."""
        seen: set[str] = set()
        matched: list[UnitTest] = []
        for pattern in scenario.match_patterns:
            for test in tests:
                if test.id in seen or not pattern.matches(test.description):
                    continue
                seen.add(test.id)
                matched.append(test)
        return matched
