"""Orphan test categorization: technical tests that need no scenario vs business tests that do."""

import re
from collections import OrderedDict
from pathlib import PurePosixPath

from scenario_trace.domain.entities import (
    CategorizedOrphan,
    OrphanAction,
    OrphanAnalysis,
    OrphanCategory,
    OrphanGroup,
    OrphanType,
    Priority,
    UnitTest,
)

_TECHNICAL_RULES: tuple[tuple[re.Pattern[str], str, str], ...] = (
    (
        re.compile(
            r"Test\.(builder|settersAnd|setters?|getters?|equals|hashCode|toString|constructor|allArgs)",
            re.IGNORECASE,
        ),
        "Entity/Model Test",
        "POJO/Entity infrastructure test - no scenario needed",
    ),
    (
        re.compile(r"(Request|Response|Dto|Model)Test\.", re.IGNORECASE),
        "DTO Test",
        "Data Transfer Object test - technical infrastructure",
    ),
    (
        re.compile(r"MapperTest\.(toEntity|toResponse|to[A-Z]|updateEntity|map|Handle.*Null)", re.IGNORECASE),
        "Mapper Test",
        "Data mapping/transformation logic - technical layer",
    ),
    (
        re.compile(r"(?<!Handler)ExceptionTest\.", re.IGNORECASE),
        "Exception Test",
        "Custom exception testing - technical infrastructure",
    ),
    (
        re.compile(r"(ExceptionHandler|ErrorHandler|GlobalExceptionHandler)Test\.", re.IGNORECASE),
        "Error Handler Test",
        "Global exception handling - business errors covered in scenarios",
    ),
    (
        re.compile(r"Test\.errorResponse|error_response|ErrorResponse", re.IGNORECASE),
        "Error Response Test",
        "Error response DTO testing - technical infrastructure",
    ),
    (
        re.compile(
            r"Test\.(validation).*?(Fail|Pass|Invalid|Valid|Blank|Null|Empty|Short|Long|Young|Old)",
            re.IGNORECASE,
        ),
        "Validation Test",
        "DTO/Request validation rules - technical constraints",
    ),
    (
        re.compile(r"Test\.(setup|teardown|before|after|init|cleanup)", re.IGNORECASE),
        "Test Infrastructure",
        "Fixture or lifecycle hook - no scenario needed",
    ),
)

_CONTROLLER = re.compile(r"ControllerTest\.(get|post|put|patch|delete|create|update|remove)", re.IGNORECASE)
_SERVICE = re.compile(r"Service.*?Test\.(get|create|update|delete|find|search|list|filter)", re.IGNORECASE)
_BUSINESS_API = re.compile(
    r"(get|post|put|delete|create|update|remove|fetch).*?(customer|user|order|product|profile|account)",
    re.IGNORECASE,
)
_ENTITY_PREFIX = re.compile(r"^([A-Z][a-z]+)")


class OrphanCategorizer:
    """
    Classifies orphan tests so QA can tell harmless technical orphans from
    business behavior that is missing a scenario.

    Rules run against "<Suite>.<descriptionWithoutSpaces> <suite> <description>",
    which reproduces the Class.method shape the rules were written for.
    """

    def categorize(self, orphans: list[UnitTest]) -> OrphanAnalysis:
        categorized = tuple(
            CategorizedOrphan(test=test, category=self.categorize_test(test))
            for test in orphans
        )
        return OrphanAnalysis(orphans=categorized, groups=self._group_by_subtype(categorized))

    def categorize_test(self, test: UnitTest) -> OrphanCategory:
        suite = test.suite or self._file_stem(test.source_file)
        text = self._match_text(test, suite)
        return (
            self._technical(text)
            or self._business(text, suite)
            or OrphanCategory(
                type=OrphanType.BUSINESS,
                subtype="Unknown Business Logic",
                priority=Priority.P2,
                action_required=OrphanAction.REVIEW,
                reason="Could not automatically categorize - requires manual review",
            )
        )

    @staticmethod
    def generate_recommendations(analysis: OrphanAnalysis) -> list[str]:
        recommendations: list[str] = []
        action_count = analysis.action_required_count
        technical_count = len(analysis.technical_tests)
        business_count = len(analysis.business_tests)
        if action_count > 0:
            recommendations.append(
                f"QA action required: {action_count} business test(s) need scenarios"
            )
        if technical_count > 0:
            recommendations.append(
                f"{technical_count} technical test(s) appropriately orphaned (no action needed)"
            )
        if business_count > action_count:
            recommendations.append(
                f"{business_count - action_count} business test(s) require manual review "
                "(may be service layer duplicates)"
            )
        return recommendations

    @staticmethod
    def _file_stem(source_file: str) -> str:
        name = PurePosixPath(source_file.replace("\\", "/")).name
        return name.split(".", 1)[0]

    @staticmethod
    def _match_text(test: UnitTest, suite: str) -> str:
        compact = test.description.replace(" ", "")
        return f"{suite}.{compact} {suite} {test.description}"

    @staticmethod
    def _technical(text: str) -> OrphanCategory | None:
        for pattern, subtype, reason in _TECHNICAL_RULES:
            if pattern.search(text):
                return OrphanCategory(
                    type=OrphanType.TECHNICAL,
                    subtype=subtype,
                    priority=Priority.P3,
                    action_required=OrphanAction.NONE,
                    reason=reason,
                )
        return None

    @staticmethod
    def _business(text: str, suite: str) -> OrphanCategory | None:
        if _CONTROLLER.search(text):
            return OrphanCategory(
                type=OrphanType.BUSINESS,
                subtype="Controller/API Test",
                priority=Priority.P0,
                action_required=OrphanAction.ADD_SCENARIO,
                reason="API endpoint test without matching scenario",
                suggested_scenario_id=OrphanCategorizer.suggest_scenario_id(suite),
            )
        if _SERVICE.search(text) and "Service" in suite:
            return OrphanCategory(
                type=OrphanType.BUSINESS,
                subtype="Service Layer Test",
                priority=Priority.P2,
                action_required=OrphanAction.REVIEW,
                reason="Service layer test - may duplicate controller scenario",
            )
        if _BUSINESS_API.search(text):
            return OrphanCategory(
                type=OrphanType.BUSINESS,
                subtype="Business Logic Test",
                priority=Priority.P1,
                action_required=OrphanAction.ADD_SCENARIO,
                reason="Business functionality test without scenario",
            )
        return None

    @staticmethod
    def suggest_scenario_id(suite: str) -> str:
        """CustomerControllerTest -> CUST-XXX."""
        match = _ENTITY_PREFIX.match(suite)
        if match:
            return f"{match.group(1)[:4].upper()}-XXX"
        return "SCEN-XXX"

    @staticmethod
    def _group_by_subtype(orphans: tuple[CategorizedOrphan, ...]) -> tuple[OrphanGroup, ...]:
        buckets: "OrderedDict[str, list[CategorizedOrphan]]" = OrderedDict()
        for orphan in orphans:
            buckets.setdefault(orphan.category.subtype, []).append(orphan)
        groups = [
            OrphanGroup(
                category=subtype,
                tests=tuple(o.test for o in members),
                action_required=any(
                    o.category.action_required is OrphanAction.ADD_SCENARIO for o in members
                ),
            )
            for subtype, members in buckets.items()
        ]
        # Action-required groups first, then largest first; sort is stable for ties.
        groups.sort(key=lambda g: (not g.action_required, -g.count))
        return tuple(groups)
