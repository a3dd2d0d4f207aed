import re
from dataclasses import dataclass, field
from enum import Enum


class Priority(Enum):
    """Business priority of a scenario. P0 is the most urgent."""
    P0 = "P0"
    P1 = "P1"
    P2 = "P2"
    P3 = "P3"


class RiskLevel(Enum):
    """Risk classification attached to a scenario."""
    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class ExpectedCoverage(Enum):
    """How much unit-test coverage the catalog author expects for a scenario."""
    FULL = "full"
    PARTIAL = "partial"
    NONE = "none"


class CoverageStatus(Enum):
    """Coverage tier assigned to a scenario for one analysis run."""
    FULLY_COVERED = "Fully Covered"
    PARTIALLY_COVERED = "Partially Covered"
    NOT_COVERED = "Not Covered"


class PatternKind(Enum):
    """Kinds of match rules a scenario can carry."""
    REGEX = "regex"
    SUBSTRING = "substring"
    KEYWORDS = "keywords"


@dataclass(frozen=True)
class ServiceConfig:
    """Per-service discovery settings, resolved before discovery starts."""
    name: str
    path: str
    test_directory: str
    language: str
    test_framework: str
    test_pattern: str | None = None
    enabled: bool = True


@dataclass(frozen=True)
class UnitTest:
    """
    One discovered test declaration.

    Created by a discoverer during a scan and never mutated. The id is built
    from the owning service, the source file and the declaration line so that
    rescanning unchanged content yields the same id.
    """
    id: str
    owning_service: str
    source_file: str
    file_path: str
    description: str
    declaration_convention: str
    test_framework: str
    suite: str | None = None
    line_number: int | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "owning_service": self.owning_service,
            "source_file": self.source_file,
            "file_path": self.file_path,
            "description": self.description,
            "suite": self.suite,
            "declaration_convention": self.declaration_convention,
            "test_framework": self.test_framework,
            "line_number": self.line_number,
        }


@dataclass(frozen=True)
class MatchPattern:
    """
    A case-insensitive match rule evaluated against test descriptions.

    Build instances through the classmethods: they compile the underlying
    regex eagerly, so a malformed pattern raises re.error at catalog-load time
    rather than in the middle of a mapping pass.
    """
    kind: PatternKind
    pattern: str
    regex: re.Pattern[str] = field(compare=False, repr=False)
    keywords: tuple[str, ...] = ()

    @classmethod
    def from_regex(cls, pattern: str) -> "MatchPattern":
        """Create a regex rule (the catalog default)."""
        return cls(PatternKind.REGEX, pattern, re.compile(pattern, re.IGNORECASE))

    @classmethod
    def from_substring(cls, text: str) -> "MatchPattern":
        """Create a plain substring rule."""
        return cls(PatternKind.SUBSTRING, text, re.compile(re.escape(text), re.IGNORECASE))

    @classmethod
    def from_keywords(cls, keywords: list[str]) -> "MatchPattern":
        """Create a rule that requires every keyword to appear somewhere in the description."""
        cleaned = tuple(k.strip().lower() for k in keywords if k.strip())
        lookaheads = "".join(f"(?=.*{re.escape(k)})" for k in cleaned)
        return cls(
            PatternKind.KEYWORDS,
            " ".join(cleaned),
            re.compile(f"^{lookaheads}", re.IGNORECASE | re.DOTALL),
            keywords=cleaned,
        )

    def matches(self, description: str) -> bool:
        if self.kind is PatternKind.KEYWORDS and not self.keywords:
            return False
        return self.regex.search(description) is not None

    def to_dict(self) -> dict[str, object]:
        if self.kind is PatternKind.KEYWORDS:
            return {"type": self.kind.value, "keywords": list(self.keywords)}
        return {"type": self.kind.value, "pattern": self.pattern}


@dataclass(frozen=True)
class Scenario:
    """A named business behavior expected to have unit-test coverage."""
    id: str
    description: str
    category: str
    priority: Priority
    risk_level: RiskLevel
    expected_coverage: ExpectedCoverage
    match_patterns: tuple[MatchPattern, ...]
    api_endpoint: str | None = None
    business_impact: str | None = None
    tags: tuple[str, ...] = ()
    gap_template: str | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "description": self.description,
            "category": self.category,
            "priority": self.priority.value,
            "risk_level": self.risk_level.value,
            "expected_coverage": self.expected_coverage.value,
            "match_patterns": [p.to_dict() for p in self.match_patterns],
            "api_endpoint": self.api_endpoint,
            "business_impact": self.business_impact,
            "tags": list(self.tags),
        }


@dataclass(frozen=True)
class ScenarioCatalog:
    """Scenarios plus the gap-explanation templates that ship with them."""
    scenarios: tuple[Scenario, ...]
    gap_templates: dict[str, str] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.scenarios)


@dataclass(frozen=True)
class ScenarioMapping:
    """Result of mapping one scenario against the discovered tests."""
    scenario: Scenario
    matched_tests: tuple[UnitTest, ...]
    coverage_status: CoverageStatus
    gap_explanation: str
    # Only set for expected_coverage=none scenarios that matched something.
    unexpected_coverage: bool = False

    @property
    def is_gap(self) -> bool:
        return self.coverage_status is not CoverageStatus.FULLY_COVERED

    def to_dict(self) -> dict[str, object]:
        return {
            "scenario": self.scenario.to_dict(),
            "matched_tests": [t.id for t in self.matched_tests],
            "coverage_status": self.coverage_status.value,
            "gap_explanation": self.gap_explanation,
            "unexpected_coverage": self.unexpected_coverage,
        }


@dataclass(frozen=True)
class CategoryBreakdown:
    """Per-category coverage counts."""
    total: int = 0
    covered: int = 0
    partial: int = 0
    not_covered: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "covered": self.covered,
            "partial": self.partial,
            "not_covered": self.not_covered,
        }


@dataclass(frozen=True)
class CoverageStatistics:
    """Aggregate over a mapping list. Rebuilt from scratch on each call."""
    total: int
    fully_covered: int
    partially_covered: int
    not_covered: int
    coverage_percent: int
    by_category: dict[str, CategoryBreakdown] = field(default_factory=dict)
    gaps_by_priority: dict[str, int] = field(default_factory=dict)
    gaps_by_risk: dict[str, int] = field(default_factory=dict)

    @property
    def total_gaps(self) -> int:
        return self.partially_covered + self.not_covered

    def to_dict(self) -> dict[str, object]:
        return {
            "total": self.total,
            "fully_covered": self.fully_covered,
            "partially_covered": self.partially_covered,
            "not_covered": self.not_covered,
            "coverage_percent": self.coverage_percent,
            "total_gaps": self.total_gaps,
            "by_category": {k: v.to_dict() for k, v in self.by_category.items()},
            "gaps_by_priority": dict(self.gaps_by_priority),
            "gaps_by_risk": dict(self.gaps_by_risk),
        }


class OrphanType(Enum):
    TECHNICAL = "technical"
    BUSINESS = "business"


class OrphanAction(Enum):
    """What the QA team should do about an orphan test."""
    NONE = "none"
    ADD_SCENARIO = "qa_add_scenario"
    REVIEW = "review"


@dataclass(frozen=True)
class OrphanCategory:
    """Classification of one orphan test."""
    type: OrphanType
    subtype: str
    priority: Priority
    action_required: OrphanAction
    reason: str
    suggested_scenario_id: str | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "type": self.type.value,
            "subtype": self.subtype,
            "priority": self.priority.value,
            "action_required": self.action_required.value,
            "reason": self.reason,
            "suggested_scenario_id": self.suggested_scenario_id,
        }


@dataclass(frozen=True)
class CategorizedOrphan:
    test: UnitTest
    category: OrphanCategory


@dataclass(frozen=True)
class OrphanGroup:
    """Orphans sharing a subtype."""
    category: str
    tests: tuple[UnitTest, ...]
    action_required: bool

    @property
    def count(self) -> int:
        return len(self.tests)


@dataclass(frozen=True)
class OrphanAnalysis:
    """Technical/business split of the orphan tests of a run."""
    orphans: tuple[CategorizedOrphan, ...] = ()
    groups: tuple[OrphanGroup, ...] = ()

    @property
    def total_orphans(self) -> int:
        return len(self.orphans)

    @property
    def technical_tests(self) -> list[UnitTest]:
        return [o.test for o in self.orphans if o.category.type is OrphanType.TECHNICAL]

    @property
    def business_tests(self) -> list[UnitTest]:
        return [o.test for o in self.orphans if o.category.type is OrphanType.BUSINESS]

    @property
    def action_required_count(self) -> int:
        return sum(
            1 for o in self.orphans
            if o.category.action_required is OrphanAction.ADD_SCENARIO
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "total_orphans": self.total_orphans,
            "technical_count": len(self.technical_tests),
            "business_count": len(self.business_tests),
            "action_required_count": self.action_required_count,
            "orphans": [
                {"test_id": o.test.id, **o.category.to_dict()} for o in self.orphans
            ],
            "categorization": [
                {
                    "category": g.category,
                    "count": g.count,
                    "action_required": g.action_required,
                    "tests": [t.id for t in g.tests],
                }
                for g in self.groups
            ],
        }


@dataclass(frozen=True)
class AnalysisResult:
    """Output of one complete analysis run, consumed by external renderers."""
    tests: tuple[UnitTest, ...]
    mappings: tuple[ScenarioMapping, ...]
    orphan_tests: tuple[UnitTest, ...]
    statistics: CoverageStatistics
    orphan_analysis: OrphanAnalysis = field(default_factory=OrphanAnalysis)

    def to_dict(self) -> dict[str, object]:
        """Stable, JSON-serializable output shape."""
        return {
            "mappings": [m.to_dict() for m in self.mappings],
            "orphan_tests": [t.to_dict() for t in self.orphan_tests],
            "statistics": self.statistics.to_dict(),
            "orphan_analysis": self.orphan_analysis.to_dict(),
            "total_tests": len(self.tests),
        }
