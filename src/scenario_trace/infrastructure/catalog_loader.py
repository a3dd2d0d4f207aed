"""ScenarioCatalogLoader: reads scenarios.yaml / scenarios.json into validated Scenario records."""

import json
import logging
import re
from collections.abc import Mapping
from pathlib import Path
from typing import cast

import yaml

from scenario_trace.domain.entities import (
    ExpectedCoverage,
    MatchPattern,
    PatternKind,
    Priority,
    RiskLevel,
    Scenario,
    ScenarioCatalog,
)
from scenario_trace.domain.errors import CatalogError
from scenario_trace.domain.protocols import CatalogLoaderProtocol

logger = logging.getLogger(__name__)

_PRIORITY_RULES: tuple[tuple[re.Pattern[str], Priority], ...] = (
    (re.compile(r"P0|CRITICAL|BLOCKER"), Priority.P0),
    (re.compile(r"P1|HIGH|MAJOR"), Priority.P1),
    (re.compile(r"P2|MEDIUM|NORMAL"), Priority.P2),
)
_RISK_RULES: tuple[tuple[re.Pattern[str], RiskLevel], ...] = (
    (re.compile(r"critical|highest"), RiskLevel.CRITICAL),
    (re.compile(r"high|major"), RiskLevel.HIGH),
    (re.compile(r"medium|moderate"), RiskLevel.MEDIUM),
)


class ScenarioCatalogLoader(CatalogLoaderProtocol):
    """
    Loads the static scenario catalog once per run.

    Accepted shapes (YAML or JSON):

        - a top-level list of scenario mappings, or
        - a mapping with a `scenarios` list and an optional `gap_templates`
          mapping of scenario id -> explanation.

    Each `match_patterns` entry is either a regex string or a mapping
    `{type: regex|substring|keywords, pattern: ..., keywords: [...]}`.
    Every problem found is collected and raised as one CatalogError, so a
    malformed pattern stops the run before any mapping begins.
    """

    SUPPORTED_SUFFIXES: tuple[str, ...] = (".yaml", ".yml", ".json")

    def load(self, path: str) -> ScenarioCatalog:
        file_path = Path(path)
        if not file_path.is_file():
            raise CatalogError(f"Scenario catalog not found: {path}")
        suffix = file_path.suffix.lower()
        if suffix not in self.SUPPORTED_SUFFIXES:
            raise CatalogError(
                f"Unsupported scenario catalog format '{suffix}'. "
                f"Supported: {', '.join(self.SUPPORTED_SUFFIXES)}"
            )
        try:
            with open(file_path, encoding="utf-8") as f:
                content = f.read()
        except OSError as exc:
            raise CatalogError(f"Cannot read scenario catalog {path}: {exc}") from exc

        try:
            data = json.loads(content) if suffix == ".json" else yaml.safe_load(content)
        except (json.JSONDecodeError, yaml.YAMLError) as exc:
            raise CatalogError(f"Cannot parse scenario catalog {path}: {exc}") from exc

        catalog = self.parse(data, source=path)
        logger.debug("Loaded %d scenario(s) from %s", len(catalog), path)
        return catalog

    def parse(self, data: object, source: str = "<memory>") -> ScenarioCatalog:
        """Validate and normalize already-decoded catalog data."""
        if not data:
            raise CatalogError(f"Scenario catalog {source} is empty")

        templates: dict[str, str] = {}
        if isinstance(data, list):
            raw_scenarios: object = data
        elif isinstance(data, Mapping):
            raw_scenarios = data.get("scenarios")
            raw_templates = data.get("gap_templates") or {}
            if not isinstance(raw_templates, Mapping):
                raise CatalogError(f"'gap_templates' in {source} must be a mapping")
            templates = {str(k): str(v) for k, v in raw_templates.items()}
        else:
            raw_scenarios = None
        if not isinstance(raw_scenarios, list):
            raise CatalogError(f"Invalid catalog format in {source}: expected a scenarios array")

        problems: list[str] = []
        scenarios: list[Scenario] = []
        seen_ids: set[str] = set()
        for index, raw in enumerate(raw_scenarios):
            scenario = self._parse_scenario(raw, index, problems)
            if scenario is None:
                continue
            if scenario.id in seen_ids:
                problems.append(f"Duplicate scenario ID: {scenario.id}")
            seen_ids.add(scenario.id)
            scenarios.append(scenario)

        if problems:
            raise CatalogError(f"Validation errors in {source}", problems=problems)
        return ScenarioCatalog(scenarios=tuple(scenarios), gap_templates=templates)

    def _parse_scenario(self, raw: object, index: int, problems: list[str]) -> Scenario | None:
        if not isinstance(raw, Mapping):
            problems.append(f"Scenario at index {index} is not a mapping")
            return None
        entry = cast(Mapping[str, object], raw)
        scenario_id = str(entry.get("id") or entry.get("scenario_id") or "").strip()
        label = scenario_id or f"at index {index}"
        if not scenario_id:
            problems.append(f"Scenario at index {index} missing ID")
        description = str(entry.get("description") or "").strip()
        if not description:
            problems.append(f"Scenario {label} missing description")

        raw_patterns = entry.get("match_patterns", entry.get("unit_test_patterns"))
        patterns = self._parse_patterns(raw_patterns, label, problems)
        if not patterns:
            problems.append(f"Scenario {label} has no match patterns")

        expected = self._parse_expected_coverage(entry.get("expected_coverage"), label, problems)
        if not scenario_id or not description or not patterns or expected is None:
            return None

        raw_tags = entry.get("tags") or []
        tags = tuple(str(t).strip() for t in raw_tags) if isinstance(raw_tags, list) else ()
        gap_template = entry.get("gap_template")
        return Scenario(
            id=scenario_id,
            description=description,
            category=str(entry.get("category") or "Uncategorized"),
            priority=self.normalize_priority(entry.get("priority")),
            risk_level=self.normalize_risk_level(entry.get("risk_level", entry.get("risk"))),
            expected_coverage=expected,
            match_patterns=patterns,
            api_endpoint=self._optional_str(entry.get("api_endpoint")),
            business_impact=self._optional_str(entry.get("business_impact")),
            tags=tags,
            gap_template=str(gap_template) if gap_template else None,
        )

    @staticmethod
    def _parse_patterns(raw: object, label: str, problems: list[str]) -> tuple[MatchPattern, ...]:
        if raw is None:
            return ()
        if not isinstance(raw, list):
            problems.append(f"Scenario {label}: match_patterns must be a list")
            return ()
        patterns: list[MatchPattern] = []
        for position, item in enumerate(raw):
            try:
                patterns.append(ScenarioCatalogLoader.build_pattern(item))
            except re.error as exc:
                problems.append(f"Scenario {label}: pattern #{position} is not a valid regex ({exc})")
            except ValueError as exc:
                problems.append(f"Scenario {label}: pattern #{position} {exc}")
        return tuple(patterns)

    @staticmethod
    def build_pattern(item: object) -> MatchPattern:
        """Build one MatchPattern. Raises re.error or ValueError when malformed."""
        if isinstance(item, str):
            if not item.strip():
                raise ValueError("is empty")
            return MatchPattern.from_regex(item)
        if not isinstance(item, Mapping):
            raise ValueError("must be a string or a mapping")
        kind_value = str(item.get("type", PatternKind.REGEX.value)).lower()
        try:
            kind = PatternKind(kind_value)
        except ValueError:
            raise ValueError(f"has unknown type '{kind_value}'") from None
        if kind is PatternKind.KEYWORDS:
            keywords = item.get("keywords")
            if not isinstance(keywords, list) or not any(str(k).strip() for k in keywords):
                raise ValueError("needs a non-empty 'keywords' list")
            return MatchPattern.from_keywords([str(k) for k in keywords])
        text = item.get("pattern")
        if not isinstance(text, str) or not text.strip():
            raise ValueError("needs a non-empty 'pattern'")
        if kind is PatternKind.SUBSTRING:
            return MatchPattern.from_substring(text)
        return MatchPattern.from_regex(text)

    @staticmethod
    def _parse_expected_coverage(
        raw: object, label: str, problems: list[str]
    ) -> ExpectedCoverage | None:
        if raw is None:
            return ExpectedCoverage.FULL
        try:
            return ExpectedCoverage(str(raw).strip().lower())
        except ValueError:
            problems.append(
                f"Scenario {label}: expected_coverage must be one of full, partial, none (got '{raw}')"
            )
            return None

    @staticmethod
    def normalize_priority(raw: object) -> Priority:
        if not raw:
            return Priority.P3
        value = str(raw).upper()
        for pattern, priority in _PRIORITY_RULES:
            if pattern.search(value):
                return priority
        return Priority.P3

    @staticmethod
    def normalize_risk_level(raw: object) -> RiskLevel:
        if not raw:
            return RiskLevel.LOW
        value = str(raw).lower()
        for pattern, risk in _RISK_RULES:
            if pattern.search(value):
                return risk
        return RiskLevel.LOW

    @staticmethod
    def _optional_str(raw: object) -> str | None:
        return str(raw) if raw not in (None, "") else None
