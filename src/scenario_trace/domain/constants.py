"""
Scenario Trace: shared constants
"""

_CYAN: str = "\033[36m"
_RESET: str = "\033[0m"
_TRACE_ART: str = r"""
  ___  ___ ___ _  _   _   ___ ___ ___    _____ ___    _   ___ ___
 / __|/ __| __| \| | /_\ | _ \_ _/ _ \  |_   _| _ \  /_\ / __| __|
 \__ \ (__| _|| .` |/ _ \|   /| | (_) |   | | |   / / _ \ (__| _|
 |___/\___|___|_|\_/_/ \_\_|_\___\___/    |_| |_|_\/_/ \_\___|___|
"""
TRACE_BANNER = _CYAN + _TRACE_ART + _RESET

CONFIG_SECTION: str = "scenario-trace"
DEFAULT_CATALOG_PATH: str = "qa/scenarios.yaml"
DEFAULT_MAX_WORKERS: int = 4

# Gap explanations used when no per-scenario template exists.
NO_COVERAGE_FOUND: str = "No unit test coverage found for this scenario."
EXPECTED_NO_COVERAGE: str = (
    "Not covered (expected): no unit test is expected for this scenario."
)
INCOMPLETE_VALIDATION: str = "Some aspects covered, but incomplete validation"

# Explanations for Fully Covered outcomes.
COVERED_SINGLE_TEST: str = "None. Happy path is properly validated."
COVERED_MULTIPLE_TESTS: str = (
    "None. Multiple unit tests cover this scenario comprehensively."
)
COVERED_PARTIAL_SCENARIO: str = "None. Scenario properly validated."
UNEXPECTEDLY_COVERED: str = "Unexpectedly covered by unit tests"

# Lines searched above a JUnit test method for @DisplayName.
DISPLAY_NAME_LOOKBACK: int = 5

# Vendored and tool directories never descended into during discovery.
IGNORED_DIRECTORIES: frozenset[str] = frozenset(
    {"node_modules", "__pycache__", ".git", ".venv", "venv"}
)
