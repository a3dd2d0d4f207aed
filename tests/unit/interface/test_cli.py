"""Unit tests for Typer-based CLI interface."""

import json
from pathlib import Path
from unittest.mock import Mock

from typer.testing import CliRunner

from scenario_trace.domain.config import ConfigurationLoader
from scenario_trace.infrastructure.catalog_loader import ScenarioCatalogLoader
from scenario_trace.infrastructure.discoverers import DiscovererRegistry, JestDiscoverer
from scenario_trace.infrastructure.gateways.filesystem_gateway import FileSystemGateway
from scenario_trace.interface.cli import EXIT_USAGE_ERROR, CLIAppFactory, CLIDependencies

runner = CliRunner()

CATALOG = """\
scenarios:
  - id: ONB-001
    description: Register a customer
    priority: P0
    match_patterns: ["creates a customer"]
  - id: ONB-002
    description: Reject duplicate email
    priority: P2
    expected_coverage: partial
    match_patterns: ["duplicate email"]
"""

TESTS = """\
describe('Customers', () => {
  it('creates a customer', () => {});
  it('renders the footer', () => {});
});
"""


def _make_deps(tmp_path: Path, **config: object) -> CLIDependencies:
    """Real collaborators over a tmp_path project, with a mock telemetry."""
    (tmp_path / "test").mkdir(exist_ok=True)
    (tmp_path / "test" / "customer.test.ts").write_text(TESTS, encoding="utf-8")
    (tmp_path / "qa").mkdir(exist_ok=True)
    (tmp_path / "qa" / "scenarios.yaml").write_text(CATALOG, encoding="utf-8")
    config_dict: dict[str, object] = {
        "services": [
            {
                "name": "onboarding",
                "test_directory": "test",
                "language": "typescript",
                "test_framework": "jest",
            }
        ]
    }
    config_dict.update(config)
    filesystem = FileSystemGateway()
    return CLIDependencies(
        config_loader=ConfigurationLoader(config_dict, base_path=str(tmp_path)),
        telemetry=Mock(),
        registry=DiscovererRegistry.with_defaults(filesystem),
        catalog_loader=ScenarioCatalogLoader(),
        filesystem=filesystem,
    )


class TestAnalyzeCommand:
    """The analyze command."""

    def test_analyze_writes_output_and_passes_gate(self, tmp_path: Path) -> None:
        deps = _make_deps(tmp_path)
        app = CLIAppFactory.create_app(deps)
        output = tmp_path / "out" / "analysis.json"

        result = runner.invoke(app, ["analyze", "--output", str(output)])

        assert result.exit_code == 0, result.output
        payload = json.loads(output.read_text(encoding="utf-8"))
        statuses = [m["coverage_status"] for m in payload["mappings"]]
        assert statuses == ["Fully Covered", "Not Covered"]
        assert payload["total_tests"] == 2
        assert [t["description"] for t in payload["orphan_tests"]] == ["renders the footer"]
        deps.telemetry.handshake.assert_called_once()
        deps.telemetry.step.assert_any_call("Quality gate passed.")

    def test_analyze_blocks_on_critical_gap(self, tmp_path: Path) -> None:
        deps = _make_deps(tmp_path)
        (tmp_path / "test" / "customer.test.ts").write_text(
            "it('renders the footer', () => {});\n", encoding="utf-8"
        )
        app = CLIAppFactory.create_app(deps)

        result = runner.invoke(app, ["analyze", "--output", str(tmp_path / "a.json")])

        assert result.exit_code == 1
        message = deps.telemetry.error.call_args.args[0]
        assert message.startswith("Quality gate blocked: critical_gaps:")

    def test_no_gate_reports_without_failing(self, tmp_path: Path) -> None:
        deps = _make_deps(tmp_path, gate={"max_orphan_tests": 0})
        app = CLIAppFactory.create_app(deps)

        result = runner.invoke(
            app, ["analyze", "--no-gate", "--output", str(tmp_path / "a.json")]
        )

        assert result.exit_code == 0
        deps.telemetry.warning.assert_any_call(
            "Quality gate would block: orphan_tests: 1 orphan test(s) exceed the limit of 0"
        )

    def test_malformed_service_does_not_stop_the_others(self, tmp_path: Path) -> None:
        deps = _make_deps(
            tmp_path,
            services=[
                {"name": "billing", "test_directory": "test"},
                {
                    "name": "onboarding",
                    "test_directory": "test",
                    "language": "typescript",
                    "test_framework": "jest",
                },
            ],
        )
        output = tmp_path / "a.json"

        result = runner.invoke(CLIAppFactory.create_app(deps), ["analyze", "--output", str(output)])

        assert result.exit_code == 0, result.output
        assert json.loads(output.read_text(encoding="utf-8"))["total_tests"] == 2

    def test_missing_catalog_is_a_usage_error(self, tmp_path: Path) -> None:
        deps = _make_deps(tmp_path)
        app = CLIAppFactory.create_app(deps)

        result = runner.invoke(app, ["analyze", "--catalog", str(tmp_path / "none.yaml")])

        assert result.exit_code == EXIT_USAGE_ERROR
        deps.telemetry.error.assert_called_once()


class TestDiscoverAndExtract:
    """Single-service and single-file commands."""

    def test_discover_lists_service_tests(self, tmp_path: Path) -> None:
        deps = _make_deps(tmp_path)
        app = CLIAppFactory.create_app(deps)

        result = runner.invoke(app, ["discover", "onboarding"])

        assert result.exit_code == 0, result.output
        assert "onboarding::test/customer.test.ts::L2" in result.output

    def test_discover_unknown_service(self, tmp_path: Path) -> None:
        deps = _make_deps(tmp_path)
        result = runner.invoke(CLIAppFactory.create_app(deps), ["discover", "billing"])
        assert result.exit_code == EXIT_USAGE_ERROR

    def test_extract_single_file(self, tmp_path: Path) -> None:
        deps = _make_deps(tmp_path)
        source = tmp_path / "test_users.py"
        source.write_text("def test_user_login():\n    pass\n", encoding="utf-8")

        result = runner.invoke(
            CLIAppFactory.create_app(deps),
            ["extract", str(source), "--language", "python", "--framework", "pytest"],
        )

        assert result.exit_code == 0, result.output
        assert "unknown::test_users.py::L1" in result.output
        assert "User login" in result.output

    def test_extract_unsupported_convention(self, tmp_path: Path) -> None:
        deps = _make_deps(tmp_path)
        source = tmp_path / "spec.rb"
        source.write_text("it 'works' do\nend\n", encoding="utf-8")

        result = runner.invoke(
            CLIAppFactory.create_app(deps),
            ["extract", str(source), "--language", "ruby", "--framework", "rspec"],
        )

        assert result.exit_code == EXIT_USAGE_ERROR
        deps.telemetry.error.assert_called_once()


class TestResolveCatalogPath:
    """Catalog path resolution."""

    def test_explicit_path_wins(self) -> None:
        loader = ConfigurationLoader({}, base_path="/repo")
        assert CLIAppFactory.resolve_catalog_path(Path("x.yaml"), loader) == "x.yaml"

    def test_configured_path_is_relative_to_base(self) -> None:
        loader = ConfigurationLoader({"catalog": "qa/c.json"}, base_path="/repo")
        assert Path(CLIAppFactory.resolve_catalog_path(None, loader)) == Path("/repo/qa/c.json")


class TestExtractServiceResolution:
    """Targeted extraction attributes a file to its owning service."""

    def test_extract_ids_match_bulk_discovery_without_flags(self, tmp_path: Path) -> None:
        deps = _make_deps(tmp_path)
        service = deps.config_loader.get_service("onboarding")
        bulk_ids = [t.id for t in JestDiscoverer().discover(service)]

        result = runner.invoke(
            CLIAppFactory.create_app(deps),
            ["extract", str(tmp_path / "test" / "customer.test.ts")],
        )

        assert result.exit_code == 0, result.output
        assert [t["id"] for t in json.loads(result.stdout)] == bulk_ids
        assert bulk_ids == [
            "onboarding::test/customer.test.ts::L2",
            "onboarding::test/customer.test.ts::L3",
        ]

    def test_explicit_service_option(self, tmp_path: Path) -> None:
        deps = _make_deps(tmp_path)
        source = tmp_path / "test" / "customer.test.ts"

        result = runner.invoke(
            CLIAppFactory.create_app(deps), ["extract", str(source), "--service", "onboarding"]
        )

        assert result.exit_code == 0, result.output
        assert "onboarding::test/customer.test.ts::L2" in result.stdout

    def test_unowned_file_without_convention_is_a_usage_error(self, tmp_path: Path) -> None:
        deps = _make_deps(tmp_path)
        stray = tmp_path / "stray.test.ts"
        stray.write_text("it('stray', () => {});\n", encoding="utf-8")

        result = runner.invoke(CLIAppFactory.create_app(deps), ["extract", str(stray)])

        assert result.exit_code == EXIT_USAGE_ERROR
        assert "no configured service" in deps.telemetry.error.call_args.args[0]

    def test_deepest_test_directory_wins(self, tmp_path: Path) -> None:
        (tmp_path / "test" / "e2e").mkdir(parents=True)
        loader = ConfigurationLoader(
            {
                "services": [
                    {"name": "web", "test_directory": "test",
                     "language": "typescript", "test_framework": "jest"},
                    {"name": "e2e", "test_directory": "test/e2e",
                     "language": "typescript", "test_framework": "jest"},
                ]
            },
            base_path=str(tmp_path),
        )
        gateway = FileSystemGateway()

        nested = CLIAppFactory.resolve_service(
            tmp_path / "test" / "e2e" / "flow.test.ts", None, loader, gateway
        )
        shallow = CLIAppFactory.resolve_service(
            tmp_path / "test" / "unit.test.ts", None, loader, gateway
        )
        outside = CLIAppFactory.resolve_service(tmp_path / "src" / "a.ts", None, loader, gateway)

        assert nested is not None and nested.name == "e2e"
        assert shallow is not None and shallow.name == "web"
        assert outside is None
