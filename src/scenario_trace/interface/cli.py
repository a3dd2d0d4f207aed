"""CLI entry points for scenario-trace - Thin Controller using Typer."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path, PurePath

import typer

from scenario_trace.domain.config import ConfigurationLoader
from scenario_trace.domain.constants import TRACE_BANNER
from scenario_trace.domain.entities import ServiceConfig, UnitTest
from scenario_trace.domain.errors import (
    CatalogError,
    ConfigurationError,
    DiscoveryError,
)
from scenario_trace.domain.gate import QualityGate
from scenario_trace.domain.orphans import OrphanCategorizer
from scenario_trace.domain.protocols import (
    CatalogLoaderProtocol,
    DiscovererRegistryProtocol,
    FileSystemProtocol,
    TelemetryPort,
)
from scenario_trace.use_cases.analyze_coverage import AnalyzeCoverageUseCase
from scenario_trace.use_cases.discover_tests import DiscoverTestsUseCase

# Exit code for configuration and catalog problems; 1 is reserved for a blocking gate.
EXIT_USAGE_ERROR = 2


@dataclass(frozen=True)
class CLIDependencies:
    """Explicit dependencies for the CLI. All dependencies injected at composition root."""

    config_loader: ConfigurationLoader
    telemetry: TelemetryPort
    registry: DiscovererRegistryProtocol
    catalog_loader: CatalogLoaderProtocol
    filesystem: FileSystemProtocol


class CLIAppFactory:
    """Creates the Typer app. No top-level functions."""

    @staticmethod
    def resolve_catalog_path(catalog: Path | None, config_loader: ConfigurationLoader) -> str:
        """Explicit --catalog as given, else the configured catalog relative to pyproject.toml."""
        if catalog is not None:
            return str(catalog)
        configured = Path(config_loader.catalog_path)
        if configured.is_absolute():
            return str(configured)
        return str(Path(config_loader.base_path) / configured)

    @staticmethod
    def resolve_service(
        file: Path,
        service_name: str | None,
        config_loader: ConfigurationLoader,
        filesystem: FileSystemProtocol,
    ) -> ServiceConfig | None:
        """
        The service a single file belongs to.

        An explicit --service wins. Otherwise the configured service whose test
        directory contains the file (deepest match) is used, so targeted ids
        equal the ids bulk discovery gives the same file. None when no service
        owns the file.
        """
        if service_name:
            return config_loader.get_service(service_name)
        target = PurePath(filesystem.resolve_path(str(file)))
        owner: ServiceConfig | None = None
        owner_depth = -1
        for service in config_loader.services:
            root = PurePath(
                filesystem.resolve_path(filesystem.join_path(service.path, service.test_directory))
            )
            if target.is_relative_to(root) and len(root.parts) > owner_depth:
                owner, owner_depth = service, len(root.parts)
        return owner

    @staticmethod
    def format_tests(tests: list[UnitTest]) -> str:
        return json.dumps([t.to_dict() for t in tests], indent=2)

    @staticmethod
    def create_app(deps: CLIDependencies) -> typer.Typer:
        """Create the Typer app with explicitly injected dependencies."""
        app = typer.Typer(
            name="scenario-trace",
            help="Scenario-to-test traceability: map a scenario catalog onto discovered unit tests.",
            add_completion=False,
        )

        @app.callback()
        def main(
            verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
        ) -> None:
            logging.basicConfig(
                level=logging.DEBUG if verbose else logging.WARNING,
                format="%(levelname)s %(name)s: %(message)s",
            )

        def _session_start() -> None:
            """Print banner then handshake. Banner goes to stderr so stdout stays machine readable."""
            typer.echo(TRACE_BANNER, err=True)
            deps.telemetry.handshake()

        @app.command()
        def analyze(
            catalog: Path | None = typer.Option(
                None, "--catalog", "-c", help="Scenario catalog (.yaml, .yml or .json)"
            ),
            output: Path | None = typer.Option(
                None, "--output", "-o", help="Write the JSON result here instead of stdout"
            ),
            no_gate: bool = typer.Option(
                False, "--no-gate", help="Report only; never exit non-zero on gaps"
            ),
        ) -> None:
            """Discover tests, map them to scenarios and report coverage gaps and orphans."""
            _session_start()
            catalog_path = CLIAppFactory.resolve_catalog_path(catalog, deps.config_loader)
            try:
                scenario_catalog = deps.catalog_loader.load(catalog_path)
                services = deps.config_loader.services
            except (CatalogError, ConfigurationError) as exc:
                deps.telemetry.error(str(exc))
                raise typer.Exit(code=EXIT_USAGE_ERROR) from exc
            deps.telemetry.step(f"Loaded {len(scenario_catalog)} scenario(s) from {catalog_path}")

            use_case = AnalyzeCoverageUseCase(
                discover_tests=DiscoverTestsUseCase(
                    registry=deps.registry,
                    telemetry=deps.telemetry,
                    max_workers=deps.config_loader.max_workers,
                ),
                telemetry=deps.telemetry,
            )
            result = use_case.execute(scenario_catalog, services)

            payload = json.dumps(result.to_dict(), indent=2)
            if output is not None:
                deps.filesystem.write_text(str(output), payload + "\n")
                deps.telemetry.step(f"Analysis written to {output}")
            else:
                typer.echo(payload)

            for recommendation in OrphanCategorizer.generate_recommendations(
                result.orphan_analysis
            ):
                deps.telemetry.step(recommendation)

            reason = QualityGate.evaluate(result, deps.config_loader.gate_settings)
            if reason is None:
                deps.telemetry.step("Quality gate passed.")
                return
            if no_gate:
                deps.telemetry.warning(f"Quality gate would block: {reason}")
                return
            deps.telemetry.error(f"Quality gate blocked: {reason}")
            raise typer.Exit(code=1)

        @app.command()
        def discover(
            service_name: str = typer.Argument(..., help="Name of a configured service"),
        ) -> None:
            """List the tests discovered in one configured service as JSON."""
            _session_start()
            try:
                service = deps.config_loader.get_service(service_name)
                discoverer = deps.registry.get_discoverer(service.language, service.test_framework)
            except ConfigurationError as exc:
                deps.telemetry.error(str(exc))
                raise typer.Exit(code=EXIT_USAGE_ERROR) from exc
            tests = discoverer.discover(service)
            deps.telemetry.step(f"{service.name}: {len(tests)} test(s) via {discoverer.convention}")
            typer.echo(CLIAppFactory.format_tests(tests))

        @app.command()
        def extract(
            file: Path = typer.Argument(..., help="Test source file"),
            service_name: str | None = typer.Option(
                None, "--service", "-s", help="Configured service owning the file"
            ),
            language: str | None = typer.Option(
                None, "--language", "-l", help="Source language (default: the service's)"
            ),
            framework: str | None = typer.Option(
                None, "--framework", "-f", help="Test framework (default: the service's)"
            ),
        ) -> None:
            """Extract test metadata from a single file."""
            try:
                service = CLIAppFactory.resolve_service(
                    file, service_name, deps.config_loader, deps.filesystem
                )
                language = language or (service.language if service else None)
                framework = framework or (service.test_framework if service else None)
                if not language or not framework:
                    raise ConfigurationError(
                        f"{file} belongs to no configured service; pass --language and --framework"
                    )
                discoverer = deps.registry.get_discoverer(language.lower(), framework.lower())
                tests = discoverer.extract_test_metadata(str(file), service)
            except (ConfigurationError, DiscoveryError) as exc:
                deps.telemetry.error(str(exc))
                raise typer.Exit(code=EXIT_USAGE_ERROR) from exc
            typer.echo(CLIAppFactory.format_tests(tests))

        return app
