"""Package entry point - composition root. Wire dependencies and run the CLI app."""

from scenario_trace.infrastructure.di.container import ScenarioTraceContainer
from scenario_trace.interface.cli import CLIAppFactory, CLIDependencies


def main() -> None:
    """Entry point: wire dependencies at composition root, create app, run."""
    container = ScenarioTraceContainer()
    deps = CLIDependencies(
        config_loader=container.get_config_loader(),
        telemetry=container.get_telemetry_port(),
        registry=container.get_discoverer_registry(),
        catalog_loader=container.get_catalog_loader(),
        filesystem=container.get_filesystem_gateway(),
    )
    app = CLIAppFactory.create_app(deps)
    app()


if __name__ == "__main__":
    main()
