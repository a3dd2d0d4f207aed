"""ProjectTelemetry: console progress plus stdlib logging."""

import logging

from rich.console import Console

from scenario_trace.domain.protocols import TelemetryPort


class ProjectTelemetry(TelemetryPort):
    """Rich console output for humans, logging records for everything else."""

    def __init__(self, project_name: str, color: str, welcome_msg: str) -> None:
        self.project_name = project_name
        self.color = color
        self.welcome_msg = welcome_msg
        self.console = Console(stderr=True, highlight=False)
        self.logger = logging.getLogger(f"scenario_trace.{project_name.lower()}")

    def handshake(self) -> None:
        self.console.print(
            f"[bold {self.color}]{self.project_name}[/] [dim]|[/] {self.welcome_msg}"
        )
        self.logger.info("%s: %s", self.project_name, self.welcome_msg)

    def step(self, message: str) -> None:
        self.console.print(f"[{self.color}]>[/] {message}")
        self.logger.info(message)

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]! {message}[/]")
        self.logger.warning(message)

    def error(self, message: str) -> None:
        self.console.print(f"[bold red]x {message}[/]")
        self.logger.error(message)

    def debug(self, message: str) -> None:
        self.logger.debug(message)
