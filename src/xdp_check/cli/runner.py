"""Run a probe plan, render the report and map the verdict to an exit code."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from xdp_check.config.settings import settings
from xdp_check.core.engine import Stage, run_plan
from xdp_check.errors import XdpCheckError
from xdp_check.output.formatters import output_report, print_banner

err_console = Console(stderr=True)


@dataclass
class CliState:
    output: str = settings.default_output
    verbose: bool = False


def configure_logging(debug: bool) -> None:
    level = logging.DEBUG if debug else getattr(logging, settings.log_level.upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def run_report(state: CliState, title: str, stages: list[Stage], enforce_verdict: bool = True) -> None:
    """Run ``stages`` and print the report.

    Exits 1 on a fatal probe error, and on an incompatible verdict unless
    ``enforce_verdict`` is False.
    """
    if state.output == "human":
        print_banner(title, out=err_console)

    try:
        with err_console.status("[bold cyan]Starting…") as status:
            def on_progress(label: str) -> None:
                status.update(f"[bold cyan]{label}…")

            report = run_plan(stages, on_progress=on_progress)
    except XdpCheckError as e:
        err_console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=1)

    output_report(report, state.output, verbose=state.verbose)

    if enforce_verdict and not report.is_compatible():
        raise typer.Exit(code=1)


def state_from(ctx: typer.Context) -> CliState:
    return ctx.obj if isinstance(ctx.obj, CliState) else CliState()
