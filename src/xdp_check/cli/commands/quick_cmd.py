"""xdp-check quick - Kernel version, capabilities and drivers only."""

from __future__ import annotations

import typer

from xdp_check.cli.runner import run_report, state_from
from xdp_check.core.engine import quick_plan

app = typer.Typer()


@app.callback(invoke_without_command=True)
def quick(ctx: typer.Context) -> None:
    """Run a quick compatibility check."""
    run_report(state_from(ctx), "Quick XDP Check", quick_plan())
