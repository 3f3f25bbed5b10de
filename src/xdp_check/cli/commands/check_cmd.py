"""xdp-check check - Run every probe."""

from __future__ import annotations

import typer

from xdp_check.cli.runner import run_report, state_from
from xdp_check.core.engine import full_plan

app = typer.Typer()


@app.callback(invoke_without_command=True)
def check(
    ctx: typer.Context,
    skip_runtime: bool = typer.Option(False, "--skip-runtime", help="Skip the runtime status section"),
) -> None:
    """Run the full XDP compatibility check."""
    run_report(state_from(ctx), "XDP Compatibility Check", full_plan(skip_runtime=skip_runtime))
