"""xdp-check kernel - Kernel compatibility only."""

from __future__ import annotations

import typer

from xdp_check.cli.runner import run_report, state_from
from xdp_check.core.engine import kernel_plan

app = typer.Typer()


@app.callback(invoke_without_command=True)
def kernel(ctx: typer.Context) -> None:
    """Check kernel version, build options, BTF and modules."""
    run_report(state_from(ctx), "Kernel Compatibility Check", kernel_plan())
