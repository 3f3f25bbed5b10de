"""xdp-check nic <interface> - One network interface."""

from __future__ import annotations

import typer

from xdp_check.cli.options import InterfaceArgument
from xdp_check.cli.runner import run_report, state_from
from xdp_check.core.engine import interface_plan

app = typer.Typer()


@app.callback(invoke_without_command=True)
def nic(ctx: typer.Context, interface: str = InterfaceArgument) -> None:
    """Check driver, XDP support, queues and rings of one interface."""
    run_report(state_from(ctx), f"NIC Compatibility Check: {interface}", interface_plan(interface))
