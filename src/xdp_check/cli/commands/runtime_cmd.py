"""xdp-check runtime [interface] - What is attached right now."""

from __future__ import annotations

from typing import Optional

import typer

from xdp_check.cli.runner import run_report, state_from
from xdp_check.core.engine import runtime_plan

app = typer.Typer()


@app.callback(invoke_without_command=True)
def runtime(
    ctx: typer.Context,
    interface: Optional[str] = typer.Argument(None, help="Limit the check to one interface"),
) -> None:
    """Report attached XDP programs, AF_XDP sockets and pinned objects.

    Informational only: always exits 0 unless a probe cannot run at all.
    """
    run_report(state_from(ctx), "XDP Runtime Status Check", runtime_plan(interface), enforce_verdict=False)
