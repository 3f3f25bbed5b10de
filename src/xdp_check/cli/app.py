"""Root Typer application, mounts sub-commands."""

from __future__ import annotations

import typer

from xdp_check.cli.options import DebugOption, OutputFormat, OutputOption, VerboseOption
from xdp_check.cli.runner import CliState, configure_logging, run_report
from xdp_check.core.engine import full_plan

app = typer.Typer(
    name="xdp-check",
    help="XDP compatibility checker - verify system XDP support and runtime status.",
    no_args_is_help=False,
)


@app.callback(invoke_without_command=True)
def root(
    ctx: typer.Context,
    output: OutputFormat = OutputOption,
    verbose: bool = VerboseOption,
    debug: bool = DebugOption,
) -> None:
    """Run the full check when no command is given."""
    configure_logging(debug)
    ctx.obj = CliState(output=output.value, verbose=verbose)
    if ctx.invoked_subcommand is None:
        run_report(ctx.obj, "XDP Compatibility Check", full_plan())


def _register_commands() -> None:
    from xdp_check.cli.commands.check_cmd import app as check_app
    from xdp_check.cli.commands.kernel_cmd import app as kernel_app
    from xdp_check.cli.commands.nic_cmd import app as nic_app
    from xdp_check.cli.commands.runtime_cmd import app as runtime_app
    from xdp_check.cli.commands.quick_cmd import app as quick_app

    app.add_typer(check_app, name="check", help="Run all checks (default)")
    app.add_typer(kernel_app, name="kernel", help="Check kernel compatibility only")
    app.add_typer(nic_app, name="nic", help="Check a specific network interface")
    app.add_typer(runtime_app, name="runtime", help="Verify if XDP is currently active on the system")
    app.add_typer(quick_app, name="quick", help="Quick compatibility check")


_register_commands()


def main() -> None:
    app()
