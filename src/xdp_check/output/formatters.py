"""Human / JSON / YAML report output dispatch."""

from __future__ import annotations

import json

import yaml
from rich.console import Console
from rich.markup import escape

from xdp_check.models.check import CheckStatus
from xdp_check.models.report import Report
from xdp_check.output.themes import styled_icon

console = Console()

_ALWAYS_SHOW_DETAILS = {CheckStatus.FAIL, CheckStatus.WARNING, CheckStatus.ERROR}


def output_report(report: Report, fmt: str, verbose: bool = False, out: Console | None = None) -> None:
    out = out or console
    if fmt == "json":
        out.print_json(json.dumps(report.to_dict(), indent=2))
    elif fmt == "yaml":
        out.print(
            escape(yaml.dump(report.to_dict(), default_flow_style=False, sort_keys=False)),
            soft_wrap=True,
        )
    else:
        print_human(report, verbose=verbose, out=out)


def print_banner(title: str, out: Console | None = None) -> None:
    out = out or console
    out.print(f"[bold cyan]{escape(title)}[/bold cyan]")
    out.print(f"[cyan]{'=' * len(title)}[/cyan]")


def print_human(report: Report, verbose: bool = False, out: Console | None = None) -> None:
    """Print sections in insertion order followed by a summary banner."""
    out = out or console

    for section, results in report.iter_sections():
        out.print()
        out.print(f"[bold cyan]{escape(section)}[/bold cyan]")
        out.print(f"[cyan]{'-' * len(section)}[/cyan]")

        for r in results:
            out.print(f"  {styled_icon(r.status)} [bold]{escape(r.name)}[/bold] - {escape(r.message)}")
            if r.details and (verbose or r.status in _ALWAYS_SHOW_DETAILS):
                for line in r.details.splitlines():
                    out.print(f"      [dim]{escape(line)}[/dim]")

    _print_summary(report, verbose, out)


def _print_summary(report: Report, verbose: bool, out: Console) -> None:
    out.print()
    out.print(f"[cyan]{'=' * 50}[/cyan]")
    out.print("[bold cyan]Summary[/bold cyan]")
    out.print(f"[cyan]{'=' * 50}[/cyan]")

    if report.has_failures:
        out.print("[bold red]❌ XDP compatibility check FAILED[/bold red]")
        out.print("[red]   Some critical requirements are not met.[/red]")
        out.print("[red]   Please address the issues marked with ✗ above.[/red]")
    elif report.has_warnings:
        out.print("[bold yellow]⚠️  XDP compatibility check PASSED with warnings[/bold yellow]")
        out.print("[yellow]   System supports XDP but some optimizations are missing.[/yellow]")
        out.print("[yellow]   Review warnings marked with ⚠ for better performance.[/yellow]")
    else:
        out.print("[bold green]✅ XDP compatibility check PASSED[/bold green]")
        out.print("[green]   System is ready for XDP deployment![/green]")

    if not verbose and (report.has_failures or report.has_warnings):
        out.print()
        out.print("[dim]💡 Run with --verbose for detailed information[/dim]")
