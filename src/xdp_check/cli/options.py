"""Shared CLI options."""

from __future__ import annotations

import enum

import typer


class OutputFormat(str, enum.Enum):
    HUMAN = "human"
    JSON = "json"
    YAML = "yaml"


OutputOption = typer.Option(OutputFormat.HUMAN, "--format", "-f", help="Output format: human, json, yaml")
VerboseOption = typer.Option(False, "--verbose", "-v", help="Show details for every check")
DebugOption = typer.Option(False, "--debug", help="Log debug messages to stderr")
InterfaceArgument = typer.Argument(help="Network interface (e.g., eth0, ens3)")
