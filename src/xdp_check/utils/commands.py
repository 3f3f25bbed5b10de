"""Best-effort invocation of optional diagnostic tools."""

from __future__ import annotations

import logging
import shutil
import subprocess
from typing import Sequence

from xdp_check.config.settings import settings

logger = logging.getLogger(__name__)


def tool_available(name: str) -> bool:
    return shutil.which(name) is not None


def run_tool(command: Sequence[str], timeout: int | None = None) -> str | None:
    """Run an external tool and return its stdout.

    Returns None when the tool is not installed, exits non-zero, or cannot be
    started. Absence of a tool is an expected outcome, so nothing is raised.
    """
    if not command or not tool_available(command[0]):
        logger.debug("Tool not installed: %s", command[0] if command else "<empty>")
        return None
    try:
        proc = subprocess.run(
            list(command),
            capture_output=True,
            text=True,
            timeout=timeout or settings.tool_timeout,
            check=False,
        )
    except (OSError, subprocess.SubprocessError):
        logger.debug("Failed to run %s", " ".join(command), exc_info=True)
        return None
    if proc.returncode != 0:
        logger.debug(
            "%s exited with %d: %s", " ".join(command), proc.returncode, proc.stderr.strip(),
        )
        return None
    return proc.stdout


def tool_succeeds(command: Sequence[str]) -> bool:
    """Return True if the tool is installed and exits 0 (output ignored)."""
    return run_tool(command) is not None
