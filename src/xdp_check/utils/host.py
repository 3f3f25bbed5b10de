"""Read-only access to sysfs / procfs."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from xdp_check.errors import ProbeError

logger = logging.getLogger(__name__)


def kernel_release() -> str:
    """Return the running kernel release (``uname -r``)."""
    try:
        return os.uname().release
    except (AttributeError, OSError) as e:
        raise ProbeError(f"cannot determine kernel release: {e}") from e


def read_text(path: Path) -> str | None:
    """Read a file, returning None if it is missing or unreadable."""
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        logger.debug("Could not read %s", path, exc_info=True)
        return None


def read_value(path: Path) -> str | None:
    """Read a single-value sysfs attribute, stripped."""
    content = read_text(path)
    return content.strip() if content is not None else None


def read_int(path: Path) -> int | None:
    value = read_value(path)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        logger.debug("Non-integer value %r in %s", value, path)
        return None


def list_dir(path: Path) -> list[str] | None:
    """Return sorted entry names of a directory, or None if it cannot be listed."""
    try:
        return sorted(entry.name for entry in os.scandir(path))
    except OSError:
        logger.debug("Could not list %s", path, exc_info=True)
        return None


def read_link_name(path: Path) -> str | None:
    """Return the final component of a symlink target."""
    try:
        return Path(os.readlink(path)).name or None
    except OSError:
        return None


def parse_status_fields(content: str) -> dict[str, str]:
    """Parse ``Key:\\tvalue`` lines as found in /proc/<pid>/status and uevent-like files."""
    fields: dict[str, str] = {}
    for line in content.splitlines():
        if ":" not in line:
            continue
        key, value = line.split(":", 1)
        fields[key.strip()] = value.strip()
    return fields


def parse_key_values(content: str) -> dict[str, str]:
    """Parse ``KEY=value`` lines (uevent files)."""
    fields: dict[str, str] = {}
    for line in content.splitlines():
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        fields[key.strip()] = value.strip()
    return fields
