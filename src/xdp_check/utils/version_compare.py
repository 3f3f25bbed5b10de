"""Kernel release parsing and threshold comparison."""

from __future__ import annotations

import re

_SEPARATORS = re.compile(r"[.\-]")


def parse_kernel_release(release: str) -> tuple[int, int] | None:
    """Parse ``major.minor`` out of a kernel release string.

    "5.15.0-91-generic" -> (5, 15). Returns None when the string does not
    have at least two components. A non-numeric component counts as 0.
    """
    parts = _SEPARATORS.split(release.strip())
    if len(parts) < 2:
        return None
    return (_to_int(parts[0]), _to_int(parts[1]))


def _to_int(part: str) -> int:
    try:
        return int(part)
    except ValueError:
        return 0


def at_least(version: tuple[int, int], threshold: tuple[int, int]) -> bool:
    """Return True if ``version`` is the same as or newer than ``threshold``."""
    major, minor = version
    t_major, t_minor = threshold
    return major > t_major or (major == t_major and minor >= t_minor)


def classify_kernel(
    version: tuple[int, int],
    minimum: tuple[int, int],
    recommended: tuple[int, int],
) -> str:
    """Classify a kernel version against the minimum and recommended pairs.

    Returns: "too-old", "supported" or "recommended".
    """
    if not at_least(version, minimum):
        return "too-old"
    if not at_least(version, recommended):
        return "supported"
    return "recommended"
