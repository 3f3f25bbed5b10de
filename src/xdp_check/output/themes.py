"""Status icon and color maps."""

from xdp_check.models.check import CheckStatus

STATUS_COLORS: dict[CheckStatus, str] = {
    CheckStatus.PASS: "green",
    CheckStatus.FAIL: "red",
    CheckStatus.WARNING: "yellow",
    CheckStatus.INFO: "blue",
    CheckStatus.ERROR: "red bold",
}

STATUS_ICONS: dict[CheckStatus, str] = {
    CheckStatus.PASS: "✓",
    CheckStatus.FAIL: "✗",
    CheckStatus.WARNING: "⚠",
    CheckStatus.INFO: "ℹ",
    CheckStatus.ERROR: "!",
}


def styled_icon(status: CheckStatus) -> str:
    color = STATUS_COLORS.get(status, "white")
    return f"[{color}]{STATUS_ICONS.get(status, '?')}[/{color}]"
