"""Kernel version, build configuration, BTF and module checks."""

from __future__ import annotations

import gzip
import logging
from pathlib import Path

from xdp_check.config.catalog import OPTIONAL_KERNEL_OPTIONS, REQUIRED_KERNEL_OPTIONS
from xdp_check.config.settings import settings
from xdp_check.models.check import CheckResult, CheckStatus
from xdp_check.utils import host
from xdp_check.utils.commands import run_tool
from xdp_check.utils.version_compare import classify_kernel, parse_kernel_release

logger = logging.getLogger(__name__)

_KERNEL_STATUS = {
    "recommended": CheckStatus.PASS,
    "supported": CheckStatus.WARNING,
    "too-old": CheckStatus.FAIL,
}


def check_kernel() -> list[CheckResult]:
    """Run all kernel checks."""
    release = host.kernel_release()
    results: list[CheckResult] = []
    results.append(check_kernel_version(release))
    results.extend(check_kernel_config(release))
    results.append(check_btf_support())
    results.append(check_xsk_module())
    return results


def quick_kernel_check() -> list[CheckResult]:
    return [check_kernel_version(host.kernel_release())]


def classify_kernel_version(version: tuple[int, int]) -> CheckStatus:
    grade = classify_kernel(version, settings.min_kernel, settings.recommended_kernel)
    return _KERNEL_STATUS[grade]


def check_kernel_version(release: str) -> CheckResult:
    version = parse_kernel_release(release)
    if version is None:
        return CheckResult(
            name="Kernel Version",
            status=CheckStatus.ERROR,
            message=f"Unable to parse kernel version: {release}",
        )

    major, minor = version
    min_major, min_minor = settings.min_kernel
    rec_major, rec_minor = settings.recommended_kernel
    status = classify_kernel_version(version)

    if status == CheckStatus.PASS:
        details = (
            f"Kernel {major}.{minor} meets recommended version {rec_major}.{rec_minor} "
            "for stable AF_XDP support"
        )
    elif status == CheckStatus.WARNING:
        details = (
            f"Kernel {major}.{minor} supports AF_XDP but {rec_major}.{rec_minor}+ "
            "is recommended for better stability"
        )
    else:
        details = f"Kernel {major}.{minor} is too old. Minimum required: {min_major}.{min_minor}"

    return CheckResult(
        name="Kernel Version",
        status=status,
        message=f"Kernel version: {release} ({major}.{minor})",
        details=details,
    )


def load_kernel_config(release: str) -> tuple[str, Path] | None:
    """Return (config text, source path) from the first readable candidate."""
    for path in settings.kernel_config_candidates(release):
        if not path.exists():
            continue
        if path.suffix == ".gz":
            content = _read_gzip_config(path)
        else:
            content = host.read_text(path)
        if content is not None:
            return content, path
    return None


def _read_gzip_config(path: Path) -> str | None:
    output = run_tool([settings.zcat, str(path)])
    if output is not None:
        return output
    try:
        return gzip.decompress(path.read_bytes()).decode("utf-8", errors="replace")
    except (OSError, EOFError, gzip.BadGzipFile):
        logger.debug("Failed to decompress %s", path, exc_info=True)
        return None


def parse_kernel_config(content: str) -> dict[str, str]:
    """Parse ``CONFIG_FOO=value`` lines; comment lines are skipped."""
    options: dict[str, str] = {}
    for line in content.splitlines():
        line = line.strip()
        if not line.startswith("CONFIG_") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        options[key] = value
    return options


def option_enabled(options: dict[str, str], name: str) -> bool:
    return options.get(name) in ("y", "m")


def check_kernel_config(release: str) -> list[CheckResult]:
    loaded = load_kernel_config(release)
    if loaded is None:
        return [CheckResult(
            name="Kernel Config",
            status=CheckStatus.WARNING,
            message="Unable to find kernel configuration file",
            details="Cannot verify XDP-related kernel options. They might still be enabled.",
        )]

    content, source = loaded
    options = parse_kernel_config(content)
    results: list[CheckResult] = []

    for option, description in REQUIRED_KERNEL_OPTIONS.items():
        enabled = option_enabled(options, option)
        results.append(CheckResult(
            name=option,
            status=CheckStatus.PASS if enabled else CheckStatus.FAIL,
            message=description,
            details=f"Enabled in {source}" if enabled
            else f"Not found or disabled in {source}. Required for XDP.",
        ))

    for option, description in OPTIONAL_KERNEL_OPTIONS.items():
        enabled = option_enabled(options, option)
        results.append(CheckResult(
            name=option,
            status=CheckStatus.PASS if enabled else CheckStatus.WARNING,
            message=description,
            details=f"Enabled in {source}" if enabled
            else f"Not enabled in {source}. Recommended for better XDP support.",
        ))

    return results


def check_btf_support() -> CheckResult:
    btf_path = settings.btf_vmlinux
    if btf_path.exists():
        return CheckResult(
            name="BTF Support",
            status=CheckStatus.PASS,
            message="BTF type information available",
            details=f"Found at {btf_path}",
        )
    return CheckResult(
        name="BTF Support",
        status=CheckStatus.WARNING,
        message="BTF type information not found",
        details="BTF improves eBPF program compatibility but is not strictly required",
    )


def loaded_modules() -> set[str] | None:
    """Module names from /proc/modules, or None if it cannot be read."""
    content = host.read_text(settings.proc_root / "modules")
    if content is None:
        return None
    return {line.split()[0] for line in content.splitlines() if line.strip()}


def check_xsk_module() -> CheckResult:
    modules = loaded_modules()
    if modules is None:
        return CheckResult(
            name="XSK Module",
            status=CheckStatus.WARNING,
            message="Unable to read loaded kernel modules",
            details=f"{settings.proc_root / 'modules'} is not readable",
        )
    if "xsk_diag" in modules:
        return CheckResult(
            name="XSK Module",
            status=CheckStatus.PASS,
            message="XSK diagnostic module loaded",
            details="Module is loaded for AF_XDP socket diagnostics",
        )
    return CheckResult(
        name="XSK Module",
        status=CheckStatus.INFO,
        message="XSK diagnostic module not loaded",
        details="Optional module for AF_XDP diagnostics. Core functionality still works.",
    )
