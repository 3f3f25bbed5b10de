"""Memory and CPU resource checks."""

from __future__ import annotations

import logging
import os
import resource

from xdp_check.config.settings import settings
from xdp_check.models.check import CheckResult, CheckStatus
from xdp_check.utils import host
from xdp_check.utils.commands import tool_succeeds

logger = logging.getLogger(__name__)

MIB = 1024 * 1024


def check_system_resources() -> list[CheckResult]:
    results: list[CheckResult] = []
    results.append(check_huge_pages())
    results.append(check_memlock_limit())
    results.extend(check_cpu_info())
    results.append(check_irq_balance())
    results.append(check_system_load())
    return results


def cpu_count() -> int:
    return os.cpu_count() or 1


def _free_hugepages(size_kb: int) -> int:
    path = settings.hugepages_dir / f"hugepages-{size_kb}kB" / "free_hugepages"
    return host.read_int(path) or 0


def check_huge_pages() -> CheckResult:
    huge_2mb = _free_hugepages(2048)
    huge_1gb = _free_hugepages(1048576)

    if huge_2mb and huge_1gb:
        message = f"2MB: {huge_2mb}, 1GB: {huge_1gb} pages available"
    elif huge_2mb:
        message = f"{huge_2mb} x 2MB huge pages available"
    elif huge_1gb:
        message = f"{huge_1gb} x 1GB huge pages available"
    else:
        return CheckResult(
            name="Huge Pages",
            status=CheckStatus.INFO,
            message="No huge pages available",
            details="XDP will use regular 4KB pages. Consider enabling huge pages for better performance.",
        )

    return CheckResult(
        name="Huge Pages",
        status=CheckStatus.PASS,
        message=message,
        details="Huge pages improve XDP performance by reducing TLB misses",
    )


def classify_memlock(soft_limit: int) -> CheckStatus:
    """Grade an RLIMIT_MEMLOCK soft limit given in bytes."""
    if soft_limit == resource.RLIM_INFINITY:
        return CheckStatus.PASS
    limit_mb = soft_limit // MIB
    if limit_mb >= settings.memlock_pass_mb:
        return CheckStatus.PASS
    if limit_mb >= settings.memlock_warn_mb:
        return CheckStatus.WARNING
    return CheckStatus.FAIL


def _format_limit(limit: int) -> str:
    return "unlimited" if limit == resource.RLIM_INFINITY else f"{limit // MIB}"


def check_memlock_limit() -> CheckResult:
    soft, hard = resource.getrlimit(resource.RLIMIT_MEMLOCK)
    status = classify_memlock(soft)

    if soft == resource.RLIM_INFINITY:
        message = "Unlimited memory lock"
    else:
        message = f"Current: {_format_limit(soft)} MB, Max: {_format_limit(hard)} MB"

    details = {
        CheckStatus.PASS: "Sufficient memory lock limit for XDP",
        CheckStatus.WARNING: "Memory lock limit may be insufficient for large XDP deployments. "
                             "Consider increasing with 'ulimit -l'.",
        CheckStatus.FAIL: "Memory lock limit too low for XDP. Increase with 'ulimit -l unlimited' "
                          "or edit /etc/security/limits.conf.",
    }[status]

    return CheckResult(name="Memory Lock Limit", status=status, message=message, details=details)


def check_cpu_info() -> list[CheckResult]:
    results: list[CheckResult] = [CheckResult(
        name="CPU Cores",
        status=CheckStatus.INFO,
        message=f"{cpu_count()} CPU cores available",
        details="More cores allow processing XDP on multiple queues",
    )]

    governor = host.read_value(settings.cpu_dir / "cpu0" / "cpufreq" / "scaling_governor")
    if governor:
        results.append(check_governor(governor))

    isolated = host.read_value(settings.cpu_dir / "isolated")
    if isolated:
        results.append(CheckResult(
            name="Isolated CPUs",
            status=CheckStatus.PASS,
            message=f"Isolated CPUs: {isolated}",
            details="Isolated CPUs can be dedicated to XDP processing",
        ))

    return results


def check_governor(governor: str) -> CheckResult:
    if governor == "performance":
        status, details = CheckStatus.PASS, "Optimal for XDP performance"
    elif governor in ("powersave", "conservative"):
        status = CheckStatus.WARNING
        details = "Consider switching to 'performance' governor for better XDP throughput"
    else:
        status, details = CheckStatus.INFO, None
    return CheckResult(
        name="CPU Governor",
        status=status,
        message=f"CPU frequency governor: {governor}",
        details=details,
    )


def check_irq_balance() -> CheckResult:
    if tool_succeeds([settings.pgrep, "irqbalance"]):
        return CheckResult(
            name="IRQ Balance",
            status=CheckStatus.INFO,
            message="irqbalance service is running",
            details="Consider stopping irqbalance and manually setting IRQ affinity for XDP NICs",
        )
    return CheckResult(
        name="IRQ Balance",
        status=CheckStatus.PASS,
        message="irqbalance is not running",
        details="Manual IRQ affinity configuration recommended for optimal XDP performance",
    )


def classify_load(ratio: float) -> CheckStatus:
    # Both upper tiers warn; there is no failing load level.
    if ratio < settings.load_pass_ratio:
        return CheckStatus.PASS
    if ratio < settings.load_warn_ratio:
        return CheckStatus.WARNING
    return CheckStatus.WARNING


def check_system_load() -> CheckResult:
    loadavg = host.read_text(settings.proc_root / "loadavg")
    parts = loadavg.split() if loadavg else []
    try:
        load1 = float(parts[0]) if len(parts) >= 3 else None
    except ValueError:
        load1 = None

    if load1 is None:
        return CheckResult(
            name="System Load",
            status=CheckStatus.WARNING,
            message="Unable to determine system load",
        )

    cpus = cpu_count()
    ratio = load1 / cpus
    status = classify_load(ratio)
    return CheckResult(
        name="System Load",
        status=status,
        message=f"Load average: {load1} ({int(ratio * 100)}% of {cpus} cores)",
        details="System has capacity for XDP processing" if status == CheckStatus.PASS
        else "System is under load. XDP performance may be affected.",
    )
