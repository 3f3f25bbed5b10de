"""Network interface, driver, queue and ring-buffer checks."""

from __future__ import annotations

import logging
from pathlib import Path

from xdp_check.config.catalog import driver_caveat, xdp_capable_drivers
from xdp_check.config.settings import settings
from xdp_check.core.ethtool import query_ring_parameters
from xdp_check.errors import ProbeError, RingParamError
from xdp_check.models.check import CheckResult, CheckStatus
from xdp_check.utils import host

logger = logging.getLogger(__name__)

LOOPBACK = "lo"


def network_interfaces() -> list[str]:
    """List non-loopback interfaces from /sys/class/net.

    Raises ProbeError if the directory cannot be listed at all.
    """
    net_dir = settings.net_class_dir
    names = host.list_dir(net_dir)
    if names is None:
        raise ProbeError(f"cannot enumerate network interfaces in {net_dir}")
    return [name for name in names if name != LOOPBACK]


def interface_dir(interface: str) -> Path:
    return settings.net_class_dir / interface


def interface_driver(interface: str) -> str:
    """Resolve the backing driver: device/driver symlink, then uevent DEVTYPE."""
    sys_path = interface_dir(interface)
    driver = host.read_link_name(sys_path / "device" / "driver")
    if driver:
        return driver

    uevent = host.read_text(sys_path / "uevent")
    if uevent:
        devtype = host.parse_key_values(uevent).get("DEVTYPE")
        if devtype:
            return devtype

    return "unknown"


def classify_driver(driver: str) -> tuple[CheckStatus, str | None]:
    """Return (status, caveat) for a driver name.

    Known-good drivers pass unless they carry a caveat; anything else warns.
    """
    caveat = driver_caveat(driver)
    if driver in xdp_capable_drivers() and caveat is None:
        return CheckStatus.PASS, None
    return CheckStatus.WARNING, caveat


def interface_queues(interface: str) -> tuple[int, int]:
    """Count rx-N / tx-N queue entries; each side is at least 1."""
    entries = host.list_dir(interface_dir(interface) / "queues") or []
    rx = sum(1 for name in entries if name.startswith("rx-"))
    tx = sum(1 for name in entries if name.startswith("tx-"))
    return max(rx, 1), max(tx, 1)


def attached_prog_id(interface: str) -> str | None:
    """Return the attached XDP program id, or None if nothing is attached."""
    prog_id = host.read_value(interface_dir(interface) / "xdp" / "prog_id")
    if prog_id and prog_id != "0":
        return prog_id
    return None


def check_all_interfaces() -> list[CheckResult]:
    interfaces = network_interfaces()
    if not interfaces:
        return [CheckResult(
            name="Network Interfaces",
            status=CheckStatus.WARNING,
            message="No network interfaces found",
            details="Unable to detect network interfaces",
        )]

    results: list[CheckResult] = []
    for iface in interfaces:
        results.extend(check_interface(iface))
    return results


def check_interface(interface: str) -> list[CheckResult]:
    sys_path = interface_dir(interface)
    if not sys_path.exists():
        return [CheckResult(
            name=f"Interface: {interface}",
            status=CheckStatus.ERROR,
            message="Interface not found",
            details=f"No such interface: {interface}",
        )]

    results: list[CheckResult] = []

    operstate = host.read_value(sys_path / "operstate") or "unknown"
    results.append(CheckResult(
        name=f"{interface}: Status",
        status=CheckStatus.PASS if operstate == "up" else CheckStatus.INFO,
        message=f"Interface state: {operstate}",
    ))

    driver = interface_driver(interface)
    results.append(check_driver(interface, driver))
    results.append(check_xdp_support(interface, driver))

    rx_queues, tx_queues = interface_queues(interface)
    results.append(CheckResult(
        name=f"{interface}: Queues",
        status=CheckStatus.INFO,
        message=f"RX queues: {rx_queues}, TX queues: {tx_queues}",
        details="Multiple queues enable multi-core XDP processing",
    ))

    results.append(check_ring_buffers(interface))

    speed = host.read_int(sys_path / "speed")
    if speed is not None and speed > 0:
        results.append(CheckResult(
            name=f"{interface}: Speed",
            status=CheckStatus.INFO,
            message=f"{speed // 1000} Gbps" if speed >= 10000 else f"{speed} Mbps",
        ))

    mtu = host.read_value(sys_path / "mtu")
    if mtu:
        results.append(CheckResult(
            name=f"{interface}: MTU",
            status=CheckStatus.INFO,
            message=f"MTU: {mtu} bytes",
        ))

    return results


def check_driver(interface: str, driver: str) -> CheckResult:
    status, caveat = classify_driver(driver)
    details = f"Driver: {driver}"
    if caveat:
        details = f"Driver: {driver} - KNOWN ISSUE: {caveat}"
    return CheckResult(
        name=f"{interface}: Driver",
        status=status,
        message=f"Network driver: {driver}",
        details=details,
    )


def check_xdp_support(interface: str, driver: str) -> CheckResult:
    name = f"{interface}: XDP Support"

    if not (interface_dir(interface) / "xdp").exists():
        if driver in xdp_capable_drivers():
            return CheckResult(
                name=name,
                status=CheckStatus.PASS,
                message="XDP-capable (driver supports native XDP)",
                details=f"Driver {driver} supports XDP but sysfs entries not visible",
            )
        return CheckResult(
            name=name,
            status=CheckStatus.WARNING,
            message="No XDP support detected",
            details="XDP sysfs entries not found. Driver may not support native XDP.",
        )

    prog_id = attached_prog_id(interface)
    if prog_id:
        return CheckResult(
            name=name,
            status=CheckStatus.PASS,
            message=f"XDP program attached (ID: {prog_id})",
            details="Interface has an active XDP program",
        )

    return CheckResult(
        name=name,
        status=CheckStatus.PASS,
        message="XDP-ready (no program attached)",
        details="Interface supports XDP but no program is currently attached",
    )


def check_ring_buffers(interface: str) -> CheckResult:
    name = f"{interface}: Ring Buffers"
    try:
        ring = query_ring_parameters(interface)
    except RingParamError as e:
        logger.debug("Ring parameters unavailable for %s: %s", interface, e)
        return CheckResult(
            name=name,
            status=CheckStatus.WARNING,
            message="Unable to determine ring buffer sizes",
            details=f"Could not query ring parameters via ethtool ({e.reason})",
        )
    return CheckResult(
        name=name,
        status=CheckStatus.INFO,
        message=f"RX: {ring.rx_pending}, TX: {ring.tx_pending}",
        details=(
            f"Hardware maximum RX: {ring.rx_max_pending}, TX: {ring.tx_max_pending}. "
            "Ring buffer size affects XDP performance and memory usage"
        ),
    )


def quick_interface_check() -> list[CheckResult]:
    capable: list[str] = []
    others: list[str] = []
    good = xdp_capable_drivers()

    for iface in network_interfaces():
        driver = interface_driver(iface)
        label = f"{iface} ({driver})"
        if driver in good:
            capable.append(label)
        else:
            others.append(label)

    if capable:
        status = CheckStatus.PASS
        details = f"XDP-ready: {', '.join(capable)}"
    elif others:
        status = CheckStatus.WARNING
        details = f"Interfaces without native XDP: {', '.join(others)}"
    else:
        status = CheckStatus.FAIL
        details = "No network interfaces detected"

    return [CheckResult(
        name="XDP-capable Interfaces",
        status=status,
        message=f"Found {len(capable)} XDP-capable interface(s)",
        details=details,
    )]
