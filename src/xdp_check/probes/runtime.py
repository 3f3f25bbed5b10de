"""Runtime status: attached XDP programs, AF_XDP sockets, pinned objects."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Any

from xdp_check.config.catalog import PINNED_NAME_PATTERNS, XDP_MODES
from xdp_check.config.settings import settings
from xdp_check.models.check import CheckResult, CheckStatus
from xdp_check.probes.interfaces import attached_prog_id, interface_dir, network_interfaces
from xdp_check.probes.kernel import loaded_modules
from xdp_check.utils import host
from xdp_check.utils.commands import run_tool

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class XdpProgram:
    prog_id: int
    name: str


def check_xdp_runtime(interface: str | None = None) -> list[CheckResult]:
    results: list[CheckResult] = []
    if interface:
        results.extend(check_interface_xdp_runtime(interface))
    else:
        results.append(check_all_xdp_runtime())
    results.append(check_xsk_sockets())
    results.append(check_loaded_programs())
    pinned = check_pinned_objects()
    if pinned is not None:
        results.append(pinned)
    results.append(check_bpffs_mounted())
    return results


def check_all_xdp_runtime() -> CheckResult:
    active: list[str] = []
    for iface in network_interfaces():
        prog_id = attached_prog_id(iface)
        if prog_id:
            active.append(f"{iface} (prog_id: {prog_id})")

    if active:
        return CheckResult(
            name="Active XDP Programs",
            status=CheckStatus.PASS,
            message=f"{len(active)} interface(s) with XDP programs",
            details=f"Active on: {', '.join(active)}",
        )
    return CheckResult(
        name="Active XDP Programs",
        status=CheckStatus.INFO,
        message="0 interface(s) with XDP programs",
        details="No XDP programs currently attached to any interface",
    )


def check_interface_xdp_runtime(interface: str) -> list[CheckResult]:
    results: list[CheckResult] = []
    xdp_dir = interface_dir(interface) / "xdp"

    if not (xdp_dir / "prog_id").exists():
        results.append(CheckResult(
            name=f"{interface}: XDP Runtime",
            status=CheckStatus.WARNING,
            message="Unable to check XDP status",
            details="XDP status file not found. Interface may not support XDP.",
        ))
    else:
        prog_id = attached_prog_id(interface)
        if prog_id:
            results.append(CheckResult(
                name=f"{interface}: XDP Program",
                status=CheckStatus.PASS,
                message=f"XDP program active (ID: {prog_id})",
                details="XDP program is currently attached and running",
            ))
            info = bpf_prog_info(prog_id)
            if info:
                results.append(CheckResult(
                    name=f"{interface}: XDP Program Info",
                    status=CheckStatus.INFO,
                    message="Program details",
                    details=info,
                ))
        else:
            results.append(CheckResult(
                name=f"{interface}: XDP Program",
                status=CheckStatus.INFO,
                message="No XDP program attached",
            ))

    mode = host.read_value(xdp_dir / "mode")
    if mode:
        results.append(check_xdp_mode(interface, mode))

    return results


def check_xdp_mode(interface: str, mode: str) -> CheckResult:
    status, details = XDP_MODES.get(mode, (CheckStatus.INFO, None))
    return CheckResult(
        name=f"{interface}: XDP Mode",
        status=status,
        message=f"XDP mode: {mode}",
        details=details,
    )


def bpf_prog_info(prog_id: str) -> str | None:
    """One-line summary of a loaded program from ``bpftool prog show id N``."""
    output = run_tool([settings.bpftool, "prog", "show", "id", prog_id])
    if not output or not output.strip():
        return None
    return output.strip().splitlines()[0]


def count_xsk_sockets() -> int | None:
    """Entries in /proc/net/xsk (first line is a header), None if absent."""
    content = host.read_text(settings.proc_root / "net" / "xsk")
    if content is None:
        return None
    lines = [line for line in content.splitlines() if line.strip()]
    return max(len(lines) - 1, 0)


def check_xsk_sockets() -> CheckResult:
    count = count_xsk_sockets()
    if count:
        return CheckResult(
            name="AF_XDP Sockets",
            status=CheckStatus.PASS,
            message=f"{count} AF_XDP socket(s) active",
            details="Active AF_XDP sockets detected",
        )
    if count == 0:
        return CheckResult(
            name="AF_XDP Sockets",
            status=CheckStatus.INFO,
            message="No AF_XDP sockets active",
            details=f"{settings.proc_root / 'net' / 'xsk'} lists no sockets",
        )

    if "xsk_diag" in (loaded_modules() or set()):
        return CheckResult(
            name="AF_XDP Support",
            status=CheckStatus.INFO,
            message="XSK diagnostic module loaded",
            details="AF_XDP support available but no active sockets",
        )
    return CheckResult(
        name="AF_XDP Sockets",
        status=CheckStatus.INFO,
        message="No AF_XDP sockets detected",
        details="AF_XDP socket monitoring may not be available",
    )


def _programs_from_bpftool() -> list[XdpProgram] | None:
    output = run_tool([settings.bpftool, "--json", "prog", "show"])
    if output is None:
        return None
    try:
        entries = json.loads(output or "[]")
    except json.JSONDecodeError:
        logger.debug("Unparsable bpftool output", exc_info=True)
        return None
    return [
        XdpProgram(prog_id=int(e.get("id", 0)), name=e.get("name", ""))
        for e in entries
        if isinstance(e, dict) and e.get("type") == "xdp"
    ]


def _link_xdp_progs(link: dict[str, Any]) -> list[dict[str, Any]]:
    xdp = link.get("xdp")
    if not isinstance(xdp, dict):
        return []
    progs = []
    if isinstance(xdp.get("prog"), dict):
        progs.append(xdp["prog"])
    for attached in xdp.get("attached", []) or []:
        if isinstance(attached, dict) and isinstance(attached.get("prog"), dict):
            progs.append(attached["prog"])
    return progs


def _programs_from_ip() -> list[XdpProgram] | None:
    output = run_tool([settings.ip_tool, "-details", "-json", "link", "show"])
    if output is None:
        return None
    try:
        links = json.loads(output or "[]")
    except json.JSONDecodeError:
        logger.debug("Unparsable ip output", exc_info=True)
        return None

    seen: dict[int, XdpProgram] = {}
    for link in links:
        if not isinstance(link, dict):
            continue
        for prog in _link_xdp_progs(link):
            prog_id = int(prog.get("id", 0))
            seen.setdefault(prog_id, XdpProgram(prog_id=prog_id, name=prog.get("name", "")))
    return list(seen.values())


def list_xdp_programs() -> tuple[list[XdpProgram], str] | None:
    """Loaded XDP programs and the tool that listed them, or None if no tool works.

    bpftool sees every loaded program; ``ip link`` only sees attached ones.
    """
    programs = _programs_from_bpftool()
    if programs is not None:
        return programs, settings.bpftool
    programs = _programs_from_ip()
    if programs is not None:
        return programs, settings.ip_tool
    return None


def check_loaded_programs() -> CheckResult:
    listed = list_xdp_programs()
    if listed is None:
        return CheckResult(
            name="BPF Programs (XDP)",
            status=CheckStatus.INFO,
            message="Unable to list loaded XDP programs",
            details=f"Neither {settings.bpftool} nor {settings.ip_tool} produced usable output",
        )

    programs, source = listed
    wanted = settings.xdp_program_name
    names = ", ".join(f"{p.name or '<unnamed>'} (id {p.prog_id})" for p in programs)

    if any(p.name == wanted for p in programs):
        return CheckResult(
            name="BPF Programs (XDP)",
            status=CheckStatus.PASS,
            message=f"{len(programs)} XDP program(s) loaded, including {wanted}",
            details=f"Listed via {source}: {names}",
        )
    if programs:
        return CheckResult(
            name="BPF Programs (XDP)",
            status=CheckStatus.WARNING,
            message=f"{len(programs)} XDP program(s) loaded, {wanted} not among them",
            details=f"Listed via {source}: {names}",
        )
    return CheckResult(
        name="BPF Programs (XDP)",
        status=CheckStatus.INFO,
        message="0 XDP program(s) loaded",
        details=f"Listed via {source}",
    )


def count_pinned_objects() -> int | None:
    """Count XDP/XSK-named entries anywhere under the bpffs tree."""
    root = settings.bpffs_dir
    if not root.is_dir():
        return None
    count = 0
    for _dirpath, dirnames, filenames in os.walk(root):
        for name in dirnames + filenames:
            if any(pattern in name for pattern in PINNED_NAME_PATTERNS):
                count += 1
    return count


def check_pinned_objects() -> CheckResult | None:
    count = count_pinned_objects()
    if not count:
        return None
    return CheckResult(
        name="Pinned BPF Programs",
        status=CheckStatus.INFO,
        message=f"{count} XDP-related pinned object(s)",
        details=f"Found in {settings.bpffs_dir}",
    )


def bpffs_mounted() -> bool:
    mounts = host.read_text(settings.proc_root / "mounts") or ""
    for line in mounts.splitlines():
        fields = line.split()
        if len(fields) >= 3 and fields[2] == "bpf":
            return True
    return False


def check_bpffs_mounted() -> CheckResult:
    if bpffs_mounted():
        return CheckResult(
            name="BPF Filesystem",
            status=CheckStatus.PASS,
            message="BPF filesystem mounted",
            details="BPF filesystem is available for pinning programs",
        )
    return CheckResult(
        name="BPF Filesystem",
        status=CheckStatus.INFO,
        message="BPF filesystem not mounted",
        details="Mount it with: mount -t bpf bpf /sys/fs/bpf",
    )
