"""Privilege and Linux capability checks."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from xdp_check.config.catalog import (
    BPF_CAPABILITIES,
    CAPABILITY_BITS,
    COMMON_CAPABILITIES,
    LEGACY_BPF_CAPABILITIES,
)
from xdp_check.config.settings import settings
from xdp_check.models.check import CheckResult, CheckStatus
from xdp_check.utils import host
from xdp_check.utils.version_compare import at_least, parse_kernel_release

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CapabilitySets:
    effective: frozenset[str]
    permitted: frozenset[str]


def _decode_mask(mask: int) -> frozenset[str]:
    return frozenset(name for name, bit in CAPABILITY_BITS.items() if mask & (1 << bit))


def read_capability_sets() -> CapabilitySets:
    """Read CapEff / CapPrm of this process from /proc/self/status.

    An unreadable status file yields empty sets, so every capability is
    reported as missing rather than aborting the run.
    """
    content = host.read_text(settings.proc_root / "self" / "status")
    fields = host.parse_status_fields(content or "")
    masks = {}
    for key in ("CapEff", "CapPrm"):
        try:
            masks[key] = int(fields.get(key, "0"), 16)
        except ValueError:
            logger.debug("Malformed %s value %r", key, fields.get(key))
            masks[key] = 0
    return CapabilitySets(
        effective=_decode_mask(masks["CapEff"]),
        permitted=_decode_mask(masks["CapPrm"]),
    )


def is_root() -> bool:
    return os.geteuid() == 0


def required_capabilities(kernel: tuple[int, int]) -> dict[str, str]:
    """Capabilities needed to load and attach XDP programs on ``kernel``.

    CAP_BPF and CAP_PERFMON were split out of CAP_SYS_ADMIN in 5.8.
    """
    required = dict(COMMON_CAPABILITIES)
    if at_least(kernel, settings.bpf_caps_kernel):
        required.update(BPF_CAPABILITIES)
    else:
        required.update(LEGACY_BPF_CAPABILITIES)
    return required


def capability_status(present: bool, root: bool) -> CheckStatus:
    if present:
        return CheckStatus.PASS
    if root:
        return CheckStatus.WARNING
    return CheckStatus.FAIL


def check_capabilities() -> list[CheckResult]:
    root = is_root()
    caps = read_capability_sets()
    kernel = parse_kernel_release(host.kernel_release()) or (0, 0)

    results: list[CheckResult] = [check_user_privileges(root)]
    required = required_capabilities(kernel)

    for cap, description in required.items():
        status = capability_status(cap in caps.effective, root)
        if status == CheckStatus.PASS:
            details = "Capability granted"
        elif status == CheckStatus.FAIL:
            short = cap.lower().replace("cap_", "")
            details = f"Missing capability. Grant it with: sudo setcap cap_{short}=ep <binary>"
        else:
            details = "Root user but capability not detected (unusual)"
        results.append(CheckResult(name=cap, status=status, message=description, details=details))

    activatable = [cap for cap in required if cap in caps.permitted and cap not in caps.effective]
    if activatable:
        results.append(CheckResult(
            name="Available Capabilities",
            status=CheckStatus.INFO,
            message="Some capabilities are permitted but not effective",
            details=f"Could activate: {', '.join(activatable)}. Consider using ambient capabilities.",
        ))

    return results


def check_user_privileges(root: bool) -> CheckResult:
    if root:
        return CheckResult(
            name="User Privileges",
            status=CheckStatus.PASS,
            message="Running as root",
        )
    return CheckResult(
        name="User Privileges",
        status=CheckStatus.INFO,
        message=f"Running as user (UID: {os.geteuid()})",
        details="Non-root users need specific capabilities for XDP",
    )


def quick_capability_check() -> list[CheckResult]:
    root = is_root()
    effective = read_capability_sets().effective

    has_net_admin = "CAP_NET_ADMIN" in effective
    has_net_raw = "CAP_NET_RAW" in effective
    has_bpf_or_admin = "CAP_BPF" in effective or "CAP_SYS_ADMIN" in effective

    if root or (has_net_admin and has_net_raw and has_bpf_or_admin):
        status = CheckStatus.PASS
        details = "All required capabilities present"
    elif has_net_admin or has_net_raw:
        status = CheckStatus.WARNING
        details = "Some capabilities missing. XDP may work with limitations."
    else:
        status = CheckStatus.FAIL
        details = "Missing critical capabilities. XDP will not work."

    return [CheckResult(
        name="XDP Capabilities",
        status=status,
        message="Running as root (all capabilities)" if root else "Checking essential capabilities",
        details=details,
    )]
