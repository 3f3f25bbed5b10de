"""Static lookup tables: NIC drivers, kernel build options, capabilities.

Extend these tables instead of adding conditionals to the probes.
"""

from __future__ import annotations

from dataclasses import dataclass

from xdp_check.models.check import CheckStatus


@dataclass(frozen=True)
class DriverInfo:
    description: str
    native_xdp: bool = True
    caveat: str | None = None


DRIVERS: dict[str, DriverInfo] = {
    "i40e": DriverInfo(
        "Intel 40GbE",
        caveat="multi-fragment packet bugs - requires workaround in slow-path XDP",
    ),
    "ixgbe": DriverInfo("Intel 10GbE"),
    "ice": DriverInfo("Intel E810 100GbE"),
    "igb": DriverInfo("Intel 1GbE"),
    "igc": DriverInfo("Intel 2.5GbE"),
    "mlx5_core": DriverInfo("Mellanox ConnectX-4/5/6"),
    "mlx4_core": DriverInfo("Mellanox ConnectX-3"),
    "nfp": DriverInfo("Netronome"),
    "bnxt_en": DriverInfo("Broadcom NetXtreme"),
}


def xdp_capable_drivers() -> frozenset[str]:
    return frozenset(name for name, info in DRIVERS.items() if info.native_xdp)


def driver_caveat(driver: str) -> str | None:
    info = DRIVERS.get(driver)
    return info.caveat if info else None


# name -> description; required options fail when missing, optional ones warn
REQUIRED_KERNEL_OPTIONS: dict[str, str] = {
    "CONFIG_XDP_SOCKETS": "AF_XDP socket support",
    "CONFIG_BPF": "BPF subsystem",
    "CONFIG_BPF_SYSCALL": "BPF system call",
    "CONFIG_NET": "Networking support",
}

OPTIONAL_KERNEL_OPTIONS: dict[str, str] = {
    "CONFIG_DEBUG_INFO_BTF": "BTF type information",
    "CONFIG_NETLINK": "Netlink support for routing",
}


# Capability bit numbers from linux/capability.h
CAPABILITY_BITS: dict[str, int] = {
    "CAP_NET_ADMIN": 12,
    "CAP_NET_RAW": 13,
    "CAP_SYS_ADMIN": 21,
    "CAP_PERFMON": 38,
    "CAP_BPF": 39,
}

COMMON_CAPABILITIES: dict[str, str] = {
    "CAP_NET_RAW": "Raw socket operations",
    "CAP_NET_ADMIN": "Network administration",
}

BPF_CAPABILITIES: dict[str, str] = {
    "CAP_BPF": "BPF operations",
    "CAP_PERFMON": "Performance monitoring",
}

LEGACY_BPF_CAPABILITIES: dict[str, str] = {
    "CAP_SYS_ADMIN": "System administration (for BPF on older kernels)",
}


# XDP attach mode as reported in sysfs -> (status, description)
XDP_MODES: dict[str, tuple[CheckStatus, str]] = {
    "native": (CheckStatus.PASS, "Native/Driver mode - best performance"),
    "driver": (CheckStatus.PASS, "Native/Driver mode - best performance"),
    "offload": (CheckStatus.PASS, "Hardware offload - NIC processes XDP"),
    "hw": (CheckStatus.PASS, "Hardware offload - NIC processes XDP"),
    "generic": (CheckStatus.WARNING, "Generic/SKB mode - slower, fallback mode"),
    "skb": (CheckStatus.WARNING, "Generic/SKB mode - slower, fallback mode"),
}

# Name fragments identifying XDP-related objects pinned in bpffs
PINNED_NAME_PATTERNS: tuple[str, ...] = ("xdp", "xsk")
