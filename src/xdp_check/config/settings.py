"""Application configuration and defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


def _env_path(name: str, default: str) -> Path:
    value = os.environ.get(name, "")
    return Path(value) if value else Path(default)


def _default_sys_root() -> Path:
    return _env_path("XDP_CHECK_SYS_ROOT", "/sys")


def _default_proc_root() -> Path:
    return _env_path("XDP_CHECK_PROC_ROOT", "/proc")


def _default_boot_dir() -> Path:
    return _env_path("XDP_CHECK_BOOT_DIR", "/boot")


def _default_bpffs_dir() -> Path:
    """Return the BPF pinning filesystem location.

    Checks XDP_CHECK_BPFFS first, otherwise follows the sysfs root so a
    captured tree carries its own bpffs snapshot.
    """
    value = os.environ.get("XDP_CHECK_BPFFS", "")
    if value:
        return Path(value)
    return _default_sys_root() / "fs" / "bpf"


@dataclass
class Settings:
    sys_root: Path = field(default_factory=_default_sys_root)
    proc_root: Path = field(default_factory=_default_proc_root)
    boot_dir: Path = field(default_factory=_default_boot_dir)
    bpffs_dir: Path = field(default_factory=_default_bpffs_dir)
    log_level: str = field(default_factory=lambda: os.environ.get("XDP_CHECK_LOG_LEVEL", "WARNING"))
    default_output: str = "human"

    # Program name looked for among loaded XDP programs (libxdp's AF_XDP default)
    xdp_program_name: str = field(
        default_factory=lambda: os.environ.get("XDP_CHECK_PROGRAM_NAME", "xsk_def_prog")
    )

    bpftool: str = "bpftool"
    ip_tool: str = "ip"
    zcat: str = "zcat"
    pgrep: str = "pgrep"
    tool_timeout: int = 10

    min_kernel: tuple[int, int] = (4, 18)
    recommended_kernel: tuple[int, int] = (6, 10)
    bpf_caps_kernel: tuple[int, int] = (5, 8)

    memlock_pass_mb: int = 512
    memlock_warn_mb: int = 64
    load_pass_ratio: float = 0.7
    load_warn_ratio: float = 0.9

    @property
    def net_class_dir(self) -> Path:
        return self.sys_root / "class" / "net"

    @property
    def btf_vmlinux(self) -> Path:
        return self.sys_root / "kernel" / "btf" / "vmlinux"

    @property
    def hugepages_dir(self) -> Path:
        return self.sys_root / "kernel" / "mm" / "hugepages"

    @property
    def cpu_dir(self) -> Path:
        return self.sys_root / "devices" / "system" / "cpu"

    def kernel_config_candidates(self, release: str) -> list[Path]:
        return [
            self.boot_dir / f"config-{release}",
            self.proc_root / "config.gz",
            self.boot_dir / "config",
        ]


# Global singleton
settings = Settings()
