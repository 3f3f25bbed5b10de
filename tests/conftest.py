"""Shared fixtures: a fake sysfs/procfs tree and stubbed external tools."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from xdp_check.config.catalog import CAPABILITY_BITS
from xdp_check.config.settings import settings
from xdp_check.probes import interfaces, kernel, resources, runtime
from xdp_check.utils import host

ALL_CAPS_MASK = sum(1 << bit for bit in CAPABILITY_BITS.values())


def cap_mask(*names: str) -> str:
    return format(sum(1 << CAPABILITY_BITS[n] for n in names), "016x")


class FakeHost:
    """Builds a minimal /sys, /proc and /boot layout under a temp directory."""

    def __init__(self, root: Path):
        self.root = root
        self.sys = root / "sys"
        self.proc = root / "proc"
        self.boot = root / "boot"
        self.bpffs = self.sys / "fs" / "bpf"
        for d in (self.sys / "class" / "net", self.proc, self.boot):
            d.mkdir(parents=True, exist_ok=True)

    def write(self, path: Path, content: str) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    def add_interface(
        self,
        name: str,
        driver: str | None = None,
        devtype: str | None = None,
        operstate: str = "up",
        rx_queues: int = 0,
        tx_queues: int = 0,
        xdp_prog_id: str | None = None,
        xdp_mode: str | None = None,
        speed: str | None = None,
        mtu: str | None = "1500",
    ) -> Path:
        iface = self.sys / "class" / "net" / name
        iface.mkdir(parents=True, exist_ok=True)
        self.write(iface / "operstate", operstate + "\n")
        if driver:
            (iface / "device").mkdir(exist_ok=True)
            os.symlink(f"../../../bus/pci/drivers/{driver}", iface / "device" / "driver")
        uevent = f"INTERFACE={name}\n"
        if devtype:
            uevent += f"DEVTYPE={devtype}\n"
        self.write(iface / "uevent", uevent)
        queues = iface / "queues"
        queues.mkdir(exist_ok=True)
        for i in range(rx_queues):
            (queues / f"rx-{i}").mkdir()
        for i in range(tx_queues):
            (queues / f"tx-{i}").mkdir()
        if xdp_prog_id is not None:
            self.write(iface / "xdp" / "prog_id", xdp_prog_id + "\n")
        if xdp_mode is not None:
            self.write(iface / "xdp" / "mode", xdp_mode + "\n")
        if speed is not None:
            self.write(iface / "speed", speed + "\n")
        if mtu is not None:
            self.write(iface / "mtu", mtu + "\n")
        return iface

    def set_capabilities(self, effective: str, permitted: str | None = None) -> None:
        self.write(
            self.proc / "self" / "status",
            "Name:\tpython\n"
            "Uid:\t1000\t1000\t1000\t1000\n"
            "CapInh:\t0000000000000000\n"
            f"CapPrm:\t{permitted if permitted is not None else effective}\n"
            f"CapEff:\t{effective}\n"
            "CapBnd:\t000001ffffffffff\n",
        )

    def set_modules(self, *names: str) -> None:
        self.write(
            self.proc / "modules",
            "".join(f"{n} 16384 0 - Live 0x0000000000000000\n" for n in names),
        )

    def set_loadavg(self, load1: float) -> None:
        self.write(self.proc / "loadavg", f"{load1} 0.50 0.40 1/123 4567\n")

    def set_mounts(self, *fstypes: str) -> None:
        lines = [f"{t} /mnt/{t} {t} rw,relatime 0 0\n" for t in fstypes]
        self.write(self.proc / "mounts", "".join(lines))

    def set_kernel_config(self, release: str, options: dict[str, str]) -> Path:
        body = "# Automatically generated file; DO NOT EDIT.\n"
        body += "".join(f"{k}={v}\n" for k, v in options.items())
        body += "# CONFIG_UNUSED is not set\n"
        return self.write(self.boot / f"config-{release}", body)


@pytest.fixture
def fake_host(tmp_path, monkeypatch) -> FakeHost:
    fake = FakeHost(tmp_path)
    monkeypatch.setattr(settings, "sys_root", fake.sys)
    monkeypatch.setattr(settings, "proc_root", fake.proc)
    monkeypatch.setattr(settings, "boot_dir", fake.boot)
    monkeypatch.setattr(settings, "bpffs_dir", fake.bpffs)
    monkeypatch.setattr(host, "kernel_release", lambda: "6.12.0-1-generic")
    return fake


@pytest.fixture
def no_tools(monkeypatch):
    """Behave as if no external diagnostic tool is installed."""
    monkeypatch.setattr(kernel, "run_tool", lambda *a, **k: None)
    monkeypatch.setattr(runtime, "run_tool", lambda *a, **k: None)
    monkeypatch.setattr(resources, "tool_succeeds", lambda *a, **k: False)


@pytest.fixture
def no_ethtool(monkeypatch):
    """Make every ring-parameter query fail like an unsupported driver."""
    from xdp_check.errors import RingParamError

    def _fail(interface: str):
        raise RingParamError(interface, "Operation not supported")

    monkeypatch.setattr(interfaces, "query_ring_parameters", _fail)
