"""Select probes for a run and collect their output into a Report."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from xdp_check.models.check import CheckResult
from xdp_check.models.report import Report
from xdp_check.probes import capabilities, interfaces, kernel, resources, runtime

logger = logging.getLogger(__name__)

Probe = Callable[[], list[CheckResult]]
ProgressCallback = Callable[[str], None]


@dataclass(frozen=True)
class Stage:
    section: str
    label: str
    probe: Probe


def full_plan(skip_runtime: bool = False) -> list[Stage]:
    stages = [
        Stage("Kernel", "Checking kernel compatibility", kernel.check_kernel),
        Stage("Capabilities", "Checking capabilities", capabilities.check_capabilities),
        Stage("System Resources", "Checking system resources", resources.check_system_resources),
        Stage("Network Interfaces", "Checking network interfaces", interfaces.check_all_interfaces),
    ]
    if not skip_runtime:
        stages.append(
            Stage("Runtime Status", "Checking XDP runtime status", lambda: runtime.check_xdp_runtime(None))
        )
    return stages


def quick_plan() -> list[Stage]:
    return [
        Stage("Kernel", "Checking kernel version", kernel.quick_kernel_check),
        Stage("Capabilities", "Checking capabilities", capabilities.quick_capability_check),
        Stage("Network Interfaces", "Checking network interfaces", interfaces.quick_interface_check),
    ]


def kernel_plan() -> list[Stage]:
    return [Stage("Kernel", "Checking kernel compatibility", kernel.check_kernel)]


def interface_plan(interface: str) -> list[Stage]:
    return [Stage(
        f"Interface: {interface}",
        f"Checking interface {interface}",
        lambda: interfaces.check_interface(interface),
    )]


def runtime_plan(interface: str | None = None) -> list[Stage]:
    return [Stage(
        "Runtime Status",
        "Checking XDP runtime status",
        lambda: runtime.check_xdp_runtime(interface),
    )]


def run_plan(stages: list[Stage], on_progress: ProgressCallback | None = None) -> Report:
    """Run each stage in order and add its results as one report section.

    A ProbeError from any stage propagates and aborts the run.
    """
    report = Report()
    for stage in stages:
        if on_progress:
            on_progress(stage.label)
        logger.debug("Running stage %s", stage.section)
        report.add_section(stage.section, stage.probe())
    return report
