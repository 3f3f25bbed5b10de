"""Tests for report rendering."""

from __future__ import annotations

import io
import json

import yaml
from rich.console import Console

from xdp_check.models.check import CheckResult, CheckStatus
from xdp_check.models.report import Report
from xdp_check.output.formatters import output_report, print_banner


def _console() -> tuple[Console, io.StringIO]:
    buf = io.StringIO()
    return Console(file=buf, width=200, color_system=None), buf


def _report(*statuses: CheckStatus) -> Report:
    report = Report()
    report.add_section("Kernel", [
        CheckResult(
            name=f"check-{i}", status=s, message=f"message {i}", details=f"detail {i}",
        )
        for i, s in enumerate(statuses)
    ])
    return report


class TestHuman:
    def test_sections_render_in_insertion_order(self):
        report = Report()
        report.add_section("Zeta", [CheckResult("z", CheckStatus.PASS, "zz")])
        report.add_section("Alpha", [CheckResult("a", CheckStatus.PASS, "aa")])
        out, buf = _console()
        output_report(report, "human", out=out)
        text = buf.getvalue()
        assert text.index("Zeta") < text.index("Alpha")

    def test_line_format(self):
        out, buf = _console()
        output_report(_report(CheckStatus.PASS), "human", out=out)
        assert "✓ check-0 - message 0" in buf.getvalue()

    def test_details_hidden_for_pass_and_info_unless_verbose(self):
        report = _report(CheckStatus.PASS, CheckStatus.INFO, CheckStatus.WARNING, CheckStatus.FAIL)
        out, buf = _console()
        output_report(report, "human", out=out)
        text = buf.getvalue()
        assert "detail 0" not in text
        assert "detail 1" not in text
        assert "detail 2" in text
        assert "detail 3" in text

        out, buf = _console()
        output_report(report, "human", verbose=True, out=out)
        assert "detail 0" in buf.getvalue()
        assert "detail 1" in buf.getvalue()

    def test_summary_failed(self):
        out, buf = _console()
        output_report(_report(CheckStatus.PASS, CheckStatus.ERROR), "human", out=out)
        text = buf.getvalue()
        assert "XDP compatibility check FAILED" in text
        assert "Run with --verbose" in text

    def test_summary_warnings(self):
        out, buf = _console()
        output_report(_report(CheckStatus.PASS, CheckStatus.WARNING), "human", out=out)
        assert "XDP compatibility check PASSED with warnings" in buf.getvalue()

    def test_summary_passed(self):
        out, buf = _console()
        output_report(_report(CheckStatus.PASS, CheckStatus.INFO), "human", out=out)
        text = buf.getvalue()
        assert "XDP compatibility check PASSED" in text
        assert "with warnings" not in text
        assert "Run with --verbose" not in text

    def test_banner(self):
        out, buf = _console()
        print_banner("Quick XDP Check", out=out)
        assert buf.getvalue().splitlines() == ["Quick XDP Check", "=" * len("Quick XDP Check")]


class TestStructured:
    def test_json(self):
        out, buf = _console()
        report = _report(CheckStatus.PASS, CheckStatus.FAIL)
        report.add_section("Capabilities", [CheckResult("CAP_BPF", CheckStatus.PASS, "BPF operations")])
        output_report(report, "json", out=out)
        data = json.loads(buf.getvalue())

        assert data["compatible"] is False
        assert data["check_counts"] == {"pass": 2, "fail": 1, "warning": 0, "info": 0, "error": 0}
        assert list(data["sections"]) == ["Kernel", "Capabilities"]
        assert data["sections"]["Capabilities"] == [
            {"name": "CAP_BPF", "status": "pass", "message": "BPF operations"},
        ]

    def test_yaml(self):
        out, buf = _console()
        output_report(_report(CheckStatus.WARNING), "yaml", out=out)
        data = yaml.safe_load(buf.getvalue())
        assert data["compatible"] is True
        assert data["sections"]["Kernel"][0]["details"] == "detail 0"


def test_yaml_survives_tokens_wider_than_the_console():
    captured = "/" + "/".join(["xdp-check-captured-host-tree"] * 4) + "/sys/fs/bpf"
    report = Report()
    report.add_section("Runtime Status", [CheckResult(
        "Pinned BPF Programs", CheckStatus.INFO, "3 XDP-related pinned object(s)",
        details=f"Found in {captured}",
    )])
    buf = io.StringIO()
    output_report(report, "yaml", out=Console(file=buf, width=80, color_system=None))

    data = yaml.safe_load(buf.getvalue())
    assert data["sections"]["Runtime Status"][0]["details"] == f"Found in {captured}"
