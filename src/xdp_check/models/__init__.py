"""Data models for xdp-check."""

from __future__ import annotations

from xdp_check.models.check import CheckResult, CheckStatus
from xdp_check.models.report import Report

__all__ = ["CheckResult", "CheckStatus", "Report"]
