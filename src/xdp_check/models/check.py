"""Check result models."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class CheckStatus(enum.Enum):
    PASS = "pass"
    FAIL = "fail"
    WARNING = "warning"
    INFO = "info"
    ERROR = "error"

    @property
    def is_failure(self) -> bool:
        return self in (CheckStatus.FAIL, CheckStatus.ERROR)


@dataclass(frozen=True)
class CheckResult:
    name: str
    status: CheckStatus
    message: str
    details: str | None = None

    def to_dict(self) -> dict[str, str]:
        data = {
            "name": self.name,
            "status": self.status.value,
            "message": self.message,
        }
        if self.details is not None:
            data["details"] = self.details
        return data
