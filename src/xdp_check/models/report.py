"""Report aggregation: named sections of check results and the overall verdict."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from xdp_check.models.check import CheckResult, CheckStatus


@dataclass
class Report:
    sections: dict[str, list[CheckResult]] = field(default_factory=dict)
    order: list[str] = field(default_factory=list)

    def add_section(self, name: str, results: Iterable[CheckResult]) -> None:
        """Store ``results`` under ``name`` and remember the insertion position.

        Re-adding a name replaces its results but the earlier position is kept,
        so the section would render twice. Callers use unique names.
        """
        self.order.append(name)
        self.sections[name] = list(results)

    def iter_sections(self) -> Iterable[tuple[str, list[CheckResult]]]:
        """Yield ``(name, results)`` in insertion order."""
        for name in self.order:
            results = self.sections.get(name)
            if results is not None:
                yield name, results

    def all_results(self) -> list[CheckResult]:
        return [r for results in self.sections.values() for r in results]

    def is_compatible(self) -> bool:
        return not any(r.status.is_failure for r in self.all_results())

    @property
    def has_failures(self) -> bool:
        return not self.is_compatible()

    @property
    def has_warnings(self) -> bool:
        return any(r.status == CheckStatus.WARNING for r in self.all_results())

    def check_counts(self) -> dict[str, int]:
        counts = {status.value: 0 for status in CheckStatus}
        for r in self.all_results():
            counts[r.status.value] += 1
        return counts

    def to_dict(self) -> dict[str, Any]:
        return {
            "compatible": self.is_compatible(),
            "check_counts": self.check_counts(),
            "sections": {
                name: [r.to_dict() for r in results]
                for name, results in self.sections.items()
            },
        }
