from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class CheckResult:
    ok: bool
    message: Optional[str] = None
    details: Optional[dict[str, Any]] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"ok": self.ok}
        if self.message is not None:
            data["message"] = self.message
        if self.details is not None:
            data["details"] = self.details
        return data


@dataclass
class Report:
    """Results of one battery run, keyed by check name in execution order."""

    details: dict[str, CheckResult] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return all(result.ok for result in self.details.values())

    @property
    def passed(self) -> int:
        return sum(1 for result in self.details.values() if result.ok)

    @property
    def failed(self) -> int:
        return self.total - self.passed

    @property
    def total(self) -> int:
        return len(self.details)

    def summary(self) -> str:
        lines = [f"{self.passed}/{self.total} passed"]
        for name, result in self.details.items():
            status = "PASS" if result.ok else "FAIL"
            line = f"[{status}] {name}"
            if result.message:
                line += f": {result.message}"
            lines.append(line)
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "overall": {"ok": self.ok},
            "details": {name: result.to_dict() for name, result in self.details.items()},
        }
