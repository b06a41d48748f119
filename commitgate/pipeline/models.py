"""
Pipeline Models

Shared result types for check execution and reporting.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class CheckStatus(str, Enum):
    """Outcome of a single check."""
    PASS = "pass"
    FAIL = "fail"
    SKIPPED = "skipped"
    ERRORED = "errored"


class Overall(str, Enum):
    """Verdict of a whole run."""
    SUCCESS = "success"
    FAILURE = "failure"


FAILING_STATUSES = (CheckStatus.FAIL, CheckStatus.ERRORED)


@dataclass(frozen=True)
class CheckResult:
    """Result of a single check execution."""
    name: str
    status: CheckStatus
    messages: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)
    duration: float = 0.0

    @property
    def failed(self) -> bool:
        return self.status in FAILING_STATUSES

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "status": self.status.value,
            "messages": list(self.messages),
            "warnings": list(self.warnings),
            "suggestions": list(self.suggestions),
            "duration": round(self.duration, 3),
        }

    def __str__(self) -> str:
        return f"[{self.status.value.upper()}] {self.name}"


@dataclass
class Report:
    """Ordered outcome of one orchestration run."""
    results: List[CheckResult]
    started_at: datetime
    finished_at: datetime
    overall: Optional[Overall] = None

    def __post_init__(self):
        if self.overall is None:
            self.overall = compute_overall(self.results)

    @property
    def passed(self) -> bool:
        return self.overall == Overall.SUCCESS

    @property
    def duration(self) -> float:
        return (self.finished_at - self.started_at).total_seconds()

    def count(self, status: CheckStatus) -> int:
        return sum(1 for r in self.results if r.status == status)

    @property
    def failures(self) -> List[CheckResult]:
        """Results that make the run fail."""
        return [r for r in self.results if r.failed]

    def summary(self) -> str:
        """Get summary string."""
        return (
            f"{self.count(CheckStatus.PASS)} passed, "
            f"{self.count(CheckStatus.FAIL)} failed, "
            f"{self.count(CheckStatus.ERRORED)} errored, "
            f"{self.count(CheckStatus.SKIPPED)} skipped "
            f"({len(self.results)} total)"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overall": self.overall.value,
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat(),
            "duration": round(self.duration, 3),
            "results": [r.to_dict() for r in self.results],
        }


def compute_overall(results: List[CheckResult]) -> Overall:
    """Failure iff any result failed or errored."""
    if any(r.failed for r in results):
        return Overall.FAILURE
    return Overall.SUCCESS
