"""Alert verdict data: status, summary and the full report."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..exceptions import InvalidInputError
from ..regression.models import ImprovementDelta, RegressionDelta, UnchangedFiles


class AlertStatus(str, Enum):
    PASS = "pass"
    WARNING = "warning"
    FAIL = "fail"


STATUS_MESSAGES = {
    AlertStatus.PASS: "Performance check passed - no significant regressions detected",
    AlertStatus.WARNING: "Performance check passed with warnings - minor regressions detected",
    AlertStatus.FAIL: "Performance check failed - significant regressions detected",
}


@dataclass(frozen=True)
class AlertSummary:
    status: AlertStatus
    message: str
    score: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "status", AlertStatus(self.status))
        if not 0 <= self.score <= 100:
            raise InvalidInputError(f"alert score must be in [0, 100], got {self.score}")

    def to_dict(self) -> dict[str, Any]:
        return {"status": self.status.value, "message": self.message, "score": self.score}


@dataclass(frozen=True)
class AlertDetails:
    """The comparison blocks the verdict was derived from (zeroed without a baseline)."""

    regression: RegressionDelta = field(default_factory=RegressionDelta)
    improvement: ImprovementDelta = field(default_factory=ImprovementDelta)
    unchanged: UnchangedFiles = field(default_factory=UnchangedFiles)

    def to_dict(self) -> dict[str, Any]:
        return {
            "regression": self.regression.to_dict(),
            "improvement": self.improvement.to_dict(),
            "unchanged": self.unchanged.to_dict(),
        }


@dataclass(frozen=True)
class AlertReport:
    """Pass/warning/fail verdict with the messages that explain it."""

    summary: AlertSummary
    critical_issues: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    recommendations: tuple[str, ...] = ()
    has_regressions: bool = False
    has_improvements: bool = False
    details: AlertDetails = field(default_factory=AlertDetails)

    @property
    def status(self) -> AlertStatus:
        return self.summary.status

    def to_dict(self) -> dict[str, Any]:
        return {
            "hasRegressions": self.has_regressions,
            "hasImprovements": self.has_improvements,
            "criticalIssues": list(self.critical_issues),
            "warnings": list(self.warnings),
            "recommendations": list(self.recommendations),
            "summary": self.summary.to_dict(),
            "details": self.details.to_dict(),
        }
