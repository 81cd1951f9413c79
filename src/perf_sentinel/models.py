"""Core data shapes: detected issues, per-file summaries and scores.

Everything here is plain, immutable data. Invariants are checked at
construction so downstream code never has to re-validate a field.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable

from .exceptions import InvalidInputError

GRADES = ("A+", "A", "A-", "B+", "B", "B-", "C+", "C", "C-", "D+", "D", "D-", "F")


class Severity(str, Enum):
    """Weight class of an issue. Only used for score deductions."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class IssueKind(str, Enum):
    """Display category reported by a rule (icon selection only)."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Issue:
    """A single detected pattern on one line of a source file."""

    line: int
    message: str
    suggestion: str
    severity: Severity
    kind: IssueKind = IssueKind.INFO

    def __post_init__(self) -> None:
        if isinstance(self.line, bool) or not isinstance(self.line, int) or self.line < 1:
            raise InvalidInputError(f"issue line must be an integer >= 1, got {self.line!r}")
        # Accept the raw string values too, but always store the enum.
        try:
            object.__setattr__(self, "severity", Severity(self.severity))
            object.__setattr__(self, "kind", IssueKind(self.kind))
        except ValueError as e:
            raise InvalidInputError(str(e)) from e

    def to_dict(self) -> dict[str, Any]:
        return {
            "line": self.line,
            "message": self.message,
            "suggestion": self.suggestion,
            "severity": self.severity.value,
            "type": self.kind.value,
        }


@dataclass(frozen=True)
class IssueSummary:
    """Issue counts for one file."""

    total_issues: int = 0
    high_severity: int = 0
    medium_severity: int = 0
    low_severity: int = 0

    def __post_init__(self) -> None:
        for name in ("total_issues", "high_severity", "medium_severity", "low_severity"):
            if getattr(self, name) < 0:
                raise InvalidInputError(f"{name} must be non-negative")

    @classmethod
    def from_issues(cls, issues: Iterable[Issue]) -> IssueSummary:
        counts = Counter(issue.severity for issue in issues)
        return cls(
            total_issues=sum(counts.values()),
            high_severity=counts[Severity.HIGH],
            medium_severity=counts[Severity.MEDIUM],
            low_severity=counts[Severity.LOW],
        )

    def to_dict(self) -> dict[str, int]:
        return {
            "totalIssues": self.total_issues,
            "highSeverity": self.high_severity,
            "mediumSeverity": self.medium_severity,
            "lowSeverity": self.low_severity,
        }


@dataclass(frozen=True)
class ScoreBreakdown:
    """Three independent 0-100 axes."""

    memory_leaks: int = 100
    performance: int = 100
    code_quality: int = 100

    def __post_init__(self) -> None:
        for name in ("memory_leaks", "performance", "code_quality"):
            value = getattr(self, name)
            if not 0 <= value <= 100:
                raise InvalidInputError(f"breakdown.{name} must be in [0, 100], got {value}")

    def to_dict(self) -> dict[str, int]:
        return {
            "memoryLeaks": self.memory_leaks,
            "performance": self.performance,
            "codeQuality": self.code_quality,
        }


@dataclass(frozen=True)
class Score:
    """Total score, letter grade and breakdown for one file."""

    total: int
    grade: str
    breakdown: ScoreBreakdown = field(default_factory=ScoreBreakdown)

    def __post_init__(self) -> None:
        if not 0 <= self.total <= 100:
            raise InvalidInputError(f"score total must be in [0, 100], got {self.total}")
        if self.grade not in GRADES:
            raise InvalidInputError(f"unknown grade {self.grade!r}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "grade": self.grade,
            "breakdown": self.breakdown.to_dict(),
        }


@dataclass(frozen=True)
class FileAnalysis:
    """Result of running the rule table over one file."""

    file_path: str
    issues: tuple[Issue, ...]
    summary: IssueSummary
    score: Score
    total_lines: int = 0

    def issues_with(self, severity: Severity) -> list[Issue]:
        return [i for i in self.issues if i.severity is severity]

    def to_summary(self):
        """Reduce to the per-file record stored in a snapshot."""
        from .snapshot.models import FileAnalysisSummary

        return FileAnalysisSummary(
            file_path=self.file_path,
            total_issues=self.summary.total_issues,
            high_severity=self.summary.high_severity,
            medium_severity=self.summary.medium_severity,
            low_severity=self.summary.low_severity,
            score=self.score.total,
            grade=self.score.grade,
            breakdown=self.score.breakdown,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "filePath": self.file_path,
            "issues": [i.to_dict() for i in self.issues],
            "summary": self.summary.to_dict(),
            "score": self.score.to_dict(),
        }
