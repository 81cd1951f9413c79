"""Data models for snapshot comparison: one-sided deltas and per-file buckets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..snapshot.models import Snapshot


@dataclass(frozen=True)
class RegressionDelta:
    """How far the current snapshot moved in the unfavorable direction.

    Every number is clamped at zero: a positive ``average_score`` means the
    average score dropped by that many points.
    """

    total_issues: int = 0
    high_severity_issues: int = 0
    average_score: float = 0.0
    files_with_regressions: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalIssues": self.total_issues,
            "highSeverityIssues": self.high_severity_issues,
            "averageScore": self.average_score,
            "filesWithRegressions": list(self.files_with_regressions),
        }


@dataclass(frozen=True)
class ImprovementDelta:
    """Mirror of :class:`RegressionDelta` for the favorable direction."""

    total_issues: int = 0
    high_severity_issues: int = 0
    average_score: float = 0.0
    files_with_improvements: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalIssues": self.total_issues,
            "highSeverityIssues": self.high_severity_issues,
            "averageScore": self.average_score,
            "filesWithImprovements": list(self.files_with_improvements),
        }


@dataclass(frozen=True)
class UnchangedFiles:
    """Files present in both snapshots whose score moved less than the tolerance."""

    files: tuple[str, ...] = ()

    @property
    def total_files(self) -> int:
        return len(self.files)

    def to_dict(self) -> dict[str, Any]:
        return {"totalFiles": self.total_files, "files": list(self.files)}


@dataclass(frozen=True)
class SnapshotComparison:
    """Baseline vs. current, computed on demand and never persisted."""

    baseline: Snapshot
    current: Snapshot
    regression: RegressionDelta = field(default_factory=RegressionDelta)
    improvement: ImprovementDelta = field(default_factory=ImprovementDelta)
    unchanged: UnchangedFiles = field(default_factory=UnchangedFiles)

    def to_dict(self) -> dict[str, Any]:
        return {
            "baseline": self.baseline.to_dict(),
            "current": self.current.to_dict(),
            "regression": self.regression.to_dict(),
            "improvement": self.improvement.to_dict(),
            "unchanged": self.unchanged.to_dict(),
        }
