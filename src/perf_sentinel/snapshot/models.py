"""Data models for analysis snapshots: immutable records of a single analysis run.

Snapshots are stored as JSON. Keys keep the camelCase names the CI tooling
reads (``fileAnalysis``, ``highSeverityIssues``, ...); attributes are
snake_case and ``to_dict`` / ``from_dict`` translate between the two.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from ..exceptions import InvalidInputError
from ..models import ScoreBreakdown

Number = Union[int, float]


@dataclass(frozen=True)
class FileAnalysisSummary:
    """Per-file counts and score as recorded in a snapshot."""

    file_path: str
    total_issues: int
    high_severity: int
    medium_severity: int
    low_severity: int
    score: Number
    grade: str
    breakdown: ScoreBreakdown = field(default_factory=ScoreBreakdown)

    def __post_init__(self) -> None:
        for name in ("total_issues", "high_severity", "medium_severity", "low_severity"):
            if getattr(self, name) < 0:
                raise InvalidInputError(f"{self.file_path}: {name} must be non-negative")

    def to_dict(self) -> dict[str, Any]:
        return {
            "filePath": self.file_path,
            "totalIssues": self.total_issues,
            "highSeverity": self.high_severity,
            "mediumSeverity": self.medium_severity,
            "lowSeverity": self.low_severity,
            "score": self.score,
            "grade": self.grade,
            "breakdown": self.breakdown.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FileAnalysisSummary:
        raw_breakdown = data.get("breakdown") or {}
        return cls(
            file_path=data["filePath"],
            total_issues=int(data["totalIssues"]),
            high_severity=int(data["highSeverity"]),
            medium_severity=int(data["mediumSeverity"]),
            low_severity=int(data["lowSeverity"]),
            score=data["score"],
            grade=data["grade"],
            breakdown=ScoreBreakdown(
                memory_leaks=raw_breakdown.get("memoryLeaks", 100),
                performance=raw_breakdown.get("performance", 100),
                code_quality=raw_breakdown.get("codeQuality", 100),
            ),
        )


@dataclass(frozen=True)
class SnapshotMetrics:
    """Aggregate counts and average scores over every file in a snapshot."""

    total_files: int = 0
    total_issues: int = 0
    high_severity_issues: int = 0
    medium_severity_issues: int = 0
    low_severity_issues: int = 0
    average_score: float = 100.0
    performance_score: float = 100.0
    memory_score: float = 100.0
    code_quality_score: float = 100.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalFiles": self.total_files,
            "totalIssues": self.total_issues,
            "highSeverityIssues": self.high_severity_issues,
            "mediumSeverityIssues": self.medium_severity_issues,
            "lowSeverityIssues": self.low_severity_issues,
            "averageScore": self.average_score,
            "performanceScore": self.performance_score,
            "memoryScore": self.memory_score,
            "codeQualityScore": self.code_quality_score,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SnapshotMetrics:
        return cls(
            total_files=int(data["totalFiles"]),
            total_issues=int(data["totalIssues"]),
            high_severity_issues=int(data["highSeverityIssues"]),
            medium_severity_issues=int(data["mediumSeverityIssues"]),
            low_severity_issues=int(data["lowSeverityIssues"]),
            average_score=float(data["averageScore"]),
            performance_score=float(data["performanceScore"]),
            memory_score=float(data["memoryScore"]),
            code_quality_score=float(data["codeQualityScore"]),
        )


@dataclass(frozen=True)
class SnapshotEnvironment:
    """Where the analysis ran."""

    runtime_version: str = "unknown"
    package_version: str = "unknown"
    platform: str = "unknown"

    def to_dict(self) -> dict[str, str]:
        return {
            "runtimeVersion": self.runtime_version,
            "packageVersion": self.package_version,
            "platform": self.platform,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SnapshotEnvironment:
        # Older documents record nodeVersion / os
        return cls(
            runtime_version=data.get("runtimeVersion", data.get("nodeVersion", "unknown")),
            package_version=data.get("packageVersion", "unknown"),
            platform=data.get("platform", data.get("os", "unknown")),
        )


@dataclass(frozen=True)
class Snapshot:
    """Complete, immutable record of one analysis run.

    ``metrics.total_files`` always equals ``len(file_analysis)`` and every
    ``file_path`` appears at most once.
    """

    id: str
    timestamp: int  # milliseconds since the epoch
    branch: str
    commit: str
    metrics: SnapshotMetrics
    file_analysis: tuple[FileAnalysisSummary, ...] = ()
    environment: SnapshotEnvironment = field(default_factory=SnapshotEnvironment)

    def __post_init__(self) -> None:
        object.__setattr__(self, "file_analysis", tuple(self.file_analysis))
        if self.metrics.total_files != len(self.file_analysis):
            raise InvalidInputError(
                f"snapshot {self.id}: metrics.totalFiles={self.metrics.total_files} "
                f"but {len(self.file_analysis)} file records"
            )
        seen: set[str] = set()
        for summary in self.file_analysis:
            if summary.file_path in seen:
                raise InvalidInputError(
                    f"snapshot {self.id}: duplicate file path {summary.file_path}"
                )
            seen.add(summary.file_path)

    def file(self, file_path: str) -> Optional[FileAnalysisSummary]:
        for summary in self.file_analysis:
            if summary.file_path == file_path:
                return summary
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "branch": self.branch,
            "commit": self.commit,
            "metrics": self.metrics.to_dict(),
            "fileAnalysis": [f.to_dict() for f in self.file_analysis],
            "environment": self.environment.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Snapshot:
        """Rebuild a snapshot from its JSON document.

        Raises KeyError / TypeError / ValueError / InvalidInputError when the
        document does not have the snapshot shape.
        """
        return cls(
            id=str(data["id"]),
            timestamp=int(data["timestamp"]),
            branch=str(data["branch"]),
            commit=str(data["commit"]),
            metrics=SnapshotMetrics.from_dict(data["metrics"]),
            file_analysis=tuple(
                FileAnalysisSummary.from_dict(f) for f in data.get("fileAnalysis", [])
            ),
            environment=SnapshotEnvironment.from_dict(data.get("environment") or {}),
        )
