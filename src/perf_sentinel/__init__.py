"""
perf-sentinel - static performance scanner with snapshot regression tracking

Flags likely performance and memory-leak patterns in JavaScript/TypeScript
sources with line-level heuristics, grades each file, and compares analysis
snapshots across revisions to gate CI on regressions.
"""

__version__ = "0.1.0"

from .alerts.models import AlertReport, AlertStatus
from .analyzer import PerformanceAnalyzer
from .config import AlertThresholds, SentinelConfig, load_config
from .models import FileAnalysis, Issue, IssueKind, Score, ScoreBreakdown, Severity
from .regression.models import SnapshotComparison
from .scoring import compute_score, grade_for
from .snapshot.models import FileAnalysisSummary, Snapshot
from .snapshot.store import SnapshotStore

__all__ = [
    "__version__",
    "AlertReport",
    "AlertStatus",
    "AlertThresholds",
    "FileAnalysis",
    "FileAnalysisSummary",
    "Issue",
    "IssueKind",
    "PerformanceAnalyzer",
    "Score",
    "ScoreBreakdown",
    "SentinelConfig",
    "Severity",
    "Snapshot",
    "SnapshotComparison",
    "SnapshotStore",
    "compute_score",
    "grade_for",
    "load_config",
]
