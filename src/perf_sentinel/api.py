"""Public API for perf-sentinel.

Thin functions over the store, classifier and alert engine for callers that
do not want to hold the objects themselves. Each call opens the store at
``snapshots_dir``; nothing is kept between calls.

Example:
    >>> from perf_sentinel import api
    >>> analysis = api.analyze_file("src/App.tsx")
    >>> snapshot = api.create_snapshot([analysis], branch="feature-x", commit="abc123")
    >>> report = api.generate_alert_report(snapshot, branch="main")
    >>> report.status
    <AlertStatus.PASS: 'pass'>
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional, Union

from .alerts.engine import AlertSystem
from .alerts.models import AlertReport
from .analyzer import PerformanceAnalyzer
from .config import AlertThresholds
from .models import FileAnalysis, Issue, Score
from .regression.models import SnapshotComparison
from .scoring import compute_score as _compute_score
from .snapshot.models import FileAnalysisSummary, Snapshot
from .snapshot.store import DEFAULT_SNAPSHOTS_DIR, SnapshotStore

PathLike = Union[str, Path]


def analyze_file(path: PathLike) -> FileAnalysis:
    """Run the rule table over one file and score it."""
    return PerformanceAnalyzer().analyze_file(path)


def compute_score(issues: Iterable[Issue], total_lines: int) -> Score:
    return _compute_score(issues, total_lines)


def create_snapshot(
    analyses: Iterable[Union[FileAnalysis, FileAnalysisSummary]],
    branch: str,
    commit: str,
    snapshots_dir: PathLike = DEFAULT_SNAPSHOTS_DIR,
) -> Snapshot:
    return SnapshotStore(snapshots_dir).create_snapshot(analyses, branch, commit)


def save_baseline(
    snapshot: Snapshot, branch: str = "main", snapshots_dir: PathLike = DEFAULT_SNAPSHOTS_DIR
) -> None:
    SnapshotStore(snapshots_dir).save_baseline(snapshot, branch)


def load_baseline(
    branch: str = "main", snapshots_dir: PathLike = DEFAULT_SNAPSHOTS_DIR
) -> Optional[Snapshot]:
    return SnapshotStore(snapshots_dir).load_baseline(branch)


def compare_with_baseline(
    snapshot: Snapshot, branch: str = "main", snapshots_dir: PathLike = DEFAULT_SNAPSHOTS_DIR
) -> Optional[SnapshotComparison]:
    """Diff against the branch baseline; ``None`` when the branch has none."""
    return SnapshotStore(snapshots_dir).compare_with_baseline(snapshot, branch)


def generate_alert_report(
    snapshot: Snapshot,
    branch: str = "main",
    snapshots_dir: PathLike = DEFAULT_SNAPSHOTS_DIR,
    thresholds: Optional[AlertThresholds] = None,
) -> AlertReport:
    """Compare against the branch baseline and decide pass / warning / fail."""
    system = AlertSystem(SnapshotStore(snapshots_dir), thresholds)
    return system.generate_alert_report(snapshot, branch)
