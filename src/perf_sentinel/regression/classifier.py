"""Regression classifier: diffs a current snapshot against a baseline.

Two independent passes:
  1. File-level: every baseline file is looked up in the current snapshot by
     exact path and lands in at most one of regression / improvement /
     unchanged. Files present in only one snapshot (added or deleted) are
     deliberately left out of all three buckets.
  2. Aggregate: regression and improvement are separate one-sided clamps of
     the same signed metric deltas. Each clamp is computed on its own; one is
     never derived from the other.
"""

from __future__ import annotations

from ..logging_config import get_logger
from ..snapshot.models import Snapshot
from .models import ImprovementDelta, RegressionDelta, SnapshotComparison, UnchangedFiles

logger = get_logger(__name__)

# Scores closer than this are considered equal.
SCORE_TOLERANCE = 0.01
# Differences are rounded to this many places before the tolerance check.
DIFF_PRECISION = 9


def classify_files(
    baseline: Snapshot, current: Snapshot
) -> tuple[list[str], list[str], list[str]]:
    """Split files common to both snapshots into (regressed, improved, unchanged).

    Order follows the baseline's file order.
    """
    current_scores = {f.file_path: f.score for f in current.file_analysis}

    regressed: list[str] = []
    improved: list[str] = []
    unchanged: list[str] = []

    for old in baseline.file_analysis:
        new_score = current_scores.get(old.file_path)
        if new_score is None:
            continue
        # Tolerance check runs before the direction check.
        if round(abs(new_score - old.score), DIFF_PRECISION) < SCORE_TOLERANCE:
            unchanged.append(old.file_path)
        elif new_score < old.score:
            regressed.append(old.file_path)
        else:
            improved.append(old.file_path)

    return regressed, improved, unchanged


def compare_snapshots(baseline: Snapshot, current: Snapshot) -> SnapshotComparison:
    """Compute aggregate and per-file deltas between two snapshots."""
    regressed, improved, unchanged = classify_files(baseline, current)
    old, new = baseline.metrics, current.metrics

    regression = RegressionDelta(
        total_issues=max(0, new.total_issues - old.total_issues),
        high_severity_issues=max(0, new.high_severity_issues - old.high_severity_issues),
        average_score=max(0.0, old.average_score - new.average_score),
        files_with_regressions=tuple(regressed),
    )
    improvement = ImprovementDelta(
        total_issues=max(0, old.total_issues - new.total_issues),
        high_severity_issues=max(0, old.high_severity_issues - new.high_severity_issues),
        average_score=max(0.0, new.average_score - old.average_score),
        files_with_improvements=tuple(improved),
    )

    logger.debug(
        f"Compared {current.id} against {baseline.id}: "
        f"{len(regressed)} regressed, {len(improved)} improved, {len(unchanged)} unchanged"
    )

    return SnapshotComparison(
        baseline=baseline,
        current=current,
        regression=regression,
        improvement=improvement,
        unchanged=UnchangedFiles(files=tuple(unchanged)),
    )
