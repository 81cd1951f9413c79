"""Alert decision engine: thresholds applied to a snapshot comparison.

``decide`` is pure. ``AlertSystem`` wires it to a SnapshotStore so callers
can go straight from a snapshot to a verdict.
"""

from __future__ import annotations

from typing import Optional

from ..config import AlertThresholds
from ..logging_config import get_logger
from ..regression.models import SnapshotComparison
from ..snapshot.models import Snapshot
from ..snapshot.store import SnapshotStore
from .models import STATUS_MESSAGES, AlertDetails, AlertReport, AlertStatus, AlertSummary

logger = get_logger(__name__)

MAX_FILES_LISTED = 5
CRITICAL_PENALTY = 20
WARNING_PENALTY = 10
WARNING_SCORE_FLOOR = 50


def _num(value: float) -> str:
    """Render a threshold the way it was configured: 5 not 5.0."""
    return f"{value:g}"


def no_baseline_report() -> AlertReport:
    return AlertReport(
        summary=AlertSummary(
            status=AlertStatus.WARNING,
            message="No baseline available for comparison",
            score=0,
        ),
        critical_issues=("No baseline found for comparison",),
        recommendations=("Create a baseline snapshot first",),
    )


def decide(
    comparison: Optional[SnapshotComparison], thresholds: Optional[AlertThresholds] = None
) -> AlertReport:
    """Turn a comparison into a verdict.

    Every check runs; none short-circuits the others. A missing comparison
    (no baseline) yields a fixed warning with score 0.
    """
    if comparison is None:
        return no_baseline_report()

    thresholds = thresholds or AlertThresholds()
    regression = comparison.regression
    improvement = comparison.improvement

    critical: list[str] = []
    warnings: list[str] = []
    recommendations: list[str] = []

    if regression.average_score > thresholds.max_score_regression:
        critical.append(
            f"Performance score regressed by {regression.average_score:.2f} points "
            f"(threshold: {_num(thresholds.max_score_regression)})"
        )
    if regression.high_severity_issues > thresholds.max_high_severity_increase:
        critical.append(
            f"High severity issues increased by {regression.high_severity_issues} "
            f"(threshold: {_num(thresholds.max_high_severity_increase)})"
        )
    if regression.total_issues > thresholds.max_total_issues_increase:
        critical.append(
            f"Total issues increased by {regression.total_issues} "
            f"(threshold: {_num(thresholds.max_total_issues_increase)})"
        )

    has_improvements = improvement.average_score > thresholds.min_score_improvement
    if has_improvements:
        recommendations.append(
            f"Great improvement! Performance score improved by "
            f"{improvement.average_score:.2f} points"
        )

    if 0 < regression.average_score <= thresholds.max_score_regression:
        warnings.append(
            f"Performance score slightly regressed by {regression.average_score:.2f} points"
        )

    regressed = regression.files_with_regressions
    if regressed:
        warnings.append(f"{len(regressed)} files show performance regressions")
        recommendations.append(
            "Review the following files for performance issues: "
            + ", ".join(regressed[:MAX_FILES_LISTED])
        )

    improved = improvement.files_with_improvements
    if improved:
        recommendations.append(
            f"{len(improved)} files show improvements - consider these patterns for other files"
        )

    if critical:
        status = AlertStatus.FAIL
        score = max(0, 100 - CRITICAL_PENALTY * len(critical))
    elif warnings:
        status = AlertStatus.WARNING
        score = max(WARNING_SCORE_FLOOR, 100 - WARNING_PENALTY * len(warnings))
    else:
        status = AlertStatus.PASS
        score = 100

    return AlertReport(
        summary=AlertSummary(status=status, message=STATUS_MESSAGES[status], score=score),
        critical_issues=tuple(critical),
        warnings=tuple(warnings),
        recommendations=tuple(recommendations),
        has_regressions=bool(critical),
        has_improvements=has_improvements,
        details=AlertDetails(
            regression=regression,
            improvement=improvement,
            unchanged=comparison.unchanged,
        ),
    )


def should_block(report: AlertReport) -> bool:
    return report.status is AlertStatus.FAIL


def should_warn(report: AlertReport) -> bool:
    return report.status is AlertStatus.WARNING


class AlertSystem:
    """Compare snapshots against stored baselines and decide a verdict."""

    def __init__(self, store: SnapshotStore, thresholds: Optional[AlertThresholds] = None) -> None:
        self.store = store
        self.thresholds = thresholds or AlertThresholds()

    def generate_alert_report(self, snapshot: Snapshot, branch: str = "main") -> AlertReport:
        comparison = self.store.compare_with_baseline(snapshot, branch)
        if comparison is None:
            logger.warning(f"No baseline for branch {branch}; cannot compare {snapshot.id}")
        report = decide(comparison, self.thresholds)
        logger.info(
            f"Alert report for {snapshot.id} vs {branch}: "
            f"{report.status.value} ({report.summary.score}/100)"
        )
        return report
