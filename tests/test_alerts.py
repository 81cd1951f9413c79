"""Tests for the alert decision engine and report formatting."""

import json

import pytest
from rich.console import Console

from perf_sentinel.alerts.engine import AlertSystem, decide, should_block, should_warn
from perf_sentinel.alerts.formatters import (
    grade_emoji,
    print_alert_report,
    render_github_comment,
    report_to_json,
    severity_label,
    status_message,
)
from perf_sentinel.alerts.models import AlertStatus
from perf_sentinel.config import AlertThresholds
from perf_sentinel.models import Severity
from perf_sentinel.regression.models import (
    ImprovementDelta,
    RegressionDelta,
    SnapshotComparison,
    UnchangedFiles,
)
from perf_sentinel.snapshot.models import Snapshot, SnapshotEnvironment, SnapshotMetrics

EMPTY = Snapshot(id="s", timestamp=1, branch="main", commit="c", metrics=SnapshotMetrics())


def _comparison(regression=None, improvement=None, unchanged=None):
    return SnapshotComparison(
        baseline=EMPTY,
        current=EMPTY,
        regression=regression or RegressionDelta(),
        improvement=improvement or ImprovementDelta(),
        unchanged=unchanged or UnchangedFiles(),
    )


class TestNoBaseline:
    def test_missing_baseline_is_a_zero_score_warning(self, store):
        snapshot = store.create_snapshot(
            [], "feature-x", "abc", environment=SnapshotEnvironment()
        )
        report = AlertSystem(store).generate_alert_report(snapshot, "feature-x")

        assert report.status is AlertStatus.WARNING
        assert report.summary.score == 0
        assert report.summary.message == "No baseline available for comparison"
        assert report.critical_issues == ("No baseline found for comparison",)
        assert report.recommendations == ("Create a baseline snapshot first",)
        assert report.warnings == ()
        assert not report.has_regressions
        assert not report.has_improvements
        assert report.details.unchanged.total_files == 0

    def test_decide_without_comparison(self):
        assert decide(None).summary.score == 0


class TestVerdicts:
    def test_clean_comparison_passes(self):
        report = decide(_comparison(unchanged=UnchangedFiles(files=("a.ts",))))
        assert report.status is AlertStatus.PASS
        assert report.summary.score == 100
        assert report.summary.message == (
            "Performance check passed - no significant regressions detected"
        )
        assert report.critical_issues == ()
        assert report.warnings == ()

    def test_three_critical_issues(self):
        report = decide(
            _comparison(
                regression=RegressionDelta(total_issues=20, high_severity_issues=5, average_score=10.0)
            )
        )
        assert report.status is AlertStatus.FAIL
        assert report.summary.score == 40
        assert report.critical_issues == (
            "Performance score regressed by 10.00 points (threshold: 5)",
            "High severity issues increased by 5 (threshold: 2)",
            "Total issues increased by 20 (threshold: 10)",
        )
        assert report.has_regressions

    def test_sub_threshold_regression_warns(self):
        report = decide(
            _comparison(
                regression=RegressionDelta(average_score=3.0, files_with_regressions=("a.ts",))
            )
        )
        assert report.status is AlertStatus.WARNING
        assert report.summary.score == 80
        assert report.warnings == (
            "Performance score slightly regressed by 3.00 points",
            "1 files show performance regressions",
        )
        assert report.recommendations == (
            "Review the following files for performance issues: a.ts",
        )
        assert not report.has_regressions

    def test_regression_exactly_at_threshold_is_a_warning(self):
        report = decide(_comparison(regression=RegressionDelta(average_score=5.0)))
        assert report.critical_issues == ()
        assert report.status is AlertStatus.WARNING
        assert report.summary.score == 90

    def test_fail_and_warning_messages_accumulate(self):
        # High-severity jump is critical; the regressed file is also a warning.
        report = decide(
            _comparison(
                regression=RegressionDelta(high_severity_issues=3, files_with_regressions=("a.ts",))
            )
        )
        assert report.status is AlertStatus.FAIL
        assert report.summary.score == 80
        assert report.warnings == ("1 files show performance regressions",)

    def test_only_first_five_regressed_files_are_listed(self):
        files = tuple(f"f{i}.ts" for i in range(8))
        report = decide(_comparison(regression=RegressionDelta(files_with_regressions=files)))
        assert report.recommendations[0].endswith("f0.ts, f1.ts, f2.ts, f3.ts, f4.ts")
        assert report.warnings == ("8 files show performance regressions",)

    def test_improvement(self):
        report = decide(
            _comparison(
                improvement=ImprovementDelta(average_score=3.0, files_with_improvements=("a.ts", "b.ts"))
            )
        )
        assert report.status is AlertStatus.PASS
        assert report.has_improvements
        assert report.recommendations == (
            "Great improvement! Performance score improved by 3.00 points",
            "2 files show improvements - consider these patterns for other files",
        )

    def test_small_improvement_is_not_highlighted(self):
        report = decide(_comparison(improvement=ImprovementDelta(average_score=2.0)))
        assert not report.has_improvements
        assert report.recommendations == ()

    def test_custom_thresholds(self):
        thresholds = AlertThresholds(max_score_regression=1.5)
        report = decide(_comparison(regression=RegressionDelta(average_score=2.0)), thresholds)
        assert report.critical_issues == (
            "Performance score regressed by 2.00 points (threshold: 1.5)",
        )

    def test_block_and_warn(self):
        failing = decide(_comparison(regression=RegressionDelta(high_severity_issues=9)))
        warning = decide(_comparison(regression=RegressionDelta(average_score=1.0)))
        passing = decide(_comparison())

        assert should_block(failing) and not should_warn(failing)
        assert should_warn(warning) and not should_block(warning)
        assert not should_block(passing) and not should_warn(passing)


class TestFormatters:
    @pytest.fixture
    def failing_report(self):
        return decide(
            _comparison(
                regression=RegressionDelta(high_severity_issues=4, files_with_regressions=("src/a.ts",)),
                improvement=ImprovementDelta(average_score=4.0, files_with_improvements=("src/b.ts",)),
                unchanged=UnchangedFiles(files=("src/c.ts",)),
            )
        )

    def test_github_comment(self, failing_report):
        comment = render_github_comment(failing_report, pr_number="42")
        assert "**Status:** FAILED" in comment
        assert "**Score:** 80/100" in comment
        assert "- High severity issues increased by 4 (threshold: 2)" in comment
        assert "- Performance score improved by 4.00 points" in comment
        assert "- Files with regressions: 1" in comment
        assert "- Unchanged files: 1" in comment
        assert comment.rstrip().endswith("PR #42*")

    def test_github_comment_without_pr_has_no_footer(self, failing_report):
        assert "PR #" not in render_github_comment(failing_report)

    def test_json_report(self, failing_report):
        data = json.loads(report_to_json(failing_report))
        assert data["summary"]["status"] == "fail"
        assert data["hasRegressions"] is True
        assert data["hasImprovements"] is True
        assert data["details"]["regression"]["filesWithRegressions"] == ["src/a.ts"]
        assert data["details"]["unchanged"]["totalFiles"] == 1

    def test_console_report(self, failing_report):
        console = Console(record=True, width=120)
        print_alert_report(failing_report, console)
        text = console.export_text()
        assert "FAIL" in text
        assert "High severity issues increased by 4" in text
        assert "Unchanged files" in text

    def test_display_labels(self):
        assert status_message(AlertStatus.PASS).endswith(
            "Performance check passed - no significant regressions detected"
        )
        assert "HIGH" in severity_label(Severity.HIGH)
        assert "LOW" in severity_label("low")
        assert grade_emoji(95) != grade_emoji(10)
        assert grade_emoji(90) == grade_emoji(100)
