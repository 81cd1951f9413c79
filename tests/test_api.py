"""Tests for the functional facade."""

from perf_sentinel import api
from perf_sentinel.alerts.models import AlertStatus


def test_round_trip_through_the_facade(tmp_path):
    source = tmp_path / "widget.ts"
    source.write_text("const timer = setTimeout(run, 10)\n", encoding="utf-8")
    snaps = tmp_path / "snaps"

    analysis = api.analyze_file(source)
    assert analysis.summary.medium_severity == 1
    assert api.compute_score(analysis.issues, analysis.total_lines) == analysis.score

    snapshot = api.create_snapshot([analysis], "feature", "abc123", snapshots_dir=snaps)
    assert api.load_baseline("main", snapshots_dir=snaps) is None
    assert api.compare_with_baseline(snapshot, "main", snapshots_dir=snaps) is None
    assert api.generate_alert_report(snapshot, "main", snapshots_dir=snaps).status is AlertStatus.WARNING

    api.save_baseline(snapshot, "main", snapshots_dir=snaps)
    assert api.load_baseline("main", snapshots_dir=snaps) == snapshot

    comparison = api.compare_with_baseline(snapshot, "main", snapshots_dir=snaps)
    assert comparison.unchanged.total_files == 1
    assert api.generate_alert_report(snapshot, "main", snapshots_dir=snaps).status is AlertStatus.PASS
