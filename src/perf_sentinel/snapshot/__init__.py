"""Snapshot models. The file-backed store lives in :mod:`perf_sentinel.snapshot.store`."""

from .models import FileAnalysisSummary, Snapshot, SnapshotEnvironment, SnapshotMetrics

__all__ = [
    "FileAnalysisSummary",
    "Snapshot",
    "SnapshotEnvironment",
    "SnapshotMetrics",
]
