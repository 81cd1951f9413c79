"""Snapshot comparison: regression / improvement / unchanged classification."""

from .classifier import SCORE_TOLERANCE, classify_files, compare_snapshots
from .models import ImprovementDelta, RegressionDelta, SnapshotComparison, UnchangedFiles

__all__ = [
    "SCORE_TOLERANCE",
    "classify_files",
    "compare_snapshots",
    "ImprovementDelta",
    "RegressionDelta",
    "SnapshotComparison",
    "UnchangedFiles",
]
