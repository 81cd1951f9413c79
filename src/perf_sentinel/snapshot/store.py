"""File-backed snapshot store.

Layout under the store root (default ``.performance-snapshots/``)::

    <id>.json                      one document per snapshot
    baselines/baseline-<branch>.json   one document per branch, overwritten on save

Directories are created on the first write; reading never creates them.

Usage::

    store = SnapshotStore(".performance-snapshots")
    snapshot = store.create_snapshot(analyses, branch="feature-x", commit=sha)
    comparison = store.compare_with_baseline(snapshot, "main")
"""

from __future__ import annotations

import json
import os
import secrets
import string
import tempfile
import threading
import time
from pathlib import Path
from typing import Callable, Iterable, Optional, Union
from urllib.parse import quote

from ..environment import runtime_environment
from ..exceptions import InvalidInputError, MalformedRecordError, StorageError
from ..logging_config import get_logger
from ..models import FileAnalysis
from ..regression.classifier import compare_snapshots
from ..regression.models import SnapshotComparison
from .models import FileAnalysisSummary, Snapshot, SnapshotEnvironment, SnapshotMetrics

logger = get_logger(__name__)

DEFAULT_SNAPSHOTS_DIR = ".performance-snapshots"
DEFAULT_MAX_AGE_MS = 7 * 24 * 60 * 60 * 1000

_ID_ALPHABET = string.digits + string.ascii_lowercase
# Non-snapshot JSON files the CI runner writes next to snapshots.
_FOREIGN_PREFIXES = ("baseline-", "report-")


def _now_ms() -> int:
    return int(time.time() * 1000)


def _mean(values: list[float]) -> float:
    # An empty scan has nothing that detracts from the score.
    if not values:
        return 100.0
    return sum(values) / len(values)


class SnapshotStore:
    """Persists snapshots by id and baselines by branch name."""

    def __init__(
        self,
        root: Union[str, Path] = DEFAULT_SNAPSHOTS_DIR,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        self.root = Path(root)
        self.baseline_dir = self.root / "baselines"
        self._clock = clock or _now_ms
        self._baseline_locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    # ── paths ─────────────────────────────────────────────────────

    def snapshot_path(self, snapshot_id: str) -> Path:
        if not snapshot_id or "/" in snapshot_id or "\\" in snapshot_id:
            raise InvalidInputError(f"invalid snapshot id {snapshot_id!r}")
        return self.root / f"{snapshot_id}.json"

    def baseline_path(self, branch: str) -> Path:
        return self.baseline_dir / f"baseline-{quote(branch, safe='')}.json"

    # ── raw I/O ───────────────────────────────────────────────────

    def _write(self, path: Path, snapshot: Snapshot) -> None:
        """Write atomically: a reader sees the old document or the new one."""
        payload = json.dumps(snapshot.to_dict(), indent=2)
        tmp_name = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=path.parent, prefix=".tmp-", suffix=".json", delete=False
            ) as f:
                tmp_name = f.name
                f.write(payload)
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError(path, f"write failed: {e}")

    def _read(self, path: Path) -> Optional[Snapshot]:
        if not path.exists():
            return None
        try:
            raw = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise MalformedRecordError(path, f"not UTF-8: {e}")
        except OSError as e:
            raise StorageError(path, f"read failed: {e}")
        try:
            return Snapshot.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError, AttributeError, InvalidInputError) as e:
            raise MalformedRecordError(path, f"{type(e).__name__}: {e}")

    # ── snapshots ─────────────────────────────────────────────────

    def generate_id(self) -> str:
        suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
        return f"snapshot-{self._clock()}-{suffix}"

    def create_snapshot(
        self,
        analyses: Iterable[Union[FileAnalysis, FileAnalysisSummary]],
        branch: str,
        commit: str,
        environment: Optional[SnapshotEnvironment] = None,
    ) -> Snapshot:
        """Aggregate per-file results into a new snapshot and persist it."""
        summaries = [a.to_summary() if isinstance(a, FileAnalysis) else a for a in analyses]

        metrics = SnapshotMetrics(
            total_files=len(summaries),
            total_issues=sum(s.total_issues for s in summaries),
            high_severity_issues=sum(s.high_severity for s in summaries),
            medium_severity_issues=sum(s.medium_severity for s in summaries),
            low_severity_issues=sum(s.low_severity for s in summaries),
            average_score=_mean([s.score for s in summaries]),
            performance_score=_mean([s.breakdown.performance for s in summaries]),
            memory_score=_mean([s.breakdown.memory_leaks for s in summaries]),
            code_quality_score=_mean([s.breakdown.code_quality for s in summaries]),
        )
        if not summaries:
            logger.warning("Creating snapshot with no analyzed files; averages default to 100")

        snapshot_id = self.generate_id()
        while self.snapshot_path(snapshot_id).exists():
            snapshot_id = self.generate_id()

        if environment is None:
            environment = runtime_environment()

        snapshot = Snapshot(
            id=snapshot_id,
            timestamp=self._clock(),
            branch=branch,
            commit=commit,
            metrics=metrics,
            file_analysis=tuple(summaries),
            environment=environment,
        )
        self.save_snapshot(snapshot)
        logger.info(f"Created snapshot {snapshot.id} ({metrics.total_files} files)")
        return snapshot

    def save_snapshot(self, snapshot: Snapshot) -> None:
        self._write(self.snapshot_path(snapshot.id), snapshot)
        logger.debug(f"Saved snapshot {snapshot.id}")

    def load_snapshot(self, snapshot_id: str) -> Optional[Snapshot]:
        """Return the snapshot, or ``None`` if no such id is stored."""
        return self._read(self.snapshot_path(snapshot_id))

    def list_snapshots(self) -> list[Snapshot]:
        """All readable snapshots, newest first. Malformed files are skipped."""
        snapshots: list[Snapshot] = []
        if not self.root.is_dir():
            return snapshots
        try:
            candidates = sorted(self.root.glob("*.json"))
        except OSError as e:
            raise StorageError(self.root, f"listing failed: {e}")

        for path in candidates:
            if path.name.startswith(_FOREIGN_PREFIXES) or path.name.startswith(".tmp-"):
                continue
            try:
                snapshot = self._read(path)
            except MalformedRecordError as e:
                logger.warning(f"Skipping unreadable snapshot {path.name}: {e.reason}")
                continue
            except StorageError as e:
                logger.warning(f"Skipping snapshot {path.name}: {e.reason}")
                continue
            if snapshot is not None:
                snapshots.append(snapshot)

        snapshots.sort(key=lambda s: s.timestamp, reverse=True)
        return snapshots

    def cleanup_old_snapshots(self, max_age_ms: int = DEFAULT_MAX_AGE_MS) -> list[str]:
        """Delete snapshots older than ``max_age_ms``. Baselines are never touched.

        Returns the ids that were removed.
        """
        cutoff = self._clock() - max_age_ms
        removed: list[str] = []
        for snapshot in self.list_snapshots():
            if snapshot.timestamp >= cutoff:
                continue
            path = self.snapshot_path(snapshot.id)
            try:
                path.unlink()
            except FileNotFoundError:
                continue
            except OSError as e:
                raise StorageError(path, f"delete failed: {e}")
            removed.append(snapshot.id)

        if removed:
            logger.info(f"Removed {len(removed)} snapshot(s) older than {max_age_ms} ms")
        return removed

    # ── baselines ─────────────────────────────────────────────────

    def _lock_for(self, branch: str) -> threading.Lock:
        with self._locks_guard:
            return self._baseline_locks.setdefault(branch, threading.Lock())

    def save_baseline(self, snapshot: Snapshot, branch: str = "main") -> None:
        """Store ``snapshot`` as the baseline for ``branch``, replacing any previous one."""
        with self._lock_for(branch):
            self._write(self.baseline_path(branch), snapshot)
        logger.info(f"Saved baseline for branch {branch} from snapshot {snapshot.id}")

    def load_baseline(self, branch: str = "main") -> Optional[Snapshot]:
        """Return the branch baseline, or ``None`` if none was saved."""
        baseline = self._read(self.baseline_path(branch))
        if baseline is None:
            logger.debug(f"No baseline for branch {branch}")
        return baseline

    # ── comparison ────────────────────────────────────────────────

    def compare_with_baseline(
        self, snapshot: Snapshot, branch: str = "main"
    ) -> Optional[SnapshotComparison]:
        """Diff ``snapshot`` against the stored baseline of ``branch``.

        Returns ``None`` when the branch has no baseline.
        """
        baseline = self.load_baseline(branch)
        if baseline is None:
            return None
        return compare_snapshots(baseline, snapshot)
