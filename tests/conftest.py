"""Shared test fixtures for perf-sentinel."""

import os

import pytest

from perf_sentinel.snapshot.store import SnapshotStore


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, now: int = 1_700_000_000_000):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, millis: int) -> None:
        self.now += millis


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(tmp_path, clock):
    """Snapshot store rooted in a temporary directory with a controllable clock."""
    return SnapshotStore(tmp_path / "snapshots", clock=clock)


@pytest.fixture(autouse=True)
def _isolate_ci_env(monkeypatch):
    """Keep the runner's own CI and perf-sentinel variables out of the tests."""
    for name in list(os.environ):
        if name.startswith("PERF_SENTINEL_"):
            monkeypatch.delenv(name)
    for name in (
        "GITHUB_REF_NAME",
        "CI_COMMIT_REF_NAME",
        "GITHUB_SHA",
        "CI_COMMIT_SHA",
        "GITHUB_OUTPUT",
    ):
        monkeypatch.delenv(name, raising=False)
