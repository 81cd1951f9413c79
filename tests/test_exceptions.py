"""Tests for the exception hierarchy."""

import pytest

from perf_sentinel.exceptions import (
    AnalysisError,
    ConfigurationError,
    FileAccessError,
    InvalidConfigError,
    InvalidInputError,
    MalformedRecordError,
    PerfSentinelError,
    StorageError,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "error",
        [
            FileAccessError("a.ts", "missing"),
            InvalidInputError("bad"),
            InvalidConfigError("max_files", 0, "must be at least 1"),
            StorageError("/tmp/x", "disk full"),
            MalformedRecordError("/tmp/x.json", "not json"),
        ],
    )
    def test_all_share_the_base(self, error):
        assert isinstance(error, PerfSentinelError)

    def test_groups(self):
        assert issubclass(FileAccessError, AnalysisError)
        assert issubclass(InvalidInputError, AnalysisError)
        assert issubclass(InvalidConfigError, ConfigurationError)
        assert not issubclass(MalformedRecordError, StorageError)


class TestMessages:
    def test_details_are_rendered(self):
        error = FileAccessError("src/a.ts", "permission denied")
        assert str(error) == "Cannot access file: src/a.ts (filepath=src/a.ts, reason=permission denied)"
        assert error.reason == "permission denied"

    def test_plain_message(self):
        assert str(ConfigurationError("Config file not found: x.toml")) == "Config file not found: x.toml"

    def test_invalid_config_keeps_fields(self):
        error = InvalidConfigError("max_files", 0, "must be at least 1")
        assert error.key == "max_files"
        assert error.value == 0
        assert error.details["reason"] == "must be at least 1"
