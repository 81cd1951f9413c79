"""Exception hierarchy for perf-sentinel."""

from .analysis import AnalysisError, FileAccessError, InvalidInputError
from .base import PerfSentinelError
from .config import ConfigurationError, InvalidConfigError
from .storage import MalformedRecordError, StorageError

__all__ = [
    "PerfSentinelError",
    "AnalysisError",
    "FileAccessError",
    "InvalidInputError",
    "ConfigurationError",
    "InvalidConfigError",
    "StorageError",
    "MalformedRecordError",
]
