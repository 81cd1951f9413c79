"""Analysis-related exceptions: file access and programmer errors."""

from pathlib import Path
from typing import Union

from .base import PerfSentinelError


class AnalysisError(PerfSentinelError):
    """Base class for analysis-related errors."""
    pass


class FileAccessError(AnalysisError):
    """Raised when a source file cannot be accessed or read."""

    def __init__(self, filepath: Union[str, Path], reason: str):
        super().__init__(
            f"Cannot access file: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class InvalidInputError(AnalysisError):
    """Raised on programmer error: malformed records, timers used out of order."""

    def __init__(self, reason: str):
        super().__init__(f"Invalid input: {reason}", details={"reason": reason})
        self.reason = reason
