"""Storage exceptions raised by the snapshot store."""

from pathlib import Path
from typing import Union

from .base import PerfSentinelError


class StorageError(PerfSentinelError):
    """Raised when reading or writing durable snapshot storage fails."""

    def __init__(self, path: Union[str, Path], reason: str):
        super().__init__(
            f"Snapshot storage failure: {path}",
            details={"path": str(path), "reason": reason},
        )
        self.path = path
        self.reason = reason


class MalformedRecordError(PerfSentinelError):
    """Raised when a stored snapshot document cannot be parsed."""

    def __init__(self, path: Union[str, Path], reason: str):
        super().__init__(
            f"Malformed snapshot record: {path}",
            details={"path": str(path), "reason": reason},
        )
        self.path = path
        self.reason = reason
