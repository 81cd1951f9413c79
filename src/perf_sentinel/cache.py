"""
Explicit memoization cache for perf-sentinel.

Uses diskcache for SQLite-based storage. There is no module-level cache:
callers create a MemoCache, pass it to whatever needs memoization, and
close it when done.

    with MemoCache() as cache:
        analyzer = PerformanceAnalyzer(cache=cache)
        ...
"""

import shutil
import sqlite3
import tempfile
from functools import wraps
from pathlib import Path
from typing import Any, Callable, Hashable, Optional, Union

from diskcache import Cache

from .logging_config import get_logger

logger = get_logger(__name__)

_MISSING = object()


class MemoCache:
    """
    Key/value memoization store with hit/miss accounting.

    Features:
    - Caller-supplied key functions (no implicit argument serialization)
    - Explicit lifecycle: clear() empties it, close() releases it
    - A private temporary directory when none is given, removed on close()
    """

    def __init__(self, directory: Optional[Union[str, Path]] = None, enabled: bool = True):
        """
        Initialize cache.

        Args:
            directory: Directory for cache storage (temporary if None)
            enabled: Whether caching is enabled
        """
        self.enabled = enabled
        self.hits = 0
        self.misses = 0
        self._owns_directory = False
        self.cache: Optional[Cache] = None

        if self.enabled:
            if directory is None:
                directory = tempfile.mkdtemp(prefix="perf-sentinel-cache-")
                self._owns_directory = True
            self.cache = Cache(str(directory))
            logger.debug(f"Cache initialized at {directory}")
        else:
            logger.debug("Cache disabled")

    def get(self, key: Hashable, default: Any = None) -> Any:
        """
        Get value from cache.

        Args:
            key: Cache key
            default: Returned on a miss

        Returns:
            Cached value or ``default``
        """
        if not self.enabled or self.cache is None:
            self.misses += 1
            return default

        try:
            value = self.cache.get(key, default=_MISSING)
        except sqlite3.Error as e:
            logger.warning(f"Cache get failed: {e}")
            value = _MISSING

        if value is _MISSING:
            self.misses += 1
            return default
        self.hits += 1
        return value

    def set(self, key: Hashable, value: Any) -> None:
        """
        Set value in cache.

        Args:
            key: Cache key
            value: Value to cache (must be picklable)
        """
        if not self.enabled or self.cache is None:
            return

        try:
            self.cache.set(key, value)
        except sqlite3.Error as e:
            logger.warning(f"Cache set failed: {e}")

    def clear(self) -> None:
        """Clear all cache entries and reset the hit/miss counters."""
        self.hits = 0
        self.misses = 0
        if not self.enabled or self.cache is None:
            return
        self.cache.clear()
        logger.debug("Cache cleared")

    def stats(self) -> dict:
        """
        Get cache statistics.

        Returns:
            Dictionary with enabled, hits, misses and size
        """
        size = len(self.cache) if self.cache is not None else 0
        return {
            "enabled": self.enabled,
            "hits": self.hits,
            "misses": self.misses,
            "size": size,
        }

    def memoize(self, key_fn: Callable[..., Hashable]) -> Callable:
        """
        Decorator for caching function results.

        Usage:
            cache = MemoCache()

            @cache.memoize(key_fn=lambda high, medium, low, lines: ("score", high, medium, low, lines))
            def score(high, medium, low, lines):
                ...

        Args:
            key_fn: Called with the wrapped function's arguments; returns the cache key

        Returns:
            Decorator function
        """

        def decorator(func: Callable) -> Callable:
            @wraps(func)
            def wrapper(*args, **kwargs):
                key = key_fn(*args, **kwargs)
                cached = self.get(key, default=_MISSING)
                if cached is not _MISSING:
                    return cached

                result = func(*args, **kwargs)
                self.set(key, result)
                return result

            return wrapper

        return decorator

    def close(self) -> None:
        """Close cache (cleanup)."""
        if self.cache is not None:
            directory = self.cache.directory
            self.cache.close()
            self.cache = None
            if self._owns_directory:
                shutil.rmtree(directory, ignore_errors=True)
        self.enabled = False

    def __enter__(self) -> "MemoCache":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
