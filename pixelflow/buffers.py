"""A thread-safe pool of reusable byte buffers, bucketed by aligned size."""

from __future__ import annotations

import threading
from collections import defaultdict
from dataclasses import dataclass

_ALIGNMENT = 256
_DEFAULT_MAX_POOL_SIZE = 512 * 1024 * 1024


def align_size(size: int) -> int:
    """Round ``size`` up to the next multiple of 256 bytes."""
    return (size + _ALIGNMENT - 1) // _ALIGNMENT * _ALIGNMENT


@dataclass(frozen=True)
class MemoryStats:
    """Snapshot of pool usage, in bytes."""

    total_allocated: int
    pool_size: int
    peak_usage: int


class MemoryPool:
    """Hands out ``bytearray`` buffers and keeps released ones for reuse.

    Buffers are sized to a multiple of 256 bytes. A reused buffer keeps
    whatever contents it had when it was released.
    """

    def __init__(
        self, max_pool_size: int = _DEFAULT_MAX_POOL_SIZE, enabled: bool = True
    ) -> None:
        self.max_pool_size = max_pool_size
        self.enabled = enabled
        self._lock = threading.Lock()
        self._pool: defaultdict[int, list[bytearray]] = defaultdict(list)
        self._total_allocated = 0
        self._pool_size = 0
        self._peak_usage = 0

    def allocate(self, size: int) -> bytearray:
        """Return a buffer of at least ``size`` bytes, reusing a pooled one if possible."""
        if size <= 0:
            raise ValueError(f"buffer size must be positive, got {size}")
        aligned = align_size(size)
        with self._lock:
            bucket = self._pool.get(aligned)
            if self.enabled and bucket:
                buffer = bucket.pop()
                self._pool_size -= aligned
            else:
                buffer = bytearray(aligned)
            self._total_allocated += aligned
            self._peak_usage = max(self._peak_usage, self._total_allocated)
        return buffer

    def deallocate(self, buffer: bytearray) -> None:
        """Return a buffer; it is kept for reuse if the pool has room for it."""
        size = len(buffer)
        with self._lock:
            self._total_allocated = max(0, self._total_allocated - size)
            if (
                self.enabled
                and size > 0
                and size == align_size(size)
                and self._pool_size + size <= self.max_pool_size
            ):
                self._pool[size].append(buffer)
                self._pool_size += size

    def clear(self) -> None:
        """Drop every pooled buffer."""
        with self._lock:
            self._pool.clear()
            self._pool_size = 0

    def stats(self) -> MemoryStats:
        with self._lock:
            return MemoryStats(
                total_allocated=self._total_allocated,
                pool_size=self._pool_size,
                peak_usage=self._peak_usage,
            )


_DEFAULT_POOL = MemoryPool()


def default_pool() -> MemoryPool:
    """Return the process-wide shared pool."""
    return _DEFAULT_POOL