"""Execution contexts: sync, async and batch task submission plus output allocation."""

from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from enum import Enum
from typing import Any, Callable

import numpy as np

from .buffers import default_pool
from .image import Image, validate_image_params, validate_input

_BATCH_WORKERS = 4


class ExecutionMode(Enum):
    """How submitted work is run."""

    SYNC = "sync"
    ASYNC = "async"
    BATCH = "batch"


def _backing_buffer(arr: np.ndarray) -> bytearray | None:
    base: Any = arr
    while isinstance(base, np.ndarray):
        base = base.base
    if isinstance(base, memoryview):
        base = base.obj
    return base if isinstance(base, bytearray) else None


class ExecutionContext:
    """Runs work according to an execution mode and allocates output images.

    SYNC runs each task immediately in the caller's thread. ASYNC queues
    tasks on one worker, so they run in submission order. BATCH spreads
    tasks over several workers. ``synchronize`` waits for everything queued
    and re-raises the first failure.
    """

    def __init__(
        self, mode: ExecutionMode | str = ExecutionMode.SYNC, use_pool: bool = False
    ) -> None:
        self.mode = ExecutionMode(mode)
        self.use_pool = use_pool
        self._lock = threading.Lock()
        self._pending: list[Future] = []
        self._owned: dict[int, bytearray] = {}
        self._closed = False
        if self.mode is ExecutionMode.SYNC:
            self._executor: ThreadPoolExecutor | None = None
        else:
            workers = 1 if self.mode is ExecutionMode.ASYNC else _BATCH_WORKERS
            self._executor = ThreadPoolExecutor(
                max_workers=workers, thread_name_prefix=f"pixelflow-{self.mode.value}"
            )

    def allocate_output(self, width: int, height: int, channels: int) -> Image:
        """Return a zero-filled image, drawn from the shared pool if enabled."""
        if not validate_image_params(width, height, channels):
            raise ValueError(
                f"Invalid image parameters: {width}x{height}x{channels}"
            )
        count = width * height * channels
        if self.use_pool:
            buffer = default_pool().allocate(count)
            arr = np.frombuffer(buffer, dtype=np.uint8, count=count)
            arr = arr.reshape(height, width, channels)
            arr[...] = 0
            with self._lock:
                self._owned[id(buffer)] = buffer
        else:
            arr = np.zeros((height, width, channels), dtype=np.uint8)
        return Image(arr)

    def allocate_like(self, image: Image) -> Image:
        """Return a zero-filled image with the same dimensions as ``image``."""
        validate_input(image)
        return self.allocate_output(image.width, image.height, image.channels)

    def recycle(self, image: Image) -> None:
        """Give the image's storage back to the pool and leave ``image`` empty."""
        buffer = _backing_buffer(image.pixels)
        image.pixels = np.zeros((0, 0, 0), dtype=np.uint8)
        if buffer is None:
            return
        with self._lock:
            owned = self._owned.pop(id(buffer), None)
        if owned is buffer and self.use_pool:
            default_pool().deallocate(buffer)

    def submit(self, fn: Callable[..., Any], *args: Any) -> Future:
        """Run ``fn(*args)`` under this context's mode and return its future."""
        with self._lock:
            if self._closed:
                raise RuntimeError("execution context is closed")
            if self._executor is not None:
                future = self._executor.submit(fn, *args)
                self._pending.append(future)
                return future
        done: Future = Future()
        done.set_result(fn(*args))
        return done

    def synchronize(self) -> None:
        """Wait for all queued work; re-raise the first error it produced."""
        with self._lock:
            pending, self._pending = self._pending, []
        wait(pending)
        for future in pending:
            error = future.exception()
            if error is not None:
                raise error

    def is_complete(self) -> bool:
        """True if no queued work is still running."""
        with self._lock:
            return all(future.done() for future in self._pending)

    def close(self) -> None:
        """Wait for queued work and stop the workers."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
        try:
            self.synchronize()
        finally:
            if self._executor is not None:
                self._executor.shutdown(wait=True)

    def __enter__(self) -> ExecutionContext:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


def sync_context() -> ExecutionContext:
    return ExecutionContext(ExecutionMode.SYNC)


def async_context() -> ExecutionContext:
    return ExecutionContext(ExecutionMode.ASYNC)


def batch_context() -> ExecutionContext:
    return ExecutionContext(ExecutionMode.BATCH)