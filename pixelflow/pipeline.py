"""Run a fixed sequence of image steps over one image or a batch in parallel."""

from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any, Callable, Optional, Sequence

from .image import Image, validate_input

Step = Callable[[Image], Optional[Image]]


class PipelineProcessor:
    """Applies registered steps, in order, to copies of the given images.

    A step receives the working image. It may change it in place and
    return ``None``, or return a new image that replaces it. Batches are
    spread over ``num_workers`` threads; each image's steps run in order.
    """

    def __init__(self, num_workers: int = 3) -> None:
        if num_workers <= 0:
            raise ValueError(f"num_workers must be positive, got {num_workers}")
        self.num_workers = num_workers
        self._steps: list[Step] = []
        self._lock = threading.Lock()
        self._pending: list[Future] = []
        self._closed = False
        self._executor = ThreadPoolExecutor(
            max_workers=num_workers, thread_name_prefix="pixelflow-pipeline"
        )

    def add_step(self, step: Step) -> None:
        """Append a processing step."""
        if step is None or not callable(step):
            raise TypeError("pipeline step must be callable")
        with self._lock:
            self._steps.append(step)

    def clear_steps(self) -> None:
        """Remove every processing step."""
        with self._lock:
            self._steps.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._steps)

    def _snapshot(self) -> tuple[Step, ...]:
        with self._lock:
            return tuple(self._steps)

    @staticmethod
    def _run(image: Image, steps: tuple[Step, ...]) -> Image:
        current = image.copy()
        for step in steps:
            result = step(current)
            if result is not None:
                if not isinstance(result, Image):
                    raise TypeError(
                        f"pipeline step returned {type(result).__name__}, expected Image"
                    )
                current = result
        return current

    def process(self, image: Image) -> Image:
        """Return the result of running every step on a copy of ``image``."""
        validate_input(image)
        return self._run(image, self._snapshot())

    def process_batch(self, images: Sequence[Image]) -> list[Image]:
        """Process several images concurrently; results keep the input order."""
        images = list(images)
        for image in images:
            validate_input(image)
        steps = self._snapshot()
        with self._lock:
            if self._closed:
                raise RuntimeError("pipeline processor is closed")
            futures = [self._executor.submit(self._run, image, steps) for image in images]
            self._pending.extend(futures)
        results = [future.result() for future in futures]
        with self._lock:
            done = set(futures)
            self._pending = [f for f in self._pending if f not in done]
        return results

    def synchronize(self) -> None:
        """Wait until no batch work is still running."""
        with self._lock:
            pending, self._pending = self._pending, []
        wait(pending)

    def close(self) -> None:
        """Wait for running work and stop the workers."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self.synchronize()
        self._executor.shutdown(wait=True)

    def __enter__(self) -> PipelineProcessor:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()