"""High-level image processing facade with a fluent pipeline builder."""

from __future__ import annotations

from typing import Callable, Iterable

from . import pixel
from .execution import ExecutionContext, ExecutionMode
from .image import Image, from_bytes, validate_input
from .resize import InterpolationMode, resize

Operation = Callable[[Image], Image]


class ImageProcessor:
    """Runs image operations under an execution mode, allocating outputs for them.

    In SYNC mode each call finishes before it returns. In ASYNC and BATCH
    modes the returned image is allocated at once and filled in the
    background, in call order; ``synchronize`` waits for it.
    """

    def __init__(
        self, mode: ExecutionMode | str = ExecutionMode.SYNC, pooling: bool = False
    ) -> None:
        self.mode = ExecutionMode(mode)
        self.pooling = pooling
        # Queued work must run in order so chained calls see finished inputs.
        context_mode = (
            ExecutionMode.SYNC if self.mode is ExecutionMode.SYNC else ExecutionMode.ASYNC
        )
        self.context = ExecutionContext(context_mode, use_pool=pooling)

    def _fill(
        self, output: Image, compute: Callable[..., Image], *args: object
    ) -> Image:
        def task() -> None:
            output.pixels[...] = compute(*args).pixels

        self.context.submit(task)
        return output

    def load_from_memory(
        self, data: bytes, width: int, height: int, channels: int
    ) -> Image:
        """Copy interleaved bytes into a new image."""
        source = from_bytes(data, width, height, channels)
        output = self.context.allocate_like(source)
        output.pixels[...] = source.pixels
        return output

    def load(self, image: Image) -> Image:
        """Copy ``image`` into a newly allocated image."""
        validate_input(image)
        self.synchronize()
        output = self.context.allocate_like(image)
        output.pixels[...] = image.pixels
        return output

    def download(self, image: Image) -> Image:
        """Wait for queued work and return an independent copy of ``image``."""
        self.synchronize()
        validate_input(image)
        return image.copy()

    def invert(self, image: Image) -> Image:
        validate_input(image)
        return self._fill(self.context.allocate_like(image), pixel.invert, image)

    def to_grayscale(self, image: Image) -> Image:
        validate_input(image)
        output = self.context.allocate_output(image.width, image.height, 1)
        return self._fill(output, pixel.to_grayscale, image)

    def adjust_brightness(self, image: Image, offset: int) -> Image:
        validate_input(image)
        return self._fill(
            self.context.allocate_like(image), pixel.adjust_brightness, image, offset
        )

    def invert_in_place(self, image: Image) -> None:
        validate_input(image)
        self.context.submit(pixel.invert_in_place, image)

    def adjust_brightness_in_place(self, image: Image, offset: int) -> None:
        validate_input(image)
        self.context.submit(pixel.adjust_brightness_in_place, image, offset)

    def resize(self, image: Image, new_width: int, new_height: int) -> Image:
        """Bilinear resize to ``new_width`` x ``new_height``."""
        validate_input(image)
        if new_width <= 0 or new_height <= 0:
            raise ValueError(f"Invalid target size: {new_width}x{new_height}")
        output = self.context.allocate_output(new_width, new_height, image.channels)
        return self._fill(
            output, resize, image, new_width, new_height, InterpolationMode.BILINEAR
        )

    def resize_by_scale(self, image: Image, scale_x: float, scale_y: float) -> Image:
        """Bilinear resize by the given factors (at least one pixel each way)."""
        validate_input(image)
        if scale_x <= 0 or scale_y <= 0:
            raise ValueError(f"Invalid scale factors: {scale_x}, {scale_y}")
        new_width = max(1, int(image.width * scale_x))
        new_height = max(1, int(image.height * scale_y))
        return self.resize(image, new_width, new_height)

    def pipeline(self, image: Image, operations: Iterable[Operation]) -> Image:
        """Feed ``image`` through each operation in turn and return the last result."""
        validate_input(image)
        current = image
        applied = False
        for operation in operations:
            current = operation(current)
            applied = True
        return current if applied else self.load(image)

    def synchronize(self) -> None:
        """Wait for queued operations; re-raise the first failure."""
        self.context.synchronize()

    def is_complete(self) -> bool:
        """True if no queued operation is still running."""
        return self.context.is_complete()


class PipelineBuilder:
    """Fluent chaining of processor operations.

    Operations added before ``start`` are ignored, and ``execute`` then
    returns an empty (invalid) image.
    """

    def __init__(self, processor: ImageProcessor) -> None:
        self.processor = processor
        self._current = Image()
        self.has_input = False

    def _apply(self, operation: Operation) -> PipelineBuilder:
        if self.has_input:
            self._current = operation(self._current)
        return self

    def start(self, image: Image) -> PipelineBuilder:
        validate_input(image)
        self._current = image
        self.has_input = True
        return self

    def grayscale(self) -> PipelineBuilder:
        return self._apply(self.processor.to_grayscale)

    def invert(self) -> PipelineBuilder:
        return self._apply(self.processor.invert)

    def brightness(self, offset: int) -> PipelineBuilder:
        return self._apply(lambda image: self.processor.adjust_brightness(image, offset))

    def resize(self, width: int, height: int) -> PipelineBuilder:
        return self._apply(lambda image: self.processor.resize(image, width, height))

    def execute(self) -> Image:
        """Wait for the chain to finish and return its result."""
        if not self.has_input:
            return Image()
        self.processor.synchronize()
        return self._current