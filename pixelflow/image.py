"""In-memory 8-bit images and the validation helpers shared by all operators."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

_VALID_CHANNELS = (1, 3, 4)


def _empty_pixels() -> np.ndarray:
    return np.zeros((0, 0, 0), dtype=np.uint8)


@dataclass(eq=False)
class Image:
    """An 8-bit image stored as a ``(height, width, channels)`` array.

    A default-constructed image is empty and therefore not valid.
    """

    pixels: np.ndarray = field(default_factory=_empty_pixels)

    def __post_init__(self) -> None:
        arr = np.asarray(self.pixels)
        if arr.dtype != np.uint8:
            raise TypeError(f"pixels must be uint8, got {arr.dtype}")
        if arr.ndim == 2:
            arr = arr[:, :, np.newaxis]
        elif arr.ndim != 3:
            raise ValueError(
                f"pixels must have 2 or 3 dimensions, got {arr.ndim}"
            )
        self.pixels = arr

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def channels(self) -> int:
        return int(self.pixels.shape[2])

    @property
    def pitch(self) -> int:
        """Bytes per row."""
        return self.width * self.channels

    @property
    def total_bytes(self) -> int:
        return self.width * self.height * self.channels

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    def is_valid(self) -> bool:
        """True for a non-empty image with 1, 3 or 4 channels."""
        return (
            self.width > 0
            and self.height > 0
            and self.channels in _VALID_CHANNELS
            and self.pixels.size == self.total_bytes
        )

    def copy(self) -> Image:
        """Return an independent copy of this image."""
        return Image(self.pixels.copy())

    def to_bytes(self) -> bytes:
        """Return the pixels as interleaved row-major bytes."""
        return self.pixels.tobytes()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Image):
            return NotImplemented
        return self.pixels.shape == other.pixels.shape and bool(
            np.array_equal(self.pixels, other.pixels)
        )

    __hash__ = None  # type: ignore[assignment]


def validate_image_params(width: int, height: int, channels: int) -> bool:
    """Return True if the dimensions describe a usable image."""
    return width > 0 and height > 0 and channels in _VALID_CHANNELS


def create_image(width: int, height: int, channels: int) -> Image:
    """Create a zero-filled image of the given size."""
    if not validate_image_params(width, height, channels):
        raise ValueError(
            f"Invalid image parameters: {width}x{height}x{channels}"
        )
    return Image(np.zeros((height, width, channels), dtype=np.uint8))


def from_bytes(data: bytes, width: int, height: int, channels: int) -> Image:
    """Build an image from interleaved row-major bytes (the data is copied)."""
    if not validate_image_params(width, height, channels):
        raise ValueError(
            f"Invalid image parameters: {width}x{height}x{channels}"
        )
    arr = np.frombuffer(data, dtype=np.uint8)
    expected = width * height * channels
    if arr.size != expected:
        raise ValueError(
            f"Expected {expected} bytes for {width}x{height}x{channels}, "
            f"got {arr.size}"
        )
    return Image(arr.reshape(height, width, channels).copy())


def validate_input(image: Image, message: str = "Invalid input image") -> None:
    """Raise ValueError with ``message`` unless ``image`` is valid."""
    if not image.is_valid():
        raise ValueError(message)


def validate_same_size(
    a: Image, b: Image, message: str = "Image dimensions must match"
) -> None:
    """Raise ValueError with ``message`` unless both images share dimensions."""
    if (a.width, a.height, a.channels) != (b.width, b.height, b.channels):
        raise ValueError(message)