"""Per-pixel operations: inversion, grayscale conversion and brightness."""

from __future__ import annotations

import numpy as np

from .image import Image, validate_input

_LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114])


def _to_byte(values: np.ndarray) -> np.ndarray:
    return np.clip(np.floor(values + 0.5), 0, 255).astype(np.uint8)


def _shifted(pixels: np.ndarray, offset: int) -> np.ndarray:
    return np.clip(pixels.astype(np.int64) + int(offset), 0, 255).astype(np.uint8)


def invert(image: Image) -> Image:
    """Return a new image with every byte replaced by ``255 - value``."""
    validate_input(image)
    return Image(255 - image.pixels)


def to_grayscale(image: Image) -> Image:
    """Return a one-channel image using ``0.299*R + 0.587*G + 0.114*B``.

    A one-channel input is copied; the alpha channel of a four-channel
    input is ignored.
    """
    validate_input(image)
    if image.channels == 1:
        return image.copy()
    rgb = image.pixels[:, :, :3].astype(np.float64)
    return Image(_to_byte(rgb @ _LUMA_WEIGHTS))


def adjust_brightness(image: Image, offset: int) -> Image:
    """Return a new image with ``offset`` added to every byte, clamped to 0..255."""
    validate_input(image)
    return Image(_shifted(image.pixels, offset))


def invert_in_place(image: Image) -> None:
    """Invert ``image`` in place."""
    validate_input(image)
    np.subtract(255, image.pixels, out=image.pixels)


def adjust_brightness_in_place(image: Image, offset: int) -> None:
    """Add ``offset`` to every byte of ``image`` in place, clamped to 0..255."""
    validate_input(image)
    image.pixels[...] = _shifted(image.pixels, offset)