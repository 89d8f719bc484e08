"""Grayscale morphology: erosion, dilation and the operations built on them."""

from __future__ import annotations

from enum import Enum
from typing import Callable

import numpy as np

from .image import Image, validate_input


class StructuringElement(Enum):
    RECTANGLE = "rectangle"
    CROSS = "cross"
    ELLIPSE = "ellipse"


def structuring_element(shape: StructuringElement, kernel_size: int) -> np.ndarray:
    """Return a square boolean mask of side ``kernel_size`` for ``shape``."""
    if kernel_size <= 0 or kernel_size % 2 == 0:
        raise ValueError(f"Kernel size must be a positive odd number, got {kernel_size}")
    shape = StructuringElement(shape)
    if shape is StructuringElement.RECTANGLE:
        return np.ones((kernel_size, kernel_size), dtype=bool)
    half = kernel_size // 2
    offsets = np.arange(kernel_size) - half
    dy, dx = np.meshgrid(offsets, offsets, indexing="ij")
    if shape is StructuringElement.CROSS:
        return (dy == 0) | (dx == 0)
    return dx * dx + dy * dy <= half * half


def _morph(
    image: Image,
    kernel_size: int,
    element: StructuringElement,
    reducer: Callable[..., np.ndarray],
    fill: int,
) -> Image:
    validate_input(image)
    mask = structuring_element(element, kernel_size)
    half = kernel_size // 2
    height, width = image.height, image.width
    padded = np.pad(
        image.pixels, ((half, half), (half, half), (0, 0)), constant_values=fill
    )
    result = np.full_like(image.pixels, fill)
    for dy, dx in zip(*np.nonzero(mask)):
        reducer(result, padded[dy : dy + height, dx : dx + width], out=result)
    return Image(result)


def _difference(a: Image, b: Image) -> Image:
    diff = a.pixels.astype(np.int16) - b.pixels.astype(np.int16)
    return Image(np.clip(diff, 0, 255).astype(np.uint8))


def erode(
    image: Image,
    kernel_size: int = 3,
    element: StructuringElement = StructuringElement.RECTANGLE,
) -> Image:
    """Minimum over the structuring element; pixels outside the image are ignored."""
    return _morph(image, kernel_size, element, np.minimum, 255)


def dilate(
    image: Image,
    kernel_size: int = 3,
    element: StructuringElement = StructuringElement.RECTANGLE,
) -> Image:
    """Maximum over the structuring element; pixels outside the image are ignored."""
    return _morph(image, kernel_size, element, np.maximum, 0)


def opening(
    image: Image,
    kernel_size: int = 3,
    element: StructuringElement = StructuringElement.RECTANGLE,
) -> Image:
    """Erosion followed by dilation."""
    return dilate(erode(image, kernel_size, element), kernel_size, element)


def closing(
    image: Image,
    kernel_size: int = 3,
    element: StructuringElement = StructuringElement.RECTANGLE,
) -> Image:
    """Dilation followed by erosion."""
    return erode(dilate(image, kernel_size, element), kernel_size, element)


def gradient(
    image: Image,
    kernel_size: int = 3,
    element: StructuringElement = StructuringElement.RECTANGLE,
) -> Image:
    """Dilation minus erosion."""
    return _difference(
        dilate(image, kernel_size, element), erode(image, kernel_size, element)
    )


def top_hat(
    image: Image,
    kernel_size: int = 3,
    element: StructuringElement = StructuringElement.RECTANGLE,
) -> Image:
    """The image minus its opening."""
    return _difference(image, opening(image, kernel_size, element))


def black_hat(
    image: Image,
    kernel_size: int = 3,
    element: StructuringElement = StructuringElement.RECTANGLE,
) -> Image:
    """The closing minus the image."""
    return _difference(closing(image, kernel_size, element), image)