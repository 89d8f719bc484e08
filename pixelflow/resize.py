"""Image resizing with nearest-neighbour or bilinear interpolation."""

from __future__ import annotations

from enum import Enum

import numpy as np

from .image import Image, validate_input


class InterpolationMode(Enum):
    NEAREST_NEIGHBOR = "nearest"
    BILINEAR = "bilinear"
    BICUBIC = "bicubic"


def _source_coords(new_size: int, old_size: int) -> np.ndarray:
    scale = old_size / new_size
    return (np.arange(new_size) + 0.5) * scale - 0.5


def _nearest(src: np.ndarray, new_width: int, new_height: int) -> np.ndarray:
    height, width = src.shape[:2]
    xs = np.floor((np.arange(new_width) + 0.5) * (width / new_width)).astype(np.intp)
    ys = np.floor((np.arange(new_height) + 0.5) * (height / new_height)).astype(np.intp)
    xs = np.minimum(xs, width - 1)
    ys = np.minimum(ys, height - 1)
    return src[ys][:, xs]


def _bilinear(src: np.ndarray, new_width: int, new_height: int) -> np.ndarray:
    height, width = src.shape[:2]
    xs = np.clip(_source_coords(new_width, width), 0, width - 1)
    ys = np.clip(_source_coords(new_height, height), 0, height - 1)
    x0 = np.floor(xs).astype(np.intp)
    y0 = np.floor(ys).astype(np.intp)
    x1 = np.minimum(x0 + 1, width - 1)
    y1 = np.minimum(y0 + 1, height - 1)
    fx = (xs - x0)[np.newaxis, :, np.newaxis]
    fy = (ys - y0)[:, np.newaxis, np.newaxis]

    values = src.astype(np.float64)
    top_rows, bottom_rows = values[y0], values[y1]
    top = top_rows[:, x0] * (1 - fx) + top_rows[:, x1] * fx
    bottom = bottom_rows[:, x0] * (1 - fx) + bottom_rows[:, x1] * fx
    blended = top * (1 - fy) + bottom * fy
    return np.clip(np.floor(blended + 0.5), 0, 255).astype(np.uint8)


def resize(
    image: Image,
    new_width: int,
    new_height: int,
    mode: InterpolationMode = InterpolationMode.BILINEAR,
) -> Image:
    """Return ``image`` resized to ``new_width`` x ``new_height``."""
    validate_input(image)
    if new_width <= 0 or new_height <= 0:
        raise ValueError(f"Invalid target size: {new_width}x{new_height}")
    mode = InterpolationMode(mode)
    if mode is InterpolationMode.NEAREST_NEIGHBOR:
        return Image(_nearest(image.pixels, new_width, new_height))
    if mode is InterpolationMode.BILINEAR:
        return Image(_bilinear(image.pixels, new_width, new_height))
    raise ValueError(f"Unsupported interpolation mode: {mode.value}")


def resize_by_scale(
    image: Image,
    scale_x: float,
    scale_y: float,
    mode: InterpolationMode = InterpolationMode.BILINEAR,
) -> Image:
    """Return ``image`` scaled by the given factors (at least one pixel each way)."""
    validate_input(image)
    if scale_x <= 0 or scale_y <= 0:
        raise ValueError(f"Invalid scale factors: {scale_x}, {scale_y}")
    new_width = max(1, int(image.width * scale_x))
    new_height = max(1, int(image.height * scale_y))
    return resize(image, new_width, new_height, mode)


def resize_fit(
    image: Image,
    max_width: int,
    max_height: int,
    mode: InterpolationMode = InterpolationMode.BILINEAR,
) -> Image:
    """Return ``image`` scaled, keeping its aspect ratio, to fit the given box."""
    validate_input(image)
    if max_width <= 0 or max_height <= 0:
        raise ValueError(f"Invalid bounding size: {max_width}x{max_height}")
    width, height = image.width, image.height
    if max_width * height <= max_height * width:
        new_width = max_width
        new_height = max(1, height * max_width // width)
    else:
        new_height = max_height
        new_width = max(1, width * max_height // height)
    return resize(image, new_width, new_height, mode)