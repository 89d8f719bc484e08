"""Global, adaptive and Otsu thresholding."""

from __future__ import annotations

from enum import Enum

import numpy as np

from .image import Image, validate_input
from .pixel import to_grayscale


class ThresholdType(Enum):
    BINARY = "binary"
    BINARY_INV = "binary_inv"
    TRUNCATE = "truncate"
    TO_ZERO = "to_zero"
    TO_ZERO_INV = "to_zero_inv"


class AdaptiveMethod(Enum):
    MEAN_C = "mean"
    GAUSSIAN_C = "gaussian"


def _check_byte(name: str, value: int) -> None:
    if not 0 <= value <= 255:
        raise ValueError(f"{name} must be in 0..255, got {value}")


def _apply(
    src: np.ndarray,
    limit: np.ndarray | int,
    max_val: int,
    kind: ThresholdType,
) -> np.ndarray:
    above = src > limit
    if kind is ThresholdType.BINARY:
        result = np.where(above, max_val, 0)
    elif kind is ThresholdType.BINARY_INV:
        result = np.where(above, 0, max_val)
    elif kind is ThresholdType.TRUNCATE:
        result = np.where(above, limit, src)
    elif kind is ThresholdType.TO_ZERO:
        result = np.where(above, src, 0)
    else:
        result = np.where(above, 0, src)
    return np.asarray(result).astype(np.uint8)


def threshold(
    image: Image,
    thresh: int,
    max_val: int = 255,
    kind: ThresholdType = ThresholdType.BINARY,
) -> Image:
    """Apply a fixed threshold to every byte of ``image``."""
    validate_input(image)
    _check_byte("thresh", thresh)
    _check_byte("max_val", max_val)
    return Image(_apply(image.pixels, int(thresh), int(max_val), ThresholdType(kind)))


def _correlate(values: np.ndarray, kernel: np.ndarray, axis: int) -> np.ndarray:
    half = len(kernel) // 2
    length = values.shape[axis]
    padding = [(0, 0)] * values.ndim
    padding[axis] = (half, half)
    padded = np.pad(values, padding)
    out = np.zeros(values.shape, dtype=np.float64)
    for offset, weight in enumerate(kernel):
        out += weight * np.take(padded, np.arange(offset, offset + length), axis=axis)
    return out


def _local_mean(pixels: np.ndarray, kernel: np.ndarray) -> np.ndarray:
    """Weighted neighbourhood mean over in-bounds pixels, rounded to integers."""
    values = pixels.astype(np.float64)
    weights = np.ones(pixels.shape[:2] + (1,), dtype=np.float64)
    numerator = _correlate(_correlate(values, kernel, 0), kernel, 1)
    denominator = _correlate(_correlate(weights, kernel, 0), kernel, 1)
    return np.floor(numerator / denominator + 0.5)


def _gaussian_kernel(block_size: int) -> np.ndarray:
    sigma = 0.3 * ((block_size - 1) * 0.5 - 1) + 0.8
    offsets = np.arange(block_size) - block_size // 2
    kernel = np.exp(-(offsets * offsets) / (2.0 * sigma * sigma))
    return kernel / kernel.sum()


def adaptive_threshold(
    image: Image,
    max_val: int,
    method: AdaptiveMethod,
    kind: ThresholdType,
    block_size: int,
    c: int,
) -> Image:
    """Threshold each byte against its local (mean or Gaussian) mean minus ``c``.

    Only BINARY and BINARY_INV are accepted; each channel is handled on its own.
    """
    validate_input(image)
    _check_byte("max_val", max_val)
    method = AdaptiveMethod(method)
    kind = ThresholdType(kind)
    if kind not in (ThresholdType.BINARY, ThresholdType.BINARY_INV):
        raise ValueError("Adaptive threshold supports only BINARY and BINARY_INV")
    if block_size < 3 or block_size % 2 == 0:
        raise ValueError(f"Block size must be an odd number >= 3, got {block_size}")
    if method is AdaptiveMethod.MEAN_C:
        kernel = np.ones(block_size, dtype=np.float64)
    else:
        kernel = _gaussian_kernel(block_size)
    limit = _local_mean(image.pixels, kernel) - c
    return Image(_apply(image.pixels, limit, int(max_val), kind))


def otsu_threshold(image: Image) -> int:
    """Return the threshold maximising between-class variance of the gray levels."""
    validate_input(image)
    gray = to_grayscale(image).pixels
    hist = np.bincount(gray.ravel(), minlength=256).astype(np.float64)
    levels = np.arange(256, dtype=np.float64)
    weight_low = np.cumsum(hist)
    weight_high = weight_low[-1] - weight_low
    sum_low = np.cumsum(hist * levels)
    sum_high = sum_low[-1] - sum_low
    valid = (weight_low > 0) & (weight_high > 0)
    variance = np.zeros(256, dtype=np.float64)
    mean_low = sum_low[valid] / weight_low[valid]
    mean_high = sum_high[valid] / weight_high[valid]
    variance[valid] = (
        weight_low[valid] * weight_high[valid] * (mean_low - mean_high) ** 2
    )
    return int(np.argmax(variance))


def otsu_binarize(image: Image, max_val: int = 255) -> Image:
    """Binarize the grayscale version of ``image`` at its Otsu threshold."""
    _check_byte("max_val", max_val)
    level = otsu_threshold(image)
    return threshold(to_grayscale(image), level, max_val, ThresholdType.BINARY)