import math

import numpy as np
import pytest

from pixelflow.image import Image, create_image, from_bytes
from pixelflow.resize import InterpolationMode, resize, resize_by_scale, resize_fit


def _random_image(width, height, channels, seed=42):
    values = []
    for _ in range(width * height * channels):
        seed = (seed * 1103515245 + 12345) & 0xFFFFFFFF
        values.append((seed >> 16) & 0xFF)
    return from_bytes(bytes(values), width, height, channels)


def _psnr(a, b):
    if a.pixels.shape != b.pixels.shape:
        return 0.0
    diff = a.pixels.astype(np.float64) - b.pixels.astype(np.float64)
    mse = float(np.mean(diff * diff))
    if mse == 0:
        return 100.0
    return 10.0 * math.log10(255.0 * 255.0 / mse)


def test_basic_resize():
    source = _random_image(64, 64, 3)

    enlarged = resize(source, 128, 128)
    assert (enlarged.width, enlarged.height, enlarged.channels) == (128, 128, 3)

    shrunk = resize(source, 32, 32)
    assert (shrunk.width, shrunk.height, shrunk.channels) == (32, 32, 3)


def test_approximate_round_trip():
    width = height = 64
    original = create_image(width, height, 3)
    for y in range(height):
        for x in range(width):
            original.pixels[y, x, 0] = x * 255 // (width - 1)
            original.pixels[y, x, 1] = y * 255 // (height - 1)
            original.pixels[y, x, 2] = (x + y) * 255 // (width + height - 2)

    enlarged = resize(original, width * 2, height * 2)
    restored = resize(enlarged, width, height)

    assert _psnr(original, restored) > 25.0


def test_resize_by_scale():
    source = _random_image(64, 64, 3)
    scaled = resize_by_scale(source, 1.5, 2.0)
    assert scaled.width == 96
    assert scaled.height == 128


def test_resize_fit():
    source = _random_image(100, 50, 3)
    fitted = resize_fit(source, 200, 200)
    assert fitted.width == 200
    assert fitted.height == 100


def test_nearest_neighbor_interpolation():
    source = _random_image(32, 32, 1)
    result = resize(source, 64, 64, InterpolationMode.NEAREST_NEIGHBOR)
    assert (result.width, result.height) == (64, 64)
    assert set(np.unique(result.pixels)) <= set(np.unique(source.pixels))


def test_nearest_neighbor_doubling_repeats_pixels():
    source = _random_image(32, 32, 3)
    result = resize(source, 64, 64, InterpolationMode.NEAREST_NEIGHBOR)
    expected = np.repeat(np.repeat(source.pixels, 2, axis=0), 2, axis=1)
    assert np.array_equal(result.pixels, expected)


def test_single_pixel_resize():
    source = create_image(1, 1, 3)
    source.pixels[0, 0] = (100, 150, 200)

    result = resize(source, 10, 10)

    assert result.pixels.shape == (10, 10, 3)
    assert np.unique(result.pixels[:, :, 0]).tolist() == [100]
    assert np.unique(result.pixels[:, :, 1]).tolist() == [150]
    assert np.unique(result.pixels[:, :, 2]).tolist() == [200]


def test_invalid_parameters():
    source = _random_image(32, 32, 3)

    with pytest.raises(ValueError):
        resize(source, 0, 32)
    with pytest.raises(ValueError):
        resize(source, 32, 0)
    with pytest.raises(ValueError):
        resize(source, -1, 32)

    with pytest.raises(ValueError):
        resize_by_scale(source, 0.0, 1.0)
    with pytest.raises(ValueError):
        resize_by_scale(source, -1.0, 1.0)

    with pytest.raises(ValueError):
        resize(Image(), 32, 32)


def test_invalid_fit_box():
    source = _random_image(8, 8, 1)
    with pytest.raises(ValueError):
        resize_fit(source, 0, 10)


def test_bicubic_is_rejected():
    source = _random_image(8, 8, 1)
    with pytest.raises(ValueError):
        resize(source, 16, 16, InterpolationMode.BICUBIC)


def test_large_image_resize():
    rng = np.random.default_rng(42)
    source = Image(rng.integers(0, 256, size=(512, 512, 3), dtype=np.uint8))
    result = resize(source, 1024, 1024)
    assert (result.width, result.height, result.channels) == (1024, 1024, 3)
    assert result.pixels.dtype == np.uint8


def test_non_integer_scale():
    source = _random_image(100, 100, 3)
    result = resize(source, 73, 91)
    assert result.width == 73
    assert result.height == 91


def test_same_size_bilinear_is_identity():
    source = _random_image(20, 12, 3)
    assert resize(source, 20, 12) == source