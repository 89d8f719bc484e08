import numpy as np
import pytest

from pixelflow.image import Image, create_image, from_bytes
from pixelflow.morphology import (
    StructuringElement,
    black_hat,
    closing,
    dilate,
    erode,
    gradient,
    opening,
    structuring_element,
    top_hat,
)


def _random_image(width, height, channels, seed=42):
    values = []
    for _ in range(width * height * channels):
        seed = (seed * 1103515245 + 12345) & 0xFFFFFFFF
        values.append((seed >> 16) & 0xFF)
    return from_bytes(bytes(values), width, height, channels)


def _bright_dot():
    image = create_image(32, 32, 1)
    image.pixels[16, 16, 0] = 255
    return image


def test_rectangle_element_is_full():
    mask = structuring_element(StructuringElement.RECTANGLE, 5)
    assert mask.shape == (5, 5)
    assert mask.all()


def test_cross_element_shape():
    mask = structuring_element(StructuringElement.CROSS, 5)
    assert mask[2, :].all()
    assert mask[:, 2].all()
    assert not mask[0, 0]
    assert not mask[1, 3]


def test_ellipse_element_is_symmetric_and_centered():
    mask = structuring_element(StructuringElement.ELLIPSE, 7)
    assert mask[3, 3]
    assert np.array_equal(mask, mask.T)
    assert np.array_equal(mask, mask[::-1, ::-1])
    assert not mask[0, 0]


@pytest.mark.parametrize("size", [0, 2, 4, -3])
def test_invalid_kernel_size(size):
    with pytest.raises(ValueError):
        structuring_element(StructuringElement.RECTANGLE, size)
    with pytest.raises(ValueError):
        erode(_bright_dot(), size)


def test_erode_removes_isolated_dot():
    assert np.count_nonzero(erode(_bright_dot()).pixels) == 0


def test_dilate_grows_dot_to_square():
    result = dilate(_bright_dot(), 3)
    assert np.all(result.pixels[15:18, 15:18] == 255)
    assert np.count_nonzero(result.pixels) == 3 * 3


def test_dilate_with_cross():
    result = dilate(_bright_dot(), 3, StructuringElement.CROSS)
    cross = structuring_element(StructuringElement.CROSS, 3)
    assert result.pixels[15, 15, 0] == 0
    assert result.pixels[15, 16, 0] == 255
    assert np.count_nonzero(result.pixels) == int(cross.sum())


def test_erode_and_dilate_bracket_image():
    image = _random_image(24, 24, 1)
    low = erode(image).pixels
    high = dilate(image).pixels
    assert np.count_nonzero(low > image.pixels) == 0
    assert np.count_nonzero(high < image.pixels) == 0


def test_opening_and_closing_bracket_image():
    image = _random_image(24, 24, 1)
    opened = opening(image).pixels
    closed = closing(image).pixels
    assert np.count_nonzero(opened > image.pixels) == 0
    assert np.count_nonzero(closed < image.pixels) == 0


@pytest.mark.parametrize("operation", [erode, dilate, opening, closing])
def test_constant_image_is_fixed_point(operation):
    image = Image(np.full((10, 12, 3), 77, dtype=np.uint8))
    assert operation(image, 5, StructuringElement.ELLIPSE) == image


@pytest.mark.parametrize("operation", [gradient, top_hat, black_hat])
def test_derived_operations_vanish_on_constant_image(operation):
    image = Image(np.full((10, 12, 1), 77, dtype=np.uint8))
    assert np.count_nonzero(operation(image).pixels) == 0


def test_gradient_of_dot():
    result = gradient(_bright_dot())
    assert np.all(result.pixels[15:18, 15:18] == 255)
    assert np.count_nonzero(result.pixels) == 3 * 3


def test_top_hat_keeps_small_bright_detail():
    image = _bright_dot()
    assert top_hat(image) == image


def test_black_hat_finds_small_dark_detail():
    image = Image(np.full((32, 32, 1), 255, dtype=np.uint8))
    image.pixels[16, 16, 0] = 0
    result = black_hat(image)
    assert result.pixels[16, 16, 0] == 255
    assert np.count_nonzero(result.pixels) == 1


def test_channels_processed_independently():
    planes = [_random_image(16, 16, 1, seed=seed) for seed in (1, 2, 3)]
    stacked = Image(np.concatenate([p.pixels for p in planes], axis=2))
    result = erode(stacked, 3, StructuringElement.CROSS)
    for index, plane in enumerate(planes):
        expected = erode(plane, 3, StructuringElement.CROSS).pixels[:, :, 0]
        assert np.array_equal(result.pixels[:, :, index], expected)


@pytest.mark.parametrize(
    "operation", [erode, dilate, opening, closing, gradient, top_hat, black_hat]
)
def test_invalid_input_raises(operation):
    with pytest.raises(ValueError):
        operation(Image())