"""Shared synthetic images."""

import numpy as np
import pytest

from veil_structure import PixelBuffer


def make_gradient(width: int = 64, height: int = 48) -> np.ndarray:
    yy, xx = np.mgrid[0:height, 0:width]
    red = xx * 255 // max(width - 1, 1)
    green = yy * 255 // max(height - 1, 1)
    blue = (xx + yy) * 255 // max(width + height - 2, 1)
    return np.stack([red, green, blue], axis=-1).astype(np.uint8)


@pytest.fixture
def gradient_array() -> np.ndarray:
    return make_gradient()


@pytest.fixture
def gradient_pixels(gradient_array) -> PixelBuffer:
    return PixelBuffer.from_array(gradient_array)


@pytest.fixture
def noise_pixels() -> PixelBuffer:
    """Odd-sized so tiles and image edges never line up."""
    rng = np.random.default_rng(1234)
    return PixelBuffer.from_array(rng.integers(0, 256, size=(13, 20, 3), dtype=np.uint8))


@pytest.fixture
def red_pixels() -> PixelBuffer:
    array = np.zeros((4, 4, 3), dtype=np.uint8)
    array[..., 0] = 255
    return PixelBuffer.from_array(array)


@pytest.fixture
def known_hash() -> str:
    return "LEHV6nWB2yk8pyo0adR*.7kCMdnj"
