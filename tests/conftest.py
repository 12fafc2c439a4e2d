"""Shared fixtures for the pixelation tests."""

import numpy as np
import pytest

from pixelart.models import PixelBuffer


@pytest.fixture
def noisy_buffer() -> PixelBuffer:
    """A 16x12 buffer of random RGBA noise, seeded for repeatability."""
    rng = np.random.default_rng(1234)
    return PixelBuffer.from_array(rng.integers(0, 256, size=(12, 16, 4), dtype=np.uint8))


@pytest.fixture
def gradient_buffer() -> PixelBuffer:
    """A 9x7 buffer with smooth color ramps and varying alpha."""
    ys, xs = np.mgrid[0:7, 0:9]
    pixels = np.stack(
        [xs * 28, ys * 36, (xs + ys) * 16, 255 - xs * 10],
        axis=-1,
    ).astype(np.uint8)
    return PixelBuffer.from_array(pixels)
