"""Shared pytest fixtures for sprite atlas tests."""

import numpy as np
import pytest

from spriteatlas.core import PixelBuffer


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def random_buffer(rng):
    """Factory for opaque-ish random RGBA buffers."""

    def make(width: int, height: int) -> PixelBuffer:
        array = rng.integers(0, 256, size=(height, width, 4), dtype=np.uint8)
        array[..., 3] = rng.integers(1, 256, size=(height, width), dtype=np.uint8)
        return PixelBuffer.from_array(array)

    return make


@pytest.fixture
def sheet_buffer():
    """Factory for a magenta sheet with a distinct solid square in every cell."""

    def make(rows: int, columns: int, cell: int = 16, inset: int = 3) -> PixelBuffer:
        array = np.zeros((rows * cell, columns * cell, 4), dtype=np.uint8)
        array[...] = (255, 0, 255, 255)
        for row in range(rows):
            for column in range(columns):
                top = row * cell + inset
                left = column * cell + inset
                color = (20 * row + 10, 20 * column + 10, 40, 255)
                array[top : top + cell - 2 * inset, left : left + cell - 2 * inset] = color
        return PixelBuffer.from_array(array)

    return make
