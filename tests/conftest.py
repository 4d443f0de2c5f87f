import numpy as np
import pytest


def solid(width, height, rgba):
    img = np.zeros((height, width, 4), dtype=np.uint8)
    img[...] = np.array(rgba, dtype=np.uint8)
    return img


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def noisy_image(rng):
    img = rng.integers(0, 256, size=(32, 32, 4), dtype=np.uint8)
    img[..., 3] = 255
    return img


@pytest.fixture
def quadrants():
    """8x8: red top-left and bottom-right, blue elsewhere."""
    img = solid(8, 8, (0, 0, 255, 255))
    img[:4, :4] = (255, 0, 0, 255)
    img[4:, 4:] = (255, 0, 0, 255)
    return img
