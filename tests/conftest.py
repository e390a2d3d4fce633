import numpy as np
import pytest

from glitchart.buffer import PixelBuffer


def random_frame(h=64, w=64, seed=42) -> np.ndarray:
    """Deterministic opaque RGBA frame with varied pixel values."""
    rng = np.random.default_rng(seed)
    frame = rng.integers(0, 256, (h, w, 4), dtype=np.uint8)
    frame[:, :, 3] = 255
    return frame


@pytest.fixture
def frame():
    return random_frame()


@pytest.fixture
def buffer():
    return PixelBuffer.from_array(random_frame(48, 80))


@pytest.fixture
def gray_buffer():
    """100x100 mid-gray, fully opaque."""
    return PixelBuffer.solid(100, 100, (128, 128, 128, 255))
