"""Tests for fx.bit_crush — 4-test contract (basic, determinism, boundary, purity)."""

import numpy as np

from glitchart.effects.fx.bit_crush import apply, levels_for


def _frame(h=64, w=64):
    rng = np.random.default_rng(42)
    frame = rng.integers(0, 256, (h, w, 4), dtype=np.uint8)
    frame[:, :, 3] = 255
    return frame


def test_basic():
    frame = _frame()
    result = apply(frame, 50)
    assert result.shape == frame.shape
    assert result.dtype == np.uint8
    np.testing.assert_array_equal(result[:, :, 3], frame[:, :, 3])
    assert len(np.unique(result[:, :, 0])) <= levels_for(50)


def test_levels_formula():
    assert levels_for(0) == 256
    assert levels_for(16) == 256
    assert levels_for(17) == 128
    assert levels_for(50) == 32
    assert levels_for(100) == 4


def test_full_intensity_uses_four_levels():
    frame = _frame()
    result = apply(frame, 100)
    assert set(np.unique(result[:, :, :3]).tolist()) <= {0, 85, 170, 255}


def test_channel_200_maps_to_170():
    frame = np.zeros((1, 1, 4), dtype=np.uint8)
    frame[0, 0] = (200, 42, 128, 255)
    np.testing.assert_array_equal(apply(frame, 100)[0, 0], [170, 0, 170, 255])


def test_determinism():
    frame = _frame()
    np.testing.assert_array_equal(apply(frame, 88), apply(frame, 88))


def test_boundary():
    frame = _frame()
    np.testing.assert_array_equal(apply(frame, 0), frame)
    # 256 levels at low intensity is lossless
    np.testing.assert_array_equal(apply(frame, 10), frame)
    # Extremes stay put at every level count
    edges = np.zeros((1, 2, 4), dtype=np.uint8)
    edges[0, 1] = 255
    np.testing.assert_array_equal(apply(edges, 100), edges)


def test_purity():
    frame = _frame()
    before = frame.copy()
    apply(frame, 100)
    np.testing.assert_array_equal(frame, before)
