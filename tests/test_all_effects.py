"""Parametrized tests over ALL registered effects — visible change, boundary values, determinism."""

import numpy as np
import pytest

from glitchart.effects.registry import EFFECTS


def random_frame(h=64, w=64):
    """Deterministic opaque RGBA frame with varied pixel values."""
    rng = np.random.default_rng(42)
    frame = rng.integers(0, 256, (h, w, 4), dtype=np.uint8)
    frame[:, :, 3] = 255
    return frame


INTENSITIES = [0, 1, 25, 50, 75, 100]


@pytest.fixture(params=EFFECTS, ids=[e.effect_id.value for e in EFFECTS])
def effect_entry(request):
    """Fixture that yields each registry entry in composition order."""
    return request.param


class TestAllEffectsBasic:
    """Every effect must produce valid output at every intensity."""

    @pytest.mark.parametrize("intensity", INTENSITIES)
    def test_output_shape_and_dtype(self, effect_entry, intensity):
        frame = random_frame(37, 53)
        result = effect_entry.fn(frame, intensity, seed=0)
        assert result.shape == frame.shape, f"{effect_entry.effect_id}: shape mismatch"
        assert result.dtype == np.uint8, f"{effect_entry.effect_id}: dtype mismatch"

    @pytest.mark.parametrize("intensity", INTENSITIES)
    def test_alpha_preserved(self, effect_entry, intensity):
        """None of the eight effects touches alpha."""
        frame = random_frame()
        frame[:, :, 3] = np.arange(frame.shape[1], dtype=np.uint8)[np.newaxis, :]
        result = effect_entry.fn(frame, intensity, seed=0)
        np.testing.assert_array_equal(result[:, :, 3], frame[:, :, 3])

    def test_zero_intensity_is_identity(self, effect_entry):
        frame = random_frame()
        np.testing.assert_array_equal(effect_entry.fn(frame, 0, seed=0), frame)

    def test_full_intensity_changes_image(self, effect_entry):
        frame = random_frame()
        assert not np.array_equal(effect_entry.fn(frame, 100, seed=0), frame) or (
            # A full hue turn lands back on the input
            effect_entry.effect_id.value == "colorShift"
        )

    def test_returns_new_array(self, effect_entry):
        frame = random_frame()
        before = frame.copy()
        result = effect_entry.fn(frame, 60, seed=0)
        assert not np.shares_memory(result, frame)
        np.testing.assert_array_equal(frame, before)


class TestAllEffectsDeterminism:
    """Same inputs must produce identical outputs."""

    def test_deterministic_output(self, effect_entry):
        frame = random_frame()
        r1 = effect_entry.fn(frame, 66, seed=5)
        r2 = effect_entry.fn(frame, 66, seed=5)
        np.testing.assert_array_equal(r1, r2, err_msg=f"{effect_entry.effect_id}: non-deterministic")


class TestAllEffectsEdgeSizes:
    @pytest.mark.parametrize("h,w", [(1, 1), (1, 9), (9, 1), (2, 3)])
    def test_tiny_frames(self, effect_entry, h, w):
        frame = random_frame(h, w)
        result = effect_entry.fn(frame, 100, seed=0)
        assert result.shape == frame.shape
