"""VHS Distortion — sinusoidal row wobble with per-row tape noise.

Each row y is displaced by ``amplitude * sin(y * FREQUENCY + PHASE)``
pixels, where amplitude grows linearly with intensity. Source columns
that fall outside the frame clamp to the edge. A small luminance jitter,
seeded per row, emulates tape noise.
"""

import numpy as np

from glitchart.engine.determinism import derive_seed, hash_grid, unit_float

EFFECT_ID = "vhsDistortion"
EFFECT_NAME = "VHS Distortion"
EFFECT_CATEGORY = "texture"

MAX_AMPLITUDE = 20.0
FREQUENCY = 0.05
PHASE = 0.0
MAX_JITTER = 12.0

PARAMS: dict = {
    "intensity": {
        "type": "int",
        "min": 0,
        "max": 100,
        "default": 0,
        "label": "VHS Distortion",
        "curve": "linear",
        "unit": "%",
        "description": f"Row wave amplitude up to {MAX_AMPLITUDE:g}px plus tape noise",
    }
}


def row_shifts(height: int, intensity: int) -> np.ndarray:
    """Integer horizontal displacement for every row."""
    amplitude = max(0, min(100, int(intensity))) / 100 * MAX_AMPLITUDE
    y = np.arange(height, dtype=np.float64)
    return np.rint(amplitude * np.sin(y * FREQUENCY + PHASE)).astype(np.intp)


def apply(frame: np.ndarray, intensity: int, *, seed: int = 0) -> np.ndarray:
    """Apply wave displacement and row jitter. Alpha is untouched."""
    intensity = max(0, min(100, int(intensity)))
    output = frame.copy()
    if intensity == 0:
        return output

    h, w = frame.shape[:2]
    shifts = row_shifts(h, intensity)
    src_cols = np.clip(np.arange(w)[np.newaxis, :] - shifts[:, np.newaxis], 0, w - 1)
    rgb = frame[np.arange(h)[:, np.newaxis], src_cols, :3].astype(np.float32)

    noise = unit_float(hash_grid(derive_seed(seed, EFFECT_ID), np.arange(h))) * 2.0 - 1.0
    jitter = (noise * MAX_JITTER * intensity / 100).astype(np.float32)
    rgb += jitter[:, np.newaxis, np.newaxis]

    output[:, :, :3] = np.clip(np.rint(rgb), 0, 255).astype(np.uint8)
    return output
