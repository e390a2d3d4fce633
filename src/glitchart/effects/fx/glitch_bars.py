"""Glitch Bars — blocky horizontal band displacement.

Band count grows with intensity. Each band's start row, height and
offset come from a hash of the band index, so a given intensity always
tears the same bands by the same amounts. Displaced pixels wrap around
horizontally.
"""

import math

import numpy as np

from glitchart.engine.determinism import derive_seed, hash_grid, unit_float

EFFECT_ID = "glitchBars"
EFFECT_NAME = "Glitch Bars"
EFFECT_CATEGORY = "destruction"

MAX_BARS = 24
MAX_OFFSET_FRACTION = 0.25
BAR_HEIGHT_DIVISOR = 20

PARAMS: dict = {
    "intensity": {
        "type": "int",
        "min": 0,
        "max": 100,
        "default": 0,
        "label": "Glitch Bars",
        "curve": "linear",
        "unit": "%",
        "description": f"Up to {MAX_BARS} torn horizontal bands",
    }
}


def bar_count(intensity: int) -> int:
    intensity = max(0, min(100, int(intensity)))
    return math.ceil(intensity * MAX_BARS / 100)


def bars(height: int, width: int, intensity: int, seed: int = 0) -> list[tuple[int, int, int]]:
    """(start_row, bar_height, offset_px) for every active band, in index order."""
    intensity = max(0, min(100, int(intensity)))
    count = bar_count(intensity)
    if count == 0:
        return []

    index = np.arange(count)
    seed = derive_seed(seed, EFFECT_ID)
    start = hash_grid(seed, index, 0) % np.uint64(height)
    size = np.uint64(1) + hash_grid(seed, index, 1) % np.uint64(
        max(1, height // BAR_HEIGHT_DIVISOR)
    )
    max_offset = intensity / 100 * width * MAX_OFFSET_FRACTION
    offset = np.rint((unit_float(hash_grid(seed, index, 2)) * 2.0 - 1.0) * max_offset)

    return [
        (int(start[i]), int(size[i]), int(offset[i]))
        for i in range(count)
    ]


def apply(frame: np.ndarray, intensity: int, *, seed: int = 0) -> np.ndarray:
    """Shift each band's RGB sideways. Later bands win where bands overlap."""
    intensity = max(0, min(100, int(intensity)))
    output = frame.copy()
    if intensity == 0:
        return output

    h, w = frame.shape[:2]
    for start, size, offset in bars(h, w, intensity, seed):
        if offset == 0:
            continue
        end = min(start + size, h)
        output[start:end, :, :3] = np.roll(frame[start:end, :, :3], offset, axis=1)
    return output
