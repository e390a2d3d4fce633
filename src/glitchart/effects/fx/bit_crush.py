"""Bit Crush — quantize each color channel to fewer evenly spaced levels."""

import numpy as np

EFFECT_ID = "bitCrush"
EFFECT_NAME = "Bit Crush"
EFFECT_CATEGORY = "color"

MAX_BITS_DROPPED = 6

PARAMS: dict = {
    "intensity": {
        "type": "int",
        "min": 0,
        "max": 100,
        "default": 0,
        "label": "Bit Crush",
        "curve": "linear",
        "unit": "%",
        "description": "Channel depth reduction, down to 4 levels at 100%",
    }
}


def levels_for(intensity: int) -> int:
    """Number of quantization levels: max(2, 256 >> floor(intensity/100 * 6))."""
    intensity = max(0, min(100, int(intensity)))
    return max(2, 256 >> (intensity * MAX_BITS_DROPPED // 100))


def apply(frame: np.ndarray, intensity: int, *, seed: int = 0) -> np.ndarray:
    """Round RGB to the nearest level in [0, 255]. Alpha preserved."""
    intensity = max(0, min(100, int(intensity)))
    output = frame.copy()
    if intensity == 0:
        return output

    levels = levels_for(intensity)
    step = 255.0 / (levels - 1)
    rgb = output[:, :, :3].astype(np.float64)
    crushed = np.rint(np.rint(rgb / step) * step)
    output[:, :, :3] = np.clip(crushed, 0, 255).astype(np.uint8)
    return output
