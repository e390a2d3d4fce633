"""RGB Split — horizontal red/blue channel separation."""

import math

import numpy as np

EFFECT_ID = "rgbSplit"
EFFECT_NAME = "RGB Split"
EFFECT_CATEGORY = "glitch"

MAX_SHIFT = 30

PARAMS: dict = {
    "intensity": {
        "type": "int",
        "min": 0,
        "max": 100,
        "default": 0,
        "label": "RGB Split",
        "curve": "linear",
        "unit": "%",
        "description": f"Red/blue channel offset, up to {MAX_SHIFT}px",
    }
}


def shift_for(intensity: int) -> int:
    """Pixel offset for an intensity, rounded half up."""
    intensity = max(0, min(100, int(intensity)))
    return int(math.floor(intensity / 100 * MAX_SHIFT + 0.5))


def apply(frame: np.ndarray, intensity: int, *, seed: int = 0) -> np.ndarray:
    """Pull red from the left and blue from the right. Green and alpha stay."""
    offset = shift_for(intensity)
    output = frame.copy()
    if offset == 0:
        return output

    w = frame.shape[1]
    cols = np.arange(w)
    # Clamp to the edge column instead of wrapping, so no seam appears
    red_src = np.clip(cols - offset, 0, w - 1)
    blue_src = np.clip(cols + offset, 0, w - 1)

    output[:, :, 0] = frame[:, red_src, 0]
    output[:, :, 2] = frame[:, blue_src, 2]
    return output
