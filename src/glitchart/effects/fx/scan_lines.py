"""Scan Lines — CRT-style periodic row darkening."""

import numpy as np

EFFECT_ID = "scanLines"
EFFECT_NAME = "Scan Lines"
EFFECT_CATEGORY = "distortion"

PERIOD = 3
MAX_DARKEN = 0.7

PARAMS: dict = {
    "intensity": {
        "type": "int",
        "min": 0,
        "max": 100,
        "default": 0,
        "label": "Scan Lines",
        "curve": "linear",
        "unit": "%",
        "description": f"Darkening of one row in every {PERIOD}",
    }
}


def apply(frame: np.ndarray, intensity: int, *, seed: int = 0) -> np.ndarray:
    """Scan lines — darken every PERIOD-th row, starting at row 0."""
    intensity = max(0, min(100, int(intensity)))
    output = frame.copy()
    if intensity == 0:
        return output

    factor = 1.0 - intensity / 100 * MAX_DARKEN
    rows = output[::PERIOD, :, :3].astype(np.float32) * factor
    output[::PERIOD, :, :3] = np.clip(rows, 0, 255).astype(np.uint8)
    return output
