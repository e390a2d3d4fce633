"""Chromatic Aberration — radial red/blue fringing around the frame center."""

import numpy as np

EFFECT_ID = "chromaticAberration"
EFFECT_NAME = "Chromatic"
EFFECT_CATEGORY = "distortion"

FACTOR = 0.05

PARAMS: dict = {
    "intensity": {
        "type": "int",
        "min": 0,
        "max": 100,
        "default": 0,
        "label": "Chromatic",
        "curve": "linear",
        "unit": "%",
        "description": "Radial R/B offset, proportional to distance from center",
    }
}


def apply(frame: np.ndarray, intensity: int, *, seed: int = 0) -> np.ndarray:
    """Sample red farther from center and blue closer to it. Green stays."""
    intensity = max(0, min(100, int(intensity)))
    output = frame.copy()
    if intensity == 0:
        return output

    h, w = frame.shape[:2]
    cy, cx = (h - 1) / 2.0, (w - 1) / 2.0
    yy, xx = np.mgrid[0:h, 0:w].astype(np.float64)
    scale = intensity / 100 * FACTOR
    dy = (yy - cy) * scale
    dx = (xx - cx) * scale

    def _sample(channel: int, sign: float) -> np.ndarray:
        sy = np.clip(np.rint(yy + sign * dy), 0, h - 1).astype(np.intp)
        sx = np.clip(np.rint(xx + sign * dx), 0, w - 1).astype(np.intp)
        return frame[sy, sx, channel]

    output[:, :, 0] = _sample(0, 1.0)
    output[:, :, 2] = _sample(2, -1.0)
    return output
