"""Color Shift — rotates hue in HLS space, keeping lightness and saturation."""

import numpy as np

EFFECT_ID = "colorShift"
EFFECT_NAME = "Color Shift"
EFFECT_CATEGORY = "color"

PARAMS: dict = {
    "intensity": {
        "type": "int",
        "min": 0,
        "max": 100,
        "default": 0,
        "label": "Color Shift",
        "curve": "linear",
        "unit": "%",
        "description": "Hue rotation, 100% = a full turn of the color wheel",
    }
}


def rgb_to_hls(rgb: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Float RGB in [0, 1] to (hue degrees, lightness, saturation)."""
    r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]
    cmax = np.maximum(np.maximum(r, g), b)
    cmin = np.minimum(np.minimum(r, g), b)
    delta = cmax - cmin
    light = (cmax + cmin) / 2.0

    hue = np.zeros_like(delta)
    chroma = delta > 0
    # Red wins ties with green/blue, green wins ties with blue
    mask_r = chroma & (cmax == r)
    mask_g = chroma & (cmax == g) & ~mask_r
    mask_b = chroma & ~mask_r & ~mask_g

    hue[mask_r] = 60.0 * (((g[mask_r] - b[mask_r]) / delta[mask_r]) % 6)
    hue[mask_g] = 60.0 * (((b[mask_g] - r[mask_g]) / delta[mask_g]) + 2)
    hue[mask_b] = 60.0 * (((r[mask_b] - g[mask_b]) / delta[mask_b]) + 4)

    denom = 1.0 - np.abs(2.0 * light - 1.0)
    sat = np.divide(delta, denom, out=np.zeros_like(delta), where=denom > 0)
    return hue, light, sat


def hls_to_rgb(hue: np.ndarray, light: np.ndarray, sat: np.ndarray) -> np.ndarray:
    """Inverse of rgb_to_hls; returns float RGB in [0, 1]."""
    c = (1.0 - np.abs(2.0 * light - 1.0)) * sat
    h_sector = (hue % 360.0) / 60.0
    x = c * (1 - np.abs(h_sector % 2 - 1))
    m = light - c / 2.0

    sector = np.floor(h_sector).astype(np.intp) % 6
    zeros = np.zeros_like(c)
    # (r, g, b) placement of (c, x, 0) for each 60-degree sector
    table_r = np.stack([c, x, zeros, zeros, x, c])
    table_g = np.stack([x, c, c, x, zeros, zeros])
    table_b = np.stack([zeros, zeros, x, c, c, x])

    pick = sector[np.newaxis, ...]
    r = np.take_along_axis(table_r, pick, axis=0)[0]
    g = np.take_along_axis(table_g, pick, axis=0)[0]
    b = np.take_along_axis(table_b, pick, axis=0)[0]
    return np.stack([r + m, g + m, b + m], axis=-1)


def apply(frame: np.ndarray, intensity: int, *, seed: int = 0) -> np.ndarray:
    """Rotate hue by intensity/100 * 360 degrees. Stateless."""
    intensity = max(0, min(100, int(intensity)))
    output = frame.copy()
    if intensity == 0:
        return output

    angle = intensity / 100 * 360.0
    rgb = frame[:, :, :3].astype(np.float64) / 255.0
    hue, light, sat = rgb_to_hls(rgb)
    rotated = hls_to_rgb(hue + angle, light, sat)

    output[:, :, :3] = np.clip(np.rint(rotated * 255.0), 0, 255).astype(np.uint8)
    return output
