"""Effect intensity calibration — verifies every effect produces visible change.

Run:  python -m glitchart.effects._calibration
"""

import sys

import numpy as np

from glitchart.effects.registry import EFFECTS

LEVELS = (0, 25, 50, 75, 100)

# Hue rotation wraps: 100% is a full turn and renders the input unchanged
FULL_TURN_EFFECTS = {"colorShift"}


def _test_frame(w: int = 200, h: int = 150) -> np.ndarray:
    """Create a deterministic test frame (RGBA uint8, opaque)."""
    rng = np.random.default_rng(42)
    frame = rng.integers(0, 256, (h, w, 4), dtype=np.uint8)
    frame[:, :, 3] = 255
    return frame


def _mean_diff(a: np.ndarray, b: np.ndarray) -> float:
    """Mean absolute pixel difference across RGB channels."""
    return float(
        np.mean(np.abs(a[:, :, :3].astype(np.float32) - b[:, :, :3].astype(np.float32)))
    )


def calibrate_all(frame: np.ndarray | None = None) -> list[dict]:
    """Sweep every effect across LEVELS.

    Returns a list of result dicts:
      {effect_id, level_pct, mean_pixel_diff}
    """
    if frame is None:
        frame = _test_frame()
    results: list[dict] = []

    for entry in EFFECTS:
        for level in LEVELS:
            out = entry.fn(frame, level, seed=0)
            results.append(
                {
                    "effect_id": entry.effect_id.value,
                    "level_pct": level,
                    "mean_pixel_diff": round(_mean_diff(frame, out), 2),
                }
            )

    return results


def check_visible_change(results: list[dict]) -> list[str]:
    """Flag effects that are visible at 0 or invisible at any level > 0."""
    errors: list[str] = []
    for r in results:
        if r["level_pct"] == 0 and r["mean_pixel_diff"] != 0:
            errors.append(f"{r['effect_id']}: changes the image at intensity 0")
        elif r["level_pct"] == 100 and r["effect_id"] in FULL_TURN_EFFECTS:
            continue
        elif r["level_pct"] > 0 and r["mean_pixel_diff"] == 0:
            errors.append(
                f"{r['effect_id']}: no visible change at intensity {r['level_pct']}"
            )
    return errors


def print_report(results: list[dict]) -> None:
    """Pretty-print calibration results."""
    print(f"{'Effect':<22} {'Level%':>6} {'PixDiff':>8}")
    print("-" * 40)

    current_effect = ""
    for r in results:
        eid = r["effect_id"] if r["effect_id"] != current_effect else ""
        current_effect = r["effect_id"]
        print(f"{eid:<22} {r['level_pct']:>5}% {r['mean_pixel_diff']:>8.2f}")


if __name__ == "__main__":
    results = calibrate_all()
    print_report(results)
    errors = check_visible_change(results)
    if errors:
        print("\nCALIBRATION ERRORS:")
        for e in errors:
            print(f"  {e}")
        sys.exit(1)
