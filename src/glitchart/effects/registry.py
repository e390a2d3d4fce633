"""Effect registry — the fixed, ordered table of the eight glitch effects.

Composition order is the order of ``EFFECTS`` below and nothing else.
Each later effect works on the output of all earlier ones (Bit Crush
quantizes already hue-rotated colors), so reordering changes the image.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Mapping

import numpy as np

from glitchart.buffer import PixelBuffer
from glitchart.effects.fx import (
    bit_crush,
    chromatic_aberration,
    color_shift,
    digital_corruption,
    glitch_bars,
    rgb_split,
    scan_lines,
    vhs_distortion,
)

logger = logging.getLogger(__name__)

EffectFn = Callable[..., np.ndarray]

MIN_INTENSITY = 0
MAX_INTENSITY = 100


class EffectId(str, Enum):
    RGB_SPLIT = "rgbSplit"
    SCAN_LINES = "scanLines"
    VHS_DISTORTION = "vhsDistortion"
    CHROMATIC_ABERRATION = "chromaticAberration"
    DIGITAL_CORRUPTION = "digitalCorruption"
    COLOR_SHIFT = "colorShift"
    GLITCH_BARS = "glitchBars"
    BIT_CRUSH = "bitCrush"


@dataclass(frozen=True)
class EffectEntry:
    effect_id: EffectId
    ordinal: int
    name: str
    category: str
    params: dict
    fn: EffectFn

    def apply(self, buffer: PixelBuffer, intensity: int, *, seed: int = 0) -> PixelBuffer:
        """Run the algorithm on a buffer, returning a new buffer."""
        return PixelBuffer.from_array(self.fn(buffer.array, intensity, seed=seed))


_MODULES = {
    EffectId.RGB_SPLIT: rgb_split,
    EffectId.SCAN_LINES: scan_lines,
    EffectId.VHS_DISTORTION: vhs_distortion,
    EffectId.CHROMATIC_ABERRATION: chromatic_aberration,
    EffectId.DIGITAL_CORRUPTION: digital_corruption,
    EffectId.COLOR_SHIFT: color_shift,
    EffectId.GLITCH_BARS: glitch_bars,
    EffectId.BIT_CRUSH: bit_crush,
}


def _build_entries() -> tuple[EffectEntry, ...]:
    entries = []
    # EffectId declaration order is the composition order
    for ordinal, effect_id in enumerate(EffectId):
        mod = _MODULES[effect_id]
        if mod.EFFECT_ID != effect_id.value:
            raise RuntimeError(
                f"fx module {mod.__name__} declares {mod.EFFECT_ID!r}, "
                f"expected {effect_id.value!r}"
            )
        entries.append(
            EffectEntry(
                effect_id=effect_id,
                ordinal=ordinal,
                name=mod.EFFECT_NAME,
                category=mod.EFFECT_CATEGORY,
                params=mod.PARAMS,
                fn=mod.apply,
            )
        )
    return tuple(entries)


EFFECTS: tuple[EffectEntry, ...] = _build_entries()

_BY_ID: dict[str, EffectEntry] = {entry.effect_id.value: entry for entry in EFFECTS}


def get(effect_id) -> EffectEntry | None:
    """Get an entry by id (string or EffectId). Unknown ids return None."""
    if isinstance(effect_id, EffectId):
        effect_id = effect_id.value
    if not isinstance(effect_id, str):
        return None
    return _BY_ID.get(effect_id)


def effect_ids() -> list[str]:
    """Identifiers in composition order."""
    return [entry.effect_id.value for entry in EFFECTS]


def list_all() -> list[dict]:
    """List all effects with metadata, in composition order."""
    return [
        {
            "id": entry.effect_id.value,
            "ordinal": entry.ordinal,
            "name": entry.name,
            "category": entry.category,
            "params": entry.params,
        }
        for entry in EFFECTS
    ]


def default_intensities() -> dict[str, int]:
    """Every effect at 0 — the state after a reset."""
    return {effect_id: MIN_INTENSITY for effect_id in effect_ids()}


def clamp_intensity(value) -> int:
    """Coerce a control value to an int in [0, 100].

    NaN, infinities, booleans and non-numeric values count as 0 (inactive).
    """
    if isinstance(value, bool):
        logger.warning("Ignoring boolean intensity %r", value)
        return MIN_INTENSITY
    if isinstance(value, (int, np.integer)):
        return max(MIN_INTENSITY, min(MAX_INTENSITY, int(value)))
    try:
        number = float(value)
    except OverflowError:
        # Finite but beyond float range, e.g. Fraction(10**400)
        return MAX_INTENSITY if value > 0 else MIN_INTENSITY
    except (TypeError, ValueError):
        logger.warning("Ignoring non-numeric intensity %r", value)
        return MIN_INTENSITY
    if math.isnan(number) or math.isinf(number):
        logger.warning("Ignoring non-finite intensity %r", value)
        return MIN_INTENSITY
    return max(MIN_INTENSITY, min(MAX_INTENSITY, int(round(number))))


def normalize_intensities(intensities: Mapping | None) -> dict[EffectId, int]:
    """Resolve a caller's intensity map against the registry.

    Unknown keys are dropped, absent keys become 0, values are clamped.
    """
    resolved = {entry.effect_id: MIN_INTENSITY for entry in EFFECTS}
    if not intensities:
        return resolved

    for key, value in intensities.items():
        entry = get(key)
        if entry is None:
            logger.debug("Ignoring unknown effect id %r", key)
            continue
        resolved[entry.effect_id] = clamp_intensity(value)
    return resolved
