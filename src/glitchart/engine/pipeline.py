"""Effect pipeline — composes the active effects over one source buffer.

Every call starts again from the pristine source and walks the registry
in its fixed order. Nothing is kept between calls, so the same source
and intensities always render the same bytes.

Includes a per-effect timing warning for effects slow enough to hurt
interactive use.
"""

import logging
import time
from typing import Mapping

import numpy as np
import sentry_sdk

from glitchart.buffer import PixelBuffer
from glitchart.diagnostics import effect_fields
from glitchart.effects import registry

logger = logging.getLogger(__name__)

# Per-effect timing threshold (milliseconds)
EFFECT_WARN_MS = 100

DEFAULT_SEED = 0


class EffectError(RuntimeError):
    """An effect raised while processing a buffer."""

    def __init__(self, effect_id: str, cause: Exception):
        super().__init__(f"effect {effect_id} failed: {type(cause).__name__}: {cause}")
        self.effect_id = effect_id


def _capture_with_context(e: Exception, effect_id: str, extra: dict):
    """Capture exception to Sentry with effect-level context and fingerprint dedup."""
    with sentry_sdk.new_scope() as scope:
        scope.set_tag("effect_id", effect_id)
        scope.fingerprint = ["effect-crash", effect_id, type(e).__name__]
        scope.set_context("effect", extra)
        sentry_sdk.capture_exception(e, scope=scope)


def apply(
    source: PixelBuffer,
    intensities: Mapping | None,
    *,
    seed: int = DEFAULT_SEED,
) -> PixelBuffer:
    """Apply every active effect, in registry order, to a copy of ``source``.

    Args:
        source:      Pristine input buffer. Never modified.
        intensities: Map of effect id -> intensity in [0, 100]. Unknown
                     ids are ignored, absent ids count as 0, out-of-range
                     values are clamped.
        seed:        Salt for the hash-seeded effects (corruption, bars,
                     VHS noise).

    Returns:
        A new PixelBuffer with the same dimensions as ``source``.

    Raises:
        EffectError: If an effect fails. The source stays valid.
    """
    resolved = registry.normalize_intensities(intensities)
    working = source.clone()

    for entry in registry.EFFECTS:
        intensity = resolved[entry.effect_id]
        # 0 means skipped, not applied at zero strength
        if intensity <= 0:
            continue

        effect_id = entry.effect_id.value
        t0 = time.monotonic()
        try:
            working = entry.apply(working, intensity, seed=seed)
        except Exception as e:
            # Context is PII-safe: shape and control values only, no pixels
            _capture_with_context(
                e,
                effect_id,
                {
                    "ordinal": entry.ordinal,
                    "intensity": intensity,
                    "frame_shape": list(source.shape),
                    "seed": seed,
                },
            )
            logger.error(
                "Effect %s failed at intensity %d: %s",
                effect_id,
                intensity,
                type(e).__name__,
                extra=effect_fields(entry, intensity, seed=seed),
            )
            logger.debug("Effect %s exception detail: %s", effect_id, e)
            raise EffectError(effect_id, e) from e

        elapsed_ms = (time.monotonic() - t0) * 1000
        if elapsed_ms > EFFECT_WARN_MS:
            logger.warning(
                "Effect %s took %.0fms (>%dms warn threshold) on %dx%d buffer",
                effect_id,
                elapsed_ms,
                EFFECT_WARN_MS,
                source.width,
                source.height,
                extra=effect_fields(
                    entry,
                    intensity,
                    elapsed_ms=round(elapsed_ms, 1),
                    frame_shape=list(source.shape),
                ),
            )

    return working


def apply_array(
    frame: np.ndarray,
    intensities: Mapping | None,
    *,
    seed: int = DEFAULT_SEED,
) -> np.ndarray:
    """ndarray in, ndarray out. Raises InvalidBuffer for non-RGBA frames."""
    return apply(PixelBuffer.from_array(frame), intensities, seed=seed).array
