"""glitchart — deterministic glitch-art effects pipeline for still images."""

from glitchart.buffer import InvalidBuffer, PixelBuffer
from glitchart.effects.registry import EffectId
from glitchart.engine.pipeline import EffectError, apply

__version__ = "0.1.0"

__all__ = [
    "EffectError",
    "EffectId",
    "InvalidBuffer",
    "PixelBuffer",
    "apply",
]
