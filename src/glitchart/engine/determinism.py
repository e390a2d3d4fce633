"""Seeded determinism for effect reproducibility.

Effects that need noise never touch a global or time-seeded source. They
hash their spatial index (block, band, row) together with a seed instead,
so the same image and intensities always render the same bytes.
"""

import hashlib

import numpy as np

_GOLDEN = np.uint64(0x9E3779B97F4A7C15)
_MIX_1 = np.uint64(0xBF58476D1CE4E5B9)
_MIX_2 = np.uint64(0x94D049BB133111EB)


def derive_seed(project_seed: int, effect_id: str, *index: int) -> int:
    """Derive a deterministic seed from context. Same inputs = same output, always."""
    key = ":".join([str(project_seed), effect_id, *(str(i) for i in index)])
    return int(hashlib.sha256(key.encode()).hexdigest()[:16], 16)


def _mix(z: np.ndarray) -> np.ndarray:
    # SplitMix64 finalizer; uint64 arithmetic wraps
    z = (z ^ (z >> np.uint64(30))) * _MIX_1
    z = (z ^ (z >> np.uint64(27))) * _MIX_2
    return z ^ (z >> np.uint64(31))


def hash_grid(seed: int, *indices) -> np.ndarray:
    """Hash broadcast integer index arrays into uint64 values.

    ``hash_grid(seed, rows[:, None], cols[None, :])`` gives one hash per
    (row, col) cell. Each index is folded in turn, so (1, 2) and (2, 1)
    hash differently.
    """
    with np.errstate(over="ignore"):
        h = np.full((), np.uint64(seed & 0xFFFFFFFFFFFFFFFF), dtype=np.uint64)
        for idx in indices:
            idx = np.asarray(idx)
            if idx.dtype != np.uint64:
                idx = idx.astype(np.int64).astype(np.uint64)
            h = _mix(h + _GOLDEN + idx * _GOLDEN)
        return _mix(h)


def unit_float(hashes: np.ndarray) -> np.ndarray:
    """Map uint64 hashes to floats in [0, 1)."""
    return (np.asarray(hashes, dtype=np.uint64) >> np.uint64(11)).astype(
        np.float64
    ) * (1.0 / (1 << 53))
