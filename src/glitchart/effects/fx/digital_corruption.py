"""Digital Corruption — seeded block replacement simulating damaged data.

The frame is cut into BLOCK_SIZE x BLOCK_SIZE blocks (partial blocks at
the right/bottom edges included). A block is corrupted when the hash of
its (row, col) index falls under ``intensity/100 * MAX_FRACTION``; its
RGB bytes are then replaced by a pattern hashed from the block hash and
each byte's position inside the block.
"""

import numpy as np

from glitchart.engine.determinism import derive_seed, hash_grid, unit_float

EFFECT_ID = "digitalCorruption"
EFFECT_NAME = "Corruption"
EFFECT_CATEGORY = "destruction"

BLOCK_SIZE = 8
MAX_FRACTION = 0.3

PARAMS: dict = {
    "intensity": {
        "type": "int",
        "min": 0,
        "max": 100,
        "default": 0,
        "label": "Corruption",
        "curve": "linear",
        "unit": "%",
        "description": f"Share of {BLOCK_SIZE}x{BLOCK_SIZE} blocks replaced by garbage",
    }
}


def block_hashes(height: int, width: int, seed: int = 0) -> np.ndarray:
    """One uint64 hash per block, shape (block_rows, block_cols)."""
    rows = -(-height // BLOCK_SIZE)
    cols = -(-width // BLOCK_SIZE)
    return hash_grid(
        derive_seed(seed, EFFECT_ID),
        np.arange(rows)[:, np.newaxis],
        np.arange(cols)[np.newaxis, :],
    )


def corrupted_blocks(height: int, width: int, intensity: int, seed: int = 0) -> np.ndarray:
    """Boolean (block_rows, block_cols) mask of blocks to corrupt."""
    intensity = max(0, min(100, int(intensity)))
    threshold = intensity / 100 * MAX_FRACTION
    return unit_float(block_hashes(height, width, seed)) < threshold


def apply(frame: np.ndarray, intensity: int, *, seed: int = 0) -> np.ndarray:
    """Replace selected blocks' RGB with a deterministic byte pattern."""
    intensity = max(0, min(100, int(intensity)))
    output = frame.copy()
    if intensity == 0:
        return output

    h, w = frame.shape[:2]
    hashes = block_hashes(h, w, seed)
    selected = unit_float(hashes) < intensity / 100 * MAX_FRACTION
    if not selected.any():
        return output

    ys = np.arange(h)
    xs = np.arange(w)
    by, bx = ys // BLOCK_SIZE, xs // BLOCK_SIZE
    pixel_mask = selected[by[:, np.newaxis], bx[np.newaxis, :]]

    # Byte position inside the block, so every block gets its own texture
    local = (ys % BLOCK_SIZE)[:, np.newaxis] * BLOCK_SIZE + (xs % BLOCK_SIZE)[np.newaxis, :]
    block_hash = hashes[by[:, np.newaxis], bx[np.newaxis, :]]
    channel = np.arange(3)[np.newaxis, np.newaxis, :]
    pattern = hash_grid(0, block_hash[:, :, np.newaxis], local[:, :, np.newaxis] * 3 + channel)
    garbage = (pattern & np.uint64(0xFF)).astype(np.uint8)

    rgb = output[:, :, :3]
    rgb[pixel_mask] = garbage[pixel_mask]
    return output
