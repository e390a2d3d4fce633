"""PixelBuffer — width/height-tagged RGBA sample storage.

Samples are row-major, top-to-bottom, 4 bytes per pixel (R, G, B, A).
Backed by an (H, W, 4) uint8 ndarray so effects can work on the frame
directly.
"""

import numpy as np

CHANNELS = 4


class InvalidBuffer(ValueError):
    """Raised when dimensions and sample length disagree."""


class PixelBuffer:
    """One decoded image: width, height and RGBA samples."""

    __slots__ = ("_frame",)

    def __init__(self, width: int, height: int, samples):
        if not _is_positive_int(width) or not _is_positive_int(height):
            raise InvalidBuffer(
                f"width and height must be positive integers, got {width!r}x{height!r}"
            )

        data = _as_uint8(samples)
        expected = width * height * CHANNELS
        if data.size != expected:
            raise InvalidBuffer(
                f"sample length {data.size} does not match "
                f"{width}x{height}x{CHANNELS} = {expected}"
            )
        self._frame = data.reshape(height, width, CHANNELS)

    @classmethod
    def from_array(cls, frame: np.ndarray) -> "PixelBuffer":
        """Wrap a copy of an (H, W, 4) uint8 frame."""
        if not isinstance(frame, np.ndarray) or frame.ndim != 3:
            raise InvalidBuffer("frame must be an (H, W, 4) ndarray")
        h, w, c = frame.shape
        if c != CHANNELS:
            raise InvalidBuffer(f"frame has {c} channels, expected {CHANNELS}")
        return cls(w, h, frame)

    @classmethod
    def solid(
        cls, width: int, height: int, rgba: tuple[int, int, int, int]
    ) -> "PixelBuffer":
        frame = np.empty((height, width, CHANNELS), dtype=np.uint8)
        frame[:, :] = rgba
        return cls(width, height, frame)

    @property
    def width(self) -> int:
        return self._frame.shape[1]

    @property
    def height(self) -> int:
        return self._frame.shape[0]

    @property
    def shape(self) -> tuple[int, int, int]:
        return self._frame.shape

    @property
    def array(self) -> np.ndarray:
        """The backing (H, W, 4) frame. Mutating it mutates the buffer."""
        return self._frame

    @property
    def samples(self) -> bytes:
        return self._frame.tobytes()

    def clone(self) -> "PixelBuffer":
        return PixelBuffer(self.width, self.height, self._frame)

    def get_pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        self._check_bounds(x, y)
        r, g, b, a = self._frame[y, x]
        return int(r), int(g), int(b), int(a)

    def set_pixel(self, x: int, y: int, rgba) -> None:
        self._check_bounds(x, y)
        if len(rgba) != CHANNELS:
            raise ValueError(f"pixel needs {CHANNELS} channels, got {len(rgba)}")
        self._frame[y, x] = [max(0, min(255, int(v))) for v in rgba]

    def _check_bounds(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(
                f"pixel ({x}, {y}) outside {self.width}x{self.height} buffer"
            )

    def __len__(self) -> int:
        return self._frame.size

    def __eq__(self, other) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self.shape == other.shape and np.array_equal(self._frame, other._frame)

    def __repr__(self) -> str:
        return f"PixelBuffer({self.width}x{self.height})"


def _is_positive_int(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        return False
    return value > 0


def _as_uint8(samples) -> np.ndarray:
    """Flatten samples into a fresh uint8 array (never a view of the input)."""
    if isinstance(samples, np.ndarray):
        if samples.dtype != np.uint8:
            raise InvalidBuffer(f"samples dtype {samples.dtype}, expected uint8")
        return samples.reshape(-1).copy()
    if isinstance(samples, (bytes, bytearray, memoryview)):
        return np.frombuffer(bytes(samples), dtype=np.uint8).copy()
    try:
        data = np.asarray(list(samples), dtype=np.int64)
    except (TypeError, ValueError) as e:
        raise InvalidBuffer(f"samples are not a byte sequence: {e}") from e
    if data.size and (data.min() < 0 or data.max() > 255):
        raise InvalidBuffer("sample values must be in [0, 255]")
    return data.astype(np.uint8)
