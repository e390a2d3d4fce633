"""Decode/encode adapters between image files and PixelBuffer (Pillow).

The pipeline itself never sees a file format. These helpers are the
collaborators on either side: they turn an upload or capture into an
RGBA buffer (downscaled to keep the pipeline interactive) and turn the
result back into PNG bytes or a data URL for display and sharing.
"""

import base64
import binascii
import io
import logging
import os
import re

import numpy as np
from PIL import Image, UnidentifiedImageError

from glitchart.buffer import PixelBuffer

logger = logging.getLogger(__name__)

MAX_DIMENSION = 1200

_DATA_URL_RE = re.compile(r"^data:image/(png|jpeg|jpg|webp);base64,(.+)$", re.DOTALL)


class ImageDecodeError(ValueError):
    """Raised when an input cannot be decoded into a PixelBuffer."""


def fit_within(
    width: int, height: int, max_width: int = MAX_DIMENSION, max_height: int = MAX_DIMENSION
) -> tuple[int, int]:
    """Scale (width, height) down to fit the bounds, preserving aspect ratio."""
    if width <= max_width and height <= max_height:
        return width, height
    # Integer floor of dim * min(max_w/w, max_h/h); the bound side lands exactly
    if width * max_height >= height * max_width:
        return max_width, max(1, height * max_width // width)
    return max(1, width * max_height // height), max_height


def from_image(img: Image.Image, max_size: int | None = MAX_DIMENSION) -> PixelBuffer:
    """Convert a Pillow image to an RGBA PixelBuffer, downscaling if needed."""
    if img.mode != "RGBA":
        img = img.convert("RGBA")
    if max_size:
        size = fit_within(img.width, img.height, max_size, max_size)
        if size != img.size:
            logger.info(
                "Downscaling %dx%d image to %dx%d", img.width, img.height, *size
            )
            img = img.resize(size, Image.LANCZOS)
    return PixelBuffer.from_array(np.asarray(img, dtype=np.uint8))


def load_image(source, max_size: int | None = MAX_DIMENSION) -> PixelBuffer:
    """Decode a path, raw bytes or binary file object into a PixelBuffer."""
    if isinstance(source, (bytes, bytearray)):
        source = io.BytesIO(source)
    elif isinstance(source, (str, os.PathLike)) and not os.path.isfile(source):
        raise ImageDecodeError(f"File not found: {source}")

    try:
        with Image.open(source) as img:
            img.load()
            return from_image(img, max_size)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise ImageDecodeError(f"Could not decode image: {e}") from e


def to_image(buffer: PixelBuffer) -> Image.Image:
    return Image.fromarray(buffer.array)


def encode_png(buffer: PixelBuffer) -> bytes:
    """Encode a buffer as PNG bytes (lossless, alpha kept)."""
    out = io.BytesIO()
    to_image(buffer).save(out, format="PNG")
    return out.getvalue()


def save_image(buffer: PixelBuffer, path) -> None:
    """Save a buffer; the format follows the file extension.

    JPEG has no alpha, so alpha is dropped for .jpg/.jpeg targets.
    """
    img = to_image(buffer)
    ext = os.path.splitext(str(path))[1].lower()
    if ext in (".jpg", ".jpeg"):
        img = img.convert("RGB")
    img.save(path)
    logger.info("Saved %dx%d image to %s", buffer.width, buffer.height, path)


def to_data_url(buffer: PixelBuffer) -> str:
    """PNG data URL, ready for an <img> tag or an upload request body."""
    payload = base64.b64encode(encode_png(buffer)).decode("ascii")
    return f"data:image/png;base64,{payload}"


def from_data_url(text: str, max_size: int | None = MAX_DIMENSION) -> PixelBuffer:
    """Decode a ``data:image/(png|jpeg|jpg|webp);base64,...`` URL."""
    if not isinstance(text, str) or not text.startswith("data:image/"):
        raise ImageDecodeError("Invalid image format")
    match = _DATA_URL_RE.match(text)
    if match is None:
        raise ImageDecodeError("Invalid image data format")
    try:
        raw = base64.b64decode(match.group(2), validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImageDecodeError(f"Invalid base64 payload: {e}") from e
    return load_image(raw, max_size)
