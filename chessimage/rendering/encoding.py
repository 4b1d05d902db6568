"""
Image Encoding – RGB buffer → JPEG / PNG bytes
==============================================

Rendered boards are ``PIL`` RGB images and are encoded with Pillow into an
in-memory buffer.  JPEG at quality 100 is the default output, matching
what the HTTP endpoint serves.
"""

from __future__ import annotations

import io
import logging
from typing import Any, BinaryIO, Dict

import numpy as np
from PIL import Image

log = logging.getLogger(__name__)


JPEG_QUALITY: int = 100

MEDIA_TYPES: Dict[str, str] = {
    "jpeg": "image/jpeg",
    "jpg": "image/jpeg",
    "png": "image/png",
}

# Pillow format names
_PIL_FORMATS: Dict[str, str] = {
    "jpeg": "JPEG",
    "jpg": "JPEG",
    "png": "PNG",
}


class EncodeError(RuntimeError):
    """Encoding the image or writing it to its destination failed."""


def image_to_array(image: Image.Image) -> np.ndarray:
    """Return the pre-encode pixel buffer as a ``(H, W, 3)`` uint8 array."""
    return np.asarray(image.convert("RGB"), dtype=np.uint8)


def _save_options(fmt: str, quality: int) -> Dict[str, Any]:
    if _PIL_FORMATS[fmt] == "JPEG":
        if not 1 <= quality <= 100:
            raise ValueError(f"JPEG quality must be in 1..100, got {quality}")
        return {"quality": quality}
    return {}


def encode_image(
    image: Image.Image,
    fmt: str = "jpeg",
    quality: int = JPEG_QUALITY,
) -> bytes:
    """Encode *image* to bytes.

    Parameters
    ----------
    image : PIL.Image.Image
        Rendered board.
    fmt : str
        ``"jpeg"`` (alias ``"jpg"``) or ``"png"``.
    quality : int
        JPEG quality 1–100; ignored for PNG.

    Raises
    ------
    ValueError
        Unknown format or out-of-range quality.
    EncodeError
        The codec rejected the image.
    """
    fmt = fmt.lower()
    if fmt not in MEDIA_TYPES:
        raise ValueError(f"Unsupported image format {fmt!r}")
    options = _save_options(fmt, quality)

    buffer = io.BytesIO()
    try:
        image.convert("RGB").save(buffer, format=_PIL_FORMATS[fmt], **options)
    except (OSError, ValueError) as exc:
        raise EncodeError(f"Could not encode image as {fmt}: {exc}") from exc
    return buffer.getvalue()


def write_bytes(data: bytes, stream: BinaryIO) -> int:
    """Write already encoded *data* to *stream*; return the byte count."""
    try:
        stream.write(data)
        stream.flush()
    except OSError as exc:
        raise EncodeError(f"Could not write image: {exc}") from exc
    log.debug("Wrote %d bytes", len(data))
    return len(data)


def write_image(
    image: Image.Image,
    stream: BinaryIO,
    fmt: str = "jpeg",
    quality: int = JPEG_QUALITY,
) -> int:
    """Encode *image* and write it to *stream*; return the byte count."""
    return write_bytes(encode_image(image, fmt=fmt, quality=quality), stream)
