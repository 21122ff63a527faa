"""JPEG re-encoding of backend image bytes."""

from __future__ import annotations

import io

from PIL import Image

from nano_banana.config import JPEG_QUALITY

_JPEG_MODES = frozenset({"RGB", "L", "CMYK"})


def to_jpeg(data: bytes, quality: int = JPEG_QUALITY) -> bytes:
    """Re-encode arbitrary image bytes as JPEG.

    Raises:
        PIL.UnidentifiedImageError: ``data`` is not a readable image.

    """
    with Image.open(io.BytesIO(data)) as img:
        # JPEG has no alpha channel or palette
        converted = img if img.mode in _JPEG_MODES else img.convert("RGB")
        buffer = io.BytesIO()
        converted.save(buffer, format="JPEG", quality=quality)
        return buffer.getvalue()
