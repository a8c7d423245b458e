# imageprocessor/cleaners/images.py
"""
Image metadata cleaning:
1) JPEG: cut the EXIF APP1 segment(s) out of the original byte stream. The
   entropy-coded scan data is copied verbatim, so pixels are untouched and
   there is no recompression loss.
2) PNG: re-save the decoded bitmap via Pillow, which only writes the chunks
   needed for the pixels. tEXt, zTXt, iTXt and eXIf chunks are dropped.
"""
from __future__ import annotations

import logging
from io import BytesIO

from imageprocessor.models import DecodedImage
from imageprocessor.utils.jpeg import APP1, SOI, iter_segments

logger = logging.getLogger(__name__)

_EXIF_HEADER = b"Exif\x00\x00"


def _is_exif_segment(data: bytes, start: int, marker: int) -> bool:
    return marker == APP1 and data[start + 4:start + 4 + len(_EXIF_HEADER)] == _EXIF_HEADER


def strip_exif_segments(data: bytes) -> bytes:
    """Return `data` with every APP1 Exif segment before the first scan removed."""
    out = bytearray(SOI)
    for marker, start, end in iter_segments(data):
        if _is_exif_segment(data, start, marker):
            logger.debug("Dropping %d-byte EXIF segment at offset %d", end - start, start)
            continue
        out += data[start:end]
    return bytes(out)


def clean_jpeg(decoded: DecodedImage) -> bytes:
    # Walk the stream even when Pillow saw no EXIF; without one the output is byte-identical
    return strip_exif_segments(decoded.data)


def clean_png(decoded: DecodedImage) -> bytes:
    if decoded.image is None:
        raise ValueError("PNG rewrite needs a decoded bitmap")
    buf = BytesIO()
    # Pillow ignores text chunks and EXIF unless they are passed to save()
    decoded.image.save(buf, format="PNG")
    return buf.getvalue()
