# imageprocessor/utils/signature.py
"""
Lightweight magic-number checks to catch uploads whose content-type is spoofed.
This is only a first guess; the authoritative check is the full decode in
imageprocessor.verification.
"""
from __future__ import annotations

from imageprocessor.models import MediaType


def _starts(data: bytes, prefix: bytes) -> bool:
    return data.startswith(prefix)


def _is_jpeg(data: bytes) -> bool:
    return _starts(data, b"\xFF\xD8\xFF")


def _is_png(data: bytes) -> bool:
    return _starts(data, b"\x89PNG\r\n\x1a\n")


def _is_pdf(data: bytes) -> bool:
    return _starts(data, b"%PDF-")


def guess_format(data: bytes) -> MediaType | None:
    """Return the media type the leading bytes look like, or None if unrecognized."""
    if _is_jpeg(data): return MediaType.JPEG
    if _is_png(data):  return MediaType.PNG
    if _is_pdf(data):  return MediaType.PDF
    return None
