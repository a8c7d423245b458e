# imageprocessor/rewriter.py
from __future__ import annotations

import logging

from imageprocessor.cleaners.images import clean_jpeg, clean_png
from imageprocessor.cleaners.pdfs import clean_pdf
from imageprocessor.errors import ImageRewriteError
from imageprocessor.models import DecodedImage, MediaType

logger = logging.getLogger(__name__)

_CLEANERS = {
    MediaType.JPEG: clean_jpeg,
    MediaType.PNG: clean_png,
    MediaType.PDF: clean_pdf,
}


def rewrite(decoded: DecodedImage) -> bytes:
    """Strip metadata from an already verified upload and return the new bytes."""
    cleaner = _CLEANERS[decoded.media_type]
    try:
        return cleaner(decoded)
    except Exception as exc:
        # every cleaner failure is reported as a rewrite error
        fmt = decoded.media_type.name
        logger.error("Failed to rewrite the %s image.", fmt, exc_info=True)
        raise ImageRewriteError(f"Failed to rewrite the {fmt} image: {exc}") from exc
