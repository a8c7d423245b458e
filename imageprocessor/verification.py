# imageprocessor/verification.py
"""
Upload verification in two stages:
  1) signature guess from the leading bytes (cheap, see utils.signature)
  2) full structural decode with Pillow (authoritative)
The claimed content-type and the filename extension are checked first, so a
mislabelled upload is refused before any byte is looked at.
"""
from __future__ import annotations

import logging
from io import BytesIO

from PIL import Image, UnidentifiedImageError

from imageprocessor.errors import (
    GeneralProcessingError,
    InvalidJpegFormat,
    InvalidPngFormat,
    UnsupportedImageFormat,
    UnsupportedMediaType,
)
from imageprocessor.models import DecodedImage, MediaType
from imageprocessor.utils import jpeg
from imageprocessor.utils.signature import guess_format

logger = logging.getLogger(__name__)

# Pillow reports multi-picture JPEGs (most phone cameras) as MPO
_DECODED_FORMATS = {
    MediaType.JPEG: {"JPEG", "MPO"},
    MediaType.PNG: {"PNG"},
}

_MISMATCH_ERRORS = {
    MediaType.JPEG: InvalidJpegFormat,
    MediaType.PNG: InvalidPngFormat,
}


def file_extension(filename: str) -> str:
    return filename.rsplit(".", 1)[-1]


def check_extension(filename: str, media_type: MediaType) -> None:
    ext = file_extension(filename)
    if ext != media_type.extension:
        logger.warning("Extension %r of %s does not match media type %s", ext, filename, media_type.value)
        raise UnsupportedMediaType("File extension does not match media type.")


def check_signature(data: bytes, media_type: MediaType) -> None:
    guessed = guess_format(data)
    if guessed is not media_type:
        logger.warning("Signature looks like %s but %s was claimed", guessed and guessed.value, media_type.value)
        name = media_type.name
        raise _MISMATCH_ERRORS[media_type](f"The image does not seem to be a valid {name}.")


def decode_image(data: bytes, media_type: MediaType) -> Image.Image:
    """Fully decode `data` into a bitmap, or raise UnsupportedImageFormat."""
    try:
        if media_type is MediaType.JPEG:
            # Pillow skips over a broken marker chain, so walk it ourselves
            jpeg.check_structure(data)
        image = Image.open(BytesIO(data))
        image.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError) as exc:
        logger.warning("Failed to decode %s image: %s", media_type.name, exc)
        raise UnsupportedImageFormat("Unsupported or corrupted image format.") from exc

    if image.format not in _DECODED_FORMATS[media_type]:
        logger.warning("Decoded as %s, expected %s", image.format, media_type.name)
        raise UnsupportedImageFormat("Unsupported or corrupted image format.")
    return image


def verify(data: bytes, claimed_type: str | MediaType | None, filename: str) -> DecodedImage:
    if not data:
        raise GeneralProcessingError("File cannot be empty or null.")

    media_type = claimed_type if isinstance(claimed_type, MediaType) else MediaType.parse(claimed_type)
    check_extension(filename, media_type)

    if media_type is MediaType.PDF:
        # PDFs are passed through as-is, nothing to decode
        return DecodedImage(data=data, media_type=media_type)

    check_signature(data, media_type)
    image = decode_image(data, media_type)
    return DecodedImage(data=data, media_type=media_type, image=image)
