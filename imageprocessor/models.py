# imageprocessor/models.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from PIL import Image

from imageprocessor.errors import InvalidStatusFilter, UnsupportedMediaType


class MediaType(Enum):
    JPEG = "image/jpeg"
    PNG = "image/png"
    PDF = "application/pdf"

    @property
    def extension(self) -> str:
        return _EXTENSIONS[self]

    @classmethod
    def parse(cls, content_type: str | None) -> MediaType:
        """Map a raw content-type string onto a supported media type."""
        try:
            return cls(content_type)
        except ValueError:
            raise UnsupportedMediaType(f"Unsupported media type: {content_type}") from None


_EXTENSIONS = {
    MediaType.JPEG: "jpg",
    MediaType.PNG: "png",
    MediaType.PDF: "pdf",
}


class ProcessingOutcome(Enum):
    PROCESSED_SUCCESSFULLY = "Processed Successfully"
    FAILED_TO_PROCESS = "Failed to Process"
    INVALID_JPEG_FORMAT = "Invalid JPEG Format"
    INVALID_PNG_FORMAT = "Invalid PNG Format"
    UNSUPPORTED_IMAGE_FORMAT = "Unsupported Image Format"
    IMAGE_REWRITE_ERROR = "Error Rewriting Image"

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def parse(cls, name: str) -> ProcessingOutcome:
        """Look up an outcome by member name, ignoring case."""
        try:
            return cls[name.strip().upper()]
        except (KeyError, AttributeError):
            raise InvalidStatusFilter(f"Invalid status filter provided: {name}") from None


@dataclass(frozen=True)
class ImagePayload:
    data: bytes
    media_type: str | None
    filename: str


@dataclass(frozen=True)
class DecodedImage:
    """Verified upload. `image` is None for formats that are passed through undecoded."""

    data: bytes
    media_type: MediaType
    image: Image.Image | None = None


@dataclass(frozen=True)
class HistoryRecord:
    filename: str
    outcome: ProcessingOutcome
    timestamp: datetime
