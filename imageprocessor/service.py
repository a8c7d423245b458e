# imageprocessor/service.py
"""
Entry point used by the HTTP server and the CLI: verify an upload, strip its
metadata and record how it went.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone

from imageprocessor import settings
from imageprocessor.errors import (
    GeneralProcessingError,
    ImageProcessorError,
    ImageRewriteError,
    InvalidJpegFormat,
    InvalidPngFormat,
    UnsupportedImageFormat,
)
from imageprocessor.history import HistoryStore
from imageprocessor.models import HistoryRecord, ImagePayload, ProcessingOutcome
from imageprocessor.rewriter import rewrite
from imageprocessor.verification import verify

logger = logging.getLogger(__name__)

# Anything not listed here is recorded as FAILED_TO_PROCESS
_OUTCOME_BY_ERROR = {
    InvalidJpegFormat: ProcessingOutcome.INVALID_JPEG_FORMAT,
    InvalidPngFormat: ProcessingOutcome.INVALID_PNG_FORMAT,
    UnsupportedImageFormat: ProcessingOutcome.UNSUPPORTED_IMAGE_FORMAT,
    ImageRewriteError: ProcessingOutcome.IMAGE_REWRITE_ERROR,
}


def outcome_for(exc: BaseException) -> ProcessingOutcome:
    for cls in type(exc).__mro__:
        if cls in _OUTCOME_BY_ERROR:
            return _OUTCOME_BY_ERROR[cls]
    return ProcessingOutcome.FAILED_TO_PROCESS


class ImageProcessingService:
    def __init__(self, history: HistoryStore | None = None) -> None:
        self._history = history if history is not None else HistoryStore(settings.HISTORY_SIZE)

    def process_image(self, payload: ImagePayload) -> bytes:
        """Verify and clean one upload. Exactly one history record is written per call."""
        filename = payload.filename
        logger.debug("Processing file: %s", filename)
        outcome = ProcessingOutcome.FAILED_TO_PROCESS
        try:
            if not payload.data:
                logger.error("Received an empty file: %s", filename)
                raise GeneralProcessingError("File cannot be empty or null.")

            decoded = verify(payload.data, payload.media_type, filename)
            cleaned = rewrite(decoded)
            if not cleaned:
                raise GeneralProcessingError("Image rewrite produced no output.")

            outcome = ProcessingOutcome.PROCESSED_SUCCESSFULLY
            logger.debug("File processing completed: %s", filename)
            return cleaned
        except ImageProcessorError as exc:
            outcome = outcome_for(exc)
            raise
        except Exception as exc:
            logger.exception("Unexpected error while processing %s", filename)
            raise GeneralProcessingError(f"Failed to process the image: {exc}") from exc
        finally:
            self._history.append(HistoryRecord(filename, outcome, datetime.now(timezone.utc)))

    def query_history(self, status: str | None = None) -> list[HistoryRecord]:
        return self._history.query(status)

    def set_history_capacity(self, capacity: int) -> None:
        self._history.set_capacity(capacity)
        logger.info("Updated history size to: %s", capacity)

    def get_history_capacity(self) -> int:
        return self._history.get_capacity()

    @staticmethod
    def allowed_types() -> dict[str, str]:
        return dict(settings.ALLOWED_TYPES)
