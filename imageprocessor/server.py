# imageprocessor/server.py
from __future__ import annotations

import logging
from urllib.parse import quote

from fastapi import Depends, FastAPI, File, Query, Request, UploadFile
from fastapi.responses import JSONResponse, Response
from starlette.concurrency import run_in_threadpool

from imageprocessor import settings
from imageprocessor.errors import (
    GeneralProcessingError,
    ImageProcessorError,
    ImageRewriteError,
    InvalidHistorySize,
    InvalidJpegFormat,
    InvalidPngFormat,
    InvalidStatusFilter,
    UnsupportedImageFormat,
    UnsupportedMediaType,
)
from imageprocessor.models import ImagePayload
from imageprocessor.schemas import ErrorResponse, HistoryItem
from imageprocessor.service import ImageProcessingService

logger = logging.getLogger(__name__)

# status code and error title per error class
ERROR_RESPONSES: dict[type[ImageProcessorError], tuple[int, str]] = {
    UnsupportedMediaType: (415, "Unsupported Media Type"),
    InvalidJpegFormat: (415, "Invalid JPEG Image Format"),
    InvalidPngFormat: (415, "Invalid PNG Image Format"),
    UnsupportedImageFormat: (415, "Unsupported Image Format"),
    ImageRewriteError: (500, "Image Rewriting Error"),
    GeneralProcessingError: (500, "Image processing error"),
    InvalidStatusFilter: (400, "Invalid status filter"),
    InvalidHistorySize: (400, "Invalid history size"),
}


def _json_error(status_code: int, error: str, message: str) -> JSONResponse:
    body = ErrorResponse(error=error, message=message, status=status_code)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def _content_disposition(filename: str) -> str:
    quoted = quote(filename)
    if quoted != filename:
        return f"attachment; filename*=utf-8''{quoted}"
    return f'attachment; filename="{filename}"'


def get_service(request: Request) -> ImageProcessingService:
    return request.app.state.service


async def handle_processor_error(request: Request, exc: ImageProcessorError) -> JSONResponse:
    status_code, error = ERROR_RESPONSES.get(type(exc), (500, "Image processing error"))
    if status_code >= 500:
        logger.error("Error processing the image", exc_info=exc)
    else:
        logger.warning("%s: %s", error, exc)
    return _json_error(status_code, error, str(exc))


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unexpected error", exc_info=exc)
    return _json_error(500, "Internal server error", "An unexpected error occurred.")


def configure_logging() -> None:
    logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def parse_history_size(size: str) -> int:
    try:
        return int(size)
    except ValueError:
        raise InvalidHistorySize(f"History size must be a whole number, got {size!r}") from None


def create_app(service: ImageProcessingService | None = None) -> FastAPI:
    app = FastAPI(title="Image Processing Service", version="1.0")
    app.state.service = service if service is not None else ImageProcessingService()
    app.add_exception_handler(ImageProcessorError, handle_processor_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    @app.on_event("startup")
    def bootstrap():
        configure_logging()

    @app.get("/health")
    def health():
        return {"status": "healthy"}

    @app.post("/v1/image/process")
    async def process_image(
        file: UploadFile = File(...),
        service: ImageProcessingService = Depends(get_service),
    ):
        filename = file.filename or ""
        logger.info("Received image upload request for file: %s", filename)
        data = await file.read()
        if len(data) > settings.MAX_FILE_SIZE:
            return _json_error(
                413, "File too large", f"The maximum allowed size is {settings.MAX_FILE_SIZE} bytes."
            )

        payload = ImagePayload(data=data, media_type=file.content_type, filename=filename)
        cleaned = await run_in_threadpool(service.process_image, payload)

        logger.info("Image processed successfully: %s", filename)
        return Response(
            content=cleaned,
            media_type=file.content_type,
            headers={"Content-Disposition": _content_disposition(filename)},
        )

    @app.get("/v1/image/history", response_model=list[HistoryItem])
    def get_history(
        status: str | None = Query(None, description="Only return attempts with this outcome name"),
        service: ImageProcessingService = Depends(get_service),
    ):
        records = service.query_history(status)
        logger.info("Retrieved %d image records from history.", len(records))
        return [HistoryItem.from_record(r) for r in records]

    @app.post("/v1/image/history/size")
    def set_history_size(
        size: str = Query(..., description="New history capacity, must be greater than zero"),
        service: ImageProcessingService = Depends(get_service),
    ):
        service.set_history_capacity(parse_history_size(size))
        return Response(status_code=200)

    @app.get("/v1/image/history/size", response_model=int)
    def get_history_size(service: ImageProcessingService = Depends(get_service)):
        return service.get_history_capacity()

    @app.get("/v1/allowed-types-extensions", response_model=dict[str, str])
    def allowed_types_extensions(service: ImageProcessingService = Depends(get_service)):
        return service.allowed_types()

    return app


app = create_app()
