# tests/conftest.py
"""
Images are generated in memory with Pillow; no fixture files on disk.
"""
from io import BytesIO

import pytest
from PIL import Image
from PIL.PngImagePlugin import PngInfo

from imageprocessor.history import HistoryStore
from imageprocessor.service import ImageProcessingService

ARTIST_TAG = 0x013B
MAKE_TAG = 0x010F

PDF_BYTES = (
    b"%PDF-1.4\n"
    b"1 0 obj << /Type /Catalog /Pages 2 0 R >> endobj\n"
    b"2 0 obj << /Type /Pages /Kids [] /Count 0 >> endobj\n"
    b"trailer << /Root 1 0 R >>\n"
    b"%%EOF\n"
)


def _gradient(size=(32, 32)) -> Image.Image:
    w, h = size
    img = Image.new("RGB", size)
    img.putdata([(x * 255 // w, y * 255 // h, 120) for y in range(h) for x in range(w)])
    return img


@pytest.fixture
def make_jpeg():
    def _make(exif: bool = False, size=(32, 32)) -> bytes:
        buf = BytesIO()
        kwargs = {}
        if exif:
            tags = Image.Exif()
            tags[ARTIST_TAG] = "Alice"
            tags[MAKE_TAG] = "ACME Cameras"
            kwargs["exif"] = tags.tobytes()
        _gradient(size).save(buf, format="JPEG", quality=90, **kwargs)
        return buf.getvalue()

    return _make


@pytest.fixture
def make_png():
    def _make(text: dict | None = None, size=(32, 32)) -> bytes:
        buf = BytesIO()
        kwargs = {}
        if text:
            info = PngInfo()
            for key, value in text.items():
                info.add_text(key, value)
            kwargs["pnginfo"] = info
        _gradient(size).save(buf, format="PNG", **kwargs)
        return buf.getvalue()

    return _make


@pytest.fixture
def pdf_bytes() -> bytes:
    return PDF_BYTES


@pytest.fixture
def history() -> HistoryStore:
    return HistoryStore(10)


@pytest.fixture
def service(history) -> ImageProcessingService:
    return ImageProcessingService(history)
