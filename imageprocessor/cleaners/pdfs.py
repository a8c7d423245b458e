# imageprocessor/cleaners/pdfs.py
"""
PDFs are accepted but not inspected: the bytes go back out exactly as they came in.
"""
from imageprocessor.models import DecodedImage


def clean_pdf(decoded: DecodedImage) -> bytes:
    return decoded.data
