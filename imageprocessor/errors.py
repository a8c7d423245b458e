# imageprocessor/errors.py
"""
Error taxonomy for the processing core.

Everything raised by the core derives from ImageProcessorError so the HTTP and
CLI adapters can catch one type and map the concrete class to a response.
"""


class ImageProcessorError(Exception):
    """Base class for every error the core raises on purpose."""


class UnsupportedMediaType(ImageProcessorError):
    """Claimed content-type is not allowed, or the filename extension disagrees with it."""


class ImageProcessingError(ImageProcessorError):
    """A processing attempt failed after the request was accepted."""


class InvalidJpegFormat(ImageProcessingError):
    pass


class InvalidPngFormat(ImageProcessingError):
    pass


class UnsupportedImageFormat(ImageProcessingError):
    """Signature matched but the structural decode failed."""


class ImageRewriteError(ImageProcessingError):
    pass


class GeneralProcessingError(ImageProcessingError):
    """Empty input, unreadable payload, or anything not covered above."""


class InvalidStatusFilter(ImageProcessorError):
    pass


class InvalidHistorySize(ImageProcessorError):
    pass
