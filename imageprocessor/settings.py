# imageprocessor/settings.py
import os

MAX_FILE_SIZE = int(os.getenv("MAX_FILE_SIZE", 10 * 1024 * 1024))
HISTORY_SIZE = int(os.getenv("IMAGE_HISTORY_SIZE", 10))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Accepted content types and the one extension each must be uploaded with
ALLOWED_TYPES = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "application/pdf": "pdf",
}
