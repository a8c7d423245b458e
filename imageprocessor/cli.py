# imageprocessor/cli.py
r"""
CLI metadata scrubber (no web server needed).
Usage examples:

  imageprocessor-clean path/to/photo.jpg
  imageprocessor-clean path/to/folder   (processes all supported files inside, recursively)

Files go through the same verification as uploads: the extension decides the
claimed media type, so a .png that really holds JPEG data is refused.
Outputs are written next to the originals as *_clean.ext
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from imageprocessor import settings
from imageprocessor.errors import ImageProcessorError
from imageprocessor.history import HistoryStore
from imageprocessor.models import ImagePayload
from imageprocessor.service import ImageProcessingService
from imageprocessor.verification import file_extension

# extension -> content type, the inverse of ALLOWED_TYPES
MEDIA_TYPES = {ext: media_type for media_type, ext in settings.ALLOWED_TYPES.items()}


def claimed_media_type(path: Path) -> str | None:
    return MEDIA_TYPES.get(file_extension(path.name))


def clean_one(service: ImageProcessingService, path: Path) -> Path | None:
    media_type = claimed_media_type(path)
    if media_type is None:
        print(f"• Skipping unsupported file: {path.name}")
        return None

    dst = path.with_name(f"{path.stem}_clean{path.suffix}")
    payload = ImagePayload(data=path.read_bytes(), media_type=media_type, filename=path.name)
    try:
        cleaned = service.process_image(payload)
    except ImageProcessorError as e:
        print(f"❌ Failed to clean {path.name}: {e}")
        return None
    dst.write_bytes(cleaned)
    print(f"✅ Cleaned: {path.name} → {dst.name}")
    return dst


def iter_files(target: Path):
    if target.is_file():
        yield target
    else:
        for p in sorted(target.rglob("*")):
            if p.is_file() and claimed_media_type(p) is not None and not p.stem.endswith("_clean"):
                yield p


def print_summary(service: ImageProcessingService) -> None:
    records = service.query_history()
    counts: dict[str, int] = {}
    for record in records:
        counts[record.outcome.label] = counts.get(record.outcome.label, 0) + 1
    for label, count in counts.items():
        print(f"  {label}: {count}")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Verify images and strip their metadata (no server needed).")
    parser.add_argument("path", help="File or folder to clean")
    parser.add_argument("--history-size", type=int, default=1000, help="How many results to keep for the summary")
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.LOG_LEVEL, format="%(levelname)s - %(message)s")

    root = Path(args.path).expanduser().resolve()
    if not root.exists():
        print(f"❌ Not found: {root}")
        return 1

    try:
        service = ImageProcessingService(HistoryStore(args.history_size))
    except ImageProcessorError as e:
        print(f"❌ {e}")
        return 1

    any_done = False
    for f in iter_files(root):
        if clean_one(service, f):
            any_done = True

    if not any_done:
        supported = "/".join(settings.ALLOWED_TYPES.values())
        print(f"ℹ️ Nothing cleaned. Did you pass a supported file ({supported})?")
        return 1

    print("Summary:")
    print_summary(service)
    return 0


if __name__ == "__main__":
    sys.exit(main())
