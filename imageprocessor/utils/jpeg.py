# imageprocessor/utils/jpeg.py
"""
Walk the marker segments of a JPEG stream up to the start of scan.
Used both to validate the header structure and to cut segments out of it.
"""
from __future__ import annotations

import struct
from typing import Iterator

SOI = b"\xFF\xD8"
APP1 = 0xE1
SOS = 0xDA
EOI = 0xD9
FILL = 0xFF
# TEM and RST0-RST7 carry no length field
_STANDALONE_MARKERS = {0x01, *range(0xD0, 0xD8)}


def iter_segments(data: bytes) -> Iterator[tuple[int, int, int]]:
    """Yield (marker, start, end) for every piece after SOI.

    The last piece is the SOS (or EOI) marker and runs to the end of `data`.
    Raises ValueError as soon as the chain is broken.
    """
    if not data.startswith(SOI):
        raise ValueError("Not a JPEG stream (missing SOI marker)")

    pos = len(SOI)
    size = len(data)
    while True:
        if pos + 2 > size:
            raise ValueError("Truncated JPEG stream")
        if data[pos] != 0xFF:
            raise ValueError(f"Expected a JPEG marker at offset {pos}")
        marker = data[pos + 1]

        if marker == FILL:
            yield FILL, pos, pos + 1
            pos += 1
            continue
        if marker in (SOS, EOI):
            yield marker, pos, size
            return
        if marker in _STANDALONE_MARKERS:
            yield marker, pos, pos + 2
            pos += 2
            continue

        if pos + 4 > size:
            raise ValueError("Truncated JPEG stream")
        (length,) = struct.unpack(">H", data[pos + 2:pos + 4])
        end = pos + 2 + length
        if length < 2 or end > size:
            raise ValueError(f"Invalid segment length {length} at offset {pos}")
        yield marker, pos, end
        pos = end


def check_structure(data: bytes) -> None:
    """Raise ValueError unless the marker chain reaches a start of scan."""
    for marker, _, _ in iter_segments(data):
        if marker == EOI:
            raise ValueError("JPEG stream ends before any scan")
