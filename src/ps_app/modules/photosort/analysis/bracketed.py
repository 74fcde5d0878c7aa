# src/ps_app/modules/photosort/analysis/bracketed.py
from __future__ import annotations

import struct
from dataclasses import dataclass
from pathlib import Path

from PIL import Image

from ps_app.core.errors import AnalysisError

from .exif2date import READ_ERRORS

EXIF_IFD = 0x8769
TAG_MAKER_NOTE = 0x927C

SONY_PREFIXES = (b"SONY DSC \0\0\0", b"SONY CAM \0\0\0")
SONY_IFD_OFFSET = 12
SONY_SEQUENCE_TAG = 0xB04A

# TIFF type id -> (struct code, size)
UINT_TYPES = {1: ("B", 1), 3: ("H", 2), 4: ("I", 4)}
IFD_ENTRY = struct.Struct("<HHI4s")


@dataclass(frozen=True)
class BracketExif:
    """Manufacturer bracket index; 1-based position in the exposure sequence."""

    index: int


def _read_uint(data: bytes, type_id: int, count: int, raw: bytes) -> int | None:
    layout = UINT_TYPES.get(type_id)
    if layout is None or count < 1:
        return None
    code, size = layout
    if size * count <= 4:
        payload = raw
    else:
        (offset,) = struct.unpack("<I", raw)
        payload = data[offset : offset + size]
        if len(payload) < size:
            raise AnalysisError("Maker note value offset out of range")
    (value,) = struct.unpack("<" + code, payload[:size])
    return value


def sony_bracket_info(maker_note: bytes) -> BracketExif | None:
    if not maker_note.startswith(SONY_PREFIXES):
        return None

    if len(maker_note) < SONY_IFD_OFFSET + 2:
        raise AnalysisError("Truncated Sony maker note")
    (count,) = struct.unpack_from("<H", maker_note, SONY_IFD_OFFSET)

    pos = SONY_IFD_OFFSET + 2
    for _ in range(count):
        if pos + IFD_ENTRY.size > len(maker_note):
            raise AnalysisError("Truncated Sony maker note IFD")
        tag, type_id, n, raw = IFD_ENTRY.unpack_from(maker_note, pos)
        pos += IFD_ENTRY.size
        if tag != SONY_SEQUENCE_TAG:
            continue
        index = _read_uint(maker_note, type_id, n, raw)
        if index is not None and index > 0:
            return BracketExif(index=index)
        return None
    return None


def bracket_info(path: Path) -> BracketExif | None:
    """Bracket index from the MakerNote of a photo; None when it is not bracketed."""
    try:
        with Image.open(path) as im:
            exif = im.getexif()
        maker_note = exif.get_ifd(EXIF_IFD).get(TAG_MAKER_NOTE)
    except READ_ERRORS as exc:
        raise AnalysisError(f"Error while reading EXIF from {path}: {exc}") from exc

    if not isinstance(maker_note, bytes):
        return None
    return sony_bracket_info(maker_note)
