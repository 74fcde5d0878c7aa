# src/ps_app/modules/photosort/analysis/exif2date.py
from __future__ import annotations

from datetime import datetime
from pathlib import Path

from PIL import Image, UnidentifiedImageError
from pillow_heif import register_heif_opener

from ps_app.core.errors import AnalysisError

register_heif_opener()

EXIF_IFD = 0x8769
TAG_DATETIME_ORIGINAL = 36867
TAG_DATETIME = 306
EXIF_DATE_FORMAT = "%Y:%m:%d %H:%M:%S"

# Pillow signals oversized and malformed files outside OSError
READ_ERRORS = (
    OSError,
    UnidentifiedImageError,
    Image.DecompressionBombError,
    ValueError,
    SyntaxError,
)


def _as_text(value) -> str | None:
    if isinstance(value, bytes):
        value = value.decode(errors="ignore")
    if not value:
        return None
    return str(value).strip("\x00 ")


def exif_time(path: Path) -> datetime | None:
    """
    DateTimeOriginal from the Exif IFD, falling back to IFD0 DateTime.
    No tag at all -> None. Unreadable file or malformed value -> AnalysisError.
    """
    try:
        with Image.open(path) as im:
            exif = im.getexif()
        original = exif.get_ifd(EXIF_IFD).get(TAG_DATETIME_ORIGINAL)
    except READ_ERRORS as exc:
        raise AnalysisError(f"Cannot read EXIF from {path}: {exc}") from exc

    raw = _as_text(original)
    if raw is None:
        raw = _as_text(exif.get(TAG_DATETIME))
    if raw is None:
        return None
    try:
        return datetime.strptime(raw, EXIF_DATE_FORMAT)
    except ValueError as exc:
        raise AnalysisError(f"Invalid EXIF date {raw!r} in {path}") from exc
