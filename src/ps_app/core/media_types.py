# src/ps_app/core/media_types.py
from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

# Defaults for the sort command; stored without the leading dot.
IMAGE_EXTS: list[str] = [
    "jpg",
    "jpeg",
    "png",
    "tiff",
    "heif",
    "heic",
    "avif",
    "webp",
]

VIDEO_EXTS: list[str] = [
    "mp4",
    "mov",
    "avi",
]


def normalize_exts(exts: Iterable[str]) -> set[str]:
    """Lower-case and strip leading dots so '.JPG' and 'jpg' compare equal."""
    return {e.strip().lstrip(".").lower() for e in exts if e.strip()}


def extension_of(path: Path) -> str:
    """Extension without the dot, original case ('' when there is none)."""
    return path.suffix[1:] if path.suffix else ""
