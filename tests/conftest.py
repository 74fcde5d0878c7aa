"""Shared test fixtures."""

import logging
import struct
import zlib
from datetime import datetime
from pathlib import Path

import pytest
from PIL import Image

from ps_app.modules.photosort.formatters.base import FileType, InvocationInfo
from ps_app.modules.photosort.schemas import SortRequest


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """CLI tests reconfigure logging; put the root logger back afterwards."""
    root = logging.getLogger()
    level, handlers = root.level, list(root.handlers)
    yield
    root.setLevel(level)
    root.handlers[:] = handlers


@pytest.fixture
def source_dir(tmp_path: Path) -> Path:
    src = tmp_path / "source"
    src.mkdir()
    return src


@pytest.fixture
def target_dir(tmp_path: Path) -> Path:
    dst = tmp_path / "target"
    dst.mkdir()
    return dst


@pytest.fixture
def make_request(source_dir, target_dir):
    """Factory fixture for SortRequest with overrides."""

    def _make(**overrides) -> SortRequest:
        defaults = dict(
            source_dirs=[str(source_dir)],
            target_dir=str(target_dir),
            file_format="{type}_{date}_{name}{dup}.{ext}",
            date_format="%Y%m%d-%H%M%S",
            extensions=["jpg", "jpeg", "png"],
            video_extensions=["mp4", "mov"],
            analysis_mode="exif_then_name",
            action="copy",
            dry_run=False,
        )
        defaults.update(overrides)
        return SortRequest(**defaults)

    return _make


@pytest.fixture
def make_jpeg():
    """Write a small JPEG, optionally with an IFD0 DateTime tag."""

    def _make(path: Path, date: str | None = None) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        img = Image.new("RGB", (8, 8), "white")
        if date is None:
            img.save(path, "JPEG")
            return path
        exif = Image.Exif()
        exif[306] = date
        img.save(path, "JPEG", exif=exif.tobytes())
        return path

    return _make


@pytest.fixture
def make_huge_png():
    """Write a PNG whose header claims 20000x20000 pixels, past Pillow's bomb limit."""

    def _chunk(kind: bytes, data: bytes) -> bytes:
        body = kind + data
        return struct.pack(">I", len(data)) + body + struct.pack(">I", zlib.crc32(body))

    def _make(path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        header = struct.pack(">IIBBBBB", 20000, 20000, 8, 2, 0, 0, 0)
        path.write_bytes(
            b"\x89PNG\r\n\x1a\n"
            + _chunk(b"IHDR", header)
            + _chunk(b"IDAT", zlib.compress(b""))
            + _chunk(b"IEND", b"")
        )
        return path

    return _make


@pytest.fixture
def make_info():
    def _make(**overrides) -> InvocationInfo:
        date = overrides.pop("date", datetime(2023, 1, 1, 10, 0, 0))
        defaults = dict(
            date=date,
            date_string=date.strftime("%Y%m%d-%H%M%S") if date else "NODATE",
            date_default_format="%Y%m%d-%H%M%S",
            file_type=FileType.IMAGE,
            cleaned_name="holiday",
            original_name="IMG_20230101_holiday",
            original_filename="IMG_20230101_holiday.jpg",
            extension="jpg",
        )
        defaults.update(overrides)
        return InvocationInfo(**defaults)

    return _make
