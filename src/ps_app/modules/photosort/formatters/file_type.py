# src/ps_app/modules/photosort/formatters/file_type.py
from __future__ import annotations

import re

from .base import FileType, Formatter, InvocationInfo

DEFAULT_IMAGE = "IMG"
DEFAULT_VIDEO = "MOV"


class FileTypeFormatter(Formatter):
    pattern = re.compile(r"^(ftype|type|t)(\?(([^,\n]*)(,([^,\n]*))?))?$")
    usage = "{type} {type?<image>,<video>}"
    description = "IMG/MOV (or custom names); empty for unknown files"

    def format(self, match: re.Match[str], info: InvocationInfo) -> str:
        image_name = match.group(4)
        video_name = match.group(6)
        if info.file_type is FileType.IMAGE:
            return image_name if image_name is not None else DEFAULT_IMAGE
        if info.file_type is FileType.VIDEO:
            return video_name if video_name is not None else DEFAULT_VIDEO
        return ""
