# src/ps_app/modules/photosort/formatters/extension.py
from __future__ import annotations

import re

from ps_app.core.errors import FormatError

from .base import Formatter, InvocationInfo

LOWER = {"lower", "low", "lowercase", "l"}
UPPER = {"upper", "up", "uppercase", "u"}
COPY = {"copy", "normal", "standard", "pass", "p"}


class ExtensionFormatter(Formatter):
    pattern = re.compile(r"^(ext|extension)(\?(.+))?$")
    usage = "{ext} {ext?lower|upper|copy}"
    description = "File extension without the dot, optionally case-converted"

    def format(self, match: re.Match[str], info: InvocationInfo) -> str:
        option = match.group(3) or "copy"
        if option in LOWER:
            return info.extension.lower()
        if option in UPPER:
            return info.extension.upper()
        if option in COPY:
            return info.extension
        raise FormatError(
            f"Unknown argument {option!r} for the {{ext}} format command. "
            "Possible values are lower/upper/copy"
        )
