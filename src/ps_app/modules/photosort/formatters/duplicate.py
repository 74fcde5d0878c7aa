# src/ps_app/modules/photosort/formatters/duplicate.py
from __future__ import annotations

import re

from .base import Formatter, InvocationInfo


class DuplicateFormatter(Formatter):
    pattern = re.compile(r"^(dup|duplicate)$")
    usage = "{dup} {duplicate}"
    description = "Collision counter; empty until the target name is taken"

    def format(self, match: re.Match[str], info: InvocationInfo) -> str:
        if info.duplicate_counter is None:
            return ""
        return str(info.duplicate_counter)
