# src/ps_app/modules/photosort/formatters/date.py
from __future__ import annotations

import re

from .base import Formatter, InvocationInfo

NO_DATE = "NODATE"


class DateFormatter(Formatter):
    pattern = re.compile(r"^(date|d)(\?(.+))?$")
    usage = "{date} {d} {date?<strftime>}"
    description = "Derived date; NODATE when none was found"

    def format(self, match: re.Match[str], info: InvocationInfo) -> str:
        if info.date is None:
            return NO_DATE
        fmt = match.group(3)
        if fmt is None:
            return info.date_string
        return info.date.strftime(fmt)
