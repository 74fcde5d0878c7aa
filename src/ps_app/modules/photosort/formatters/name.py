# src/ps_app/modules/photosort/formatters/name.py
from __future__ import annotations

import re

from .base import Formatter, InvocationInfo


class NameFormatter(Formatter):
    pattern = re.compile(r"^(name|n)$")
    usage = "{name} {n}"
    description = "File name with date and IMG/NODATE markers removed"

    def format(self, match: re.Match[str], info: InvocationInfo) -> str:
        return info.cleaned_name


class OriginalNameFormatter(Formatter):
    pattern = re.compile(r"^(original_name|on)$")
    usage = "{original_name} {on}"
    description = "Original file name without extension"

    def format(self, match: re.Match[str], info: InvocationInfo) -> str:
        return info.original_name


class OriginalFileNameFormatter(Formatter):
    pattern = re.compile(r"^(original_filename|ofn)$")
    usage = "{original_filename} {ofn}"
    description = "Original file name including extension"

    def format(self, match: re.Match[str], info: InvocationInfo) -> str:
        return info.original_filename
