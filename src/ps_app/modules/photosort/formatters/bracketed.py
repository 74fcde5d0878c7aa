# src/ps_app/modules/photosort/formatters/bracketed.py
from __future__ import annotations

import logging
import re

from ps_app.core.errors import FormatError

from .base import BracketInfo, Formatter, InvocationInfo

log = logging.getLogger(__name__)

POSSIBLE = "seq/name/name_first/name_last/len/length/group"


def _sequence(b: BracketInfo) -> str:
    return str(b.sequence_number)


def _first(b: BracketInfo) -> str:
    return b.first.stem


def _last(b: BracketInfo) -> str:
    return b.last.stem


def _length(b: BracketInfo) -> str:
    return str(b.sequence_length)


def _group(b: BracketInfo) -> str:
    return str(b.group_index)


FIELDS = {
    "seq": _sequence,
    "index": _sequence,
    "name": _first,
    "name_first": _first,
    "first": _first,
    "name_last": _last,
    "last": _last,
    "len": _length,
    "length": _length,
    "group": _group,
    "grp": _group,
    "num": _group,
}


class BracketFormatter(Formatter):
    pattern = re.compile(r"^(bracket|bracketed|b)(\?(.*))?$")
    usage = "{bracket?seq|first|last|len|num}"
    description = "Field of the exposure-bracket sequence the photo belongs to"

    def format(self, match: re.Match[str], info: InvocationInfo) -> str:
        argument = match.group(3)
        if argument is None:
            raise FormatError(
                "No argument for the {bracket} format command was specified. "
                f"Possible values are {POSSIBLE}"
            )
        field = FIELDS.get(argument)
        if field is None:
            raise FormatError(
                f"Unknown argument {argument!r} for the {{bracket}} format command. "
                f"Possible values are {POSSIBLE}"
            )
        if info.bracket_info is None:
            log.warning(
                "Tried to format a non bracketed file using the {bracket} format command."
            )
            return ""
        return field(info.bracket_info)
