# src/ps_app/modules/photosort/formatters/base.py
from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path


class FileType(str, Enum):
    IMAGE = "image"
    VIDEO = "video"
    NONE = "none"


@dataclass(frozen=True)
class BracketInfo:
    """Position of one file inside a detected exposure-bracket sequence."""

    sequence_number: int
    first: Path
    last: Path
    sequence_length: int
    group_index: int


@dataclass(frozen=True)
class InvocationInfo:
    """Everything a formatter may read about the file being renamed."""

    date: datetime | None
    date_string: str
    date_default_format: str
    file_type: FileType
    cleaned_name: str
    original_name: str
    original_filename: str
    extension: str
    duplicate_counter: int | None = None
    bracket_info: BracketInfo | None = None


class Formatter(ABC):
    """
    One kind of `{command}` block.

    `pattern` is matched against the whole command text (label already removed);
    the first registered formatter whose pattern matches renders the block.
    """

    pattern: re.Pattern[str]
    # Shown by `ps formats`
    usage: str = ""
    description: str = ""

    def match(self, command: str) -> re.Match[str] | None:
        return self.pattern.fullmatch(command)

    @abstractmethod
    def format(self, match: re.Match[str], info: InvocationInfo) -> str:
        raise NotImplementedError
