# src/ps_app/modules/photosort/analysis/filename2date.py
from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import datetime

log = logging.getLogger(__name__)


class NameTransformer(ABC):
    """Extracts a date from a file name and returns the name with the date text removed."""

    pattern: re.Pattern[str]

    @abstractmethod
    def transform(self, match: re.Match[str]) -> datetime | None:
        """Date for one regex match; raise ValueError for an impossible date."""
        raise NotImplementedError

    def try_transform(self, name: str) -> tuple[datetime, str] | None:
        for m in self.pattern.finditer(name):
            try:
                dt = self.transform(m)
            except ValueError as exc:
                log.error("Skipping date candidate %r in %r: %s", m.group(0), name, exc)
                continue
            if dt is not None:
                return dt, name.replace(m.group(0), "")
        return None


class NaiveFileNameParser(NameTransformer):
    """
    Dates like 20230101, 2023-01-01, 2023_01_01 with an optional time part
    (20230101_101530, 2023-01-01 10-15-30). Missing time means midnight.
    """

    pattern = re.compile(
        r"(\d{4})[-_]?(\d{2})[-_]?(\d{2})(\D+(\d{2})[-_:]?(\d{2})[-_:]?(\d{2}))?[-_]?"
    )

    def transform(self, match: re.Match[str]) -> datetime | None:
        year, month, day = (int(match.group(i)) for i in (1, 2, 3))
        if match.group(4) is None:
            return datetime(year, month, day)
        hour, minute, second = (int(match.group(i)) for i in (5, 6, 7))
        return datetime(year, month, day, hour, minute, second)


def name_time(
    name: str, transformers: Sequence[NameTransformer]
) -> tuple[datetime, str] | None:
    """First transformer (in order) that finds a date wins."""
    for transformer in transformers:
        try:
            result = transformer.try_transform(name)
        except Exception as exc:
            log.error(
                "Name transformer %s failed on %r: %s",
                type(transformer).__name__,
                name,
                exc,
            )
            continue
        if result is not None:
            return result
    return None
