# src/ps_app/modules/photosort/duplicates.py
from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable
from pathlib import Path

from ps_app.core.errors import DuplicateLimitExceeded

from .formatters.base import InvocationInfo

log = logging.getLogger(__name__)


class DuplicateResolver:
    """
    Finds the first free target path by bumping the duplicate counter.

    Counter None is tried first, then 1, 2, 3 ... Each attempt re-renders the
    template, so `{dup}` can sit anywhere in it. Another writer can still take
    the returned path before the file action runs; the action refuses to
    overwrite in that case.
    """

    def __init__(self, max_duplicates: int | None = None) -> None:
        self.max_duplicates = max_duplicates

    def resolve(
        self, info: InvocationInfo, render: Callable[[InvocationInfo], Path]
    ) -> tuple[Path, InvocationInfo]:
        attempt = dataclasses.replace(info, duplicate_counter=None)
        path = render(attempt)
        counter = 0
        while path.exists():
            log.debug("Target file already exists: %s", path)
            counter += 1
            if self.max_duplicates is not None and counter > self.max_duplicates:
                raise DuplicateLimitExceeded(
                    f"No free target name after {self.max_duplicates} duplicates: {path}"
                )
            attempt = dataclasses.replace(info, duplicate_counter=counter)
            path = render(attempt)

        if counter > 0:
            log.info("De-duplicated target file: %s", path)
        return path, attempt
