# src/ps_app/modules/photosort/brackets.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .formatters.base import BracketInfo

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class BracketGroup:
    """A finished bracket sequence: one (path, info) per member, in input order."""

    group_index: int
    members: list[tuple[Path, BracketInfo]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.members)


class BracketGrouper:
    """
    Groups consecutive bracketed photos in traversal order.

    A sequence continues while files share a parent directory and their bracket
    indices increase by exactly one. Anything else (a gap, a restart at 1, a
    different folder, a non-bracketed file, end of input) closes it.
    """

    def __init__(self, start_index: int = 0) -> None:
        self._pending: list[tuple[Path, int]] = []
        self._next_group = start_index

    @property
    def pending(self) -> int:
        return len(self._pending)

    @property
    def groups_emitted(self) -> int:
        return self._next_group

    def push(self, path: Path, index: int | None) -> list[BracketGroup]:
        """
        Feed one file. `index` is its bracket index, or None when the file is not
        bracketed (or detection failed). Returns groups closed by this file.
        """
        if index is None:
            if self._pending:
                log.debug("End of bracket sequence: non-bracketed file %s", path)
            return self._flush()

        closed: list[BracketGroup] = []
        if self._pending:
            last_path, last_index = self._pending[-1]
            if last_path.parent != path.parent:
                log.debug("End of bracket sequence: parent path mismatch")
                closed = self._flush()
            elif last_index + 1 != index:
                log.debug(
                    "End of bracket sequence: index mismatch %d -> %d", last_index, index
                )
                closed = self._flush()
        self._pending.append((path, index))
        return closed

    def finish(self) -> list[BracketGroup]:
        if self._pending:
            log.debug("End of bracket sequence: end of input")
        return self._flush()

    def _flush(self) -> list[BracketGroup]:
        if not self._pending:
            return []
        group_index = self._next_group
        self._next_group += 1

        first = self._pending[0][0]
        last = self._pending[-1][0]
        length = len(self._pending)
        members = [
            (
                path,
                BracketInfo(
                    sequence_number=index,
                    first=first,
                    last=last,
                    sequence_length=length,
                    group_index=group_index,
                ),
            )
            for path, index in self._pending
        ]
        self._pending = []
        return [BracketGroup(group_index=group_index, members=members)]
