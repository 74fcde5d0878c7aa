# src/ps_app/modules/photosort/formatters/registry.py
from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence

from ps_app.core.errors import FormatError, UnknownFormatCommand

from ..template import Command, Segment, parse_template
from .base import Formatter, InvocationInfo
from .bracketed import BracketFormatter
from .date import DateFormatter
from .duplicate import DuplicateFormatter
from .extension import ExtensionFormatter
from .file_type import FileTypeFormatter
from .name import NameFormatter, OriginalFileNameFormatter, OriginalNameFormatter

log = logging.getLogger(__name__)


class FormatterRegistry:
    """
    Ordered formatter list. First pattern match wins.

    Formatters are added during setup; `freeze()` is called before a run starts
    so worker threads only ever read the list.
    """

    def __init__(self, formatters: Sequence[Formatter] = ()) -> None:
        self._formatters: list[Formatter] = list(formatters)
        self._frozen = False

    @classmethod
    def default(cls) -> FormatterRegistry:
        return cls(
            [
                NameFormatter(),
                OriginalNameFormatter(),
                OriginalFileNameFormatter(),
                DuplicateFormatter(),
                DateFormatter(),
                FileTypeFormatter(),
                ExtensionFormatter(),
                BracketFormatter(),
            ]
        )

    def register(self, formatter: Formatter) -> None:
        if self._frozen:
            raise RuntimeError("Formatter registry is frozen; register before the run")
        self._formatters.append(formatter)

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __iter__(self) -> Iterator[Formatter]:
        return iter(self._formatters)

    def __len__(self) -> int:
        return len(self._formatters)

    def resolve(self, command: str, info: InvocationInfo) -> str:
        for formatter in self._formatters:
            match = formatter.match(command)
            if match is None:
                continue
            try:
                return formatter.format(match, info)
            except FormatError:
                raise
            except Exception as exc:
                raise FormatError(
                    f"Formatter {type(formatter).__name__} failed on {{{command}}}: {exc}"
                ) from exc
        raise UnknownFormatCommand(command)

    def render_segments(self, segments: Sequence[Segment], info: InvocationInfo) -> str:
        out: list[str] = []
        for segment in segments:
            if isinstance(segment, Command):
                text = self.resolve(segment.command, info)
                if text:
                    out.append(segment.label + text)
            else:
                out.append(segment.text)
        return "".join(out)

    def render(self, template: str, info: InvocationInfo) -> str:
        """Render one template string (no path splitting)."""
        segments = parse_template(template)
        log.debug("Parsed format string %r to %r", template, segments)
        return self.render_segments(segments, info)
