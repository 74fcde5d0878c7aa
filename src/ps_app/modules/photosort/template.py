# src/ps_app/modules/photosort/template.py
from __future__ import annotations

import re
from dataclasses import dataclass

COMMAND_BLOCK = re.compile(r"\{([^}]*)\}")
LABELED_COMMAND = re.compile(r"^(([^:]*):)?(.*)$", re.DOTALL)


@dataclass(frozen=True)
class Literal:
    text: str


@dataclass(frozen=True)
class Command:
    label: str
    command: str


Segment = Literal | Command


def split_command(inner: str) -> Command:
    """
    `label:command` -> Command(label, command); the label ends at the first ':'.
    Without a ':' the whole text is the command.
    """
    m = LABELED_COMMAND.match(inner)
    # The pattern accepts any string, so m is never None
    label = m.group(2) or ""
    return Command(label=label, command=m.group(3))


def parse_template(template: str) -> list[Segment]:
    """
    Split a template into literal text and `{...}` command blocks, in order.

    >>> parse_template("IMG_{date}.{ext}")
    [Literal(text='IMG_'), Command(label='', command='date'), Literal(text='.'), Command(label='', command='ext')]
    """
    if not template:
        return [Literal("")]

    segments: list[Segment] = []
    pos = 0
    for m in COMMAND_BLOCK.finditer(template):
        if m.start() > pos:
            segments.append(Literal(template[pos : m.start()]))
        segments.append(split_command(m.group(1)))
        pos = m.end()
    if pos < len(template):
        segments.append(Literal(template[pos:]))
    return segments


def split_path_template(template: str) -> list[list[Segment]]:
    """One parsed segment list per '/'-separated path component."""
    return [parse_template(component) for component in template.split("/")]
