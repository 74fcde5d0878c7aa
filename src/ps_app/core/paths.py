# src/ps_app/core/paths.py
from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

PARENT_DIR = ".."


def sanitize_component(component: str) -> str:
    """
    A rendered template component must stay a single path element.
    """
    return component.replace("/", "").replace("\\", "")


def join_components(root: Path, components: Iterable[str]) -> Path:
    """
    Append rendered components under `root`.
    Empty components and '..' are dropped so a template can never climb out of root.
    """
    target = root
    for raw in components:
        component = sanitize_component(raw)
        if not component or component == PARENT_DIR:
            continue
        target = target / component
    return target
