# src/ps_app/modules/photosort/actions.py
from __future__ import annotations

import errno
import logging
import os
import shutil
from pathlib import Path

from ps_app.core.errors import FileActionError

from .schemas import ActionKind

log = logging.getLogger(__name__)


def _copy(source: Path, target: Path) -> None:
    log.debug("Copying %s -> %s", source, target)
    expected = source.stat().st_size
    shutil.copy2(source, target)
    if target.stat().st_size != expected:
        target.unlink(missing_ok=True)
        raise FileActionError(f"File copy failed (size mismatch): {source} -> {target}")


def _move(source: Path, target: Path) -> None:
    log.debug("Moving %s -> %s", source, target)
    try:
        source.rename(target)
    except OSError as e:
        if e.errno != errno.EXDEV:
            raise
        log.warning(
            "Renaming file failed, falling back to copy and delete: %s -> %s",
            source,
            target,
        )
        _copy(source, target)
        source.unlink()


def _hardlink(source: Path, target: Path) -> None:
    log.debug("Creating hardlink %s -> %s", source, target)
    try:
        os.link(source, target)
    except OSError as e:
        log.error(
            "Creating hardlink failed, falling back to copy: %s for file %s -> %s",
            e,
            source,
            target,
        )
        _copy(source, target)


def _relative_symlink(source: Path, target: Path) -> None:
    link = os.path.relpath(source.resolve(), target.parent.resolve())
    log.debug("Creating symlink %s -> %s", target, link)
    os.symlink(link, target)


def _absolute_symlink(source: Path, target: Path) -> None:
    log.debug("Creating symlink %s -> %s", target, source.resolve())
    os.symlink(source.resolve(), target)


_ACTIONS = {
    ActionKind.move: _move,
    ActionKind.copy: _copy,
    ActionKind.hardlink: _hardlink,
    ActionKind.relative_symlink: _relative_symlink,
    ActionKind.absolute_symlink: _absolute_symlink,
}


def execute(
    source: Path, target: Path, action: ActionKind, dry_run: bool, mkdir: bool
) -> None:
    """
    Apply `action` to put `source` at `target`.

    Never overwrites. A missing target folder is an error unless `mkdir`; in
    dry-run nothing is created and the planned steps are logged instead.
    """
    if target.exists() or target.is_symlink():
        raise FileActionError(f"Target file already exists: {target}")

    parent = target.parent
    if not parent.exists():
        if not mkdir:
            raise FileActionError(
                f"Target subfolder does not exist. Use --mkdir to create it: {parent}"
            )
        if dry_run:
            log.info("[Mkdir] %s", parent)
        else:
            try:
                parent.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise FileActionError(
                    f"Failed to create target subfolder: {parent} - {exc}"
                ) from exc

    if dry_run:
        log.info("[%s] %s -> %s", action.value, source, target)
        return

    try:
        _ACTIONS[action](source, target)
    except FileActionError:
        raise
    except OSError as exc:
        raise FileActionError(f"Failed to perform {action.value}: {exc}") from exc
