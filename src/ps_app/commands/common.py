# src/ps_app/commands/common.py
from __future__ import annotations

import logging
from pathlib import Path

import typer

from ps_app.core.logging import level_from_flags


def resolve_dry_run(apply: bool, plan: bool) -> bool:
    """
    Standardize dry-run across commands.
    - default: dry-run (plan)
    - --apply => not dry-run
    - --plan  => force dry-run
    - both    => error
    """
    if apply and plan:
        raise typer.BadParameter("Use either --apply or --plan, not both.")
    return (not apply) or plan


def prompt_mode(apply: bool, plan: bool) -> tuple[bool, bool]:
    """Ask for plan/apply when neither flag was given."""
    if apply or plan:
        return apply, plan
    mode = typer.prompt("option (plan/apply)", default="plan").strip().lower()
    if mode not in {"plan", "apply"}:
        raise typer.BadParameter("option must be 'plan' or 'apply'")
    return mode == "apply", mode == "plan"


def prompt_existing_dir(maybe_root: Path | None, prompt_label: str = "root") -> Path:
    root = maybe_root or Path(typer.prompt(f"{prompt_label} (folder)")).expanduser()
    if not root.exists() or not root.is_dir():
        raise typer.BadParameter(
            f"{prompt_label} does not exist or is not a directory: {root}"
        )
    return root


def resolve_log_levels(
    verbose: bool, debug: bool, quiet: bool, log_file: Path | None
) -> tuple[int, int]:
    """
    (general level, console level). --quiet keeps only errors on the console;
    combined with --verbose/--debug it needs a --log-file to receive the rest.
    """
    level = level_from_flags(verbose, debug)
    if quiet and log_file is None:
        if verbose or debug:
            raise typer.BadParameter(
                "Cannot use --debug/--verbose with --quiet. Maybe you wanted to "
                "specify a --log-file to log the full output to, while suppressing "
                "the console output?"
            )
        level = logging.ERROR
    console_level = logging.ERROR if quiet else level
    return level, console_level
