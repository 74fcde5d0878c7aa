# src/ps_app/commands/sort.py
from __future__ import annotations

import time
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ps_app.commands.common import (
    prompt_existing_dir,
    prompt_mode,
    resolve_dry_run,
    resolve_log_levels,
)
from ps_app.core.config import get_settings
from ps_app.core.errors import ConfigError
from ps_app.core.logging import configure_logging
from ps_app.core.rich_progress import make_phase_progress
from ps_app.modules.photosort.formatters.registry import FormatterRegistry
from ps_app.modules.photosort.schemas import SortRequest, SortResponse
from ps_app.modules.photosort.service import SortService


class SortRunner:
    def __init__(self, req: SortRequest, show_progress: bool, console: Console) -> None:
        self.req = req
        self.show_progress = show_progress
        self.console = console
        self.svc = SortService()

    def _run(self, dry_run: bool) -> SortResponse:
        method = self.svc.plan if dry_run else self.svc.apply
        if not self.show_progress:
            return method(self.req)
        progress, reporter = make_phase_progress(self.console)
        with progress:
            return method(self.req, reporter=reporter)

    def _print_items(self, resp: SortResponse, title: str) -> None:
        if not resp.items:
            self.console.print("No files found.", style="dim")
            return
        table = Table(title=title, show_lines=False)
        table.add_column("Source", overflow="fold")
        table.add_column("Target", overflow="fold")
        table.add_column("Status")
        for item in resp.items:
            status = (
                "[green]ok[/green]"
                if item.ok
                else f"[yellow]SKIP[/yellow] ({escape(item.reason or 'unknown')})"
            )
            table.add_row(escape(item.src), escape(item.dst or ""), status)
        self.console.print(table)

    def _summary(self, resp: SortResponse, verb: str, elapsed: float) -> None:
        style = "bold green" if resp.failed_count == 0 else "bold yellow"
        msg = (
            f"{verb} {resp.processed_count} file(s), skipped {resp.failed_count} "
            f"out of {resp.files_count} in {elapsed:.2f}s"
        )
        if resp.bracket_groups:
            msg += f" ({resp.bracket_groups} bracket group(s))"
        self.console.print(msg, style=style)

    def run(self, dry_run: bool) -> None:
        if dry_run:
            t0 = time.perf_counter()
            planned = self._run(dry_run=True)
            self._print_items(planned, f"Plan ({self.req.action.value})")
            self._summary(planned, "Would sort", time.perf_counter() - t0)

            if planned.processed_count == 0 or not typer.confirm(
                "Apply these actions now?", default=False
            ):
                return

        t0 = time.perf_counter()
        applied = self._run(dry_run=False)
        failures = [i for i in applied.items if not i.ok]
        if failures:
            table = Table(title="Skipped files", show_lines=False)
            table.add_column("Source", overflow="fold")
            table.add_column("Reason", overflow="fold")
            for item in failures:
                table.add_row(escape(item.src), escape(item.reason or ""))
            self.console.print(table)
        self._summary(applied, "Sorted", time.perf_counter() - t0)


def register(app: typer.Typer) -> None:
    """Attach the sort commands to the given Typer app."""

    @app.command("sort", help="Rename and relocate photos/videos by date.")
    def sort_cmd(
        sources: list[Path] | None = typer.Argument(
            None, help="Source folder(s) to scan."
        ),
        target_dir: Path | None = typer.Option(
            None, "--target-dir", "-t", help="Target root folder (must exist)."
        ),
        recursive: bool = typer.Option(
            False, "--recursive", "-r", help="Scan subfolders."
        ),
        file_format: str | None = typer.Option(
            None, "--format", "-f", help="Target path template for dated files."
        ),
        nodate_file_format: str | None = typer.Option(
            None, "--nodate", help="Template for files without a date."
        ),
        unknown_file_format: str | None = typer.Option(
            None, "--unknown", help="Template for other files (skipped if unset)."
        ),
        bracketed_file_format: str | None = typer.Option(
            None,
            "--bracket",
            "--bracketed",
            help="Template for exposure-bracketed sequences.",
        ),
        date_format: str | None = typer.Option(
            None, "--date-format", "-D", help="Default strftime format for {date}."
        ),
        extensions: str | None = typer.Option(
            None, "--extensions", "-e", help="Comma separated photo extensions."
        ),
        video_extensions: str | None = typer.Option(
            None, "--video-extensions", help="Comma separated video extensions."
        ),
        analysis_mode: str = typer.Option(
            "exif_then_name",
            "--analysis-mode",
            "-a",
            help="only_exif, only_name, exif_then_name, name_then_exif.",
        ),
        action: str = typer.Option(
            "move",
            "--action",
            "-m",
            help="move, copy, hardlink, relative_symlink, absolute_symlink.",
        ),
        mkdir: bool = typer.Option(
            False, "--mkdir", help="Create missing target subfolders."
        ),
        threads: int | None = typer.Option(
            None, "--threads", min=1, help="Worker threads (sequential if omitted)."
        ),
        max_duplicates: int | None = typer.Option(
            None, "--max-duplicates", min=1, help="Give up after N name collisions."
        ),
        apply: bool = typer.Option(False, "--apply", help="Perform the actions."),
        plan: bool = typer.Option(False, "--plan", help="Plan only (default)."),
        progress: bool = typer.Option(False, "--progress", "-p", help="Progress bar."),
        verbose: bool = typer.Option(False, "--verbose", "-v"),
        debug: bool = typer.Option(False, "--debug", "-d"),
        quiet: bool = typer.Option(False, "--quiet", "-q", help="Errors only."),
        log_file: Path | None = typer.Option(
            None, "--log-file", "-l", help="Append the full log to this file."
        ),
    ):
        level, console_level = resolve_log_levels(verbose, debug, quiet, log_file)
        settings = get_settings()
        console = Console()
        configure_logging(
            level=level,
            json=settings.LOG_JSON,
            console_level=console_level,
            log_file=log_file,
            console=console if progress else None,
        )

        # Interactive prompts for any missing inputs
        if not sources:
            sources = [prompt_existing_dir(None, "source")]
        if target_dir is None:
            target_dir = prompt_existing_dir(None, "target")
        apply, plan = prompt_mode(apply, plan)
        dry_run = resolve_dry_run(apply, plan)

        fields = {
            "source_dirs": [str(s) for s in sources],
            "target_dir": str(target_dir),
            "recursive": recursive,
            "nodate_file_format": nodate_file_format,
            "unknown_file_format": unknown_file_format,
            "bracketed_file_format": bracketed_file_format,
            "analysis_mode": analysis_mode,
            "action": action,
            "dry_run": dry_run,
            "mkdir": mkdir,
            "threads": threads,
            "max_duplicates": max_duplicates,
        }
        # Unset options fall back to settings defaults in the request model
        for key, value in (
            ("file_format", file_format),
            ("date_format", date_format),
            ("extensions", extensions),
            ("video_extensions", video_extensions),
        ):
            if value is not None:
                fields[key] = value

        try:
            req = SortRequest(**fields)
        except ValidationError as err:
            raise typer.BadParameter(str(err)) from err

        try:
            SortRunner(req, progress, console).run(dry_run)
        except ConfigError as err:
            console.print(f"[bold red]Error:[/bold red] {err}")
            raise typer.Exit(code=1) from err

    @app.command("formats", help="List the commands usable in format templates.")
    def formats_cmd():
        table = Table(title="Format commands", show_lines=False)
        table.add_column("Command")
        table.add_column("Description", overflow="fold")
        for formatter in FormatterRegistry.default():
            table.add_row(formatter.usage, formatter.description)
        Console().print(table)
        typer.echo(
            "Prefix a command with 'label:' to emit the label only when the "
            "command renders non-empty text, e.g. {_:date} or {-:dup}."
        )
