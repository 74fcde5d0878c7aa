# src/ps_app/modules/photosort/service.py
from __future__ import annotations

import logging
import queue
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from ps_app.core.config import Settings, get_settings
from ps_app.core.errors import AnalysisError
from ps_app.core.progress import ProgressReporter

from .analysis.bracketed import bracket_info
from .analyzer import Analyzer
from .brackets import BracketGroup, BracketGrouper
from .formatters.base import BracketInfo
from .schemas import ActionKind, MoveItem, SortRequest, SortResponse

log = logging.getLogger(__name__)

Job = Callable[[Path, BracketInfo | None], MoveItem]


# ------------------------------------------------------------------------------
# Execution contexts
# ------------------------------------------------------------------------------


class ExecutionContext(ABC):
    """
    Runs per-file jobs and collects one completion item per submitted job.

    Items go through a queue in both modes so the drain logic is shared; the
    sequential context simply fills it inline.
    """

    def __init__(self, job: Job, action: ActionKind) -> None:
        self._job = job
        self._action = action
        self._done: queue.Queue[tuple[int, MoveItem | None]] = queue.Queue()
        self.submitted = 0
        self.completed = 0

    def _run(self, seq: int, path: Path, bracket: BracketInfo | None) -> None:
        item: MoveItem | None = None
        try:
            item = self._job(path, bracket)
        except Exception as exc:
            log.error("Error processing file %s: %s", path, exc)
            item = MoveItem(
                src=str(path),
                dst=None,
                action=self._action,
                ok=False,
                reason=str(exc),
            )
        finally:
            self._done.put((seq, item))

    def submit(self, path: Path, bracket: BracketInfo | None = None) -> None:
        seq = self.submitted
        self.submitted += 1
        self._dispatch(seq, path, bracket)

    @abstractmethod
    def _dispatch(self, seq: int, path: Path, bracket: BracketInfo | None) -> None:
        raise NotImplementedError

    def drain(
        self,
        timeout: float | None = None,
        reporter: ProgressReporter | None = None,
    ) -> list[MoveItem]:
        """Wait for exactly as many completions as jobs were submitted."""
        if reporter:
            reporter.start("drain", total=self.submitted, text="Waiting for workers…")
        received: list[tuple[int, MoveItem | None]] = []
        for _ in range(self.submitted):
            try:
                received.append(self._done.get(timeout=timeout))
            except queue.Empty:
                log.error("Timed out after %ss waiting for a worker result", timeout)
                break
            if reporter:
                reporter.update("drain", 1)
        if reporter:
            reporter.end("drain")

        self.completed = len(received)
        if self.completed != self.submitted:
            log.error(
                "Not all jobs completed: expected %d results, got %d",
                self.submitted,
                len(received),
            )
        received.sort(key=lambda pair: pair[0])
        return [item for _, item in received if item is not None]

    def close(self, wait: bool = True) -> None:
        pass


class SequentialContext(ExecutionContext):
    def _dispatch(self, seq: int, path: Path, bracket: BracketInfo | None) -> None:
        self._run(seq, path, bracket)


class PoolContext(ExecutionContext):
    def __init__(self, job: Job, action: ActionKind, threads: int) -> None:
        super().__init__(job, action)
        self.threads = max(1, threads)
        self._pool = ThreadPoolExecutor(
            max_workers=self.threads, thread_name_prefix="ps-worker"
        )

    def _dispatch(self, seq: int, path: Path, bracket: BracketInfo | None) -> None:
        self._pool.submit(self._run, seq, path, bracket)

    def close(self, wait: bool = True) -> None:
        self._pool.shutdown(wait=wait, cancel_futures=not wait)


# ------------------------------------------------------------------------------
# Service
# ------------------------------------------------------------------------------


class SortService:
    """Discover files, group brackets, dispatch each file to the analyzer."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    # ---- discovery ----------------------------------------------------------

    @classmethod
    def find_files(
        cls,
        source_dirs: Iterable[Path],
        recursive: bool,
        reporter: ProgressReporter | None = None,
    ) -> list[Path]:
        if reporter:
            reporter.start("scan", total=None, text="Discovering files…")
        files: list[Path] = []
        for source in source_dirs:
            log.info("Processing source folder: %s", source)
            cls._walk(Path(source), recursive, files, reporter)
        if reporter:
            reporter.end("scan")
        log.debug("Found %d files in source folders", len(files))
        return files

    @classmethod
    def _walk(
        cls,
        folder: Path,
        recursive: bool,
        out: list[Path],
        reporter: ProgressReporter | None,
    ) -> None:
        try:
            entries = sorted(folder.iterdir(), key=lambda p: p.name)
        except OSError as exc:
            log.error("Error processing folder %s: %s", folder, exc)
            return
        for entry in entries:
            if entry.is_dir():
                if recursive:
                    log.debug("Processing subfolder: %s", entry)
                    cls._walk(entry, recursive, out, reporter)
            elif entry.is_file():
                out.append(entry)
                if reporter:
                    reporter.update("scan", 1, text=entry.name)

    # ---- execution ----------------------------------------------------------

    def _context(self, analyzer: Analyzer, threads: int | None) -> ExecutionContext:
        action = analyzer.req.action
        if threads:
            return PoolContext(analyzer.run_file, action, threads)
        return SequentialContext(analyzer.run_file, action)

    @staticmethod
    def _bracket_index(analyzer: Analyzer, path: Path) -> int | None:
        if not analyzer.is_photo(path):
            return None
        try:
            found = bracket_info(path)
        except AnalysisError as exc:
            log.error("Error processing file %s: %s", path, exc)
            return None
        return found.index if found else None

    def run(
        self,
        req: SortRequest,
        reporter: ProgressReporter | None = None,
        analyzer: Analyzer | None = None,
    ) -> SortResponse:
        analyzer = analyzer or Analyzer(req, settings=self.settings)
        analyzer.freeze()

        files = self.find_files(analyzer.source_dirs, req.recursive, reporter)
        threads = req.threads if req.threads is not None else self.settings.THREADS

        grouper = BracketGrouper()
        context = self._context(analyzer, threads)

        def _dispatch_groups(groups: list[BracketGroup]) -> None:
            for group in groups:
                for member, info in group.members:
                    context.submit(member, info)

        if reporter:
            reporter.start("dispatch", total=len(files), text="Sorting files…")
        timed_out = False
        try:
            for path in files:
                if analyzer.bracket_mode:
                    index = self._bracket_index(analyzer, path)
                    _dispatch_groups(grouper.push(path, index))
                    if index is None:
                        context.submit(path)
                else:
                    context.submit(path)
                if reporter:
                    reporter.update("dispatch", 1, text=path.name)
            _dispatch_groups(grouper.finish())
            if reporter:
                reporter.end("dispatch")

            items = context.drain(self.settings.DRAIN_TIMEOUT, reporter)
            timed_out = context.completed < context.submitted
        finally:
            context.close(wait=not timed_out)

        failed = sum(1 for i in items if not i.ok)
        return SortResponse(
            dry_run=req.dry_run,
            files_count=len(files),
            processed_count=len(items) - failed,
            failed_count=failed,
            bracket_groups=grouper.groups_emitted,
            items=items,
        )

    def plan(
        self, req: SortRequest, reporter: ProgressReporter | None = None
    ) -> SortResponse:
        return self.run(req.model_copy(update={"dry_run": True}), reporter)

    def apply(
        self, req: SortRequest, reporter: ProgressReporter | None = None
    ) -> SortResponse:
        return self.run(req.model_copy(update={"dry_run": False}), reporter)
