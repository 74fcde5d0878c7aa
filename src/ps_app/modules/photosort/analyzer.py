# src/ps_app/modules/photosort/analyzer.py
from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

from ps_app.core.config import Settings, get_settings
from ps_app.core.errors import AnalysisError, ConfigError
from ps_app.core.media_types import extension_of, normalize_exts
from ps_app.core.paths import join_components

from . import actions
from .analysis.exif2date import exif_time
from .analysis.filename2date import NaiveFileNameParser, NameTransformer, name_time
from .analysis.name import clean_image_name
from .analysis.video2date import video_time
from .duplicates import DuplicateResolver
from .formatters.base import BracketInfo, FileType, Formatter, InvocationInfo
from .formatters.date import NO_DATE
from .formatters.registry import FormatterRegistry
from .schemas import AnalysisType, MoveItem, SortRequest
from .template import split_path_template

log = logging.getLogger(__name__)

UNSUPPORTED = "unsupported_extension"


class Analyzer:
    """
    Per-file pipeline: date analysis, template selection, rendering, duplicate
    resolution and the file action.

    Built once per run on the main thread. After `freeze()` it is only read, so
    one instance is shared by all worker threads.
    """

    def __init__(
        self,
        req: SortRequest,
        settings: Settings | None = None,
        registry: FormatterRegistry | None = None,
        transformers: Sequence[NameTransformer] | None = None,
    ) -> None:
        self.req = req
        self.settings = settings or get_settings()
        self.target_dir = Path(req.target_dir).expanduser()
        self.source_dirs = [Path(s).expanduser() for s in req.source_dirs]

        if not self.target_dir.is_dir():
            raise ConfigError(f"Target directory does not exist: {self.target_dir}")
        for source in self.source_dirs:
            if not source.is_dir():
                raise ConfigError(f"Source directory does not exist: {source}")

        self.image_exts = normalize_exts(req.extensions)
        self.video_exts = normalize_exts(req.video_extensions)
        self.file_format = req.file_format
        self.nodate_file_format = req.nodate_file_format or req.file_format
        self.unknown_file_format = req.unknown_file_format
        self.bracketed_file_format = req.bracketed_file_format

        self.registry = registry or FormatterRegistry.default()
        self.transformers: list[NameTransformer] = list(
            transformers if transformers is not None else [NaiveFileNameParser()]
        )
        self.resolver = DuplicateResolver(req.max_duplicates)

    # ---- setup ------------------------------------------------------------------

    def add_transformer(self, transformer: NameTransformer) -> None:
        if self.registry.frozen:
            raise RuntimeError("Analyzer is frozen; add transformers before the run")
        self.transformers.append(transformer)

    def add_formatter(self, formatter: Formatter) -> None:
        self.registry.register(formatter)

    def freeze(self) -> None:
        self.registry.freeze()

    @property
    def bracket_mode(self) -> bool:
        return self.bracketed_file_format is not None

    # ---- classification ---------------------------------------------------------

    def is_photo(self, path: Path) -> bool:
        return extension_of(path).lower() in self.image_exts

    def is_video(self, path: Path) -> bool:
        return extension_of(path).lower() in self.video_exts

    def file_type(self, path: Path) -> FileType:
        photo, video = self.is_photo(path), self.is_video(path)
        if photo and video:
            raise AnalysisError(
                f"Extension of {path.name} is listed as both photo and video. "
                "Do not include the same extension in both settings"
            )
        if photo:
            return FileType.IMAGE
        if video:
            return FileType.VIDEO
        return FileType.NONE

    # ---- date analysis ----------------------------------------------------------

    def analyze_name(self, name: str) -> tuple[datetime | None, str]:
        result = name_time(name, self.transformers)
        if result is None:
            return None, name
        return result

    def analyze_exif(self, path: Path) -> datetime | None:
        ftype = self.file_type(path)
        if ftype is FileType.IMAGE:
            return exif_time(path)
        if ftype is FileType.VIDEO:
            return video_time(path, timeout=self.settings.FFPROBE_TIMEOUT)
        raise AnalysisError(f"File extension is not valid: {path}")

    def analyze(self, path: Path) -> tuple[datetime | None, str]:
        """
        (date or None, file name with the date text removed).

        `only_exif` fails the file on an unreadable EXIF block. In `name_then_exif`
        the EXIF read is only a fallback for an undated name, so its failure is
        logged and the file is sorted as undated instead of failing.
        """
        name = path.name
        mode = self.req.analysis_mode

        if mode is AnalysisType.only_name:
            return self.analyze_name(name)

        if mode is AnalysisType.only_exif:
            try:
                date = self.analyze_exif(path)
            except AnalysisError as exc:
                raise AnalysisError(f"Error analyzing Exif data: {exc}") from exc
            _, cleaned = self.analyze_name(name)
            return date, cleaned

        if mode is AnalysisType.exif_then_name:
            try:
                date = self.analyze_exif(path)
            except AnalysisError as exc:
                log.warning("Error analyzing Exif data: %s for %s", exc, path)
                log.info("Falling back to name analysis")
                date = None
            name_date, cleaned = self.analyze_name(name)
            if date is not None:
                return date, cleaned
            return name_date, cleaned

        # name_then_exif
        name_date, cleaned = self.analyze_name(name)
        if name_date is not None:
            return name_date, cleaned
        try:
            return self.analyze_exif(path), cleaned
        except AnalysisError as exc:
            log.warning("Error analyzing Exif data: %s for %s", exc, path)
            return None, cleaned

    # ---- rendering --------------------------------------------------------------

    def select_template(
        self, has_date: bool, unknown: bool, bracket: BracketInfo | None
    ) -> str:
        if bracket is not None and self.bracketed_file_format is not None:
            return self.bracketed_file_format
        if unknown:
            if self.unknown_file_format is None:
                raise ConfigError("No unknown format string specified")
            return self.unknown_file_format
        if has_date:
            return self.file_format
        return self.nodate_file_format

    def render_path(self, template: str, info: InvocationInfo) -> Path:
        components = [
            self.registry.render_segments(segments, info)
            for segments in split_path_template(template)
        ]
        return join_components(self.target_dir, components)

    def invocation_info(
        self, path: Path, bracket: BracketInfo | None = None
    ) -> tuple[InvocationInfo, bool] | None:
        """
        Build the formatter context for one file, or None when the file is not
        sortable. The flag tells whether the file took the unknown-file route.
        """
        ftype = self.file_type(path)
        unknown = ftype is FileType.NONE
        if unknown and self.unknown_file_format is None:
            return None

        if unknown:
            date, cleaned = None, path.stem
        else:
            date, analyzed = self.analyze(path)
            cleaned = clean_image_name(analyzed)
            log.debug("Analysis results: Date: %s, Cleaned name: %r", date, cleaned)
            if date is None:
                log.warning("No date was derived for file %s.", path)

        date_format = self.req.date_format
        info = InvocationInfo(
            date=date,
            date_string=date.strftime(date_format) if date is not None else NO_DATE,
            date_default_format=date_format,
            file_type=ftype,
            cleaned_name=cleaned,
            original_name=path.stem,
            original_filename=path.name,
            extension=extension_of(path),
            bracket_info=bracket,
        )
        return info, unknown

    def run_file(self, path: Path, bracket: BracketInfo | None = None) -> MoveItem:
        """Sort one file. Errors propagate; the service records them per file."""
        built = self.invocation_info(path, bracket)
        if built is None:
            log.warning("Skipping file with invalid extension: %s", path)
            return MoveItem(
                src=str(path),
                dst=None,
                action=self.req.action,
                ok=False,
                reason=UNSUPPORTED,
            )
        info, unknown = built

        template = self.select_template(info.date is not None, unknown, bracket)
        target, _ = self.resolver.resolve(
            info, lambda attempt: self.render_path(template, attempt)
        )

        actions.execute(path, target, self.req.action, self.req.dry_run, self.req.mkdir)
        return MoveItem(
            src=str(path),
            dst=str(target),
            action=self.req.action,
            ok=True,
            reason="dry_run" if self.req.dry_run else None,
        )
