# src/ps_app/modules/photosort/schemas.py
from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ps_app.core.config import get_settings


class AnalysisType(str, Enum):
    only_exif = "only_exif"
    only_name = "only_name"
    exif_then_name = "exif_then_name"
    name_then_exif = "name_then_exif"

    @classmethod
    def parse(cls, value: str | AnalysisType) -> AnalysisType:
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        try:
            return _ANALYSIS_ALIASES[key]
        except KeyError:
            raise ValueError(f"Invalid analysis type: {value}") from None


_ANALYSIS_ALIASES = {
    "only_exif": AnalysisType.only_exif,
    "exif": AnalysisType.only_exif,
    "only_name": AnalysisType.only_name,
    "name": AnalysisType.only_name,
    "exif_then_name": AnalysisType.exif_then_name,
    "exif_name": AnalysisType.exif_then_name,
    "name_then_exif": AnalysisType.name_then_exif,
    "name_exif": AnalysisType.name_then_exif,
}


class ActionKind(str, Enum):
    move = "move"
    copy = "copy"
    hardlink = "hardlink"
    relative_symlink = "relative_symlink"
    absolute_symlink = "absolute_symlink"

    @classmethod
    def parse(cls, value: str | ActionKind) -> ActionKind:
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        try:
            return _ACTION_ALIASES[key]
        except KeyError:
            raise ValueError(f"Invalid action mode: {value}") from None


_ACTION_ALIASES = {
    "move": ActionKind.move,
    "copy": ActionKind.copy,
    "hardlink": ActionKind.hardlink,
    "hard": ActionKind.hardlink,
    "relative_symlink": ActionKind.relative_symlink,
    "relsym": ActionKind.relative_symlink,
    "absolute_symlink": ActionKind.absolute_symlink,
    "abssym": ActionKind.absolute_symlink,
}


def _default_file_format() -> str:
    return get_settings().FILE_FORMAT


def _default_date_format() -> str:
    return get_settings().DATE_FORMAT


def _default_image_exts() -> list[str]:
    return list(get_settings().IMAGE_EXTENSIONS)


def _default_video_exts() -> list[str]:
    return list(get_settings().VIDEO_EXTENSIONS)


class SortRequest(BaseModel):
    source_dirs: list[str] = Field(
        ...,
        min_length=1,
        description="Directories to scan for photos and videos.",
        example=["/data/camera"],
    )
    target_dir: str = Field(
        ...,
        description="Root directory the rendered file format is placed under. Must exist.",
        example="/data/sorted",
    )
    recursive: bool = Field(
        False,
        description="Descend into subdirectories of each source directory.",
        example=True,
    )
    file_format: str = Field(
        default_factory=_default_file_format,
        description=(
            "Target path template. Literal text plus `{label:command?arg}` blocks; "
            "`/` separates subdirectories."
        ),
        example="{date?%Y}/{date?%m}/{type}{_:date}{-:name}{-:dup}.{ext}",
    )
    nodate_file_format: str | None = Field(
        None,
        description="Template for files without a derivable date. Defaults to `file_format`.",
        example="nodate/{name}{-:dup}.{ext}",
    )
    unknown_file_format: str | None = Field(
        None,
        description="Template for files matching neither extension list. Unset = skip them.",
        example="others/{name}{.:ext}",
    )
    bracketed_file_format: str | None = Field(
        None,
        description="Template for exposure-bracketed photo sequences (Sony maker notes).",
        example="brackets/{bracket?num}/{bracket?seq}-{name}.{ext}",
    )
    date_format: str = Field(
        default_factory=_default_date_format,
        description="strftime format used by `{date}` when no argument is given.",
        example="%Y%m%d-%H%M%S",
    )
    extensions: list[str] = Field(
        default_factory=_default_image_exts,
        description="Photo extensions (case-insensitive, without dot).",
        example=["jpg", "jpeg", "heic"],
    )
    video_extensions: list[str] = Field(
        default_factory=_default_video_exts,
        description="Video extensions (case-insensitive, without dot).",
        example=["mp4", "mov"],
    )
    analysis_mode: AnalysisType = Field(
        AnalysisType.exif_then_name,
        description="Where the date comes from and in which order sources are tried.",
        example="exif_then_name",
    )
    action: ActionKind = Field(
        ActionKind.move,
        description="What to do with each file once its target path is known.",
        example="copy",
    )
    dry_run: bool = Field(
        True,
        description="If true, only report planned actions (no files changed).",
        example=True,
    )
    mkdir: bool = Field(
        False,
        description="Create missing target subdirectories. Never done in dry-run.",
        example=True,
    )
    threads: int | None = Field(
        None,
        ge=1,
        description="Worker threads. Unset runs sequentially.",
        example=4,
    )
    max_duplicates: int | None = Field(
        None,
        ge=1,
        description="Give up on a file after this many name collisions. Unset = unbounded.",
        example=1000,
    )

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "source_dirs": ["/data/camera"],
                    "target_dir": "/data/sorted",
                    "recursive": True,
                    "file_format": "{date?%Y}/{type}{_:date}{-:name}{-:dup}.{ext}",
                    "analysis_mode": "exif_then_name",
                    "action": "copy",
                    "dry_run": True,
                    "mkdir": True,
                }
            ]
        }
    )

    @field_validator("analysis_mode", mode="before")
    @classmethod
    def _parse_analysis(cls, v):
        return AnalysisType.parse(v)

    @field_validator("action", mode="before")
    @classmethod
    def _parse_action(cls, v):
        return ActionKind.parse(v)

    @field_validator("extensions", "video_extensions", mode="before")
    @classmethod
    def _split_exts(cls, v):
        if isinstance(v, str):
            v = v.split(",")
        return [str(e).strip().lstrip(".").lower() for e in v if str(e).strip()]


class MoveItem(BaseModel):
    src: str = Field(..., example="/data/camera/DSC01234.JPG")
    dst: str | None = Field(
        None, example="/data/sorted/2023/IMG_20230101-100000_DSC01234.JPG"
    )
    action: ActionKind = Field(..., example="copy")
    ok: bool = Field(..., example=True)
    reason: str | None = Field(
        None,
        description="Why the file was skipped or failed.",
        example="unsupported_extension",
    )


class SortResponse(BaseModel):
    dry_run: bool = Field(..., example=True)
    files_count: int = Field(
        ...,
        ge=0,
        description="Number of files discovered in the source directories.",
        example=120,
    )
    processed_count: int = Field(
        ...,
        ge=0,
        description="Files whose action was planned/performed.",
        example=118,
    )
    failed_count: int = Field(
        ...,
        ge=0,
        description="Files skipped or failed.",
        example=2,
    )
    bracket_groups: int = Field(
        0,
        ge=0,
        description="Number of bracketed sequences detected.",
        example=3,
    )
    items: list[MoveItem] = Field(default_factory=list)
