# src/ps_app/modules/photosort/analysis/video2date.py
from __future__ import annotations

import json
import shutil
import subprocess
from datetime import datetime
from pathlib import Path

from ps_app.core.errors import AnalysisError


def _ffprobe_path() -> str:
    exe = shutil.which("ffprobe")
    if not exe:
        raise AnalysisError("ffprobe executable not found on PATH")
    return exe


def parse_creation_time(value: str) -> datetime:
    """ISO-8601 container timestamp -> naive datetime (offset dropped, wall time kept)."""
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(text)
    except ValueError as exc:
        raise AnalysisError(f"Invalid creation_time {value!r}") from exc
    return dt.replace(tzinfo=None)


def video_time(path: Path, timeout: float | None = 30) -> datetime | None:
    cmd = [
        _ffprobe_path(),
        "-v",
        "quiet",
        "-print_format",
        "json",
        "-show_format",
        str(path),
    ]
    try:
        proc = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)
    except subprocess.TimeoutExpired as exc:
        raise AnalysisError(f"ffprobe timed out on {path}") from exc
    if proc.returncode != 0:
        raise AnalysisError(f"ffprobe failed on {path} (exit {proc.returncode})")

    try:
        meta = json.loads(proc.stdout or "{}")
    except json.JSONDecodeError as exc:
        raise AnalysisError(f"Unreadable ffprobe output for {path}") from exc

    creation = (meta.get("format") or {}).get("tags", {}).get("creation_time")
    if not creation:
        return None
    return parse_creation_time(creation)
