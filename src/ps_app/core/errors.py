# src/ps_app/core/errors.py
from __future__ import annotations

from fastapi import HTTPException, status


class PsAppError(Exception):
    """Base application exception."""

    pass


class BadRequest(PsAppError):
    pass


class NotFound(PsAppError):
    pass


class ConfigError(BadRequest):
    """Settings that make a run impossible (missing dirs, missing templates)."""


class FormatError(PsAppError):
    """A format command could not be turned into replacement text."""


class UnknownFormatCommand(FormatError):
    def __init__(self, command: str) -> None:
        super().__init__(
            "Failed to format file name with the given format string. "
            f"There exists no formatter for the format command: {{{command}}}"
        )
        self.command = command


class AnalysisError(PsAppError):
    """Date/metadata extraction failed for a file."""


class FileActionError(PsAppError):
    """Moving/copying/linking a file to its target failed."""


class DuplicateLimitExceeded(FileActionError):
    pass


def to_http(exc: Exception) -> HTTPException:
    """
    Convert our exceptions to HTTPException with sensible defaults.
    """
    if isinstance(exc, BadRequest):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if isinstance(exc, NotFound):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, PsAppError):
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        )
    # Fallback
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)
    )
