from __future__ import annotations

"""Exception classes raised by the templating and conversion pipeline.

Every failure surfaces to the direct caller as a single exception carrying
enough context for diagnostics. Scratch directory cleanup problems are never
raised; they are logged and ignored.
"""

from typing import Optional

__all__ = [
    "OfficifyError",
    "NotLoadedError",
    "CorruptArchiveError",
    "ConverterError",
    "ConverterSpawnError",
    "ConverterNotFoundError",
    "ConverterExitError",
]


class OfficifyError(Exception):
    """Base exception for all Officify errors."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.cause = cause


class NotLoadedError(OfficifyError):
    """Raised when an archive operation is attempted before ``load()``."""

    def __init__(self, message: str = "Archive not loaded. Call load() first.") -> None:
        super().__init__(message)


class CorruptArchiveError(OfficifyError):
    """Raised when the input bytes are not a readable zip container."""


class ConverterError(OfficifyError):
    """Base class for failures of the external converter."""

    def __init__(self, message: str, soffice_path: Optional[str] = None,
                 cause: Optional[Exception] = None) -> None:
        super().__init__(message, cause)
        self.soffice_path = soffice_path


class ConverterSpawnError(ConverterError):
    """Raised when the converter process could not be started."""


class ConverterNotFoundError(ConverterSpawnError):
    """Raised when no converter executable can be located."""


class ConverterExitError(ConverterError):
    """Raised when the converter ran but did not produce a PDF.

    Covers a non-zero exit code, termination by a signal, and a clean exit
    that left no output file behind. Captured stdout/stderr are attached.
    """

    def __init__(self, message: str, *, exit_code: Optional[int] = None,
                 signal: Optional[int] = None, stdout: str = "", stderr: str = "",
                 soffice_path: Optional[str] = None) -> None:
        self.exit_code = exit_code
        self.signal = signal
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(message, soffice_path)

    def __str__(self) -> str:
        base = super().__str__()
        return (
            f"{base} (code:{self.exit_code} signal:{self.signal}). "
            f"stdout: {self.stdout} stderr: {self.stderr}"
        )
