"""Application-level exception types for pshelp."""

from __future__ import annotations


class PshelpError(Exception):
    """Base exception for pshelp."""


class ConfigurationError(PshelpError):
    """Raised when settings or plugin wiring are unusable."""


class HelpRequestError(PshelpError):
    """Raised when a help request cannot be rendered into a script."""


class HelpBackendError(PshelpError):
    """Raised when the help backend fails to produce output."""

    def __init__(self, message: str, *, returncode: int | None = None, stderr: str = "") -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr
