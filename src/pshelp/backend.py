"""Help backend running Get-Help through a PowerShell process."""

from __future__ import annotations

import os
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Protocol

from loguru import logger

from pshelp.errors import HelpBackendError, HelpRequestError
from pshelp.types import HelpRequest

POWERSHELL_CANDIDATES = ("pwsh", "powershell")
POWERSHELL_FLAGS = ("-NoLogo", "-NoProfile", "-NonInteractive", "-Command")
DEFAULT_TIMEOUT_SECONDS = 30.0


class HelpBackend(Protocol):
    """Executes a help request, writing text to ``output``."""

    def run(self, request: HelpRequest, output: Path) -> None: ...


def quote_argument(value: str | None) -> str:
    """Render one argument as a PowerShell literal."""

    if value is None:
        return "$null"
    return "'" + value.replace("'", "''") + "'"


def render_script(request: HelpRequest) -> str:
    """Wrap the template in a script block invoked with literal arguments."""

    if request.output is None:
        raise HelpRequestError("help request has no output destination")
    arguments = " ".join(quote_argument(value) for value in request.arguments)
    return f"& {{ {request.template} }} {arguments}"


def allocate_output(suffix: str = ".txt") -> Path:
    """Create an empty temporary file for help output."""

    handle, name = tempfile.mkstemp(prefix="pshelp-", suffix=suffix)
    os.close(handle)
    return Path(name)


def find_powershell() -> Path | None:
    """Find a PowerShell executable on PATH."""

    for candidate in POWERSHELL_CANDIDATES:
        found = shutil.which(candidate)
        if found is not None:
            return Path(found)
    return None


class PowerShellHelpBackend:
    """Run help requests with ``pwsh -Command``."""

    def __init__(self, executable: Path | None = None, *, timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS) -> None:
        self._executable = executable
        self.timeout_seconds = timeout_seconds

    @property
    def executable(self) -> Path:
        executable = self._executable or find_powershell()
        if executable is None:
            raise HelpBackendError(f"PowerShell not found, tried: {', '.join(POWERSHELL_CANDIDATES)}")
        return executable

    def run(self, request: HelpRequest, output: Path) -> None:
        script = render_script(request.with_output(output))
        command = [str(self.executable), *POWERSHELL_FLAGS, script]
        logger.info("help.backend.run executable={} output={}", command[0], output)
        try:
            completed = subprocess.run(  # noqa: S603
                command,
                capture_output=True,
                text=True,
                timeout=self.timeout_seconds,
            )
        except subprocess.TimeoutExpired as exc:
            raise HelpBackendError(f"Get-Help timed out after {self.timeout_seconds}s") from exc
        except OSError as exc:
            raise HelpBackendError(f"cannot start {command[0]}: {exc}") from exc

        stderr = (completed.stderr or "").strip()
        if completed.returncode != 0:
            message = stderr or f"exit={completed.returncode}"
            raise HelpBackendError(
                f"exit={completed.returncode}: {message}", returncode=completed.returncode, stderr=stderr
            )
        if stderr:
            logger.warning("help.backend.stderr message={}", stderr)
