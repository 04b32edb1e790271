"""Builtin collaborators registered before any installed plugin."""

from __future__ import annotations

from pshelp.backend import PowerShellHelpBackend
from pshelp.config import Settings
from pshelp.hookspecs import hookimpl
from pshelp.tokenizer import PowerShellTokenizer
from pshelp.viewer import ConsoleViewer


class BuiltinPlugin:
    @hookimpl
    def provide_tokenizer(self) -> PowerShellTokenizer:
        return PowerShellTokenizer()

    @hookimpl
    def provide_backend(self, settings: Settings) -> PowerShellHelpBackend:
        return PowerShellHelpBackend(settings.powershell, timeout_seconds=settings.timeout_seconds)

    @hookimpl
    def provide_viewer(self, settings: Settings) -> ConsoleViewer:
        return ConsoleViewer(use_pager=settings.use_pager)
