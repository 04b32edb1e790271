"""Read-only console viewer for help output."""

from __future__ import annotations

import codecs
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from loguru import logger
from rich.console import Console
from rich.rule import Rule
from rich.text import Text


@dataclass(frozen=True)
class ViewerOptions:
    """How one file is presented."""

    title: str = "Help"
    delete_source: bool = True
    disable_history: bool = True


class HelpViewer(Protocol):
    """Shows a text file to the user."""

    def open(self, path: Path, options: ViewerOptions) -> None: ...


def read_help_text(path: Path) -> str:
    """Read help output written by either PowerShell edition."""

    raw = path.read_bytes()
    if raw.startswith((codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)):
        return raw.decode("utf-16")
    return raw.decode("utf-8-sig", errors="replace")


class ConsoleViewer:
    """Render help text on a rich console, optionally through its pager."""

    def __init__(self, console: Console | None = None, *, use_pager: bool = True) -> None:
        self.console = console or Console()
        self.use_pager = use_pager
        self.history: list[Path] = []

    def open(self, path: Path, options: ViewerOptions) -> None:
        try:
            text = read_help_text(path)
            if self.use_pager:
                with self.console.pager(styles=True):
                    self._render(text, options.title)
            else:
                self._render(text, options.title)
            if not options.disable_history:
                self.history.append(path)
        finally:
            if options.delete_source:
                path.unlink(missing_ok=True)
                logger.debug("help.viewer.deleted path={}", path)

    def _render(self, text: str, title: str) -> None:
        self.console.print(Rule(title))
        self.console.print(Text(text.rstrip()))
