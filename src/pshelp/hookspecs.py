"""Pluggy hook namespace and help hook specifications."""

from __future__ import annotations

import pluggy

from pshelp.backend import HelpBackend
from pshelp.config import Settings
from pshelp.tokenizer import Tokenizer
from pshelp.types import HelpRequest
from pshelp.viewer import HelpViewer

PSHELP_HOOK_NAMESPACE = "pshelp"
hookspec = pluggy.HookspecMarker(PSHELP_HOOK_NAMESPACE)
hookimpl = pluggy.HookimplMarker(PSHELP_HOOK_NAMESPACE)


class PshelpHookSpecs:
    """Hook contract for pshelp extensions."""

    @hookspec(firstresult=True)
    def provide_tokenizer(self) -> Tokenizer | None:
        """Provide the tokenizer used to classify lines."""

    @hookspec(firstresult=True)
    def provide_backend(self, settings: Settings) -> HelpBackend | None:
        """Provide the backend that executes help requests."""

    @hookspec(firstresult=True)
    def provide_viewer(self, settings: Settings) -> HelpViewer | None:
        """Provide the viewer that displays help output."""

    @hookspec
    def on_help_shown(self, request: HelpRequest) -> None:
        """Observe a help request after it was displayed."""
