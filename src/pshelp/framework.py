"""Plugin-driven assembly of resolver, backend and viewer."""

from __future__ import annotations

from dataclasses import dataclass
from importlib.metadata import entry_points
from typing import cast

import pluggy
from loguru import logger

from pshelp.backend import HelpBackend
from pshelp.builtin import BuiltinPlugin
from pshelp.config import Settings, load_settings
from pshelp.errors import ConfigurationError
from pshelp.help import show_help
from pshelp.hookspecs import PSHELP_HOOK_NAMESPACE, PshelpHookSpecs
from pshelp.resolver import ContextualHelpResolver
from pshelp.tokenizer import Tokenizer
from pshelp.types import HelpRequest
from pshelp.viewer import HelpViewer, ViewerOptions

BUILTIN_PLUGIN_NAME = "builtin"


@dataclass(frozen=True)
class LoadedPlugin:
    """Registration result for one entry-point plugin."""

    name: str
    value: str


class HelpFramework:
    """Wire collaborators from hook implementations.

    The builtin plugin registers first; pluggy calls later registrations first,
    so installed plugins override builtin collaborators.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or load_settings()
        self._plugin_manager = pluggy.PluginManager(PSHELP_HOOK_NAMESPACE)
        self._plugin_manager.add_hookspecs(PshelpHookSpecs)
        self._plugin_manager.register(BuiltinPlugin(), name=BUILTIN_PLUGIN_NAME)
        self._loaded_plugins: list[LoadedPlugin] = []
        self._failed_plugins: dict[str, str] = {}

    @property
    def loaded_plugins(self) -> list[LoadedPlugin]:
        return list(self._loaded_plugins)

    @property
    def failed_plugins(self) -> dict[str, str]:
        return dict(self._failed_plugins)

    def register(self, plugin: object, name: str | None = None) -> None:
        """Register one plugin object directly."""

        self._plugin_manager.register(plugin, name=name)

    def load_plugins(self) -> None:
        """Discover and register plugins from the ``pshelp`` entry point group."""

        self._loaded_plugins = []
        self._failed_plugins = {}
        for entry_point in entry_points(group=PSHELP_HOOK_NAMESPACE):
            if self._plugin_manager.has_plugin(entry_point.name):
                continue
            try:
                plugin = entry_point.load()
                if isinstance(plugin, type):
                    plugin = plugin()
                self._plugin_manager.register(plugin, name=entry_point.name)
                self._loaded_plugins.append(LoadedPlugin(name=entry_point.name, value=entry_point.value))
            except Exception as exc:
                self._failed_plugins[entry_point.name] = str(exc)
                logger.opt(exception=True).warning("plugin.load_failed plugin={}", entry_point.name)

    def create_tokenizer(self) -> Tokenizer:
        return cast(Tokenizer, self._provide("provide_tokenizer"))

    def create_resolver(self) -> ContextualHelpResolver:
        return ContextualHelpResolver(self.create_tokenizer())

    def create_backend(self) -> HelpBackend:
        return cast(HelpBackend, self._provide("provide_backend", settings=self.settings))

    def create_viewer(self) -> HelpViewer:
        return cast(HelpViewer, self._provide("provide_viewer", settings=self.settings))

    def viewer_options(self) -> ViewerOptions:
        return ViewerOptions(title=self.settings.viewer_title, delete_source=not self.settings.keep_output)

    def show_help(self, line_text: str, cursor_offset: int) -> HelpRequest | None:
        """Run the full resolve, fetch and display flow."""

        request = show_help(
            line_text,
            cursor_offset,
            resolver=self.create_resolver(),
            backend=self.create_backend(),
            viewer=self.create_viewer(),
            options=self.viewer_options(),
        )
        if request is not None:
            self._notify_shown(request)
        return request

    def hook_report(self) -> dict[str, list[str]]:
        """Return hook implementation summary for diagnostics."""

        report: dict[str, list[str]] = {}
        for hook_name in ("provide_tokenizer", "provide_backend", "provide_viewer", "on_help_shown"):
            caller = getattr(self._plugin_manager.hook, hook_name)
            names = [impl.plugin_name for impl in reversed(caller.get_hookimpls())]
            if names:
                report[hook_name] = names
        return report

    def _provide(self, hook_name: str, **kwargs: object) -> object:
        provided = getattr(self._plugin_manager.hook, hook_name)(**kwargs)
        if provided is None:
            raise ConfigurationError(f"no plugin implements {hook_name}")
        return provided

    def _notify_shown(self, request: HelpRequest) -> None:
        for impl in self._plugin_manager.hook.on_help_shown.get_hookimpls():
            try:
                impl.function(**({"request": request} if "request" in impl.argnames else {}))
            except Exception:
                logger.opt(exception=True).warning("hook.on_help_shown_failed plugin={}", impl.plugin_name)
