"""Host-facing entry point: owns the session and dispatches events to plugins."""

from __future__ import annotations

from typing import Any

import pluggy
from loguru import logger

from autosign.config import Settings
from autosign.coordinator import SignatureCoordinator
from autosign.envelope import args_of, model_of, tool_of
from autosign.hook_runtime import HookRun, HookRuntime
from autosign.hookspecs import AUTOSIGN_HOOK_NAMESPACE, AutosignHookSpecs
from autosign.session import SessionContext
from autosign.types import Event, ToolArgs

BUILTIN_PLUGIN_NAME = "builtin:signature"


class SignatureHost:
    """Adapter between an AI coding host's event stream and autosign plugins.

    The host calls ``on_chat_message`` for every chat event and
    ``on_tool_execute_before`` before running a tool. Both return promptly and
    never raise: a malformed payload is logged and leaves the call untouched.
    """

    def __init__(self, settings: Settings | None = None, *, session: SessionContext | None = None) -> None:
        self.settings = settings or Settings()
        self.session = session or SessionContext()
        self._plugin_manager = pluggy.PluginManager(AUTOSIGN_HOOK_NAMESPACE)
        self._plugin_manager.add_hookspecs(AutosignHookSpecs)
        self._plugin_manager.register(SignatureCoordinator(self.settings), name=BUILTIN_PLUGIN_NAME)
        self._hook_runtime = HookRuntime(self._plugin_manager)
        self._failed_plugins: dict[str, str] = {}

    @property
    def failed_plugins(self) -> dict[str, str]:
        return dict(self._failed_plugins)

    def register(self, plugin: object, name: str | None = None) -> str | None:
        """Register an extra plugin object."""

        return self._plugin_manager.register(plugin, name=name)

    def load_plugins(self) -> int:
        """Load third-party plugins from the ``autosign`` entry-point group."""

        if not self.settings.load_entrypoints:
            return 0
        try:
            loaded = self._plugin_manager.load_setuptools_entrypoints(AUTOSIGN_HOOK_NAMESPACE)
        except Exception as exc:
            self._failed_plugins[AUTOSIGN_HOOK_NAMESPACE] = str(exc)
            logger.opt(exception=True).warning("plugin.load_failed group={}", AUTOSIGN_HOOK_NAMESPACE)
            return 0
        logger.debug("plugin.loaded group={} count={}", AUTOSIGN_HOOK_NAMESPACE, loaded)
        return loaded

    def on_chat_message(self, event: Event) -> HookRun | None:
        """Record the model carried by one chat event.

        Returns the dispatch outcome, or ``None`` when the event was rejected.
        """

        try:
            model = model_of(event)
        except Exception:
            logger.opt(exception=True).warning("event.chat_message_invalid")
            return None
        return self._hook_runtime.dispatch("chat_message", session=self.session, model=model)

    def on_tool_execute_before(self, event: Event, output: Event) -> HookRun | None:
        """Let plugins mutate ``output.args`` before the tool runs."""

        try:
            tool = tool_of(event)
            args = args_of(output)
        except Exception:
            logger.opt(exception=True).warning("event.tool_execute_before_invalid")
            return None
        return self._hook_runtime.dispatch("tool_execute_before", session=self.session, tool=tool, args=args)

    async def on_chat_message_async(self, event: Event) -> HookRun | None:
        try:
            model = model_of(event)
        except Exception:
            logger.opt(exception=True).warning("event.chat_message_invalid")
            return None
        return await self._hook_runtime.dispatch_async("chat_message", session=self.session, model=model)

    async def on_tool_execute_before_async(self, event: Event, output: Event) -> HookRun | None:
        try:
            tool = tool_of(event)
            args = args_of(output)
        except Exception:
            logger.opt(exception=True).warning("event.tool_execute_before_invalid")
            return None
        return await self._hook_runtime.dispatch_async(
            "tool_execute_before", session=self.session, tool=tool, args=args
        )

    def sign_tool_call(self, tool: str, args: ToolArgs) -> ToolArgs:
        """Convenience wrapper: sign ``args`` for ``tool`` in place and return them."""

        output: dict[str, Any] = {"args": args}
        self.on_tool_execute_before({"tool": tool}, output)
        return output["args"]

    def hook_report(self) -> dict[str, list[str]]:
        """Return hook implementation summary for diagnostics."""

        return self._hook_runtime.hook_report()
