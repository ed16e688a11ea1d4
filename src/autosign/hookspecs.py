"""Pluggy hook namespace and autosign hook specifications."""

from __future__ import annotations

import pluggy

from autosign.session import SessionContext
from autosign.types import Event, ModelIdentity, ToolArgs

AUTOSIGN_HOOK_NAMESPACE = "autosign"
hookspec = pluggy.HookspecMarker(AUTOSIGN_HOOK_NAMESPACE)
hookimpl = pluggy.HookimplMarker(AUTOSIGN_HOOK_NAMESPACE)


class AutosignHookSpecs:
    """Hook contract for autosign plugins."""

    @hookspec
    def chat_message(self, session: SessionContext, model: ModelIdentity | None) -> None:
        """Observe the model that produced a chat message."""

    @hookspec
    def tool_execute_before(self, session: SessionContext, tool: str, args: ToolArgs) -> None:
        """Mutate one tool call's arguments before the host executes it."""

    @hookspec
    def on_error(self, stage: str, error: Exception, event: Event | None) -> None:
        """Observe failures raised by hook implementations."""
