"""Builtin plugin that signs PR, issue and commit payloads."""

from __future__ import annotations

from loguru import logger

from autosign.config import Settings
from autosign.hookspecs import hookimpl
from autosign.rewriter import rewrite_command
from autosign.session import SessionContext
from autosign.signature import has_signature
from autosign.types import ModelIdentity, ToolArgs


class SignatureCoordinator:
    """Tracks the active model and signs outgoing tool calls."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self._structured_tools = frozenset(settings.structured_tools)

    @hookimpl
    def chat_message(self, session: SessionContext, model: ModelIdentity | None) -> None:
        if model is None or model == "":
            return
        display_name = session.update(model)
        logger.debug("session.model_changed display_name={}", display_name)

    @hookimpl
    def tool_execute_before(self, session: SessionContext, tool: str, args: ToolArgs) -> None:
        if tool in self._structured_tools:
            self.sign_body(session, tool, args)
            return
        if tool == self.settings.shell_tool:
            self.sign_command(session, tool, args)

    def sign_body(self, session: SessionContext, tool: str, args: ToolArgs) -> None:
        signature = session.signature(self.settings)
        body = args.get("body")
        if isinstance(body, str) and body.strip():
            if has_signature(body, host_name=self.settings.host_name):
                return
            args["body"] = body.rstrip() + "\n\n" + signature
        else:
            args["body"] = signature
        logger.bind(model=session.display_name).info("signature.body tool={} model={}", tool, session.display_name)

    def sign_command(self, session: SessionContext, tool: str, args: ToolArgs) -> None:
        command = args.get("command")
        if not isinstance(command, str) or not command:
            return
        signature = session.signature(self.settings)
        rewritten = rewrite_command(command, signature, host_name=self.settings.host_name)
        if rewritten == command:
            return
        args["command"] = rewritten
        logger.bind(model=session.display_name).info("signature.command tool={} model={}", tool, session.display_name)
