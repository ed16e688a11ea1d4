"""Hook fan-out with per-plugin fault isolation."""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Iterator
from dataclasses import dataclass, field
from typing import Any

import pluggy
from loguru import logger

from autosign.types import Event

UNKNOWN_PLUGIN = "<unknown>"


@dataclass
class HookRun:
    """Outcome of one hook dispatch, by plugin name in call order."""

    hook_name: str
    called: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


class HookRuntime:
    """Calls every implementation of a hook; one broken plugin never stops the rest.

    A plugin that raises is logged, reported to the ``on_error`` observers and
    recorded in the returned :class:`HookRun`. The sync path cannot await, so
    coroutine implementations are skipped there with a warning.
    """

    def __init__(self, plugin_manager: pluggy.PluginManager) -> None:
        self._plugin_manager = plugin_manager

    def dispatch(self, hook_name: str, **kwargs: Any) -> HookRun:
        run = HookRun(hook_name)
        for impl, plugin in self._impls(hook_name):
            try:
                value = impl.function(**_select(impl, kwargs))
            except Exception as error:
                run.failed.append(plugin)
                for observer, pending in self._fail(hook_name, plugin, error, kwargs):
                    _drop(observer, "on_error", pending)
                continue
            if inspect.isawaitable(value):
                _drop(plugin, hook_name, value)
                run.skipped.append(plugin)
                continue
            run.called.append(plugin)
        return run

    async def dispatch_async(self, hook_name: str, **kwargs: Any) -> HookRun:
        run = HookRun(hook_name)
        for impl, plugin in self._impls(hook_name):
            try:
                value = impl.function(**_select(impl, kwargs))
                if inspect.isawaitable(value):
                    await value
            except Exception as error:
                run.failed.append(plugin)
                for observer, pending in self._fail(hook_name, plugin, error, kwargs):
                    try:
                        await pending
                    except Exception:
                        logger.opt(exception=True).warning(
                            "hook.on_error_failed stage={}:{} plugin={}", hook_name, plugin, observer
                        )
                continue
            run.called.append(plugin)
        return run

    def notify_error(
        self, *, stage: str, error: Exception, event: Event | None
    ) -> list[tuple[str, Awaitable[Any]]]:
        """Call the ``on_error`` observers.

        Observer failures are logged and swallowed. Returns the awaitables
        produced by coroutine observers so an async caller can finish them.
        """

        pending: list[tuple[str, Awaitable[Any]]] = []
        arguments = {"stage": stage, "error": error, "event": event}
        for impl, observer in self._impls("on_error"):
            try:
                value = impl.function(**_select(impl, arguments))
            except Exception:
                logger.opt(exception=True).warning("hook.on_error_failed stage={} plugin={}", stage, observer)
                continue
            if inspect.isawaitable(value):
                pending.append((observer, value))
        return pending

    def hook_report(self) -> dict[str, list[str]]:
        """Map each implemented hook to its plugins, in call order."""

        report: dict[str, list[str]] = {}
        for hook_name in sorted(vars(self._plugin_manager.hook)):
            plugins = [plugin for _, plugin in self._impls(hook_name)]
            if plugins:
                report[hook_name] = plugins
        return report

    def _fail(
        self, hook_name: str, plugin: str, error: Exception, kwargs: dict[str, Any]
    ) -> list[tuple[str, Awaitable[Any]]]:
        logger.opt(exception=error).warning("hook.failed hook={} plugin={}", hook_name, plugin)
        event = {key: value for key, value in kwargs.items() if key != "session"} or None
        return self.notify_error(stage=f"{hook_name}:{plugin}", error=error, event=event)

    def _impls(self, hook_name: str) -> Iterator[tuple[Any, str]]:
        caller = getattr(self._plugin_manager.hook, hook_name, None)
        if caller is None or not hasattr(caller, "get_hookimpls"):
            return
        # pluggy calls the most recently registered plugin first.
        for impl in reversed(caller.get_hookimpls()):
            yield impl, impl.plugin_name or UNKNOWN_PLUGIN


def _select(impl: Any, kwargs: dict[str, Any]) -> dict[str, Any]:
    return {name: kwargs[name] for name in impl.argnames if name in kwargs}


def _drop(plugin: str, hook_name: str, value: Awaitable[Any]) -> None:
    logger.warning("hook.async_not_supported hook={} plugin={}", hook_name, plugin)
    if inspect.iscoroutine(value):
        value.close()
