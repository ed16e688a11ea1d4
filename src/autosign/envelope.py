"""Utilities for reading host event payloads of any shape."""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from typing import Any

from autosign.errors import EventPayloadError
from autosign.types import Event, ToolArgs


def field_of(event: Event, key: str, default: Any = None) -> Any:
    """Read a field from mapping-like or attribute-based payloads."""

    if event is None:
        return default
    if isinstance(event, Mapping):
        return event.get(key, default)
    return getattr(event, key, default)


def tool_of(event: Event) -> str:
    """Get the tool identifier of a tool-call event."""

    tool = field_of(event, "tool")
    if not isinstance(tool, str):
        raise EventPayloadError(f"tool-call event has no tool identifier: {tool!r}")
    return tool


def args_of(output: Event) -> ToolArgs:
    """Get the mutable arguments object of a tool-call event.

    The host exposes them as ``output.args``. An output without arguments
    gets an empty mapping attached so hooks have somewhere to write.
    """

    if output is None:
        raise EventPayloadError("tool-call event has no output object")
    args = field_of(output, "args")
    if args is None:
        args = {}
        if isinstance(output, MutableMapping):
            output["args"] = args
        else:
            try:
                output.args = args
            except AttributeError as exc:
                raise EventPayloadError("tool-call output cannot carry arguments") from exc
    if not isinstance(args, MutableMapping):
        raise EventPayloadError(f"tool-call arguments are not a mutable mapping: {type(args).__name__}")
    return args


def model_of(event: Event) -> Any:
    """Get the model identity carried by a chat event, if any."""

    if isinstance(event, str):
        return event
    return field_of(event, "model")
