"""Framework-neutral data aliases."""

from __future__ import annotations

from collections.abc import MutableMapping
from dataclasses import dataclass
from typing import Any, TypeAlias

Event: TypeAlias = Any
ToolArgs: TypeAlias = MutableMapping[str, Any]


@dataclass(frozen=True)
class ModelRef:
    """Structured model identity as reported by the host."""

    provider_id: str | None = None
    model_id: str | None = None


ModelIdentity: TypeAlias = str | ModelRef | Any
