"""Per-host session state: the display name of the active model."""

from __future__ import annotations

import threading

from autosign.config import Settings
from autosign.naming import UNKNOWN_MODEL, format_identity
from autosign.signature import render_signature
from autosign.types import ModelIdentity


class SessionContext:
    """Single-owner cell holding the current model display name.

    The host creates one and passes it to every hook call. Reads and writes go
    through a lock so threaded hosts can share it.
    """

    def __init__(self, display_name: str = UNKNOWN_MODEL) -> None:
        self._display_name = display_name
        self._lock = threading.Lock()

    @property
    def display_name(self) -> str:
        with self._lock:
            return self._display_name

    def update(self, identity: ModelIdentity | None) -> str:
        """Store the display name for ``identity`` and return it."""

        display_name = format_identity(identity)
        with self._lock:
            self._display_name = display_name
        return display_name

    def signature(self, settings: Settings) -> str:
        return render_signature(
            self.display_name,
            marker=settings.marker,
            host_name=settings.host_name,
            host_url=settings.host_url,
        )

    def __repr__(self) -> str:
        return f"SessionContext(display_name={self.display_name!r})"
