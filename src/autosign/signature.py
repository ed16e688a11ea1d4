"""Signature rendering, detection and shell escaping."""

from __future__ import annotations

DEFAULT_MARKER = "🤖"
DEFAULT_HOST_NAME = "OpenCode"
DEFAULT_HOST_URL = "https://opencode.ai"


def signature_marker(host_name: str = DEFAULT_HOST_NAME) -> str:
    """Return the phrase whose presence means a text is already signed.

    It is the prefix of ``render_signature`` output that precedes the link
    target, so both must change together.
    """

    return f"Generated with [{host_name}]"


def render_signature(
    display_name: str,
    *,
    marker: str = DEFAULT_MARKER,
    host_name: str = DEFAULT_HOST_NAME,
    host_url: str = DEFAULT_HOST_URL,
) -> str:
    return f"{marker} {signature_marker(host_name)}({host_url}) ({display_name})"


def has_signature(text: str, *, host_name: str = DEFAULT_HOST_NAME) -> bool:
    return signature_marker(host_name) in text


def escape_for_shell(text: str, quote: str = '"') -> str:
    """Escape ``text`` for placement inside a ``quote``-delimited shell word."""

    if quote == "'":
        return text.replace("'", "'\\''")
    # Backslashes first, otherwise the ones added for quotes get doubled.
    return text.replace("\\", "\\\\").replace('"', '\\"')
