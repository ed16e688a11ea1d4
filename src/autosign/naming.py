"""Human-readable display names for raw model identifiers."""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence

from autosign.types import ModelIdentity, ModelRef

UNKNOWN_MODEL = "Unknown Model"

_DATE_FRAGMENT = re.compile(r"-\d{4}-\d{2}-\d{2}")
_HASH_FRAGMENT = re.compile(r"-[a-f0-9]{7,}")

# Substring lookup walks this in declaration order and the first hit wins,
# so broader keys shadow the more specific ones declared after them.
KNOWN_MODELS: tuple[tuple[str, str], ...] = (
    ("kimi", "Kimi"),
    ("kimi-for-coding", "Kimi"),
    ("k2p5", "K2.5"),
    ("claude", "Claude"),
    ("claude-3", "Claude 3"),
    ("claude-3-5-sonnet", "Claude 3.5 Sonnet"),
    ("claude-3-5-sonnet-20241022", "Claude 3.5 Sonnet"),
    ("gpt-4", "GPT-4"),
    ("gpt-4o", "GPT-4o"),
    ("gpt-4o-mini", "GPT-4o Mini"),
    ("gemini", "Gemini"),
    ("gemini-pro", "Gemini Pro"),
    ("gemini-ultra", "Gemini Ultra"),
)
_EXACT = dict(KNOWN_MODELS)


def format_identity(identity: ModelIdentity | None) -> str:
    """Map a model identity to its display name.

    Accepts a plain model id, a ``ModelRef``, a host mapping with
    ``providerID``/``modelID`` keys, an object exposing ``model_id`` or a
    ``(provider, model)`` pair. Never raises.
    """

    model_id = model_id_of(identity)
    if not model_id:
        return UNKNOWN_MODEL
    return format_model_id(model_id)


def model_id_of(identity: ModelIdentity | None) -> str | None:
    """Pick the model identifier out of any supported identity shape."""

    if identity is None:
        return None
    if isinstance(identity, str):
        return identity
    if isinstance(identity, ModelRef):
        return identity.model_id
    if isinstance(identity, Mapping):
        value = identity.get("modelID", identity.get("model_id"))
    elif isinstance(identity, Sequence) and len(identity) == 2:
        value = identity[1]
    else:
        value = getattr(identity, "model_id", getattr(identity, "modelID", None))
    if value is None:
        return None
    return str(value)


def format_model_id(model_id: str) -> str:
    clean = normalize_model_id(model_id)
    if not clean:
        return UNKNOWN_MODEL

    exact = _EXACT.get(clean)
    if exact is not None:
        return exact

    lowered = clean.casefold()
    for key, display in KNOWN_MODELS:
        if key.casefold() in lowered:
            return display

    return clean[0].upper() + clean[1:]


def normalize_model_id(model_id: str) -> str:
    """Strip date and hash fragments, and turn ``@`` into ``/``."""

    clean = _DATE_FRAGMENT.sub("", model_id)
    clean = _HASH_FRAGMENT.sub("", clean)
    return clean.replace("@", "/")
