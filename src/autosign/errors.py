"""Application-level exception types for autosign."""

from __future__ import annotations


class AutosignError(Exception):
    """Base exception for autosign."""


class ConfigurationError(AutosignError):
    """Raised for invalid settings."""


class EventPayloadError(AutosignError):
    """Raised when a host event payload cannot be interpreted."""
