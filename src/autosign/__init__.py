"""autosign - provenance signatures for AI-generated PRs, issues and commits."""

from autosign.framework import SignatureHost
from autosign.naming import format_identity
from autosign.rewriter import rewrite_command
from autosign.session import SessionContext
from autosign.signature import has_signature, render_signature

__version__ = "0.1.0"

__all__ = [
    "SessionContext",
    "SignatureHost",
    "format_identity",
    "has_signature",
    "render_signature",
    "rewrite_command",
]
