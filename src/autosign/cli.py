"""autosign command line interface."""

from __future__ import annotations

import json
import sys
from typing import Any

import typer

from autosign.config import Settings, get_settings
from autosign.errors import ConfigurationError
from autosign.framework import SignatureHost
from autosign.logging_utils import configure_logging
from autosign.naming import format_identity
from autosign.rewriter import rewrite_command
from autosign.session import SessionContext
from autosign.types import ModelIdentity, ModelRef

app = typer.Typer(name="autosign", help="Sign AI-generated PRs, issues and commits", add_completion=False)


def _settings(ctx: typer.Context) -> Settings:
    return ctx.obj if isinstance(ctx.obj, Settings) else get_settings()


def _identity(model: str | None, provider: str | None) -> ModelIdentity | None:
    if provider is not None:
        return ModelRef(provider_id=provider, model_id=model)
    return model


@app.callback()
def main(
    ctx: typer.Context,
    log_level: str | None = typer.Option(None, "--log-level", help="Override AUTOSIGN_LOG_LEVEL"),
) -> None:
    try:
        settings = get_settings()
    except ConfigurationError as exc:
        typer.echo(f"invalid configuration: {exc}", err=True)
        raise typer.Exit(code=2) from exc
    configure_logging(profile="cli", level=log_level or settings.log_level)
    ctx.obj = settings


@app.command("name")
def name(
    model: str = typer.Argument(..., help="Raw model identifier"),
    provider: str | None = typer.Option(None, "--provider", "-p", help="Provider identifier"),
) -> None:
    """Print the display name of a model."""

    typer.echo(format_identity(_identity(model, provider)))


@app.command("signature")
def signature(
    ctx: typer.Context,
    model: str = typer.Argument(..., help="Raw model identifier"),
    provider: str | None = typer.Option(None, "--provider", "-p", help="Provider identifier"),
) -> None:
    """Print the signature for a model."""

    session = SessionContext()
    session.update(_identity(model, provider))
    typer.echo(session.signature(_settings(ctx)))


@app.command("rewrite")
def rewrite(
    ctx: typer.Context,
    command: str = typer.Argument(..., help="Shell command line to sign"),
    model: str | None = typer.Option(None, "--model", "-m", help="Raw model identifier"),
    provider: str | None = typer.Option(None, "--provider", "-p", help="Provider identifier"),
) -> None:
    """Print a command line with the signature injected."""

    settings = _settings(ctx)
    session = SessionContext()
    if model:
        session.update(_identity(model, provider))
    typer.echo(rewrite_command(command, session.signature(settings), host_name=settings.host_name))


@app.command("hook")
def hook(ctx: typer.Context) -> None:
    """Sign one tool call read as JSON from stdin and print its arguments.

    Input: {"tool": "...", "args": {...}, "model": "..." | {"providerID": ..., "modelID": ...}}
    """

    try:
        payload: Any = json.load(sys.stdin)
    except json.JSONDecodeError as exc:
        typer.echo(f"invalid hook payload: {exc}", err=True)
        raise typer.Exit(code=2) from exc
    if not isinstance(payload, dict):
        typer.echo("invalid hook payload: expected a JSON object", err=True)
        raise typer.Exit(code=2)

    host = SignatureHost(_settings(ctx))
    host.load_plugins()
    if payload.get("model") is not None:
        host.on_chat_message({"model": payload["model"]})
    output = {"args": payload.get("args") or {}}
    host.on_tool_execute_before({"tool": payload.get("tool")}, output)
    typer.echo(json.dumps(output["args"], ensure_ascii=False))


@app.command("hooks")
def list_hooks(ctx: typer.Context) -> None:
    """Show hook implementation mapping."""

    host = SignatureHost(_settings(ctx))
    host.load_plugins()
    for hook_name, plugin_names in host.hook_report().items():
        typer.echo(f"{hook_name}: {', '.join(plugin_names)}")
