from __future__ import annotations

from types import SimpleNamespace

import pytest

from autosign.config import Settings
from autosign.framework import BUILTIN_PLUGIN_NAME, SignatureHost
from fixtures_plugins.recording_hooks import (
    AsyncBrokenToolHooks,
    AsyncErrorObserver,
    AsyncTitleHooks,
    BrokenToolHooks,
    RecordingHooks,
)

KIMI_SIGNATURE = "🤖 Generated with [OpenCode](https://opencode.ai) (Kimi)"


def test_host_accepts_attribute_payloads() -> None:
    host = SignatureHost()
    host.on_chat_message(SimpleNamespace(model=SimpleNamespace(provider_id="moonshot", model_id="kimi")))
    output = SimpleNamespace(args={"command": 'git commit -m "fix bug"'})

    host.on_tool_execute_before(SimpleNamespace(tool="bash"), output)

    assert output.args["command"] == f'git commit -m "fix bug" -m "{KIMI_SIGNATURE}"'


def test_host_attaches_args_when_missing(host: SignatureHost) -> None:
    output: dict[str, object] = {}
    host.on_tool_execute_before({"tool": "github_create_pull_request"}, output)
    assert output == {"args": {"body": KIMI_SIGNATURE}}


@pytest.mark.parametrize(
    ("event", "output"),
    [
        ({}, {"args": {"body": "x"}}),
        ({"tool": None}, {"args": {"body": "x"}}),
        (None, {"args": {"body": "x"}}),
        ({"tool": "github_create_issue"}, {"args": "not a mapping"}),
        ({"tool": "github_create_issue"}, None),
        ({"tool": "github_create_issue"}, ("frozen",)),
    ],
)
def test_malformed_tool_events_are_no_ops(host: SignatureHost, event: object, output: object) -> None:
    host.on_tool_execute_before(event, output)
    if isinstance(output, dict) and isinstance(output.get("args"), dict):
        assert output["args"] == {"body": "x"}


def test_extra_plugins_observe_events(host: SignatureHost) -> None:
    recorder = RecordingHooks()
    host.register(recorder, name="test:recorder")

    host.on_chat_message({"model": "gpt-4o"})
    host.sign_tool_call("bash", {"command": "ls"})

    assert recorder.models == ["gpt-4o"]
    assert recorder.tools == ["bash"]
    assert host.session.display_name == "GPT-4o"


def test_broken_plugin_does_not_block_signing(host: SignatureHost, log_messages: list[str]) -> None:
    recorder = RecordingHooks()
    host.register(recorder, name="test:recorder")
    host.register(BrokenToolHooks(), name="test:broken")

    args = host.sign_tool_call("github_create_issue", {"body": "x"})

    assert args["body"] == f"x\n\n{KIMI_SIGNATURE}"
    assert [stage for stage, _ in recorder.errors] == ["tool_execute_before:test:broken"]
    assert str(recorder.errors[0][1]) == "github_create_issue broke on purpose"
    assert "hook.failed hook=tool_execute_before plugin=test:broken" in log_messages


def test_async_plugin_is_skipped_on_sync_path(host: SignatureHost, log_messages: list[str]) -> None:
    host.register(AsyncTitleHooks(), name="test:async")

    args = host.sign_tool_call("github_create_issue", {"title": "Bug"})

    assert args == {"title": "Bug", "body": KIMI_SIGNATURE}
    assert "hook.async_not_supported hook=tool_execute_before plugin=test:async" in log_messages


@pytest.mark.asyncio
async def test_async_host_path_runs_sync_and_async_plugins(host: SignatureHost) -> None:
    host.register(AsyncTitleHooks(), name="test:async")
    output = {"args": {"title": "Bug"}}

    await host.on_chat_message_async({"model": "gemini"})
    await host.on_tool_execute_before_async({"tool": "MCP_DOCKER_create_issue"}, output)

    assert output["args"] == {
        "title": "[MCP_DOCKER_create_issue] Bug",
        "body": "🤖 Generated with [OpenCode](https://opencode.ai) (Gemini)",
    }


@pytest.mark.asyncio
async def test_async_host_path_reports_failures_and_still_signs(host: SignatureHost, log_messages: list[str]) -> None:
    recorder = RecordingHooks()
    observer = AsyncErrorObserver()
    host.register(recorder, name="test:recorder")
    host.register(observer, name="test:observer")
    host.register(BrokenToolHooks(), name="test:broken")
    host.register(AsyncBrokenToolHooks(), name="test:async-broken")
    output = {"args": {"body": "x"}}

    run = await host.on_tool_execute_before_async({"tool": "github_create_issue"}, output)

    assert output["args"]["body"] == f"x\n\n{KIMI_SIGNATURE}"
    assert run is not None
    assert run.failed == ["test:async-broken", "test:broken"]
    assert BUILTIN_PLUGIN_NAME in run.called
    assert [stage for stage, _ in recorder.errors] == [
        "tool_execute_before:test:async-broken",
        "tool_execute_before:test:broken",
    ]
    assert str(recorder.errors[0][1]) == "github_create_issue broke asynchronously"
    stage, event = observer.seen[0]
    assert stage == "tool_execute_before:test:async-broken"
    assert event == {"tool": "github_create_issue", "args": output["args"]}
    assert len(observer.seen) == 2
    assert "hook.failed hook=tool_execute_before plugin=test:async-broken" in log_messages


def test_async_error_observer_is_skipped_on_sync_path(host: SignatureHost, log_messages: list[str]) -> None:
    observer = AsyncErrorObserver()
    host.register(observer, name="test:observer")
    host.register(BrokenToolHooks(), name="test:broken")

    run = host.on_tool_execute_before({"tool": "github_create_issue"}, {"args": {}})

    assert run is not None
    assert not run.ok
    assert observer.seen == []
    assert "hook.async_not_supported hook=on_error plugin=test:observer" in log_messages


@pytest.mark.asyncio
async def test_async_host_path_ignores_malformed_events(host: SignatureHost) -> None:
    await host.on_tool_execute_before_async({"tool": 42}, {"args": {"body": "x"}})
    await host.on_tool_execute_before_async({"tool": "bash"}, {"args": []})


def test_hook_report_lists_builtin_plugin() -> None:
    report = SignatureHost().hook_report()
    assert report["chat_message"] == [BUILTIN_PLUGIN_NAME]
    assert report["tool_execute_before"] == [BUILTIN_PLUGIN_NAME]


def test_load_plugins_can_be_disabled() -> None:
    host = SignatureHost(Settings(load_entrypoints=False))
    assert host.load_plugins() == 0


def test_load_plugins_reports_failures(monkeypatch: pytest.MonkeyPatch) -> None:
    host = SignatureHost()

    def _broken(group: str) -> int:
        raise ImportError(f"cannot load {group}")

    monkeypatch.setattr(host._plugin_manager, "load_setuptools_entrypoints", _broken)

    assert host.load_plugins() == 0
    assert host.failed_plugins == {"autosign": "cannot load autosign"}
