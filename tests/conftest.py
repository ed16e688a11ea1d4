from __future__ import annotations

from collections.abc import Iterator

import pytest
from loguru import logger

from autosign.framework import SignatureHost


@pytest.fixture
def host() -> SignatureHost:
    active = SignatureHost()
    active.on_chat_message({"model": {"providerID": "moonshot", "modelID": "kimi-for-coding"}})
    return active


@pytest.fixture
def log_messages() -> Iterator[list[str]]:
    messages: list[str] = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
