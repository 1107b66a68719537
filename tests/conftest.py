"""
Shared pytest fixtures.

Each test gets its own TinyDB file under tmp_path and a fake model client,
so no provider key or network access is required.
"""
import json
from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from app.db.repository import AlfredStore
from app.deps import get_assistant, get_dispatcher, get_store
from app.llm.assistant import ChatAssistant
from app.services.dispatcher import ActionDispatcher
from main import app

FROZEN_NOW = datetime(2026, 10, 19, 9, 30)


class FakeModelClient:
    """Stands in for ModelClient: replays canned completions, records calls."""

    def __init__(self, responses=None, error=None, configured=True):
        self.responses = list(responses or [])
        self.error = error
        self._configured = configured
        self.calls = []

    @property
    def configured(self) -> bool:
        return self._configured

    def complete(self, system_prompt: str, context_prompt: str) -> str:
        self.calls.append((system_prompt, context_prompt))
        if self.error is not None:
            raise self.error
        return self.responses.pop(0)


def model_reply(reply: str, action_type: str | None = None, payload=None) -> str:
    """Serialize a reply the way the model is asked to produce it."""
    data = {"reply": reply}
    if action_type is not None:
        data["action"] = {"type": action_type, "payload": payload}
    return json.dumps(data, ensure_ascii=False)


@pytest.fixture()
def store(tmp_path):
    s = AlfredStore(str(tmp_path / "alfred.json"))
    yield s
    s.close()


@pytest.fixture()
def fake_model():
    return FakeModelClient()


@pytest.fixture()
def assistant(fake_model):
    return ChatAssistant(fake_model, clock=lambda: FROZEN_NOW)


@pytest.fixture()
def dispatcher(store):
    return ActionDispatcher(store, default_category="Geral", clock=lambda: FROZEN_NOW)


@pytest.fixture()
def client(store, assistant, dispatcher):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_assistant] = lambda: assistant
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
