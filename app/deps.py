from datetime import datetime
from functools import lru_cache
from zoneinfo import ZoneInfo

from fastapi import Depends

from app.config import get_settings
from app.db.repository import AlfredStore, ConfigRepository
from app.llm.assistant import ChatAssistant
from app.llm.client import ModelClient
from app.services.dispatcher import ActionDispatcher

settings = get_settings()


def local_now() -> datetime:
    """Wall-clock time in the configured timezone, without tzinfo."""
    return datetime.now(ZoneInfo(settings.timezone)).replace(tzinfo=None)


@lru_cache
def get_store() -> AlfredStore:
    return AlfredStore(settings.db_path)


def resolve_api_key(store: AlfredStore) -> tuple[str | None, str]:
    """Admin-configured key first, then the environment."""
    stored = store.config.get(ConfigRepository.AI_KEY)
    if stored:
        return stored, "admin"
    if settings.openrouter_api_key:
        return settings.openrouter_api_key, "environment"
    return None, "none"


def build_assistant(store: AlfredStore) -> ChatAssistant:
    api_key, _ = resolve_api_key(store)
    client = ModelClient(
        api_key=api_key,
        model=settings.llm_model,
        base_url=settings.openrouter_base_url,
        temperature=settings.llm_temperature,
    )
    return ChatAssistant(
        client, clock=local_now, max_context_tasks=settings.recent_tasks_limit
    )


def build_dispatcher(store: AlfredStore) -> ActionDispatcher:
    return ActionDispatcher(
        store, default_category=settings.default_category, clock=local_now
    )


def get_assistant(store: AlfredStore = Depends(get_store)) -> ChatAssistant:
    return build_assistant(store)


def get_dispatcher(store: AlfredStore = Depends(get_store)) -> ActionDispatcher:
    return build_dispatcher(store)
