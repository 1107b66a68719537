from fastapi import APIRouter, Depends
from loguru import logger

from app.api import finance, lists, tasks
from app.db.repository import AlfredStore, ConfigRepository
from app.deps import get_assistant, get_dispatcher, get_store, resolve_api_key, settings
from app.llm.assistant import ChatAssistant
from app.models.schemas import AIKeyRequest, ChatMessage, ChatRequest, SystemConfigStatus
from app.services.chat import ChatTurn, run_chat_turn
from app.services.dispatcher import ActionDispatcher

router = APIRouter()
router.include_router(finance.router)
router.include_router(tasks.router)
router.include_router(lists.router)


@router.get("/health")
def health():
    return {"status": "online"}


@router.post("/chat", response_model=ChatTurn)
def chat(
    request: ChatRequest,
    store: AlfredStore = Depends(get_store),
    assistant: ChatAssistant = Depends(get_assistant),
    dispatcher: ActionDispatcher = Depends(get_dispatcher),
):
    logger.info("Chat message [{}]: {}", request.conversation, request.message)
    return run_chat_turn(
        request.message,
        store,
        assistant,
        dispatcher,
        conversation=request.conversation,
        task_limit=settings.recent_tasks_limit,
    )


@router.get("/chat/messages", response_model=list[ChatMessage])
def chat_messages(
    conversation: str = "web",
    limit: int | None = None,
    store: AlfredStore = Depends(get_store),
):
    return store.chat.history(conversation, limit=limit)


@router.get("/admin/config", response_model=SystemConfigStatus)
def get_config(store: AlfredStore = Depends(get_store)):
    api_key, source = resolve_api_key(store)
    return SystemConfigStatus(
        ai_key_configured=api_key is not None, source=source, model=settings.llm_model
    )


@router.put("/admin/config/ai-key", response_model=SystemConfigStatus)
def set_ai_key(request: AIKeyRequest, store: AlfredStore = Depends(get_store)):
    store.config.set(ConfigRepository.AI_KEY, request.api_key.strip())
    logger.info("AI key updated by admin")
    return get_config(store)


@router.delete("/admin/config/ai-key", response_model=SystemConfigStatus)
def clear_ai_key(store: AlfredStore = Depends(get_store)):
    if store.config.clear(ConfigRepository.AI_KEY):
        logger.info("AI key removed by admin")
    return get_config(store)
