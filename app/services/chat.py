from loguru import logger
from pydantic import BaseModel

from app.db.repository import AlfredStore
from app.llm.assistant import ChatAssistant
from app.models.actions import ChatAction, ChatReply
from app.services.dispatcher import ActionDispatcher, DispatchResult


class ChatTurn(BaseModel):
    reply: str
    action: ChatAction | None = None
    dispatch: DispatchResult
    follow_up: str | None = None


def run_chat_turn(
    message: str,
    store: AlfredStore,
    assistant: ChatAssistant,
    dispatcher: ActionDispatcher,
    conversation: str = "web",
    task_limit: int = 5,
) -> ChatTurn:
    """One user message end to end: model, transcript, then dispatch.

    The transcript gets the user message and the assistant reply before the
    action is dispatched; a rejected dispatch does not amend the transcript.
    """
    snapshot = store.snapshot(task_limit)
    reply: ChatReply = assistant.send_message(message, snapshot)

    store.chat.append(conversation, "user", message)
    store.chat.append(conversation, "alfred", reply.reply)

    result = dispatcher.dispatch(reply.action)

    follow_up = None
    if result.status == "needs_clarification":
        follow_up = result.detail
        store.chat.append(conversation, "alfred", follow_up)
    elif result.status == "rejected":
        logger.info("Chat action for {} not applied: {}", conversation, result.detail)

    return ChatTurn(
        reply=reply.reply, action=reply.action, dispatch=result, follow_up=follow_up
    )
