from datetime import datetime
from typing import Callable

from loguru import logger

from app.llm.client import ModelClient
from app.llm.errors import AssistantError, MissingAPIKeyError
from app.llm.parser import parse_reply
from app.llm.prompts import MAX_CONTEXT_TASKS, build_context_prompt, build_system_prompt
from app.models.actions import ChatReply, ContextSnapshot, NoAction

MISSING_KEY_REPLY = (
    "Peço perdão, Senhor, mas minha central de inteligência ainda não foi "
    "configurada. Solicite ao administrador que cadastre a chave de acesso."
)
FALLBACK_REPLY = (
    "Peço perdão, Senhor. Meus circuitos de processamento encontraram uma "
    "interferência. Poderia repetir?"
)


def missing_key_reply() -> ChatReply:
    return ChatReply(reply=MISSING_KEY_REPLY, action=NoAction())


def fallback_reply() -> ChatReply:
    return ChatReply(reply=FALLBACK_REPLY, action=NoAction())


class ChatAssistant:
    """Turns one chat message into a ChatReply. Never raises."""

    def __init__(
        self,
        client: ModelClient,
        clock: Callable[[], datetime] = datetime.now,
        max_context_tasks: int = MAX_CONTEXT_TASKS,
    ):
        self.client = client
        self.clock = clock
        self.max_context_tasks = max_context_tasks

    def send_message(
        self, user_message: str, snapshot: ContextSnapshot | None = None
    ) -> ChatReply:
        if not self.client.configured:
            logger.warning("Chat turn skipped [kind=config]: no AI key configured")
            return missing_key_reply()

        try:
            system_prompt = build_system_prompt(self.clock())
            context_prompt = build_context_prompt(
                user_message, snapshot, max_tasks=self.max_context_tasks
            )
            raw = self.client.complete(system_prompt, context_prompt)
            reply = parse_reply(raw)
        except MissingAPIKeyError:
            logger.warning("Chat turn skipped [kind=config]: no AI key configured")
            return missing_key_reply()
        except AssistantError as e:
            logger.error("Chat turn failed [kind={}]: {}", e.kind, e.message)
            return fallback_reply()
        except Exception as e:
            logger.exception("Chat turn failed [kind=unexpected]: {}", e)
            return fallback_reply()

        logger.info("Chat turn parsed: action={}", reply.action_type)
        return reply
