from loguru import logger
from openai import OpenAI, OpenAIError

from app.llm.errors import MissingAPIKeyError, ModelTransportError

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


class ModelClient:
    """One JSON-mode chat completion per call, no retries, no streaming."""

    def __init__(
        self,
        api_key: str | None,
        model: str,
        base_url: str = OPENROUTER_BASE_URL,
        temperature: float = 0.1,
    ):
        self.model = model
        self.temperature = temperature
        self.client = (
            OpenAI(base_url=base_url, api_key=api_key, max_retries=0)
            if api_key
            else None
        )

    @property
    def configured(self) -> bool:
        return self.client is not None

    def complete(self, system_prompt: str, context_prompt: str) -> str:
        if self.client is None:
            raise MissingAPIKeyError()

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": context_prompt},
                ],
                temperature=self.temperature,
                response_format={"type": "json_object"},
            )
        except OpenAIError as e:
            raise ModelTransportError(f"{type(e).__name__}: {e}") from e

        if not response.choices or not response.choices[0].message.content:
            raise ModelTransportError("Provider returned an empty completion")

        raw = response.choices[0].message.content
        logger.debug("LLM raw response: {}", raw)
        return raw
