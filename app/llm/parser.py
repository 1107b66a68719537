import json
import re

from pydantic import ValidationError

from app.llm.errors import ResponseParseError
from app.models.actions import ChatReply

_LEADING_FENCE = re.compile(r"^```[a-z]*[ \t]*\n?", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"\n?```$")


def strip_code_fences(raw: str) -> str:
    """Remove a surrounding ```json ... ``` block, if any."""
    text = raw.strip()
    text = _LEADING_FENCE.sub("", text, count=1)
    text = _TRAILING_FENCE.sub("", text, count=1)
    return text.strip()


def parse_reply(raw: str) -> ChatReply:
    text = strip_code_fences(raw)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ResponseParseError(f"Response is not valid JSON: {e}", raw=raw) from e

    if not isinstance(data, dict):
        raise ResponseParseError(
            f"Expected a JSON object, got {type(data).__name__}", raw=raw
        )

    try:
        return ChatReply.model_validate(data)
    except ValidationError as e:
        raise ResponseParseError(
            f"Response does not match the reply schema: {e.error_count()} error(s)",
            raw=raw,
        ) from e
