"""Failure kinds of the chat pipeline.

None of these reach the user: the assistant collapses them into a fixed
apology and logs the `kind` so operators can tell them apart.
"""


class AssistantError(Exception):
    kind: str = "unexpected"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class MissingAPIKeyError(AssistantError):
    kind = "config"

    def __init__(self):
        super().__init__("No AI provider key is configured.")


class ModelTransportError(AssistantError):
    kind = "transport"


class ResponseParseError(AssistantError):
    kind = "parse"

    def __init__(self, message: str, raw: str | None = None):
        self.raw = raw
        super().__init__(message)
