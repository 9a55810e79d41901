from typing import Literal, Optional, Protocol

ResponseFormat = Literal["text", "json"]


class ChatCompletionClient(Protocol):
    available: bool

    def complete_chat(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        max_tokens: int,
        temperature: float,
        response_format: Optional[ResponseFormat] = None,
        timeout_s: Optional[float] = None,
    ) -> str: ...
