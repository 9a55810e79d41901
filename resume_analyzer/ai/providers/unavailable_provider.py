from typing import Optional

from resume_analyzer.ai.types import ResponseFormat
from resume_analyzer.core.errors import AugmentationError


class UnavailableProvider:
    """Stand-in used when no language model is configured; every call fails fast."""

    available = False

    def __init__(self, reason: str = "AI augmentation is not configured."):
        self._reason = reason

    def complete_chat(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        max_tokens: int,
        temperature: float,
        response_format: Optional[ResponseFormat] = None,
        timeout_s: Optional[float] = None,
    ) -> str:
        raise AugmentationError(self._reason, code="llm_disabled")
