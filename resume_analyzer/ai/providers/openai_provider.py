from __future__ import annotations

import logging
from typing import Any, Optional

import openai
from openai import OpenAI

from resume_analyzer.ai.types import ResponseFormat
from resume_analyzer.core.errors import AugmentationError, RateLimitError, TransportError

logger = logging.getLogger(__name__)


class OpenAIProvider:
    available = True

    def __init__(
        self,
        model: str,
        api_key: str,
        base_url: Optional[str] = None,
        timeout_s: float = 30.0,
    ):
        if not api_key:
            raise RuntimeError("OPENAI_API_KEY is missing")
        self._model = model
        # A failed attempt falls back immediately, so the SDK must not retry on its own.
        self._client = OpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout_s,
            max_retries=0,
        )

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
        create_kwargs: dict[str, Any] = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if response_format == "json":
            create_kwargs["response_format"] = {"type": "json_object"}
        if timeout_s is not None:
            create_kwargs["timeout"] = timeout_s

        try:
            response = self._client.chat.completions.create(**create_kwargs)
        except openai.RateLimitError as exc:
            raise RateLimitError(f"OpenAI rate limit reached: {exc}") from exc
        except openai.APITimeoutError as exc:
            raise TransportError(f"OpenAI request timed out: {exc}", code="llm_timeout") from exc
        except openai.APIError as exc:
            raise TransportError(f"OpenAI request failed: {exc}") from exc

        content = response.choices[0].message.content if response.choices else ""
        if not content or not content.strip():
            raise AugmentationError("OpenAI returned an empty completion.", code="llm_invalid")
        logger.debug("openai_completion model=%s chars=%s", self._model, len(content))
        return content.strip()
