import logging
from functools import lru_cache

from resume_analyzer.ai.config import load_ai_config
from resume_analyzer.ai.providers.openai_provider import OpenAIProvider
from resume_analyzer.ai.providers.unavailable_provider import UnavailableProvider
from resume_analyzer.ai.types import ChatCompletionClient

logger = logging.getLogger(__name__)


def build_ai_client() -> ChatCompletionClient:
    cfg = load_ai_config()

    if not cfg.enabled:
        return UnavailableProvider("AI augmentation is disabled.")

    if cfg.provider == "openai":
        if not cfg.api_key:
            logger.warning("ai_provider_unconfigured provider=openai reason=missing_api_key")
            return UnavailableProvider("OPENAI_API_KEY is missing.")
        return OpenAIProvider(
            model=cfg.model,
            api_key=cfg.api_key,
            base_url=cfg.base_url,
            timeout_s=cfg.timeout_s,
        )

    raise ValueError(f"Unsupported AI_PROVIDER='{cfg.provider}'")


@lru_cache(maxsize=1)
def get_ai_client() -> ChatCompletionClient:
    client = build_ai_client()
    logger.info("ai_client_selected available=%s", client.available)
    return client
