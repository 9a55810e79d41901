from __future__ import annotations

from slowapi import Limiter
from slowapi.util import get_remote_address

from resume_analyzer.core.config import settings

limiter = Limiter(key_func=get_remote_address)

# Routes that may call the language model get a tighter budget.
_LIMITS = {
    "default": settings.rate_limit,
    "llm": settings.llm_rate_limit,
}


def rate_limit(scope: str = "default"):
    if scope not in _LIMITS:
        raise ValueError(f"Unknown rate limit scope '{scope}'")
    if settings.rate_limit_enabled:
        return limiter.limit(_LIMITS[scope])

    def decorator(func):
        return func

    return decorator
