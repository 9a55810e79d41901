from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    log_level: str
    sentry_dsn: str | None
    rate_limit: str
    rate_limit_enabled: bool
    llm_rate_limit: str
    cors_allowed_origins: tuple[str, ...]
    analysis_db_path: str
    analysis_list_limit: int
    max_upload_bytes: int
    ai_enabled: bool
    augmentation_deadline_s: float
    augmentation_max_resume_chars: int
    augmentation_max_context_chars: int
    augmentation_max_job_chars: int
    scoring_config_path: str | None


settings = Settings(
    log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
    sentry_dsn=_get_env("SENTRY_DSN"),
    rate_limit=_get_env("RATE_LIMIT", "60/minute") or "60/minute",
    rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
    llm_rate_limit=_get_env("LLM_RATE_LIMIT", "20/minute") or "20/minute",
    cors_allowed_origins=_get_env_list(
        "CORS_ALLOWED_ORIGINS",
        [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:3000",
        ],
    ),
    analysis_db_path=_get_env("ANALYSIS_DB_PATH", "data/analyses.db") or "data/analyses.db",
    analysis_list_limit=_get_env_int("ANALYSIS_LIST_LIMIT", 50),
    max_upload_bytes=_get_env_int("MAX_UPLOAD_BYTES", 5 * 1024 * 1024),
    ai_enabled=_get_env_bool("AI_ENABLED", True),
    augmentation_deadline_s=_get_env_float("AUGMENTATION_DEADLINE_S", 20.0),
    augmentation_max_resume_chars=_get_env_int("AUGMENTATION_MAX_RESUME_CHARS", 2000),
    augmentation_max_context_chars=_get_env_int("AUGMENTATION_MAX_CONTEXT_CHARS", 1000),
    augmentation_max_job_chars=_get_env_int("AUGMENTATION_MAX_JOB_CHARS", 4000),
    scoring_config_path=_get_env("SCORING_CONFIG_PATH"),
)

if settings.augmentation_deadline_s <= 0:
    raise RuntimeError("AUGMENTATION_DEADLINE_S must be a positive number of seconds.")
