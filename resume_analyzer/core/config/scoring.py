from __future__ import annotations

import math
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .settings import settings

_DEFAULT_SCORING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "data" / "scoring.yaml"
_SCORING_CONFIG_CACHE: dict[str, Any] | None = None
_SCORING_POLICY_CACHE: "ScoringPolicy | None" = None


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class OverallWeights(_Frozen):
    ats: float = Field(ge=0.0, le=1.0)
    completeness: float = Field(ge=0.0, le=1.0)
    keyword: float = Field(ge=0.0, le=1.0)
    formatting: float = Field(ge=0.0, le=1.0)

    @model_validator(mode="after")
    def _weights_sum_to_one(self) -> "OverallWeights":
        total = self.ats + self.completeness + self.keyword + self.formatting
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            raise ValueError(f"overall weights must sum to 1.0, got {total}")
        return self


class SectionWeights(_Frozen):
    contact: float = Field(ge=0.0)
    summary: float = Field(ge=0.0)
    experience: float = Field(ge=0.0)
    education: float = Field(ge=0.0)
    skills: float = Field(ge=0.0)

    @model_validator(mode="after")
    def _positive_total(self) -> "SectionWeights":
        if self.contact + self.summary + self.experience + self.education + self.skills <= 0:
            raise ValueError("section weights must not all be zero")
        return self


class CompletenessPolicy(_Frozen):
    section_weights: SectionWeights


class ConfidencePolicy(_Frozen):
    base: int = Field(ge=0, le=100)
    per_mention: int = Field(gt=0)
    max: int = Field(ge=0, le=100)


class KeywordPolicy(_Frozen):
    saturation: int = Field(gt=0)
    in_demand_weight: float = Field(ge=0.0, le=1.0)
    other_weight: float = Field(ge=0.0, le=1.0)
    curve_exponent: float = Field(gt=0.0, le=1.0)


class FormattingPolicy(_Frozen):
    bullet_points: float
    target_bullet_density: float = Field(gt=0.0, le=1.0)
    action_verb_points: float
    target_action_verb_ratio: float = Field(gt=0.0, le=1.0)
    dates_points: float
    headings_points: float
    min_headings: int = Field(ge=0)
    min_words: int = Field(ge=0)
    short_text_multiplier: float = Field(ge=0.0, le=1.0)
    wall_of_text_words: int = Field(gt=0)
    wall_of_text_penalty: float = Field(ge=0.0)


class AtsPolicy(_Frozen):
    completeness_weight: float = Field(ge=0.0, le=1.0)
    skills_section_points: float
    cleanliness_points: float
    dates_points: float
    special_char_tolerance: int = Field(gt=0)
    table_line_penalty: float = Field(ge=0.0)


class PriorityThresholds(_Frozen):
    high: float
    medium: float

    @model_validator(mode="after")
    def _ordered(self) -> "PriorityThresholds":
        if self.medium > self.high:
            raise ValueError("medium priority threshold must not exceed the high threshold")
        return self


class RuleThresholds(_Frozen):
    ats: float
    keyword: float
    formatting: float
    bullet_density: float
    action_verb_ratio: float


class RecommendationPolicy(_Frozen):
    priority: PriorityThresholds
    thresholds: RuleThresholds


class NarrativeBands(_Frozen):
    strong: float
    moderate: float


class SummaryPolicy(_Frozen):
    strength_threshold: float
    weakness_threshold: float
    narrative_bands: NarrativeBands


class ScoringPolicy(_Frozen):
    """Every weight and threshold the deterministic engine uses, pinned to a version."""

    version: str
    overall_weights: OverallWeights
    completeness: CompletenessPolicy
    confidence: ConfidencePolicy
    keyword: KeywordPolicy
    formatting: FormattingPolicy
    ats: AtsPolicy
    recommendations: RecommendationPolicy
    summaries: SummaryPolicy


def _scoring_config_path() -> Path:
    if settings.scoring_config_path:
        return Path(settings.scoring_config_path)
    return _DEFAULT_SCORING_CONFIG_PATH


def _read_scoring_config(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise RuntimeError(f"Scoring config not found at '{path}'.")

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise RuntimeError(f"Failed to read scoring config '{path}': {exc}") from exc

    try:
        parsed = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise RuntimeError(f"Invalid YAML in scoring config '{path}': {exc}") from exc

    if not isinstance(parsed, dict):
        raise RuntimeError(f"Invalid scoring config '{path}': expected a top-level mapping.")
    return parsed


def load_scoring_policy(path: str | Path) -> ScoringPolicy:
    """Parse and validate a scoring policy file without touching the process-wide cache."""
    config_path = Path(path)
    try:
        return ScoringPolicy.model_validate(_read_scoring_config(config_path))
    except ValidationError as exc:
        raise RuntimeError(f"Invalid scoring config '{config_path}': {exc}") from exc


def get_scoring_config() -> dict[str, Any]:
    """Load the raw scoring config mapping and cache it."""
    global _SCORING_CONFIG_CACHE

    if _SCORING_CONFIG_CACHE is None:
        _SCORING_CONFIG_CACHE = _read_scoring_config(_scoring_config_path())
    return _SCORING_CONFIG_CACHE


def get_scoring_policy() -> ScoringPolicy:
    global _SCORING_POLICY_CACHE

    if _SCORING_POLICY_CACHE is None:
        try:
            _SCORING_POLICY_CACHE = ScoringPolicy.model_validate(get_scoring_config())
        except ValidationError as exc:
            raise RuntimeError(f"Invalid scoring config '{_scoring_config_path()}': {exc}") from exc
    return _SCORING_POLICY_CACHE


def get_scoring_value(path: str, default: Any = None) -> Any:
    """Get nested config value using dot path notation, e.g. 'overall_weights.ats'."""
    if not path:
        return default

    current: Any = get_scoring_config()
    for key in path.split("."):
        if not isinstance(current, dict):
            return default
        if key not in current:
            return default
        current = current[key]
    return current
