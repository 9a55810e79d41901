from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

RecommendationCategory = Literal["Content", "Formatting", "Keywords", "ATS Optimization"]
Priority = Literal["High", "Medium", "Low"]

PRIORITY_RANK: dict[str, int] = {"High": 3, "Medium": 2, "Low": 1}


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class SkillMatch(_Frozen):
    name: str
    category: str
    confidence_level: int = Field(ge=0, le=100)
    frequency: int = Field(ge=1)
    in_demand: bool = False


class SectionSignals(_Frozen):
    has_contact_info: bool = False
    has_email: bool = False
    has_phone: bool = False
    has_summary: bool = False
    has_experience: bool = False
    has_education: bool = False
    has_skills_section: bool = False
    bullet_density: float = Field(default=0.0, ge=0.0, le=1.0)
    action_verb_ratio: float = Field(default=0.0, ge=0.0, le=1.0)
    has_dates: bool = False
    has_metrics: bool = False
    section_count: int = Field(default=0, ge=0)
    word_count: int = Field(default=0, ge=0)
    line_count: int = Field(default=0, ge=0)
    longest_line_words: int = Field(default=0, ge=0)
    special_char_count: int = Field(default=0, ge=0)
    table_line_count: int = Field(default=0, ge=0)

    @property
    def is_empty(self) -> bool:
        return self.word_count == 0

    def missing_sections(self) -> list[str]:
        present = {
            "contact information": self.has_contact_info,
            "summary": self.has_summary,
            "experience": self.has_experience,
            "education": self.has_education,
            "skills": self.has_skills_section,
        }
        return [name for name, found in present.items() if not found]


class SubscoreSet(_Frozen):
    ats: float = Field(ge=0.0, le=100.0)
    completeness: float = Field(ge=0.0, le=100.0)
    keyword: float = Field(ge=0.0, le=100.0)
    formatting: float = Field(ge=0.0, le=100.0)


class Recommendation(_Frozen):
    title: str
    description: str
    category: RecommendationCategory
    priority: Priority
    impact_score: int = Field(ge=0, le=100)
    action_steps: str | None = None
    example: str | None = None


class Analysis(_Frozen):
    """Terminal result of one engine run. Re-analysis produces a new record."""

    id: str
    resume_id: str
    file_name: str = ""
    subscores: SubscoreSet
    overall_score: float = Field(ge=0.0, le=100.0)
    signals: SectionSignals
    strengths_summary: str | None = None
    weaknesses_summary: str | None = None
    narrative: str | None = None
    target_role: str | None = None
    industry: str | None = None
    skills: tuple[SkillMatch, ...] = ()
    recommendations: tuple[Recommendation, ...] = ()
    policy_version: str
    taxonomy_version: str
    analyzed_at: datetime = Field(default_factory=_utc_now)


class JobMatchResult(_Frozen):
    match_score: float = Field(default=0.0, ge=0.0, le=100.0)
    matching_keywords: tuple[str, ...] = ()
    missing_keywords: tuple[str, ...] = ()
    computed: bool = False
    verdict: str = ""

    def as_tuple(self) -> tuple[float, list[str], list[str]]:
        return self.match_score, list(self.matching_keywords), list(self.missing_keywords)


class ResumeRecord(_Frozen):
    id: str
    file_name: str
    file_type: str = ""
    file_size: int = Field(default=0, ge=0)
    extracted_text: str = ""
    uploaded_at: datetime = Field(default_factory=_utc_now)
