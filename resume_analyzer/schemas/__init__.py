from .analysis import (
    PRIORITY_RANK,
    Analysis,
    JobMatchResult,
    Recommendation,
    ResumeRecord,
    SectionSignals,
    SkillMatch,
    SubscoreSet,
)

__all__ = [
    "PRIORITY_RANK",
    "Analysis",
    "JobMatchResult",
    "Recommendation",
    "ResumeRecord",
    "SectionSignals",
    "SkillMatch",
    "SubscoreSet",
]
