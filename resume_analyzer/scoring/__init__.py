from .recommendations import RULES, Rule, generate_recommendations, priority_for
from .subscores import (
    ats_score,
    completeness_score,
    compute_subscores,
    formatting_score,
    keyword_score,
    overall_score,
    parse_cleanliness,
)

__all__ = [
    "RULES",
    "Rule",
    "generate_recommendations",
    "priority_for",
    "ats_score",
    "completeness_score",
    "compute_subscores",
    "formatting_score",
    "keyword_score",
    "overall_score",
    "parse_cleanliness",
]
