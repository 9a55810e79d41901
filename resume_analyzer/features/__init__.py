from .sections import SECTION_HEADINGS, analyze_sections, match_heading
from .skill_matcher import confidence_for, match_skills

__all__ = [
    "SECTION_HEADINGS",
    "analyze_sections",
    "match_heading",
    "confidence_for",
    "match_skills",
]
