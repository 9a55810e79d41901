from __future__ import annotations

import re

from resume_analyzer.normalize.utils import (
    count_ats_hostile_chars,
    has_dates,
    has_email,
    has_metrics,
    has_phone,
    is_bullet_like,
    is_table_like,
    normalize_line,
    starts_with_action_verb,
    words,
)
from resume_analyzer.schemas import SectionSignals

SECTION_HEADINGS: dict[str, tuple[str, ...]] = {
    "summary": (
        "summary",
        "professional summary",
        "career summary",
        "executive summary",
        "objective",
        "career objective",
        "profile",
        "professional profile",
        "about me",
    ),
    "experience": (
        "experience",
        "work experience",
        "professional experience",
        "relevant experience",
        "work history",
        "employment history",
        "employment",
        "career history",
    ),
    "education": (
        "education",
        "education and training",
        "academic background",
        "academic history",
        "qualifications",
    ),
    "skills": (
        "skills",
        "technical skills",
        "key skills",
        "core skills",
        "core competencies",
        "competencies",
        "technologies",
        "tech stack",
    ),
}

_OTHER_HEADINGS = (
    "projects",
    "certifications",
    "awards",
    "publications",
    "languages",
    "interests",
    "volunteering",
    "references",
    "contact",
)


def _heading_pattern(phrases: tuple[str, ...]) -> re.Pattern[str]:
    ordered = sorted(phrases, key=len, reverse=True)
    alternation = "|".join(re.escape(phrase) for phrase in ordered)
    # A bare heading line, optionally markdown-prefixed, or "Heading: inline content".
    # One joined word is allowed, as in "Skills & Tools" or "Skills and Abilities".
    return re.compile(
        rf"^(?:#{{1,3}}\s*)?(?:{alternation})(?:\s*(?:&|\band\b)\s*[A-Za-z]+)?\s*(?:[:\-–]\s*(?P<rest>.*))?$",
        re.IGNORECASE,
    )


_SECTION_PATTERNS = {name: _heading_pattern(phrases) for name, phrases in SECTION_HEADINGS.items()}
_OTHER_PATTERN = _heading_pattern(_OTHER_HEADINGS)
_FRAGMENT_MAX_WORDS = 25


def match_heading(line: str) -> tuple[str | None, str]:
    """Return (section name, inline remainder) for a heading line, or (None, line)."""
    stripped = normalize_line(line)
    for name, pattern in _SECTION_PATTERNS.items():
        match = pattern.match(stripped)
        if match:
            return name, (match.group("rest") or "").strip()
    match = _OTHER_PATTERN.match(stripped)
    if match:
        return "other", (match.group("rest") or "").strip()
    return None, stripped


def _is_declarative_fragment(line: str) -> bool:
    return starts_with_action_verb(line) and len(words(line)) <= _FRAGMENT_MAX_WORDS


def analyze_sections(text: str) -> SectionSignals:
    text = text or ""
    found: set[str] = set()
    body_lines: list[str] = []
    experience_lines: list[str] = []
    current: str | None = None

    for raw_line in text.splitlines():
        line = normalize_line(raw_line)
        if not line:
            continue
        section, rest = match_heading(line)
        if section is not None:
            current = section
            if section != "other":
                found.add(section)
            if not rest:
                continue
            line = rest
        body_lines.append(line)
        if current == "experience":
            experience_lines.append(line)

    bullet_lines = sum(1 for line in body_lines if is_bullet_like(line) or _is_declarative_fragment(line))
    verb_lines = sum(1 for line in experience_lines if starts_with_action_verb(line))
    email = has_email(text)
    phone = has_phone(text)

    return SectionSignals(
        has_contact_info=email or phone,
        has_email=email,
        has_phone=phone,
        has_summary="summary" in found,
        has_experience="experience" in found,
        has_education="education" in found,
        has_skills_section="skills" in found,
        bullet_density=bullet_lines / len(body_lines) if body_lines else 0.0,
        action_verb_ratio=verb_lines / len(experience_lines) if experience_lines else 0.0,
        has_dates=has_dates(text),
        has_metrics=has_metrics(text),
        section_count=len(found),
        word_count=len(words(text)),
        line_count=len(body_lines),
        longest_line_words=max((len(words(line)) for line in body_lines), default=0),
        special_char_count=count_ats_hostile_chars(text),
        table_line_count=sum(1 for line in text.splitlines() if is_table_like(line)),
    )
