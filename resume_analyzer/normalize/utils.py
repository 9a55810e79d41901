from __future__ import annotations

import re

_BULLET_CHARS = "•◦▪▫●○■□◆◇▶►-–—*·✓✔➢➤"
_BULLET_PATTERN = re.compile(rf"^\s*(?:[{re.escape(_BULLET_CHARS)}]|(?:\d+[\.\)]))\s+")
_EMAIL_RE = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
_PHONE_CANDIDATE_RE = re.compile(r"\+?\(?\d[\d \t().-]{7,}\d")
_YEAR_RE = re.compile(r"\b(?:19|20)\d{2}\b")
_MONTH_YEAR_RE = re.compile(
    r"\b(?:jan|feb|mar|apr|may|jun|jul|aug|sep|sept|oct|nov|dec)[a-z]*\.?\s+(?:19|20)\d{2}\b",
    re.IGNORECASE,
)
_METRIC_RE = re.compile(r"\d+(?:[.,]\d+)?\s*(?:%|percent|x\b|k\b|m\b)|[$€£]\s?\d")
_WORD_RE = re.compile(r"[A-Za-z0-9][A-Za-z0-9+#.'/-]*")

ACTION_VERBS = frozenset(
    {
        "accelerated", "achieved", "administered", "analyzed", "architected", "automated",
        "built", "collaborated", "completed", "coordinated", "created", "cut", "decreased",
        "delivered", "deployed", "designed", "developed", "directed", "drove", "engineered",
        "established", "executed", "expanded", "generated", "grew", "headed", "implemented",
        "improved", "increased", "initiated", "introduced", "launched", "led", "managed",
        "mentored", "migrated", "modernized", "negotiated", "optimized", "orchestrated",
        "organized", "oversaw", "owned", "pioneered", "planned", "produced", "redesigned",
        "reduced", "refactored", "resolved", "scaled", "secured", "shipped", "simplified",
        "spearheaded", "streamlined", "supervised", "supported", "trained", "transformed",
    }
)

# Characters that commonly garble ATS parsers: table pipes, tabs, box drawing,
# icon-font glyphs and emoji.
_ATS_HOSTILE_RANGES = (
    (0x2500, 0x257F),
    (0xE000, 0xF8FF),
    (0x1F000, 0x1FAFF),
)
_ATS_HOSTILE_CHARS = frozenset("|\t")


def normalize_line(line: str) -> str:
    return re.sub(r"\s+", " ", line).strip()


def words(text: str) -> list[str]:
    return _WORD_RE.findall(text or "")


def is_bullet_like(line: str) -> bool:
    return bool(_BULLET_PATTERN.match(line))


def strip_bullet_prefix(line: str) -> str:
    return _BULLET_PATTERN.sub("", line).strip()


def starts_with_action_verb(line: str) -> bool:
    tokens = words(strip_bullet_prefix(line))
    return bool(tokens) and tokens[0].lower() in ACTION_VERBS


def has_email(text: str) -> bool:
    return bool(_EMAIL_RE.search(text))


def has_phone(text: str) -> bool:
    for match in _PHONE_CANDIDATE_RE.finditer(text):
        groups = re.findall(r"\d+", match.group(0))
        # A run of years ("2015 2016 2017") is a timeline, not a number.
        if all(_YEAR_RE.fullmatch(group) for group in groups):
            continue
        digits = sum(len(group) for group in groups)
        if 10 <= digits <= 15:
            return True
    return False


def has_dates(text: str) -> bool:
    return bool(_YEAR_RE.search(text) or _MONTH_YEAR_RE.search(text))


def has_metrics(text: str) -> bool:
    return bool(_METRIC_RE.search(text))


def is_ats_hostile_char(char: str) -> bool:
    if char in _ATS_HOSTILE_CHARS:
        return True
    code = ord(char)
    return any(low <= code <= high for low, high in _ATS_HOSTILE_RANGES)


def count_ats_hostile_chars(text: str) -> int:
    return sum(1 for char in text if is_ats_hostile_char(char))


def is_table_like(line: str) -> bool:
    return line.count("|") >= 2 or line.count("\t") >= 2
