from __future__ import annotations

from collections import Counter

from resume_analyzer.core.config import ScoringPolicy, get_scoring_policy
from resume_analyzer.schemas import SkillMatch
from resume_analyzer.taxonomy import TaxonomyProvider, get_default_taxonomy_provider


def confidence_for(frequency: int, policy: ScoringPolicy) -> int:
    """Saturating confidence curve: one mention is moderate, repetition raises it up to the cap."""
    curve = policy.confidence
    if frequency <= 0:
        return 0
    return min(curve.max, curve.base + curve.per_mention * frequency)


def match_skills(
    text: str,
    *,
    taxonomy: TaxonomyProvider | None = None,
    policy: ScoringPolicy | None = None,
) -> list[SkillMatch]:
    taxonomy = taxonomy or get_default_taxonomy_provider()
    policy = policy or get_scoring_policy()
    text = text or ""
    if not text.strip():
        return []

    entries = taxonomy.entries()
    # Longest spans claim their text first so "SQL Server" is not also counted as "SQL".
    spans = sorted(
        (
            (match.start(), match.end(), order)
            for order, entry in enumerate(entries)
            for match in entry.pattern.finditer(text)
        ),
        key=lambda span: (span[0] - span[1], span[0], span[2]),
    )
    claimed = bytearray(len(text))
    frequencies: Counter[int] = Counter()
    for start, end, order in spans:
        if any(claimed[start:end]):
            continue
        claimed[start:end] = b"\x01" * (end - start)
        frequencies[order] += 1

    matches: list[SkillMatch] = []
    for order, frequency in frequencies.items():
        entry = entries[order]
        matches.append(
            SkillMatch(
                name=entry.name,
                category=entry.category,
                confidence_level=confidence_for(frequency, policy),
                frequency=frequency,
                in_demand=entry.in_demand,
            )
        )

    matches.sort(key=lambda skill: (-skill.confidence_level, -skill.frequency, skill.name.lower()))
    return matches
