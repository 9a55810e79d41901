from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class SkillEntry:
    name: str
    category: str
    aliases: tuple[str, ...]
    in_demand: bool
    pattern: re.Pattern[str]


class TaxonomyProvider(Protocol):
    version: str

    def entries(self) -> tuple[SkillEntry, ...]:
        """Return every skill in the catalog, in catalog order."""

    def normalize_skill(self, raw: str) -> tuple[str, str | None]:
        """Return normalized text and the canonical skill name, if recognized."""
