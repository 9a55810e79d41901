from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

from .provider import SkillEntry, TaxonomyProvider

# Word characters plus the symbols that appear inside skill names (C#, C++, .NET, CI/CD).
_LEFT_GUARD = r"(?<![A-Za-z0-9_+#.])"
_RIGHT_GUARD = r"(?![A-Za-z0-9_+#])"


def _alias_pattern(alias: str) -> str:
    # Aliases that open with a symbol (".NET") may follow a word, as in "VB.NET".
    left = _LEFT_GUARD if alias[:1].isalnum() else ""
    return left + re.escape(alias)


def _compile_aliases(aliases: tuple[str, ...]) -> re.Pattern[str]:
    ordered = sorted(aliases, key=len, reverse=True)
    alternation = "|".join(_alias_pattern(alias) for alias in ordered)
    return re.compile(rf"(?:{alternation}){_RIGHT_GUARD}", re.IGNORECASE)


class LocalTaxonomy(TaxonomyProvider):
    def __init__(self, skills_path: str | Path | None = None) -> None:
        path = Path(skills_path) if skills_path else Path(__file__).with_name("skills.json")
        raw = self._load_raw(path)
        self.version = str(raw.get("version", "0"))
        self._entries = self._build_entries(raw.get("skills") or [])
        self._aliases = {
            alias.strip().lower(): entry.name
            for entry in self._entries
            for alias in (entry.name, *entry.aliases)
        }

    @staticmethod
    def _load_raw(path: Path) -> dict[str, Any]:
        with path.open("r", encoding="utf-8") as handle:
            raw = json.load(handle)
        if not isinstance(raw, dict):
            raise RuntimeError(f"Invalid skill taxonomy '{path}': expected a top-level mapping.")
        return raw

    @staticmethod
    def _build_entries(items: list[dict[str, Any]]) -> tuple[SkillEntry, ...]:
        entries: list[SkillEntry] = []
        seen: set[str] = set()
        for item in items:
            name = str(item["name"]).strip()
            if name.lower() in seen:
                raise RuntimeError(f"Duplicate skill '{name}' in taxonomy.")
            seen.add(name.lower())
            aliases = tuple(str(alias).strip() for alias in item.get("aliases") or [name] if str(alias).strip())
            entries.append(
                SkillEntry(
                    name=name,
                    category=str(item.get("category") or "Other"),
                    aliases=aliases,
                    in_demand=bool(item.get("in_demand", False)),
                    pattern=_compile_aliases(aliases or (name,)),
                )
            )
        return tuple(entries)

    def entries(self) -> tuple[SkillEntry, ...]:
        return self._entries

    def normalize_skill(self, raw: str) -> tuple[str, str | None]:
        normalized = raw.strip().lower()
        return normalized, self._aliases.get(normalized)
