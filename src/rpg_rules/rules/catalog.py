"""Read-only weapon and spell tables with substring-tolerant lookup."""
from __future__ import annotations

import logging
import re
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping, TypeVar

from rpg_rules.content.loader import load_all_spells, load_all_weapons
from rpg_rules.models.profiles import UNARMED_STRIKE, SpellProfile, WeaponProfile

logger = logging.getLogger(__name__)

_P = TypeVar("_P", WeaponProfile, SpellProfile)


def _key_patterns(keys: Iterable[str]) -> list[tuple[str, re.Pattern[str]]]:
    # Longest key first so "greatclub" is preferred over "club".
    # A key must not start mid-word: "glances" does not match "lance".
    return [
        (key, re.compile(r"(?<![a-z])" + re.escape(key)))
        for key in sorted(keys, key=len, reverse=True)
    ]


class RulesCatalog:
    """Immutable weapon/spell tables, built once and shared by all resolutions."""

    def __init__(
        self,
        weapons: Mapping[str, WeaponProfile] | Iterable[WeaponProfile],
        spells: Mapping[str, SpellProfile] | Iterable[SpellProfile],
    ):
        self._weapons = MappingProxyType(self._keyed(weapons))
        self._spells = MappingProxyType(self._keyed(spells))
        self._weapon_keys = _key_patterns(self._weapons)
        self._spell_keys = _key_patterns(self._spells)

    @staticmethod
    def _keyed(profiles: Mapping[str, _P] | Iterable[_P]) -> dict[str, _P]:
        if isinstance(profiles, Mapping):
            return {k.lower(): v for k, v in profiles.items()}
        return {p.name.lower(): p for p in profiles}

    @classmethod
    def from_content(cls, content_dir: Path | None = None) -> RulesCatalog:
        """Build the catalog from the packaged TOML files (or an override directory)."""
        return cls(load_all_weapons(content_dir), load_all_spells(content_dir))

    @property
    def weapons(self) -> Mapping[str, WeaponProfile]:
        return self._weapons

    @property
    def spells(self) -> Mapping[str, SpellProfile]:
        return self._spells

    def find_weapon(self, text: str) -> WeaponProfile | None:
        return self._find(text, self._weapon_keys, self._weapons)

    def find_spell(self, text: str) -> SpellProfile | None:
        return self._find(text, self._spell_keys, self._spells)

    def weapon_or_unarmed(self, text: str | None) -> tuple[WeaponProfile, bool]:
        """Return (profile, found). Unknown or missing weapons fall back to Unarmed Strike."""
        weapon = self.find_weapon(text) if text else None
        if weapon is None:
            if text:
                logger.info("Unknown weapon %r, using Unarmed Strike", text)
            return UNARMED_STRIKE, False
        return weapon, True

    @staticmethod
    def _find(text: str, keys: list[tuple[str, re.Pattern[str]]], table: Mapping[str, _P]) -> _P | None:
        lowered = text.lower()
        for key, pattern in keys:
            if pattern.search(lowered):
                return table[key]
        return None
