from __future__ import annotations
import logging
import tomllib
from pathlib import Path
from typing import Any

from rpg_rules.models.profiles import SpellProfile, WeaponProfile

logger = logging.getLogger(__name__)

CONTENT_DIR = Path(__file__).parent

def load_toml(filepath: Path) -> dict[str, Any]:
    with open(filepath, "rb") as f:
        return tomllib.load(f)


def load_all_weapons(content_dir: Path | None = None) -> dict[str, WeaponProfile]:
    """Load weapons.toml into profiles keyed by lower-cased name.

    Raises pydantic.ValidationError on malformed entries (bad dice notation included).
    """
    data = load_toml((content_dir or CONTENT_DIR) / "weapons.toml")
    weapons = {}
    for entry in data.get("weapons", []):
        profile = WeaponProfile.model_validate(entry)
        weapons[profile.name.lower()] = profile
    logger.info("Loaded %d weapon profiles.", len(weapons))
    return weapons


def load_all_spells(content_dir: Path | None = None) -> dict[str, SpellProfile]:
    """Load spells.toml into profiles keyed by lower-cased name."""
    data = load_toml((content_dir or CONTENT_DIR) / "spells.toml")
    spells = {}
    for entry in data.get("spells", []):
        profile = SpellProfile.model_validate(entry)
        spells[profile.name.lower()] = profile
    logger.info("Loaded %d spell profiles.", len(spells))
    return spells
