"""Engine settings loaded from config.toml."""
from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config.toml"


class EngineSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    default_proficiency_bonus: int = Field(default=2, ge=0)
    proficiency_by_level: bool = False
    catalog_dir: Optional[Path] = None
    log_level: str = "WARNING"

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> EngineSettings:
        rules = config.get("rules", {})
        content = config.get("content", {})
        log_cfg = config.get("logging", {})
        values: dict[str, Any] = {
            "default_proficiency_bonus": rules.get("default_proficiency_bonus", 2),
            "proficiency_by_level": rules.get("proficiency_by_level", False),
            "log_level": log_cfg.get("level", "WARNING"),
        }
        if content.get("catalog_dir"):
            values["catalog_dir"] = Path(content["catalog_dir"])
        return cls.model_validate(values)


def _load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load config.toml (project root by default). Missing file means defaults."""
    path = config_path or DEFAULT_CONFIG_PATH
    if path.exists():
        with open(path, "rb") as f:
            return tomllib.load(f)
    logger.debug("No config file at %s, using defaults.", path)
    return {}


def load_settings(config_path: Path | None = None) -> EngineSettings:
    return EngineSettings.from_config(_load_config(config_path))
