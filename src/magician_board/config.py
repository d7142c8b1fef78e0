"""Configuration for the leaderboard and card pipeline."""

import json
import logging
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "MAGICIAN_BOARD_CONFIG"


class RarityRules(BaseModel):
    """Allow-lists that override score-based rarity."""

    reserved_handles: list[str] = Field(
        default_factory=lambda: ["16vivz"],
        description="Handles that always get the reserved top tier",
    )
    privileged_role_markers: list[str] = Field(
        default_factory=lambda: ["mod", "team"],
        description="Substrings marking moderator/team roles",
    )


class BoardConfig(BaseModel):
    """Settings shared by the board facade and the CLI."""

    page_size: int = Field(default=25, ge=1, le=100, description="Leaderboard rows per page")
    spotlight_per_category: int = Field(
        default=15, ge=1, description="Top members taken from each spotlight category"
    )
    valentine_limit: int = Field(default=5, ge=1, description="Stored valentines allowed per sender")
    log_level: str = Field(default="INFO")
    rarity: RarityRules = Field(default_factory=RarityRules)


def load_config(path: Optional[Union[str, Path]] = None) -> BoardConfig:
    """
    Load configuration from a JSON file.

    Args:
        path: JSON file to read (defaults are used when None)

    Returns:
        Parsed BoardConfig
    """
    if path is None:
        return BoardConfig()

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    data = json.loads(config_path.read_text())
    config = BoardConfig.model_validate(data)
    logger.debug("Loaded config from %s", config_path)
    return config
