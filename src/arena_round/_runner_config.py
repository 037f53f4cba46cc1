# Area: Shared
"""
arena_round._runner_config — Runner Configuration
=================================================

Settings model, validation and the environment overrides understood by
the CLI. Defaults reproduce the reference round: four teams, a 30 second
intermission and a 240 second round.
"""

import logging
import os
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .errors import ConfigurationError

logger = logging.getLogger("arena_round")

DEFAULT_TEAM_IDS = ["Red", "Yellow", "Green", "Blue"]

# Environment variable -> settings field
ENV_MAPPINGS = {
    "ARENA_ROUND_SECONDS": "round_seconds",
    "ARENA_INTERMISSION_SECONDS": "intermission_seconds",
    "ARENA_TEAM_IDS": "team_ids",
    "ARENA_LOG_FILE": "log_file",
    "ARENA_RANDOM_SEED": "random_seed",
}


class RoundSettings(BaseModel):
    """All tunable constants of the round lifecycle."""

    model_config = {"frozen": True, "extra": "forbid"}

    # Teams
    team_ids: List[str] = Field(default_factory=lambda: list(DEFAULT_TEAM_IDS))
    team_prefix: str = "Team "
    lobby_team_id: str = "Lobby"

    # Phase timing (seconds)
    intermission_seconds: int = Field(default=30, ge=0)
    round_seconds: int = Field(default=240, ge=0)
    tick_seconds: float = Field(default=1.0, ge=0)
    setup_settle_seconds: float = Field(default=2.0, ge=0)
    outcome_display_seconds: float = Field(default=10.0, ge=0)
    cleanup_delay_seconds: float = Field(default=5.0, ge=0)
    join_settle_seconds: float = Field(default=1.0, ge=0)
    respawn_settle_seconds: float = Field(default=0.25, ge=0)
    character_wait_seconds: float = Field(default=2.0, ge=0)

    # Hazards
    hazard_cap: int = Field(default=250, ge=0)
    hazard_per_player: int = Field(default=16, ge=0)
    hazard_base_offset: int = Field(default=10, ge=0)
    spawn_margin: float = Field(default=50.0, ge=0)
    detonate_before_resolution: bool = False

    # Rewards and elimination policy
    loser_reward: int = Field(default=150, ge=0)
    winner_reward: int = Field(default=500, ge=0)
    eliminate_on_zero_load: bool = False

    # World references
    lobby_area: str = "LobbySpawn"
    game_area: str = "GameSpawn"
    team_areas: Dict[str, str] = Field(default_factory=dict)
    field_region: str = "Map/Center"
    ceiling_region: str = "Map/Roof"
    relocate_height_offset: float = 5.0

    # Runtime
    log_file: str = "arena_round.log"
    random_seed: Optional[int] = None

    @field_validator("team_ids")
    @classmethod
    def _check_team_ids(cls, value: List[str]) -> List[str]:
        if len(value) < 2:
            raise ValueError(f"need at least 2 teams, got {len(value)}")
        if len(set(value)) != len(value):
            raise ValueError(f"team identifiers must be unique: {value}")
        if any(not team_id for team_id in value):
            raise ValueError("team identifiers must be non-empty")
        return value

    @model_validator(mode="after")
    def _check_references(self) -> "RoundSettings":
        if self.lobby_team_id in self.team_ids:
            raise ValueError(
                f"lobby identifier '{self.lobby_team_id}' collides with an active team"
            )
        unknown = [t for t in self.team_areas if t not in self.team_ids]
        if unknown:
            raise ValueError(f"team_areas names unknown teams: {unknown}")
        return self

    def area_for_team(self, team_id: str) -> str:
        """Return the relocation area for a team identifier (lobby included)."""
        if team_id == self.lobby_team_id:
            return self.lobby_area
        return self.team_areas.get(team_id, self.game_area)

    def required_areas(self) -> List[str]:
        """Every area the lifecycle may relocate a session to."""
        areas = [self.lobby_area, self.game_area]
        areas.extend(a for a in self.team_areas.values() if a not in areas)
        return areas


def validate_config(config: Dict[str, Any]) -> RoundSettings:
    """
    Validate a configuration dict and build the settings model.

    Args:
        config: Configuration dict (typically loaded from JSON)

    Returns:
        The validated RoundSettings

    Raises:
        ConfigurationError: If any key is unknown or any value invalid
    """
    try:
        return RoundSettings(**config)
    except ValidationError as e:
        problems = [
            f"{'.'.join(str(p) for p in err['loc']) or 'config'}: {err['msg']}"
            for err in e.errors()
        ]
        raise ConfigurationError(
            reference="config",
            reason="invalid settings",
            details={"errors": problems},
        ) from e


def apply_env_overrides(config: Dict[str, Any], environ=None) -> Dict[str, Any]:
    """Return a copy of config with ARENA_* environment variables applied."""
    environ = os.environ if environ is None else environ
    merged = dict(config)
    for env_key, config_key in ENV_MAPPINGS.items():
        if env_key not in environ:
            continue
        value = environ[env_key]
        if config_key == "team_ids":
            merged[config_key] = [t.strip() for t in value.split(",") if t.strip()]
        else:
            merged[config_key] = value
        logger.debug(f"Config override from {env_key}")
    return merged
