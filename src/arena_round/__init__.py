"""
arena_round — Authoritative Round Controller
============================================

Cycles a shared game server through intermission, setup, active play,
resolution and cleanup forever: assigns players to teams, spawns
hazards, eliminates the team carrying the most load, hands out rewards
and resets for the next round.

Quick Start (demo world, no game server needed):
    python -m arena_round --demo --iterations 2

Embedding in a host server:
    from arena_round import RoundRunner, Collaborators
    collaborators = Collaborators(world=..., characters=..., display=...,
                                  hazards=..., rewards=..., bots=...)
    runner = RoundRunner(config={}, collaborators=collaborators)

    # inside the server's event loop
    lifecycle = asyncio.create_task(runner.run())
    runner.connect(player_id)            # on player join
    await runner.disconnect(player_id)   # on player leave

Collaborator contracts live in collaborators.py; DemoWorld implements
all of them in memory.
"""

from .collaborators import (
    BotController,
    CharacterLifecycle,
    Collaborators,
    HazardSubsystem,
    RewardLedger,
    StatusDisplay,
    WorldPositioning,
)
from .demo_world import DemoWorld
from .errors import (
    ArenaRoundError,
    ConfigurationError,
    InvalidPhaseTransition,
    UnknownTeamError,
)
from .runner import RoundRunner
from .types import PlayerOutcome, Region, RoundSnapshot, Vector3
from ._runner_config import RoundSettings
from ._lifecycle import PlayerSession, RoundPhase, RoundResult, Team

__all__ = [
    # Main classes
    "RoundRunner",
    "RoundSettings",
    "DemoWorld",
    # Collaborator contracts
    "Collaborators",
    "WorldPositioning",
    "CharacterLifecycle",
    "StatusDisplay",
    "HazardSubsystem",
    "RewardLedger",
    "BotController",
    # Errors
    "ArenaRoundError",
    "ConfigurationError",
    "InvalidPhaseTransition",
    "UnknownTeamError",
    # Types
    "Vector3",
    "Region",
    "RoundSnapshot",
    "PlayerOutcome",
    "PlayerSession",
    "RoundPhase",
    "RoundResult",
    "Team",
]
__version__ = "1.0.0"
