# Area: Lifecycle
"""
Round lifecycle - the authoritative round controller.

This package handles:
- Team registry and session tracking
- Phase sequencing (state machine + orchestrator)
- Team assignment and late-join reconciliation
- Rewards and elimination
"""

from .enums import RoundPhase, RoundEvent
from .team_registry import Team, TeamRegistry, LOBBY
from .session_tracker import PlayerSession, SessionTracker, RosterTransaction
from .state_machine import RoundStateMachine
from .round_state import RoundResult
from .assignment import assign_players_to_teams, smallest_team
from .movement import Relocator
from .orchestrator import RoundOrchestrator
from .join_handler import LateJoinHandler

__all__ = [
    "RoundPhase",
    "RoundEvent",
    "Team",
    "TeamRegistry",
    "LOBBY",
    "PlayerSession",
    "SessionTracker",
    "RosterTransaction",
    "RoundStateMachine",
    "RoundResult",
    "assign_players_to_teams",
    "smallest_team",
    "Relocator",
    "RoundOrchestrator",
    "LateJoinHandler",
]
