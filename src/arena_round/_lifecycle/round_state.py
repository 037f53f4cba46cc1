# Area: Lifecycle
"""
arena_round._lifecycle.round_state — Round Result Dataclass
===========================================================

Defines the RoundResult returned by one lifecycle iteration. The
controller does not keep these; they exist for logging and for callers
that want to observe a round.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from ..types import PlayerOutcome


@dataclass
class RoundResult:
    """
    Outcome of one completed iteration.

    Attributes:
        iteration: Iteration number the result belongs to
        losing_team: Identifier of the eliminated team, or None
        outcomes: Per-session outcome, empty when no team lost
        eliminated: Session ids moved to the lobby by elimination
        hazards_requested: Number of hazard spawn requests issued at setup
    """

    iteration: int
    losing_team: Optional[str] = None
    outcomes: List[PlayerOutcome] = field(default_factory=list)
    eliminated: List[int] = field(default_factory=list)
    hazards_requested: int = 0

    @property
    def had_elimination(self) -> bool:
        return self.losing_team is not None

    @property
    def winners(self) -> List[int]:
        return [o["session_id"] for o in self.outcomes if not o["lost"]]

    @property
    def losers(self) -> List[int]:
        return [o["session_id"] for o in self.outcomes if o["lost"]]
