# Area: Lifecycle
"""
arena_round._lifecycle.enums — Round Lifecycle Enums
====================================================

Defines the phases and events of the round lifecycle state machine.
"""

from enum import Enum


class RoundPhase(Enum):
    """
    Phases of one lifecycle iteration.

    Phase transitions:
    INTERMISSION -> SETUP (on INTERMISSION_EXPIRED)
    SETUP -> ACTIVE (on SETUP_COMPLETE)
    ACTIVE -> RESOLUTION (on ROUND_TIMER_EXPIRED)
    RESOLUTION -> CLEANUP (on RESOLVED)
    CLEANUP -> INTERMISSION (on CLEANUP_COMPLETE, next iteration)
    """
    INTERMISSION = "INTERMISSION"
    SETUP = "SETUP"
    ACTIVE = "ACTIVE"
    RESOLUTION = "RESOLUTION"
    CLEANUP = "CLEANUP"

    @property
    def in_progress(self) -> bool:
        """True for every phase in which a round is running."""
        return self is not RoundPhase.INTERMISSION


class RoundEvent(Enum):
    """
    Events that advance the lifecycle.

    All events are raised by the lifecycle task itself:
    - INTERMISSION_EXPIRED: intermission countdown reached zero
    - SETUP_COMPLETE: teams assigned, sessions moved, hazards requested
    - ROUND_TIMER_EXPIRED: active countdown reached zero
    - RESOLVED: loser evaluated, rewards issued, losers eliminated
    - CLEANUP_COMPLETE: hazards cleared, everyone back in the lobby
    """
    INTERMISSION_EXPIRED = "INTERMISSION_EXPIRED"
    SETUP_COMPLETE = "SETUP_COMPLETE"
    ROUND_TIMER_EXPIRED = "ROUND_TIMER_EXPIRED"
    RESOLVED = "RESOLVED"
    CLEANUP_COMPLETE = "CLEANUP_COMPLETE"
