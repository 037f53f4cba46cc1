# Area: Lifecycle
"""
arena_round._lifecycle.state_machine — Round Lifecycle State Machine
====================================================================

Tracks the phase of the current iteration and validates every advance
against a fixed table. Transitions are strictly monotonic within one
iteration; the only way back to INTERMISSION is through CLEANUP.
"""

import logging

from .enums import RoundPhase, RoundEvent
from ..errors import InvalidPhaseTransition

logger = logging.getLogger("arena_round.lifecycle.state_machine")

# Valid phase transitions: {current_phase: {event: next_phase}}
TRANSITIONS = {
    RoundPhase.INTERMISSION: {
        RoundEvent.INTERMISSION_EXPIRED: RoundPhase.SETUP,
    },
    RoundPhase.SETUP: {
        RoundEvent.SETUP_COMPLETE: RoundPhase.ACTIVE,
    },
    RoundPhase.ACTIVE: {
        RoundEvent.ROUND_TIMER_EXPIRED: RoundPhase.RESOLUTION,
    },
    RoundPhase.RESOLUTION: {
        RoundEvent.RESOLVED: RoundPhase.CLEANUP,
    },
    RoundPhase.CLEANUP: {
        RoundEvent.CLEANUP_COMPLETE: RoundPhase.INTERMISSION,
    },
}


class RoundStateMachine:
    """
    State machine for the round lifecycle.

    Attributes:
        current_phase: The phase the lifecycle is in
        iteration: Number of the iteration in progress (starts at 1)
    """

    def __init__(self):
        """Initialize in INTERMISSION of iteration 1."""
        self.current_phase = RoundPhase.INTERMISSION
        self.iteration = 1

    def can_transition(self, event: RoundEvent) -> bool:
        """
        Check if a transition is valid from the current phase.

        Args:
            event: The event to check

        Returns:
            True if the transition is valid, False otherwise
        """
        return event in TRANSITIONS.get(self.current_phase, {})

    def transition(self, event: RoundEvent) -> RoundPhase:
        """
        Execute a phase transition.

        Entering INTERMISSION starts the next iteration.

        Args:
            event: The event triggering the transition

        Returns:
            The new phase after transition

        Raises:
            InvalidPhaseTransition: If the event is not valid in the current phase
        """
        if not self.can_transition(event):
            raise InvalidPhaseTransition(self.current_phase.value, event.value)

        previous = self.current_phase
        self.current_phase = TRANSITIONS[previous][event]
        if self.current_phase is RoundPhase.INTERMISSION:
            self.iteration += 1

        logger.debug(
            f"Phase {previous.value} -> {self.current_phase.value} "
            f"(iteration {self.iteration})"
        )
        return self.current_phase

    def abort_iteration(self) -> RoundPhase:
        """
        Abandon the iteration in progress and start the next one.

        Used only when a phase failed unexpectedly; the lifecycle then
        resumes from INTERMISSION instead of stopping.
        """
        logger.warning(
            f"Iteration {self.iteration} aborted in {self.current_phase.value}"
        )
        self.current_phase = RoundPhase.INTERMISSION
        self.iteration += 1
        return self.current_phase

    def reset(self) -> None:
        """Reset to INTERMISSION of iteration 1."""
        self.current_phase = RoundPhase.INTERMISSION
        self.iteration = 1
