"""
arena_round.types — Geometry values and snapshot schemas
========================================================

Value types shared between the controller and its collaborators, and the
TypedDict shapes of the read-only data the controller hands out.

All types are exported from the main package:

    from arena_round import Vector3, Region, RoundSnapshot, PlayerOutcome

Use __annotations__ to inspect fields:

    >>> RoundSnapshot.__annotations__
    {'iteration': int, 'phase': str, 'remaining_seconds': int, 'losing_team': Optional[str]}
"""

from dataclasses import dataclass
from typing import NamedTuple, Optional, TypedDict


# ============================================
# Geometry
# ============================================

class Vector3(NamedTuple):
    """A point in world space."""
    x: float
    y: float
    z: float

    def raised(self, dy: float) -> "Vector3":
        """Return this point moved up by dy."""
        return Vector3(self.x, self.y + dy, self.z)


@dataclass(frozen=True)
class Region:
    """
    An axis-aligned box in the static world geometry.

    Attributes:
        center: Center point of the box
        size: Full extent of the box on each axis
    """

    center: Vector3
    size: Vector3

    @property
    def top(self) -> float:
        return self.center.y + self.size.y / 2

    @property
    def bottom(self) -> float:
        return self.center.y - self.size.y / 2


# ============================================
# Snapshots handed to other tasks
# ============================================

class RoundSnapshot(TypedDict):
    """Read-only view of the round in progress.

    Fields
    ------
    iteration : int
        Lifecycle iteration number (1, 2, 3, ...).
    phase : str
        Current phase name, e.g. "ACTIVE".
    remaining_seconds : int
        Seconds left on the running countdown, 0 outside countdowns.
    losing_team : Optional[str]
        Team identifier eliminated this round, once resolved.
    """
    iteration: int
    phase: str
    remaining_seconds: int
    losing_team: Optional[str]


class PlayerOutcome(TypedDict):
    """Outcome computed for one session during resolution.

    Fields
    ------
    session_id : int
        Stable numeric identity of the session.
    team : str
        Team the session was on when the round resolved.
    lost : bool
        True if the session was a member of the losing team.
    reward : int
        Currency credited for this round.
    """
    session_id: int
    team: str
    lost: bool
    reward: int
