# Area: Lifecycle
"""Team assignment: round-robin at setup, greedy balancing for late joiners."""
import logging
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from .session_tracker import PlayerSession
from .team_registry import Team

logger = logging.getLogger("arena_round.lifecycle.assignment")


def assign_players_to_teams(
    sessions: Iterable[PlayerSession],
    teams: Sequence[Team],
) -> Dict[int, Team]:
    """Plan the round-robin assignment of sessions to teams.

    Sessions are ordered by identity, then the i-th session goes to
    ``teams[i % len(teams)]``. The result depends only on the set of
    identities and the team order, never on connection order.

    Args:
        sessions: Sessions to place (lobby or not).
        teams: Active teams in enumeration order.

    Returns:
        Mapping of session_id to its planned team.
    """
    if not teams:
        return {}
    ordered = sorted(sessions, key=lambda s: s.session_id)
    return {
        session.session_id: teams[index % len(teams)]
        for index, session in enumerate(ordered)
    }


def smallest_team(
    teams: Sequence[Team],
    size_of: Callable[[Team], int],
) -> Optional[Team]:
    """Return the active team with the fewest members.

    Ties go to the team listed first. Returns None when there are no teams.
    """
    best: Optional[Team] = None
    best_size = 0
    for team in teams:
        size = size_of(team)
        if best is None or size < best_size:
            best, best_size = team, size
    return best


def roster_sizes(teams: Sequence[Team], size_of: Callable[[Team], int]) -> List[str]:
    """Render "Red=3" style entries for log lines."""
    return [f"{team.team_id}={size_of(team)}" for team in teams]
