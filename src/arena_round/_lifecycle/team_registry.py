# Area: Lifecycle
"""
arena_round._lifecycle.team_registry — Team Registry
====================================================

Holds the fixed, ordered set of active teams plus the lobby pseudo-team.
Teams never change after startup. Membership is not stored here: a roster
is always derived from the sessions passed in, so it cannot drift from
the session -> team mapping.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence

if TYPE_CHECKING:
    from .session_tracker import PlayerSession

logger = logging.getLogger("arena_round.lifecycle.teams")


@dataclass(frozen=True)
class Team:
    """
    One team identifier.

    Attributes:
        team_id: Logical identifier, e.g. "Red"
        display_name: Human-readable name, e.g. "Team Red"
        is_lobby: True only for the lobby pseudo-team
    """

    team_id: str
    display_name: str
    is_lobby: bool = False


LOBBY = Team(team_id="Lobby", display_name="Lobby", is_lobby=True)


class TeamRegistry:
    """
    Ordered registry of active teams.

    Enumeration order is the configured order and drives both the
    round-robin assignment and every tie-break.

    Usage:
        registry = TeamRegistry(["Red", "Yellow", "Green", "Blue"])
        red = registry.resolve("Red")
        members = registry.roster_of(red, sessions)
    """

    def __init__(
        self,
        team_ids: Sequence[str],
        prefix: str = "Team ",
        lobby: Team = LOBBY,
    ):
        if len(team_ids) < 2:
            raise ValueError(f"TeamRegistry needs at least 2 teams, got {len(team_ids)}")
        self.lobby = lobby
        self._teams: List[Team] = [
            Team(team_id=team_id, display_name=f"{prefix}{team_id}")
            for team_id in team_ids
        ]
        self._by_id = {team.team_id: team for team in self._teams}
        self._by_id[lobby.team_id] = lobby

    @property
    def active_teams(self) -> List[Team]:
        """Active teams in enumeration order (lobby excluded)."""
        return list(self._teams)

    def __len__(self) -> int:
        return len(self._teams)

    def resolve(self, team_id: str) -> Optional[Team]:
        """
        Look up a team by identifier or display name.

        Args:
            team_id: "Red", "Team Red" or the lobby identifier

        Returns:
            The Team, or None if nothing matches
        """
        team = self._by_id.get(team_id)
        if team is not None:
            return team
        for candidate in self._teams:
            if candidate.display_name == team_id:
                return candidate
        logger.debug(f"Team lookup failed: {team_id!r}")
        return None

    def contains(self, team: Team) -> bool:
        """True if team is the lobby or one of the registered active teams."""
        return self._by_id.get(team.team_id) == team

    def roster_of(
        self, team: Team, sessions: Iterable["PlayerSession"]
    ) -> List["PlayerSession"]:
        """Sessions currently on team, ordered by identity."""
        members = [s for s in sessions if s.connected and s.team == team]
        return sorted(members, key=lambda s: s.session_id)

    def size_of(self, team: Team, sessions: Iterable["PlayerSession"]) -> int:
        return sum(1 for s in sessions if s.connected and s.team == team)
