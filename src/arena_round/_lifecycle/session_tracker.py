# Area: Lifecycle
"""
arena_round._lifecycle.session_tracker — Player Session Tracker
===============================================================

Owns every connected PlayerSession and is the only place a session's
team may change. The published round phase lives here too, behind the
same lock, so that "read the phase, then pick a team" can run as one
atomic step against the lifecycle task.

Concurrency
-----------
All tasks share one event loop. Mutations take ``asyncio.Lock``; plain
reads (``phase``, ``connected()``) return snapshots and never block.
Callers needing a consistent read-then-write use ``transaction()``:

    async with tracker.transaction() as txn:
        if txn.phase.in_progress:
            txn.set_team(session, smallest_team(txn))
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Dict, List, Optional, Tuple

from .enums import RoundPhase
from .team_registry import Team, TeamRegistry
from ..errors import UnknownTeamError

logger = logging.getLogger("arena_round.lifecycle.sessions")


@dataclass(eq=False)
class PlayerSession:
    """
    One connected participant.

    Attributes:
        session_id: Stable numeric identity, used for deterministic ordering
        name: Display name for logs
        team: Current team; the lobby pseudo-team when not in play
        connected: False once the player has left
    """

    session_id: int
    name: str
    team: Team
    connected: bool = True

    def __repr__(self) -> str:
        return f"PlayerSession({self.session_id}, {self.name!r}, team={self.team.team_id})"


class RosterTransaction:
    """
    Locked view of the tracker handed out by ``SessionTracker.transaction``.

    Valid only inside the ``async with`` block that produced it.
    """

    def __init__(self, tracker: "SessionTracker"):
        self._tracker = tracker

    @property
    def phase(self) -> RoundPhase:
        return self._tracker._phase

    @property
    def registry(self) -> TeamRegistry:
        return self._tracker.registry

    def sessions(self) -> List[PlayerSession]:
        return self._tracker.connected()

    def roster_of(self, team: Team) -> List[PlayerSession]:
        return self._tracker.roster_of(team)

    def size_of(self, team: Team) -> int:
        return self._tracker.size_of(team)

    def set_team(self, session: PlayerSession, team: Team) -> bool:
        return self._tracker._apply_team(session, team)

    def publish_phase(self, phase: RoundPhase) -> None:
        self._tracker._apply_phase(phase)


class SessionTracker:
    """
    Registry of connected sessions and the published round phase.

    Attributes:
        registry: The team registry every team value must belong to
    """

    def __init__(self, registry: TeamRegistry):
        self.registry = registry
        self._sessions: Dict[int, PlayerSession] = {}
        self._phase = RoundPhase.INTERMISSION
        self._lock = asyncio.Lock()

    # ── Reads ───────────────────────────────────────────────

    @property
    def phase(self) -> RoundPhase:
        """Phase most recently published by the lifecycle task."""
        return self._phase

    def connected(self) -> List[PlayerSession]:
        """Snapshot of connected sessions, ordered by identity."""
        return sorted(
            (s for s in self._sessions.values() if s.connected),
            key=lambda s: s.session_id,
        )

    def get(self, session_id: int) -> Optional[PlayerSession]:
        return self._sessions.get(session_id)

    def roster_of(self, team: Team) -> List[PlayerSession]:
        return self.registry.roster_of(team, self._sessions.values())

    def size_of(self, team: Team) -> int:
        return self.registry.size_of(team, self._sessions.values())

    def __len__(self) -> int:
        return len(self._sessions)

    # ── Mutations ───────────────────────────────────────────

    async def on_connect(self, session_id: int, name: Optional[str] = None) -> PlayerSession:
        """
        Create a session for a newly connected player.

        The session starts in the lobby. Connecting an identity that is
        already present returns the existing session unchanged.

        Args:
            session_id: Stable numeric identity of the player
            name: Optional display name (defaults to "player-<id>")

        Returns:
            The session for this identity
        """
        session, _ = await self.register(session_id, name)
        return session

    async def register(
        self, session_id: int, name: Optional[str] = None
    ) -> Tuple[PlayerSession, bool]:
        """Like on_connect, but also reports whether the session was created."""
        async with self._lock:
            existing = self._sessions.get(session_id)
            if existing is not None:
                logger.warning(f"Duplicate connect for session {session_id}, reusing")
                return existing, False
            session = PlayerSession(
                session_id=session_id,
                name=name or f"player-{session_id}",
                team=self.registry.lobby,
            )
            self._sessions[session_id] = session
        logger.info(
            f"Session {session_id} connected ({len(self._sessions)} online)",
            extra={"session_id": session_id},
        )
        return session, True

    async def on_disconnect(self, session: PlayerSession) -> None:
        """
        Remove a session.

        The session is marked disconnected before removal so any task still
        holding a reference sees it as absent from every roster.
        """
        async with self._lock:
            session.connected = False
            self._sessions.pop(session.session_id, None)
        logger.info(
            f"Session {session.session_id} disconnected ({len(self._sessions)} online)",
            extra={"session_id": session.session_id},
        )

    async def set_team(self, session: PlayerSession, team: Team) -> bool:
        """
        Move a session to a team.

        Args:
            session: The session to move
            team: Target team (active team or the lobby)

        Returns:
            True if the session was moved, False if it has disconnected

        Raises:
            UnknownTeamError: If team is not held by the registry
        """
        async with self._lock:
            return self._apply_team(session, team)

    async def publish_phase(self, phase: RoundPhase) -> None:
        async with self._lock:
            self._apply_phase(phase)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[RosterTransaction]:
        """Hold the tracker lock for a read-then-write sequence."""
        async with self._lock:
            yield RosterTransaction(self)

    # ── Internals (lock held) ───────────────────────────────

    def _apply_team(self, session: PlayerSession, team: Team) -> bool:
        if not self.registry.contains(team):
            raise UnknownTeamError(team.team_id)
        if not session.connected or self._sessions.get(session.session_id) is not session:
            logger.debug(f"Ignoring team change for departed session {session.session_id}")
            return False
        if session.team != team:
            logger.debug(
                f"Session {session.session_id}: {session.team.team_id} -> {team.team_id}",
                extra={"session_id": session.session_id},
            )
            session.team = team
        return True

    def _apply_phase(self, phase: RoundPhase) -> None:
        self._phase = phase
