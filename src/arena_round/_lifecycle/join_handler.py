# Area: Lifecycle
"""
arena_round._lifecycle.join_handler — Join / Late-Join Handler
==============================================================

Reconciles each new session against whatever phase the lifecycle is in.

On connect:
1. Create the session (lobby) and subscribe to its character respawns
2. Wait the join settle delay
3. Atomically read the published phase and choose a team:
   - round in progress: the active team with the smallest roster
   - intermission: the lobby
4. Show the matching status line and move the character

Each respawn is handled on its own task: after a short settle delay the
character is moved to the area of the team the session is on at that
moment, not the team it had when the subscription was made.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Dict, Optional, Set

from .assignment import roster_sizes, smallest_team
from .collaborator_calls import call_for_session
from .movement import Relocator
from .session_tracker import PlayerSession, SessionTracker
from .._runner_config import RoundSettings
from ..collaborators import Collaborators

logger = logging.getLogger("arena_round.lifecycle.join")


class LateJoinHandler:
    """
    Per-player connect/disconnect handling.

    Safe to run concurrently with every lifecycle phase: it never waits on
    the lifecycle task and re-reads the phase under the tracker lock.
    """

    def __init__(
        self,
        settings: RoundSettings,
        collaborators: Collaborators,
        tracker: SessionTracker,
        relocator: Optional[Relocator] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Initialize handler.

        Args:
            settings: Round settings (settle delays, texts)
            collaborators: Collaborator bundle
            tracker: Shared session tracker
            relocator: Shared relocation helper (one is built if omitted)
            sleep: Suspension primitive, replaceable in tests
        """
        self.settings = settings
        self.collaborators = collaborators
        self.tracker = tracker
        self.registry = tracker.registry
        self.relocator = relocator or Relocator(settings, collaborators)
        self._sleep = sleep
        self._unsubscribe: Dict[int, Callable[[], None]] = {}
        self._respawn_tasks: Dict[int, Set[asyncio.Task]] = {}

    async def handle_connect(self, session_id: int, name: Optional[str] = None) -> PlayerSession:
        """
        Run the full join sequence for one player.

        Args:
            session_id: Stable numeric identity of the player
            name: Optional display name

        Returns:
            The player's session (possibly already disconnected)
        """
        session, created = await self.tracker.register(session_id, name)
        self._subscribe_respawn(session)
        if not created:
            return session

        await self._sleep(self.settings.join_settle_seconds)
        if not session.connected:
            return session

        async with self.tracker.transaction() as txn:
            mid_round = txn.phase.in_progress
            if mid_round:
                team = smallest_team(self.registry.active_teams, txn.size_of)
                sizes = roster_sizes(self.registry.active_teams, txn.size_of)
            else:
                team, sizes = self.registry.lobby, []
            txn.set_team(session, team)
            phase = txn.phase

        if mid_round:
            logger.info(
                f"Session {session_id} joined mid-round ({phase.value}) -> "
                f"{team.display_name} [{', '.join(sizes)}]",
                extra={"session_id": session_id, "phase": phase.value},
            )
            self._status(session, "Game in progress", "Joining...")
        else:
            logger.info(
                f"Session {session_id} joined during intermission -> lobby",
                extra={"session_id": session_id},
            )
            self._status(session, "Intermission", f"{self.settings.intermission_seconds}s")

        await self.relocator.relocate(session)
        return session

    async def handle_disconnect(self, session: PlayerSession) -> None:
        """Drop respawn hooks and pending respawn moves, then remove the session."""
        unsubscribe = self._unsubscribe.pop(session.session_id, None)
        if unsubscribe is not None:
            call_for_session("unsubscribe respawn", session, unsubscribe)
        for task in self._respawn_tasks.pop(session.session_id, set()):
            task.cancel()
        await self.tracker.on_disconnect(session)

    def pending_respawns(self, session_id: int) -> int:
        return len(self._respawn_tasks.get(session_id, ()))

    # ── Respawn hook ────────────────────────────────────────

    def _subscribe_respawn(self, session: PlayerSession) -> None:
        if session.session_id in self._unsubscribe:
            return

        def on_respawn() -> None:
            task = asyncio.get_running_loop().create_task(self._after_respawn(session))
            tasks = self._respawn_tasks.setdefault(session.session_id, set())
            tasks.add(task)
            task.add_done_callback(tasks.discard)

        unsubscribe = call_for_session(
            "subscribe respawn", session,
            self.collaborators.characters.subscribe_respawn, session, on_respawn,
        )
        if unsubscribe is not None:
            self._unsubscribe[session.session_id] = unsubscribe

    async def _after_respawn(self, session: PlayerSession) -> None:
        await self._sleep(self.settings.respawn_settle_seconds)
        if session.connected:
            logger.debug(
                f"Respawn: moving session {session.session_id} to {session.team.team_id}",
                extra={"session_id": session.session_id},
            )
            await self.relocator.relocate(session)

    def _status(self, session: PlayerSession, top_text: str, bottom_text: str) -> None:
        call_for_session(
            "status", session,
            self.collaborators.display.set_status, session, top_text, bottom_text,
        )
