# Area: Lifecycle
"""Moving sessions to the area that matches their current team."""
import asyncio
import logging
from typing import Iterable

from .collaborator_calls import call_for_session
from .session_tracker import PlayerSession
from .._runner_config import RoundSettings
from ..collaborators import Collaborators

logger = logging.getLogger("arena_round.lifecycle.movement")


class Relocator:
    """Places characters at their team's area, waiting briefly for missing ones."""

    def __init__(self, settings: RoundSettings, collaborators: Collaborators):
        self.settings = settings
        self.collaborators = collaborators

    async def relocate(self, session: PlayerSession) -> bool:
        """Move one session to the area of the team it is on right now.

        The team is read after any wait for the character, so a session
        whose team changed meanwhile still lands in the right place.

        Returns:
            True if a move was issued, False if the session left or has no
            character within ``character_wait_seconds``.
        """
        if not session.connected:
            return False
        if not await self._ensure_character(session):
            logger.debug(f"No character for session {session.session_id}, skipping move")
            return False
        if not session.connected:
            return False

        area = self.settings.area_for_team(session.team.team_id)
        call_for_session(
            "relocate", session,
            self.collaborators.world.relocate,
            session, area, self.settings.relocate_height_offset,
        )
        return True

    async def relocate_all(self, sessions: Iterable[PlayerSession]) -> int:
        """Relocate many sessions concurrently; returns how many were moved."""
        results = await asyncio.gather(*(self.relocate(s) for s in sessions))
        return sum(1 for moved in results if moved)

    async def _ensure_character(self, session: PlayerSession) -> bool:
        characters = self.collaborators.characters
        if call_for_session("has_character", session, characters.has_character, session):
            return True
        try:
            return await characters.wait_for_character(
                session, self.settings.character_wait_seconds
            )
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning(
                f"wait_for_character failed for session {session.session_id}: {e}",
                extra={"session_id": session.session_id},
            )
            return False
