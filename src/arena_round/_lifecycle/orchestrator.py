# Area: Lifecycle
"""Orchestrator — drives the round lifecycle forever, one phase at a time."""
import asyncio
import logging
from typing import Awaitable, Callable, List, Optional

from .assignment import assign_players_to_teams, roster_sizes
from .collaborator_calls import call_for_session, call_guarded
from .enums import RoundEvent, RoundPhase
from .movement import Relocator
from .round_state import RoundResult
from .session_tracker import PlayerSession, SessionTracker
from .state_machine import RoundStateMachine
from .team_registry import Team
from .._runner_config import RoundSettings
from .._world.loss_evaluator import losing_team, read_load
from .._world.spawn_planner import HazardSpawnPlanner
from ..collaborators import Collaborators
from ..types import PlayerOutcome, RoundSnapshot

logger = logging.getLogger("arena_round.lifecycle.orchestrator")
Sleep = Callable[[float], Awaitable[None]]


class RoundOrchestrator:
    """Runs Intermission -> Setup -> Active -> Resolution -> Cleanup in a loop.

    All phase actions run on the single lifecycle task in the order listed
    in each phase method. Team changes go through the session tracker's
    transaction so they serialize with concurrent join handlers.
    """

    def __init__(
        self,
        settings: RoundSettings,
        collaborators: Collaborators,
        tracker: SessionTracker,
        planner: HazardSpawnPlanner,
        relocator: Optional[Relocator] = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self.settings, self.collaborators = settings, collaborators
        self.tracker, self.registry = tracker, tracker.registry
        self.planner = planner
        self.relocator = relocator or Relocator(settings, collaborators)
        self.state_machine = RoundStateMachine()
        self._sleep = sleep
        self._remaining = 0
        self._losing_team: Optional[str] = None

    # ── Read-only view for other tasks ──────────────────────

    def snapshot(self) -> RoundSnapshot:
        return RoundSnapshot(
            iteration=self.state_machine.iteration,
            phase=self.state_machine.current_phase.value,
            remaining_seconds=self._remaining,
            losing_team=self._losing_team,
        )

    # ── Main loop ───────────────────────────────────────────

    async def run_forever(self, max_iterations: Optional[int] = None) -> None:
        """Run iterations back to back. max_iterations is for demos and tests."""
        completed = 0
        while max_iterations is None or completed < max_iterations:
            try:
                await self.run_iteration()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"Round loop error: {e}", exc_info=True)
                await self.recover()
            completed += 1

    async def run_iteration(self) -> RoundResult:
        self._losing_team = None
        result = RoundResult(iteration=self.state_machine.iteration)
        logger.info(f"Iteration {result.iteration} starting")

        await self.intermission()
        await self._advance(RoundEvent.INTERMISSION_EXPIRED)
        result.hazards_requested = await self.setup()
        await self._advance(RoundEvent.SETUP_COMPLETE)
        await self.active()
        await self._advance(RoundEvent.ROUND_TIMER_EXPIRED)
        await self.resolution(result)
        await self._advance(RoundEvent.RESOLVED)
        await self.cleanup()

        logger.info(
            f"Iteration {result.iteration} finished: "
            f"loser={result.losing_team or 'none'}, "
            f"eliminated={len(result.eliminated)}"
        )
        return result

    async def _advance(self, event: RoundEvent) -> RoundPhase:
        async with self.tracker.transaction() as txn:
            phase = self.state_machine.transition(event)
            txn.publish_phase(phase)
        logger.info(f"Phase -> {phase.value}", extra={"phase": phase.value})
        return phase

    # ── Phases ──────────────────────────────────────────────

    async def intermission(self) -> None:
        await self._countdown(self.settings.intermission_seconds, "Intermission")

    async def setup(self) -> int:
        """Reset bots, assign teams, move players, request hazards.

        Returns the number of hazards requested.
        """
        call_guarded("bot reset", self.collaborators.bots.reset_signal)
        await self.assign_teams()
        self.broadcast_status("Spawning hazards", "Get Ready...")
        await self._sleep(self.settings.setup_settle_seconds)

        playing = [s for s in self.tracker.connected() if not s.team.is_lobby]
        moved = await self.relocator.relocate_all(playing)
        logger.info(f"Moved {moved}/{len(playing)} sessions to play areas")

        population = len(self.tracker.connected())
        requested = call_guarded(
            "hazard spawn", self.planner.spawn, self.collaborators.hazards, population
        )
        return requested or 0

    async def assign_teams(self) -> None:
        """Round-robin every connected session over the active teams."""
        teams = self.registry.active_teams
        async with self.tracker.transaction() as txn:
            sessions = txn.sessions()
            plan = assign_players_to_teams(sessions, teams)
            for session in sessions:
                txn.set_team(session, plan[session.session_id])
            sizes = roster_sizes(teams, txn.size_of)
        logger.info(f"Assigned {len(sessions)} sessions: {', '.join(sizes)}")

    async def active(self) -> None:
        await self._countdown(self.settings.round_seconds, "Game in progress")
        if self.settings.detonate_before_resolution:
            call_guarded("force detonate", self.collaborators.hazards.force_detonate_all)

    async def resolution(self, result: RoundResult) -> None:
        """Find the loser, reward everyone, then eliminate the losing team."""
        hazards = self.collaborators.hazards
        loser_id = losing_team(
            [t.team_id for t in self.registry.active_teams],
            lambda team_id: read_load(hazards, team_id),
            eliminate_on_zero_load=self.settings.eliminate_on_zero_load,
        )
        loser = self.registry.resolve(loser_id) if loser_id else None
        if loser is None:
            self.broadcast_status("Round Over", "No team lost")
            return

        self._losing_team = result.losing_team = loser.team_id
        self.broadcast_status("Round Over", f"Team {loser.team_id} loses!")
        result.outcomes = [self._reward(s, loser) for s in self.tracker.connected()]

        await self._sleep(self.settings.outcome_display_seconds)
        eliminated = await self.eliminate(loser)
        result.eliminated = [s.session_id for s in eliminated]

    def _reward(self, session: PlayerSession, loser: Team) -> PlayerOutcome:
        display, rewards = self.collaborators.display, self.collaborators.rewards
        lost = session.team == loser
        coins = self.settings.loser_reward if lost else self.settings.winner_reward
        call_for_session(
            "outcome overlay", session, display.set_outcome_overlay,
            session, True, "Defeat" if lost else "Victory",
            f"You earned +{coins} coins", not lost,
        )
        call_for_session("credit currency", session, rewards.credit_currency, session, coins)
        if not lost:
            call_for_session("increment wins", session, rewards.increment_win_count, session)
        return PlayerOutcome(
            session_id=session.session_id,
            team=session.team.team_id,
            lost=lost,
            reward=coins,
        )

    async def eliminate(self, team: Team) -> List[PlayerSession]:
        """Send every member of team to the lobby and kill their characters."""
        async with self.tracker.transaction() as txn:
            members = txn.roster_of(team)
            for session in members:
                txn.set_team(session, self.registry.lobby)
        await asyncio.gather(*(self._remove_from_play(s) for s in members))
        logger.info(f"Eliminated {team.display_name}: {len(members)} sessions")
        return members

    async def _remove_from_play(self, session: PlayerSession) -> None:
        characters = self.collaborators.characters
        await self.relocator.relocate(session)
        if call_for_session("has_character", session, characters.has_character, session):
            call_for_session("kill", session, characters.kill, session)

    async def cleanup(self) -> None:
        """Hide overlays, clear hazards, return everyone to the lobby."""
        self.hide_outcome_overlays()
        await self._sleep(self.settings.cleanup_delay_seconds)
        call_guarded("clear hazards", self.collaborators.hazards.clear_all)
        await self.return_all_to_lobby(complete_cleanup=True)

    def hide_outcome_overlays(self) -> None:
        display = self.collaborators.display
        for session in self.tracker.connected():
            call_for_session("hide overlay", session, display.set_outcome_overlay, session, False)

    async def return_all_to_lobby(self, complete_cleanup: bool = False) -> List[PlayerSession]:
        """Move every connected session to the lobby team and area.

        With complete_cleanup the next Intermission is published in the
        same transaction, so no joiner can slip onto a team in between.
        """
        async with self.tracker.transaction() as txn:
            sessions = txn.sessions()
            for session in sessions:
                txn.set_team(session, self.registry.lobby)
            if complete_cleanup:
                phase = self.state_machine.transition(RoundEvent.CLEANUP_COMPLETE)
                txn.publish_phase(phase)
        if complete_cleanup:
            logger.info(f"Phase -> {phase.value}", extra={"phase": phase.value})
        await self.relocator.relocate_all(sessions)
        return sessions

    async def recover(self) -> None:
        """Wind down a failed iteration and resume from Intermission."""
        self.hide_outcome_overlays()
        call_guarded("clear hazards", self.collaborators.hazards.clear_all)
        async with self.tracker.transaction() as txn:
            for session in txn.sessions():
                txn.set_team(session, self.registry.lobby)
            txn.publish_phase(self.state_machine.abort_iteration())
        self._remaining, self._losing_team = 0, None
        await self.relocator.relocate_all(self.tracker.connected())

    # ── Broadcast helpers ───────────────────────────────────

    def broadcast_status(self, top_text: str, bottom_text: str) -> None:
        display = self.collaborators.display
        for session in self.tracker.connected():
            call_for_session("status", session, display.set_status, session, top_text, bottom_text)

    async def _countdown(self, seconds: int, top_text: str) -> None:
        for remaining in range(seconds, -1, -1):
            self._remaining = remaining
            logger.debug(f"{top_text}: {remaining}s")
            self.broadcast_status(top_text, f"{remaining}s")
            await self._sleep(self.settings.tick_seconds)
        self._remaining = 0
