"""
arena_round.runner — Round Runner
=================================

Builds the controller from a config dict and a collaborator bundle,
validates every static reference up front, then runs the lifecycle task
forever while spawning one join task per connecting player.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Any, Dict, Optional

from .collaborators import Collaborators
from .errors import ConfigurationError
from .types import Region, RoundSnapshot
from ._shared import setup_logging
from ._runner_config import RoundSettings, validate_config
from ._lifecycle.join_handler import LateJoinHandler
from ._lifecycle.movement import Relocator
from ._lifecycle.orchestrator import RoundOrchestrator
from ._lifecycle.session_tracker import PlayerSession, SessionTracker
from ._lifecycle.team_registry import Team, TeamRegistry
from ._world.bounds import SpawnBounds, compute_spawn_bounds
from ._world.spawn_planner import HazardSpawnPlanner

logger = logging.getLogger("arena_round")


class RoundRunner:
    """
    Entry point for hosting the round controller.

    Raises ConfigurationError from the constructor if the settings are
    invalid or the world lacks a required region or area.
    """

    def __init__(
        self,
        config: Dict[str, Any],
        collaborators: Collaborators,
        configure_logging: bool = True,
        sleep=asyncio.sleep,
    ):
        self.config = config
        self.collaborators = collaborators

        # Validate config
        self.settings: RoundSettings = validate_config(config)

        if configure_logging:
            setup_logging(log_file_path=self.settings.log_file)

        # Resolve static world references (fatal if missing)
        self.bounds: SpawnBounds = self._resolve_bounds()
        self._check_areas()

        lobby = Team(
            team_id=self.settings.lobby_team_id,
            display_name=self.settings.lobby_team_id,
            is_lobby=True,
        )
        self.registry = TeamRegistry(
            self.settings.team_ids, prefix=self.settings.team_prefix, lobby=lobby
        )
        self.tracker = SessionTracker(self.registry)
        self.planner = HazardSpawnPlanner(
            self.bounds,
            per_player_rate=self.settings.hazard_per_player,
            absolute_cap=self.settings.hazard_cap,
            base_offset=self.settings.hazard_base_offset,
            rng=random.Random(self.settings.random_seed),
        )
        relocator = Relocator(self.settings, collaborators)
        self.orchestrator = RoundOrchestrator(
            self.settings, collaborators, self.tracker, self.planner,
            relocator=relocator, sleep=sleep,
        )
        self.join_handler = LateJoinHandler(
            self.settings, collaborators, self.tracker,
            relocator=relocator, sleep=sleep,
        )
        self._join_tasks: Dict[int, asyncio.Task] = {}

    # ── Startup checks ──────────────────────────────────────

    def _require_region(self, name: str) -> Region:
        region = self.collaborators.world.find_region(name)
        if region is None:
            raise ConfigurationError(reference=name, reason="region not found in world")
        return region

    def _resolve_bounds(self) -> SpawnBounds:
        field = self._require_region(self.settings.field_region)
        ceiling = self._require_region(self.settings.ceiling_region)
        return compute_spawn_bounds(field, ceiling, self.settings.spawn_margin)

    def _check_areas(self) -> None:
        world = self.collaborators.world
        missing = [a for a in self.settings.required_areas() if world.area_position(a) is None]
        if missing:
            raise ConfigurationError(
                reference=missing[0],
                reason="relocation area not found in world",
                details={"missing_areas": missing},
            )

    # ── Lifecycle ───────────────────────────────────────────

    async def run(self, max_iterations: Optional[int] = None) -> None:
        """Run the lifecycle task. Returns only when max_iterations is reached."""
        self._log_startup()
        await self.orchestrator.run_forever(max_iterations=max_iterations)
        logger.info("Round runner stopped.")

    def _log_startup(self) -> None:
        s = self.settings
        logger.info("=" * 60)
        logger.info("  Arena Round Controller — Starting")
        logger.info(f"  Teams:  {', '.join(s.team_ids)}")
        logger.info(f"  Timing: intermission {s.intermission_seconds}s, round {s.round_seconds}s")
        logger.info(f"  Hazards: {s.hazard_per_player}/player, cap {s.hazard_cap}")
        logger.info("=" * 60)

    def snapshot(self) -> RoundSnapshot:
        return self.orchestrator.snapshot()

    # ── Player events ───────────────────────────────────────

    def connect(self, session_id: int, name: Optional[str] = None) -> asyncio.Task:
        """
        Start the join task for a player. Must be called from the event loop.

        Returns the task so callers may await the completed join.
        """
        task = asyncio.get_running_loop().create_task(
            self.join_handler.handle_connect(session_id, name),
            name=f"join-{session_id}",
        )
        self._join_tasks[session_id] = task
        task.add_done_callback(lambda t: self._join_done(session_id, t))
        return task

    def _join_done(self, session_id: int, task: asyncio.Task) -> None:
        if self._join_tasks.get(session_id) is task:
            del self._join_tasks[session_id]
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(
                f"Join task for session {session_id} failed: {error}",
                exc_info=error,
            )

    async def disconnect(self, session_id: int) -> Optional[PlayerSession]:
        """Abandon the player's join task (if any) and remove the session."""
        task = self._join_tasks.pop(session_id, None)
        if task is not None and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
        session = self.tracker.get(session_id)
        if session is not None:
            await self.join_handler.handle_disconnect(session)
        return session
