# Area: Lifecycle Tests
"""Tests for full iterations, the endless loop and failure recovery."""

from unittest.mock import patch

import pytest

from arena_round import DemoWorld, RoundRunner
from arena_round._lifecycle.enums import RoundPhase

FAST = {
    "intermission_seconds": 0,
    "round_seconds": 0,
    "tick_seconds": 0,
    "setup_settle_seconds": 0,
    "outcome_display_seconds": 0,
    "cleanup_delay_seconds": 0,
    "join_settle_seconds": 0,
    "respawn_settle_seconds": 0,
    "character_wait_seconds": 0,
    "random_seed": 7,
}


class ObservedRun:
    """Runner whose sleeps record the published phase and snapshot."""

    def __init__(self, **overrides):
        self.world = DemoWorld()
        self.seen = []
        self.runner = RoundRunner(
            config={**FAST, **overrides},
            collaborators=self.world.collaborators(),
            configure_logging=False,
            sleep=self._observe,
        )

    async def _observe(self, delay):
        self.seen.append((self.runner.tracker.phase, self.runner.snapshot()))

    async def add_players(self, *session_ids):
        for session_id in session_ids:
            session = await self.runner.tracker.on_connect(session_id)
            self.world.spawn_character(session)

    def phase_sequence(self):
        phases = []
        for phase, _ in self.seen:
            if not phases or phases[-1] != phase:
                phases.append(phase)
        return phases


class TestRunIteration:
    """Tests for one complete iteration."""

    @pytest.mark.asyncio
    async def test_phases_published_in_order(self):
        run = ObservedRun()
        await run.add_players(1, 2, 3, 4)
        run.world.loads["Blue"] = 3

        await run.runner.orchestrator.run_iteration()

        assert run.phase_sequence() == [
            RoundPhase.INTERMISSION,
            RoundPhase.SETUP,
            RoundPhase.ACTIVE,
            RoundPhase.RESOLUTION,
            RoundPhase.CLEANUP,
        ]
        assert run.runner.tracker.phase == RoundPhase.INTERMISSION

    @pytest.mark.asyncio
    async def test_iteration_result_and_final_state(self):
        run = ObservedRun()
        await run.add_players(1, 2, 3, 4)
        run.world.loads["Blue"] = 3

        result = await run.runner.orchestrator.run_iteration()

        assert result.iteration == 1
        assert result.losing_team == "Blue"
        assert result.eliminated == [4]
        assert result.hazards_requested == 224
        assert run.world.kills == [4]
        assert run.world.spawned == []
        assert run.world.clear_count == 1
        assert all(s.team.is_lobby for s in run.runner.tracker.connected())
        assert all(not o["visible"] for o in run.world.overlays.values())
        assert run.runner.snapshot() == {
            "iteration": 2,
            "phase": "INTERMISSION",
            "remaining_seconds": 0,
            "losing_team": "Blue",
        }

    @pytest.mark.asyncio
    async def test_snapshot_during_active(self):
        run = ObservedRun(round_seconds=2)
        await run.runner.orchestrator.run_iteration()
        active = [snap for phase, snap in run.seen if phase == RoundPhase.ACTIVE]
        assert [s["remaining_seconds"] for s in active] == [2, 1, 0]
        assert all(s["phase"] == "ACTIVE" for s in active)

    @pytest.mark.asyncio
    async def test_empty_server_still_cycles(self):
        run = ObservedRun()
        result = await run.runner.orchestrator.run_iteration()
        assert result.losing_team is None
        assert result.hazards_requested == 160
        assert run.runner.snapshot()["iteration"] == 2


class TestRunForever:
    """Tests for the endless loop and recovery."""

    @pytest.mark.asyncio
    async def test_runs_requested_number_of_iterations(self):
        run = ObservedRun()
        await run.add_players(1, 2)
        await run.runner.run(max_iterations=3)
        assert run.world.bot_resets == 3
        assert run.world.clear_count == 3
        assert run.runner.snapshot()["iteration"] == 4

    @pytest.mark.asyncio
    async def test_failed_iteration_recovers_to_intermission(self):
        run = ObservedRun()
        await run.add_players(1, 2)
        orchestrator = run.runner.orchestrator

        with patch.object(orchestrator, "active", side_effect=RuntimeError("boom")):
            await orchestrator.run_forever(max_iterations=1)

        assert run.runner.tracker.phase == RoundPhase.INTERMISSION
        assert orchestrator.state_machine.iteration == 2
        assert run.world.clear_count == 1
        assert all(s.team.is_lobby for s in run.runner.tracker.connected())

        await orchestrator.run_forever(max_iterations=1)
        assert orchestrator.state_machine.iteration == 3
