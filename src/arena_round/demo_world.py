# Area: Shared
"""
arena_round.demo_world — In-memory world for demos and tests
============================================================

A ready-to-use implementation of every collaborator contract. Nothing is
simulated physically: characters are points, hazards are a list and team
loads are numbers you set by hand (or let the demo randomize).

Usage:
    from arena_round import DemoWorld, RoundRunner

    world = DemoWorld()
    runner = RoundRunner(config={}, collaborators=world.collaborators())
    asyncio.run(runner.run())
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Callable, Dict, List, Optional, Set, Tuple

from .collaborators import (
    BotController,
    CharacterLifecycle,
    Collaborators,
    HazardSubsystem,
    RewardLedger,
    StatusDisplay,
    WorldPositioning,
)
from .types import Region, Vector3

logger = logging.getLogger("arena_round.demo")

# Default geometry: a 400 x 400 field whose top sits at y=5, roof bottom at y=109
DEFAULT_REGIONS = {
    "Map/Center": Region(center=Vector3(0, 0, 0), size=Vector3(400, 10, 400)),
    "Map/Roof": Region(center=Vector3(0, 110, 0), size=Vector3(400, 2, 400)),
}
DEFAULT_AREAS = {
    "LobbySpawn": Vector3(0, 200, -600),
    "GameSpawn": Vector3(0, 5, 0),
}


class DemoWorld(
    WorldPositioning,
    CharacterLifecycle,
    StatusDisplay,
    HazardSubsystem,
    RewardLedger,
    BotController,
):
    """
    Single object implementing all six collaborator contracts.

    Every effect is recorded in plain attributes so tests can assert on it:
    ``positions``, ``relocations``, ``status``, ``overlays``, ``spawned``,
    ``coins``, ``wins``, ``kills``, ``bot_resets`` ...
    """

    def __init__(
        self,
        regions: Optional[Dict[str, Region]] = None,
        areas: Optional[Dict[str, Vector3]] = None,
        auto_respawn: bool = False,
    ):
        """
        Initialize DemoWorld.

        Args:
            regions: Named static regions. Defaults to DEFAULT_REGIONS
            areas: Named relocation areas. Defaults to DEFAULT_AREAS
            auto_respawn: Respawn a character right after it is killed
        """
        self.regions = dict(DEFAULT_REGIONS if regions is None else regions)
        self.areas = dict(DEFAULT_AREAS if areas is None else areas)
        self.auto_respawn = auto_respawn

        self.positions: Dict[int, Vector3] = {}
        self.relocations: List[Tuple[int, str]] = []
        self.kills: List[int] = []
        self._character_events: Dict[int, asyncio.Event] = {}
        self._respawn_subscribers: Dict[int, List[Callable[[], None]]] = {}

        self.headless: Set[int] = set()
        self.status: Dict[int, Tuple[str, str]] = {}
        self.status_log: List[Tuple[int, str, str]] = []
        self.overlays: Dict[int, dict] = {}

        self.spawned: List[Vector3] = []
        self.loads: Dict[str, float] = {}
        self.clear_count = 0
        self.detonate_count = 0

        self.coins: Dict[int, int] = {}
        self.wins: Dict[int, int] = {}
        self.credits: List[Tuple[int, int]] = []

        self.bot_resets = 0

    def collaborators(self) -> Collaborators:
        return Collaborators.from_single(self)

    # ── WorldPositioning ────────────────────────────────────

    def find_region(self, name: str) -> Optional[Region]:
        return self.regions.get(name)

    def area_position(self, area: str) -> Optional[Vector3]:
        return self.areas.get(area)

    def relocate(self, session, area: str, height_offset: float) -> None:
        target = self.areas.get(area)
        if target is None or session.session_id not in self.positions:
            return
        self.positions[session.session_id] = target.raised(height_offset)
        self.relocations.append((session.session_id, area))

    # ── CharacterLifecycle ──────────────────────────────────

    def has_character(self, session) -> bool:
        return session.session_id in self.positions

    async def wait_for_character(self, session, timeout: float) -> bool:
        if self.has_character(session):
            return True
        event = self._character_events.setdefault(session.session_id, asyncio.Event())
        try:
            await asyncio.wait_for(event.wait(), timeout)
        except asyncio.TimeoutError:
            return False
        return self.has_character(session)

    def kill(self, session) -> None:
        if self.positions.pop(session.session_id, None) is None:
            return
        self.kills.append(session.session_id)
        event = self._character_events.get(session.session_id)
        if event is not None:
            event.clear()
        if self.auto_respawn:
            asyncio.get_running_loop().call_soon(self.spawn_character, session)

    def subscribe_respawn(self, session, callback: Callable[[], None]) -> Callable[[], None]:
        subscribers = self._respawn_subscribers.setdefault(session.session_id, [])
        subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in subscribers:
                subscribers.remove(callback)

        return unsubscribe

    def spawn_character(self, session, area: str = "LobbySpawn") -> None:
        """Give session a character at area and fire its respawn subscribers."""
        self.positions[session.session_id] = self.areas.get(area, Vector3(0, 0, 0))
        self._character_events.setdefault(session.session_id, asyncio.Event()).set()
        for callback in list(self._respawn_subscribers.get(session.session_id, [])):
            callback()

    def subscriber_count(self, session_id: int) -> int:
        return len(self._respawn_subscribers.get(session_id, []))

    # ── StatusDisplay ───────────────────────────────────────

    def set_status(self, session, top_text: str, bottom_text: str) -> None:
        if session.session_id in self.headless:
            return
        self.status[session.session_id] = (top_text, bottom_text)
        self.status_log.append((session.session_id, top_text, bottom_text))

    def set_outcome_overlay(
        self, session, visible: bool, top_text: str = "",
        bottom_text: str = "", positive: bool = True,
    ) -> None:
        if session.session_id in self.headless:
            return
        self.overlays[session.session_id] = {
            "visible": visible,
            "top": top_text,
            "bottom": bottom_text,
            "positive": positive,
        }

    # ── HazardSubsystem ─────────────────────────────────────

    def request_spawn(self, position: Vector3) -> None:
        self.spawned.append(position)

    def clear_all(self) -> None:
        self.spawned.clear()
        self.loads.clear()
        self.clear_count += 1

    def force_detonate_all(self) -> None:
        self.detonate_count += 1

    def accumulated_load(self, team_id: str) -> Optional[float]:
        return self.loads.get(team_id)

    # ── RewardLedger ────────────────────────────────────────

    def credit_currency(self, session, amount: int) -> None:
        self.coins[session.session_id] = self.coins.get(session.session_id, 0) + amount
        self.credits.append((session.session_id, amount))

    def increment_win_count(self, session) -> None:
        self.wins[session.session_id] = self.wins.get(session.session_id, 0) + 1

    # ── BotController ───────────────────────────────────────

    def reset_signal(self) -> None:
        self.bot_resets += 1


class PopulationSimulator:
    """
    Drives a DemoWorld with players that come and go.

    Each tick a player may join or leave, and while a round is active the
    team loads drift upward at random so every round produces a loser.
    """

    def __init__(self, runner, world: DemoWorld, seed: Optional[int] = None,
                 initial_players: int = 8, churn: float = 0.1):
        self.runner = runner
        self.world = world
        self.initial_players = initial_players
        self.churn = churn
        self._rng = random.Random(seed)
        self._next_id = 1000

    async def join(self) -> None:
        session_id = self._next_id
        self._next_id += 1
        task = self.runner.connect(session_id, name=f"demo-{session_id}")
        while self.runner.tracker.get(session_id) is None and not task.done():
            await asyncio.sleep(0)
        session = self.runner.tracker.get(session_id)
        if session is not None:
            self.world.spawn_character(session)

    async def leave(self) -> None:
        online = self.runner.tracker.connected()
        if online:
            victim = self._rng.choice(online)
            await self.runner.disconnect(victim.session_id)

    async def run(self) -> None:
        for _ in range(self.initial_players):
            await self.join()
        tick = max(self.runner.settings.tick_seconds, 0.01)
        while True:
            await asyncio.sleep(tick)
            roll = self._rng.random()
            if roll < self.churn / 2:
                await self.join()
            elif roll < self.churn:
                await self.leave()
            if self.runner.snapshot()["phase"] == "ACTIVE":
                team_id = self._rng.choice(self.runner.settings.team_ids)
                self.world.loads[team_id] = self.world.loads.get(team_id, 0) + self._rng.randint(1, 5)
