# Area: World
"""
arena_round._world.spawn_planner — Hazard Spawn Planner
=======================================================

Decides how many hazards a round gets and where each one goes. Creation
itself is delegated to the hazard subsystem, one request per hazard.
"""

from __future__ import annotations

import logging
import random
from typing import Iterator, Optional

from .bounds import SpawnBounds
from ..collaborators import HazardSubsystem
from ..types import Vector3

logger = logging.getLogger("arena_round.world.spawn_planner")


class HazardSpawnPlanner:
    """
    Population-scaled hazard count and uniform placement.

    Attributes:
        bounds: Spawn volume every sampled point falls inside
        per_player_rate: Hazards added per connected player
        absolute_cap: Upper bound on the count regardless of population
        base_offset: Population offset so an empty server still gets hazards
    """

    def __init__(
        self,
        bounds: SpawnBounds,
        per_player_rate: int = 16,
        absolute_cap: int = 250,
        base_offset: int = 10,
        rng: Optional[random.Random] = None,
    ):
        self.bounds = bounds
        self.per_player_rate = per_player_rate
        self.absolute_cap = absolute_cap
        self.base_offset = base_offset
        self._rng = rng or random.Random()

    def planned_count(self, population: int) -> int:
        """
        Number of hazards for a population.

        min(absolute_cap, per_player_rate * (population + base_offset))

        Args:
            population: Number of connected sessions (negative treated as 0)
        """
        population = max(0, population)
        return min(self.absolute_cap, self.per_player_rate * (population + self.base_offset))

    def sample_position(self) -> Vector3:
        """Independent uniform sample on each axis within the bounds."""
        b = self.bounds
        return Vector3(
            self._rng.uniform(b.min_x, b.max_x),
            self._rng.uniform(b.min_y, b.max_y),
            self._rng.uniform(b.min_z, b.max_z),
        )

    def positions(self, count: int) -> Iterator[Vector3]:
        for _ in range(count):
            yield self.sample_position()

    def spawn(self, hazards: HazardSubsystem, population: int) -> int:
        """
        Request one hazard per planned unit.

        Args:
            hazards: The hazard subsystem that creates the objects
            population: Current connected population

        A request that raises is logged and skipped; the rest still go out.

        Returns:
            Number of spawn requests the subsystem accepted
        """
        count = self.planned_count(population)
        accepted = 0
        for position in self.positions(count):
            try:
                hazards.request_spawn(position)
            except Exception as e:
                logger.warning(f"Hazard spawn at {tuple(position)} failed: {e}")
                continue
            accepted += 1
        logger.info(
            f"Requested {accepted}/{count} hazards for population {population}"
        )
        return accepted
