# Area: World
"""
World layer — geometry and hazard bookkeeping seen from the controller.

This package handles:
- Spawn volume derivation from static regions
- Hazard count planning and placement
- Losing-team evaluation from load counters
"""

from .bounds import SpawnBounds, compute_spawn_bounds
from .spawn_planner import HazardSpawnPlanner
from .loss_evaluator import losing_team, read_load

__all__ = [
    "SpawnBounds",
    "compute_spawn_bounds",
    "HazardSpawnPlanner",
    "losing_team",
    "read_load",
]
