# Area: World
"""
arena_round._world.bounds — Spatial Bounds Calculator
=====================================================

Derives the hazard spawn volume from two static regions:

* the field region gives the horizontal extent, shrunk on each side by
  a fixed margin, and its top face is the floor of the volume;
* the ceiling region's bottom face is the roof of the volume.

The result is computed once at startup. A volume with no room on any
axis is a configuration error, never clamped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..errors import ConfigurationError
from ..types import Region, Vector3

logger = logging.getLogger("arena_round.world.bounds")


@dataclass(frozen=True)
class SpawnBounds:
    """
    Axis-aligned spawn volume.

    Attributes:
        min_x, max_x: Horizontal range on x
        min_y, max_y: Vertical range (field top to ceiling bottom)
        min_z, max_z: Horizontal range on z
    """

    min_x: float
    max_x: float
    min_y: float
    max_y: float
    min_z: float
    max_z: float

    def contains(self, point: Vector3) -> bool:
        return (
            self.min_x <= point.x <= self.max_x
            and self.min_y <= point.y <= self.max_y
            and self.min_z <= point.z <= self.max_z
        )

    @property
    def height(self) -> float:
        return self.max_y - self.min_y


def compute_spawn_bounds(field: Region, ceiling: Region, margin: float) -> SpawnBounds:
    """
    Compute the spawn volume between a field and a ceiling.

    Args:
        field: The playing field region
        ceiling: The roof region above the field
        margin: Inward padding applied to both horizontal axes

    Returns:
        The spawn bounds

    Raises:
        ConfigurationError: If the ceiling does not sit above the field top,
            or the margin leaves no horizontal room
    """
    half_x = field.size.x / 2
    half_z = field.size.z / 2
    bounds = SpawnBounds(
        min_x=field.center.x - half_x + margin,
        max_x=field.center.x + half_x - margin,
        min_y=field.top,
        max_y=ceiling.bottom,
        min_z=field.center.z - half_z + margin,
        max_z=field.center.z + half_z - margin,
    )

    if bounds.max_y <= bounds.min_y:
        raise ConfigurationError(
            reference="ceiling_region",
            reason="ceiling bottom must be above field top",
            details={"field_top": bounds.min_y, "ceiling_bottom": bounds.max_y},
        )
    if bounds.max_x < bounds.min_x or bounds.max_z < bounds.min_z:
        raise ConfigurationError(
            reference="spawn_margin",
            reason="margin leaves no horizontal room inside the field",
            details={"margin": margin, "field_size": list(field.size)},
        )

    logger.info(
        f"Spawn bounds x[{bounds.min_x:.1f}, {bounds.max_x:.1f}] "
        f"y[{bounds.min_y:.1f}, {bounds.max_y:.1f}] "
        f"z[{bounds.min_z:.1f}, {bounds.max_z:.1f}]"
    )
    return bounds
