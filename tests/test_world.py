# Area: World Tests
"""Tests for spawn bounds, hazard planning and loss evaluation."""

import random
from unittest.mock import Mock

import pytest

from arena_round._world.bounds import SpawnBounds, compute_spawn_bounds
from arena_round._world.loss_evaluator import losing_team, read_load
from arena_round._world.spawn_planner import HazardSpawnPlanner
from arena_round.errors import ConfigurationError
from arena_round.types import Region, Vector3

TEAMS = ["Red", "Yellow", "Green", "Blue"]
FIELD = Region(center=Vector3(0, 0, 0), size=Vector3(400, 10, 400))
ROOF = Region(center=Vector3(0, 110, 0), size=Vector3(400, 2, 400))


def make_planner(seed=3):
    bounds = compute_spawn_bounds(FIELD, ROOF, margin=50)
    return HazardSpawnPlanner(bounds, rng=random.Random(seed))


class TestComputeSpawnBounds:
    """Tests for compute_spawn_bounds."""

    def test_margin_and_vertical_faces(self):
        bounds = compute_spawn_bounds(FIELD, ROOF, margin=50)
        assert bounds == SpawnBounds(
            min_x=-150, max_x=150, min_y=5, max_y=109, min_z=-150, max_z=150,
        )
        assert bounds.height == 104

    def test_ceiling_below_field_top_is_fatal(self):
        low_roof = Region(center=Vector3(0, 4, 0), size=Vector3(400, 2, 400))
        with pytest.raises(ConfigurationError) as exc_info:
            compute_spawn_bounds(FIELD, low_roof, margin=50)
        assert exc_info.value.reference == "ceiling_region"

    def test_ceiling_touching_field_top_is_fatal(self):
        flush_roof = Region(center=Vector3(0, 6, 0), size=Vector3(400, 2, 400))
        with pytest.raises(ConfigurationError):
            compute_spawn_bounds(FIELD, flush_roof, margin=50)

    def test_margin_wider_than_field_is_fatal(self):
        with pytest.raises(ConfigurationError) as exc_info:
            compute_spawn_bounds(FIELD, ROOF, margin=250)
        assert exc_info.value.reference == "spawn_margin"


class TestPlannedCount:
    """Tests for the population-scaled hazard count."""

    @pytest.mark.parametrize("population,expected", [
        (0, 160),
        (1, 176),
        (5, 240),
        (6, 250),
        (100, 250),
        (-3, 160),
    ])
    def test_reference_values(self, population, expected):
        assert make_planner().planned_count(population) == expected

    def test_monotonic_and_capped(self):
        planner = make_planner()
        counts = [planner.planned_count(p) for p in range(0, 500)]
        assert counts == sorted(counts)
        assert max(counts) == 250


class TestSpawn:
    """Tests for sampling and spawn requests."""

    def test_every_sample_inside_bounds(self):
        planner = make_planner()
        assert all(planner.bounds.contains(p) for p in planner.positions(1000))

    def test_same_seed_same_positions(self):
        assert list(make_planner(9).positions(20)) == list(make_planner(9).positions(20))

    def test_spawn_requests_one_hazard_each(self):
        hazards = Mock()
        requested = make_planner().spawn(hazards, population=2)
        assert requested == 192
        assert hazards.request_spawn.call_count == 192

    def test_failed_request_does_not_stop_the_rest(self):
        hazards = Mock()
        hazards.request_spawn.side_effect = [None] * 3 + [RuntimeError("busy")] + [None] * 156

        requested = make_planner().spawn(hazards, population=0)

        assert hazards.request_spawn.call_count == 160
        assert requested == 159


class TestReadLoad:
    """Tests for tolerant counter reads."""

    def test_numeric(self):
        hazards = Mock()
        hazards.accumulated_load.return_value = 4
        assert read_load(hazards, "Red") == 4.0

    def test_missing_counter(self):
        hazards = Mock()
        hazards.accumulated_load.return_value = None
        assert read_load(hazards, "Red") is None

    @pytest.mark.parametrize("value", ["7", True, object()])
    def test_non_numeric_counts_as_absent(self, value):
        hazards = Mock()
        hazards.accumulated_load.return_value = value
        assert read_load(hazards, "Red") is None

    def test_failing_read_counts_as_absent(self):
        hazards = Mock()
        hazards.accumulated_load.side_effect = RuntimeError("gone")
        assert read_load(hazards, "Red") is None


class TestLosingTeam:
    """Tests for losing_team."""

    def test_greatest_load_loses_first_on_tie(self):
        loads = {"Red": 5, "Yellow": 9, "Green": 9, "Blue": 2}
        assert losing_team(TEAMS, loads.get) == "Yellow"

    def test_all_zero_means_no_elimination(self):
        loads = dict.fromkeys(TEAMS, 0)
        assert losing_team(TEAMS, loads.get) is None

    def test_all_zero_with_legacy_policy_eliminates_first(self):
        loads = dict.fromkeys(TEAMS, 0)
        assert losing_team(TEAMS, loads.get, eliminate_on_zero_load=True) == "Red"

    def test_teams_without_counter_are_skipped(self):
        loads = {"Green": 1}
        assert losing_team(TEAMS, loads.get) == "Green"

    def test_no_counters_at_all(self):
        assert losing_team(TEAMS, lambda t: None, eliminate_on_zero_load=True) is None
