# Area: Lifecycle Tests
"""Tests for relocation and guarded collaborator calls."""

import logging
from unittest.mock import AsyncMock, Mock

import pytest

from arena_round import Collaborators, DemoWorld
from arena_round._lifecycle.collaborator_calls import call_for_session, call_guarded
from arena_round._lifecycle.movement import Relocator
from arena_round._lifecycle.session_tracker import PlayerSession
from arena_round._lifecycle.team_registry import LOBBY, TeamRegistry
from arena_round._runner_config import RoundSettings

SETTINGS = RoundSettings(character_wait_seconds=0, team_areas={"Blue": "BlueBase"})
REGISTRY = TeamRegistry(SETTINGS.team_ids)


class TestCallForSession:
    """Tests for per-session failure containment."""

    def test_returns_result(self):
        assert call_for_session("op", PlayerSession(1, "a", LOBBY), lambda x: x * 2, 4) == 8

    def test_failure_logged_and_contained(self, caplog):
        def broken():
            raise RuntimeError("client gone")

        with caplog.at_level(logging.WARNING, logger="arena_round"):
            assert call_for_session("status", PlayerSession(1, "a", LOBBY), broken) is None
        assert "client gone" in caplog.text

    def test_guarded_logs_error(self, caplog):
        with caplog.at_level(logging.ERROR, logger="arena_round"):
            assert call_guarded("clear hazards", Mock(side_effect=OSError("down"))) is None
        assert "clear hazards failed" in caplog.text


class TestRelocator:
    """Tests for Relocator."""

    @pytest.mark.asyncio
    async def test_moves_to_area_of_current_team(self):
        world = DemoWorld(areas={
            "LobbySpawn": DemoWorld().areas["LobbySpawn"],
            "GameSpawn": DemoWorld().areas["GameSpawn"],
            "BlueBase": DemoWorld().areas["GameSpawn"],
        })
        relocator = Relocator(SETTINGS, world.collaborators())
        red = PlayerSession(1, "a", REGISTRY.resolve("Red"))
        blue = PlayerSession(2, "b", REGISTRY.resolve("Blue"))
        for player in (red, blue):
            world.spawn_character(player)

        assert await relocator.relocate_all([red, blue]) == 2
        assert world.relocations == [(1, "GameSpawn"), (2, "BlueBase")]

    @pytest.mark.asyncio
    async def test_disconnected_session_not_moved(self):
        world = DemoWorld()
        player = PlayerSession(1, "a", LOBBY, connected=False)
        world.spawn_character(player)
        assert await Relocator(SETTINGS, world.collaborators()).relocate(player) is False
        assert world.relocations == []

    @pytest.mark.asyncio
    async def test_missing_character_skipped(self):
        world = DemoWorld()
        relocator = Relocator(SETTINGS, world.collaborators())
        assert await relocator.relocate(PlayerSession(1, "a", LOBBY)) is False

    @pytest.mark.asyncio
    async def test_failing_wait_counts_as_missing(self):
        characters = Mock()
        characters.has_character.return_value = False
        characters.wait_for_character = AsyncMock(side_effect=RuntimeError("lost"))
        world = Mock()
        bundle = Collaborators(
            world=world, characters=characters, display=Mock(),
            hazards=Mock(), rewards=Mock(), bots=Mock(),
        )
        relocator = Relocator(SETTINGS, bundle)

        assert await relocator.relocate(PlayerSession(1, "a", LOBBY)) is False
        world.relocate.assert_not_called()

    @pytest.mark.asyncio
    async def test_relocate_failure_is_contained(self):
        world = Mock()
        characters = Mock()
        characters.has_character.return_value = True
        world.relocate.side_effect = RuntimeError("physics")
        bundle = Collaborators(
            world=world, characters=characters, display=Mock(),
            hazards=Mock(), rewards=Mock(), bots=Mock(),
        )
        player = PlayerSession(1, "a", LOBBY)
        assert await Relocator(SETTINGS, bundle).relocate(player) is True
        world.relocate.assert_called_once_with(player, "LobbySpawn", 5.0)
