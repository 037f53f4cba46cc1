# Area: Shared Tests
"""Tests for the command-line entry point."""

import json
import logging

import pytest

from arena_round import ConfigurationError
from arena_round.cli import (
    DEMO_DEFAULTS,
    is_demo_mode,
    load_config,
    main,
    parse_args,
    run_demo,
)


@pytest.fixture
def quiet_package_logger():
    pkg_logger = logging.getLogger("arena_round")
    saved = (list(pkg_logger.handlers), pkg_logger.level, pkg_logger.propagate)
    yield
    for handler in pkg_logger.handlers:
        handler.close()
    pkg_logger.handlers[:] = saved[0]
    pkg_logger.setLevel(saved[1])
    pkg_logger.propagate = saved[2]


@pytest.fixture
def clean_env(monkeypatch):
    for key in ("DEMO_MODE", "ARENA_ROUND_SECONDS", "ARENA_INTERMISSION_SECONDS",
                "ARENA_TEAM_IDS", "ARENA_LOG_FILE", "ARENA_RANDOM_SEED"):
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


class TestParseArgs:
    """Tests for argument parsing."""

    def test_defaults(self):
        args = parse_args([])
        assert args.demo is False
        assert args.iterations is None
        assert args.players == 8

    def test_demo_flags(self):
        args = parse_args(["--demo", "--iterations", "3", "--players", "12"])
        assert args.demo and args.iterations == 3 and args.players == 12

    def test_demo_mode_from_env(self, clean_env):
        clean_env.setenv("DEMO_MODE", "yes")
        assert is_demo_mode(parse_args([]))


class TestLoadConfig:
    """Tests for layered config loading."""

    def test_demo_defaults(self, clean_env):
        assert load_config(None, demo=True) == DEMO_DEFAULTS

    def test_file_then_env(self, tmp_path, clean_env):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"round_seconds": 90, "winner_reward": 1000}))
        clean_env.setenv("ARENA_ROUND_SECONDS", "45")

        config = load_config(str(path))

        assert config == {"round_seconds": "45", "winner_reward": 1000}

    def test_missing_file(self, tmp_path, clean_env):
        with pytest.raises(ConfigurationError):
            load_config(str(tmp_path / "nope.json"))


class TestMain:
    """Tests for the main entry point."""

    def test_non_demo_refuses_to_run(self, clean_env, capsys):
        assert main([]) == 1
        assert "only demo mode" in capsys.readouterr().err

    def test_bad_config_terminates(self, tmp_path, clean_env, quiet_package_logger):
        clean_env.chdir(tmp_path)
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"team_ids": ["Solo"]}))
        with pytest.raises(SystemExit) as exc_info:
            main(["--demo", "--config", str(path)])
        assert exc_info.value.code == 1


class TestRunDemo:
    """Tests for the demo loop."""

    @pytest.mark.asyncio
    async def test_demo_completes_requested_iterations(self, tmp_path, quiet_package_logger):
        config = {
            "intermission_seconds": 0,
            "round_seconds": 1,
            "tick_seconds": 0.01,
            "setup_settle_seconds": 0,
            "outcome_display_seconds": 0,
            "cleanup_delay_seconds": 0,
            "join_settle_seconds": 0,
            "respawn_settle_seconds": 0,
            "character_wait_seconds": 0,
            "random_seed": 5,
            "log_file": str(tmp_path / "demo.log"),
        }
        await run_demo(config, iterations=2, players=4)
        assert (tmp_path / "demo.log").exists()
