"""
main.py — Host the round controller
===================================

Shows how a game server embeds the controller: build a collaborator
bundle, create the runner, start the lifecycle task and forward player
connects and disconnects to it.

This example uses the in-memory DemoWorld as the "game server".

    python main.py

Press Ctrl+C to stop.
"""

import asyncio

from arena_round import DemoWorld, RoundRunner

# ── Configuration ──
config = {
    # Short phases so you can watch a full round
    "intermission_seconds": 5,
    "round_seconds": 10,
    "setup_settle_seconds": 1,
    "outcome_display_seconds": 2,
    "cleanup_delay_seconds": 1,

    # Teams (at least two; the lobby name must not be one of them)
    "team_ids": ["Red", "Yellow", "Green", "Blue"],

    # Everyone loses on a draw, like the classic game mode
    "eliminate_on_zero_load": True,

    "log_file": "arena_round.log",
}


async def main():
    world = DemoWorld(auto_respawn=True)
    runner = RoundRunner(config=config, collaborators=world.collaborators())

    lifecycle = asyncio.create_task(runner.run(max_iterations=2))

    # ── Players arrive ──
    for player_id in range(1, 7):
        join = runner.connect(player_id, name=f"player-{player_id}")
        session = runner.tracker.get(player_id)
        while session is None:
            await asyncio.sleep(0)
            session = runner.tracker.get(player_id)
        world.spawn_character(session)
        await join

    # ── One of them leaves mid-way ──
    await asyncio.sleep(8)
    await runner.disconnect(3)

    await lifecycle
    print("Coins:", world.coins)
    print("Wins:", world.wins)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nStopped.")
