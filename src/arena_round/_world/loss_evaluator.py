# Area: World
"""Loss evaluation from the hazard subsystem's per-team load counters."""
import logging
from numbers import Real
from typing import Callable, Optional, Sequence

from ..collaborators import HazardSubsystem

logger = logging.getLogger("arena_round.world.loss_evaluator")


def read_load(hazards: HazardSubsystem, team_id: str) -> Optional[float]:
    """Read one team's counter; a failed or non-numeric read counts as absent."""
    try:
        value = hazards.accumulated_load(team_id)
    except Exception as e:
        logger.warning(f"Load counter for {team_id} unreadable: {e}")
        return None
    if value is None or isinstance(value, bool) or not isinstance(value, Real):
        return None
    return float(value)


def losing_team(
    team_ids: Sequence[str],
    load_of: Callable[[str], Optional[float]],
    eliminate_on_zero_load: bool = False,
) -> Optional[str]:
    """Determine which team lost the round.

    The loser is the team with the strictly greatest load; on a tie the
    team earlier in ``team_ids`` wins the comparison and is returned.
    Teams without a counter are skipped.

    Args:
        team_ids: Active team identifiers in enumeration order.
        load_of: Returns a team's load, or None if it has no counter.
        eliminate_on_zero_load: When False (default) a loser must have a
            positive load, so an all-zero round eliminates no one. When True
            the first team with a present counter is eliminated even if
            every load is zero.

    Returns:
        The losing team identifier, or None for "no elimination".
    """
    highest = -1.0 if eliminate_on_zero_load else 0.0
    loser: Optional[str] = None

    for team_id in team_ids:
        amount = load_of(team_id)
        if amount is None:
            continue
        if amount > highest:
            highest = amount
            loser = team_id

    if loser is None:
        logger.info("No losing team this round")
    else:
        logger.info(f"Losing team: {loser} (load {highest:g})")
    return loser
