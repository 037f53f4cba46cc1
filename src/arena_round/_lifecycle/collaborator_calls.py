# Area: Lifecycle
"""
arena_round._lifecycle.collaborator_calls — Contained collaborator calls
========================================================================

Wraps every per-session collaborator call so that a missing character,
a missing display surface or any other failure for one session is
logged and dropped instead of aborting the phase for everyone else.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Optional

if TYPE_CHECKING:
    from .session_tracker import PlayerSession

logger = logging.getLogger("arena_round.lifecycle.calls")


def call_for_session(
    operation: str,
    session: "PlayerSession",
    fn: Callable[..., Any],
    *args: Any,
    **kwargs: Any,
) -> Optional[Any]:
    """Invoke fn for one session, swallowing and logging any failure.

    Returns fn's result, or None if it raised.
    """
    try:
        return fn(*args, **kwargs)
    except Exception as e:
        logger.warning(
            f"{operation} failed for session {session.session_id}: {e}",
            extra={"session_id": session.session_id},
        )
        return None


def call_guarded(operation: str, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Optional[Any]:
    """Invoke a collaborator call that targets no single session.

    Failures are logged at ERROR with the traceback and the phase goes on.
    """
    try:
        return fn(*args, **kwargs)
    except Exception as e:
        logger.error(f"{operation} failed: {e}", exc_info=True)
        return None
