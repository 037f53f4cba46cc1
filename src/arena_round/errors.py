"""
arena_round.errors — Custom exception classes
==============================================

Defines the exception hierarchy for the round controller.

Only configuration errors are fatal. Per-session collaborator failures
never surface as exceptions outside the operation that hit them.
"""

from __future__ import annotations
from typing import Any, Dict, Optional
import json


class ArenaRoundError(Exception):
    """Base exception for all arena_round errors."""
    pass


class ConfigurationError(ArenaRoundError):
    """Raised at startup when a required static reference is missing or invalid."""

    def __init__(
        self,
        reference: str,
        reason: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.reference = reference
        self.reason = reason
        self.details = details or {}
        super().__init__(f"Configuration error for '{reference}': {reason}")

    def format_error_log(self) -> str:
        return _format_error_block(
            error_type="CONFIGURATION_ERROR",
            reference=self.reference,
            reason=self.reason,
            details=self.details,
        )


class InvalidPhaseTransition(ArenaRoundError):
    """Raised when the lifecycle attempts a transition outside the table."""

    def __init__(self, phase: str, event: str):
        self.phase = phase
        self.event = event
        super().__init__(f"Invalid transition: {event} from {phase}")


class UnknownTeamError(ArenaRoundError):
    """Raised when a session is placed on a team the registry does not hold."""

    def __init__(self, team_id: str):
        self.team_id = team_id
        super().__init__(f"Team '{team_id}' is not registered")


def _format_error_block(
    error_type: str,
    reference: str,
    reason: str,
    details: Dict[str, Any],
) -> str:
    """Format a structured error block for fatal startup errors."""
    from datetime import datetime, timezone

    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

    lines = [
        "",
        "=" * 64,
        " CONFIGURATION ERROR — STARTUP ABORTED",
        "=" * 64,
        f" Timestamp:    {timestamp}",
        f" Error Type:   {error_type}",
        f" Reference:    {reference}",
        f" Reason:       {reason}",
    ]

    if details:
        lines.append("")
        lines.append(" ── DETAILS " + "─" * 52)
        lines.append(_indent_json(details))

    lines.append("")
    lines.append("=" * 64)
    lines.append("")

    return "\n".join(lines)


def _indent_json(data: Dict[str, Any], indent: int = 2) -> str:
    """Format JSON with indentation for error logs."""
    try:
        formatted = json.dumps(data, indent=indent, default=str)
        return "\n".join(" " + line for line in formatted.split("\n"))
    except (TypeError, ValueError):
        return f" {repr(data)}"
