"""
arena_round.collaborators — Contracts for the systems the controller drives
===========================================================================

The controller owns no world, UI, hazard or currency state. It reaches
those systems through the six abstract classes below. A host game server
subclasses each one (or a single class implementing all of them, see
DemoWorld) and hands them to RoundRunner.

Every method that targets one session must tolerate a session whose
character or display surface is gone. The controller still guards each
call, so an exception raised here only costs that one session the effect.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional

from .types import Region, Vector3

if TYPE_CHECKING:
    from ._lifecycle.session_tracker import PlayerSession


class WorldPositioning(ABC):
    """Static geometry lookups and character placement."""

    @abstractmethod
    def find_region(self, name: str) -> Optional[Region]:
        """Return the named static region, or None if it does not exist."""

    @abstractmethod
    def area_position(self, area: str) -> Optional[Vector3]:
        """Return the reference point of a named area, or None if unknown."""

    @abstractmethod
    def relocate(self, session: "PlayerSession", area: str, height_offset: float) -> None:
        """
        Move the session's character to an area's reference point.

        The character is placed height_offset above the reference point in a
        single move. No-op if the character does not currently exist.
        """


class CharacterLifecycle(ABC):
    """Character existence, respawn events and forced removal."""

    @abstractmethod
    def has_character(self, session: "PlayerSession") -> bool:
        """Return True if the session controls a character right now."""

    @abstractmethod
    async def wait_for_character(self, session: "PlayerSession", timeout: float) -> bool:
        """Suspend until the session has a character or timeout elapses."""

    @abstractmethod
    def kill(self, session: "PlayerSession") -> None:
        """Remove the current character from play. Respawn is left to the engine."""

    @abstractmethod
    def subscribe_respawn(
        self, session: "PlayerSession", callback: Callable[[], None]
    ) -> Callable[[], None]:
        """
        Call callback every time a character spawns for session.

        Returns a function that cancels the subscription.
        """


class StatusDisplay(ABC):
    """Per-session HUD text and the win/lose overlay."""

    @abstractmethod
    def set_status(self, session: "PlayerSession", top_text: str, bottom_text: str) -> None:
        ...

    @abstractmethod
    def set_outcome_overlay(
        self,
        session: "PlayerSession",
        visible: bool,
        top_text: str = "",
        bottom_text: str = "",
        positive: bool = True,
    ) -> None:
        ...


class HazardSubsystem(ABC):
    """Hazard objects and the per-team load counters they feed."""

    @abstractmethod
    def request_spawn(self, position: Vector3) -> None:
        ...

    @abstractmethod
    def clear_all(self) -> None:
        ...

    @abstractmethod
    def force_detonate_all(self) -> None:
        ...

    @abstractmethod
    def accumulated_load(self, team_id: str) -> Optional[float]:
        """Return the team's load counter, or None if the team has none."""


class RewardLedger(ABC):
    """Fire-and-forget progression signals."""

    @abstractmethod
    def credit_currency(self, session: "PlayerSession", amount: int) -> None:
        ...

    @abstractmethod
    def increment_win_count(self, session: "PlayerSession") -> None:
        ...


class BotController(ABC):
    """Bot/AI refresh hook."""

    @abstractmethod
    def reset_signal(self) -> None:
        ...


@dataclass
class Collaborators:
    """Bundle of every collaborator the controller talks to."""

    world: WorldPositioning
    characters: CharacterLifecycle
    display: StatusDisplay
    hazards: HazardSubsystem
    rewards: RewardLedger
    bots: BotController

    @classmethod
    def from_single(cls, impl) -> "Collaborators":
        """Build a bundle from one object that implements every contract."""
        return cls(
            world=impl,
            characters=impl,
            display=impl,
            hazards=impl,
            rewards=impl,
            bots=impl,
        )
