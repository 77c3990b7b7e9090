"""Core resolver protocol, random sources and error types."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable, Protocol, Tuple, runtime_checkable

from bracketeer.domain.models import (
    DECIDED_BY_DRAW,
    BattleLogEntry,
    Fighter,
)


class ResolverError(Exception):
    """Base class for failures raised while resolving a match."""


class ResolverUnavailable(ResolverError):
    """Raised when a resolver cannot be reached or is disabled."""


class ResolverTimeout(ResolverError):
    """Raised when a resolver does not answer within its time budget."""


class ResolverServerError(ResolverError):
    """Raised when a remote resolver reports an internal error."""


class ResolverProtocolError(ResolverError):
    """Raised when a resolver returns a payload that cannot be interpreted."""


@runtime_checkable
class RandomSource(Protocol):
    """Source of inclusive random integers."""

    def next_int(self, minimum: int, maximum: int) -> int:
        """Return an integer N such that ``minimum <= N <= maximum``."""


class SystemRandomSource:
    """``random.Random`` backed source; unseeded unless a seed is supplied."""

    def __init__(self, seed: int | str | None = None) -> None:
        self._rng = random.Random(seed)

    def next_int(self, minimum: int, maximum: int) -> int:
        return self._rng.randint(minimum, maximum)


@dataclass(frozen=True)
class MatchOutcome:
    """Result of a simulated match. ``winner`` is ``None`` for a draw."""

    winner: Fighter | None
    battle_log: Tuple[BattleLogEntry, ...]
    decided_by: str
    rounds: int

    @property
    def is_draw(self) -> bool:
        return self.winner is None or self.decided_by == DECIDED_BY_DRAW


@runtime_checkable
class MatchResolver(Protocol):
    """Anything able to turn two fighters into a :class:`MatchOutcome`."""

    name: str

    def resolve_match(self, fighter_a: Fighter, fighter_b: Fighter) -> MatchOutcome:
        """Simulate a full match between *fighter_a* and *fighter_b*."""


CommentaryPair = Tuple[str, str]
# (round, attacker, defender, attacker_damage, defender_damage) -> (attack, defense)
Commentator = Callable[[int, Fighter, Fighter, int, int], CommentaryPair]


def silent_commentator(
    round_number: int,
    attacker: Fighter,
    defender: Fighter,
    attacker_damage: int,
    defender_damage: int,
) -> CommentaryPair:
    """Leave commentary placeholders empty."""

    return "", ""


def plain_commentator(
    round_number: int,
    attacker: Fighter,
    defender: Fighter,
    attacker_damage: int,
    defender_damage: int,
) -> CommentaryPair:
    """Produce short deterministic commentary lines."""

    if attacker_damage:
        attack = f"{attacker.name} hits {defender.name} for {attacker_damage} damage."
    else:
        attack = f"{defender.name} slips away from {attacker.name}'s attack."
    if defender_damage:
        defense = f"{defender.name} counters for {defender_damage} damage."
    else:
        defense = f"{defender.name} fails to land a counter."
    return attack, defense


__all__ = [
    "Commentator",
    "MatchOutcome",
    "MatchResolver",
    "RandomSource",
    "ResolverError",
    "ResolverProtocolError",
    "ResolverServerError",
    "ResolverTimeout",
    "ResolverUnavailable",
    "SystemRandomSource",
    "plain_commentator",
    "silent_commentator",
]
