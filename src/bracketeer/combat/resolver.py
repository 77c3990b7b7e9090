"""In-process turn-based combat resolution."""

from __future__ import annotations

from typing import List, Tuple

from bracketeer.domain.config import TIE_BREAK_POLICIES
from bracketeer.domain.models import (
    DECIDED_BY_DRAW,
    DECIDED_BY_KNOCKOUT,
    DECIDED_BY_TIE_BREAK,
    BattleLogEntry,
    Fighter,
)

from .base import (
    Commentator,
    MatchOutcome,
    RandomSource,
    SystemRandomSource,
    silent_commentator,
)

DEFAULT_MAX_ROUNDS = 6
ROLL_SIDES = 20
LUCK_DIVISOR = 40

TIE_BREAK_HEALTH_FRACTION = "health_fraction"
TIE_BREAK_HEALTH_FRACTION_THEN_COIN = "health_fraction_then_coin"
TIE_BREAK_NONE = "none"


def roll_damage(
    rng: RandomSource,
    attacker: Fighter,
    defender: Fighter,
) -> Tuple[int, int]:
    """Roll both sides' damage for a single exchange.

    Returns ``(attacker_damage, defender_damage)`` where the first value is
    dealt to the defender and the second is the defender's counter.
    """

    attacker_roll = rng.next_int(1, ROLL_SIDES) + attacker.stats.strength
    defender_roll = rng.next_int(1, ROLL_SIDES) + defender.stats.strength

    attacker_damage = max(0, attacker_roll - defender.stats.defense)
    defender_damage = max(0, defender_roll - attacker.stats.defense)

    if _dodges(rng, defender):
        attacker_damage = 0
    if _dodges(rng, attacker):
        defender_damage = 0
    return attacker_damage, defender_damage


def _dodges(rng: RandomSource, fighter: Fighter) -> bool:
    # luck/40 chance; luck >= 40 always dodges, luck <= 0 never does.
    return rng.next_int(1, LUCK_DIVISOR) <= fighter.stats.luck


def resolve_round(
    rng: RandomSource,
    round_number: int,
    attacker: Fighter,
    defender: Fighter,
    attacker_health: int,
    defender_health: int,
    commentator: Commentator = silent_commentator,
) -> BattleLogEntry:
    """Play one exchange and return its log entry with post-round health."""

    attacker_damage, defender_damage = roll_damage(rng, attacker, defender)
    attacker_after = max(0, attacker_health - defender_damage)
    defender_after = max(0, defender_health - attacker_damage)
    attack_text, defense_text = commentator(
        round_number, attacker, defender, attacker_damage, defender_damage
    )
    return BattleLogEntry(
        round=round_number,
        attacker=attacker.id,
        defender=defender.id,
        attacker_damage=attacker_damage,
        defender_damage=defender_damage,
        attacker_health_after=attacker_after,
        defender_health_after=defender_after,
        attack_commentary=attack_text,
        defense_commentary=defense_text,
    )


class CombatResolver:
    """Simulate matches round by round until a knockout or the round cap."""

    name = "local"

    def __init__(
        self,
        *,
        rng: RandomSource | None = None,
        max_rounds: int = DEFAULT_MAX_ROUNDS,
        tie_break: str = TIE_BREAK_HEALTH_FRACTION,
        commentator: Commentator | None = None,
    ) -> None:
        if max_rounds < 1:
            raise ValueError("max_rounds must be at least 1.")
        if tie_break not in TIE_BREAK_POLICIES:
            raise ValueError(f"Unsupported tie-break policy '{tie_break}'.")
        self.rng = rng or SystemRandomSource()
        self.max_rounds = max_rounds
        self.tie_break = tie_break
        self.commentator = commentator or silent_commentator

    def resolve_match(self, fighter_a: Fighter, fighter_b: Fighter) -> MatchOutcome:
        health_a = fighter_a.stats.health
        health_b = fighter_b.stats.health
        log: List[BattleLogEntry] = []

        for round_number in range(1, self.max_rounds + 1):
            a_attacks = round_number % 2 == 1
            attacker, defender = (fighter_a, fighter_b) if a_attacks else (fighter_b, fighter_a)
            attacker_health, defender_health = (
                (health_a, health_b) if a_attacks else (health_b, health_a)
            )
            entry = resolve_round(
                self.rng,
                round_number,
                attacker,
                defender,
                attacker_health,
                defender_health,
                self.commentator,
            )
            log.append(entry)
            if a_attacks:
                health_a = entry.attacker_health_after
                health_b = entry.defender_health_after
            else:
                health_b = entry.attacker_health_after
                health_a = entry.defender_health_after

            if health_a <= 0 or health_b <= 0:
                break

        rounds = len(log)
        if health_a <= 0 and health_b <= 0:
            return MatchOutcome(None, tuple(log), DECIDED_BY_DRAW, rounds)
        if health_b <= 0:
            return MatchOutcome(fighter_a, tuple(log), DECIDED_BY_KNOCKOUT, rounds)
        if health_a <= 0:
            return MatchOutcome(fighter_b, tuple(log), DECIDED_BY_KNOCKOUT, rounds)

        winner = self._break_tie(fighter_a, health_a, fighter_b, health_b)
        decided_by = DECIDED_BY_DRAW if winner is None else DECIDED_BY_TIE_BREAK
        return MatchOutcome(winner, tuple(log), decided_by, rounds)

    def _break_tie(
        self,
        fighter_a: Fighter,
        health_a: int,
        fighter_b: Fighter,
        health_b: int,
    ) -> Fighter | None:
        if self.tie_break == TIE_BREAK_NONE:
            return None
        # Compare health_a / max_a against health_b / max_b without floats.
        max_a = max(1, fighter_a.stats.max_health)
        max_b = max(1, fighter_b.stats.max_health)
        left = health_a * max_b
        right = health_b * max_a
        if left > right:
            return fighter_a
        if right > left:
            return fighter_b
        if self.tie_break == TIE_BREAK_HEALTH_FRACTION_THEN_COIN:
            return fighter_a if self.rng.next_int(1, 2) == 1 else fighter_b
        return None


__all__ = [
    "CombatResolver",
    "DEFAULT_MAX_ROUNDS",
    "TIE_BREAK_HEALTH_FRACTION",
    "TIE_BREAK_HEALTH_FRACTION_THEN_COIN",
    "TIE_BREAK_NONE",
    "resolve_round",
    "roll_damage",
]
