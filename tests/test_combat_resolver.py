"""Tests for the in-process combat resolver."""

from __future__ import annotations

import pytest

from bracketeer.combat import (
    CombatResolver,
    ScriptedRandomSource,
    SystemRandomSource,
    plain_commentator,
    resolve_round,
    roll_damage,
)
from bracketeer.domain.models import DECIDED_BY_DRAW, DECIDED_BY_KNOCKOUT, DECIDED_BY_TIE_BREAK

NO_DODGE = 40


def test_damage_is_roll_plus_strength_minus_defense(make_fighter) -> None:
    attacker = make_fighter("x", strength=10, defense=10)
    soft = make_fighter("soft", strength=10, defense=10)
    armoured = make_fighter("armoured", strength=10, defense=50)

    dealt_soft, _ = roll_damage(ScriptedRandomSource([15, 15, NO_DODGE, NO_DODGE]), attacker, soft)
    dealt_armoured, countered = roll_damage(
        ScriptedRandomSource([15, 15, NO_DODGE, NO_DODGE]), attacker, armoured
    )

    assert dealt_soft == 15
    assert dealt_armoured == 0
    assert countered == 15
    assert dealt_armoured < dealt_soft


def test_luck_dodge_cancels_damage(make_fighter) -> None:
    attacker = make_fighter("x", strength=10, defense=0)
    defender = make_fighter("y", strength=10, defense=0, luck=10)
    rng = ScriptedRandomSource([20, 20, 10, NO_DODGE])

    dealt, countered = roll_damage(rng, attacker, defender)

    assert dealt == 0
    assert countered == 30
    assert rng.calls == [(1, 20), (1, 20), (1, 40), (1, 40)]


def test_round_health_is_floored_at_zero(make_fighter) -> None:
    attacker = make_fighter("x", health=10, strength=30, defense=0)
    defender = make_fighter("y", health=10, strength=30, defense=0)

    entry = resolve_round(
        ScriptedRandomSource([20, 20, NO_DODGE, NO_DODGE]), 1, attacker, defender, 10, 10
    )

    assert entry.attacker_damage == 50
    assert entry.defender_damage == 50
    assert entry.attacker_health_after == 0
    assert entry.defender_health_after == 0


def test_knockout_ends_match_early(make_fighter) -> None:
    fighter_a = make_fighter("a", health=20, strength=10, defense=0)
    fighter_b = make_fighter("b", health=30, strength=0, defense=0)
    rng = ScriptedRandomSource([20, 1, NO_DODGE, NO_DODGE])

    outcome = CombatResolver(rng=rng).resolve_match(fighter_a, fighter_b)

    assert outcome.winner == fighter_a
    assert outcome.decided_by == DECIDED_BY_KNOCKOUT
    assert outcome.rounds == 1
    assert rng.consumed == 4
    assert outcome.battle_log[0].defender_health_after == 0
    assert outcome.battle_log[0].attacker_health_after == 19


def test_initiative_alternates_each_round(make_fighter) -> None:
    fighter_a = make_fighter("a", strength=0, defense=100)
    fighter_b = make_fighter("b", strength=0, defense=100)
    rng = ScriptedRandomSource([1, 1, NO_DODGE, NO_DODGE], cycle=True)

    outcome = CombatResolver(rng=rng, max_rounds=4).resolve_match(fighter_a, fighter_b)

    assert [entry.attacker for entry in outcome.battle_log] == ["a", "b", "a", "b"]
    assert [entry.defender for entry in outcome.battle_log] == ["b", "a", "b", "a"]


def test_round_cap_uses_health_fraction(make_fighter) -> None:
    hurt = make_fighter("hurt", health=50, max_health=100, strength=0, defense=100)
    fresh = make_fighter("fresh", health=100, strength=0, defense=100)
    rng = ScriptedRandomSource([1, 1, NO_DODGE, NO_DODGE], cycle=True)

    outcome = CombatResolver(rng=rng).resolve_match(hurt, fresh)

    assert outcome.rounds == 6
    assert outcome.winner == fresh
    assert outcome.decided_by == DECIDED_BY_TIE_BREAK


def test_equal_fraction_is_a_draw(make_fighter) -> None:
    fighter_a = make_fighter("a", health=60, max_health=120, strength=0, defense=100)
    fighter_b = make_fighter("b", health=40, max_health=80, strength=0, defense=100)
    rng = ScriptedRandomSource([1, 1, NO_DODGE, NO_DODGE], cycle=True)

    outcome = CombatResolver(rng=rng).resolve_match(fighter_a, fighter_b)

    assert outcome.is_draw
    assert outcome.winner is None
    assert outcome.decided_by == DECIDED_BY_DRAW


def test_coin_flip_settles_equal_fraction(make_fighter) -> None:
    fighter_a = make_fighter("a", strength=0, defense=100)
    fighter_b = make_fighter("b", strength=0, defense=100)
    rng = ScriptedRandomSource([1, 1, NO_DODGE, NO_DODGE] * 6 + [2])

    outcome = CombatResolver(
        rng=rng, tie_break="health_fraction_then_coin"
    ).resolve_match(fighter_a, fighter_b)

    assert outcome.winner == fighter_b
    assert outcome.decided_by == DECIDED_BY_TIE_BREAK
    assert rng.calls[-1] == (1, 2)


def test_no_tie_break_leaves_draw(make_fighter) -> None:
    hurt = make_fighter("hurt", health=10, max_health=100, strength=0, defense=100)
    fresh = make_fighter("fresh", health=100, strength=0, defense=100)
    rng = ScriptedRandomSource([1, 1, NO_DODGE, NO_DODGE], cycle=True)

    outcome = CombatResolver(rng=rng, tie_break="none").resolve_match(hurt, fresh)

    assert outcome.is_draw


def test_double_knockout_is_a_draw(make_fighter) -> None:
    fighter_a = make_fighter("a", health=5, strength=10, defense=0)
    fighter_b = make_fighter("b", health=5, strength=10, defense=0)
    rng = ScriptedRandomSource([1, 1, NO_DODGE, NO_DODGE])

    outcome = CombatResolver(rng=rng).resolve_match(fighter_a, fighter_b)

    assert outcome.is_draw
    assert outcome.rounds == 1


@pytest.mark.parametrize("seed", range(25))
def test_health_only_decreases_and_match_terminates(make_fighter, seed: int) -> None:
    fighter_a = make_fighter("a", health=60, strength=12, defense=8, luck=6)
    fighter_b = make_fighter("b", health=70, strength=9, defense=11, luck=12)
    resolver = CombatResolver(rng=SystemRandomSource(seed), max_rounds=6)

    outcome = resolver.resolve_match(fighter_a, fighter_b)

    assert 1 <= outcome.rounds <= 6
    health = {"a": 60, "b": 70}
    for entry in outcome.battle_log:
        assert entry.attacker_health_after >= 0
        assert entry.defender_health_after >= 0
        assert entry.attacker_health_after <= health[entry.attacker]
        assert entry.defender_health_after <= health[entry.defender]
        health[entry.attacker] = entry.attacker_health_after
        health[entry.defender] = entry.defender_health_after
    if outcome.winner is not None:
        assert outcome.winner in (fighter_a, fighter_b)


def test_commentator_fills_log_text(make_fighter) -> None:
    fighter_a = make_fighter("a", health=5, strength=10, defense=0)
    fighter_b = make_fighter("b", health=50, strength=0, defense=0)
    rng = ScriptedRandomSource([20, 1, NO_DODGE, NO_DODGE])

    outcome = CombatResolver(rng=rng, max_rounds=1, commentator=plain_commentator).resolve_match(
        fighter_a, fighter_b
    )
    entry = outcome.battle_log[0]

    assert "A hits B for 30 damage." in entry.attack_commentary
    assert entry.defense_commentary == "B counters for 1 damage."


def test_invalid_settings_are_rejected() -> None:
    with pytest.raises(ValueError):
        CombatResolver(max_rounds=0)
    with pytest.raises(ValueError):
        CombatResolver(tie_break="sudden-death")


def test_scripted_source_reports_exhaustion_and_range() -> None:
    rng = ScriptedRandomSource([3])
    assert rng.next_int(1, 6) == 3
    with pytest.raises(LookupError):
        rng.next_int(1, 6)
    with pytest.raises(ValueError):
        ScriptedRandomSource([9]).next_int(1, 6)
