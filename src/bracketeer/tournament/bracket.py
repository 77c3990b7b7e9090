"""Single-elimination bracket construction and winner advancement."""

from __future__ import annotations

from dataclasses import replace
from typing import List, Sequence, Tuple

from bracketeer.domain.models import (
    DECIDED_BY_BYE,
    Bracket,
    Fighter,
    Match,
    MatchStatus,
)

from .errors import BracketError

Brackets = Tuple[Bracket, ...]


def total_rounds_for(fighter_count: int) -> int:
    """Return ``ceil(log2(fighter_count))``; a lone fighter needs no rounds."""

    if fighter_count < 1:
        raise BracketError("A tournament needs at least one fighter.")
    return (fighter_count - 1).bit_length()


def match_id(round_number: int, match_number: int) -> str:
    return f"match-{round_number}-{match_number}"


def build_brackets(fighters: Sequence[Fighter]) -> Brackets:
    """Build every round of the bracket and settle first-round byes.

    Fighters are paired in list order. An odd roster gives the last fighter a
    bye, recorded as a match against itself that is completed immediately and
    advanced into round two.
    """

    total_rounds = total_rounds_for(len(fighters))
    seen: set[str] = set()
    for fighter in fighters:
        if fighter.id in seen:
            raise BracketError(f"Fighter id '{fighter.id}' appears more than once.")
        seen.add(fighter.id)
    if total_rounds == 0:
        return ()

    first_round: List[Match] = []
    for index in range(0, len(fighters), 2):
        fighter_a = fighters[index]
        fighter_b = fighters[index + 1] if index + 1 < len(fighters) else fighter_a
        number = index // 2 + 1
        first_round.append(
            Match(
                id=match_id(1, number),
                round=1,
                match_number=number,
                fighter_a=fighter_a,
                fighter_b=fighter_b,
            )
        )

    brackets: List[Bracket] = [Bracket(round=1, matches=tuple(first_round))]
    count = len(first_round)
    for round_number in range(2, total_rounds + 1):
        count = (count + 1) // 2
        brackets.append(
            Bracket(
                round=round_number,
                matches=tuple(
                    Match(id=match_id(round_number, number), round=round_number, match_number=number)
                    for number in range(1, count + 1)
                ),
            )
        )
    if count != 1:
        raise BracketError(f"Final round has {count} matches; expected exactly one.")

    result: Brackets = tuple(brackets)
    for match in first_round:
        if match.is_bye:
            result = settle_bye(result, match)
    return result


def settle_bye(brackets: Brackets, match: Match) -> Brackets:
    """Complete a bye match in place and push its fighter onward."""

    if not match.is_bye:
        raise BracketError(f"Match {match.id} is not a bye.")
    completed = replace(
        match,
        status=MatchStatus.COMPLETED,
        winner=match.fighter_a,
        battle_log=(),
        decided_by=DECIDED_BY_BYE,
    )
    return advance_winner(replace_match(brackets, completed), completed)


def advance_winner(brackets: Brackets, match: Match) -> Brackets:
    """Place the winner of *match* into its slot in the following round.

    The destination is ``floor(i / 2)`` in the next round, on side A for an
    even index ``i`` and side B for an odd one. A destination fed by a single
    match (odd-sized round) becomes a bye and is settled straight away.
    """

    if match.status is not MatchStatus.COMPLETED or match.winner is None:
        raise BracketError(f"Match {match.id} has no winner to advance.")
    if match.round >= len(brackets):
        return brackets

    source_round = brackets[match.round - 1]
    next_round = brackets[match.round]
    destination_index = match.index // 2
    destination = next_round.matches[destination_index]
    winner = match.winner

    if match.index % 2 == 0:
        _ensure_slot_free(destination, destination.fighter_a, winner)
        updated = replace(destination, fighter_a=winner)
    else:
        _ensure_slot_free(destination, destination.fighter_b, winner)
        updated = replace(destination, fighter_b=winner)

    single_feeder = 2 * destination_index + 1 >= len(source_round.matches)
    if single_feeder:
        updated = replace(updated, fighter_b=winner)
        return settle_bye(replace_match(brackets, updated), updated)
    return replace_match(brackets, updated)


def _ensure_slot_free(destination: Match, occupant: Fighter | None, winner: Fighter) -> None:
    if occupant is not None and occupant.id != winner.id:
        raise BracketError(
            f"Slot in {destination.id} is already held by '{occupant.id}'."
        )


def replace_match(brackets: Brackets, match: Match) -> Brackets:
    """Return *brackets* with *match* swapped in at its round and position."""

    bracket = brackets[match.round - 1]
    matches = list(bracket.matches)
    if matches[match.index].id != match.id:
        raise BracketError(f"Match {match.id} does not belong at that position.")
    matches[match.index] = match
    updated = replace(bracket, matches=tuple(matches))
    return brackets[: match.round - 1] + (updated,) + brackets[match.round:]


__all__ = [
    "advance_winner",
    "build_brackets",
    "match_id",
    "replace_match",
    "settle_bye",
    "total_rounds_for",
]
