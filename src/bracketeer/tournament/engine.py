"""Tournament state transitions: creation, result application and reporting."""

from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import datetime
from typing import Dict, List, Sequence

from bracketeer.combat.base import MatchOutcome, RandomSource, SystemRandomSource
from bracketeer.domain.config import SEEDING_MODES
from bracketeer.domain.models import (
    DECIDED_BY_BYE,
    Fighter,
    Match,
    MatchStatus,
    Standing,
    Tournament,
    TournamentProgress,
    TournamentStatus,
)

from .bracket import advance_winner, build_brackets, replace_match, total_rounds_for
from .errors import MatchStateError, TournamentError

SEEDING_ORDERED = "ordered"
SEEDING_RANDOM = "random"


class TournamentEngine:
    """Owns the rules for moving a :class:`Tournament` from one snapshot to the next.

    The engine holds no tournament state of its own. Every operation takes a
    snapshot and returns a new one; callers keep the returned value as the
    authoritative state.
    """

    def create(
        self,
        fighters: Sequence[Fighter],
        *,
        name: str | None = None,
        tournament_id: str | None = None,
        seeding: str = SEEDING_ORDERED,
        rng: RandomSource | None = None,
    ) -> Tournament:
        if not fighters:
            raise TournamentError("A tournament needs at least one fighter.")
        roster = self._seed(list(fighters), seeding, rng)
        total_rounds = total_rounds_for(len(roster))
        brackets = build_brackets(roster)

        tournament = Tournament(
            id=tournament_id or _new_tournament_id(),
            name=name or generate_tournament_name(),
            status=TournamentStatus.SETUP,
            current_round=1 if total_rounds else 0,
            total_rounds=total_rounds,
            fighters=tuple(roster),
            brackets=brackets,
        )
        if total_rounds == 0:
            return replace(tournament, status=TournamentStatus.COMPLETED, winner=roster[0])
        return tournament

    def get_next_pending_match(self, tournament: Tournament) -> Match | None:
        """Return the first playable match in round order, if any."""

        for bracket in tournament.brackets:
            for match in bracket.matches:
                if match.is_ready:
                    return match
        return None

    def apply_result(
        self,
        tournament: Tournament,
        match: Match,
        outcome: MatchOutcome,
    ) -> Tournament:
        """Record *outcome* for *match* and return the updated tournament."""

        current = self.find_match(tournament, match.id)
        if current is None:
            raise MatchStateError(f"Match {match.id} is not part of tournament {tournament.id}.")
        if current.status is not MatchStatus.PENDING:
            raise MatchStateError(f"Match {match.id} is {current.status.value}, not pending.")
        if current.fighter_a is None or current.fighter_b is None:
            raise MatchStateError(f"Match {match.id} is missing a fighter.")
        if outcome.is_draw:
            raise MatchStateError(f"Match {match.id} cannot be completed with a draw.")
        if outcome.winner.id not in (current.fighter_a.id, current.fighter_b.id):
            raise MatchStateError(
                f"Winner '{outcome.winner.id}' did not fight in match {match.id}."
            )

        completed = replace(
            current,
            status=MatchStatus.COMPLETED,
            winner=outcome.winner,
            battle_log=tuple(outcome.battle_log),
            decided_by=outcome.decided_by,
        )
        brackets = replace_match(tournament.brackets, completed)
        brackets = advance_winner(brackets, completed)
        return self._refresh(replace(tournament, brackets=brackets), completed)

    def is_complete(self, tournament: Tournament) -> bool:
        if not tournament.brackets:
            return tournament.winner is not None
        final = tournament.brackets[-1].matches[0]
        return final.status is MatchStatus.COMPLETED and final.winner is not None

    def find_match(self, tournament: Tournament, match_id: str) -> Match | None:
        for match in tournament.iter_matches():
            if match.id == match_id:
                return match
        return None

    def progress(self, tournament: Tournament) -> TournamentProgress:
        matches = list(tournament.iter_matches())
        completed = sum(1 for match in matches if match.status is MatchStatus.COMPLETED)
        return TournamentProgress(
            current_round=tournament.current_round,
            total_rounds=tournament.total_rounds,
            completed_matches=completed,
            total_matches=len(matches),
            next_match=self.get_next_pending_match(tournament),
        )

    def standings(self, tournament: Tournament) -> List[Standing]:
        """Wins, losses and depth reached per fighter, best first."""

        records: Dict[str, Dict[str, int]] = {
            fighter.id: {"wins": 0, "losses": 0, "rounds": 0, "eliminated": 0}
            for fighter in tournament.fighters
        }
        for match in tournament.iter_matches():
            if match.status is not MatchStatus.COMPLETED or match.winner is None:
                continue
            winner_record = records.setdefault(
                match.winner.id, {"wins": 0, "losses": 0, "rounds": 0, "eliminated": 0}
            )
            winner_record["rounds"] = max(winner_record["rounds"], match.round)
            if match.decided_by == DECIDED_BY_BYE:
                continue
            winner_record["wins"] += 1
            loser = match.fighter_b if match.winner.id == match.fighter_a.id else match.fighter_a
            loser_record = records.setdefault(
                loser.id, {"wins": 0, "losses": 0, "rounds": 0, "eliminated": 0}
            )
            loser_record["losses"] += 1
            loser_record["eliminated"] = 1

        by_id = {fighter.id: fighter for fighter in tournament.fighters}
        table = [
            Standing(
                fighter=by_id[fighter_id],
                wins=record["wins"],
                losses=record["losses"],
                rounds_advanced=record["rounds"],
                eliminated=bool(record["eliminated"]),
            )
            for fighter_id, record in records.items()
            if fighter_id in by_id
        ]
        table.sort(key=lambda item: (item.eliminated, -item.rounds_advanced, -item.wins, item.losses))
        return table

    # ------------------------------------------------------------------
    def _refresh(self, tournament: Tournament, completed: Match) -> Tournament:
        if self.is_complete(tournament):
            final = tournament.brackets[-1].matches[0]
            return replace(
                tournament,
                status=TournamentStatus.COMPLETED,
                current_round=tournament.total_rounds,
                winner=final.winner,
            )
        eligible_rounds = [match.round for match in tournament.iter_matches() if match.is_ready]
        current_round = max(eligible_rounds) if eligible_rounds else completed.round
        return replace(
            tournament,
            status=TournamentStatus.IN_PROGRESS,
            current_round=current_round,
            winner=None,
        )

    def _seed(
        self,
        roster: List[Fighter],
        seeding: str,
        rng: RandomSource | None,
    ) -> List[Fighter]:
        if seeding not in SEEDING_MODES:
            raise TournamentError(f"Unsupported seeding mode '{seeding}'.")
        if seeding == SEEDING_ORDERED:
            return roster
        rng = rng or SystemRandomSource()
        # Fisher-Yates over the injected source so seeded runs are repeatable.
        for index in range(len(roster) - 1, 0, -1):
            swap = rng.next_int(0, index)
            roster[index], roster[swap] = roster[swap], roster[index]
        return roster


def generate_tournament_name(now: datetime | None = None) -> str:
    """Name a tournament after its creation time, e.g. ``Tournament Oct 17, 2026 09:30 AM``."""

    now = now or datetime.now()
    return f"Tournament {now.strftime('%b')} {now.day}, {now.year} {now.strftime('%I:%M %p')}"


def _new_tournament_id() -> str:
    return f"tournament-{uuid.uuid4().hex[:12]}"


__all__ = [
    "SEEDING_ORDERED",
    "SEEDING_RANDOM",
    "TournamentEngine",
    "generate_tournament_name",
]
