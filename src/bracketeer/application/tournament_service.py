"""Tournament use cases keyed by tournament id, backed by the JSON store."""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Sequence

from bracketeer.combat.base import RandomSource
from bracketeer.domain.config import FighterCfg, TournamentCfg
from bracketeer.domain.models import Fighter, Match, Tournament
from bracketeer.infrastructure.storage import TournamentStore
from bracketeer.tournament.controller import (
    AutomationResult,
    ExecutionResult,
    MatchCallback,
    MatchExecutionController,
)
from bracketeer.tournament.engine import TournamentEngine

from .match_service import MatchService


class TournamentService:
    """Load, run and save tournaments by id."""

    def __init__(
        self,
        *,
        store: TournamentStore,
        controller: MatchExecutionController,
        match_service: MatchService,
        engine: TournamentEngine | None = None,
        artefact_dir: Path | None = None,
    ) -> None:
        self.store = store
        self.controller = controller
        self.match_service = match_service
        self.engine = engine or controller.engine
        self.artefact_dir = artefact_dir

    def create(
        self,
        fighters: Sequence[Fighter],
        *,
        name: str | None = None,
        seeding: str = "ordered",
        rng: RandomSource | None = None,
    ) -> Tournament:
        tournament = self.engine.create(fighters, name=name, seeding=seeding, rng=rng)
        self.store.save(tournament)
        return tournament

    def create_from_config(
        self,
        config: TournamentCfg,
        fighters: Mapping[str, FighterCfg],
        *,
        rng: RandomSource | None = None,
    ) -> Tournament:
        roster = [fighters[fighter_id].to_fighter() for fighter_id in config.fighters]
        return self.create(roster, name=config.name, seeding=config.settings.seeding, rng=rng)

    def execute_next_match(self, tournament_id: str) -> ExecutionResult:
        """Run one match for *tournament_id* and save the new snapshot.

        Raises :class:`StorageError` when the id is unknown.
        """

        tournament = self.store.load(tournament_id)
        result = self.controller.execute_next(tournament)
        if result.success:
            self._persist(result)
        return result

    def automate(
        self,
        tournament_id: str,
        *,
        on_match: MatchCallback | None = None,
    ) -> AutomationResult:
        tournament = self.store.load(tournament_id)

        def _after_match(result: ExecutionResult) -> None:
            self._persist(result)
            if on_match is not None:
                on_match(result)

        return self.controller.automate(tournament, on_match=_after_match)

    def cancel(self) -> Match | None:
        """Request a stop and return the match that will still be finished, if any."""

        running = self.controller.current_match
        self.controller.cancel()
        return running

    def get(self, tournament_id: str) -> Tournament:
        return self.store.load(tournament_id)

    def list_ids(self) -> list[str]:
        return self.store.list_ids()

    # ------------------------------------------------------------------
    def _persist(self, result: ExecutionResult) -> None:
        self.store.save(result.tournament)
        if self.artefact_dir is not None and result.match is not None and result.match.battle_log:
            self.match_service.record(result.tournament, result.match, self.artefact_dir)


__all__ = ["TournamentService"]
