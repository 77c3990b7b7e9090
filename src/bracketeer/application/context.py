"""Application-wide context for dependency resolution."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from rich.console import Console

from bracketeer.combat.base import Commentator, MatchResolver, RandomSource
from bracketeer.combat.registry import create_resolver
from bracketeer.domain.config import TournamentSettings
from bracketeer.infrastructure.storage import TournamentStore
from bracketeer.tournament.controller import MatchExecutionController
from bracketeer.tournament.engine import TournamentEngine

from .match_service import MatchService
from .tournament_service import TournamentService


@dataclass
class ApplicationContext:
    """Simple container that wires application services."""

    console: Console
    settings: TournamentSettings
    resolver: MatchResolver
    engine: TournamentEngine
    controller: MatchExecutionController
    match_service: MatchService
    tournament_service: TournamentService

    @classmethod
    def create(
        cls,
        *,
        settings: TournamentSettings | None = None,
        storage_dir: Path | None = None,
        artefact_dir: Path | None = None,
        console: Optional[Console] = None,
        rng: RandomSource | None = None,
        commentator: Commentator | None = None,
        resolver: MatchResolver | None = None,
        inter_match_delay: float | None = None,
    ) -> ApplicationContext:
        console = console or Console()
        settings = settings or TournamentSettings()
        resolver = resolver or create_resolver(
            settings.resolver, settings, rng=rng, commentator=commentator
        )
        engine = TournamentEngine()
        controller = MatchExecutionController(
            resolver=resolver,
            engine=engine,
            inter_match_delay=(
                settings.inter_match_delay if inter_match_delay is None else inter_match_delay
            ),
            max_rematches=settings.max_rematches,
            console=console,
        )
        match_service = MatchService(resolver=resolver, console=console)
        store = TournamentStore(storage_dir or Path(settings.storage_dir))
        tournament_service = TournamentService(
            store=store,
            controller=controller,
            match_service=match_service,
            engine=engine,
            artefact_dir=artefact_dir,
        )
        return cls(
            console=console,
            settings=settings,
            resolver=resolver,
            engine=engine,
            controller=controller,
            match_service=match_service,
            tournament_service=tournament_service,
        )


__all__ = ["ApplicationContext"]
