"""Application services wiring the engine, resolvers and storage together."""

from __future__ import annotations

from .context import ApplicationContext
from .match_service import FightContext, MatchService
from .tournament_service import TournamentService

__all__ = ["ApplicationContext", "FightContext", "MatchService", "TournamentService"]
