"""Domain types shared across Bracketeer layers."""

from __future__ import annotations

from .config import ConfigError, FighterCfg, TournamentCfg, TournamentSettings
from .models import (
    BattleLogEntry,
    Bracket,
    Fighter,
    FighterStats,
    Match,
    MatchStatus,
    Standing,
    Tournament,
    TournamentProgress,
    TournamentStatus,
)

__all__ = [
    "BattleLogEntry",
    "Bracket",
    "ConfigError",
    "Fighter",
    "FighterCfg",
    "FighterStats",
    "Match",
    "MatchStatus",
    "Standing",
    "Tournament",
    "TournamentCfg",
    "TournamentProgress",
    "TournamentSettings",
    "TournamentStatus",
]
