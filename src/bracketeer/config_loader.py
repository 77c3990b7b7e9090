"""Convenience re-exports for configuration utilities."""

from __future__ import annotations

from bracketeer.domain.config import (
    ConfigError,
    FighterCfg,
    TournamentCfg,
    TournamentSettings,
)
from bracketeer.infrastructure.config.loader import collect_configs, load_tournament
from bracketeer.infrastructure.config.validators import validate_configs

__all__ = [
    "ConfigError",
    "FighterCfg",
    "TournamentSettings",
    "TournamentCfg",
    "collect_configs",
    "validate_configs",
    "load_tournament",
]
