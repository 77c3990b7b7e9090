"""Domain models representing configuration artifacts."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .models import Fighter, FighterStats

TIE_BREAK_POLICIES: tuple[str, ...] = (
    "health_fraction",
    "health_fraction_then_coin",
    "none",
)
SEEDING_MODES: tuple[str, ...] = ("ordered", "random")
RESOLVER_KINDS: tuple[str, ...] = ("local", "http")


class ConfigError(Exception):
    """Raised when configuration files fail validation."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


@dataclass(frozen=True, kw_only=True)
class FighterCfg:
    path: Path = field(repr=False, compare=False)
    id: str
    name: str
    stats: FighterStats
    description: str = ""
    image_url: str | None = None
    notes: str | None = None

    def to_fighter(self) -> Fighter:
        return Fighter(
            id=self.id,
            name=self.name,
            stats=self.stats,
            description=self.description,
            image_url=self.image_url,
        )


@dataclass(frozen=True, kw_only=True)
class TournamentSettings:
    max_rounds: int = 6
    inter_match_delay: float = 1.0
    tie_break: str = "health_fraction"
    max_rematches: int = 3
    seeding: str = "ordered"
    resolver: str = "local"
    resolver_url: str | None = None
    resolver_timeout: float = 30.0
    output_dir: str = "results"
    storage_dir: str = "tournaments"


@dataclass(frozen=True, kw_only=True)
class TournamentCfg:
    path: Path = field(repr=False, compare=False)
    name: str
    description: str
    fighters: list[str]
    settings: TournamentSettings
    notes: str | None = None


__all__ = [
    "ConfigError",
    "FighterCfg",
    "RESOLVER_KINDS",
    "SEEDING_MODES",
    "TIE_BREAK_POLICIES",
    "TournamentCfg",
    "TournamentSettings",
]
