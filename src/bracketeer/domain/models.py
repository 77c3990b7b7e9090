"""Domain models for fighters, matches, brackets and tournaments."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping


class MatchStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"


class TournamentStatus(str, Enum):
    SETUP = "setup"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


DECIDED_BY_KNOCKOUT = "knockout"
DECIDED_BY_TIE_BREAK = "tie_break"
DECIDED_BY_BYE = "bye"
DECIDED_BY_DRAW = "draw"


@dataclass(frozen=True, kw_only=True)
class FighterStats:
    health: int
    max_health: int
    strength: int
    agility: int
    defense: int
    luck: int
    magic: int | None = None
    ranged: int | None = None
    intelligence: int | None = None
    unique_abilities: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "health": self.health,
            "maxHealth": self.max_health,
            "strength": self.strength,
            "agility": self.agility,
            "defense": self.defense,
            "luck": self.luck,
        }
        for key, value in (
            ("magic", self.magic),
            ("ranged", self.ranged),
            ("intelligence", self.intelligence),
        ):
            if value is not None:
                payload[key] = value
        if self.unique_abilities:
            payload["uniqueAbilities"] = list(self.unique_abilities)
        return payload

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FighterStats:
        health = int(data["health"])
        return cls(
            health=health,
            max_health=int(data.get("maxHealth", data.get("max_health", health))),
            strength=int(data["strength"]),
            agility=int(data["agility"]),
            defense=int(data["defense"]),
            luck=int(data["luck"]),
            magic=_optional_int(data.get("magic")),
            ranged=_optional_int(data.get("ranged")),
            intelligence=_optional_int(data.get("intelligence")),
            unique_abilities=tuple(
                str(item)
                for item in data.get("uniqueAbilities", data.get("unique_abilities")) or ()
            ),
        )


@dataclass(frozen=True, kw_only=True)
class Fighter:
    """A tournament entrant. Never mutated while a match is running."""

    id: str
    name: str
    stats: FighterStats
    description: str = ""
    image_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "stats": self.stats.to_dict(),
        }
        if self.image_url:
            payload["imageUrl"] = self.image_url
        return payload

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Fighter:
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            stats=FighterStats.from_dict(data["stats"]),
            description=str(data.get("description") or ""),
            image_url=data.get("imageUrl"),
        )


@dataclass(frozen=True, kw_only=True)
class BattleLogEntry:
    """One simulated combat round."""

    round: int
    attacker: str
    defender: str
    attacker_damage: int
    defender_damage: int
    attacker_health_after: int
    defender_health_after: int
    attack_commentary: str = ""
    defense_commentary: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "round": self.round,
            "attacker": self.attacker,
            "defender": self.defender,
            "attackCommentary": self.attack_commentary,
            "defenseCommentary": self.defense_commentary,
            "attackerDamage": self.attacker_damage,
            "defenderDamage": self.defender_damage,
            "healthAfter": {
                "attacker": self.attacker_health_after,
                "defender": self.defender_health_after,
            },
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> BattleLogEntry:
        health_after = data.get("healthAfter") or {}
        return cls(
            round=int(data["round"]),
            attacker=str(data["attacker"]),
            defender=str(data["defender"]),
            attacker_damage=int(data.get("attackerDamage", 0)),
            defender_damage=int(data.get("defenderDamage", 0)),
            attacker_health_after=int(health_after.get("attacker", 0)),
            defender_health_after=int(health_after.get("defender", 0)),
            attack_commentary=str(data.get("attackCommentary") or ""),
            defense_commentary=str(data.get("defenseCommentary") or ""),
        )


@dataclass(frozen=True, kw_only=True)
class Match:
    id: str
    round: int
    match_number: int
    fighter_a: Fighter | None = None
    fighter_b: Fighter | None = None
    status: MatchStatus = MatchStatus.PENDING
    winner: Fighter | None = None
    battle_log: tuple[BattleLogEntry, ...] = ()
    decided_by: str | None = None

    @property
    def index(self) -> int:
        """Zero-based position within the round."""

        return self.match_number - 1

    @property
    def is_bye(self) -> bool:
        return (
            self.fighter_a is not None
            and self.fighter_b is not None
            and self.fighter_a.id == self.fighter_b.id
        )

    @property
    def is_ready(self) -> bool:
        """Both sides are known and the match has not been played."""

        return (
            self.status is MatchStatus.PENDING
            and self.fighter_a is not None
            and self.fighter_b is not None
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "round": self.round,
            "matchNumber": self.match_number,
            "fighterA": self.fighter_a.to_dict() if self.fighter_a else None,
            "fighterB": self.fighter_b.to_dict() if self.fighter_b else None,
            "status": self.status.value,
            "winner": self.winner.to_dict() if self.winner else None,
            "battleLog": [entry.to_dict() for entry in self.battle_log],
            "decidedBy": self.decided_by,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Match:
        return cls(
            id=str(data["id"]),
            round=int(data["round"]),
            match_number=int(data["matchNumber"]),
            fighter_a=_optional_fighter(data.get("fighterA")),
            fighter_b=_optional_fighter(data.get("fighterB")),
            status=MatchStatus(data.get("status", MatchStatus.PENDING.value)),
            winner=_optional_fighter(data.get("winner")),
            battle_log=tuple(
                BattleLogEntry.from_dict(entry) for entry in data.get("battleLog") or ()
            ),
            decided_by=data.get("decidedBy"),
        )


@dataclass(frozen=True, kw_only=True)
class Bracket:
    round: int
    matches: tuple[Match, ...]

    def to_dict(self) -> dict[str, Any]:
        return {"round": self.round, "matches": [match.to_dict() for match in self.matches]}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Bracket:
        return cls(
            round=int(data["round"]),
            matches=tuple(Match.from_dict(item) for item in data.get("matches") or ()),
        )


@dataclass(frozen=True, kw_only=True)
class Tournament:
    """Snapshot of a single-elimination tournament.

    Engine operations never modify a snapshot in place; each returns a new
    ``Tournament`` which becomes the authoritative state.
    """

    id: str
    name: str
    status: TournamentStatus
    current_round: int
    total_rounds: int
    fighters: tuple[Fighter, ...]
    brackets: tuple[Bracket, ...]
    winner: Fighter | None = None
    created_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc), compare=False
    )

    def iter_matches(self):
        for bracket in self.brackets:
            yield from bracket.matches

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "createdAt": self.created_at.isoformat(),
            "status": self.status.value,
            "currentRound": self.current_round,
            "totalRounds": self.total_rounds,
            "fighters": [fighter.to_dict() for fighter in self.fighters],
            "brackets": [bracket.to_dict() for bracket in self.brackets],
            "winner": self.winner.to_dict() if self.winner else None,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Tournament:
        created_raw = data.get("createdAt")
        created_at = (
            datetime.fromisoformat(created_raw)
            if isinstance(created_raw, str)
            else datetime.now(timezone.utc)
        )
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            status=TournamentStatus(data["status"]),
            current_round=int(data.get("currentRound", 0)),
            total_rounds=int(data["totalRounds"]),
            fighters=tuple(Fighter.from_dict(item) for item in data.get("fighters") or ()),
            brackets=tuple(Bracket.from_dict(item) for item in data.get("brackets") or ()),
            winner=_optional_fighter(data.get("winner")),
            created_at=created_at,
        )


@dataclass(frozen=True)
class TournamentProgress:
    current_round: int
    total_rounds: int
    completed_matches: int
    total_matches: int
    next_match: Match | None = None

    @property
    def percent_complete(self) -> float:
        if not self.total_matches:
            return 100.0
        return self.completed_matches / self.total_matches * 100.0


@dataclass(frozen=True)
class Standing:
    fighter: Fighter
    wins: int = 0
    losses: int = 0
    rounds_advanced: int = 0
    eliminated: bool = False


def _optional_int(value: Any) -> int | None:
    return None if value is None else int(value)


def _optional_fighter(data: Mapping[str, Any] | None) -> Fighter | None:
    return Fighter.from_dict(data) if data else None


__all__ = [
    "BattleLogEntry",
    "Bracket",
    "DECIDED_BY_BYE",
    "DECIDED_BY_DRAW",
    "DECIDED_BY_KNOCKOUT",
    "DECIDED_BY_TIE_BREAK",
    "Fighter",
    "FighterStats",
    "Match",
    "MatchStatus",
    "Standing",
    "Tournament",
    "TournamentProgress",
    "TournamentStatus",
]
