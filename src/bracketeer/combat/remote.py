"""Resolver that delegates combat simulation to an external execution endpoint."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict

from bracketeer.domain.models import (
    DECIDED_BY_DRAW,
    DECIDED_BY_KNOCKOUT,
    BattleLogEntry,
    Fighter,
)

from .base import MatchOutcome, ResolverProtocolError
from .http_utils import post_json


@dataclass
class HttpResolver:
    """POSTs both fighters to ``{base_url}/resolve`` and parses the outcome."""

    base_url: str | None = None
    timeout_s: float = 30.0
    max_rounds: int = 6
    headers: Dict[str, str] = field(default_factory=dict, repr=False)
    name: str = "http"

    def __post_init__(self) -> None:
        self._base_url = self.base_url or os.getenv(
            "BRACKETEER_RESOLVER_URL", "http://localhost:8787"
        )

    def resolve_match(self, fighter_a: Fighter, fighter_b: Fighter) -> MatchOutcome:
        url = f"{self._base_url.rstrip('/')}/resolve"
        payload = {
            "fighterA": fighter_a.to_dict(),
            "fighterB": fighter_b.to_dict(),
            "maxRounds": self.max_rounds,
        }
        data = post_json(url, payload, headers=self.headers or None, timeout_s=self.timeout_s)
        return _parse_outcome(data, fighter_a, fighter_b)


def _parse_outcome(data: Dict[str, Any], fighter_a: Fighter, fighter_b: Fighter) -> MatchOutcome:
    raw_log = data.get("battleLog")
    if not isinstance(raw_log, list):
        raise ResolverProtocolError("Resolver response is missing 'battleLog'.")
    try:
        log = tuple(BattleLogEntry.from_dict(entry) for entry in raw_log)
    except (KeyError, TypeError, ValueError) as exc:
        raise ResolverProtocolError(f"Malformed battle log entry: {exc}") from exc

    winner_ref = data.get("winner")
    if isinstance(winner_ref, dict):
        winner_ref = winner_ref.get("id")

    if winner_ref is None:
        winner = None
    elif winner_ref == fighter_a.id:
        winner = fighter_a
    elif winner_ref == fighter_b.id:
        winner = fighter_b
    else:
        raise ResolverProtocolError(
            f"Resolver named winner '{winner_ref}' who is not in this match."
        )

    default_decision = DECIDED_BY_DRAW if winner is None else DECIDED_BY_KNOCKOUT
    decided_by = str(data.get("decidedBy") or default_decision)
    return MatchOutcome(winner, log, decided_by, len(log))


__all__ = ["HttpResolver"]
