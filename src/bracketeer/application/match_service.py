"""Application service that runs standalone fights and records match artefacts."""

from __future__ import annotations

import json
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from rich.console import Console

from bracketeer.combat.base import MatchOutcome, MatchResolver
from bracketeer.domain.models import Fighter, Match, Tournament
from bracketeer.utils.paths import battle_filename


@dataclass(frozen=True)
class FightContext:
    fighter_a: Fighter
    fighter_b: Fighter
    output_dir: Path | None = None
    match_id: str = "exhibition"


class MatchService:
    """Runs one-off fights and writes per-match battle artefacts."""

    def __init__(
        self,
        *,
        resolver: MatchResolver,
        console: Console | None = None,
    ) -> None:
        self.resolver = resolver
        self.console = console or Console()

    def run(self, context: FightContext) -> dict[str, Any]:
        if context.fighter_a.id == context.fighter_b.id:
            raise ValueError("A fighter cannot fight itself outside of a bye.")
        self.console.log(
            f"[bold yellow]Starting fight:[/bold yellow] {context.fighter_a.name} vs {context.fighter_b.name}"
        )
        start_time = time.monotonic()
        outcome = self.resolver.resolve_match(context.fighter_a, context.fighter_b)
        elapsed = time.monotonic() - start_time

        payload = self._payload(
            match_id=context.match_id,
            fighter_a=context.fighter_a,
            fighter_b=context.fighter_b,
            outcome=outcome,
            elapsed=elapsed,
        )
        if context.output_dir is not None:
            payload["meta"]["output_path"] = str(
                self._write(context.output_dir, context.match_id, payload)
            )
        return payload

    def record(self, tournament: Tournament, match: Match, output_dir: Path) -> Path:
        """Write the artefact for a completed tournament match."""

        if match.fighter_a is None or match.fighter_b is None or match.winner is None:
            raise ValueError(f"Match {match.id} has not been played.")
        outcome = MatchOutcome(
            match.winner, match.battle_log, match.decided_by or "", len(match.battle_log)
        )
        payload = self._payload(
            match_id=match.id,
            fighter_a=match.fighter_a,
            fighter_b=match.fighter_b,
            outcome=outcome,
            elapsed=None,
        )
        payload["meta"]["tournament"] = {"id": tournament.id, "name": tournament.name}
        payload["meta"]["round"] = match.round
        path = self._write(output_dir, match.id, payload)
        self.console.log(f"Battle log saved: {path.name}")
        return path

    # ------------------------------------------------------------------
    def _payload(
        self,
        *,
        match_id: str,
        fighter_a: Fighter,
        fighter_b: Fighter,
        outcome: MatchOutcome,
        elapsed: float | None,
    ) -> dict[str, Any]:
        return {
            "meta": {
                "match_id": match_id,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "resolver": self.resolver.name,
                "fighterA": fighter_a.to_dict(),
                "fighterB": fighter_b.to_dict(),
            },
            "result": {
                "winner": outcome.winner.id if outcome.winner else None,
                "decided_by": outcome.decided_by,
                "draw": outcome.is_draw,
            },
            "battleLog": [entry.to_dict() for entry in outcome.battle_log],
            "runtime": {
                "rounds": outcome.rounds,
                "elapsed_seconds": round(elapsed, 4) if elapsed is not None else None,
            },
        }

    def _write(self, output_dir: Path, match_id: str, payload: dict[str, Any]) -> Path:
        output_dir.mkdir(parents=True, exist_ok=True)
        meta = payload["meta"]
        filename = battle_filename(meta["fighterA"]["name"], meta["fighterB"]["name"], match_id)
        path = output_dir / filename
        with path.open("w", encoding="utf-8") as fh:
            json.dump(payload, fh, indent=2)
        return path


__all__ = ["FightContext", "MatchService"]
