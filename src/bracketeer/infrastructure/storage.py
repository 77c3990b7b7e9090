"""JSON file store for tournament snapshots."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List

from bracketeer.domain.models import Tournament


class StorageError(Exception):
    """Raised when a tournament cannot be read from or written to disk."""


class TournamentStore:
    """Persist tournaments as ``{id}.json`` files inside *directory*."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def path_for(self, tournament_id: str) -> Path:
        if not tournament_id or "/" in tournament_id or "\\" in tournament_id:
            raise StorageError(f"Invalid tournament id '{tournament_id}'.")
        return self.directory / f"{tournament_id}.json"

    def exists(self, tournament_id: str) -> bool:
        return self.path_for(tournament_id).exists()

    def save(self, tournament: Tournament) -> Path:
        path = self.path_for(tournament.id)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(".json.tmp")
        with tmp_path.open("w", encoding="utf-8") as fh:
            json.dump(tournament.to_dict(), fh, indent=2)
        tmp_path.replace(path)
        return path

    def load(self, tournament_id: str) -> Tournament:
        path = self.path_for(tournament_id)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise StorageError(f"Tournament {tournament_id} not found") from exc
        try:
            return Tournament.from_dict(json.loads(text))
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as exc:
            raise StorageError(f"Tournament file {path} is corrupt: {exc}") from exc

    def list_ids(self) -> List[str]:
        if not self.directory.exists():
            return []
        return sorted(path.stem for path in self.directory.glob("*.json"))


__all__ = ["StorageError", "TournamentStore"]
