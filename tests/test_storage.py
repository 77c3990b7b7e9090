"""Tests for the JSON tournament store and snapshot serialisation."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from bracketeer.combat import CombatResolver, ScriptedRandomSource
from bracketeer.domain.models import Tournament
from bracketeer.infrastructure.storage import StorageError, TournamentStore
from bracketeer.tournament import TournamentEngine


def _played_tournament(make_fighter) -> Tournament:
    engine = TournamentEngine()
    fighters = [make_fighter("ace", strength=100), make_fighter("bo"), make_fighter("cy")]
    tournament = engine.create(fighters, name="Storage Cup", tournament_id="tournament-store")
    resolver = CombatResolver(rng=ScriptedRandomSource([20, 1, 40, 40], cycle=True))
    match = engine.get_next_pending_match(tournament)
    return engine.apply_result(tournament, match, resolver.resolve_match(match.fighter_a, match.fighter_b))


def test_save_and_load_preserve_snapshot(tmp_path: Path, make_fighter) -> None:
    store = TournamentStore(tmp_path / "tournaments")
    tournament = _played_tournament(make_fighter)

    path = store.save(tournament)
    loaded = store.load(tournament.id)

    assert path == tmp_path / "tournaments" / "tournament-store.json"
    assert loaded == tournament
    assert loaded.created_at == tournament.created_at
    assert store.exists(tournament.id)
    assert not path.with_suffix(".json.tmp").exists()


def test_snapshot_uses_camel_case_keys(tmp_path: Path, make_fighter) -> None:
    store = TournamentStore(tmp_path)
    path = store.save(_played_tournament(make_fighter))

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["status"] == "in_progress"
    assert payload["totalRounds"] == 2
    first = payload["brackets"][0]["matches"][0]
    assert first["matchNumber"] == 1
    assert first["decidedBy"] == "knockout"
    assert "healthAfter" in first["battleLog"][0]
    assert payload["fighters"][0]["stats"]["maxHealth"] == 100


def test_missing_tournament_raises(tmp_path: Path) -> None:
    with pytest.raises(StorageError, match="Tournament nope not found"):
        TournamentStore(tmp_path).load("nope")


def test_corrupt_file_raises(tmp_path: Path) -> None:
    (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(StorageError, match="corrupt"):
        TournamentStore(tmp_path).load("broken")


def test_ids_cannot_escape_directory(tmp_path: Path) -> None:
    with pytest.raises(StorageError):
        TournamentStore(tmp_path).path_for("../elsewhere")


def test_list_ids_sorted(tmp_path: Path, roster) -> None:
    store = TournamentStore(tmp_path / "missing")
    assert store.list_ids() == []

    engine = TournamentEngine()
    for tournament_id in ("tournament-b", "tournament-a"):
        store.save(engine.create(roster(2), tournament_id=tournament_id))
    assert store.list_ids() == ["tournament-a", "tournament-b"]
