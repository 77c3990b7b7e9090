"""Tests for roster heuristics and fuzzy fighter suggestions."""

from __future__ import annotations

from pathlib import Path

from bracketeer.detectors import detect_roster_issues, suggest_names
from bracketeer.domain.config import FighterCfg, TournamentCfg, TournamentSettings
from bracketeer.domain.models import FighterStats


def _fighter(fighter_id: str, *, defense: int = 10, luck: int = 5, strength: int = 10) -> FighterCfg:
    return FighterCfg(
        path=Path(f"{fighter_id}.yaml"),
        id=fighter_id,
        name=fighter_id.title(),
        stats=FighterStats(
            health=100,
            max_health=100,
            strength=strength,
            agility=10,
            defense=defense,
            luck=luck,
        ),
    )


def _tournament(fighter_ids: list[str], **settings) -> TournamentCfg:
    return TournamentCfg(
        path=Path("cup.yaml"),
        name="cup",
        description="",
        fighters=fighter_ids,
        settings=TournamentSettings(**settings),
    )


def test_balanced_power_of_two_roster_has_no_issues() -> None:
    fighters = {fighter_id: _fighter(fighter_id) for fighter_id in ("a", "b", "c", "d")}
    assert detect_roster_issues(_tournament(list(fighters)), fighters) == []


def test_odd_roster_mentions_byes() -> None:
    fighters = {fighter_id: _fighter(fighter_id) for fighter_id in ("a", "b", "c")}
    issues = detect_roster_issues(_tournament(list(fighters)), fighters)
    assert [issue.severity for issue in issues] == ["info"]
    assert "byes" in issues[0].message


def test_single_fighter_roster_is_flagged() -> None:
    fighters = {"a": _fighter("a")}
    issues = detect_roster_issues(_tournament(["a"]), fighters)
    assert any("completes immediately" in issue.message for issue in issues)


def test_untouchable_and_lucky_fighters_are_warned_about() -> None:
    fighters = {
        "wall": _fighter("wall", defense=60),
        "clover": _fighter("clover", luck=40),
    }
    issues = detect_roster_issues(_tournament(["wall", "clover"]), fighters)
    messages = [issue.message for issue in issues if issue.severity == "warning"]
    assert any("'wall' cannot be damaged" in message for message in messages)
    assert any("'clover' has luck 40" in message for message in messages)


def test_strict_draw_settings_are_warned_about() -> None:
    fighters = {"a": _fighter("a"), "b": _fighter("b")}
    issues = detect_roster_issues(_tournament(["a", "b"], tie_break="none", max_rematches=0), fighters)
    assert any("halts" in issue.message for issue in issues)


def test_suggest_names_ranks_close_matches() -> None:
    choices = ["aria", "borin", "cass", "drogan", "elowen"]
    assert suggest_names("dragon", choices)[0] == "drogan"
    assert suggest_names("BORIN", choices)[0] == "borin"
    assert suggest_names("zzzzzz", choices) == []
