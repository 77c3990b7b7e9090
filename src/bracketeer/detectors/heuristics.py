"""Heuristic roster checks and fuzzy fighter lookup."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Literal, Mapping

from rapidfuzz import fuzz, process

from bracketeer.combat.resolver import LUCK_DIVISOR, ROLL_SIDES
from bracketeer.domain.config import FighterCfg, TournamentCfg


@dataclass(frozen=True)
class HeuristicIssue:
    """Structured representation of a heuristic finding."""

    severity: Literal["info", "warning", "error"]
    message: str


__all__ = ["HeuristicIssue", "detect_roster_issues", "suggest_names"]


def detect_roster_issues(
    config: TournamentCfg,
    fighters: Mapping[str, FighterCfg],
) -> list[HeuristicIssue]:
    """Run lightweight checks that complement schema validation."""

    issues: list[HeuristicIssue] = []
    roster = [fighters[fighter_id] for fighter_id in config.fighters if fighter_id in fighters]
    count = len(roster)

    if count == 1:
        issues.append(
            HeuristicIssue(
                severity="info",
                message="Single-fighter tournament completes immediately with no matches.",
            )
        )
    elif count & (count - 1):
        issues.append(
            HeuristicIssue(
                severity="info",
                message=f"{count} fighters is not a power of two; some fighters will receive byes.",
            )
        )

    if count > 64:
        issues.append(
            HeuristicIssue(
                severity="info",
                message="Large roster; automated runs will take a while with the default delay.",
            )
        )

    for fighter in roster:
        opponents = [other for other in roster if other.id != fighter.id]
        if not opponents:
            continue
        strongest = max(other.stats.strength for other in opponents)
        if fighter.stats.defense >= ROLL_SIDES + strongest:
            issues.append(
                HeuristicIssue(
                    severity="warning",
                    message=(
                        f"Fighter '{fighter.id}' cannot be damaged by any opponent; "
                        "matches will be decided by tie-break."
                    ),
                )
            )
        if fighter.stats.luck >= LUCK_DIVISOR:
            issues.append(
                HeuristicIssue(
                    severity="warning",
                    message=f"Fighter '{fighter.id}' has luck {fighter.stats.luck} and dodges every attack.",
                )
            )

    if config.settings.tie_break == "none" and config.settings.max_rematches == 0:
        issues.append(
            HeuristicIssue(
                severity="warning",
                message="Tie-break 'none' without rematches halts on the first round-cap draw.",
            )
        )

    return issues


def suggest_names(query: str, choices: Iterable[str], *, limit: int = 3, cutoff: float = 60.0) -> list[str]:
    """Return the closest *choices* to *query*, best first."""

    matches = process.extract(
        query.lower(),
        list(choices),
        scorer=fuzz.WRatio,
        processor=str.lower,
        limit=limit,
        score_cutoff=cutoff,
    )
    return [choice for choice, _score, _index in matches]
