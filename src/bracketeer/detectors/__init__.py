"""Roster heuristics and lookup helpers."""

from __future__ import annotations

from .heuristics import HeuristicIssue, detect_roster_issues, suggest_names

__all__ = ["HeuristicIssue", "detect_roster_issues", "suggest_names"]
