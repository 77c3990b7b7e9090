"""Tournament bracket engine and match execution."""

from __future__ import annotations

from .bracket import advance_winner, build_brackets, settle_bye, total_rounds_for
from .controller import (
    ALREADY_COMPLETED,
    NO_PENDING_MATCHES,
    AutomationResult,
    ControllerState,
    ExecutionResult,
    MatchExecutionController,
)
from .engine import TournamentEngine, generate_tournament_name
from .errors import BracketError, ControllerBusyError, MatchStateError, TournamentError

__all__ = [
    "ALREADY_COMPLETED",
    "AutomationResult",
    "BracketError",
    "ControllerBusyError",
    "ControllerState",
    "ExecutionResult",
    "MatchExecutionController",
    "MatchStateError",
    "NO_PENDING_MATCHES",
    "TournamentEngine",
    "TournamentError",
    "advance_winner",
    "build_brackets",
    "generate_tournament_name",
    "settle_bye",
    "total_rounds_for",
]
