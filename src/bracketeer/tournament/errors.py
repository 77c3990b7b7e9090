"""Error types raised by the bracket engine and execution controller."""

from __future__ import annotations


class TournamentError(Exception):
    """Base class for tournament invariant violations."""


class BracketError(TournamentError):
    """Raised when a bracket cannot be built or advanced consistently."""


class MatchStateError(TournamentError):
    """Raised when a result is applied to a match that cannot accept it."""


class ControllerBusyError(TournamentError):
    """Raised when a controller is asked to execute while already executing."""


__all__ = ["BracketError", "ControllerBusyError", "MatchStateError", "TournamentError"]
