"""Match execution controller: single-step and automated, cancellable runs."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List

from rich.console import Console

from bracketeer.combat.base import MatchOutcome, MatchResolver, ResolverError
from bracketeer.domain.models import (
    DECIDED_BY_BYE,
    Match,
    Tournament,
    TournamentStatus,
)

from .engine import TournamentEngine
from .errors import ControllerBusyError

NO_PENDING_MATCHES = "No pending matches found"
ALREADY_COMPLETED = "Tournament is already completed"
COMPLETION_SIGNALS = (NO_PENDING_MATCHES, ALREADY_COMPLETED)

STOP_COMPLETED = "completed"
STOP_CANCELLED = "cancelled"
STOP_ERROR = "error"


class ControllerState(str, Enum):
    IDLE = "idle"
    EXECUTING = "executing"
    AUTOMATING = "automating"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of a single ``execute_next`` call.

    A failed result carrying one of :data:`COMPLETION_SIGNALS` is how callers
    learn the tournament has nothing left to play; it is not an error.
    """

    success: bool
    tournament: Tournament
    match: Match | None = None
    error: str | None = None
    attempts: int = 0

    @property
    def is_completion_signal(self) -> bool:
        return not self.success and self.error in COMPLETION_SIGNALS


@dataclass(frozen=True)
class AutomationResult:
    tournament: Tournament
    executed: List[Match] = field(default_factory=list)
    stopped_reason: str = STOP_COMPLETED
    error: str | None = None


MatchCallback = Callable[[ExecutionResult], None]


class MatchExecutionController:
    """Run tournament matches one at a time through a resolver."""

    def __init__(
        self,
        *,
        resolver: MatchResolver,
        engine: TournamentEngine | None = None,
        inter_match_delay: float = 1.0,
        max_rematches: int = 3,
        console: Console | None = None,
    ) -> None:
        if inter_match_delay < 0:
            raise ValueError("inter_match_delay cannot be negative.")
        if max_rematches < 0:
            raise ValueError("max_rematches cannot be negative.")
        self.resolver = resolver
        self.engine = engine or TournamentEngine()
        self.inter_match_delay = inter_match_delay
        self.max_rematches = max_rematches
        self.console = console or Console()
        self.state = ControllerState.IDLE
        self.current_match: Match | None = None
        self._lock = threading.Lock()
        self._cancel = threading.Event()

    @property
    def is_executing(self) -> bool:
        return self.state in (ControllerState.EXECUTING, ControllerState.AUTOMATING)

    # ------------------------------------------------------------------
    # Single step
    # ------------------------------------------------------------------
    def execute_next(self, tournament: Tournament) -> ExecutionResult:
        """Play the next eligible match and return the new tournament snapshot."""

        if not self._lock.acquire(blocking=False):
            raise ControllerBusyError("A match is already being executed by this controller.")
        self.state = ControllerState.EXECUTING
        try:
            return self._execute(tournament)
        finally:
            self.state = ControllerState.IDLE
            self._lock.release()

    # ------------------------------------------------------------------
    # Automation
    # ------------------------------------------------------------------
    def automate(
        self,
        tournament: Tournament,
        *,
        on_match: MatchCallback | None = None,
    ) -> AutomationResult:
        """Execute matches until completion, failure or cancellation.

        Cancellation is checked between matches only; a match already being
        resolved always finishes and is applied.
        """

        if not self._lock.acquire(blocking=False):
            raise ControllerBusyError("This controller is already running.")
        self._cancel.clear()
        self.state = ControllerState.AUTOMATING
        executed: List[Match] = []
        try:
            while True:
                if self._cancel.is_set():
                    self.state = ControllerState.CANCELLED
                    self.console.log(
                        f"[yellow]Automation cancelled[/yellow] after {len(executed)} matches."
                    )
                    return AutomationResult(tournament, executed, STOP_CANCELLED)

                result = self._execute(tournament)
                if result.is_completion_signal:
                    return AutomationResult(result.tournament, executed, STOP_COMPLETED)
                if not result.success:
                    self.console.log(f"[red]Automation halted:[/red] {result.error}")
                    return AutomationResult(result.tournament, executed, STOP_ERROR, result.error)

                tournament = result.tournament
                if result.match is not None:
                    executed.append(result.match)
                if on_match is not None:
                    on_match(result)
                if tournament.status is TournamentStatus.COMPLETED:
                    return AutomationResult(tournament, executed, STOP_COMPLETED)

                # Wakes early when cancel() is called; the loop head handles it.
                self._cancel.wait(self.inter_match_delay)
        finally:
            self._cancel.clear()
            self.state = ControllerState.IDLE
            self._lock.release()

    def cancel(self) -> None:
        """Stop automation before the next match starts."""

        if self.state is ControllerState.AUTOMATING:
            self._cancel.set()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _execute(self, tournament: Tournament) -> ExecutionResult:
        if tournament.status is TournamentStatus.COMPLETED:
            return ExecutionResult(False, tournament, error=ALREADY_COMPLETED)

        match = self.engine.get_next_pending_match(tournament)
        if match is None:
            return ExecutionResult(False, tournament, error=NO_PENDING_MATCHES)

        self.current_match = match
        try:
            if match.is_bye:
                outcome = MatchOutcome(match.fighter_a, (), DECIDED_BY_BYE, 0)
                attempts = 0
            else:
                self.console.log(
                    f"[bold yellow]Executing {match.id}:[/bold yellow] "
                    f"{match.fighter_a.name} vs {match.fighter_b.name}"
                )
                try:
                    outcome, attempts = self._resolve(match)
                except ResolverError as exc:
                    self.console.log(f"[red]Resolver failed for {match.id}:[/red] {exc}")
                    return ExecutionResult(False, tournament, match=match, error=str(exc))
                if outcome.is_draw:
                    message = f"Match {match.id} ended in a draw after {attempts} attempts"
                    self.console.log(f"[red]{message}[/red]")
                    return ExecutionResult(
                        False, tournament, match=match, error=message, attempts=attempts
                    )

            updated = self.engine.apply_result(tournament, match, outcome)
        finally:
            self.current_match = None

        completed = self.engine.find_match(updated, match.id)
        self.console.log(
            f"[green]{match.id} complete:[/green] {outcome.winner.name} wins "
            f"({outcome.decided_by}, {outcome.rounds} rounds)"
        )
        return ExecutionResult(True, updated, match=completed, attempts=attempts)

    def _resolve(self, match: Match) -> tuple[MatchOutcome, int]:
        attempts = 0
        outcome: MatchOutcome | None = None
        while attempts <= self.max_rematches:
            attempts += 1
            outcome = self.resolver.resolve_match(match.fighter_a, match.fighter_b)
            if not outcome.is_draw:
                break
            if attempts <= self.max_rematches:
                self.console.log(f"[yellow]{match.id} drawn; rematch {attempts}[/yellow]")
        assert outcome is not None
        return outcome, attempts


__all__ = [
    "ALREADY_COMPLETED",
    "AutomationResult",
    "COMPLETION_SIGNALS",
    "ControllerState",
    "ExecutionResult",
    "MatchExecutionController",
    "NO_PENDING_MATCHES",
    "STOP_CANCELLED",
    "STOP_COMPLETED",
    "STOP_ERROR",
]
