"""Command line interface for Bracketeer."""

from __future__ import annotations

import signal
from pathlib import Path
from typing import Any, Iterable

import typer
from rich.console import Console
from rich.table import Table

from bracketeer.application.context import ApplicationContext
from bracketeer.application.match_service import FightContext
from bracketeer.combat.base import SystemRandomSource, plain_commentator
from bracketeer.config_loader import (
    ConfigError,
    FighterCfg,
    TournamentCfg,
    TournamentSettings,
    collect_configs,
    load_tournament,
    validate_configs,
)
from bracketeer.detectors import detect_roster_issues, suggest_names
from bracketeer.domain.models import Tournament
from bracketeer.infrastructure.storage import StorageError
from bracketeer.tournament.controller import STOP_CANCELLED, STOP_ERROR, ExecutionResult
from bracketeer.utils.paths import resolve_timestamped_output_dir

app = typer.Typer(help="CLI for Bracketeer single-elimination tournaments.")
console = Console()


DEFAULT_CONFIG_DIR = Path("config")
DEFAULT_STORAGE_DIR = Path("tournaments")


def _handle_config_error(exc: ConfigError) -> None:
    console.print(str(exc))
    raise typer.Exit(code=1) from exc


def _load_and_validate(config_dir: Path) -> tuple[
    dict[str, FighterCfg],
    dict[str, TournamentCfg],
]:
    try:
        fighters, tournaments = collect_configs(config_dir)
        validate_configs(fighters, tournaments)
        return fighters, tournaments
    except ConfigError as exc:
        _handle_config_error(exc)
        raise  # pragma: no cover


def _require_fighter(fighter_id: str, store: dict[str, FighterCfg]) -> FighterCfg:
    entity = store.get(fighter_id)
    if entity is None:
        hints = suggest_names(fighter_id, store.keys())
        hint_text = f" Did you mean: {', '.join(hints)}?" if hints else ""
        console.print(f"[red]Unknown fighter '{fighter_id}'.{hint_text}[/red]")
        raise typer.Exit(code=1)
    return entity


def _settings_for(config_dir: Path | None, tournament: str | None) -> TournamentSettings:
    if tournament is None:
        return TournamentSettings()
    try:
        return load_tournament(tournament, config_dir or DEFAULT_CONFIG_DIR).settings
    except ConfigError as exc:
        _handle_config_error(exc)
        raise  # pragma: no cover


def _artefact_base(
    output_dir: Path | None, settings: TournamentSettings, tournament: str | None
) -> Path | None:
    # A named config brings its own output_dir; without one, logs are only kept on request.
    if output_dir is not None or tournament is None:
        return output_dir
    return Path(settings.output_dir)


def _context(
    *,
    settings: TournamentSettings,
    storage_dir: Path | None,
    output_dir: Path | None,
    seed: int | None,
    delay: float | None = None,
) -> ApplicationContext:
    artefact_dir = resolve_timestamped_output_dir(output_dir) if output_dir else None
    if artefact_dir is not None:
        console.print(f"[green]Writing battle logs to: {artefact_dir}[/green]")
    return ApplicationContext.create(
        settings=settings,
        storage_dir=storage_dir,
        artefact_dir=artefact_dir,
        console=console,
        rng=SystemRandomSource(seed),
        commentator=plain_commentator,
        inter_match_delay=delay,
    )


def _load_stored(app_context: ApplicationContext, tournament_id: str) -> Tournament:
    try:
        return app_context.tournament_service.get(tournament_id)
    except StorageError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc


_CONFIG_DIR_OPTION = typer.Option(
    default=DEFAULT_CONFIG_DIR,
    exists=True,
    file_okay=False,
    dir_okay=True,
    readable=True,
    help="Directory containing Bracketeer configuration YAML files.",
)
_STORE_OPTION = typer.Option(
    DEFAULT_STORAGE_DIR,
    "--storage-dir",
    file_okay=False,
    dir_okay=True,
    help="Directory holding tournament JSON snapshots.",
)
_STORAGE_DIR_OPTION = typer.Option(
    None,
    "--storage-dir",
    file_okay=False,
    dir_okay=True,
    help="Directory holding tournament JSON snapshots (defaults to the settings value).",
)


@app.command()
def validate(config_dir: Path = _CONFIG_DIR_OPTION) -> None:
    """Validate configuration files."""

    _load_and_validate(config_dir)
    console.print("[green]Configs OK[/green]")


@app.command()
def show(
    subject: str = typer.Argument(..., help="Entity to show. Currently only 'tournament'."),
    name: str = typer.Argument(..., help="Name of the tournament."),
    config_dir: Path = _CONFIG_DIR_OPTION,
) -> None:
    """Display details about a configuration entity."""

    if subject != "tournament":
        console.print("[red]Only 'tournament' is supported for show.[/red]")
        raise typer.Exit(code=1)

    fighters, _ = _load_and_validate(config_dir)
    try:
        tournament = load_tournament(name, config_dir)
    except ConfigError as exc:
        _handle_config_error(exc)
        return

    _print_tournament_details(tournament)
    for issue in detect_roster_issues(tournament, fighters):
        color = "yellow" if issue.severity == "warning" else "cyan"
        console.print(f"[{color}]{issue.severity}:[/{color}] {issue.message}")


def _print_tournament_details(tournament: TournamentCfg) -> None:
    console.print(f"[bold]Tournament:[/bold] {tournament.name}")
    console.print(f"Description: {tournament.description}")
    console.print("")

    table = Table(title="Tournament Overview")
    table.add_column("Field", justify="left")
    table.add_column("Value", justify="left")
    table.add_row("Fighters", ", ".join(tournament.fighters))
    settings = tournament.settings
    table.add_row("Max Rounds", str(settings.max_rounds))
    table.add_row("Tie Break", settings.tie_break)
    table.add_row("Max Rematches", str(settings.max_rematches))
    table.add_row("Seeding", settings.seeding)
    table.add_row("Resolver", settings.resolver)
    table.add_row("Inter-match Delay", f"{settings.inter_match_delay:g}s")
    table.add_row("Output Dir", settings.output_dir)
    table.add_row("Storage Dir", settings.storage_dir)
    console.print(table)


@app.command("fighters")
def list_fighters(config_dir: Path = _CONFIG_DIR_OPTION) -> None:
    """List configured fighters and their stats."""

    fighters, _ = _load_and_validate(config_dir)
    table = Table(title="Fighters")
    for column in ("Id", "Name", "HP", "STR", "AGI", "DEF", "LUCK"):
        table.add_column(column, justify="left" if column in ("Id", "Name") else "right")
    for cfg in fighters.values():
        stats = cfg.stats
        table.add_row(
            cfg.id,
            cfg.name,
            f"{stats.health}/{stats.max_health}",
            str(stats.strength),
            str(stats.agility),
            str(stats.defense),
            str(stats.luck),
        )
    console.print(table)


@app.command()
def fight(
    fighter_a: str = typer.Option(..., "--a", help="Id of the first fighter."),
    fighter_b: str = typer.Option(..., "--b", help="Id of the second fighter."),
    max_rounds: int = typer.Option(6, "--max-rounds", min=1, help="Round cap for the match."),
    seed: int | None = typer.Option(None, "--seed", help="Seed for reproducible rolls."),
    output_dir: Path | None = typer.Option(
        None,
        "--output-dir",
        file_okay=False,
        dir_okay=True,
        help="Directory to store the battle log.",
    ),
    config_dir: Path = _CONFIG_DIR_OPTION,
) -> None:
    """Run a single exhibition match between two configured fighters."""

    fighters, _ = _load_and_validate(config_dir)
    cfg_a = _require_fighter(fighter_a, fighters)
    cfg_b = _require_fighter(fighter_b, fighters)
    if cfg_a.id == cfg_b.id:
        console.print("[red]Pick two different fighters.[/red]")
        raise typer.Exit(code=1)

    app_context = _context(
        settings=TournamentSettings(max_rounds=max_rounds),
        storage_dir=None,
        output_dir=output_dir,
        seed=seed,
    )
    destination = app_context.tournament_service.artefact_dir
    result = app_context.match_service.run(
        FightContext(
            fighter_a=cfg_a.to_fighter(),
            fighter_b=cfg_b.to_fighter(),
            output_dir=destination,
        )
    )
    _print_battle_log(result)
    winner_id = result["result"]["winner"]
    if winner_id is None:
        console.print("[yellow]Draw[/yellow]")
    else:
        winner = cfg_a if winner_id == cfg_a.id else cfg_b
        console.print(
            f"[green]{winner.name} wins[/green] ({result['result']['decided_by']}, "
            f"{result['runtime']['rounds']} rounds)"
        )
    if "output_path" in result["meta"]:
        console.print(f"Result saved to {result['meta']['output_path']}")


def _print_battle_log(result: dict[str, Any]) -> None:
    table = Table(title="Battle Log")
    for column in ("Round", "Attacker", "Defender", "Dealt", "Countered", "HP After"):
        table.add_column(column)
    for entry in result["battleLog"]:
        health = entry["healthAfter"]
        table.add_row(
            str(entry["round"]),
            entry["attacker"],
            entry["defender"],
            str(entry["attackerDamage"]),
            str(entry["defenderDamage"]),
            f"{health['attacker']} / {health['defender']}",
        )
    console.print(table)


@app.command()
def create(
    tournament: str = typer.Option(..., "--tournament", help="Tournament config name or path."),
    seed: int | None = typer.Option(None, "--seed", help="Seed used for random seeding."),
    storage_dir: Path | None = _STORAGE_DIR_OPTION,
    config_dir: Path = _CONFIG_DIR_OPTION,
) -> None:
    """Build a bracket from a tournament config and store it."""

    fighters, tournaments = _load_and_validate(config_dir)
    tournament_cfg = tournaments.get(tournament)
    if tournament_cfg is None:
        try:
            tournament_cfg = load_tournament(tournament, config_dir)
        except ConfigError as exc:
            _handle_config_error(exc)
            return

    for fighter_id in tournament_cfg.fighters:
        _require_fighter(fighter_id, fighters)

    app_context = _context(
        settings=tournament_cfg.settings,
        storage_dir=storage_dir,
        output_dir=None,
        seed=seed,
    )
    created = app_context.tournament_service.create_from_config(
        tournament_cfg, fighters, rng=SystemRandomSource(seed)
    )
    console.print(f"[green]Created tournament[/green] {created.id} ({created.name})")
    _print_bracket(created)


@app.command("list")
def list_tournaments(storage_dir: Path = _STORE_OPTION) -> None:
    """List stored tournaments."""

    app_context = _context(
        settings=TournamentSettings(), storage_dir=storage_dir, output_dir=None, seed=None
    )
    ids = app_context.tournament_service.list_ids()
    if not ids:
        console.print("No tournaments stored.")
        return
    table = Table(title="Tournaments")
    for column in ("Id", "Name", "Status", "Round", "Winner"):
        table.add_column(column)
    for tournament_id in ids:
        stored = _load_stored(app_context, tournament_id)
        table.add_row(
            stored.id,
            stored.name,
            stored.status.value,
            f"{stored.current_round}/{stored.total_rounds}",
            stored.winner.name if stored.winner else "-",
        )
    console.print(table)


@app.command()
def bracket(
    tournament_id: str = typer.Argument(..., help="Stored tournament id."),
    storage_dir: Path = _STORE_OPTION,
) -> None:
    """Print the bracket of a stored tournament."""

    app_context = _context(
        settings=TournamentSettings(), storage_dir=storage_dir, output_dir=None, seed=None
    )
    _print_bracket(_load_stored(app_context, tournament_id))


def _print_bracket(tournament: Tournament) -> None:
    for stage in tournament.brackets:
        table = Table(title=f"Round {stage.round}")
        for column in ("Match", "Fighter A", "Fighter B", "Status", "Winner"):
            table.add_column(column)
        for match in stage.matches:
            table.add_row(
                match.id,
                match.fighter_a.name if match.fighter_a else "TBD",
                "(bye)" if match.is_bye else (match.fighter_b.name if match.fighter_b else "TBD"),
                match.status.value,
                match.winner.name if match.winner else "-",
            )
        console.print(table)
    if tournament.winner is not None:
        console.print(f"[bold green]Champion:[/bold green] {tournament.winner.name}")


_EXEC_TOURNAMENT_OPTION = typer.Option(
    None,
    "--tournament",
    help="Tournament config whose settings (resolver, tie-break, delay) to use.",
)


@app.command("execute-next")
def execute_next(
    tournament_id: str = typer.Argument(..., help="Stored tournament id."),
    tournament: str | None = _EXEC_TOURNAMENT_OPTION,
    seed: int | None = typer.Option(None, "--seed", help="Seed for reproducible rolls."),
    storage_dir: Path | None = _STORAGE_DIR_OPTION,
    output_dir: Path | None = typer.Option(None, "--output-dir", file_okay=False, dir_okay=True),
    config_dir: Path | None = typer.Option(None, "--config-dir"),
) -> None:
    """Execute the next pending match of a stored tournament."""

    settings = _settings_for(config_dir, tournament)
    app_context = _context(
        settings=settings,
        storage_dir=storage_dir,
        output_dir=_artefact_base(output_dir, settings, tournament),
        seed=seed,
    )
    try:
        result = app_context.tournament_service.execute_next_match(tournament_id)
    except StorageError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc

    if result.is_completion_signal:
        console.print(f"[yellow]{result.error}[/yellow]")
        return
    if not result.success:
        console.print(f"[red]Match failed:[/red] {result.error}")
        raise typer.Exit(code=1)
    _print_match_result(result)


def _print_match_result(result: ExecutionResult) -> None:
    match = result.match
    if match is None or match.winner is None:
        return
    if match.is_bye:
        console.print(f"[cyan]{match.id}:[/cyan] {match.winner.name} advances on a bye")
    else:
        console.print(
            f"[green]Match completed:[/green] {match.fighter_a.name} vs {match.fighter_b.name}"
            f" - winner {match.winner.name}"
        )
    champion = result.tournament.winner
    if champion is not None:
        console.print(f"[bold green]Tournament complete! Champion:[/bold green] {champion.name}")


@app.command()
def automate(
    tournament_id: str = typer.Argument(..., help="Stored tournament id."),
    tournament: str | None = _EXEC_TOURNAMENT_OPTION,
    delay: float | None = typer.Option(None, "--delay", min=0.0, help="Seconds between matches."),
    seed: int | None = typer.Option(None, "--seed", help="Seed for reproducible rolls."),
    storage_dir: Path | None = _STORAGE_DIR_OPTION,
    output_dir: Path | None = typer.Option(None, "--output-dir", file_okay=False, dir_okay=True),
    config_dir: Path | None = typer.Option(None, "--config-dir"),
) -> None:
    """Run every remaining match; Ctrl+C stops after the current match."""

    settings = _settings_for(config_dir, tournament)
    app_context = _context(
        settings=settings,
        storage_dir=storage_dir,
        output_dir=_artefact_base(output_dir, settings, tournament),
        seed=seed,
        delay=delay,
    )
    service = app_context.tournament_service

    def _request_cancel(_signum: int, _frame: Any) -> None:
        running = service.cancel()
        if running is not None:
            console.print(f"[yellow]Stopping after {running.id} finishes.[/yellow]")

    previous = signal.getsignal(signal.SIGINT)
    signal.signal(signal.SIGINT, _request_cancel)
    try:
        outcome = service.automate(tournament_id, on_match=_print_match_result)
    except StorageError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc
    finally:
        signal.signal(signal.SIGINT, previous)

    progress = app_context.engine.progress(outcome.tournament)
    console.print(
        f"Executed {len(outcome.executed)} matches; "
        f"{progress.completed_matches}/{progress.total_matches} complete "
        f"({progress.percent_complete:.0f}%)."
    )
    if outcome.stopped_reason == STOP_CANCELLED:
        console.print("[yellow]Automation cancelled.[/yellow]")
    elif outcome.stopped_reason == STOP_ERROR:
        console.print(f"[red]Automation stopped:[/red] {outcome.error}")
        raise typer.Exit(code=1)


@app.command()
def standings(
    tournament_id: str = typer.Argument(..., help="Stored tournament id."),
    storage_dir: Path = _STORE_OPTION,
) -> None:
    """Show wins, losses and progress per fighter."""

    app_context = _context(
        settings=TournamentSettings(), storage_dir=storage_dir, output_dir=None, seed=None
    )
    stored = _load_stored(app_context, tournament_id)
    table = Table(title=f"Standings - {stored.name}")
    for column in ("Fighter", "Wins", "Losses", "Reached", "Status"):
        table.add_column(column)
    for row in app_context.engine.standings(stored):
        if stored.winner is not None and row.fighter.id == stored.winner.id:
            status = "champion"
        else:
            status = "eliminated" if row.eliminated else "alive"
        table.add_row(
            row.fighter.name,
            str(row.wins),
            str(row.losses),
            f"round {row.rounds_advanced}" if row.rounds_advanced else "-",
            status,
        )
    console.print(table)


def main(argv: Iterable[str] | None = None) -> None:
    """Invoke the Typer application."""
    app(args=list(argv) if argv is not None else None)


if __name__ == "__main__":
    main()
