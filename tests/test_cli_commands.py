"""CLI command tests for bracketeer."""

from __future__ import annotations

import json
import shutil
from pathlib import Path

from typer.testing import CliRunner

from bracketeer.cli import app

SAMPLE_CONFIG = Path(__file__).resolve().parents[1] / "config"


def _copy_config_tree(tmp_path: Path) -> Path:
    destination = tmp_path / "config"
    shutil.copytree(SAMPLE_CONFIG, destination)
    return destination


def _create(runner: CliRunner, config_dir: Path, storage_dir: Path, tournament: str) -> str:
    result = runner.invoke(
        app,
        [
            "create",
            "--tournament",
            tournament,
            "--seed",
            "3",
            "--storage-dir",
            str(storage_dir),
            "--config-dir",
            str(config_dir),
        ],
        catch_exceptions=False,
    )
    assert result.exit_code == 0, result.stdout
    assert "Created tournament" in result.stdout
    (stored,) = storage_dir.glob("*.json")
    return stored.stem


def test_cli_validate_happy_path(tmp_path: Path) -> None:
    config_dir = _copy_config_tree(tmp_path)
    runner = CliRunner()
    result = runner.invoke(app, ["validate", "--config-dir", str(config_dir)], catch_exceptions=False)
    assert result.exit_code == 0
    assert "Configs OK" in result.stdout


def test_cli_validate_reports_errors(tmp_path: Path) -> None:
    config_dir = _copy_config_tree(tmp_path)
    (config_dir / "fighters" / "listed.yaml").write_text("- just\n- a list\n", encoding="utf-8")
    runner = CliRunner()
    result = runner.invoke(app, ["validate", "--config-dir", str(config_dir)])
    assert result.exit_code == 1
    assert "Config error" in result.stdout
    assert "mapping" in result.stdout


def test_cli_show_tournament_lists_settings_and_hints(tmp_path: Path) -> None:
    config_dir = _copy_config_tree(tmp_path)
    runner = CliRunner()
    result = runner.invoke(
        app,
        ["show", "tournament", "odd-lot-cup", "--config-dir", str(config_dir)],
        catch_exceptions=False,
    )
    assert result.exit_code == 0
    assert "odd-lot-cup" in result.stdout
    assert "Tournament Overview" in result.stdout
    assert "byes" in result.stdout


def test_cli_show_rejects_other_subjects(tmp_path: Path) -> None:
    config_dir = _copy_config_tree(tmp_path)
    runner = CliRunner()
    result = runner.invoke(app, ["show", "fighter", "aria", "--config-dir", str(config_dir)])
    assert result.exit_code == 1


def test_cli_fighters_lists_roster(tmp_path: Path) -> None:
    config_dir = _copy_config_tree(tmp_path)
    runner = CliRunner()
    result = runner.invoke(app, ["fighters", "--config-dir", str(config_dir)], catch_exceptions=False)
    assert result.exit_code == 0
    for fighter_id in ("aria", "borin", "fenwick"):
        assert fighter_id in result.stdout


def test_cli_fight_emits_result_file(tmp_path: Path) -> None:
    config_dir = _copy_config_tree(tmp_path)
    output_dir = tmp_path / "results"
    runner = CliRunner()
    result = runner.invoke(
        app,
        [
            "fight",
            "--a",
            "aria",
            "--b",
            "drogan",
            "--seed",
            "11",
            "--output-dir",
            str(output_dir),
            "--config-dir",
            str(config_dir),
        ],
        catch_exceptions=False,
    )
    assert result.exit_code == 0
    assert "Battle Log" in result.stdout
    (written,) = output_dir.glob("*/*.json")
    payload = json.loads(written.read_text(encoding="utf-8"))
    assert payload["meta"]["fighterA"]["id"] == "aria"
    assert payload["meta"]["resolver"] == "local"
    assert 1 <= payload["runtime"]["rounds"] <= 6


def test_cli_fight_suggests_close_fighter_names(tmp_path: Path) -> None:
    config_dir = _copy_config_tree(tmp_path)
    runner = CliRunner()
    result = runner.invoke(
        app,
        ["fight", "--a", "arya", "--b", "borin", "--config-dir", str(config_dir)],
    )
    assert result.exit_code == 1
    assert "Unknown fighter 'arya'" in result.stdout
    assert "aria" in result.stdout


def test_cli_tournament_lifecycle(tmp_path: Path) -> None:
    config_dir = _copy_config_tree(tmp_path)
    storage_dir = tmp_path / "tournaments"
    results_dir = tmp_path / "results"
    runner = CliRunner()
    tournament_id = _create(runner, config_dir, storage_dir, "odd-lot-cup")

    stepped = runner.invoke(
        app,
        [
            "execute-next",
            tournament_id,
            "--tournament",
            "odd-lot-cup",
            "--config-dir",
            str(config_dir),
            "--storage-dir",
            str(storage_dir),
            "--output-dir",
            str(results_dir / "step"),
            "--seed",
            "5",
        ],
        catch_exceptions=False,
    )
    assert stepped.exit_code == 0
    assert "Match completed" in stepped.stdout

    automated = runner.invoke(
        app,
        [
            "automate",
            tournament_id,
            "--tournament",
            "odd-lot-cup",
            "--config-dir",
            str(config_dir),
            "--storage-dir",
            str(storage_dir),
            "--delay",
            "0",
            "--output-dir",
            str(results_dir / "auto"),
            "--seed",
            "5",
        ],
        catch_exceptions=False,
    )
    assert automated.exit_code == 0, automated.stdout
    assert "Tournament complete!" in automated.stdout

    stored = json.loads((storage_dir / f"{tournament_id}.json").read_text(encoding="utf-8"))
    assert stored["status"] == "completed"
    assert stored["winner"] is not None
    assert list(results_dir.rglob("match-*.json"))

    again = runner.invoke(
        app,
        ["execute-next", tournament_id, "--storage-dir", str(storage_dir)],
        catch_exceptions=False,
    )
    assert again.exit_code == 0
    assert "Tournament is already completed" in again.stdout

    table = runner.invoke(
        app, ["standings", tournament_id, "--storage-dir", str(storage_dir)], catch_exceptions=False
    )
    assert table.exit_code == 0
    assert "champion" in table.stdout

    listing = runner.invoke(app, ["list", "--storage-dir", str(storage_dir)], catch_exceptions=False)
    assert listing.exit_code == 0
    assert "Tournaments" in listing.stdout

    shown = runner.invoke(
        app, ["bracket", tournament_id, "--storage-dir", str(storage_dir)], catch_exceptions=False
    )
    assert shown.exit_code == 0
    assert "Champion:" in shown.stdout


def test_cli_unknown_tournament_id_fails(tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(
        app, ["execute-next", "tournament-nope", "--storage-dir", str(tmp_path)]
    )
    assert result.exit_code == 1
    assert "not found" in result.stdout


def test_cli_commands_follow_configured_storage_and_output_dirs(tmp_path: Path) -> None:
    config_dir = _copy_config_tree(tmp_path)
    store_dir = tmp_path / "custom-store"
    logs_dir = tmp_path / "custom-logs"
    (config_dir / "tournaments" / "cup.yaml").write_text(
        "\n".join(
            [
                "name: cup",
                "description: Two fighters kept outside the default directories.",
                "fighters: [aria, drogan]",
                "settings:",
                f"  storage_dir: {store_dir.as_posix()}",
                f"  output_dir: {logs_dir.as_posix()}",
                "  inter_match_delay: 0",
                "",
            ]
        ),
        encoding="utf-8",
    )
    runner = CliRunner()

    created = runner.invoke(
        app,
        ["create", "--tournament", "cup", "--seed", "3", "--config-dir", str(config_dir)],
        catch_exceptions=False,
    )
    assert created.exit_code == 0, created.stdout
    (stored,) = store_dir.glob("*.json")

    stepped = runner.invoke(
        app,
        [
            "execute-next",
            stored.stem,
            "--tournament",
            "cup",
            "--config-dir",
            str(config_dir),
            "--seed",
            "5",
        ],
        catch_exceptions=False,
    )
    assert stepped.exit_code == 0, stepped.stdout
    assert "Tournament complete!" in stepped.stdout
    assert json.loads(stored.read_text(encoding="utf-8"))["status"] == "completed"
    (written,) = logs_dir.glob("*/*.json")
    assert written.name.startswith("match-1-1_")
