"""Config loading utilities coordinating schema validation and parsing."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Tuple

import yaml

from bracketeer.domain.config import (
    ConfigError,
    FighterCfg,
    TournamentCfg,
    TournamentSettings,
)
from bracketeer.domain.models import FighterStats

from .validators import build_validator, format_error, validate_configs, validate_with_schema

__all__ = ["collect_configs", "load_tournament", "validate_configs"]


def _read_yaml(path: Path) -> Mapping[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:  # pragma: no cover - filesystem error propagation
        raise ConfigError(format_error(path, "<file>", str(exc))) from exc
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(format_error(path, "<root>", f"Invalid YAML: {exc}")) from exc
    if not isinstance(data, Mapping):
        raise ConfigError(format_error(path, "<root>", "Top-level document must be a mapping."))
    return data


def _ensure_unique(name: str, seen: Dict[str, Path], path: Path, kind: str) -> None:
    existing = seen.get(name)
    if existing is not None:
        raise ConfigError(
            format_error(
                path,
                "name" if kind == "tournament" else "id",
                f"Duplicate {kind} identifier '{name}' already defined in {existing}",
            )
        )
    seen[name] = path


def _build_stats(data: Mapping[str, Any]) -> FighterStats:
    health = int(data["health"])
    return FighterStats(
        health=health,
        max_health=int(data.get("max_health", health)),
        strength=int(data["strength"]),
        agility=int(data["agility"]),
        defense=int(data["defense"]),
        luck=int(data["luck"]),
        magic=data.get("magic"),
        ranged=data.get("ranged"),
        intelligence=data.get("intelligence"),
        unique_abilities=tuple(data.get("unique_abilities") or ()),
    )


def _build_fighter(data: Mapping[str, Any], path: Path) -> FighterCfg:
    return FighterCfg(
        path=path,
        id=str(data["id"]),
        name=str(data["name"]),
        stats=_build_stats(data["stats"]),
        description=str(data.get("description") or ""),
        image_url=data.get("image_url"),
        notes=data.get("notes"),
    )


def _build_settings(data: Mapping[str, Any] | None) -> TournamentSettings:
    if not data:
        return TournamentSettings()
    defaults = TournamentSettings()
    return TournamentSettings(
        max_rounds=int(data.get("max_rounds", defaults.max_rounds)),
        inter_match_delay=float(data.get("inter_match_delay", defaults.inter_match_delay)),
        tie_break=str(data.get("tie_break", defaults.tie_break)),
        max_rematches=int(data.get("max_rematches", defaults.max_rematches)),
        seeding=str(data.get("seeding", defaults.seeding)),
        resolver=str(data.get("resolver", defaults.resolver)),
        resolver_url=data.get("resolver_url"),
        resolver_timeout=float(data.get("resolver_timeout", defaults.resolver_timeout)),
        output_dir=str(data.get("output_dir", defaults.output_dir)),
        storage_dir=str(data.get("storage_dir", defaults.storage_dir)),
    )


def _build_tournament(data: Mapping[str, Any], path: Path) -> TournamentCfg:
    return TournamentCfg(
        path=path,
        name=str(data["name"]),
        description=str(data["description"]),
        fighters=[str(item) for item in data["fighters"]],
        settings=_build_settings(data.get("settings")),
        notes=data.get("notes"),
    )


def _gather(directory: Path) -> Iterable[Path]:
    if not directory.exists():
        raise ConfigError(format_error(directory, "<dir>", "Required configuration directory is missing."))
    return sorted(directory.glob("*.yaml"))


def collect_configs(
    base_dir: Path,
) -> Tuple[dict[str, FighterCfg], dict[str, TournamentCfg]]:
    base_dir = base_dir.resolve()
    validator = build_validator()

    fighters: dict[str, FighterCfg] = {}
    tournaments: dict[str, TournamentCfg] = {}
    seen_fighters: dict[str, Path] = {}
    seen_tournaments: dict[str, Path] = {}

    for path in _gather(base_dir / "fighters"):
        data = _read_yaml(path)
        validate_with_schema(validator, data, "#/$defs/fighter", path)
        cfg = _build_fighter(data, path)
        _ensure_unique(cfg.id, seen_fighters, path, "fighter")
        fighters[cfg.id] = cfg

    for path in _gather(base_dir / "tournaments"):
        data = _read_yaml(path)
        validate_with_schema(validator, data, "#/$defs/tournament", path)
        cfg = _build_tournament(data, path)
        _ensure_unique(cfg.name, seen_tournaments, path, "tournament")
        tournaments[cfg.name] = cfg

    return fighters, tournaments


def load_tournament(identifier: str | Path, base_dir: Path | None = None) -> TournamentCfg:
    """Load a tournament configuration by path or name."""

    base_dir = base_dir or Path.cwd()
    fighters, tournaments = collect_configs(base_dir)
    validate_configs(fighters, tournaments)

    if isinstance(identifier, str) and identifier in tournaments:
        return tournaments[identifier]

    candidate = Path(identifier) if not isinstance(identifier, Path) else identifier
    candidate = candidate if candidate.is_absolute() else base_dir / "tournaments" / candidate
    candidate = candidate.resolve()

    for cfg in tournaments.values():
        if cfg.path.resolve() == candidate:
            return cfg

    raise ConfigError(format_error(candidate, "name", "Tournament not found."))
