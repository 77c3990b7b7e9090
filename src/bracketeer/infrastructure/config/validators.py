"""Validation helpers for configuration domain objects."""

from __future__ import annotations

from dataclasses import asdict
from pathlib import Path
from typing import Mapping

from jsonschema import Draft202012Validator, ValidationError

from bracketeer.domain.config import ConfigError, FighterCfg, TournamentCfg

from .schema import load_schema


def build_validator() -> Draft202012Validator:
    return Draft202012Validator(load_schema())


def format_error(path: Path, field: str, message: str) -> str:
    location = f"[cyan]{path}[/cyan]"
    target = f" → [magenta]{field}[/magenta]" if field else ""
    return f"[bold red]Config error[/bold red]: {location}{target} {message}"


def validate_with_schema(
    validator: Draft202012Validator,
    instance: Mapping[str, object],
    ref: str,
    path: Path,
) -> None:
    try:
        validator.evolve(schema={"$ref": ref}).validate(instance)
    except ValidationError as exc:
        field = "/".join(str(part) for part in exc.path)
        field_display = field or "<root>"
        raise ConfigError(format_error(path, field_display, exc.message)) from exc


def fighter_payload(cfg: FighterCfg) -> Mapping[str, object]:
    stats = asdict(cfg.stats)
    stats["unique_abilities"] = list(cfg.stats.unique_abilities)
    payload: dict[str, object] = {
        "id": cfg.id,
        "name": cfg.name,
        "description": cfg.description,
        "image_url": cfg.image_url,
        "notes": cfg.notes,
        "stats": {key: value for key, value in stats.items() if value is not None},
    }
    return {key: value for key, value in payload.items() if value is not None}


def tournament_payload(cfg: TournamentCfg) -> Mapping[str, object]:
    settings = {key: value for key, value in asdict(cfg.settings).items() if value is not None}
    payload: dict[str, object] = {
        "name": cfg.name,
        "description": cfg.description,
        "fighters": list(cfg.fighters),
        "settings": settings,
        "notes": cfg.notes,
    }
    return {key: value for key, value in payload.items() if value is not None}


def validate_configs(
    fighters: Mapping[str, FighterCfg],
    tournaments: Mapping[str, TournamentCfg],
) -> None:
    validator = build_validator()

    for cfg in fighters.values():
        validate_with_schema(validator, fighter_payload(cfg), "#/$defs/fighter", cfg.path)
        if cfg.stats.max_health < cfg.stats.health:
            raise ConfigError(
                format_error(
                    cfg.path,
                    "stats/max_health",
                    f"max_health ({cfg.stats.max_health}) must not be below health ({cfg.stats.health}).",
                )
            )

    for cfg in tournaments.values():
        validate_with_schema(validator, tournament_payload(cfg), "#/$defs/tournament", cfg.path)
        for fighter_id in cfg.fighters:
            if fighter_id not in fighters:
                raise ConfigError(
                    format_error(
                        cfg.path,
                        f"fighters[{fighter_id}]",
                        "Referenced fighter is not defined.",
                    )
                )
        if cfg.settings.resolver == "http" and not cfg.settings.resolver_url:
            raise ConfigError(
                format_error(
                    cfg.path,
                    "settings/resolver_url",
                    "The http resolver requires a resolver_url.",
                )
            )


__all__ = [
    "build_validator",
    "fighter_payload",
    "format_error",
    "tournament_payload",
    "validate_configs",
    "validate_with_schema",
]
