"""Helpers for output directories and artefact file names."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from pathlib import Path

TimestampStr = str

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def current_timestamp_str() -> TimestampStr:
    """Return the current timestamp as ``YYYYMMDDHHMMSS`` in the local timezone."""

    return datetime.now(timezone.utc).astimezone().strftime("%Y%m%d%H%M%S")


def resolve_timestamped_output_dir(base: Path) -> Path:
    """Append a timestamped leaf directory to *base* and create it."""

    concrete = base / current_timestamp_str()
    concrete.mkdir(parents=True, exist_ok=False)
    return concrete


def slugify(value: str) -> str:
    """Lowercase *value* and collapse anything non-alphanumeric to single dashes."""

    return _NON_ALNUM.sub("-", value.lower()).strip("-") or "unnamed"


def battle_filename(fighter_a: str, fighter_b: str, match_id: str) -> str:
    """File name for a match artefact, e.g. ``match-1-2_ryu-vs-ken.json``."""

    return f"{slugify(match_id)}_{slugify(fighter_a)}-vs-{slugify(fighter_b)}.json"


__all__ = [
    "battle_filename",
    "current_timestamp_str",
    "resolve_timestamped_output_dir",
    "slugify",
]
