"""General utility helpers for Bracketeer."""

from __future__ import annotations

from .paths import battle_filename, resolve_timestamped_output_dir, slugify

__all__ = ["battle_filename", "resolve_timestamped_output_dir", "slugify"]
