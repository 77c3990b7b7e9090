"""Combat resolution for Bracketeer."""

from __future__ import annotations

from .base import (
    Commentator,
    MatchOutcome,
    MatchResolver,
    RandomSource,
    ResolverError,
    ResolverProtocolError,
    ResolverServerError,
    ResolverTimeout,
    ResolverUnavailable,
    SystemRandomSource,
    plain_commentator,
    silent_commentator,
)
from .registry import REGISTRY, create_resolver
from .remote import HttpResolver
from .resolver import CombatResolver, resolve_round, roll_damage
from .scripted import ScriptedRandomSource

__all__ = [
    "CombatResolver",
    "Commentator",
    "HttpResolver",
    "MatchOutcome",
    "MatchResolver",
    "REGISTRY",
    "RandomSource",
    "ResolverError",
    "ResolverProtocolError",
    "ResolverServerError",
    "ResolverTimeout",
    "ResolverUnavailable",
    "ScriptedRandomSource",
    "SystemRandomSource",
    "create_resolver",
    "plain_commentator",
    "resolve_round",
    "roll_damage",
    "silent_commentator",
]
