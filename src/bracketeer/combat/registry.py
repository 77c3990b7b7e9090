"""Resolver registry for settings-driven selection."""

from __future__ import annotations

from typing import Callable, Dict

from bracketeer.domain.config import RESOLVER_KINDS, TournamentSettings

from .base import Commentator, MatchResolver, RandomSource, ResolverUnavailable
from .remote import HttpResolver
from .resolver import CombatResolver

ResolverFactory = Callable[..., MatchResolver]


def _local(
    settings: TournamentSettings,
    *,
    rng: RandomSource | None = None,
    commentator: Commentator | None = None,
) -> MatchResolver:
    return CombatResolver(
        rng=rng,
        max_rounds=settings.max_rounds,
        tie_break=settings.tie_break,
        commentator=commentator,
    )


def _http(
    settings: TournamentSettings,
    *,
    rng: RandomSource | None = None,
    commentator: Commentator | None = None,
) -> MatchResolver:
    return HttpResolver(
        base_url=settings.resolver_url,
        timeout_s=settings.resolver_timeout,
        max_rounds=settings.max_rounds,
    )


REGISTRY: Dict[str, ResolverFactory] = {
    "local": _local,
    "http": _http,
}


def create_resolver(
    resolver_id: str,
    settings: TournamentSettings,
    *,
    rng: RandomSource | None = None,
    commentator: Commentator | None = None,
) -> MatchResolver:
    """Instantiate a match resolver for the given kind."""

    key = resolver_id.lower()
    try:
        factory = REGISTRY[key]
    except KeyError as exc:
        raise ResolverUnavailable(
            f"Unknown resolver id '{resolver_id}'. Expected one of: {', '.join(RESOLVER_KINDS)}."
        ) from exc
    return factory(settings, rng=rng, commentator=commentator)


__all__ = ["REGISTRY", "create_resolver"]
