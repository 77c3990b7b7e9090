"""Shared fixtures for Bracketeer tests."""

from __future__ import annotations

from typing import Callable

import pytest

from bracketeer.domain.models import Fighter, FighterStats


def build_fighter(
    fighter_id: str,
    *,
    health: int = 100,
    max_health: int | None = None,
    strength: int = 10,
    agility: int = 10,
    defense: int = 10,
    luck: int = 0,
) -> Fighter:
    return Fighter(
        id=fighter_id,
        name=fighter_id.title(),
        stats=FighterStats(
            health=health,
            max_health=max_health if max_health is not None else health,
            strength=strength,
            agility=agility,
            defense=defense,
            luck=luck,
        ),
    )


@pytest.fixture
def make_fighter() -> Callable[..., Fighter]:
    return build_fighter


@pytest.fixture
def roster() -> Callable[[int], list[Fighter]]:
    """Return ``n`` fighters named ``f1`` .. ``fn``."""

    def _roster(count: int) -> list[Fighter]:
        return [build_fighter(f"f{index}") for index in range(1, count + 1)]

    return _roster
