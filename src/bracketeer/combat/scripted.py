"""Deterministic random source for tests and demonstrations."""

from __future__ import annotations

from typing import Iterable


class ScriptedRandomSource:
    """Replay a fixed sequence of integers.

    Each call to :meth:`next_int` consumes the next scripted value. With
    ``cycle=True`` the script restarts once exhausted; otherwise running out
    raises ``LookupError`` so tests notice unexpected extra rolls.
    """

    def __init__(self, values: Iterable[int], *, cycle: bool = False) -> None:
        self._values = list(values)
        self._cycle = cycle
        self._position = 0
        self.calls: list[tuple[int, int]] = []

    @property
    def consumed(self) -> int:
        return self._position

    def next_int(self, minimum: int, maximum: int) -> int:
        if self._position >= len(self._values):
            if not self._cycle or not self._values:
                raise LookupError(
                    f"Scripted random source exhausted after {self._position} values."
                )
            self._position = 0
        value = self._values[self._position]
        self._position += 1
        self.calls.append((minimum, maximum))
        if not minimum <= value <= maximum:
            raise ValueError(
                f"Scripted value {value} outside requested range [{minimum}, {maximum}]."
            )
        return value


__all__ = ["ScriptedRandomSource"]
