"""whileai/invariant.py — The per-program-point trace of abstract states."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Iterator, Tuple, TypeVar, overload

from whileai.state import State

__all__ = ["Invariant"]

V = TypeVar("V")


@dataclass(frozen=True, slots=True)
class Invariant(Generic[V]):
    """Ordered, immutable sequence of states, one per program point.

    Entry *i* belongs to the *i*-th point of
    :func:`whileai.program_points.program_points` for the same statement.
    """

    states: Tuple[State[V], ...] = ()

    def append(self, *states: State[V]) -> Invariant[V]:
        return Invariant(self.states + states)

    def extend(self, other: Invariant[V]) -> Invariant[V]:
        return Invariant(self.states + other.states)

    def __len__(self) -> int:
        return len(self.states)

    def __iter__(self) -> Iterator[State[V]]:
        return iter(self.states)

    @overload
    def __getitem__(self, index: int) -> State[V]: ...

    @overload
    def __getitem__(self, index: slice) -> Tuple[State[V], ...]: ...

    def __getitem__(self, index):
        return self.states[index]

    def __str__(self) -> str:
        return "\n".join(f"{i:>4}  {state}" for i, state in enumerate(self.states))
