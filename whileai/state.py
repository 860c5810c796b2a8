"""
whileai/state.py — Abstract program states.

A state is either *Unreachable* (no concrete execution reaches the
program point) or a finite mapping from variable names to abstract
values of one domain.  Variables missing from a reachable mapping are
unconstrained: reading one yields the domain's top.

States are immutable; ``put`` and the lattice operations return new
states.  Once a state is Unreachable every transformer keeps it so.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Dict, Generic, Iterator, Mapping, Optional, Tuple, TypeVar

from whileai.errors import UnreachableReadError
from whileai.lattice import Lattice

__all__ = ["State"]

V = TypeVar("V")


@dataclass(frozen=True, eq=False, slots=True)
class State(Generic[V]):
    """``Unreachable | {name ↦ value}`` over the lattice *domain*.

    ``bindings is None`` encodes Unreachable.  Build states with
    :meth:`empty`, :meth:`unreachable` or :meth:`of`, never by passing a
    mutable dict that is later changed.
    """

    domain: Lattice[V] = field(repr=False)
    bindings: Optional[Mapping[str, V]] = None

    # ---- Constructors ----------------------------------------------------

    @classmethod
    def empty(cls, domain: Lattice[V]) -> State[V]:
        """Reachable state with no information about any variable."""
        return cls(domain, MappingProxyType({}))

    @classmethod
    def unreachable(cls, domain: Lattice[V]) -> State[V]:
        return cls(domain, None)

    @classmethod
    def of(cls, domain: Lattice[V], bindings: Mapping[str, V]) -> State[V]:
        """State binding every name in *bindings*; any ⊥ value makes it Unreachable."""
        state = cls.empty(domain)
        for name, value in bindings.items():
            state = state.put(name, value)
        return state

    # ---- Access ----------------------------------------------------------

    @property
    def is_unreachable(self) -> bool:
        return self.bindings is None

    def read(self, name: str) -> V:
        """Value of *name*; ⊤ if unbound.  Undefined on Unreachable."""
        if self.bindings is None:
            raise UnreachableReadError(name)
        if name in self:
            return self.bindings[name]
        return self.domain.top()

    def put(self, name: str, value: V) -> State[V]:
        """Rebind *name*.  Binding ⊥ collapses the whole state."""
        if self.bindings is None:
            return self
        if self.domain.is_bottom(value):
            return State.unreachable(self.domain)
        updated = dict(self.bindings)
        updated[name] = value
        return State(self.domain, MappingProxyType(updated))

    def variables(self) -> Tuple[str, ...]:
        if self.bindings is None:
            return ()
        return tuple(sorted(self.bindings))

    def items(self) -> Iterator[Tuple[str, V]]:
        for name in self.variables():
            yield name, self.bindings[name]

    def __contains__(self, name: object) -> bool:
        return self.bindings is not None and name in self.bindings

    # ---- Lattice operations ----------------------------------------------

    def _pointwise(self, other: State[V], op: Callable[[V, V], V]) -> State[V]:
        # A variable bound on one side only keeps that side's value.
        assert self.bindings is not None and other.bindings is not None
        merged: Dict[str, V] = dict(self.bindings)
        for name, value in other.bindings.items():
            merged[name] = op(merged[name], value) if name in merged else value
        return State.of(self.domain, merged)

    def lub(self, other: State[V]) -> State[V]:
        if self.bindings is None:
            return other
        if other.bindings is None:
            return self
        return self._pointwise(other, self.domain.lub)

    def widen(self, other: State[V]) -> State[V]:
        if self.bindings is None:
            return other
        if other.bindings is None:
            return self
        return self._pointwise(other, self.domain.widen)

    def glb(self, other: State[V]) -> State[V]:
        if self.bindings is None or other.bindings is None:
            return State.unreachable(self.domain)
        return self._pointwise(other, self.domain.glb)

    def narrow(self, other: State[V]) -> State[V]:
        if self.bindings is None or other.bindings is None:
            return State.unreachable(self.domain)
        return self._pointwise(other, self.domain.narrow)

    # ---- Comparison / display --------------------------------------------

    def __eq__(self, other: object) -> bool:
        """Fixpoint equality: only variables bound on both sides are compared."""
        if not isinstance(other, State):
            return NotImplemented
        if self.bindings is None or other.bindings is None:
            return self.bindings is None and other.bindings is None
        common = self.bindings.keys() & other.bindings.keys()
        return all(self.bindings[name] == other.bindings[name] for name in common)

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        if self.bindings is None:
            return "⊥"
        if not self.bindings:
            return "{}"
        return ", ".join(f"{name}: {value}" for name, value in self.items())

    def __repr__(self) -> str:
        return f"State({self})"
