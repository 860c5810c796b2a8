"""
whileai/lattice.py — The lattice contract every abstract domain implements.

A lattice ``(L, ⊑, ⊥, ⊤, ⊔, ⊓)`` with widening ``∇`` and narrowing ``Δ``.
Instances are the *domain*; the values ``L`` are plain immutable objects.
Configuration a domain needs (e.g. a clamp window) is captured once at
construction, so every operation reads it but nothing can change it
during an analysis.

Laws checked by ``tests/test_lattice_laws.py``::

    lub(x, ⊥) == x        glb(x, ⊤) == x
    lub(x, x) == x        glb(x, x) == x
    old ⊑ widen(old, new)  and  new ⊑ widen(old, new)
    narrow(old, new) ⊑ old   whenever new ⊑ old
"""

from __future__ import annotations

import abc
from typing import Generic, Optional, TypeVar

__all__ = ["Lattice", "L"]

L = TypeVar("L")


class Lattice(abc.ABC, Generic[L]):
    """Abstract base class for a lattice of abstract values.

    Subclasses must provide ``bottom``, ``top``, ``unit``, ``leq``, ``lub``
    and ``glb``.  ``widen`` defaults to ``lub`` (sound only for lattices of
    finite height) and ``narrow`` to ``new``.
    """

    @abc.abstractmethod
    def bottom(self) -> L:
        """Return the least element ⊥."""
        ...

    @abc.abstractmethod
    def top(self) -> L:
        """Return the greatest element ⊤."""
        ...

    @abc.abstractmethod
    def unit(self) -> L:
        """Return the abstraction of the constant 1."""
        ...

    @abc.abstractmethod
    def leq(self, a: L, b: L) -> bool:
        """Return ``True`` iff ``a ⊑ b``."""
        ...

    @abc.abstractmethod
    def lub(self, a: L, b: L) -> L:
        """Return the least upper bound ``a ⊔ b``."""
        ...

    @abc.abstractmethod
    def glb(self, a: L, b: L) -> L:
        """Return the greatest lower bound ``a ⊓ b``."""
        ...

    def widen(self, old: L, new: L) -> L:
        """Widening operator ``old ∇ new``.

        Must be an upper bound of both arguments, and every chain
        ``x₀, x₁ = x₀ ∇ y₁, x₂ = x₁ ∇ y₂, ...`` must stabilise.
        """
        return self.lub(old, new)

    def narrow(self, old: L, new: L) -> L:
        """Narrowing operator ``old Δ new``; lies between ``new`` and ``old``."""
        return new

    def is_bottom(self, a: L) -> bool:
        """Is ``a`` the bottom element?"""
        return a == self.bottom()

    def height(self) -> Optional[int]:
        """Bound on the length of ascending chains, if the lattice has one.

        Only consulted when ``widen`` is the join: the fixpoint engine then
        needs at least this many steps.  ``None`` means widening bounds the
        chains itself.
        """
        return None
