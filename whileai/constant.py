r"""
whileai/constant.py — The constant-propagation domain.

              ⊤ (any)
        /   /   |   \   \
      ... -1    0    1  ...
        \   \   |   /   /
              ⊥ (none)

Two different constants join to ⊤: far coarser than intervals, but every
operation is O(1) and the lattice has height 2, so widening is the join.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from whileai.ast import AExpr, CmpOp, Compare, IntervalLiteral, Number
from whileai.domain import Domain
from whileai.errors import MalformedIntervalError
from whileai.integer import ZERO, ExtendedInteger, IntLike
from whileai.state import State

__all__ = ["ConstKind", "Constant", "ConstantDomain"]


class ConstKind(Enum):
    NONE = "none"
    VALUE = "value"
    ANY = "any"


@dataclass(frozen=True, slots=True)
class Constant:
    """``none`` (⊥), a single known value, or ``any`` (⊤).

    Examples
    --------
    >>> Constant.of(3) + Constant.of(4)
    Const(7)
    >>> Constant.of(0) * Constant.any()
    Const(0)
    """

    kind: ConstKind
    value: ExtendedInteger = ZERO

    @classmethod
    def none(cls) -> Constant:
        return cls(ConstKind.NONE)

    @classmethod
    def any(cls) -> Constant:
        return cls(ConstKind.ANY)

    @classmethod
    def of(cls, n: IntLike) -> Constant:
        return cls(ConstKind.VALUE, ExtendedInteger.coerce(n))

    @property
    def is_none(self) -> bool:
        return self.kind is ConstKind.NONE

    @property
    def is_any(self) -> bool:
        return self.kind is ConstKind.ANY

    @property
    def known(self) -> Optional[ExtendedInteger]:
        """The value, if exactly one is known."""
        return self.value if self.kind is ConstKind.VALUE else None

    def _is_zero(self) -> bool:
        return self.kind is ConstKind.VALUE and self.value == ZERO

    # ---- Arithmetic ------------------------------------------------------

    def __add__(self, other: Constant) -> Constant:
        if self.is_none or other.is_none:
            return NONE
        if self.is_any or other.is_any:
            return ANY
        return Constant.of(self.value + other.value)

    def __sub__(self, other: Constant) -> Constant:
        if self.is_none or other.is_none:
            return NONE
        if self.is_any or other.is_any:
            return ANY
        return Constant.of(self.value - other.value)

    def __mul__(self, other: Constant) -> Constant:
        if self.is_none or other.is_none:
            return NONE
        if self._is_zero() or other._is_zero():
            return Constant.of(0)
        if self.is_any or other.is_any:
            return ANY
        return Constant.of(self.value * other.value)

    def __truediv__(self, other: Constant) -> Constant:
        if self.is_none or other.is_none or other._is_zero():
            return NONE
        if self._is_zero():
            return self
        if self.is_any or other.is_any:
            return ANY
        return Constant.of(self.value.div(other.value))

    def __str__(self) -> str:
        if self.is_none:
            return "⊥"
        if self.is_any:
            return "⊤"
        return str(self.value)

    def __repr__(self) -> str:
        return f"Const({self})"


NONE = Constant.none()
ANY = Constant.any()


class ConstantDomain(Domain[Constant]):
    """The flat lattice of constants."""

    name = "constant"

    def bottom(self) -> Constant:
        return NONE

    def top(self) -> Constant:
        return ANY

    def unit(self) -> Constant:
        return Constant.of(1)

    def leq(self, a: Constant, b: Constant) -> bool:
        return a.is_none or b.is_any or a == b

    def lub(self, a: Constant, b: Constant) -> Constant:
        if a == b or b.is_none:
            return a
        if a.is_none:
            return b
        return ANY

    def glb(self, a: Constant, b: Constant) -> Constant:
        if a == b or b.is_any:
            return a
        if a.is_any:
            return b
        return NONE

    def widen(self, old: Constant, new: Constant) -> Constant:
        return self.lub(old, new)

    def height(self) -> int:
        return 2

    def narrow(self, old: Constant, new: Constant) -> Constant:
        return self.glb(old, new)

    def add(self, a: Constant, b: Constant) -> Constant:
        return a + b

    def sub(self, a: Constant, b: Constant) -> Constant:
        return a - b

    def mul(self, a: Constant, b: Constant) -> Constant:
        return a * b

    def div(self, a: Constant, b: Constant) -> Constant:
        return a / b

    def contains_zero(self, a: Constant) -> bool:
        return a.is_any or a._is_zero()

    def eval_specific_aexpr(self, expr: AExpr, state: State[Constant]) -> Constant:
        if isinstance(expr, Number):
            return Constant.of(expr.value)
        if isinstance(expr, IntervalLiteral):
            if expr.lo > expr.hi:
                raise MalformedIntervalError(expr.lo, expr.hi)
            return Constant.of(expr.lo) if expr.lo == expr.hi else ANY
        raise TypeError(f"not a literal: {expr!r}")

    def eval_specific_bexpr(self, cond: Compare, state: State[Constant]) -> State[Constant]:
        if cond.op is CmpOp.EQ:
            return self.refine_equal(cond, state)
        left, right, after = self.build_operands(cond, state)
        a, b = left.value.known, right.value.known
        if left.value.is_none or right.value.is_none:
            return State.unreachable(self)
        if a is None or b is None:
            return after
        holds = a != b if cond.op is CmpOp.NE else a < b
        return after if holds else State.unreachable(self)
