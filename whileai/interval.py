"""
whileai/interval.py — The interval domain.

    ⊤ = [-inf, +inf]
           │
      [a, b] ⊑ [c, d]  ⟺  c ≤ a ∧ b ≤ d
           │
    ⊥ = empty

:class:`Interval` is the value type: a pair of
:class:`~whileai.integer.ExtendedInteger` bounds with plain interval
arithmetic.  :class:`IntervalDomain` is the lattice over it.  A domain may
be given an :class:`IntervalBounds` clamp window ``[L, U]``; every value
the domain produces is then saturated into the window.  When both ends
of the window are finite the lattice has finite height and widening
degrades to the least upper bound.  A one-sided window keeps the
standard widening and clamps its result.

Examples
--------
>>> d = IntervalDomain()
>>> d.lub(Interval(0, 10), Interval(5, 20))
Interval([0, 20])
>>> d.widen(Interval(0, 1), Interval(0, 2))
Interval([0, +inf])
>>> Interval(1, 10) / Interval(-2, 2)
Interval([-10, 10])
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from whileai.ast import AExpr, ArithOp, CmpOp, Compare, IntervalLiteral, Number
from whileai.domain import Domain
from whileai.errors import ConfigurationError, ErrorCode, MalformedIntervalError
from whileai.integer import NEG_INF, ONE, POS_INF, ExtendedInteger, IntLike
from whileai.state import State

__all__ = ["Interval", "IntervalBounds", "IntervalDomain", "EMPTY", "TOP", "UNIT"]


# ═══════════════════════════════════════════════════════════════════════════
#  PART 1 — INTERVAL VALUES
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class Interval:
    """
    Inclusive range ``[lo, hi]`` of extended integers.

    Every ``lo > hi`` pair is normalised to one canonical empty interval,
    so structural equality is lattice equality.
    """

    lo: ExtendedInteger
    hi: ExtendedInteger

    def __post_init__(self) -> None:
        lo = ExtendedInteger.coerce(self.lo)
        hi = ExtendedInteger.coerce(self.hi)
        if lo > hi:
            lo, hi = POS_INF, NEG_INF
        object.__setattr__(self, "lo", lo)
        object.__setattr__(self, "hi", hi)

    # ---- Constructors ----------------------------------------------------

    @classmethod
    def empty(cls) -> Interval:
        return cls(POS_INF, NEG_INF)

    @classmethod
    def top(cls) -> Interval:
        return cls(NEG_INF, POS_INF)

    @classmethod
    def const(cls, n: IntLike) -> Interval:
        """Singleton interval [n, n]."""
        return cls(n, n)

    # ---- Predicates ------------------------------------------------------

    @property
    def is_empty(self) -> bool:
        return self.lo > self.hi

    @property
    def is_singleton(self) -> bool:
        return self.lo == self.hi

    def contains(self, n: IntLike) -> bool:
        """Does the interval contain the value *n*?"""
        n = ExtendedInteger.coerce(n)
        return self.lo <= n <= self.hi

    def leq(self, other: Interval) -> bool:
        """[a,b] ⊑ [c,d]  ⟺  c ≤ a  ∧  b ≤ d  (or self = ⊥)."""
        if self.is_empty:
            return True
        return other.lo <= self.lo and self.hi <= other.hi

    # ---- Set operations (unclamped) --------------------------------------

    def hull(self, other: Interval) -> Interval:
        """[a,b] ⊔ [c,d] = [min(a,c), max(b,d)]."""
        if self.is_empty:
            return other
        if other.is_empty:
            return self
        return Interval(min(self.lo, other.lo), max(self.hi, other.hi))

    def intersect(self, other: Interval) -> Interval:
        """[a,b] ⊓ [c,d] = [max(a,c), min(b,d)]."""
        return Interval(max(self.lo, other.lo), min(self.hi, other.hi))

    # ---- Arithmetic ------------------------------------------------------

    def __neg__(self) -> Interval:
        if self.is_empty:
            return self
        return Interval(-self.hi, -self.lo)

    def __add__(self, other: Interval) -> Interval:
        if self.is_empty or other.is_empty:
            return EMPTY
        return Interval(self.lo + other.lo, self.hi + other.hi)

    def __sub__(self, other: Interval) -> Interval:
        if self.is_empty or other.is_empty:
            return EMPTY
        return Interval(self.lo - other.hi, self.hi - other.lo)

    def __mul__(self, other: Interval) -> Interval:
        if self.is_empty or other.is_empty:
            return EMPTY
        products = (
            self.lo * other.lo,
            self.lo * other.hi,
            self.hi * other.lo,
            self.hi * other.hi,
        )
        return Interval(min(products), max(products))

    def __truediv__(self, other: Interval) -> Interval:
        """Truncating division, split around a divisor containing zero.

        Division by exactly [0, 0] is empty.
        """
        if self.is_empty or other.is_empty:
            return EMPTY
        a, b, c, d = self.lo, self.hi, other.lo, other.hi
        if c >= ONE:
            return Interval(min(a.div(c), a.div(d)), max(b.div(c), b.div(d)))
        if d <= -ONE:
            return Interval(min(b.div(c), b.div(d)), max(a.div(c), a.div(d)))
        positive = self / other.intersect(Interval(ONE, POS_INF))
        negative = self / other.intersect(Interval(NEG_INF, -ONE))
        return positive.hull(negative)

    # ---- Display ---------------------------------------------------------

    def __str__(self) -> str:
        if self.is_empty:
            return "⊥"
        return f"[{self.lo}, {self.hi}]"

    def __repr__(self) -> str:
        return f"Interval({self})"


EMPTY = Interval.empty()
TOP = Interval.top()
UNIT = Interval.const(1)


# ═══════════════════════════════════════════════════════════════════════════
#  PART 2 — CLAMP WINDOW
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class IntervalBounds:
    """The window ``[lower, upper]`` every interval is saturated into.

    The default window is unbounded and leaves intervals untouched.
    """

    lower: ExtendedInteger = NEG_INF
    upper: ExtendedInteger = POS_INF

    def __post_init__(self) -> None:
        lower = ExtendedInteger.coerce(self.lower)
        upper = ExtendedInteger.coerce(self.upper)
        if lower > upper:
            raise ConfigurationError(
                f"lower bound {lower} is greater than upper bound {upper}",
                ErrorCode.INVERTED_BOUNDS,
            )
        object.__setattr__(self, "lower", lower)
        object.__setattr__(self, "upper", upper)

    @classmethod
    def of(cls, lower: Optional[int] = None, upper: Optional[int] = None) -> IntervalBounds:
        return cls(
            NEG_INF if lower is None else ExtendedInteger.of(lower),
            POS_INF if upper is None else ExtendedInteger.of(upper),
        )

    @property
    def is_bounded(self) -> bool:
        return self.lower.is_finite or self.upper.is_finite

    @property
    def is_finite(self) -> bool:
        """Are both ends of the window finite?"""
        return self.lower.is_finite and self.upper.is_finite

    def clamp(self, iv: Interval) -> Interval:
        """Saturate both bounds of *iv* into the window."""
        if iv.is_empty or not self.is_bounded:
            return iv
        lo = min(max(iv.lo, self.lower), self.upper)
        hi = max(min(iv.hi, self.upper), self.lower)
        return Interval(lo, hi)

    def __str__(self) -> str:
        return f"[{self.lower}, {self.upper}]"


# ═══════════════════════════════════════════════════════════════════════════
#  PART 3 — INTERVAL DOMAIN
# ═══════════════════════════════════════════════════════════════════════════

class IntervalDomain(Domain[Interval]):
    """The lattice of intervals, optionally clamped to *bounds*."""

    name = "interval"

    def __init__(self, bounds: Optional[IntervalBounds] = None) -> None:
        self.bounds = bounds if bounds is not None else IntervalBounds()

    def _clamp(self, iv: Interval) -> Interval:
        return self.bounds.clamp(iv)

    # ---- Lattice -----------------------------------------------------------

    def bottom(self) -> Interval:
        return EMPTY

    def top(self) -> Interval:
        return self._clamp(TOP)

    def unit(self) -> Interval:
        return UNIT

    def is_bottom(self, a: Interval) -> bool:
        return a.is_empty

    def leq(self, a: Interval, b: Interval) -> bool:
        return a.leq(b)

    def lub(self, a: Interval, b: Interval) -> Interval:
        return self._clamp(a.hull(b))

    def glb(self, a: Interval, b: Interval) -> Interval:
        return self._clamp(a.intersect(b))

    def widen(self, old: Interval, new: Interval) -> Interval:
        """
        Standard widening  [a,b] ∇ [c,d].

            new_lo = c < a  →  -inf   else  a
            new_hi = d > b  →  +inf   else  b

        Inside a window finite on both sides the lattice has finite height
        and this is just the least upper bound.  Otherwise a jump to an
        infinity on a bounded side lands on that side of the window.
        """
        if self.bounds.is_finite:
            return self.lub(old, new)
        if old.is_empty:
            return self._clamp(new)
        if new.is_empty:
            return old
        lo = old.lo if old.lo <= new.lo else NEG_INF
        hi = old.hi if old.hi >= new.hi else POS_INF
        return self._clamp(Interval(lo, hi))

    def height(self) -> Optional[int]:
        """Longest strictly ascending chain inside a finite window."""
        if not self.bounds.is_finite:
            return None
        return self.bounds.upper.value - self.bounds.lower.value + 2

    def narrow(self, old: Interval, new: Interval) -> Interval:
        """Replace only the infinite bounds of *old* by those of *new*."""
        if old.is_empty or new.is_empty:
            return EMPTY
        lo = new.lo if old.lo == NEG_INF else old.lo
        hi = new.hi if old.hi == POS_INF else old.hi
        return self._clamp(Interval(lo, hi))

    # ---- Arithmetic --------------------------------------------------------

    def add(self, a: Interval, b: Interval) -> Interval:
        return self._clamp(a + b)

    def sub(self, a: Interval, b: Interval) -> Interval:
        return self._clamp(a - b)

    def mul(self, a: Interval, b: Interval) -> Interval:
        return self._clamp(a * b)

    def div(self, a: Interval, b: Interval) -> Interval:
        return self._clamp(a / b)

    def contains_zero(self, a: Interval) -> bool:
        return a.contains(0)

    def invert(
        self, op: ArithOp, a: Interval, b: Interval, c: Interval
    ) -> Tuple[Interval, Interval]:
        if op is not ArithOp.DIV:
            return super().invert(op, a, b, c)
        # a == c * b + r with |r| < |b|; the divisor is left as it is.
        if c.is_empty:
            return EMPTY, EMPTY
        magnitude = max(-b.lo, b.hi)
        if magnitude.is_infinite:
            return a, b
        remainder = Interval(ONE - magnitude, magnitude - ONE)
        return self._clamp(c * b + remainder), b

    # ---- Literals and comparisons -----------------------------------------

    def eval_specific_aexpr(self, expr: AExpr, state: State[Interval]) -> Interval:
        if isinstance(expr, Number):
            return self._clamp(Interval.const(expr.value))
        if isinstance(expr, IntervalLiteral):
            if expr.lo > expr.hi:
                raise MalformedIntervalError(expr.lo, expr.hi)
            return self._clamp(Interval(expr.lo, expr.hi))
        raise TypeError(f"not a literal: {expr!r}")

    def eval_specific_bexpr(self, cond: Compare, state: State[Interval]) -> State[Interval]:
        if cond.op is CmpOp.EQ:
            return self.refine_equal(cond, state)
        if cond.op is CmpOp.NE:
            return self._not_equal(cond, state)
        if cond.op is CmpOp.LT:
            return self._less_than(cond, state)
        raise ValueError(f"comparison {cond.op.value} is derived, not domain-specific")

    def _less_than(self, cond: Compare, state: State[Interval]) -> State[Interval]:
        """``a < b``: a loses values ≥ max(b), b loses values ≤ min(a)."""
        left, right, _ = self.build_operands(cond, state)
        i1, i2 = left.value, right.value
        if i1.is_empty or i2.is_empty:
            return State.unreachable(self)
        lhs = self.glb(i1, Interval(NEG_INF, i2.hi - ONE))
        rhs = self.glb(i2, Interval(i1.lo + ONE, POS_INF))
        if lhs.is_empty or rhs.is_empty:
            return State.unreachable(self)
        return self.refine_operands(cond, left, lhs, right, rhs, state)

    def _not_equal(self, cond: Compare, state: State[Interval]) -> State[Interval]:
        """``a != b``: only a singleton on one side can cut an endpoint off the other."""
        left, right, _ = self.build_operands(cond, state)
        i1, i2 = left.value, right.value
        if i1.is_empty or i2.is_empty:
            return State.unreachable(self)
        if i1.is_singleton and i2.is_singleton and i1 == i2:
            return State.unreachable(self)
        lhs = _exclude(i1, i2.lo) if i2.is_singleton else i1
        rhs = _exclude(i2, i1.lo) if i1.is_singleton else i2
        return self.refine_operands(cond, left, lhs, right, rhs, state)

    def __repr__(self) -> str:
        if self.bounds.is_bounded:
            return f"IntervalDomain(bounds={self.bounds})"
        return "IntervalDomain()"


def _exclude(iv: Interval, n: ExtendedInteger) -> Interval:
    """Drop *n* from *iv* when it is one of the endpoints."""
    if n.is_infinite:
        return iv
    if iv.lo == n:
        return Interval(n + ONE, iv.hi)
    if iv.hi == n:
        return Interval(iv.lo, n - ONE)
    return iv
