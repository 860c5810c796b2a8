"""
whileai/integer.py — Integers extended with ±∞.

    NEG_INF  <  ExtendedInteger.of(n)  <  POS_INF      for every finite n

Finite values are 64-bit signed integers.  Every arithmetic operation
saturates: a result outside the 64-bit range becomes the infinity of
the matching sign.  ``+∞ + −∞`` has no meaningful value and raises
:class:`~whileai.errors.UndefinedInfinityError`.

Examples
--------
>>> ExtendedInteger.of(3) + POS_INF
+inf
>>> ExtendedInteger.of(-7).div(ExtendedInteger.of(2))
-3
>>> ExtendedInteger.parse("neginf")
-inf
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Union

from whileai.errors import UndefinedInfinityError

__all__ = [
    "Kind",
    "ExtendedInteger",
    "NEG_INF",
    "POS_INF",
    "ZERO",
    "ONE",
    "I64_MIN",
    "I64_MAX",
    "IntLike",
]

I64_MIN = -(2 ** 63)
I64_MAX = 2 ** 63 - 1


class Kind(IntEnum):
    """Tag of an extended integer; the numeric order is the value order."""

    NEG_INF = -1
    FINITE = 0
    POS_INF = 1


@dataclass(frozen=True, order=True, slots=True)
class ExtendedInteger:
    """
    An element of ℤ₆₄ ∪ {−∞, +∞}.

    Field order makes the generated comparison operators implement the
    total order: infinities carry ``value == 0`` so they compare only by
    ``kind``.
    """

    kind: Kind
    value: int = 0

    # ---- Constructors ----------------------------------------------------

    @classmethod
    def of(cls, n: int) -> ExtendedInteger:
        """Finite value *n*, saturated to ±∞ outside the 64-bit range."""
        if n > I64_MAX:
            return POS_INF
        if n < I64_MIN:
            return NEG_INF
        return cls(Kind.FINITE, n)

    @classmethod
    def coerce(cls, x: IntLike) -> ExtendedInteger:
        if isinstance(x, ExtendedInteger):
            return x
        return cls.of(x)

    @classmethod
    def parse(cls, text: str) -> ExtendedInteger:
        """Parse ``neginf``/``-inf``, ``posinf``/``+inf`` or a decimal literal."""
        token = text.strip().lower()
        if token in ("neginf", "-inf"):
            return NEG_INF
        if token in ("posinf", "+inf", "inf"):
            return POS_INF
        return cls.of(int(token))

    # ---- Predicates ------------------------------------------------------

    @property
    def is_finite(self) -> bool:
        return self.kind is Kind.FINITE

    @property
    def is_infinite(self) -> bool:
        return self.kind is not Kind.FINITE

    def sign(self) -> int:
        """-1, 0 or 1."""
        if self.kind is not Kind.FINITE:
            return int(self.kind)
        return (self.value > 0) - (self.value < 0)

    # ---- Arithmetic ------------------------------------------------------

    def __neg__(self) -> ExtendedInteger:
        if self.kind is Kind.NEG_INF:
            return POS_INF
        if self.kind is Kind.POS_INF:
            return NEG_INF
        return ExtendedInteger.of(-self.value)

    def __add__(self, other: IntLike) -> ExtendedInteger:
        other = ExtendedInteger.coerce(other)
        if self.is_finite and other.is_finite:
            return ExtendedInteger.of(self.value + other.value)
        if {self.kind, other.kind} == {Kind.POS_INF, Kind.NEG_INF}:
            raise UndefinedInfinityError(f"{self} + {other}")
        return self if self.is_infinite else other

    __radd__ = __add__

    def __sub__(self, other: IntLike) -> ExtendedInteger:
        return self + (-ExtendedInteger.coerce(other))

    def __rsub__(self, other: IntLike) -> ExtendedInteger:
        return ExtendedInteger.coerce(other) - self

    def __mul__(self, other: IntLike) -> ExtendedInteger:
        other = ExtendedInteger.coerce(other)
        if self.is_finite and other.is_finite:
            return ExtendedInteger.of(self.value * other.value)
        sign = self.sign() * other.sign()
        if sign == 0:
            return ZERO
        return POS_INF if sign > 0 else NEG_INF

    __rmul__ = __mul__

    def div(self, other: IntLike) -> ExtendedInteger:
        """
        Integer division truncating toward zero.

        * ``0 / y = 0`` and ``x / ±∞ = 0``
        * ``±∞ / y`` keeps an infinity whose sign is the product of signs
        * ``x / 0`` for finite ``x ≠ 0`` is the infinity of ``x``'s sign

        Interval division never feeds a zero divisor here; the last rule
        only keeps the operation total.
        """
        other = ExtendedInteger.coerce(other)
        if self == ZERO or other.is_infinite:
            return ZERO
        if self.is_infinite or other == ZERO:
            sign = self.sign() * (other.sign() or 1)
            return POS_INF if sign > 0 else NEG_INF
        q = abs(self.value) // abs(other.value)
        if (self.value < 0) != (other.value < 0):
            q = -q
        return ExtendedInteger.of(q)

    def __str__(self) -> str:
        if self.kind is Kind.NEG_INF:
            return "-inf"
        if self.kind is Kind.POS_INF:
            return "+inf"
        return str(self.value)

    __repr__ = __str__


IntLike = Union[int, ExtendedInteger]

NEG_INF = ExtendedInteger(Kind.NEG_INF)
POS_INF = ExtendedInteger(Kind.POS_INF)
ZERO = ExtendedInteger(Kind.FINITE, 0)
ONE = ExtendedInteger(Kind.FINITE, 1)
