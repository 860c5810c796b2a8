"""
whileai/domain.py — Numeric abstract domains and generic evaluation.

A :class:`Domain` is a :class:`~whileai.lattice.Lattice` that also knows
abstract arithmetic.  Evaluation of expressions is written once here:

    eval_aexpr   variables, x++ / x--, + - * /          (generic)
                 numeric and interval literals           → eval_specific_aexpr
    eval_bexpr   true, false, !, &&, ||, > >= <=          (generic)
                 ==, !=, <                               → eval_specific_bexpr

Conditions *filter* a state: the result keeps only the environments in
which the condition may hold, or is Unreachable when it cannot.
"""

from __future__ import annotations

import abc
from typing import Tuple, TypeVar

from whileai.ast import (
    AExpr,
    And,
    ArithOp,
    BExpr,
    BinOp,
    BoolLiteral,
    CmpOp,
    Compare,
    IntervalLiteral,
    Not,
    Number,
    Or,
    PostDecrement,
    PostIncrement,
    Variable,
    is_constant_zero,
    is_same,
    negate,
)
from whileai.errors import DivisionByZeroError
from whileai.expression_tree import ExpressionTree, build_tree, mutated_names, refine
from whileai.lattice import Lattice
from whileai.state import State

__all__ = ["Domain", "V"]

V = TypeVar("V")


class Domain(Lattice[V]):
    """A numeric abstract domain.

    Subclasses supply the lattice operations, the four arithmetic
    operators, ``contains_zero`` and the two ``eval_specific_*`` hooks.
    """

    #: Short name used by the configuration and the CLI.
    name: str = "abstract"

    # ---- Arithmetic -------------------------------------------------------

    @abc.abstractmethod
    def add(self, a: V, b: V) -> V: ...

    @abc.abstractmethod
    def sub(self, a: V, b: V) -> V: ...

    @abc.abstractmethod
    def mul(self, a: V, b: V) -> V: ...

    @abc.abstractmethod
    def div(self, a: V, b: V) -> V:
        """Abstract division; a divisor that is exactly {0} gives ⊥."""

    @abc.abstractmethod
    def contains_zero(self, a: V) -> bool:
        """May *a* stand for the value 0?"""

    def arith(self, op: ArithOp, a: V, b: V) -> V:
        if op is ArithOp.ADD:
            return self.add(a, b)
        if op is ArithOp.SUB:
            return self.sub(a, b)
        if op is ArithOp.MUL:
            return self.mul(a, b)
        return self.div(a, b)

    def binop(self, expr: BinOp, a: V, b: V) -> V:
        """Apply *expr*'s operator to already evaluated operands."""
        if expr.op is ArithOp.DIV and is_constant_zero(expr.right):
            raise DivisionByZeroError(str(expr))
        return self.arith(expr.op, a, b)

    def invert(self, op: ArithOp, a: V, b: V, c: V) -> Tuple[V, V]:
        """Given ``a op b`` must lie in *c*, return new bounds for a and b.

        The results are intersected with *a* and *b* by the caller.
        Division has no sound general inverse under truncation and is
        left unrefined; domains may do better.
        """
        if op is ArithOp.ADD:
            return self.sub(c, b), self.sub(c, a)
        if op is ArithOp.SUB:
            return self.add(c, b), self.sub(a, c)
        if op is ArithOp.MUL:
            # 0 * anything == 0: a zero factor says nothing about the other.
            c_zero = self.contains_zero(c)
            left = a if c_zero and self.contains_zero(b) else self.div(c, b)
            right = b if c_zero and self.contains_zero(a) else self.div(c, a)
            return left, right
        return a, b

    # ---- Domain-specific hooks --------------------------------------------

    @abc.abstractmethod
    def eval_specific_aexpr(self, expr: AExpr, state: State[V]) -> V:
        """Abstract a numeric or interval literal."""

    @abc.abstractmethod
    def eval_specific_bexpr(self, cond: Compare, state: State[V]) -> State[V]:
        """Filter *state* by an ``==``, ``!=`` or ``<`` comparison."""

    # ---- Generic evaluation ----------------------------------------------

    def eval_aexpr(self, expr: AExpr, state: State[V]) -> Tuple[V, State[V]]:
        """Abstract value of *expr* and the state after its side effects."""
        if state.is_unreachable:
            return self.bottom(), state
        if isinstance(expr, (Number, IntervalLiteral)):
            return self.eval_specific_aexpr(expr, state), state
        if isinstance(expr, Variable):
            return state.read(expr.name), state
        if isinstance(expr, PostIncrement):
            old = state.read(expr.name)
            return old, state.put(expr.name, self.add(old, self.unit()))
        if isinstance(expr, PostDecrement):
            old = state.read(expr.name)
            return old, state.put(expr.name, self.sub(old, self.unit()))
        if isinstance(expr, BinOp):
            left, state = self.eval_aexpr(expr.left, state)
            right, state = self.eval_aexpr(expr.right, state)
            return self.binop(expr, left, right), state
        raise TypeError(f"not an arithmetic expression: {expr!r}")

    def eval_bexpr(self, cond: BExpr, state: State[V]) -> State[V]:
        """Restrict *state* to the environments where *cond* may hold."""
        if state.is_unreachable:
            return state
        if isinstance(cond, BoolLiteral):
            return state if cond.value else State.unreachable(self)
        if isinstance(cond, Not):
            return self.eval_bexpr(negate(cond.operand), state)
        if isinstance(cond, And):
            return self.eval_bexpr(cond.right, self.eval_bexpr(cond.left, state))
        if isinstance(cond, Or):
            return self.eval_bexpr(cond.left, state).lub(self.eval_bexpr(cond.right, state))
        if isinstance(cond, Compare):
            return self._eval_compare(cond, state)
        raise TypeError(f"not a boolean expression: {cond!r}")

    def _eval_compare(self, cond: Compare, state: State[V]) -> State[V]:
        op, a, b = cond.op, cond.left, cond.right
        if op is CmpOp.GT:
            return self._eval_compare(Compare(CmpOp.LT, b, a), state)
        if op is CmpOp.GE:
            return self._eval_compare(Compare(CmpOp.LE, b, a), state)
        if op is CmpOp.LE:
            less = self._eval_compare(Compare(CmpOp.LT, a, b), state)
            equal = self._eval_compare(Compare(CmpOp.EQ, a, b), state)
            return less.lub(equal)
        if op in (CmpOp.NE, CmpOp.LT) and is_same(a, b):
            return State.unreachable(self)
        return self.eval_specific_bexpr(cond, state)

    # ---- Refinement helpers shared by the concrete domains ------------------

    def build_operands(
        self, cond: Compare, state: State[V]
    ) -> Tuple[ExpressionTree[V], ExpressionTree[V], State[V]]:
        """Expression trees for both sides of *cond*, evaluated left to right."""
        opaque = mutated_names(cond.left, cond.right)
        left, state = build_tree(self, cond.left, state, opaque)
        right, state = build_tree(self, cond.right, state, opaque)
        return left, right, state

    def refine_operands(
        self,
        cond: Compare,
        left: ExpressionTree[V],
        left_target: V,
        right: ExpressionTree[V],
        right_target: V,
        state: State[V],
    ) -> State[V]:
        """Refine both operand trees in *state*, then replay side effects."""
        state = refine(self, left, left_target, state)
        state = refine(self, right, right_target, state)
        _, state = self.eval_aexpr(cond.left, state)
        _, state = self.eval_aexpr(cond.right, state)
        return state

    def refine_equal(self, cond: Compare, state: State[V]) -> State[V]:
        """``a == b``: both sides end up in the glb of their values."""
        left, right, _ = self.build_operands(cond, state)
        meet = self.glb(left.value, right.value)
        if self.is_bottom(meet):
            return State.unreachable(self)
        return self.refine_operands(cond, left, meet, right, meet, state)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
