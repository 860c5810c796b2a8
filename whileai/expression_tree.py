"""
whileai/expression_tree.py — Backward refinement through arithmetic.

While a comparison is evaluated, each operand is evaluated into a tree
that remembers the abstract value of every sub-expression::

    x + 1 < 10        Binop(+, [0, 20])
                      ├── Variable(x, [0, 19])
                      └── Value([1, 1])

Refining the root towards a target (``[-inf, 9]`` here) inverts each
operator on the way down, so the variable ``x`` itself ends up in
``[0, 8]`` rather than only the composite ``x + 1``.

Variables changed by ``x++`` / ``x--`` inside the compared expressions
are recorded as opaque values: their pre- and post-state values differ,
so no single binding can be refined soundly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, FrozenSet, Generic, Tuple, TypeVar, Union

from whileai.ast import (
    AExpr,
    ArithOp,
    BinOp,
    IntervalLiteral,
    Number,
    PostDecrement,
    PostIncrement,
    Variable,
)
from whileai.state import State

if TYPE_CHECKING:
    from whileai.domain import Domain

__all__ = [
    "ValueNode",
    "VariableNode",
    "BinopNode",
    "ExpressionTree",
    "mutated_names",
    "build_tree",
    "refine",
]

V = TypeVar("V")


@dataclass(frozen=True, slots=True)
class ValueNode(Generic[V]):
    value: V


@dataclass(frozen=True, slots=True)
class VariableNode(Generic[V]):
    name: str
    value: V


@dataclass(frozen=True, slots=True)
class BinopNode(Generic[V]):
    op: ArithOp
    value: V
    left: ExpressionTree[V]
    right: ExpressionTree[V]


ExpressionTree = Union[ValueNode, VariableNode, BinopNode]


def mutated_names(*exprs: AExpr) -> FrozenSet[str]:
    """Names incremented or decremented anywhere in *exprs*."""
    names = set()
    stack = list(exprs)
    while stack:
        expr = stack.pop()
        if isinstance(expr, (PostIncrement, PostDecrement)):
            names.add(expr.name)
        elif isinstance(expr, BinOp):
            stack.extend((expr.left, expr.right))
    return frozenset(names)


def build_tree(
    domain: Domain[V],
    expr: AExpr,
    state: State[V],
    opaque: FrozenSet[str] = frozenset(),
) -> Tuple[ExpressionTree[V], State[V]]:
    """Evaluate *expr* like ``domain.eval_aexpr`` and keep every sub-result.

    Returns the tree and the state after the expression's side effects.
    Variables named in *opaque* become plain value leaves.
    """
    if isinstance(expr, (Number, IntervalLiteral)):
        return ValueNode(domain.eval_specific_aexpr(expr, state)), state
    if isinstance(expr, (Variable, PostIncrement, PostDecrement)):
        value, after = domain.eval_aexpr(expr, state)
        if expr.name in opaque:
            return ValueNode(value), after
        return VariableNode(expr.name, value), after
    if isinstance(expr, BinOp):
        left, state = build_tree(domain, expr.left, state, opaque)
        right, state = build_tree(domain, expr.right, state, opaque)
        value = domain.binop(expr, left.value, right.value)
        return BinopNode(expr.op, value, left, right), state
    raise TypeError(f"not an arithmetic expression: {expr!r}")


def refine(
    domain: Domain[V],
    tree: ExpressionTree[V],
    target: V,
    state: State[V],
) -> State[V]:
    """Narrow the variables under *tree* so that its value fits *target*."""
    if isinstance(tree, ValueNode):
        return state
    if isinstance(tree, VariableNode):
        return state.put(tree.name, domain.glb(tree.value, target))
    c = domain.glb(tree.value, target)
    better_left, better_right = domain.invert(tree.op, tree.left.value, tree.right.value, c)
    state = refine(domain, tree.left, better_left, state)
    return refine(domain, tree.right, better_right, state)
