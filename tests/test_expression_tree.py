# tests/test_expression_tree.py
"""Tests for expression trees and backward refinement."""

from hypothesis import given, settings
from hypothesis import strategies as st

from whileai.ast import ArithOp, BinOp, Variable
from whileai.expression_tree import (
    BinopNode,
    ValueNode,
    VariableNode,
    build_tree,
    mutated_names,
    refine,
)
from whileai.interval import Interval, IntervalDomain
from whileai.parser import parse_aexpr
from whileai.state import State


class TestBuildTree:

    def test_records_every_subvalue(self, interval_domain):
        state = State.of(interval_domain, {"x": Interval(0, 19)})
        tree, after = build_tree(interval_domain, parse_aexpr("x + 1"), state)
        assert tree == BinopNode(
            ArithOp.ADD,
            Interval(1, 20),
            VariableNode("x", Interval(0, 19)),
            ValueNode(Interval(1, 1)),
        )
        assert after == state

    def test_opaque_names_become_values(self, interval_domain):
        state = State.of(interval_domain, {"x": Interval(0, 3)})
        expr = parse_aexpr("x++ + x")
        tree, after = build_tree(interval_domain, expr, state, mutated_names(expr))
        assert isinstance(tree.left, ValueNode)
        assert isinstance(tree.right, ValueNode)
        assert tree.right.value == Interval(1, 4)
        assert after.read("x") == Interval(1, 4)

    def test_mutated_names(self):
        assert mutated_names(parse_aexpr("x++ * (y-- + z)")) == frozenset({"x", "y"})
        assert mutated_names(parse_aexpr("x + 1")) == frozenset()


class TestRefine:

    def test_variable_leaf(self, interval_domain):
        state = State.of(interval_domain, {"x": Interval(0, 20)})
        tree, _ = build_tree(interval_domain, parse_aexpr("x"), state)
        assert refine(interval_domain, tree, Interval(5, 30), state).read("x") == Interval(5, 20)

    def test_through_subtraction(self, interval_domain):
        state = State.of(interval_domain, {"x": Interval(0, 20), "y": Interval(0, 5)})
        tree, _ = build_tree(interval_domain, parse_aexpr("x - y"), state)
        out = refine(interval_domain, tree, Interval(18, 100), state)
        assert out.read("x") == Interval(18, 20)
        assert out.read("y") == Interval(0, 2)

    def test_empty_target_is_unreachable(self, interval_domain):
        state = State.of(interval_domain, {"x": Interval(0, 20)})
        tree, _ = build_tree(interval_domain, parse_aexpr("x + 1"), state)
        assert refine(interval_domain, tree, Interval(50, 60), state).is_unreachable

    def test_multiplication_by_possible_zero_is_not_refined(self, interval_domain):
        state = State.of(interval_domain, {"x": Interval(-5, 5), "y": Interval(0, 3)})
        tree, _ = build_tree(interval_domain, parse_aexpr("x * y"), state)
        out = refine(interval_domain, tree, Interval(0, 0), state)
        assert out.read("x") == Interval(-5, 5)
        assert out.read("y") == Interval(0, 3)


# ---------------------------------------------------------------------------
# Soundness: no concrete solution is ever dropped by refinement
# ---------------------------------------------------------------------------

SMALL = st.integers(min_value=-8, max_value=8)


@st.composite
def small_intervals(draw):
    a, b = draw(SMALL), draw(SMALL)
    return Interval(min(a, b), max(a, b))


def _concrete(op, x, y):
    if op is ArithOp.ADD:
        return x + y
    if op is ArithOp.SUB:
        return x - y
    if op is ArithOp.MUL:
        return x * y
    q = abs(x) // abs(y)
    return q if (x < 0) == (y < 0) else -q


class TestRefineSoundness:

    @settings(max_examples=200, deadline=None)
    @given(
        op=st.sampled_from(list(ArithOp)),
        x=small_intervals(),
        y=small_intervals(),
        target=small_intervals(),
    )
    def test_keeps_every_solution(self, op, x, y, target):
        domain = IntervalDomain()
        state = State.of(domain, {"x": x, "y": y})
        tree, _ = build_tree(domain, BinOp(op, Variable("x"), Variable("y")), state)
        refined = refine(domain, tree, target, state)
        for x0 in range(x.lo.value, x.hi.value + 1):
            for y0 in range(y.lo.value, y.hi.value + 1):
                if op is ArithOp.DIV and y0 == 0:
                    continue
                if not target.contains(_concrete(op, x0, y0)):
                    continue
                assert not refined.is_unreachable
                assert refined.read("x").contains(x0)
                assert refined.read("y").contains(y0)

    @settings(max_examples=200, deadline=None)
    @given(
        op=st.sampled_from([ArithOp.ADD, ArithOp.SUB]),
        x=small_intervals(),
        y=small_intervals(),
        target=small_intervals(),
    )
    def test_linear_refinement_is_exact(self, op, x, y, target):
        domain = IntervalDomain()
        state = State.of(domain, {"x": x, "y": y})
        expr = BinOp(op, Variable("x"), Variable("y"))
        tree, _ = build_tree(domain, expr, state)
        refined = refine(domain, tree, target, state)
        expected = domain.glb(tree.value, target)
        if refined.is_unreachable:
            assert expected.is_empty
            return
        value, _ = domain.eval_aexpr(expr, refined)
        assert domain.glb(value, target) == expected
