# tests/test_state.py
"""Tests for abstract states and invariants."""

import pytest

from whileai.errors import InternalError, UnreachableReadError
from whileai.interval import EMPTY, TOP, Interval
from whileai.invariant import Invariant
from whileai.state import State


class TestStateAccess:

    def test_unbound_variable_is_top(self, interval_domain):
        assert State.empty(interval_domain).read("x") == TOP

    def test_read_from_unreachable_fails(self, interval_domain):
        with pytest.raises(UnreachableReadError) as exc_info:
            State.unreachable(interval_domain).read("x")
        assert isinstance(exc_info.value, InternalError)
        assert exc_info.value.variable == "x"

    def test_put_returns_new_state(self, interval_domain):
        empty = State.empty(interval_domain)
        one = empty.put("x", Interval(1, 1))
        assert "x" not in empty
        assert "x" in one
        assert "x" not in State.unreachable(interval_domain)
        assert one.read("x") == Interval(1, 1)

    def test_put_bottom_makes_unreachable(self, interval_domain):
        state = State.empty(interval_domain).put("x", Interval(1, 1)).put("y", EMPTY)
        assert state.is_unreachable

    def test_put_on_unreachable_is_noop(self, interval_domain):
        assert State.unreachable(interval_domain).put("x", Interval(1, 1)).is_unreachable

    def test_of_with_bottom_value(self, interval_domain):
        assert State.of(interval_domain, {"x": EMPTY}).is_unreachable

    def test_variables_are_sorted(self, interval_domain):
        state = State.of(interval_domain, {"y": Interval(1, 1), "x": Interval(2, 2)})
        assert state.variables() == ("x", "y")
        assert list(state.items()) == [("x", Interval(2, 2)), ("y", Interval(1, 1))]


class TestStateLattice:

    def test_lub_keeps_one_sided_bindings(self, interval_domain):
        a = State.of(interval_domain, {"x": Interval(0, 1)})
        b = State.of(interval_domain, {"x": Interval(5, 6), "y": Interval(2, 2)})
        joined = a.lub(b)
        assert joined.read("x") == Interval(0, 6)
        assert joined.read("y") == Interval(2, 2)

    def test_unreachable_is_lub_identity(self, interval_domain):
        a = State.of(interval_domain, {"x": Interval(0, 1)})
        bottom = State.unreachable(interval_domain)
        assert a.lub(bottom) == a
        assert bottom.lub(a) == a
        assert bottom.widen(a) == a

    def test_unreachable_absorbs_glb(self, interval_domain):
        a = State.of(interval_domain, {"x": Interval(0, 1)})
        bottom = State.unreachable(interval_domain)
        assert a.glb(bottom).is_unreachable
        assert bottom.narrow(a).is_unreachable

    def test_disjoint_glb_is_unreachable(self, interval_domain):
        a = State.of(interval_domain, {"x": Interval(0, 1)})
        b = State.of(interval_domain, {"x": Interval(5, 6)})
        assert a.glb(b).is_unreachable

    def test_widen_pointwise(self, interval_domain):
        a = State.of(interval_domain, {"x": Interval(0, 1)})
        b = State.of(interval_domain, {"x": Interval(0, 2)})
        assert str(a.widen(b)) == "x: [0, +inf]"


class TestStateEquality:

    def test_only_common_keys_are_compared(self, interval_domain):
        a = State.of(interval_domain, {"x": Interval(0, 1)})
        b = State.of(interval_domain, {"x": Interval(0, 1), "y": Interval(2, 2)})
        assert a == b

    def test_differing_value(self, interval_domain):
        a = State.of(interval_domain, {"x": Interval(0, 1)})
        b = State.of(interval_domain, {"x": Interval(0, 2)})
        assert a != b

    def test_unreachable(self, interval_domain):
        assert State.unreachable(interval_domain) == State.unreachable(interval_domain)
        assert State.unreachable(interval_domain) != State.empty(interval_domain)

    def test_states_are_unhashable(self, interval_domain):
        with pytest.raises(TypeError):
            hash(State.empty(interval_domain))


class TestStateDisplay:

    def test_str(self, interval_domain):
        assert str(State.unreachable(interval_domain)) == "⊥"
        assert str(State.empty(interval_domain)) == "{}"
        state = State.of(interval_domain, {"y": Interval(1, 1), "x": Interval(0, 10)})
        assert str(state) == "x: [0, 10], y: [1, 1]"
        assert repr(state) == "State(x: [0, 10], y: [1, 1])"


class TestInvariant:

    def test_append_is_persistent(self, interval_domain):
        empty = Invariant()
        one = empty.append(State.empty(interval_domain))
        assert len(empty) == 0
        assert len(one) == 1

    def test_extend_and_index(self, interval_domain):
        a = Invariant().append(State.empty(interval_domain))
        b = Invariant().append(State.unreachable(interval_domain))
        both = a.extend(b)
        assert len(both) == 2
        assert both[1].is_unreachable
        assert [str(s) for s in both] == ["{}", "⊥"]

    def test_str(self, interval_domain):
        inv = Invariant().append(State.empty(interval_domain), State.unreachable(interval_domain))
        assert str(inv) == "   0  {}\n   1  ⊥"
