# tests/test_lattice_laws.py
"""
Property-based checks of the lattice laws for the interval and constant
domains.
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from whileai.constant import ANY, NONE, Constant, ConstantDomain
from whileai.integer import NEG_INF, POS_INF
from whileai.interval import EMPTY, Interval, IntervalBounds, IntervalDomain

# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

FINITE = st.integers(min_value=-1000, max_value=1000)


@st.composite
def intervals(draw):
    """Empty, or [lo, hi] with lo possibly -inf and hi possibly +inf."""
    if draw(st.integers(min_value=0, max_value=9)) == 0:
        return EMPTY
    a, b = draw(FINITE), draw(FINITE)
    lo, hi = min(a, b), max(a, b)
    if draw(st.booleans()) and draw(st.booleans()):
        lo = NEG_INF
    if draw(st.booleans()) and draw(st.booleans()):
        hi = POS_INF
    return Interval(lo, hi)


@st.composite
def constants(draw):
    choice = draw(st.integers(min_value=0, max_value=5))
    if choice == 0:
        return NONE
    if choice == 1:
        return ANY
    return Constant.of(draw(st.integers(min_value=-3, max_value=3)))


DOMAINS = [
    pytest.param(IntervalDomain(), intervals(), id="interval"),
    pytest.param(ConstantDomain(), constants(), id="constant"),
]


# ---------------------------------------------------------------------------
# Laws shared by both domains
# ---------------------------------------------------------------------------

class TestLatticeLaws:

    @pytest.mark.parametrize("domain, values", DOMAINS)
    @settings(max_examples=200)
    @given(data=st.data())
    def test_bottom_and_top_are_units(self, domain, values, data):
        a = data.draw(values)
        assert domain.lub(a, domain.bottom()) == a
        assert domain.glb(a, domain.top()) == a
        assert domain.leq(domain.bottom(), a)
        assert domain.leq(a, domain.top())

    @pytest.mark.parametrize("domain, values", DOMAINS)
    @settings(max_examples=200)
    @given(data=st.data())
    def test_commutative_and_idempotent(self, domain, values, data):
        a, b = data.draw(values), data.draw(values)
        assert domain.lub(a, b) == domain.lub(b, a)
        assert domain.glb(a, b) == domain.glb(b, a)
        assert domain.lub(a, a) == a
        assert domain.glb(a, a) == a

    @pytest.mark.parametrize("domain, values", DOMAINS)
    @settings(max_examples=200)
    @given(data=st.data())
    def test_associative(self, domain, values, data):
        a, b, c = data.draw(values), data.draw(values), data.draw(values)
        assert domain.lub(a, domain.lub(b, c)) == domain.lub(domain.lub(a, b), c)
        assert domain.glb(a, domain.glb(b, c)) == domain.glb(domain.glb(a, b), c)

    @pytest.mark.parametrize("domain, values", DOMAINS)
    @settings(max_examples=200)
    @given(data=st.data())
    def test_absorption(self, domain, values, data):
        a, b = data.draw(values), data.draw(values)
        assert domain.lub(a, domain.glb(a, b)) == a
        assert domain.glb(a, domain.lub(a, b)) == a

    @pytest.mark.parametrize("domain, values", DOMAINS)
    @settings(max_examples=200)
    @given(data=st.data())
    def test_order_agrees_with_lub(self, domain, values, data):
        a, b = data.draw(values), data.draw(values)
        assert domain.leq(a, b) == (domain.lub(a, b) == b)
        assert domain.leq(domain.glb(a, b), a)
        assert domain.leq(a, domain.lub(a, b))

    @pytest.mark.parametrize("domain, values", DOMAINS)
    @settings(max_examples=200)
    @given(data=st.data())
    def test_widen_is_an_upper_bound(self, domain, values, data):
        a, b = data.draw(values), data.draw(values)
        w = domain.widen(a, b)
        assert domain.leq(a, w)
        assert domain.leq(b, w)

    @pytest.mark.parametrize("domain, values", DOMAINS)
    @settings(max_examples=200)
    @given(data=st.data())
    def test_narrow_stays_between(self, domain, values, data):
        a = data.draw(values)
        b = domain.glb(a, data.draw(values))
        n = domain.narrow(a, b)
        assert domain.leq(b, n)
        assert domain.leq(n, a)

    @pytest.mark.parametrize("domain, values", DOMAINS)
    @settings(max_examples=100)
    @given(data=st.data())
    def test_widening_chain_stabilises(self, domain, values, data):
        xs = data.draw(st.lists(values, min_size=1, max_size=20))
        current = domain.bottom()
        changes = 0
        for x in xs:
            widened = domain.widen(current, domain.lub(current, x))
            if widened != current:
                changes += 1
            current = widened
        # ⊥ → first value, then at most one jump per bound.
        assert changes <= 3


# ---------------------------------------------------------------------------
# Clamp window
# ---------------------------------------------------------------------------

class TestClampWindow:

    WINDOW = IntervalBounds.of(-50, 50)

    def inside(self, value):
        return value.is_empty or (
            self.WINDOW.lower <= value.lo and value.hi <= self.WINDOW.upper
        )

    @settings(max_examples=200)
    @given(a=intervals(), b=intervals())
    def test_results_stay_in_window(self, a, b):
        domain = IntervalDomain(self.WINDOW)
        for result in (
            domain.lub(a, b),
            domain.glb(a, b),
            domain.widen(a, b),
            domain.add(a, b),
            domain.sub(a, b),
            domain.mul(a, b),
            domain.top(),
        ):
            assert self.inside(result)

    @settings(max_examples=200)
    @given(a=intervals(), b=intervals())
    def test_widen_equals_lub(self, a, b):
        domain = IntervalDomain(self.WINDOW)
        assert domain.widen(a, b) == domain.lub(a, b)
