# tests/test_integer.py
"""Tests for ExtendedInteger: order, saturation and the division rules."""

import pytest

from whileai.errors import AnalysisArithmeticError, UndefinedInfinityError
from whileai.integer import (
    I64_MAX,
    I64_MIN,
    NEG_INF,
    ONE,
    POS_INF,
    ZERO,
    ExtendedInteger,
)

E = ExtendedInteger.of


class TestOrder:

    def test_total_order(self):
        assert NEG_INF < E(I64_MIN) < E(-1) < ZERO < ONE < E(I64_MAX) < POS_INF

    def test_infinities_equal_themselves(self):
        assert NEG_INF == ExtendedInteger.parse("neginf")
        assert POS_INF == ExtendedInteger.parse("posinf")
        assert min(POS_INF, E(3), NEG_INF) == NEG_INF

    def test_sign(self):
        assert NEG_INF.sign() == -1
        assert ZERO.sign() == 0
        assert E(42).sign() == 1


class TestAddition:

    def test_finite(self):
        assert E(2) + E(3) == E(5)
        assert E(2) + 3 == E(5)

    def test_saturates_upwards(self):
        assert E(I64_MAX) + ONE == POS_INF

    def test_saturates_downwards(self):
        assert E(I64_MIN) - ONE == NEG_INF

    def test_infinity_absorbs_finite(self):
        assert POS_INF + E(-100) == POS_INF
        assert E(7) + NEG_INF == NEG_INF
        assert POS_INF + POS_INF == POS_INF

    def test_opposite_infinities_fail(self):
        with pytest.raises(UndefinedInfinityError):
            POS_INF + NEG_INF
        with pytest.raises(AnalysisArithmeticError):
            POS_INF - POS_INF

    def test_negation_swaps_infinities(self):
        assert -POS_INF == NEG_INF
        assert -NEG_INF == POS_INF
        assert -E(4) == E(-4)


class TestMultiplication:

    def test_finite(self):
        assert E(-3) * E(4) == E(-12)

    def test_overflow_is_sign_aware(self):
        assert E(I64_MAX) * E(2) == POS_INF
        assert E(I64_MAX) * E(-2) == NEG_INF

    def test_infinity_times_sign(self):
        assert POS_INF * E(-2) == NEG_INF
        assert NEG_INF * E(-2) == POS_INF
        assert NEG_INF * POS_INF == NEG_INF

    def test_infinity_times_zero_is_zero(self):
        assert POS_INF * ZERO == ZERO
        assert ZERO * NEG_INF == ZERO


class TestDivision:

    @pytest.mark.parametrize("a, b, expected", [
        (7, 2, 3),
        (-7, 2, -3),
        (7, -2, -3),
        (-7, -2, 3),
        (0, 5, 0),
    ])
    def test_truncates_toward_zero(self, a, b, expected):
        assert E(a).div(E(b)) == E(expected)

    def test_by_infinity_is_zero(self):
        assert E(1000).div(POS_INF) == ZERO
        assert E(-1000).div(NEG_INF) == ZERO

    def test_infinite_dividend(self):
        assert POS_INF.div(E(3)) == POS_INF
        assert POS_INF.div(E(-3)) == NEG_INF
        assert NEG_INF.div(E(3)) == NEG_INF
        assert NEG_INF.div(E(-3)) == POS_INF

    def test_finite_by_zero_keeps_sign(self):
        assert E(5).div(ZERO) == POS_INF
        assert E(-5).div(ZERO) == NEG_INF
        assert ZERO.div(ZERO) == ZERO


class TestText:

    def test_str(self):
        assert str(NEG_INF) == "-inf"
        assert str(POS_INF) == "+inf"
        assert str(E(-12)) == "-12"

    def test_parse_overflow_saturates(self):
        assert ExtendedInteger.parse("99999999999999999999") == POS_INF
        assert ExtendedInteger.parse("-99999999999999999999") == NEG_INF

    def test_parse_rejects_garbage(self):
        with pytest.raises(ValueError):
            ExtendedInteger.parse("twelve")
