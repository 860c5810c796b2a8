# tests/test_config.py
"""Tests for AnalysisConfig, the domain registry and the error hierarchy."""

import pytest

from whileai.config import DEFAULT_REGISTRY, AnalysisConfig, DomainRegistry
from whileai.constant import ConstantDomain
from whileai.errors import (
    AnalysisArithmeticError,
    ConfigurationError,
    DivisionByZeroError,
    ErrorCode,
    FixpointDivergenceError,
    InternalError,
    ParseError,
    WhileAIError,
)
from whileai.interval import Interval, IntervalDomain


class TestAnalysisConfig:

    def test_defaults(self):
        config = AnalysisConfig()
        assert config.domain == "interval"
        assert config.delay == 0
        assert config.validate() == []

    @pytest.mark.parametrize("kwargs, code", [
        ({"lower_bound": 5, "upper_bound": 1}, ErrorCode.INVERTED_BOUNDS),
        ({"delay": -1}, ErrorCode.NEGATIVE_DELAY),
        ({"max_iterations": 0}, ErrorCode.BAD_ITERATION_CAP),
        ({"domain": "octagon"}, ErrorCode.UNKNOWN_DOMAIN),
    ])
    def test_invalid(self, kwargs, code):
        with pytest.raises(ConfigurationError) as exc_info:
            AnalysisConfig(**kwargs)
        assert exc_info.value.code is code

    def test_config_is_frozen(self):
        config = AnalysisConfig()
        with pytest.raises(AttributeError):
            config.delay = 3

    def test_make_interval_domain(self):
        domain = AnalysisConfig(lower_bound=-3, upper_bound=3).make_domain()
        assert isinstance(domain, IntervalDomain)
        assert domain.top() == Interval(-3, 3)

    def test_make_constant_domain(self):
        assert isinstance(AnalysisConfig(domain="constant").make_domain(), ConstantDomain)

    def test_bounds(self):
        bounds = AnalysisConfig(upper_bound=7).bounds()
        assert bounds.is_bounded
        assert str(bounds) == "[-inf, 7]"


class TestDomainRegistry:

    def test_builtin_tags(self):
        assert DEFAULT_REGISTRY.tags() == frozenset({"interval", "constant"})

    def test_register(self):
        registry = DomainRegistry()
        registry.register("wide", lambda config: IntervalDomain())
        config = AnalysisConfig()
        assert registry.has("wide")
        assert isinstance(registry.create("wide", config), IntervalDomain)
        assert config.validate(registry) == []

    def test_unknown(self):
        with pytest.raises(ConfigurationError) as exc_info:
            DomainRegistry().create("octagon", AnalysisConfig())
        assert exc_info.value.code is ErrorCode.UNKNOWN_DOMAIN


class TestErrors:

    def test_codes(self):
        assert ErrorCode.DIVISION_BY_ZERO.code == "WAI-3001"
        assert str(ErrorCode.SYNTAX) == "WAI-2001"

    def test_hierarchy(self):
        assert issubclass(ConfigurationError, WhileAIError)
        assert issubclass(ParseError, WhileAIError)
        assert issubclass(DivisionByZeroError, AnalysisArithmeticError)
        assert issubclass(FixpointDivergenceError, InternalError)

    def test_message_format(self):
        error = DivisionByZeroError("(x / 0)")
        assert str(error) == "[WAI-3001] division by the constant zero in '(x / 0)'"
        assert error.expression == "(x / 0)"

    def test_parse_error_location(self):
        error = ParseError("syntax error", 3, 7, "prog.while")
        assert str(error) == "prog.while:3:7: [WAI-2001] syntax error"
        assert str(ParseError("oops")) == "<input>: [WAI-2001] oops"
