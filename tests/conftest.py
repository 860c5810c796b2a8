# tests/conftest.py
"""Shared fixtures for the whileai test-suite."""

import pytest

from whileai.constant import ConstantDomain
from whileai.interpreter import AbstractInterpreter
from whileai.interval import IntervalBounds, IntervalDomain
from whileai.parser import parse_program, parse_state


@pytest.fixture
def interval_domain():
    return IntervalDomain()


@pytest.fixture
def clamped_domain():
    return IntervalDomain(IntervalBounds.of(-10, 10))


@pytest.fixture
def constant_domain():
    return ConstantDomain()


@pytest.fixture
def run():
    """Parse *source* and analyse it; returns the ``AnalysisResult``."""

    def _run(source, domain=None, delay=0, state=None, max_iterations=1000):
        interpreter = AbstractInterpreter(
            domain if domain is not None else IntervalDomain(),
            delay=delay,
            max_iterations=max_iterations,
        )
        bindings = parse_state(state) if state else None
        return interpreter.run(parse_program(source), interpreter.initial_state(bindings))

    return _run
