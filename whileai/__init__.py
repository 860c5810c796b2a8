"""whileai — Abstract interpreter for a small while language.

Computes, for every program point, a sound over-approximation of the
reachable states of a program over an abstract numeric domain.

Submodules
----------
integer
    ``ExtendedInteger``: saturating 64-bit integers with ±∞.
lattice, domain
    The lattice contract and the generic ``Domain`` evaluator.
interval, constant
    The interval domain (with an optional clamp window) and the
    constant-propagation domain.
state, invariant
    Abstract states and the per-program-point trace.
expression_tree
    Backward refinement of conditions through arithmetic.
interpreter
    ``AbstractInterpreter``: recursive denotation with a two-phase
    widening / narrowing fixpoint for loops.
ast, parser, program_points
    Syntax tree, Parsimonious grammar and program-point labels.
config, errors
    ``AnalysisConfig`` and the ``WhileAIError`` hierarchy.

Usage
-----
Command-line::

    python -m whileai analyze program.while --domain interval --delay 2

Programmatic::

    from whileai import AnalysisConfig, analyze, parse_program

    result = analyze(parse_program("x := 0; while x < 3 do x := x + 1 done"))
    print(result.state)          # x: [3, 3]
"""

from __future__ import annotations

__version__: str = "0.1.0"
__all__: list[str] = [
    "__version__",
    "AbstractInterpreter",
    "AnalysisConfig",
    "AnalysisResult",
    "Constant",
    "ConstantDomain",
    "ExtendedInteger",
    "Interval",
    "IntervalBounds",
    "IntervalDomain",
    "Invariant",
    "State",
    "WhileAIError",
    "analyze",
    "parse_program",
    "program_points",
]

from whileai.config import AnalysisConfig
from whileai.constant import Constant, ConstantDomain
from whileai.errors import WhileAIError
from whileai.integer import ExtendedInteger
from whileai.interpreter import AbstractInterpreter, AnalysisResult, analyze
from whileai.interval import Interval, IntervalBounds, IntervalDomain
from whileai.invariant import Invariant
from whileai.parser import parse_program
from whileai.program_points import program_points
from whileai.state import State
