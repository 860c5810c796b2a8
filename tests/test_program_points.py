# tests/test_program_points.py
"""Tests for program-point enumeration and labelling."""

import pytest

from whileai.interpreter import AbstractInterpreter
from whileai.interval import IntervalDomain
from whileai.invariant import Invariant
from whileai.parser import parse_program
from whileai.program_points import PointKind, annotate, program_points


def labels(source, default_delay=0):
    return [p.label for p in program_points(parse_program(source), default_delay)]


class TestProgramPoints:

    def test_straight_line(self):
        assert labels("x := 5; skip") == ["x := 5", "skip"]

    def test_if(self):
        assert labels("if x < 5 then y := 1 else y := 0 end") == [
            "[if-guard] (x < 5)",
            "y := 1",
            "[else-guard] (x >= 5)",
            "y := 0",
            "[end-if]",
        ]

    def test_while(self):
        assert labels("while x < 3 do x := x + 1 done", default_delay=2) == [
            "[while-inv] @delay:2",
            "[while-guard] (x < 3)",
            "x := (x + 1)",
            "[end-while] (x >= 3)",
        ]

    def test_loop_delay_does_not_leak_into_nested_loops(self):
        points = labels("while[4] x < 3 do while y < 1 do skip done done", default_delay=1)
        assert points[0] == "[while-inv] @delay:4"
        assert points[2] == "[while-inv] @delay:1"

    def test_repeat(self):
        points = program_points(parse_program("repeat x := x + 1 until x >= 3"))
        assert [p.kind for p in points] == [
            PointKind.ASSIGNMENT,
            PointKind.WHILE_INV,
            PointKind.WHILE_GUARD,
            PointKind.ASSIGNMENT,
            PointKind.END_WHILE,
        ]
        assert points[2].label == "[while-guard] (x < 3)"
        assert points[4].label == "[end-while] (x >= 3)"

    @pytest.mark.parametrize("source", [
        "skip",
        "x := 0; if x < 1 then skip end; y := 2",
        "i := 0; while i < 3 do if i == 1 then j := 1 end; i := i + 1 done",
        "x := 0; repeat while x < 2 do x := x + 1 done until x > 5",
    ])
    def test_invariant_has_one_state_per_point(self, source):
        stmt = parse_program(source)
        interpreter = AbstractInterpreter(IntervalDomain())
        result = interpreter.run(stmt)
        pairs = annotate(program_points(stmt), result.invariant)
        assert len(pairs) == len(result.invariant)

    def test_annotate_length_mismatch(self):
        points = program_points(parse_program("skip; skip"))
        with pytest.raises(ValueError):
            annotate(points, Invariant())
